"""Error taxonomy for the auth flow.

Every ``AuthError`` carries a message that is safe to show to the user;
route handlers catch them and flash ``exc.message`` before redirecting.
"""


class AuthError(Exception):
    """Base class for expected, user-facing auth failures."""

    default_message = "Something went wrong. Please try again."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AuthError):
    """Missing or malformed form fields."""

    default_message = "Please fill in all required fields."


class InvalidCredentials(AuthError):
    """Login failure. Never says whether the email or the password was wrong."""

    default_message = "Invalid credentials"


class DuplicateEmail(AuthError):
    default_message = "An account with this email already exists."


class NotFound(AuthError):
    default_message = "No account found with this email address"


class GuardRedirect(Exception):
    """Raised by route guards to short-circuit a request with a redirect."""

    def __init__(self, location: str):
        self.location = location
        super().__init__(location)
