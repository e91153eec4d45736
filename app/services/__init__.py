from app.services.accounts import register_user, request_password_reset, verify_credentials
from app.services.sessions import Authenticated, Guest, SessionStore

__all__ = [
    "Authenticated",
    "Guest",
    "SessionStore",
    "register_user",
    "request_password_reset",
    "verify_credentials",
]
