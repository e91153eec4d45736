"""Password hashing and session cookie signing."""
import base64
import hashlib
import hmac
import secrets

from passlib.context import CryptContext

from app.core.config import get_settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# bcrypt ignores everything past 72 bytes
BCRYPT_MAX_BYTES = 72


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def new_session_token() -> str:
    """Random opaque identifier for a server-side session row."""
    return secrets.token_urlsafe(32)


def _signature(payload: bytes) -> str:
    settings = get_settings()
    return hmac.new(settings.secret_key.encode("utf-8"), payload, hashlib.sha256).hexdigest()


# Cookie value: base64(token).hmac
def sign_session_token(token: str) -> str:
    """Sign a session token for storage in the browser cookie."""
    payload = token.encode("utf-8")
    return base64.urlsafe_b64encode(payload).decode("ascii").rstrip("=") + "." + _signature(payload)


def unsign_session_token(value: str | None) -> str | None:
    """Verify a signed cookie value and return the session token; None if tampered or malformed."""
    if not value or "." not in value:
        return None
    try:
        encoded, sig = value.rsplit(".", 1)
        pad = 4 - len(encoded) % 4
        if pad != 4:
            encoded += "=" * pad
        payload = base64.urlsafe_b64decode(encoded)
        if not hmac.compare_digest(_signature(payload).encode("ascii"), sig.encode("utf-8")):
            return None
        return payload.decode("utf-8")
    except (ValueError, UnicodeDecodeError):
        return None
