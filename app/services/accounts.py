"""Accounts: registration, credential verification, password-reset requests."""
import logging
import re

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.errors import DuplicateEmail, InvalidCredentials, NotFound, ValidationError
from app.core.security import BCRYPT_MAX_BYTES, hash_password, verify_password
from app.models.user import User

logger = logging.getLogger(__name__)
settings = get_settings()

# Simple, practical email check
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def find_user_by_email(db: Session, email: str | None) -> User | None:
    email_norm = normalize_email(email)
    if not email_norm:
        return None
    return db.query(User).filter(User.email == email_norm).first()


def validate_password(password: str, password_confirmation: str) -> None:
    if password != password_confirmation:
        raise ValidationError("Passwords do not match.")
    if len(password) < settings.password_min_length:
        raise ValidationError(
            f"Password must be at least {settings.password_min_length} characters long."
        )
    if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise ValidationError("Password is too long.")


def register_user(
    db: Session,
    full_name: str | None,
    email: str | None,
    password: str | None,
    password_confirmation: str | None,
) -> User:
    """Validate a registration form and persist the new user.

    Raises ``ValidationError`` for missing/malformed fields and
    ``DuplicateEmail`` when the email is taken, whether the pre-check or the
    unique index catches it.
    """
    full_name = (full_name or "").strip()
    email_norm = normalize_email(email)
    password = password or ""
    password_confirmation = password_confirmation or ""

    if not full_name or not email_norm or not password or not password_confirmation:
        raise ValidationError("Please fill in all required fields.")
    if not EMAIL_RE.match(email_norm):
        raise ValidationError("Please enter a valid email address.")
    validate_password(password, password_confirmation)

    if find_user_by_email(db, email_norm) is not None:
        raise DuplicateEmail()

    user = User(full_name=full_name, email=email_norm, hashed_password=hash_password(password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # another request inserted the same email between check and insert
        db.rollback()
        raise DuplicateEmail()
    db.refresh(user)

    logger.info(f"New user registered: id={user.id}")
    return user


def verify_credentials(db: Session, email: str | None, password: str | None) -> User:
    """Return the user for a matching email/password pair.

    Unknown email and wrong password raise the same ``InvalidCredentials``.
    """
    user = find_user_by_email(db, email)
    if user is None or not password or not verify_password(password, user.hashed_password):
        raise InvalidCredentials()
    return user


def request_password_reset(db: Session, email: str | None) -> User:
    """Look up the account a reset was requested for.

    Delivery is not implemented: no token is issued and no email is sent.
    """
    email_norm = normalize_email(email)
    if not email_norm or not EMAIL_RE.match(email_norm):
        raise ValidationError("Please enter a valid email address.")

    user = find_user_by_email(db, email_norm)
    if user is None:
        raise NotFound()

    logger.info(f"Password reset requested for user id={user.id} (delivery not configured)")
    return user
