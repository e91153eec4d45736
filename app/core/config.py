"""Application configuration from environment."""
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from env / .env."""

    app_name: str = "Auth Starter Kit"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite:///./auth_starter.db"

    # Used to sign the session cookie
    secret_key: str = "change-me-in-production-use-env"

    # Session cookie (holds the signed server-side session token)
    session_cookie_name: str = "starter_session"
    session_cookie_max_age: int = 60 * 60 * 24 * 14  # 14 days
    session_cookie_secure: bool = False

    # Registration policy
    password_min_length: int = 8

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def get_settings() -> Settings:
    return Settings()


# Base path for templates/static (parent of app/)
BASE_DIR = Path(__file__).resolve().parent.parent.parent
