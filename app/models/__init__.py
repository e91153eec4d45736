from app.models.user import User
from app.models.web_session import WebSession

__all__ = ["User", "WebSession"]
