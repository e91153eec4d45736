from app.schemas.session import FlashSchema
from app.schemas.user import DashboardUserSchema, UserOutSchema

__all__ = [
    "DashboardUserSchema",
    "FlashSchema",
    "UserOutSchema",
]
