"""Pydantic schemas for the outward view of a user. No password field, ever."""
from datetime import datetime

from pydantic import BaseModel

DASHBOARD_DATE_FORMAT = "%B %d, %Y"  # e.g. "October 05, 2026"


class UserOutSchema(BaseModel):
    id: int
    full_name: str | None = None
    email: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class DashboardUserSchema(BaseModel):
    id: int
    full_name: str | None = None
    email: str
    created_at: str

    @classmethod
    def from_user(cls, user) -> "DashboardUserSchema":
        public = UserOutSchema.model_validate(user)
        return cls(
            id=public.id,
            full_name=public.full_name,
            email=public.email,
            created_at=public.created_at.strftime(DASHBOARD_DATE_FORMAT),
        )
