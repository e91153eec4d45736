"""WebSession model: server-side session state keyed by the browser's cookie token."""
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.sql import func

from app.db.session import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WebSession(Base):
    __tablename__ = "sessions"

    token = Column(String(64), primary_key=True)
    # null while the browser is a guest
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    # JSON array of {kind, message}; drained on the next render
    flash_json = Column(Text, nullable=False, default="[]")
    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
        server_default=func.now(),
        nullable=False,
    )
