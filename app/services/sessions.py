"""Server-side sessions: user binding, flash messages and per-request auth state."""
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.security import new_session_token
from app.models.user import User
from app.models.web_session import WebSession
from app.schemas.session import FlashKind, FlashSchema

logger = logging.getLogger(__name__)
settings = get_settings()


@dataclass(frozen=True)
class Guest:
    pass


@dataclass(frozen=True)
class Authenticated:
    user: User


AuthState = Guest | Authenticated


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; they are stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _expiry_cutoff() -> datetime:
    return datetime.now(timezone.utc) - timedelta(seconds=settings.session_cookie_max_age)


class SessionStore:
    """Reads and writes ``WebSession`` rows. Every mutation commits.

    A session untouched for longer than ``session_cookie_max_age`` is expired:
    ``load`` deletes it and reports it missing, ``create`` prunes all of them.
    """

    def __init__(self, db: Session):
        self.db = db

    def load(self, token: str | None) -> WebSession | None:
        if not token:
            return None
        web_session = self.db.get(WebSession, token)
        if web_session is None:
            return None
        if _as_utc(web_session.updated_at) < _expiry_cutoff():
            self.db.delete(web_session)
            self.db.commit()
            return None
        return web_session

    def prune_expired(self) -> int:
        removed = (
            self.db.query(WebSession)
            .filter(WebSession.updated_at < _expiry_cutoff())
            .delete(synchronize_session=False)
        )
        if removed:
            logger.info(f"Pruned {removed} expired sessions")
        return removed

    def create(self, user_id: int | None = None, flash_json: str = "[]") -> WebSession:
        self.prune_expired()
        web_session = WebSession(token=new_session_token(), user_id=user_id, flash_json=flash_json)
        self.db.add(web_session)
        self.db.commit()
        return web_session

    def ensure(self, web_session: WebSession | None) -> WebSession:
        """Return the given session, or start a new one for a browser without one."""
        if web_session is not None:
            return web_session
        return self.create()

    def login(self, web_session: WebSession, user: User) -> WebSession:
        """Bind ``user`` under a fresh token; the pre-login token stops working.

        Pending flashes move to the new session. Callers must send the
        returned session's token back to the browser.
        """
        pending = web_session.flash_json or "[]"
        self.db.delete(web_session)
        fresh = self.create(user_id=user.id, flash_json=pending)
        logger.info(f"Session bound to user id={user.id}")
        return fresh

    def logout(self, web_session: WebSession | None) -> None:
        if web_session is None or web_session.user_id is None:
            return
        logger.info(f"Session unbound from user id={web_session.user_id}")
        web_session.user_id = None
        self.db.commit()

    def flash(self, web_session: WebSession, kind: FlashKind, message: str) -> None:
        pending = json.loads(web_session.flash_json or "[]")
        pending.append(FlashSchema(kind=kind, message=message).model_dump())
        web_session.flash_json = json.dumps(pending)
        self.db.commit()

    def consume_flashes(self, web_session: WebSession | None) -> list[FlashSchema]:
        """Drain the flash queue: each message is returned exactly once."""
        if web_session is None:
            return []
        pending = json.loads(web_session.flash_json or "[]")
        if not pending:
            return []
        web_session.flash_json = "[]"
        self.db.commit()
        return [FlashSchema(**f) for f in pending]

    def resolve(self, web_session: WebSession | None) -> AuthState:
        """Authenticated only if the bound user still exists."""
        if web_session is None or web_session.user_id is None:
            return Guest()
        user = self.db.get(User, web_session.user_id)
        if user is None:
            return Guest()
        return Authenticated(user)
