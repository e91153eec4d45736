"""Shared route helpers: session cookie, auth state, route guards, rendering."""
from typing import Annotated
from urllib.parse import urlsplit

from fastapi import Depends, Request
from fastapi.responses import RedirectResponse, Response
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from app.core.config import BASE_DIR, get_settings
from app.core.errors import GuardRedirect
from app.core.security import sign_session_token, unsign_session_token
from app.db.session import get_db
from app.models.user import User
from app.models.web_session import WebSession
from app.services.sessions import AuthState, Authenticated, Guest, SessionStore

settings = get_settings()
templates = Jinja2Templates(directory=str(BASE_DIR / "app" / "templates"))


# ---------- session ----------

def get_current_session(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> WebSession | None:
    """Session row referenced by the cookie, if the cookie is valid and the row exists."""
    token = unsign_session_token(request.cookies.get(settings.session_cookie_name))
    return SessionStore(db).load(token)


def get_auth_state(
    db: Annotated[Session, Depends(get_db)],
    web_session: Annotated[WebSession | None, Depends(get_current_session)],
) -> AuthState:
    return SessionStore(db).resolve(web_session)


def get_current_user_optional(
    state: Annotated[AuthState, Depends(get_auth_state)],
) -> User | None:
    if isinstance(state, Authenticated):
        return state.user
    return None


# ---------- guards ----------

def guest_only(
    request: Request,
    state: Annotated[AuthState, Depends(get_auth_state)],
) -> Guest:
    """Authenticated visitors are sent to the dashboard."""
    if isinstance(state, Authenticated):
        raise GuardRedirect(request.app.url_path_for("dashboard"))
    return state


def auth_required(
    request: Request,
    state: Annotated[AuthState, Depends(get_auth_state)],
) -> User:
    """Guests are sent to the login page; otherwise hand the user to the handler."""
    if isinstance(state, Guest):
        raise GuardRedirect(request.app.url_path_for("login_get"))
    return state.user


# ---------- responses ----------

def redirect_to(request: Request, route_name: str) -> RedirectResponse:
    """302 redirect to a named route (path only)."""
    return RedirectResponse(str(request.app.url_path_for(route_name)), status_code=302)


def redirect_back(request: Request, fallback_route: str) -> RedirectResponse:
    """302 to the same-origin Referer, or to ``fallback_route`` when there is none."""
    referer = request.headers.get("referer")
    if referer:
        parts = urlsplit(referer)
        if parts.netloc == request.url.netloc and parts.path.startswith("/"):
            location = parts.path + (f"?{parts.query}" if parts.query else "")
            return RedirectResponse(location, status_code=302)
    return redirect_to(request, fallback_route)


def ensure_session_cookie(request: Request, response: Response, web_session: WebSession) -> None:
    """Point the browser at ``web_session`` unless its cookie already does."""
    current = unsign_session_token(request.cookies.get(settings.session_cookie_name))
    if current == web_session.token:
        return
    response.set_cookie(
        key=settings.session_cookie_name,
        value=sign_session_token(web_session.token),
        max_age=settings.session_cookie_max_age,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        path="/",
    )


def render(
    request: Request,
    db: Session,
    web_session: WebSession | None,
    template: str,
    context: dict | None = None,
    current_user: User | None = None,
    status_code: int = 200,
) -> Response:
    """Render a page, draining any pending flash messages into it."""
    flashes = SessionStore(db).consume_flashes(web_session)
    page_context = {
        "current_user": current_user,
        "is_guest": current_user is None,
        "flashes": flashes,
    }
    page_context.update(context or {})
    return templates.TemplateResponse(request, template, page_context, status_code=status_code)
