"""Auth routes: login, register, forget-password, logout. Server-side session auth."""
from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Form
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from app.core.errors import AuthError, InvalidCredentials, NotFound
from app.db.session import get_db
from app.models.web_session import WebSession
from app.routers.deps import (
    ensure_session_cookie,
    get_current_session,
    guest_only,
    redirect_back,
    redirect_to,
    render,
)
from app.services.accounts import register_user, request_password_reset, verify_credentials
from app.services.sessions import Guest, SessionStore

logger = logging.getLogger(__name__)
router = APIRouter()

RESET_SENT_MESSAGE = "If an account exists for this email, password reset instructions have been sent."


@router.get("/login", response_class=HTMLResponse)
def login_get(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    web_session: Annotated[WebSession | None, Depends(get_current_session)],
    _guest: Annotated[Guest, Depends(guest_only)],
):
    """Show login form."""
    return render(request, db, web_session, "login.html")


@router.post("/login", response_class=RedirectResponse)
def login_post(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    web_session: Annotated[WebSession | None, Depends(get_current_session)],
    email: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
):
    """Verify credentials, bind the session to the user, go to the dashboard."""
    store = SessionStore(db)
    web_session = store.ensure(web_session)

    try:
        user = verify_credentials(db, email, password)
    except InvalidCredentials as exc:
        logger.info("Failed login attempt")
        store.flash(web_session, "error", exc.message)
        response = redirect_back(request, "login_get")
    else:
        web_session = store.login(web_session, user)
        store.flash(web_session, "success", "Welcome back!")
        response = redirect_to(request, "dashboard")

    ensure_session_cookie(request, response, web_session)
    return response


@router.get("/register", response_class=HTMLResponse)
def register_get(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    web_session: Annotated[WebSession | None, Depends(get_current_session)],
    _guest: Annotated[Guest, Depends(guest_only)],
):
    """Show register form."""
    return render(request, db, web_session, "register.html")


@router.post("/register", response_class=RedirectResponse)
def register_post(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    web_session: Annotated[WebSession | None, Depends(get_current_session)],
    full_name: Annotated[str, Form(alias="fullName")] = "",
    email: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
    password_confirmation: Annotated[str, Form(alias="passwordConfirmation")] = "",
):
    """Create the user and log them straight in."""
    store = SessionStore(db)
    web_session = store.ensure(web_session)

    try:
        user = register_user(db, full_name, email, password, password_confirmation)
    except AuthError as exc:
        store.flash(web_session, "error", exc.message)
        response = redirect_to(request, "register_get")
    else:
        web_session = store.login(web_session, user)
        store.flash(web_session, "success", "Account created successfully!")
        response = redirect_to(request, "dashboard")

    ensure_session_cookie(request, response, web_session)
    return response


@router.get("/forget-password", response_class=HTMLResponse)
def forget_password_get(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    web_session: Annotated[WebSession | None, Depends(get_current_session)],
    _guest: Annotated[Guest, Depends(guest_only)],
):
    """Show password reset request form."""
    return render(request, db, web_session, "forget_password.html")


@router.post("/forget-password", response_class=RedirectResponse)
def forget_password_post(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    web_session: Annotated[WebSession | None, Depends(get_current_session)],
    email: Annotated[str, Form()] = "",
):
    """Accept a reset request. Known and unknown emails get the same answer."""
    store = SessionStore(db)
    web_session = store.ensure(web_session)

    try:
        request_password_reset(db, email)
    except NotFound:
        logger.info("Password reset requested for unknown email")
        store.flash(web_session, "success", RESET_SENT_MESSAGE)
    except AuthError as exc:
        store.flash(web_session, "error", exc.message)
    else:
        store.flash(web_session, "success", RESET_SENT_MESSAGE)

    response = redirect_to(request, "forget_password_get")
    ensure_session_cookie(request, response, web_session)
    return response


@router.post("/logout", response_class=RedirectResponse)
def logout_post(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    web_session: Annotated[WebSession | None, Depends(get_current_session)],
):
    """Clear the session's user binding and redirect to login."""
    store = SessionStore(db)
    web_session = store.ensure(web_session)
    store.logout(web_session)
    store.flash(web_session, "success", "Logged out successfully")

    response = redirect_to(request, "login_get")
    ensure_session_cookie(request, response, web_session)
    return response
