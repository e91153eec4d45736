"""Web routes: landing page and the authenticated dashboard. Jinja2 templates."""
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.models.user import User
from app.models.web_session import WebSession
from app.routers.deps import auth_required, get_current_session, get_current_user_optional, render
from app.schemas.user import DashboardUserSchema

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
def home(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    web_session: Annotated[WebSession | None, Depends(get_current_session)],
    current_user: Annotated[User | None, Depends(get_current_user_optional)],
):
    return render(request, db, web_session, "home.html", current_user=current_user)


@router.get("/dashboard", response_class=HTMLResponse)
def dashboard(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    web_session: Annotated[WebSession | None, Depends(get_current_session)],
    current_user: Annotated[User, Depends(auth_required)],
):
    return render(
        request,
        db,
        web_session,
        "dashboard.html",
        {"user": DashboardUserSchema.from_user(current_user)},
        current_user=current_user,
    )
