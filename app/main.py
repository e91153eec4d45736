"""Auth Starter Kit - FastAPI app entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import BASE_DIR, get_settings
from app.core.errors import GuardRedirect
from app.db.base import Base
from app.db.session import engine
from app.routers import auth, web
from app.routers.deps import templates

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    logger.info(f"{settings.app_name} started")
    yield


app = FastAPI(
    title=settings.app_name,
    description="Email/password accounts with server-side sessions",
    debug=settings.debug,
    lifespan=lifespan,
)

app.mount("/static", StaticFiles(directory=str(BASE_DIR / "app" / "static")), name="static")

app.include_router(web.router)
app.include_router(auth.router)


@app.exception_handler(GuardRedirect)
async def guard_redirect_handler(request: Request, exc: GuardRedirect):
    return RedirectResponse(str(exc.location), status_code=302)


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Storage error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return templates.TemplateResponse(
        request,
        "error.html",
        {"current_user": None, "is_guest": True, "flashes": [], "message": "Something went wrong. Please try again."},
        status_code=500,
    )


@app.get("/health")
async def health():
    return {"status": "ok"}
