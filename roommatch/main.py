# main.py
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv

# Ensure repo-root .env is loaded for the running server process.
load_dotenv(dotenv_path=Path(__file__).resolve().parents[1] / ".env", override=False)

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from roommatch.config import settings
from roommatch.config import build_sqlalchemy_db_url
from roommatch.database import Base, engine
from roommatch.errors import RoommatchError, UnauthorizedError
from roommatch.models import Conversation, Message, PropertyListing, User, UserProfileModel  # noqa: F401  (register tables)
from roommatch.api.routes.health import router as health_router
from roommatch.routers import auth, conversations, matches, profiles, properties, users
from roommatch.storage import Storage, build_storage


logger = logging.getLogger(__name__)


async def _handle_roommatch_error(request: Request, exc: RoommatchError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None
    logger.info("request.rejected path=%s status=%s detail=%s", request.url.path, exc.status_code, exc.detail)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload(), headers=headers)


def create_app(storage: Storage | None = None) -> FastAPI:
    logging.getLogger("roommatch").setLevel(settings.log_level.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("app.startup storage_backend=%s", type(app.state.storage).__name__)
        yield

    application = FastAPI(
        title=settings.app_name,
        version=settings.version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_exception_handler(RoommatchError, _handle_roommatch_error)

    # One storage instance for the whole process; handlers reach it through get_storage.
    application.state.storage = storage or build_storage(settings.storage_backend)

    # Health endpoints (do not depend on API_PREFIX)
    application.include_router(health_router)

    application.include_router(auth.router, prefix=f"{settings.api_prefix}/auth", tags=["auth"])
    application.include_router(users.router, prefix=f"{settings.api_prefix}/users", tags=["users"])
    application.include_router(profiles.router, prefix=settings.api_prefix)
    application.include_router(matches.router, prefix=settings.api_prefix)
    application.include_router(conversations.router, prefix=settings.api_prefix)
    application.include_router(properties.router, prefix=settings.api_prefix)

    # Avoid accidental schema changes in shared MySQL databases.
    # For local/test sqlite usage, auto-create ORM tables is still convenient.
    db_url = build_sqlalchemy_db_url(settings)
    if db_url.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)
    return application


app = create_app()
