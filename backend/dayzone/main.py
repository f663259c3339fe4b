"""FastAPI application entry point."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

from fastapi import APIRouter, FastAPI, Request
from fastapi.staticfiles import StaticFiles

from .auth import router as auth_router
from .bootstrap import initialize_database
from .config import Settings, get_settings
from .database import Database
from .errors import register_exception_handlers
from .routers.finances import router as finances_router
from .routers.operatives import router as operatives_router
from .routers.users import router as users_router
from .routers.wanted import router as wanted_router
from .security import TokenService
from .storage import LocalPhotoStore

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once; later calls only adjust the level."""

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT)
    root.setLevel(level.upper())


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application and the collaborators it owns."""

    settings = settings or get_settings()
    configure_logging(settings.log_level)

    database = Database(settings.database_url)
    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await initialize_database(database, settings)
        yield
        await database.dispose()

    app = FastAPI(title="DayZone Registry Backend", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database
    app.state.token_service = TokenService(
        settings.secret_key, settings.access_token_expires_minutes
    )
    app.state.photo_store = LocalPhotoStore(upload_dir)

    register_exception_handlers(app)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log incoming requests and their outcomes."""
        logger.info("request %s %s", request.method, request.url.path)
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("error handling %s %s", request.method, request.url.path)
            raise
        logger.info(
            "response %s %s status %s",
            request.method,
            request.url.path,
            response.status_code,
        )
        return response

    api = APIRouter(prefix="/api")
    api.include_router(auth_router)
    api.include_router(users_router)
    api.include_router(operatives_router)
    api.include_router(wanted_router)
    api.include_router(finances_router)

    @api.get("/health", tags=["system"])
    async def healthcheck() -> dict[str, str]:
        """Readiness check for uptime monitors."""

        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    app.include_router(api)
    app.mount("/uploads", StaticFiles(directory=upload_dir), name="uploads")
    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("dayzone.main:create_app", factory=True, host="0.0.0.0", port=8000)
