"""FastAPI application setup."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from ..app import Application
from .routes import observations, searches, telegram


# Global application instance
_app: Application | None = None


def get_app() -> Application:
    """Get the global application instance."""
    global _app
    if not _app:
        _app = Application()
    return _app


def set_app(application: Application | None) -> None:
    """Replace the global application instance (used by tests)."""
    global _app
    _app = application


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan."""
    # Startup
    application = get_app()
    await application.start()
    yield
    # Shutdown
    await application.stop()


def create_fastapi_app(application: Application | None = None) -> FastAPI:
    """Create and configure FastAPI application."""
    if application is not None:
        set_app(application)
    application = get_app()

    fastapi_app = FastAPI(
        title="Bird Sighting Bot API",
        description="Telegram webhook and eBird lookups for the bird sighting bot",
        version="0.1.0",
        lifespan=lifespan,
    )

    @fastapi_app.get("/")
    async def health() -> dict:
        """Health check."""
        return {
            "status": "ok",
            "service": "bird-sighting-bot",
            "messaging": application.orchestrator is not None,
        }

    # Include routers
    fastapi_app.include_router(telegram.create_telegram_router(application))
    fastapi_app.include_router(observations.create_observations_router(application))
    fastapi_app.include_router(searches.create_searches_router(application))

    return fastapi_app
