from contextlib import asynccontextmanager
from typing import Optional
import logging
import sys

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import uvicorn

from shortlinks.core.config import settings
from shortlinks.core.errors import StoreSetupError
from shortlinks.core.logging_config import configure_logging
from shortlinks.db.Connection import database
from shortlinks.db.repository import LinkStore
from shortlinks.api import shortener, admin
from shortlinks.routers import health

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    owns_store = getattr(app.state, "link_store", None) is None
    if owns_store:
        configure_logging(settings.LOG_LEVEL)
        # StoreSetupError propagates and aborts startup
        app.state.link_store = database.open_link_store(settings)
        database.verify_database_connection(app.state.link_store)
    logger.info(f"Application '{settings.PROJECT_NAME}' starting up.")
    try:
        yield
    finally:
        logger.info("Shutting down gracefully...")
        if owns_store:
            app.state.link_store.dispose()
            app.state.link_store = None


def create_app(link_store: Optional[LinkStore] = None) -> FastAPI:
    """Build the application.

    Pass link_store to use an already opened store; otherwise one is opened
    from settings when the application starts.
    """
    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Short links with click tracking",
        lifespan=lifespan,
    )
    app.state.link_store = link_store

    # health first so /health and /ready are not taken as link ids
    app.include_router(health.router)
    app.include_router(admin.router, prefix="/api/v1")
    app.include_router(shortener.router, prefix="")

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    return app


# for `uvicorn shortlinks.main:app`; the store is opened on startup
app = create_app()


def run():
    configure_logging(settings.LOG_LEVEL)
    try:
        store = database.open_link_store(settings)
    except StoreSetupError as e:
        logger.error(f"Cannot start {settings.PROJECT_NAME}: {e}")
        sys.exit(1)

    app = create_app(store)
    try:
        uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)
    finally:
        store.dispose()


if __name__ == "__main__":
    run()
