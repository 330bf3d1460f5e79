"""FastAPI application entrypoint for IskolarLink trackers."""

import logging

from fastapi import FastAPI

from . import __version__
from .api.v1.router import api_router
from .core.config import get_settings
from .core.database import Base, engine

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Instantiate and configure the FastAPI application."""
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(title="IskolarLink Tracker API", version=__version__)
    app.include_router(api_router, prefix=settings.api_prefix)

    @app.on_event("startup")
    def create_tables() -> None:
        Base.metadata.create_all(bind=engine)
        logger.info("tracker tables ready")

    return app


app = create_app()
