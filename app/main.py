from __future__ import annotations

import logging

from fastapi import FastAPI

from app.config import load_env_files
from app.logging_utils import configure_logging


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    load_env_files()
    configure_logging()

    application = FastAPI(
        title="Sales Insight API",
        version="1.0.0",
    )

    from app.api.routers import analysis_router

    application.include_router(analysis_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    logging.getLogger(__name__).info("Sales Insight API initialised")
    return application


app = create_app()
