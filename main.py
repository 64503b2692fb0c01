"""FastAPI application entrypoint."""

import logging

from fastapi import FastAPI

from microservices_common.core.config import settings
from microservices_common.core.handlers import register_exception_handlers
from microservices_common.core.logging import configure_logging


def create_app() -> FastAPI:
    configure_logging(settings.log_level)
    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        version="0.1.0",
    )
    register_exception_handlers(app, logger=logging.getLogger("microservices_common"))

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
