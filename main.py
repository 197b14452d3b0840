import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from activity_sink.application.service import build_service
from activity_sink.config import Settings, get_settings
from activity_sink.interfaces.api.routes import register_routes
from activity_sink.logging_config import setup_logging

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create the service application; events are consumed during its lifespan."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Start the listener on startup and release its resources on shutdown."""

        resolved = settings or get_settings()
        setup_logging(resolved.log_level)
        service = build_service(resolved)
        app.state.service = service
        service.start()
        logger.info("Activity sink started")
        yield
        logger.info("Shutting down activity sink")
        service.stop()

    app = FastAPI(title="Activity Sink", lifespan=lifespan)
    register_routes(app)
    return app


app = create_app()
