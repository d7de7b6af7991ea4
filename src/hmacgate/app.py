"""FastAPI application factory."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from hmacgate import __version__
from hmacgate.api.results import create_results_queue
from hmacgate.api.routes import webhooks
from hmacgate.core.config import Settings, configure_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager.

    - Startup: Load settings, configure logging, create the results queue
    - Shutdown: Report results left unconsumed
    """
    settings = Settings()  # type: ignore[call-arg]

    configure_logging(settings)

    app.state.results = create_results_queue(settings.results_queue_size)

    # Never log the secret itself
    logger.info(
        "application.startup",
        header=settings.signature_header,
        algorithm=settings.hmac_algorithm.value,
        secret_configured=bool(settings.webhook_secret),
    )

    yield

    logger.info("application.shutdown", pending_results=app.state.results.qsize())


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="hmacgate",
        description="Webhook HMAC signature verification",
        version=__version__,
        lifespan=lifespan,
    )

    app.include_router(webhooks.router, prefix="/webhooks", tags=["webhooks"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        logger.debug("health_check.success")
        return {"status": "healthy"}

    return app


# Create app instance for uvicorn
app = create_app()
