"""
FastAPI application factory.

``create_app`` wires logging, middleware, error handlers and routers;
``run`` serves the module-level ``app`` with uvicorn.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from billdesk import __version__
from billdesk.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from billdesk.api.middleware.error_handler import setup_exception_handlers
from billdesk.api.routes import health_router, orders_router, root_router, sessions_router
from billdesk.config import Settings, configure_logging, get_logger, get_settings

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # sessions live in memory; nothing to open or flush
    settings = get_settings()
    logger.info(
        "application_starting",
        host=settings.api.host,
        port=settings.api.port,
        backend=settings.backend.base_url,
    )
    yield
    logger.info("application_stopped")


def _install_middleware(app: FastAPI, settings: Settings) -> None:
    # Starlette runs the last-added middleware outermost
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(LoggingMiddleware)
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the billing API."""
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Billdesk API",
        description="Invoice line-item pricing, validation and order workflow",
        version=__version__,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )

    _install_middleware(app, settings)
    setup_exception_handlers(app)

    for router in (root_router, health_router, sessions_router, orders_router):
        app.include_router(router)

    return app


app = create_app()


def run() -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "billdesk.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )


if __name__ == "__main__":
    run()
