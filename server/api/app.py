"""FastAPI application setup."""
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from api.routes import auth, conversations, messages, webhook, ai
from api.routes.health import router as health_router
from config.logging_config import setup_logging
from config.settings import settings
from core.dashboard import DashboardService
from core.dependencies import build_dashboard, shutdown_dashboard
from core.errors import DashboardError

logger = logging.getLogger(__name__)


def create_app(dashboard: Optional[DashboardService] = None) -> FastAPI:
    """Create and configure FastAPI application.

    ``dashboard`` injects a ready-made service (tests); by default one is
    built from settings when the app starts and closed when it stops.
    """

    # Setup logging
    setup_logging(settings.LOG_LEVEL)

    # -----------------------------------------------------------------------
    # Lifespan
    # -----------------------------------------------------------------------

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup / shutdown lifecycle."""
        owned = dashboard is None
        app.state.dashboard = build_dashboard() if owned else dashboard
        logger.info("Application started")
        yield
        if owned:
            await shutdown_dashboard(app.state.dashboard)
        logger.info("Application shut down")

    app = FastAPI(
        title="Social AI Dashboard API",
        description="Review, draft and send Instagram DM replies",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -----------------------------------------------------------------------
    # Errors: every failure is rendered as {"error": "..."}
    # -----------------------------------------------------------------------

    @app.exception_handler(DashboardError)
    async def dashboard_error_handler(request: Request, exc: DashboardError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = first.get("msg", "Invalid request")
        return JSONResponse(
            status_code=400,
            content={"error": f"{location}: {message}" if location else message},
        )

    # Include routers
    app.include_router(health_router, tags=["Health"])
    app.include_router(webhook.router, tags=["Webhook"])
    app.include_router(auth.router, tags=["Authentication"])
    app.include_router(messages.router, prefix="/messages", tags=["Inbox"])
    app.include_router(conversations.router, prefix="/conversations", tags=["Conversations"])
    app.include_router(ai.router, tags=["AI"])

    logger.info("FastAPI application created")
    return app
