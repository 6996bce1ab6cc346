"""
Construction and lookup of the shared DashboardService.

The service (stores, HTTP clients, session) is built once at startup, hung on
``app.state`` and handed to routes through the ``get_dashboard`` dependency.
Tests build their own service with mocked collaborators and pass it to
``create_app`` instead.
"""
import logging

from fastapi import Request

from config.settings import settings
from core.dashboard import DashboardService
from core.identity import IdentityResolver
from core.self_filter import SelfMessageFilter
from database.session_store import SessionStore
from integrations.llm.client import LLMClient
from integrations.unipile.client import UnipileClient
from services.draft_service import DraftGenerator
from services.session_state import SessionState

logger = logging.getLogger(__name__)


def build_dashboard() -> DashboardService:
    """Create the service from settings and restore any saved session."""
    logger.info("Initializing shared dependencies...")

    session = SessionState(SessionStore(settings.SESSION_FILE))
    if not session.restore():
        logger.info("No saved session, Instagram not connected")

    dashboard = DashboardService(
        gateway=UnipileClient(),
        drafts=DraftGenerator(LLMClient()),
        session=session,
        identity_resolver=IdentityResolver(settings.PLACEHOLDER_NAME_PATTERN),
        self_filter=SelfMessageFilter(settings.BOT_DISPLAY_NAME, settings.BOT_PROVIDER_ID),
        dedup_window_seconds=settings.DEDUP_WINDOW_SECONDS,
    )
    logger.info(f"Dependencies initialized, gateway {settings.UNIPILE_DSN}")
    return dashboard


async def shutdown_dashboard(dashboard: DashboardService) -> None:
    """Clean up resources on shutdown."""
    await dashboard.gateway.close()
    await dashboard.drafts.llm_client.close()
    logger.info("HTTP clients closed")


def get_dashboard(request: Request) -> DashboardService:
    dashboard = getattr(request.app.state, "dashboard", None)
    if dashboard is None:
        raise RuntimeError("Dashboard not initialized. Is the app lifespan running?")
    return dashboard
