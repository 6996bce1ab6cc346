"""Gateway webhook route for incoming Instagram DMs."""
from fastapi import APIRouter, Body, Depends
from pydantic import ValidationError as PydanticValidationError
from typing import Any
import logging

from core.dashboard import DashboardService
from core.dependencies import get_dashboard
from core.errors import DashboardError
from models.event import InboundEvent

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/webhook/incoming")
@router.post("/api/incoming", include_in_schema=False)
async def incoming_webhook(
    payload: Any = Body(None),
    dashboard: DashboardService = Depends(get_dashboard),
):
    """
    Receive a Unipile ``message_received`` delivery.

    1. Rejects non-Instagram accounts with 400.
    2. Acknowledges duplicates and the bot's own echoes without storing them.
    3. Otherwise stores the message in the inbox and its conversation and
       attaches an AI draft.

    The body is parsed here rather than by FastAPI so that a missing body or
    an oddly typed field is acknowledged instead of answered with 400.
    """
    logger.debug(f"Full webhook payload: {payload}")
    try:
        event = InboundEvent.model_validate(payload if isinstance(payload, dict) else {})
    except PydanticValidationError as e:
        logger.warning(f"Unreadable webhook payload: {e}")
        return {"success": False}

    try:
        result = await dashboard.ingest(event)
        return result.as_response()
    except DashboardError:
        raise
    except Exception as e:
        logger.error(f"Incoming webhook error: {e}", exc_info=True)
        # Still acknowledge; a failing endpoint makes the gateway redeliver
        return {"success": False}
