"""Inbox routes"""
from fastapi import APIRouter, Depends
from typing import List, Optional
import logging

from api.schemas.request_schemas import InjectMessageRequest, SendReplyRequest
from api.schemas.response_schemas import InjectMessageResponse, SendResponse
from core.dashboard import DashboardService
from core.dependencies import get_dashboard
from models.message import InboxMessage

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=List[InboxMessage])
async def list_messages(dashboard: DashboardService = Depends(get_dashboard)):
    """Inbox, newest first"""
    return dashboard.inbox.list()


@router.post("/test", response_model=InjectMessageResponse)
async def inject_test_message(
    request: Optional[InjectMessageRequest] = None,
    dashboard: DashboardService = Depends(get_dashboard),
):
    """Create a synthetic inbound message for trying out the UI."""
    request = request or InjectMessageRequest()
    msg = await dashboard.inject_test_message(text=request.text, sender=request.sender)
    return InjectMessageResponse(success=True, message=msg)


@router.post("/{message_id}/regenerate", response_model=InboxMessage)
async def regenerate(
    message_id: str,
    dashboard: DashboardService = Depends(get_dashboard),
):
    return await dashboard.regenerate(message_id)


@router.post("/{message_id}/send", response_model=SendResponse)
async def send_reply(
    message_id: str,
    request: Optional[SendReplyRequest] = None,
    dashboard: DashboardService = Depends(get_dashboard),
):
    """
    Send the operator's final reply to Instagram.

    On success the message leaves the inbox; its conversation keeps the
    customer message and gains the outgoing reply. On failure the message
    stays in the inbox untouched.
    """
    final_text = request.final_text if request else None
    result = await dashboard.send_inbox_reply(message_id, final_text)
    return SendResponse(
        success=True,
        recorded=result.recorded,
        conversation_id=result.conversation_id,
    )
