"""Conversation routes"""
from fastapi import APIRouter, Depends
from typing import List
import logging

from api.schemas.request_schemas import ConversationSendRequest
from api.schemas.response_schemas import SendResponse
from core.dashboard import DashboardService
from core.dependencies import get_dashboard
from models.conversation import Conversation

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=List[Conversation])
async def list_conversations(dashboard: DashboardService = Depends(get_dashboard)):
    """Conversations sorted by last activity, newest first"""
    return dashboard.conversations.list()


@router.post("/send", response_model=SendResponse)
async def send_conversation_reply(
    request: ConversationSendRequest,
    dashboard: DashboardService = Depends(get_dashboard),
):
    """Reply from the conversation view."""
    result = await dashboard.send_conversation_reply(
        conversation_id=request.conversation_id,
        chat_id=request.chat_id,
        final_text=request.final_text,
    )
    return SendResponse(
        success=True,
        recorded=result.recorded,
        conversation_id=result.conversation_id,
    )


@router.get("/{conversation_id}", response_model=Conversation)
async def get_conversation(
    conversation_id: str,
    dashboard: DashboardService = Depends(get_dashboard),
):
    return dashboard.conversations.get(conversation_id)
