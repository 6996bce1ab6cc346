"""AI drafting and gateway polling routes"""
from fastapi import APIRouter, Depends
import logging

from api.schemas.request_schemas import GenerateRequest
from api.schemas.response_schemas import GenerateResponse
from core.dashboard import DashboardService
from core.dependencies import get_dashboard

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/ai/generate", response_model=GenerateResponse)
async def generate_response(
    request: GenerateRequest,
    dashboard: DashboardService = Depends(get_dashboard),
):
    """Draft a reply for arbitrary text (used by the conversation view)."""
    draft = await dashboard.generate_draft(request.text, request.platform)
    return GenerateResponse(response=draft)


@router.get("/fetch-messages")
async def fetch_messages(dashboard: DashboardService = Depends(get_dashboard)):
    """Polling alternative to the webhook: raw gateway message list."""
    return await dashboard.fetch_gateway_messages()
