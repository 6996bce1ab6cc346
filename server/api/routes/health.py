"""Health check routes"""
from fastapi import APIRouter, Depends
import logging

from core.dashboard import DashboardService
from core.dependencies import get_dashboard

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/health")
async def health_check(dashboard: DashboardService = Depends(get_dashboard)):
    """Basic health check plus in-memory store sizes"""
    return {
        "status": "ok",
        "service": "social-ai-dashboard",
        "connected": dashboard.session.connected,
        "inbox_size": len(dashboard.inbox),
        "conversation_count": len(dashboard.conversations),
        "processed_ids": len(dashboard.dedup),
    }
