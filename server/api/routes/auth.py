"""Instagram account connection routes"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
import logging

from api.schemas.request_schemas import ConnectRequest
from api.schemas.response_schemas import SessionStatusResponse
from core.dashboard import DashboardService
from core.dependencies import get_dashboard

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/auth/connect")
async def connect(
    request: ConnectRequest,
    dashboard: DashboardService = Depends(get_dashboard),
):
    """
    Link an Instagram account through Unipile.

    Answers 202 ``{checkpoint: true}`` when a 2FA code is needed; the UI then
    resubmits the same credentials together with ``twoFactorCode``.
    """
    result = await dashboard.auth.connect(
        username=request.username,
        password=request.password,
        two_factor_code=request.two_factor_code,
    )
    if result.checkpoint:
        return JSONResponse(
            status_code=202,
            content={"checkpoint": True, "account_id": result.account_id},
        )
    return {"success": True, "account_id": result.account_id}


@router.post("/logout")
async def logout(dashboard: DashboardService = Depends(get_dashboard)):
    """Disconnect the Instagram account upstream and forget the local session."""
    await dashboard.auth.logout()
    return {"success": True, "message": "Logged out successfully"}


@router.get("/session-status", response_model=SessionStatusResponse)
async def session_status(dashboard: DashboardService = Depends(get_dashboard)):
    return SessionStatusResponse(
        connected=dashboard.session.connected,
        account_id=dashboard.session.account_id,
    )
