"""Instagram account linking through the Unipile gateway."""
import asyncio
from dataclasses import dataclass
from typing import Optional, Set
import logging

import httpx

from config.settings import settings
from core.errors import (
    UpstreamAuthError,
    UpstreamSendError,
    UpstreamTimeout,
    ValidationError,
    upstream_message,
)
from integrations.unipile.client import UnipileClient
from services.session_state import SessionState

logger = logging.getLogger(__name__)

# Unipile answers 201/202 with a "checkpoint" object when 2FA is required
_CHECKPOINT_STATUSES = (201, 202)
_SUCCESS_STATUSES = (200, 201)


@dataclass
class ConnectResult:
    account_id: Optional[str]
    checkpoint: bool = False


class AuthService:
    """Handle the gateway login handshake and logout."""

    def __init__(
        self,
        gateway: UnipileClient,
        session: SessionState,
        timeout_s: Optional[float] = None,
    ):
        self.gateway = gateway
        self.session = session
        self.timeout_s = timeout_s if timeout_s is not None else settings.AUTH_TIMEOUT_SECONDS
        # Handshakes that outlived their request; referenced until they finish
        self._late_handshakes: Set[asyncio.Future] = set()

    def _finish_late_handshake(self, handshake: asyncio.Future) -> None:
        self._late_handshakes.discard(handshake)
        if handshake.cancelled():
            logger.warning("Timed-out authentication handshake was cancelled")
            return
        error = handshake.exception()
        if error is not None:
            logger.error(f"Timed-out authentication handshake failed: {error}")
            return
        logger.info(f"Timed-out authentication handshake completed late: {handshake.result()}")

    async def connect(
        self,
        username: str,
        password: str,
        two_factor_code: Optional[str] = None,
    ) -> ConnectResult:
        """
        Link an Instagram account.

        Returns ``ConnectResult(checkpoint=True)`` when the gateway asks for a
        second-factor code and none was supplied; the caller resubmits the
        same credentials together with the code.

        Raises UpstreamTimeout when the whole handshake exceeds the timeout
        and UpstreamAuthError when the gateway rejects it.
        """
        if not username or not password:
            raise ValidationError("username and password are required")

        logger.info(f"Authentication attempt for: {username}")
        handshake = asyncio.ensure_future(self._handshake(username, password, two_factor_code))
        try:
            # The timeout only ends the HTTP answer; the handshake keeps running
            # and a late success still stores the session.
            return await asyncio.wait_for(asyncio.shield(handshake), timeout=self.timeout_s)
        except asyncio.TimeoutError:
            logger.error(f"Authentication for {username} timed out after {self.timeout_s}s")
            self._late_handshakes.add(handshake)
            handshake.add_done_callback(self._finish_late_handshake)
            raise UpstreamTimeout("Request timeout - Instagram/Unipile taking too long")
        except httpx.HTTPError as e:
            logger.error(f"Gateway unreachable during authentication: {e}")
            raise UpstreamAuthError(str(e), status_code=500)

    async def _handshake(
        self,
        username: str,
        password: str,
        two_factor_code: Optional[str],
    ) -> ConnectResult:
        response = await self.gateway.create_account(username, password)
        data = response.data if isinstance(response.data, dict) else {}

        if response.status_code in _CHECKPOINT_STATUSES and data.get("checkpoint"):
            checkpoint_type = (data.get("checkpoint") or {}).get("type")
            logger.info(f"2FA required, checkpoint type: {checkpoint_type}")
            if not two_factor_code:
                return ConnectResult(account_id=data.get("account_id"), checkpoint=True)

            response = await self.gateway.solve_checkpoint(data.get("account_id"), two_factor_code)
            data = response.data if isinstance(response.data, dict) else {}

        if response.status_code not in _SUCCESS_STATUSES:
            message = upstream_message(data, "Auth failed")
            logger.error(f"Authentication failed with status {response.status_code}: {message}")
            raise UpstreamAuthError(message, status_code=response.status_code)

        account_id = data.get("account_id")
        if not account_id:
            raise UpstreamAuthError("Gateway did not return an account id", status_code=502)

        self.session.connect(account_id)
        logger.info(f"Authentication successful, account {account_id}")
        return ConnectResult(account_id=account_id)

    async def logout(self) -> None:
        """Remove the connected account from the gateway and forget it locally."""
        account_id = self.session.account_id
        if not account_id:
            raise ValidationError("No active session")

        logger.info(f"Sending logout request to Unipile for account: {account_id}")
        try:
            response = await self.gateway.delete_account(account_id)
        except httpx.HTTPError as e:
            logger.error(f"Gateway unreachable during logout: {e}")
            raise UpstreamSendError(str(e), status_code=500)

        if not response.ok:
            message = upstream_message(response.data, "Failed to logout")
            logger.error(f"Logout failed with status {response.status_code}: {message}")
            raise UpstreamSendError(message, status_code=response.status_code)

        self.session.disconnect()
        logger.info("Successfully logged out from Unipile")
