"""Unipile gateway client — Instagram account linking and direct messages."""
import httpx
from dataclasses import dataclass, field
from typing import Any, Optional
from config.settings import settings
import logging

logger = logging.getLogger(__name__)

PROVIDER = "INSTAGRAM"
USER_AGENT = "Social-AI-Dashboard/1.0"


@dataclass
class GatewayResponse:
    """Status code plus decoded JSON body (empty dict if the body was not JSON)."""
    status_code: int
    data: Any = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class UnipileClient:
    """
    Thin async wrapper around the Unipile REST API.

    Methods return the raw status and body; deciding what counts as success
    (e.g. 201 + checkpoint during login) is left to the services. Network
    failures surface as ``httpx.HTTPError``.
    """

    def __init__(
        self,
        dsn: Optional[str] = None,
        token: Optional[str] = None,
        timeout_s: Optional[float] = None,
    ):
        self.dsn = (dsn or settings.UNIPILE_DSN).rstrip("/")
        self.token = token or settings.UNIPILE_TOKEN

        headers = {
            "X-API-KEY": self.token,
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }
        self.client = httpx.AsyncClient(
            base_url=f"{self.dsn}/api/v1",
            timeout=timeout_s or settings.GATEWAY_TIMEOUT,
            headers=headers,
        )

    @staticmethod
    def _wrap(response: httpx.Response) -> GatewayResponse:
        try:
            data = response.json()
        except ValueError:
            data = {}
        logger.debug(f"Unipile response {response.status_code}: {data}")
        return GatewayResponse(status_code=response.status_code, data=data)

    async def create_account(self, username: str, password: str) -> GatewayResponse:
        """Start linking an Instagram account (may answer with a checkpoint)."""
        response = await self.client.post(
            "/accounts",
            json={"provider": PROVIDER, "username": username, "password": password},
        )
        return self._wrap(response)

    async def solve_checkpoint(self, account_id: str, code: str) -> GatewayResponse:
        """Submit a second-factor code for a pending account link."""
        response = await self.client.post(
            "/accounts/checkpoint",
            json={"provider": PROVIDER, "account_id": account_id, "code": code},
        )
        return self._wrap(response)

    async def delete_account(self, account_id: str) -> GatewayResponse:
        response = await self.client.delete(f"/accounts/{account_id}")
        return self._wrap(response)

    async def send_message(self, account_id: str, chat_id: str, text: str) -> GatewayResponse:
        """Send text into a chat. Unipile only accepts multipart/form-data here."""
        response = await self.client.post(
            f"/chats/{chat_id}/messages",
            files={"account_id": (None, account_id), "text": (None, text)},
        )
        return self._wrap(response)

    async def list_messages(self, account_id: str) -> GatewayResponse:
        response = await self.client.get("/messages", params={"account_id": account_id})
        return self._wrap(response)

    async def close(self):
        """Close HTTP client."""
        await self.client.aclose()
