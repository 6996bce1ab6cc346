"""Reply dispatch: send operator replies through the gateway."""
from dataclasses import dataclass
from typing import Optional
import logging

import httpx

from core.errors import UpstreamSendError, upstream_message
from database.repositories.conversation_repo import ConversationRepository
from integrations.unipile.client import UnipileClient

logger = logging.getLogger(__name__)


@dataclass
class DispatchResult:
    conversation_id: Optional[str]

    @property
    def recorded(self) -> bool:
        return self.conversation_id is not None


class ReplyDispatcher:
    """
    Sends a reply into a chat and threads it into the conversation history.

    Single attempt: a gateway rejection raises UpstreamSendError and nothing
    is recorded, so the operator can retry by hand.
    """

    def __init__(self, gateway: UnipileClient, conversation_repo: ConversationRepository):
        self.gateway = gateway
        self.conversation_repo = conversation_repo

    async def send(
        self,
        account_id: str,
        chat_id: str,
        text: str,
        conversation_id: Optional[str] = None,
    ) -> DispatchResult:
        """
        Send ``text`` to ``chat_id`` from ``account_id``.

        The outgoing entry goes to ``conversation_id`` when given, else to the
        conversation the chat id was last seen in. If neither exists the send
        still counts as successful and ``DispatchResult.recorded`` is False.
        """
        logger.info(f"Sending reply to chat {chat_id} from account {account_id}")
        try:
            response = await self.gateway.send_message(account_id, chat_id, text)
        except httpx.HTTPError as e:
            logger.error(f"Gateway unreachable while sending to chat {chat_id}: {e}")
            raise UpstreamSendError(str(e), status_code=500)

        if not response.ok:
            message = upstream_message(response.data, "Failed to send message")
            logger.error(f"Send to chat {chat_id} failed with status {response.status_code}: {message}")
            raise UpstreamSendError(message, status_code=response.status_code)

        key = conversation_id or self.conversation_repo.find_key_by_chat_id(chat_id)
        if key is None:
            logger.warning(f"Reply sent to chat {chat_id} but no conversation tracks it; history not updated")
            return DispatchResult(conversation_id=None)

        self.conversation_repo.append_outgoing(key, text)
        logger.info(f"Reply sent and recorded in conversation {key!r}")
        return DispatchResult(conversation_id=key)
