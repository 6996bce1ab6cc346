"""Dashboard service — inbound pipeline and operator actions over the stores."""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional
import logging

import httpx

from core.dedup import DeduplicationGate
from core.errors import (
    DraftGenerationError,
    MissingAccountError,
    NotFoundError,
    UnsupportedPlatform,
    UpstreamSendError,
    ValidationError,
    upstream_message,
)
from core.identity import IdentityResolver
from core.self_filter import SelfMessageFilter
from database.repositories.conversation_repo import ConversationRepository
from database.repositories.inbox_repo import InboxRepository
from integrations.unipile.client import UnipileClient
from models.conversation import ConversationEntry
from models.event import InboundEvent
from models.message import DEFAULT_PLATFORM, InboxMessage, utcnow
from services.auth_service import AuthService
from services.draft_service import DraftGenerator
from services.reply_dispatcher import DispatchResult, ReplyDispatcher
from services.session_state import SessionState

logger = logging.getLogger(__name__)

SUPPORTED_ACCOUNT_TYPE = "INSTAGRAM"
MEDIA_PLACEHOLDER = "[Media]"
DEFAULT_TEST_TEXT = "Hello! What are your hours?"
DEFAULT_TEST_SENDER = "test_user_123"


@dataclass
class IngestResult:
    status: str  # 'accepted' | 'duplicate' | 'ignored'
    message: Optional[InboxMessage] = None

    def as_response(self) -> dict:
        if self.status == "duplicate":
            return {"success": True, "duplicate": True}
        if self.status == "ignored":
            return {"success": True, "ignored": "bot_message"}
        return {"success": True}


class DashboardService:
    """
    Owns every store and collaborator for the single connected account.

    Built once at startup (see ``core.dependencies``) and shared by all
    requests. Store mutations happen without awaiting in between, so
    concurrent requests on the one event loop never observe half-applied
    state and no locking is needed.
    """

    def __init__(
        self,
        gateway: UnipileClient,
        drafts: DraftGenerator,
        session: SessionState,
        identity_resolver: IdentityResolver,
        self_filter: SelfMessageFilter,
        dedup_window_seconds: float = 30.0,
        inbox_repo: Optional[InboxRepository] = None,
        conversation_repo: Optional[ConversationRepository] = None,
    ):
        self.gateway = gateway
        self.drafts = drafts
        self.session = session
        self.identity_resolver = identity_resolver
        self.self_filter = self_filter
        self.inbox = inbox_repo or InboxRepository()
        self.conversations = conversation_repo or ConversationRepository()
        self.dedup = DeduplicationGate(self.inbox, window_seconds=dedup_window_seconds)
        self.auth = AuthService(gateway, session)
        self.dispatcher = ReplyDispatcher(gateway, self.conversations)

    # ------------------------------------------------------------------
    # Inbound
    # ------------------------------------------------------------------

    async def ingest(self, event: InboundEvent, now: Optional[datetime] = None) -> IngestResult:
        """
        Run one webhook event through the pipeline.

        platform check -> identity -> dedup -> self filter -> store -> draft
        """
        now = now or utcnow()
        logger.info(
            f"Incoming event {event.event!r} | account {event.account_id} | "
            f"provider message id {event.provider_message_id}"
        )

        if event.account_type and event.account_type != SUPPORTED_ACCOUNT_TYPE:
            logger.warning(f"Unsupported platform: {event.account_type}")
            raise UnsupportedPlatform("Unsupported platform")

        identity = self.identity_resolver.resolve(event)
        text = event.message or MEDIA_PLACEHOLDER

        if self.dedup.is_duplicate(event.provider_message_id, text, identity.sender_name, now):
            return IngestResult(status="duplicate")

        if self.self_filter.is_self(identity.sender_name, identity.sender_provider_id):
            logger.info(f"Ignoring outbound message from bot account: {identity.sender_name}")
            return IngestResult(status="ignored")

        msg = InboxMessage(
            id=self.inbox.next_id(now),
            message_id=event.message_id,
            provider_message_id=event.provider_message_id,
            account_id=event.account_id,
            platform=DEFAULT_PLATFORM,
            user=identity.sender_name,
            text=text,
            chat_id=event.chat_id,
            created_at=now,
        )
        self.inbox.append(msg)
        self.conversations.append_incoming(
            identity.conversation_key,
            ConversationEntry(id=msg.id, text=text, sender="customer", timestamp=now, type="incoming"),
            chat_id=event.chat_id,
            sender_name=identity.sender_name,
            platform=DEFAULT_PLATFORM,
        )
        self.dedup.record(event.provider_message_id)
        logger.info(
            f"Accepted DM from {identity.sender_name!r} in chat {event.chat_id} "
            f"(conversation {identity.conversation_key!r}); inbox size {len(self.inbox)}"
        )

        # Everything above ran without yielding; a redelivery arriving while
        # the draft is generated is already caught by the dedup gate.
        await self._attach_draft(msg)
        return IngestResult(status="accepted", message=msg)

    async def inject_test_message(
        self,
        text: Optional[str] = None,
        sender: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> InboxMessage:
        """Create a synthetic inbox message (UI testing aid, not threaded)."""
        now = now or utcnow()
        msg_id = self.inbox.next_id(now)
        msg = InboxMessage(
            id=msg_id,
            user=sender or DEFAULT_TEST_SENDER,
            text=text or DEFAULT_TEST_TEXT,
            chat_id=f"test_chat_{msg_id}",
            created_at=now,
        )
        self.inbox.append(msg)
        logger.info(f"Test message created: {msg.id}")
        await self._attach_draft(msg)
        return msg

    async def _attach_draft(self, msg: InboxMessage) -> None:
        try:
            msg.ai_response = await self.drafts.generate(msg.text, msg.platform)
        except DraftGenerationError:
            # Keep the message; the operator can regenerate or type a reply
            logger.warning(f"No AI draft for message {msg.id}")

    # ------------------------------------------------------------------
    # Operator actions
    # ------------------------------------------------------------------

    async def regenerate(self, message_id: str) -> InboxMessage:
        msg = self.inbox.find_by_id(message_id)
        draft = await self.drafts.generate(msg.text, msg.platform)
        msg.log("Regenerated AI response")
        msg.ai_response = draft
        return msg

    async def send_inbox_reply(self, message_id: str, final_text: Optional[str]) -> DispatchResult:
        """Send the reviewed reply for an inbox message and clear it from the inbox."""
        msg = self.inbox.find_by_id(message_id)
        if not final_text:
            raise ValidationError("finalText is required")
        if not msg.account_id:
            raise MissingAccountError(
                "Message missing account_id. Please reconnect your Instagram account."
            )
        if not msg.chat_id:
            raise ValidationError("Message has no chat_id to reply to")

        result = await self.dispatcher.send(msg.account_id, msg.chat_id, final_text)

        msg.log(f"Sent response: {final_text}")
        # A concurrent send for the same message may have removed it already
        if msg.id in self.inbox:
            self.inbox.remove(msg.id)
        return result

    async def send_conversation_reply(
        self,
        conversation_id: Optional[str],
        chat_id: Optional[str],
        final_text: Optional[str],
    ) -> DispatchResult:
        """Reply from the threaded view, where only the conversation is known."""
        if not conversation_id or not chat_id or not final_text:
            raise ValidationError("conversation_id, chat_id and finalText are required")

        conversation = self.conversations.get(conversation_id)
        if conversation.last_customer_entry() is None:
            raise ValidationError("No customer messages found in conversation")

        account_id = self._account_for_chat(chat_id)
        return await self.dispatcher.send(
            account_id, chat_id, final_text, conversation_id=conversation_id
        )

    def _account_for_chat(self, chat_id: str) -> str:
        """Account to reply from: the inbox message's, else the connected session's."""
        try:
            original = self.inbox.find_by_chat_id(chat_id)
        except NotFoundError:
            original = None

        account_id = (original.account_id if original else None) or self.session.account_id
        if account_id:
            return account_id
        if original is None:
            raise ValidationError("Original message data not found")
        raise MissingAccountError(
            "Message missing account_id. Please reconnect your Instagram account."
        )

    async def generate_draft(self, text: Optional[str], platform: Optional[str]) -> str:
        if not text:
            raise ValidationError("text is required")
        return await self.drafts.generate(text, platform or DEFAULT_PLATFORM)

    async def fetch_gateway_messages(self) -> Any:
        """Polling fallback: the gateway's raw message list for the connected account."""
        account_id = self.session.account_id
        if not account_id:
            raise ValidationError("Instagram not connected")

        logger.info(f"Fetching messages from Unipile for account: {account_id}")
        try:
            response = await self.gateway.list_messages(account_id)
        except httpx.HTTPError as e:
            logger.error(f"Error fetching messages: {e}")
            raise UpstreamSendError(str(e), status_code=500)

        if not response.ok:
            raise UpstreamSendError(
                upstream_message(response.data, "Failed to fetch messages"),
                status_code=response.status_code,
            )
        return response.data
