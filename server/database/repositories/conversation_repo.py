"""Conversation repository — threaded per-customer message history."""
from datetime import datetime
from typing import Dict, Optional, List
import logging

from core.errors import NotFoundError
from models.conversation import Conversation, ConversationEntry
from models.message import DEFAULT_PLATFORM, utcnow

logger = logging.getLogger(__name__)


class ConversationRepository:
    """
    In-memory conversation store keyed by conversation key.

    Keeps a reverse chat-id -> key index that is updated on every incoming
    append, so an outgoing reply that only knows its chat id always finds
    the conversation the chat id was last seen in.
    """

    def __init__(self):
        self._conversations: Dict[str, Conversation] = {}
        self._chat_index: Dict[str, str] = {}
        # Insertion counter for deterministic ordering on equal timestamps
        self._touched: Dict[str, int] = {}
        self._clock = 0

    def _touch(self, key: str, when: datetime) -> None:
        self._conversations[key].last_message_time = when
        self._clock += 1
        self._touched[key] = self._clock

    def append_incoming(
        self,
        key: str,
        entry: ConversationEntry,
        chat_id: Optional[str],
        sender_name: str,
        platform: str = DEFAULT_PLATFORM,
    ) -> Conversation:
        """Append a customer message, creating the conversation on first contact."""
        conversation = self._conversations.get(key)
        if conversation is None:
            conversation = Conversation(
                conversation_id=key,
                chat_id=chat_id,
                user=sender_name,
                platform=platform,
                all_chat_ids=[chat_id],
            )
            self._conversations[key] = conversation
            logger.info(f"New conversation {key!r} for {sender_name!r}")
        else:
            conversation.chat_id = chat_id
            if chat_id not in conversation.all_chat_ids:
                conversation.all_chat_ids.append(chat_id)
                logger.info(f"Conversation {key!r} moved to chat {chat_id}")

        if chat_id:
            self._chat_index[chat_id] = key

        conversation.messages.append(entry)
        self._touch(key, entry.timestamp)
        return conversation

    def append_outgoing(self, key: str, text: str, now: Optional[datetime] = None) -> ConversationEntry:
        """Append a reply sent by the bot."""
        conversation = self.get(key)
        now = now or utcnow()
        entry = ConversationEntry(
            id=f"response_{int(now.timestamp() * 1000)}",
            text=text,
            sender="bot",
            timestamp=now,
            type="outgoing",
        )
        conversation.messages.append(entry)
        self._touch(key, now)
        return entry

    def get(self, key: str) -> Conversation:
        conversation = self._conversations.get(key)
        if conversation is None:
            raise NotFoundError("Conversation not found")
        return conversation

    def find_key_by_chat_id(self, chat_id: str) -> Optional[str]:
        return self._chat_index.get(chat_id)

    def list(self) -> List[Conversation]:
        """Conversations by last activity, newest first."""
        return sorted(
            self._conversations.values(),
            key=lambda c: (c.last_message_time, self._touched[c.conversation_id]),
            reverse=True,
        )

    def __len__(self) -> int:
        return len(self._conversations)
