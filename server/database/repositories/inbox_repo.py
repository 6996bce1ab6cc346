"""Inbox repository — pending inbound messages awaiting a reply."""
from datetime import datetime
from typing import Optional, List
import logging

from core.errors import NotFoundError
from models.message import InboxMessage

logger = logging.getLogger(__name__)


class InboxRepository:
    """
    In-memory list of inbox messages, newest first.

    Methods are synchronous on purpose: the app runs on a single event loop,
    so a method that never awaits cannot interleave with another request.
    """

    def __init__(self):
        self._messages: List[InboxMessage] = []
        self._last_id = 0

    def next_id(self, now: datetime) -> str:
        """Millisecond timestamp id, bumped when two messages share a millisecond."""
        candidate = int(now.timestamp() * 1000)
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return str(candidate)

    def append(self, message: InboxMessage) -> InboxMessage:
        self._messages.insert(0, message)
        logger.debug(f"Inbox size: {len(self._messages)}")
        return message

    def list(self) -> List[InboxMessage]:
        return list(self._messages)

    def find_by_id(self, message_id: str) -> InboxMessage:
        for msg in self._messages:
            if msg.id == message_id:
                return msg
        raise NotFoundError("Message not found")

    def find_by_chat_id(self, chat_id: str) -> InboxMessage:
        for msg in self._messages:
            if msg.chat_id == chat_id:
                return msg
        raise NotFoundError("Original message data not found")

    def find_recent(self, text: str, user: str, since: datetime) -> Optional[InboxMessage]:
        """Newest message with identical text and sender created strictly after ``since``."""
        for msg in self._messages:
            if msg.text == text and msg.user == user and msg.created_at > since:
                return msg
        return None

    def remove(self, message_id: str) -> InboxMessage:
        msg = self.find_by_id(message_id)
        self._messages = [m for m in self._messages if m.id != message_id]
        return msg

    def __contains__(self, message_id: str) -> bool:
        return any(m.id == message_id for m in self._messages)

    def __len__(self) -> int:
        return len(self._messages)
