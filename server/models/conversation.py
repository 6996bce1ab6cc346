"""Conversation data models"""
from pydantic import BaseModel, Field
from typing import Literal, Optional, List
from datetime import datetime

from models.message import DEFAULT_PLATFORM, utcnow


class ConversationEntry(BaseModel):
    """Single line in a conversation thread. Never mutated once appended."""
    id: str
    text: str
    sender: Literal["customer", "bot"]
    timestamp: datetime = Field(default_factory=utcnow)
    type: Literal["incoming", "outgoing"]


class Conversation(BaseModel):
    """Threaded view of one customer, stable across chat id changes"""
    conversation_id: str
    chat_id: Optional[str] = None  # latest chat id seen
    user: str
    platform: str = DEFAULT_PLATFORM
    last_message_time: datetime = Field(default_factory=utcnow)
    messages: List[ConversationEntry] = []
    all_chat_ids: List[Optional[str]] = []

    def last_customer_entry(self) -> Optional[ConversationEntry]:
        for entry in reversed(self.messages):
            if entry.sender == "customer":
                return entry
        return None
