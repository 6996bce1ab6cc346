"""Inbox message data models"""
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime, timezone

DEFAULT_PLATFORM = "Instagram"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ActionLogEntry(BaseModel):
    """Operator action recorded against an inbox message"""
    action: str
    at: datetime = Field(default_factory=utcnow)


class InboxMessage(BaseModel):
    """Inbound message awaiting a reviewed reply"""
    id: str
    message_id: Optional[str] = None  # gateway message id
    provider_message_id: Optional[str] = None  # Instagram's own id
    account_id: Optional[str] = None  # account the reply must be sent from
    platform: str = DEFAULT_PLATFORM
    user: str
    text: str
    chat_id: Optional[str] = None
    ai_response: str = ""
    history: List[ActionLogEntry] = []
    created_at: datetime = Field(default_factory=utcnow)

    def log(self, action: str) -> None:
        self.history.append(ActionLogEntry(action=action))
