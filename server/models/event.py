"""Inbound webhook event models (Unipile ``message_received`` payloads)."""
from pydantic import BaseModel, ConfigDict
from typing import Optional, List


class Attendee(BaseModel):
    """Sender / attendee descriptor as delivered by the gateway."""
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    attendee_id: Optional[str] = None
    attendee_name: Optional[str] = None
    attendee_provider_id: Optional[str] = None


class InboundEvent(BaseModel):
    """Gateway webhook delivery. Nothing is guaranteed to be present; ids may arrive as numbers."""
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    message: Optional[str] = None
    sender: Optional[Attendee] = None
    chat_id: Optional[str] = None
    message_id: Optional[str] = None
    event: Optional[str] = None
    account_type: Optional[str] = None
    account_id: Optional[str] = None
    provider_message_id: Optional[str] = None
    provider_chat_id: Optional[str] = None
    attendees: Optional[List[Attendee]] = None
    timestamp: Optional[str] = None
