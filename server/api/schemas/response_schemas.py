"""API response schemas"""
from pydantic import BaseModel
from typing import Optional

from models.message import InboxMessage


class SessionStatusResponse(BaseModel):
    connected: bool
    account_id: Optional[str] = None


class SendResponse(BaseModel):
    success: bool
    recorded: bool
    conversation_id: Optional[str] = None


class InjectMessageResponse(BaseModel):
    success: bool
    message: InboxMessage


class GenerateResponse(BaseModel):
    response: str
