"""API request schemas

Required-ness of most fields is checked by the service layer so that a
missing value yields the dashboard's own 400 message rather than a generic
validation error.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class ConnectRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str = Field(..., max_length=256)
    password: str = Field(..., max_length=1024)
    two_factor_code: Optional[str] = Field(None, alias="twoFactorCode", max_length=32)


class InjectMessageRequest(BaseModel):
    text: Optional[str] = Field(None, max_length=10000)
    sender: Optional[str] = Field(None, max_length=256)


class SendReplyRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    final_text: Optional[str] = Field(None, alias="finalText", max_length=10000)


class ConversationSendRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    conversation_id: Optional[str] = None
    chat_id: Optional[str] = None
    final_text: Optional[str] = Field(None, alias="finalText", max_length=10000)


class GenerateRequest(BaseModel):
    text: Optional[str] = Field(None, max_length=10000)
    platform: Optional[str] = Field(None, max_length=64)
