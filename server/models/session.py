"""Connected-account session model"""
from pydantic import BaseModel, Field
from datetime import datetime

from models.message import utcnow


class SessionRecord(BaseModel):
    """Persisted form of the connected Instagram account"""
    account_id: str
    timestamp: datetime = Field(default_factory=utcnow)
