"""Connected Instagram account, persisted across restarts."""
from typing import Optional
import logging

from database.session_store import SessionStore
from models.session import SessionRecord

logger = logging.getLogger(__name__)


class SessionState:
    """Holds at most one connected account id."""

    def __init__(self, store: SessionStore):
        self.store = store
        self.account_id: Optional[str] = None

    @property
    def connected(self) -> bool:
        return self.account_id is not None

    def restore(self) -> bool:
        """Load the saved account id. Returns True when a session was found."""
        record = self.store.load()
        if record is None:
            return False
        self.account_id = record.account_id
        return True

    def connect(self, account_id: str) -> None:
        self.account_id = account_id
        self.store.save(SessionRecord(account_id=account_id))

    def disconnect(self) -> None:
        self.account_id = None
        self.store.clear()
