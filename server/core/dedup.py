"""Deduplication gate for inbound webhook deliveries."""
from datetime import datetime, timedelta
from typing import Optional, Set
import logging

from database.repositories.inbox_repo import InboxRepository

logger = logging.getLogger(__name__)


class DeduplicationGate:
    """
    Decides whether an inbound event was already processed.

    Two advisory checks, in order:

    1. The provider message id (Instagram's own id) is in the processed set.
    2. The inbox already holds a message with the same text from the same
       sender created within the trailing window. This covers deliveries
       where the provider id is missing or differs between retries.

    ``is_duplicate`` never mutates state; callers ``record`` the provider id
    once they accept the event.
    """

    def __init__(self, inbox_repo: InboxRepository, window_seconds: float = 30.0):
        self.inbox_repo = inbox_repo
        self.window = timedelta(seconds=window_seconds)
        self._processed: Set[str] = set()

    def is_duplicate(
        self,
        provider_message_id: Optional[str],
        text: str,
        sender_name: str,
        now: datetime,
    ) -> bool:
        if provider_message_id and provider_message_id in self._processed:
            logger.info(f"Duplicate provider message id: {provider_message_id}")
            return True

        recent = self.inbox_repo.find_recent(text, sender_name, since=now - self.window)
        if recent is not None:
            logger.info(
                f"Recent duplicate from {sender_name!r} (matches inbox message {recent.id}): "
                f"{text[:50]!r}"
            )
            return True

        return False

    def record(self, provider_message_id: Optional[str]) -> None:
        # Events without a provider id are only covered by the time window
        if provider_message_id:
            self._processed.add(provider_message_id)

    def __contains__(self, provider_message_id: str) -> bool:
        return provider_message_id in self._processed

    def __len__(self) -> int:
        return len(self._processed)
