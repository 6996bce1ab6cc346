"""Identity resolution for inbound events."""
from dataclasses import dataclass
from typing import Optional
import logging
import re

from models.event import InboundEvent

logger = logging.getLogger(__name__)

UNKNOWN_USER = "Unknown User"


@dataclass(frozen=True)
class ResolvedIdentity:
    sender_name: str
    conversation_key: str
    sender_provider_id: Optional[str]


class IdentityResolver:
    """
    Derives who sent an event and which conversation it belongs to.

    Instagram often reports the sender name as the bare numeric user id.
    When that happens the attendee list usually carries the real display
    name on the *other* attendee, so we borrow it from there.

    The conversation key is the provider-level conversation id when the
    gateway sends one, otherwise ``<name>_<provider id>``. The fallback is
    a heuristic: two users sharing a display name and missing provider
    ids would collide.
    """

    def __init__(self, placeholder_pattern: str = r"^\d+$"):
        self._placeholder_re = re.compile(placeholder_pattern)

    def is_placeholder(self, name: str) -> bool:
        return bool(self._placeholder_re.match(name))

    def resolve(self, event: InboundEvent) -> ResolvedIdentity:
        sender = event.sender
        provider_id = sender.attendee_provider_id if sender else None
        name = (sender.attendee_name if sender else None) or provider_id or UNKNOWN_USER

        if self.is_placeholder(name):
            real_name = self._name_from_attendees(event, provider_id)
            if real_name:
                logger.info(f"Resolved placeholder sender {name!r} to {real_name!r}")
                name = real_name

        key = event.provider_chat_id or f"{name}_{provider_id}"
        return ResolvedIdentity(
            sender_name=name,
            conversation_key=key,
            sender_provider_id=provider_id,
        )

    def _name_from_attendees(
        self, event: InboundEvent, sender_provider_id: Optional[str]
    ) -> Optional[str]:
        for attendee in event.attendees or []:
            if attendee.attendee_provider_id == sender_provider_id:
                continue
            if attendee.attendee_name and not self.is_placeholder(attendee.attendee_name):
                return attendee.attendee_name
        return None
