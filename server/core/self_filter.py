"""Filter for the bot account's own messages echoed back by the gateway."""
from typing import Optional


class SelfMessageFilter:
    """Matches events sent by the connected bot account itself."""

    def __init__(self, bot_name: str = "", bot_provider_id: str = ""):
        self.bot_name = bot_name
        self.bot_provider_id = bot_provider_id

    def is_self(self, sender_name: Optional[str], sender_provider_id: Optional[str]) -> bool:
        if self.bot_name and sender_name == self.bot_name:
            return True
        if self.bot_provider_id and sender_provider_id == self.bot_provider_id:
            return True
        return False
