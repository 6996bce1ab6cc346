"""AI reply drafting."""
import logging
from typing import Optional

from config.settings import settings
from core.errors import DraftGenerationError
from integrations.llm.client import LLMClient
from integrations.llm.prompts import REPLY_DRAFT_PROMPT

logger = logging.getLogger(__name__)


class DraftGenerator:
    """Turns a customer message into a suggested reply."""

    def __init__(self, llm_client: LLMClient, brand: Optional[str] = None):
        self.llm_client = llm_client
        self.brand = brand or settings.BRAND_DESCRIPTION

    async def generate(self, text: str, platform: str) -> str:
        prompt = REPLY_DRAFT_PROMPT.format(brand=self.brand, platform=platform, message=text)
        try:
            draft = await self.llm_client.generate(prompt="", system_prompt=prompt)
        except Exception as e:
            logger.error(f"Draft generation failed for {platform} message: {e}")
            raise DraftGenerationError("Failed to generate response") from e
        return (draft or "").strip()
