"""JSON file store for the connected-account session"""
from pathlib import Path
from typing import Optional, Union
import json
import logging

from pydantic import ValidationError as PydanticValidationError

from models.session import SessionRecord

logger = logging.getLogger(__name__)


class SessionStore:
    """Load/save/clear a single session record kept in one JSON file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> Optional[SessionRecord]:
        """Return the saved session, or None if absent or unreadable."""
        if not self.path.exists():
            return None
        try:
            record = SessionRecord.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, PydanticValidationError) as e:
            logger.error(f"Failed to load session from {self.path}: {e}")
            return None
        logger.info(f"Session restored from file: {record.account_id} (saved at {record.timestamp.isoformat()})")
        return record

    def save(self, record: SessionRecord) -> None:
        self.path.write_text(
            json.dumps(record.model_dump(mode="json"), indent=2),
            encoding="utf-8",
        )
        logger.info(f"Session saved to {self.path}")

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
            logger.info(f"Session file {self.path} deleted")
