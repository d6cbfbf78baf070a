"""
Channel Registry

Insertion-ordered set of subscribed channels persisted to channels.json.
"""

from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from ..config import get_settings
from ..core.logging import get_logger
from ..models.channel import Channel
from .storage import JsonFileStore

logger = get_logger(__name__)


class ChannelRegistry:
    """
    Durable channel list with identity-based deduplication.

    Assumes a single writer; callers serialize mutations.
    """

    def __init__(self, store: Optional[JsonFileStore] = None):
        self.store = store or JsonFileStore(get_settings().channels_path)

    @property
    def path(self) -> Path:
        return self.store.path

    def list(self) -> List[Channel]:
        """Current registry in insertion order. Never fails."""
        channels = []
        for raw in self.store.load():
            try:
                channels.append(Channel.model_validate(raw))
            except PydanticValidationError as e:
                logger.warning("channel_record_invalid", record=raw, error=str(e))
        return channels

    def get(self, channel_id: str) -> Optional[Channel]:
        return next((c for c in self.list() if c.id == channel_id), None)

    def _save(self, channels: List[Channel]):
        self.store.save([c.model_dump(exclude_none=True) for c in channels])

    def add(self, channel: Channel) -> bool:
        """Append and persist. Returns False without writing if the id exists."""
        channels = self.list()
        if any(c.id == channel.id for c in channels):
            return False

        channels.append(channel)
        self._save(channels)
        logger.info("channel_added", channel_id=channel.id, handle=channel.handle)
        return True

    def remove(self, channel_id: str) -> bool:
        """Remove and persist. Returns False if no channel has that id."""
        channels = self.list()
        remaining = [c for c in channels if c.id != channel_id]
        if len(remaining) == len(channels):
            return False

        self._save(remaining)
        logger.info("channel_removed", channel_id=channel_id)
        return True
