"""
Channel Service

Inbound channel management: validate, resolve through the catalog and
register.
"""

import time
from typing import List, Optional

from ..config import Settings, get_settings
from ..core.exceptions import DuplicateError, NotFoundError, QuotaExceededError, ValidationError
from ..core.logging import get_logger
from ..core.validation import extract_handle, validate_channel_id, validate_channel_input
from ..models.channel import Channel
from .channel_registry import ChannelRegistry
from .youtube_api import YouTubeCatalogClient, get_catalog_client

logger = get_logger(__name__)


class ChannelService:
    """Add/remove/list subscribed channels."""

    def __init__(
        self,
        registry: Optional[ChannelRegistry] = None,
        catalog: Optional[YouTubeCatalogClient] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.registry = registry or ChannelRegistry()
        self.catalog = catalog or get_catalog_client()

    def list_channels(self) -> List[Channel]:
        return self.registry.list()

    @staticmethod
    def placeholder_channel(handle: str) -> Channel:
        """Clearly labelled stand-in used when quota blocks a lookup outside production."""
        return Channel(
            id=f"mock-{int(time.time() * 1000)}",
            title=f"Mock Channel ({handle})",
            handle=handle,
            thumbnail="",
        )

    async def add_channel(self, url_or_handle: str) -> Channel:
        """
        Resolve a channel URL/handle and add it to the registry.

        Raises:
            ValidationError: malformed input (before any network call)
            NotFoundError: handle not resolvable upstream
            QuotaExceededError: provider quota rejection (production, or
                when placeholder channels are disabled)
            DuplicateError: channel already registered
        """
        handle = extract_handle(validate_channel_input(url_or_handle))
        logger.info("channel_add_requested", handle=handle)

        try:
            channel = await self.catalog.resolve_handle(handle)
        except QuotaExceededError as e:
            if not self.settings.mock_channels_enabled:
                raise
            channel = self.placeholder_channel(handle)
            logger.warning(
                "channel_placeholder_registered",
                handle=handle,
                channel_id=channel.id,
                reason=e.message,
            )

        if not self.registry.add(channel):
            raise DuplicateError("Channel", channel.id)
        return channel

    def remove_channel(self, channel_id: str) -> None:
        """
        Raises:
            ValidationError: malformed channel id
            NotFoundError: no channel with that id is registered
        """
        if not validate_channel_id(channel_id):
            raise ValidationError(f"Invalid channel ID: {channel_id}")
        if not self.registry.remove(channel_id):
            raise NotFoundError("Channel", channel_id)


# Singleton instance
_channel_service: Optional[ChannelService] = None


def get_channel_service() -> ChannelService:
    """Get singleton ChannelService instance."""
    global _channel_service
    if _channel_service is None:
        _channel_service = ChannelService()
    return _channel_service
