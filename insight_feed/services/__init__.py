"""Services for channel management, fetching and publishing."""

from .storage import JsonFileStore
from .categorizer import Categorizer
from .quota_manager import QuotaManager
from .youtube_api import YouTubeCatalogClient, get_catalog_client
from .channel_registry import ChannelRegistry
from .channel_service import ChannelService, get_channel_service
from .aggregator import Aggregator, AggregateResult, ChannelFetchResult
from .feed_service import FeedService, get_feed_service
from .git_repository import GitRepository, GitResult
from .publisher import Publisher, get_publisher
from .scheduler import SchedulerService, get_scheduler_service

__all__ = [
    "JsonFileStore",
    "Categorizer",
    "QuotaManager",
    "YouTubeCatalogClient",
    "get_catalog_client",
    "ChannelRegistry",
    "ChannelService",
    "get_channel_service",
    "Aggregator",
    "AggregateResult",
    "ChannelFetchResult",
    "FeedService",
    "get_feed_service",
    "GitRepository",
    "GitResult",
    "Publisher",
    "get_publisher",
    "SchedulerService",
    "get_scheduler_service",
]
