"""
Feed Service

Refreshes videos.json from the registered channels (fetch-only workflow).
"""

from typing import Any, Optional, Tuple

from ..config import Settings, get_settings
from ..core.exceptions import InsightFeedException
from ..core.logging import get_logger
from ..core.validation import validate_days
from ..models.response import ChannelReport, FetchSummary
from .aggregator import AggregateResult, Aggregator
from .categorizer import Categorizer
from .channel_registry import ChannelRegistry
from .storage import JsonFileStore
from .taxonomy import load_taxonomy
from .youtube_api import get_catalog_client

logger = get_logger(__name__)


class FeedService:
    """
    Runs the Aggregator over the registry and persists the result.

    The feed is fully replaced on every successful run. A run where every
    channel failed leaves the previous feed untouched.
    """

    def __init__(
        self,
        registry: Optional[ChannelRegistry] = None,
        aggregator: Optional[Aggregator] = None,
        video_store: Optional[JsonFileStore] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.registry = registry or ChannelRegistry(JsonFileStore(self.settings.channels_path))
        self.video_store = video_store or JsonFileStore(self.settings.videos_path)
        if aggregator is None:
            aggregator = Aggregator(
                catalog=get_catalog_client(),
                categorizer=Categorizer(load_taxonomy(self.settings.categories_path)),
            )
        self.aggregator = aggregator

    async def aggregate(self, days: Any = None) -> AggregateResult:
        """
        Validate the window and run the Aggregator.

        Raises:
            ValidationError: days outside 1..365
            InsightFeedException: the catalog is not configured or the
                registry cannot be enumerated
        """
        window_days = validate_days(self.settings.default_days if days is None else days)

        if not self.aggregator.catalog.is_configured:
            raise InsightFeedException(
                "YouTube API key not found. Set YOUTUBE_API_KEY in the environment or .env file."
            )

        channels = self.registry.list()
        return await self.aggregator.run(channels, window_days)

    async def refresh(self, days: Any = None) -> Tuple[AggregateResult, FetchSummary]:
        """Aggregate, persist and summarise."""
        result = await self.aggregate(days)

        saved = False
        if result.all_failed:
            message = (
                f"All {result.channels_total} channels failed; existing feed left unchanged"
            )
            logger.error("fetch_all_channels_failed", channels=result.channels_total)
        else:
            self.video_store.save([video.to_feed_dict() for video in result.videos])
            saved = True
            if not result.results:
                message = "No channels registered; feed cleared"
            else:
                message = (
                    f"Collected {len(result.videos)} videos from "
                    f"{result.channels_succeeded}/{result.channels_total} channels "
                    f"(last {result.window_days} days)"
                )

        summary = self.summarize(result, message=message, saved=saved)
        logger.info(
            "fetch_summary",
            total_videos=summary.total_videos,
            channels_succeeded=summary.channels_succeeded,
            channels_failed=summary.channels_failed,
            saved_to=str(self.video_store.path) if saved else None,
            category_stats=summary.category_stats,
        )
        return result, summary

    @staticmethod
    def summarize(result: AggregateResult, message: str, saved: bool) -> FetchSummary:
        stats = dict(sorted(result.histogram.items(), key=lambda kv: (-kv[1], kv[0])))
        return FetchSummary(
            success=not result.all_failed,
            message=message,
            days=result.window_days,
            total_videos=len(result.videos),
            channels_total=result.channels_total,
            channels_succeeded=result.channels_succeeded,
            channels_failed=result.channels_failed,
            category_stats=stats,
            channels=[
                ChannelReport(
                    channel_id=r.channel.id,
                    label=r.channel.label,
                    outcome=r.outcome,
                    video_count=len(r.videos),
                    error=r.error,
                )
                for r in result.results
            ],
            saved=saved,
        )


# Singleton instance
_feed_service: Optional[FeedService] = None


def get_feed_service() -> FeedService:
    """Get singleton FeedService instance."""
    global _feed_service
    if _feed_service is None:
        _feed_service = FeedService()
    return _feed_service
