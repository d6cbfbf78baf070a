"""
Aggregator

Fans out one fetch task per channel, then merges the results:
recency filter → classify → dedupe → sort → category histogram.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..config import get_settings
from ..core.logging import get_logger
from ..models.channel import Channel
from ..models.response import ChannelOutcome
from ..models.video import Video
from .categorizer import Categorizer
from .youtube_api import YouTubeCatalogClient, best_thumbnail

logger = get_logger(__name__)


@dataclass
class ChannelFetchResult:
    """Tagged per-channel result; failures are values, not exceptions."""
    channel: Channel
    outcome: ChannelOutcome
    videos: List[Video] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class AggregateResult:
    videos: List[Video]
    results: List[ChannelFetchResult]
    histogram: Dict[str, int]
    window_days: int

    @property
    def outcomes(self) -> Dict[str, ChannelOutcome]:
        return {r.channel.id: r.outcome for r in self.results}

    @property
    def channels_total(self) -> int:
        return len(self.results)

    @property
    def channels_failed(self) -> int:
        return sum(1 for r in self.results if r.outcome == ChannelOutcome.ERROR)

    @property
    def channels_succeeded(self) -> int:
        return self.channels_total - self.channels_failed

    @property
    def all_failed(self) -> bool:
        """Every channel errored (vacuously False when there are no channels)."""
        return bool(self.results) and self.channels_failed == len(self.results)


def parse_published_at(value: Optional[str]) -> Optional[datetime]:
    """Parse an RFC 3339 timestamp into an aware UTC datetime."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def recency_cutoff(window_days: int, now: Optional[datetime] = None) -> datetime:
    now = now or datetime.now(timezone.utc)
    return now - timedelta(days=window_days)


def playlist_item_to_video(item: Dict[str, Any], categories: List[str]) -> Optional[Video]:
    """Map a raw playlistItems snippet to a Video. None when unclassified or malformed."""
    if not categories:
        return None

    snippet = item.get("snippet") or {}
    video_id = (snippet.get("resourceId") or {}).get("videoId")
    published_at = parse_published_at(snippet.get("publishedAt"))
    if not video_id or published_at is None:
        return None

    return Video(
        id=video_id,
        title=snippet.get("title") or "",
        description=snippet.get("description") or "",
        thumbnail_url=best_thumbnail(snippet.get("thumbnails")),
        channel_title=snippet.get("channelTitle") or "",
        published_at=published_at,
        category=categories[0],
        categories=categories,
    )


def dedupe_videos(videos: Iterable[Video]) -> List[Video]:
    """Keep one record per id; the last occurrence wins."""
    by_id: Dict[str, Video] = {}
    for video in videos:
        by_id[video.id] = video
    return list(by_id.values())


def sort_newest_first(videos: Iterable[Video]) -> List[Video]:
    """Stable sort by publishedAt descending."""
    return sorted(videos, key=lambda v: v.published_at, reverse=True)


def category_histogram(videos: Iterable[Video]) -> Dict[str, int]:
    """Count each category of each video; totals may exceed the video count."""
    counts: Dict[str, int] = {}
    for video in videos:
        for name in video.categories:
            counts[name] = counts.get(name, 0) + 1
    return counts


class Aggregator:
    """
    Builds the feed from a set of channels.

    Each channel costs 2 quota units: uploads playlist lookup plus one
    playlistItems page.
    """

    def __init__(
        self,
        catalog: YouTubeCatalogClient,
        categorizer: Categorizer,
        max_results: Optional[int] = None,
        concurrency: Optional[int] = None,
    ):
        settings = get_settings()
        self.catalog = catalog
        self.categorizer = categorizer
        self.max_results = max_results or settings.max_results
        self.concurrency = max(1, concurrency or settings.fetch_concurrency)

    def _collect(self, items: List[Dict[str, Any]], cutoff: datetime) -> List[Video]:
        """Recency filter, classify and map; unclassified items are dropped."""
        videos: List[Video] = []
        for item in items:
            snippet = item.get("snippet") or {}
            published_at = parse_published_at(snippet.get("publishedAt"))
            if published_at is None or published_at < cutoff:
                continue

            categories = self.categorizer.classify(
                snippet.get("title") or "", snippet.get("description") or ""
            )
            video = playlist_item_to_video(item, categories)
            if video is not None:
                videos.append(video)
        return videos

    async def fetch_channel(
        self, channel: Channel, window_days: int, now: datetime
    ) -> ChannelFetchResult:
        """Fetch, filter and classify one channel. Never raises."""
        log = logger.bind(channel_id=channel.id, channel=channel.label)
        cutoff = recency_cutoff(window_days, now)
        try:
            playlist_id = await self.catalog.resolve_uploads_playlist(channel.id)
            items = await self.catalog.list_recent_items(playlist_id, self.max_results)
            videos = self._collect(items, cutoff)
        except Exception as e:
            log.warning("channel_fetch_failed", error=str(e))
            return ChannelFetchResult(channel=channel, outcome=ChannelOutcome.ERROR, error=str(e))

        if not videos:
            log.info("channel_no_recent_videos", scanned=len(items), days=window_days)
            return ChannelFetchResult(channel=channel, outcome=ChannelOutcome.EMPTY)

        log.info("channel_videos_fetched", count=len(videos), scanned=len(items), days=window_days)
        return ChannelFetchResult(channel=channel, outcome=ChannelOutcome.SUCCESS, videos=videos)

    async def run(
        self,
        channels: Sequence[Channel],
        window_days: int,
        now: Optional[datetime] = None,
    ) -> AggregateResult:
        """
        Fetch every channel in parallel and merge.

        Completion order never affects output: results are merged in channel
        order and then explicitly sorted.
        """
        now = now or datetime.now(timezone.utc)
        semaphore = asyncio.Semaphore(self.concurrency)

        async def bounded(channel: Channel) -> ChannelFetchResult:
            async with semaphore:
                return await self.fetch_channel(channel, window_days, now)

        logger.info("aggregation_started", channels=len(channels), days=window_days)
        results = await asyncio.gather(*(bounded(c) for c in channels))

        merged = [video for result in results for video in result.videos]
        videos = sort_newest_first(dedupe_videos(merged))
        aggregate = AggregateResult(
            videos=videos,
            results=list(results),
            histogram=category_histogram(videos),
            window_days=window_days,
        )

        logger.info(
            "aggregation_completed",
            videos=len(videos),
            duplicates_dropped=len(merged) - len(videos),
            channels_succeeded=aggregate.channels_succeeded,
            channels_failed=aggregate.channels_failed,
        )
        return aggregate
