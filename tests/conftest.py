"""
Pytest Fixtures

Shared fakes and fixtures for testing.
"""

import pytest
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from insight_feed.config import Settings
from insight_feed.core.exceptions import TransientNetworkError
from insight_feed.models.channel import Channel
from insight_feed.models.taxonomy import Taxonomy
from insight_feed.services.categorizer import Categorizer
from insight_feed.services.channel_registry import ChannelRegistry
from insight_feed.services.storage import JsonFileStore

NOW = datetime(2025, 3, 10, 12, 0, 0, tzinfo=timezone.utc)


def make_channel(n: int, handle: Optional[str] = None) -> Channel:
    """Channel with a well-formed UC id."""
    channel_id = f"UC{n:022d}"
    return Channel(
        id=channel_id,
        title=f"Channel {n}",
        handle=handle or f"@channel{n}",
        thumbnail=f"https://yt3.example/{n}.jpg",
    )


def make_playlist_item(
    video_id: str,
    title: str,
    published_at: datetime,
    channel_title: str = "Channel",
    description: str = "",
) -> Dict[str, Any]:
    """Raw playlistItems.list item as returned by the Data API."""
    return {
        "snippet": {
            "publishedAt": published_at.isoformat().replace("+00:00", "Z"),
            "title": title,
            "description": description,
            "channelTitle": channel_title,
            "thumbnails": {
                "default": {"url": f"https://i.ytimg.com/vi/{video_id}/default.jpg"},
                "high": {"url": f"https://i.ytimg.com/vi/{video_id}/hqdefault.jpg"},
            },
            "resourceId": {"kind": "youtube#video", "videoId": video_id},
        }
    }


class FakeCatalog:
    """
    In-memory stand-in for YouTubeCatalogClient.

    `items` maps channel id to playlist items; `failures` maps channel id
    to the exception raised while resolving its uploads playlist.
    """

    def __init__(
        self,
        items: Optional[Dict[str, List[Dict[str, Any]]]] = None,
        failures: Optional[Dict[str, Exception]] = None,
        configured: bool = True,
    ):
        self.items = items or {}
        self.failures = failures or {}
        self.configured = configured
        self.playlist_calls: List[str] = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def resolve_uploads_playlist(self, channel_id: str) -> str:
        self.playlist_calls.append(channel_id)
        if channel_id in self.failures:
            raise self.failures[channel_id]
        return "UU" + channel_id[2:]

    async def list_recent_items(self, playlist_id: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        items = self.items.get("UC" + playlist_id[2:], [])
        return items[:limit] if limit else items


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointed at a temporary repository."""
    return Settings(
        environment="development",
        repo_dir=tmp_path,
        youtube_api_key="test-key",
        youtube_daily_quota_limit=10000,
        max_retries=3,
    )


@pytest.fixture
def taxonomy() -> Taxonomy:
    return Taxonomy.from_mapping({
        "AI": ["ai", "인공지능"],
        "Coding": ["python", "vibe coding"],
        "News": ["release", "뉴스"],
    })


@pytest.fixture
def categorizer(taxonomy) -> Categorizer:
    return Categorizer(taxonomy)


@pytest.fixture
def channel_store(tmp_path) -> JsonFileStore:
    return JsonFileStore(tmp_path / "src" / "data" / "channels.json")


@pytest.fixture
def video_store(tmp_path) -> JsonFileStore:
    return JsonFileStore(tmp_path / "src" / "data" / "videos.json")


@pytest.fixture
def registry(channel_store) -> ChannelRegistry:
    return ChannelRegistry(channel_store)


@pytest.fixture
def flaky_error() -> Exception:
    return TransientNetworkError("YouTube channels request failed after 3 attempts: HTTP 503")


def days_ago(days: float, now: datetime = NOW) -> datetime:
    return now - timedelta(days=days)
