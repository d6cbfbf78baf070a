"""
Tests for Feed Service

Persistence rules of a fetch-only refresh.
"""

import json
from datetime import datetime, timedelta, timezone

import pytest

from insight_feed.core.exceptions import InsightFeedException, ValidationError
from insight_feed.services.aggregator import Aggregator
from insight_feed.services.feed_service import FeedService

from conftest import FakeCatalog, make_channel, make_playlist_item


def recent(days: float) -> datetime:
    return datetime.now(timezone.utc) - timedelta(days=days)


@pytest.fixture
def catalog():
    return FakeCatalog()


@pytest.fixture
def service(registry, video_store, settings, catalog, categorizer):
    aggregator = Aggregator(catalog=catalog, categorizer=categorizer, max_results=20, concurrency=4)
    return FeedService(registry=registry, aggregator=aggregator, video_store=video_store, settings=settings)


@pytest.mark.asyncio
async def test_refresh_writes_feed(service, registry, catalog, video_store):
    channel = make_channel(1)
    registry.add(channel)
    catalog.items[channel.id] = [
        make_playlist_item("v1", "Python AI agents", recent(1), channel_title="Channel 1"),
        make_playlist_item("v2", "Cooking vlog", recent(1)),
    ]

    result, summary = await service.refresh(7)

    assert summary.success is True
    assert summary.saved is True
    assert summary.total_videos == 1
    assert summary.category_stats == {"AI": 1, "Coding": 1}
    stored = json.loads(video_store.path.read_text(encoding="utf-8"))
    assert stored[0]["id"] == "v1"
    assert stored[0]["channelTitle"] == "Channel 1"
    assert stored[0]["category"] == "AI"
    assert stored[0]["categories"] == ["AI", "Coding"]
    assert stored[0]["thumbnailUrl"].endswith("hqdefault.jpg")
    assert "publishedAt" in stored[0]


@pytest.mark.asyncio
async def test_all_failed_keeps_previous_feed(service, registry, catalog, video_store, flaky_error):
    video_store.save([{"id": "previous"}])
    channel = make_channel(1)
    registry.add(channel)
    catalog.failures[channel.id] = flaky_error

    _, summary = await service.refresh(7)

    assert summary.success is False
    assert summary.saved is False
    assert summary.channels_failed == 1
    assert summary.channels[0].outcome == "error"
    assert video_store.load() == [{"id": "previous"}]


@pytest.mark.asyncio
async def test_partial_failure_still_saves(service, registry, catalog, video_store, flaky_error):
    good, bad = make_channel(1), make_channel(2)
    registry.add(good)
    registry.add(bad)
    catalog.items[good.id] = [make_playlist_item("v1", "AI", recent(1))]
    catalog.failures[bad.id] = flaky_error

    _, summary = await service.refresh(7)

    assert summary.success is True
    assert summary.channels_failed == 1
    assert summary.channels_succeeded == 1
    assert [v["id"] for v in video_store.load()] == ["v1"]


@pytest.mark.asyncio
async def test_no_channels_clears_feed(service, video_store):
    video_store.save([{"id": "previous"}])

    _, summary = await service.refresh(7)

    assert summary.success is True
    assert summary.message == "No channels registered; feed cleared"
    assert video_store.load() == []


@pytest.mark.asyncio
async def test_invalid_days(service, video_store):
    with pytest.raises(ValidationError):
        await service.refresh(400)
    assert not video_store.exists()


@pytest.mark.asyncio
async def test_unconfigured_catalog(service, catalog):
    catalog.configured = False

    with pytest.raises(InsightFeedException) as exc_info:
        await service.refresh(7)

    assert "YOUTUBE_API_KEY" in exc_info.value.message


@pytest.mark.asyncio
async def test_default_days_from_settings(service, settings):
    _, summary = await service.refresh()
    assert summary.days == settings.default_days
