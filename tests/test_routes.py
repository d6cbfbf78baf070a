"""
Tests for HTTP API

Routes are exercised with the services swapped out via dependency
overrides.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from fastapi.testclient import TestClient

from insight_feed.core.exceptions import (
    DuplicateError,
    NotFoundError,
    PublishInProgressError,
    ValidationError,
)
from insight_feed.core.rate_limit import limiter
from insight_feed.main import app
from insight_feed.models.publish import PublishResult, PublishState, PublishStep, PublishStepRecord, StepOutcome
from insight_feed.models.response import FetchSummary
from insight_feed.services.channel_service import get_channel_service
from insight_feed.services.publisher import get_publisher
from insight_feed.services.quota_manager import QuotaManager

from conftest import make_channel


@pytest.fixture
def channel_service():
    mock = MagicMock()
    mock.list_channels.return_value = [make_channel(1), make_channel(2)]
    mock.add_channel = AsyncMock(return_value=make_channel(3, handle="@demo"))
    return mock


@pytest.fixture
def publisher():
    mock = MagicMock()
    mock.publish = AsyncMock(return_value=PublishResult(
        success=True, state=PublishState.DONE, message="Deployed successfully",
        log=[PublishStepRecord(step=PublishStep.PUSH, outcome=StepOutcome.OK, detail="Successfully pushed to remote")],
    ))
    mock.refresh = AsyncMock(return_value=FetchSummary(
        success=True, message="Collected 2 videos", days=7, total_videos=2,
        channels_total=1, channels_succeeded=1, category_stats={"AI": 2}, saved=True,
    ))
    return mock


@pytest.fixture
def client(channel_service, publisher, monkeypatch):
    monkeypatch.setattr(limiter, "enabled", False)
    app.dependency_overrides[get_channel_service] = lambda: channel_service
    app.dependency_overrides[get_publisher] = lambda: publisher
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/").json()["service"] == "Insight Feed Backend"


def test_list_channels(client):
    response = client.get("/api/channels")

    assert response.status_code == 200
    assert [c["handle"] for c in response.json()] == ["@channel1", "@channel2"]


def test_add_channel(client, channel_service):
    response = client.post("/api/channels", json={"url": "https://www.youtube.com/@demo"})

    assert response.status_code == 201
    assert response.json()["handle"] == "@demo"
    channel_service.add_channel.assert_awaited_once_with("https://www.youtube.com/@demo")


@pytest.mark.parametrize("error,status,kind", [
    (ValidationError("Invalid YouTube channel URL or handle: ???"), 400, "validation_error"),
    (NotFoundError("Channel", "@ghost"), 404, "not_found"),
    (DuplicateError("Channel", "UCxyz"), 409, "duplicate"),
])
def test_add_channel_errors(client, channel_service, error, status, kind):
    channel_service.add_channel.side_effect = error

    response = client.post("/api/channels", json={"url": "@whatever"})

    assert response.status_code == status
    body = response.json()
    assert body["error"] is True
    assert body["kind"] == kind
    assert body["message"] == error.message


def test_add_channel_requires_url(client):
    assert client.post("/api/channels", json={}).status_code == 422


def test_remove_channel(client, channel_service):
    response = client.delete(f"/api/channels/{make_channel(1).id}")

    assert response.status_code == 200
    assert response.json()["success"] is True
    channel_service.remove_channel.assert_called_once_with(make_channel(1).id)


def test_remove_unknown_channel(client, channel_service):
    channel_service.remove_channel.side_effect = NotFoundError("Channel", "UCmissing")

    assert client.delete("/api/channels/UCmissing").status_code == 404


def test_fetch(client, publisher):
    response = client.post("/api/fetch", json={"days": 14})

    assert response.status_code == 200
    body = response.json()
    assert body["totalVideos"] == 2
    assert body["categoryStats"] == {"AI": 2}
    publisher.refresh.assert_awaited_once_with(14)


def test_fetch_without_body_uses_default(client, publisher):
    assert client.post("/api/fetch").status_code == 200
    publisher.refresh.assert_awaited_once_with(None)


def test_fetch_all_channels_failed(client, publisher):
    publisher.refresh.return_value = FetchSummary(
        success=False, message="All 1 channels failed; existing feed left unchanged",
        days=7, channels_total=1, channels_failed=1,
    )

    response = client.post("/api/fetch", json={"days": 7})

    assert response.status_code == 502
    assert response.json()["channelsFailed"] == 1


def test_fetch_invalid_days(client, publisher):
    publisher.refresh.side_effect = ValidationError("Days must be a number between 1 and 365")

    response = client.post("/api/fetch", json={"days": 0})

    assert response.status_code == 400


def test_deploy(client, publisher):
    response = client.post("/api/deploy", json={"days": 7})

    assert response.status_code == 200
    assert response.json()["state"] == "done"
    publisher.publish.assert_awaited_once_with(7)


def test_deploy_failure_returns_log(client, publisher):
    publisher.publish.return_value = PublishResult(
        success=False, state=PublishState.FAILED, message="Deployment failed: Push failed: denied",
        log=[PublishStepRecord(step=PublishStep.PUSH, outcome=StepOutcome.FAILED, detail="Push failed: denied")],
    )

    response = client.post("/api/deploy", json={"days": 7})

    assert response.status_code == 500
    body = response.json()
    assert body["state"] == "failed"
    assert body["log"][0]["step"] == "push"


def test_deploy_in_progress(client, publisher):
    publisher.publish.side_effect = PublishInProgressError()

    response = client.post("/api/deploy", json={"days": 7})

    assert response.status_code == 409
    assert response.json()["kind"] == "publish_in_progress"


def test_quota(client):
    catalog = MagicMock()
    catalog.quota_manager = QuotaManager(daily_limit=100)
    catalog.quota_manager.record_usage(2)

    with patch("insight_feed.routers.publish.get_catalog_client", return_value=catalog):
        response = client.get("/api/quota")

    assert response.status_code == 200
    assert response.json()["used"] == 2
    assert response.json()["remaining"] == 98


def test_scheduler_status(client):
    response = client.get("/scheduler/status")

    assert response.status_code == 200
    assert "enabled" in response.json()
    assert "jobs" in response.json()


def test_fetch_while_publish_running(client, publisher):
    publisher.refresh.side_effect = PublishInProgressError()

    response = client.post("/api/fetch", json={"days": 7})

    assert response.status_code == 409
    assert response.json()["kind"] == "publish_in_progress"
