"""
Tests for the refresh job entry point
"""

from unittest.mock import AsyncMock, MagicMock, patch

from insight_feed.core.exceptions import ValidationError
from insight_feed.jobs.refresh import main
from insight_feed.models.response import FetchSummary


def make_service(success=True):
    service = MagicMock()
    service.refresh = AsyncMock(return_value=(None, FetchSummary(
        success=success, message="Collected 1 videos", days=14, category_stats={"AI": 1},
    )))
    return service


def test_main_passes_days_argument(capsys):
    service = make_service()

    with patch("insight_feed.jobs.refresh.get_feed_service", return_value=service):
        assert main(["14"]) == 0

    service.refresh.assert_awaited_once_with("14")
    assert "AI: 1" in capsys.readouterr().out


def test_main_without_argument_uses_default():
    service = make_service()

    with patch("insight_feed.jobs.refresh.get_feed_service", return_value=service):
        assert main([]) == 0

    service.refresh.assert_awaited_once_with(None)


def test_main_exit_code_on_failure():
    service = make_service(success=False)

    with patch("insight_feed.jobs.refresh.get_feed_service", return_value=service):
        assert main(["7"]) == 1


def test_main_invalid_days():
    service = MagicMock()
    service.refresh = AsyncMock(side_effect=ValidationError("Days must be a number between 1 and 365"))

    with patch("insight_feed.jobs.refresh.get_feed_service", return_value=service):
        assert main(["0"]) == 1
