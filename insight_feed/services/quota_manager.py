"""
Quota Manager Service

Tracks YouTube Data API usage to avoid burning the daily quota.
"""

from datetime import datetime, timezone
from typing import Dict, Optional

from ..config import get_settings
from ..core.logging import get_logger
from ..core.exceptions import QuotaExceededError

logger = get_logger(__name__)


class QuotaManager:
    """
    In-process daily quota tracking.

    YouTube Data API: 10,000 units/day
    - search.list: 100 units
    - channels.list: 1 unit
    - playlistItems.list: 1 unit

    Resolving a channel's uploads playlist and listing it costs 2 units per
    channel, against 100+ for a search-based fetch.
    """

    API_NAME = "youtube"
    COSTS = {"channels": 1, "playlistItems": 1, "search": 100}

    def __init__(self, daily_limit: Optional[int] = None):
        if daily_limit is None:
            daily_limit = get_settings().youtube_daily_quota_limit
        self.daily_limit = daily_limit
        self._usage: Dict[str, int] = {}

    @staticmethod
    def _get_today_key() -> str:
        return datetime.now(timezone.utc).strftime("%Y-%m-%d")

    @classmethod
    def cost_of(cls, endpoint: str) -> int:
        return cls.COSTS.get(endpoint, 1)

    def get_usage(self) -> int:
        """Units used today."""
        return self._usage.get(self._get_today_key(), 0)

    def can_make_request(self, cost: int = 1) -> bool:
        return (self.get_usage() + cost) <= self.daily_limit

    def record_usage(self, cost: int = 1):
        key = self._get_today_key()
        # Only today's counter is kept
        self._usage = {key: self._usage.get(key, 0) + cost}

    def require_quota(self, cost: int = 1):
        """
        Check quota and raise exception if exceeded.

        Use this before making API calls.
        """
        if not self.can_make_request(cost):
            logger.error(
                "quota_exceeded",
                api=self.API_NAME,
                current=self.get_usage(),
                limit=self.daily_limit,
                requested=cost
            )
            raise QuotaExceededError(self.API_NAME, "local daily budget reached")

    def get_remaining(self) -> int:
        return max(0, self.daily_limit - self.get_usage())

    def get_status(self) -> dict:
        used = self.get_usage()
        return {
            "api": self.API_NAME,
            "date": self._get_today_key(),
            "used": used,
            "limit": self.daily_limit,
            "remaining": max(0, self.daily_limit - used),
            "percentage": round((used / self.daily_limit) * 100, 1) if self.daily_limit else 100.0,
        }
