"""
Refresh Job

Fetch-only feed refresh for cron/CLI use:

    python -m insight_feed.jobs.refresh [days]

Exit code is non-zero when the run failed or every channel errored.
"""

import asyncio
import sys
from typing import Any, Optional

from ..core.exceptions import InsightFeedException
from ..core.logging import get_logger, setup_logging
from ..models.response import FetchSummary
from ..services.feed_service import get_feed_service

logger = get_logger(__name__)


async def run_refresh_job(days: Any = None) -> FetchSummary:
    """Entry point for scheduled job."""
    service = get_feed_service()
    _, summary = await service.refresh(days)
    return summary


def main(argv: Optional[list] = None) -> int:
    setup_logging()
    args = sys.argv[1:] if argv is None else argv
    days = args[0] if args else None

    try:
        summary = asyncio.run(run_refresh_job(days))
    except InsightFeedException as e:
        logger.error("refresh_job_failed", kind=e.kind, error=e.message)
        return 1

    print(summary.message)
    for name, count in summary.category_stats.items():
        print(f"  {name}: {count}")
    return 0 if summary.success else 1


if __name__ == "__main__":
    sys.exit(main())
