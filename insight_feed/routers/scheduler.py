"""
Scheduler API Router

Endpoints for monitoring and manually triggering the scheduled publish job.
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from ..core.logging import get_logger
from ..services.scheduler import get_scheduler_service

logger = get_logger(__name__)

router = APIRouter(prefix="/scheduler", tags=["scheduler"])


@router.get("/status")
async def get_scheduler_status():
    """
    Get current scheduler status and job information.

    Returns:
        - Whether auto-publish is enabled and the scheduler running
        - Jobs with next run times
        - Last run time and terminal state
    """
    service = get_scheduler_service()
    return service.get_job_status()


@router.post("/trigger")
async def trigger_publish():
    """Run the scheduled publish job now, skipping if a publish is already running."""
    logger.info("manual_publish_trigger")

    service = get_scheduler_service()
    result = await service.trigger_publish_now()

    return {
        "success": bool(result and result.success),
        "skipped": result is None,
        "state": result.state if result else None,
        "message": result.message if result else "Publish skipped (already running or failed to start)",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
