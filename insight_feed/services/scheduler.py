"""
Background Job Scheduler

Runs the publish workflow on a cron schedule using APScheduler.
Disabled unless AUTO_PUBLISH_ENABLED is set.
"""

from datetime import datetime, timezone
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from ..config import get_settings
from ..core.exceptions import PublishInProgressError
from ..core.logging import get_logger
from ..models.publish import PublishResult

logger = get_logger(__name__)

# Global scheduler instance
_scheduler: Optional[AsyncIOScheduler] = None


def get_scheduler() -> AsyncIOScheduler:
    """Get or create the scheduler instance."""
    global _scheduler
    if _scheduler is None:
        _scheduler = AsyncIOScheduler(timezone=timezone.utc)
    return _scheduler


class SchedulerService:
    """
    Manages the scheduled publish job.

    The job shares the Publisher's single-flight lock with the HTTP
    endpoint, so a scheduled run never interleaves with a manual one.
    """

    def __init__(self, scheduler: Optional[AsyncIOScheduler] = None):
        self.settings = get_settings()
        self.scheduler = scheduler or get_scheduler()
        self._publish_job_id = "scheduled_publish"
        self.last_result: Optional[PublishResult] = None
        self.last_run_at: Optional[datetime] = None

    async def _run_publish(self) -> Optional[PublishResult]:
        """Execute the publish job. Errors are logged, never raised."""
        from .publisher import get_publisher

        logger.info("scheduler_job_started", job="publish")
        self.last_run_at = datetime.now(timezone.utc)
        try:
            result = await get_publisher().publish(self.settings.auto_publish_days)
        except PublishInProgressError:
            logger.warning("scheduler_job_skipped", job="publish", reason="publish already running")
            return None
        except Exception as e:
            logger.error("scheduler_job_failed", job="publish", error=str(e))
            return None

        self.last_result = result
        log_method = logger.info if result.success else logger.error
        log_method("scheduler_job_completed", job="publish", state=result.state, message=result.message)
        return result

    def setup_jobs(self):
        """Configure the publish job."""
        self.scheduler.add_job(
            self._run_publish,
            trigger=CronTrigger.from_crontab(self.settings.auto_publish_cron, timezone=timezone.utc),
            id=self._publish_job_id,
            name="Scheduled Publish",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        logger.info("scheduler_jobs_configured", publish_schedule=self.settings.auto_publish_cron)

    def start(self):
        """Start the scheduler."""
        if not self.scheduler.running:
            self.setup_jobs()
            self.scheduler.start()
            logger.info("scheduler_started")

    def stop(self):
        """Stop the scheduler gracefully."""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("scheduler_stopped")

    def get_job_status(self) -> dict:
        """Get status of scheduled jobs and the last run."""
        jobs = []
        for job in self.scheduler.get_jobs():
            jobs.append({
                "id": job.id,
                "name": job.name,
                "next_run": job.next_run_time.isoformat() if job.next_run_time else None,
            })

        return {
            "enabled": self.settings.auto_publish_enabled,
            "running": self.scheduler.running,
            "jobs": jobs,
            "last_run_at": self.last_run_at.isoformat() if self.last_run_at else None,
            "last_state": self.last_result.state if self.last_result else None,
            "current_time": datetime.now(timezone.utc).isoformat(),
        }

    async def trigger_publish_now(self) -> Optional[PublishResult]:
        """Manually trigger the publish job."""
        logger.info("manual_trigger", job="publish")
        return await self._run_publish()


# Singleton instance
_scheduler_service: Optional[SchedulerService] = None


def get_scheduler_service() -> SchedulerService:
    """Get singleton SchedulerService instance."""
    global _scheduler_service
    if _scheduler_service is None:
        _scheduler_service = SchedulerService()
    return _scheduler_service
