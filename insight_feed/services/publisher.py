"""
Publisher

Fetch → check changes → stage → commit → push, as an explicit state
machine. Each state handler performs its step and returns
``(next_state, PublishStepRecord)``; the driver loops until a terminal
state and returns the full log whatever the outcome.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from ..config import Settings, get_settings
from ..core.exceptions import (
    InsightFeedException,
    PublishInProgressError,
    VersionControlStateError,
)
from ..core.logging import get_logger
from ..core.validation import validate_days
from ..models.publish import (
    PublishResult,
    PublishState,
    PublishStep,
    PublishStepRecord,
    StepOutcome,
)
from ..models.response import FetchSummary
from .feed_service import FeedService, get_feed_service
from .git_repository import GitRepository

logger = get_logger(__name__)

COMMIT_MESSAGE_PREFIX = "Auto-update content"

Transition = Tuple[PublishState, PublishStepRecord]

# Step reported when a state's handler blows up
STATE_STEPS = {
    PublishState.IDLE: PublishStep.FETCH,
    PublishState.FETCHING: PublishStep.FETCH,
    PublishState.CHECKING_CHANGES: PublishStep.CHECK_CHANGES,
    PublishState.STAGING: PublishStep.STAGE,
    PublishState.COMMITTING: PublishStep.COMMIT,
    PublishState.PUSHING: PublishStep.PUSH,
}

TERMINAL_MESSAGES = {
    PublishState.DONE: "Deployed successfully",
    PublishState.NO_CHANGES: "No changes to deploy - video and channel data unchanged",
    PublishState.NOTHING_TO_COMMIT: "No changes to deploy - files are already up to date",
    PublishState.FAILED: "Deployment failed",
}


@dataclass
class PublishRun:
    """Mutable scratch state for one invocation."""
    days: int
    summary: Optional[FetchSummary] = None
    output: Optional[str] = None
    error: Optional[str] = None


def _record(step: PublishStep, outcome: StepOutcome, detail: str) -> PublishStepRecord:
    return PublishStepRecord(step=step, outcome=outcome, detail=detail)


class Publisher:
    """
    One publish or fetch-only refresh at a time; a concurrent request is
    rejected with PublishInProgressError. Data written by the fetch step is never rolled
    back when a later step fails.
    """

    def __init__(
        self,
        feed_service: Optional[FeedService] = None,
        git: Optional[GitRepository] = None,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.settings = settings or get_settings()
        self.feed_service = feed_service or get_feed_service()
        self.git = git or GitRepository(self.settings.repo_dir)
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._lock = asyncio.Lock()
        self._handlers: Dict[PublishState, Callable[[PublishRun], Awaitable[Transition]]] = {
            PublishState.IDLE: self._start,
            PublishState.FETCHING: self._fetch,
            PublishState.CHECKING_CHANGES: self._check_changes,
            PublishState.STAGING: self._stage,
            PublishState.COMMITTING: self._commit,
            PublishState.PUSHING: self._push,
        }

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    @property
    def managed_paths(self) -> List[str]:
        """Data files as git pathspecs, relative to the working tree when inside it."""
        repo_dir = Path(self.git.repo_dir).resolve()
        paths = []
        for path in (self.settings.channels_path, self.settings.videos_path):
            path = Path(path).resolve()
            paths.append(str(path.relative_to(repo_dir)) if path.is_relative_to(repo_dir) else str(path))
        return paths

    def commit_message(self) -> str:
        """System-generated; user text never reaches the commit message."""
        return f"{COMMIT_MESSAGE_PREFIX}: {self._clock():%Y-%m-%d %H:%M:%S}"

    async def publish(self, days: Any = None) -> PublishResult:
        """
        Run the full publish workflow.

        Raises:
            ValidationError: days outside 1..365 (before anything runs)
            PublishInProgressError: another run is active
        """
        window_days = validate_days(self.settings.default_days if days is None else days)

        if self._lock.locked():
            raise PublishInProgressError()

        async with self._lock:
            return await self.run(PublishRun(days=window_days))

    async def refresh(self, days: Any = None) -> FetchSummary:
        """
        Fetch-only refresh under the same single-flight lock as publish,
        so the feed file never has two writers.

        Raises:
            ValidationError: days outside 1..365
            PublishInProgressError: a publish or refresh is active
        """
        window_days = validate_days(self.settings.default_days if days is None else days)

        if self._lock.locked():
            raise PublishInProgressError()

        async with self._lock:
            _, summary = await self.feed_service.refresh(window_days)
        return summary

    async def run(self, run: PublishRun) -> PublishResult:
        """Drive the state machine from IDLE to a terminal state."""
        state = PublishState.IDLE
        log: List[PublishStepRecord] = []
        logger.info("publish_started", days=run.days)

        while not state.is_terminal:
            state, record = await self.transition(state, run)
            log.append(record)
            logger.info(
                "publish_step",
                step=record.step,
                outcome=record.outcome,
                detail=record.detail,
                next_state=state.value,
            )

        message = TERMINAL_MESSAGES[state]
        if state == PublishState.FAILED and run.error:
            message = f"{message}: {run.error}"

        logger.info("publish_finished", state=state.value, success=state.is_success)
        return PublishResult(
            success=state.is_success,
            state=state,
            message=message,
            log=log,
            output=run.output,
            summary=run.summary,
        )

    async def transition(self, state: PublishState, run: PublishRun) -> Transition:
        """Perform the step for `state`. Unexpected errors land in FAILED."""
        handler = self._handlers[state]
        try:
            return await handler(run)
        except InsightFeedException as e:
            run.error = e.message
        except Exception as e:
            logger.error("publish_step_crashed", state=state.value, error=str(e), exc_info=e)
            run.error = str(e) if not self.settings.is_production else "internal error"
        return PublishState.FAILED, _record(STATE_STEPS[state], StepOutcome.FAILED, run.error)

    async def _start(self, run: PublishRun) -> Transition:
        return PublishState.FETCHING, _record(
            PublishStep.FETCH, StepOutcome.OK, f"Fetching videos from the last {run.days} days"
        )

    async def _fetch(self, run: PublishRun) -> Transition:
        _, summary = await self.feed_service.refresh(run.days)
        run.summary = summary

        if not summary.success:
            run.error = summary.message
            return PublishState.FAILED, _record(PublishStep.FETCH, StepOutcome.FAILED, summary.message)

        if summary.channels_failed:
            return PublishState.CHECKING_CHANGES, _record(
                PublishStep.FETCH,
                StepOutcome.WARNING,
                f"{summary.message}; {summary.channels_failed} channel(s) failed",
            )
        return PublishState.CHECKING_CHANGES, _record(PublishStep.FETCH, StepOutcome.OK, summary.message)

    async def _check_changes(self, run: PublishRun) -> Transition:
        result = await self.git.status_porcelain(self.managed_paths)
        if not result.ok:
            raise VersionControlStateError(f"Failed to check git status: {result.output}", result.output)

        if not result.stdout.strip():
            return PublishState.NO_CHANGES, _record(
                PublishStep.CHECK_CHANGES, StepOutcome.SKIPPED, "No changes in data files"
            )
        return PublishState.STAGING, _record(
            PublishStep.CHECK_CHANGES, StepOutcome.OK, f"Changes in data files:\n{result.stdout.rstrip()}"
        )

    async def _stage(self, run: PublishRun) -> Transition:
        result = await self.git.add(self.managed_paths)
        if not result.ok:
            raise VersionControlStateError(f"Failed to stage data files: {result.output}", result.output)
        return PublishState.COMMITTING, _record(PublishStep.STAGE, StepOutcome.OK, "Files staged")

    async def _commit(self, run: PublishRun) -> Transition:
        message = self.commit_message()
        result = await self.git.commit(message)

        if result.ok:
            return PublishState.PUSHING, _record(PublishStep.COMMIT, StepOutcome.OK, f"Committed: {message}")

        if GitRepository.is_nothing_to_commit(result):
            return PublishState.NOTHING_TO_COMMIT, _record(
                PublishStep.COMMIT, StepOutcome.SKIPPED, "No actual changes in files (already up to date)"
            )
        raise VersionControlStateError(f"Commit failed: {result.output}", result.output)

    async def _push(self, run: PublishRun) -> Transition:
        result = await self.git.push(self.settings.git_push_remote, self.settings.git_push_branch)
        run.output = result.output
        if not result.ok:
            raise VersionControlStateError(f"Push failed: {result.output}", result.output)
        return PublishState.DONE, _record(PublishStep.PUSH, StepOutcome.OK, "Successfully pushed to remote")


# Singleton instance
_publisher: Optional[Publisher] = None


def get_publisher() -> Publisher:
    """Get singleton Publisher instance."""
    global _publisher
    if _publisher is None:
        _publisher = Publisher()
    return _publisher
