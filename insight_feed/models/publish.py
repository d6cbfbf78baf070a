"""
Publish Run Models

States, step records and the result returned by one publish invocation.
"""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from .response import FetchSummary


class PublishState(str, Enum):
    """Publisher state machine states."""
    IDLE = "idle"
    FETCHING = "fetching"
    CHECKING_CHANGES = "checking_changes"
    STAGING = "staging"
    COMMITTING = "committing"
    PUSHING = "pushing"
    # Terminal
    DONE = "done"
    NO_CHANGES = "no_changes"
    NOTHING_TO_COMMIT = "nothing_to_commit"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATES

    @property
    def is_success(self) -> bool:
        return self in (PublishState.DONE, PublishState.NO_CHANGES, PublishState.NOTHING_TO_COMMIT)


TERMINAL_STATES = frozenset({
    PublishState.DONE,
    PublishState.NO_CHANGES,
    PublishState.NOTHING_TO_COMMIT,
    PublishState.FAILED,
})


class PublishStep(str, Enum):
    FETCH = "fetch"
    CHECK_CHANGES = "check_changes"
    STAGE = "stage"
    COMMIT = "commit"
    PUSH = "push"


class StepOutcome(str, Enum):
    OK = "ok"
    WARNING = "warning"
    SKIPPED = "skipped"
    FAILED = "failed"


class PublishStepRecord(BaseModel):
    """One human-readable entry of the Publish Run Log."""
    step: PublishStep
    outcome: StepOutcome
    detail: str

    model_config = ConfigDict(frozen=True, use_enum_values=True)


class PublishResult(BaseModel):
    """Returned to the caller regardless of outcome so partial progress is visible."""
    success: bool
    state: PublishState
    message: str
    log: List[PublishStepRecord] = Field(default_factory=list)
    output: Optional[str] = None
    summary: Optional[FetchSummary] = None

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)
