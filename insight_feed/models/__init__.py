"""Pydantic models for Insight Feed."""

from .channel import Channel, ChannelCreateRequest
from .video import Video
from .taxonomy import CategoryEntry, Taxonomy
from .response import (
    ChannelOutcome,
    ChannelReport,
    FetchSummary,
    DaysRequest,
    MessageResponse,
    ErrorResponse,
)
from .publish import (
    PublishState,
    PublishStep,
    StepOutcome,
    PublishStepRecord,
    PublishResult,
)

__all__ = [
    "Channel",
    "ChannelCreateRequest",
    "Video",
    "CategoryEntry",
    "Taxonomy",
    "ChannelOutcome",
    "ChannelReport",
    "FetchSummary",
    "DaysRequest",
    "MessageResponse",
    "ErrorResponse",
    "PublishState",
    "PublishStep",
    "StepOutcome",
    "PublishStepRecord",
    "PublishResult",
]
