"""
API Response Models

Standardized response structures for fetch/publish endpoints.
"""

from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class ChannelOutcome(str, Enum):
    """Per-channel result of one aggregation run."""
    SUCCESS = "success"
    EMPTY = "empty"
    ERROR = "error"


class ChannelReport(BaseModel):
    """Outcome for a single channel in a fetch run."""
    channel_id: str = Field(alias="channelId")
    label: str
    outcome: ChannelOutcome
    video_count: int = Field(0, alias="videoCount")
    error: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)


class FetchSummary(BaseModel):
    """Result of a fetch-only refresh (also embedded in publish results)."""
    success: bool = True
    message: str
    days: int
    total_videos: int = Field(0, alias="totalVideos")
    channels_total: int = Field(0, alias="channelsTotal")
    channels_succeeded: int = Field(0, alias="channelsSucceeded")
    channels_failed: int = Field(0, alias="channelsFailed")
    category_stats: Dict[str, int] = Field(default_factory=dict, alias="categoryStats")
    channels: List[ChannelReport] = Field(default_factory=list)
    saved: bool = False

    model_config = ConfigDict(populate_by_name=True)


class DaysRequest(BaseModel):
    """Inbound payload for fetch/publish. Validated as 1..365 by the service."""
    days: Optional[int | str] = None


class MessageResponse(BaseModel):
    """Plain success/failure acknowledgement."""
    success: bool
    message: str


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: bool = True
    kind: str
    message: str
    status_code: int
