"""
Channel Models

A subscribed YouTube channel and the API payloads that manage the registry.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class Channel(BaseModel):
    """
    A subscribed channel.

    Created from a successful catalog lookup, removed by id, never mutated
    in place.
    """
    id: str = Field(..., description="Opaque YouTube channel ID (UC...) or mock-<ms> placeholder")
    title: str
    handle: str = Field(..., description="User-facing @handle")
    thumbnail: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def label(self) -> str:
        return self.handle or self.title


class ChannelCreateRequest(BaseModel):
    """Inbound payload to start tracking a channel."""
    url: str = Field(..., description="YouTube channel URL or @handle")

