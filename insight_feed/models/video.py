"""
Video Models

The published feed record. Serialised with camelCase keys so the
presentation layer can read videos.json directly.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator


class Video(BaseModel):
    """
    A classified video in the published feed.

    Only exists when at least one category matched; `category` is the
    primary (first taxonomy-order) match.
    """
    id: str = Field(..., description="YouTube video ID")
    title: str
    description: str = ""
    thumbnail_url: Optional[str] = Field(None, alias="thumbnailUrl")
    channel_title: str = Field("", alias="channelTitle")
    published_at: datetime = Field(..., alias="publishedAt")
    category: str
    categories: List[str] = Field(..., min_length=1)

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="after")
    def _primary_category_is_listed(self) -> "Video":
        if self.category not in self.categories:
            raise ValueError(f"primary category {self.category!r} missing from categories")
        return self

    def to_feed_dict(self) -> dict:
        """JSON-ready dict in the on-disk videos.json shape."""
        return self.model_dump(mode="json", by_alias=True)
