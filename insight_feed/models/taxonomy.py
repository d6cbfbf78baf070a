"""
Category Taxonomy Models

Immutable category → keywords configuration passed explicitly into the
Categorizer.
"""

from typing import Dict, List, Sequence, Tuple
from pydantic import BaseModel, ConfigDict, Field


class CategoryEntry(BaseModel):
    """A category name and its ordered matching keywords."""
    name: str = Field(..., min_length=1)
    keywords: Tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)


class Taxonomy(BaseModel):
    """Ordered taxonomy. Declaration order decides the primary category."""
    entries: Tuple[CategoryEntry, ...] = ()

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_mapping(cls, mapping: Dict[str, Sequence[str]]) -> "Taxonomy":
        return cls(
            entries=tuple(
                CategoryEntry(name=name, keywords=tuple(keywords))
                for name, keywords in mapping.items()
            )
        )

    @property
    def names(self) -> List[str]:
        return [entry.name for entry in self.entries]

    def __len__(self) -> int:
        return len(self.entries)
