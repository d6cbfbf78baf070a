"""
Categorizer

Maps a video title to the taxonomy categories it matches.
"""

import re
import unicodedata
from typing import Callable, List, Optional, Tuple

from ..core.logging import get_logger
from ..models.taxonomy import Taxonomy

logger = get_logger(__name__)

Matcher = Callable[[str, str], bool]


def _is_latin_letter(ch: str) -> bool:
    try:
        return unicodedata.name(ch).startswith("LATIN")
    except ValueError:
        return False


def uses_substring_match(keyword: str) -> bool:
    """
    Phrases and non-Latin keywords (e.g. Korean) match by containment.

    Word boundaries are meaningless inside Hangul runs and multi-word
    phrases already carry their own context.
    """
    return any(ch.isspace() for ch in keyword) or any(
        ch.isalpha() and not _is_latin_letter(ch) for ch in keyword
    )


class Categorizer:
    """
    Keyword classifier over an injected, immutable taxonomy.

    Only the title is examined; descriptions are full of boilerplate
    (links, sponsor blurbs) that would match nearly every category.

    Single Latin tokens match on whole words so "ai" never matches "air".
    Word boundaries are ASCII-only, so a keyword followed directly by a
    Korean particle ("ChatGPT로", "AI를") still matches.
    Keywords are treated as pattern fragments; one that fails to compile
    falls back to plain containment for that keyword only.
    """

    def __init__(self, taxonomy: Taxonomy):
        self.taxonomy = taxonomy
        self._matchers: List[Tuple[str, List[Matcher]]] = [
            (entry.name, [self._build_matcher(k) for k in entry.keywords if k.strip()])
            for entry in taxonomy.entries
        ]

    @staticmethod
    def _build_matcher(keyword: str) -> Matcher:
        needle = keyword.strip().lower()

        if uses_substring_match(needle):
            return lambda lowered, text: needle in lowered

        try:
            pattern = re.compile(rf"\b{needle}\b", re.IGNORECASE | re.ASCII)
        except re.error as e:
            logger.debug("keyword_pattern_invalid", keyword=keyword, error=str(e))
            return lambda lowered, text: needle in lowered

        return lambda lowered, text: pattern.search(text) is not None

    def classify(self, title: str, description: Optional[str] = "") -> List[str]:
        """
        Return the matched category names in taxonomy order.

        Args:
            title: Video title (the only text matched)
            description: Accepted for call-site symmetry; ignored

        Returns:
            Matched categories; the first one is the primary category.
            Empty when nothing matched.
        """
        if not title:
            return []

        lowered = title.lower()
        return [
            name
            for name, matchers in self._matchers
            if any(match(lowered, title) for match in matchers)
        ]
