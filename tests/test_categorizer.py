"""
Tests for Categorizer

Keyword matching rules: whole words for Latin tokens, containment for
phrases and Korean, taxonomy order for the primary category.
"""

import pytest

from insight_feed.models.taxonomy import Taxonomy
from insight_feed.services.categorizer import Categorizer, uses_substring_match
from insight_feed.services.taxonomy import DEFAULT_CATEGORY_KEYWORDS, default_taxonomy


def test_whole_word_match(categorizer):
    """'ai' matches the word AI but not 'air' or 'paint'."""
    assert categorizer.classify("New AI tools this week") == ["AI"]
    assert categorizer.classify("Fresh air and paint") == []


def test_case_insensitive(categorizer):
    assert categorizer.classify("PYTHON tips") == ["Coding"]
    assert categorizer.classify("Python Tips") == ["Coding"]


def test_korean_keyword_substring(categorizer):
    """Korean keywords match inside longer Hangul runs."""
    assert categorizer.classify("인공지능으로 돈 버는 법") == ["AI"]


def test_phrase_keyword_substring(categorizer):
    assert categorizer.classify("My vibe coding setup") == ["Coding"]


def test_categories_in_taxonomy_order(categorizer):
    """Primary category is the first match in declaration order, not title order."""
    result = categorizer.classify("Python release notes for AI devs")
    assert result == ["AI", "Coding", "News"]


def test_no_match_returns_empty(categorizer):
    assert categorizer.classify("Cooking pasta at home") == []
    assert categorizer.classify("") == []


def test_description_is_ignored(categorizer):
    """Only the title is examined."""
    assert categorizer.classify("Weekend vlog", "Sponsored by an AI python startup") == []


def test_invalid_pattern_falls_back_to_substring():
    """A keyword that fails to compile as a pattern matches by containment."""
    categorizer = Categorizer(Taxonomy.from_mapping({"Preview": ["(preview"]}))
    assert categorizer.classify("Gemini (Preview) hands-on") == ["Preview"]
    assert categorizer.classify("Gemini preview hands-on") == []


def test_blank_keywords_are_ignored():
    categorizer = Categorizer(Taxonomy.from_mapping({"Empty": ["", "  "]}))
    assert categorizer.classify("anything at all") == []


@pytest.mark.parametrize("keyword,expected", [
    ("ai", False),
    ("dall-e", False),
    ("vibe coding", True),
    ("인공지능", True),
    ("챗gpt", True),
])
def test_uses_substring_match(keyword, expected):
    assert uses_substring_match(keyword) is expected


def test_default_taxonomy_order():
    taxonomy = default_taxonomy()
    assert taxonomy.names == list(DEFAULT_CATEGORY_KEYWORDS)
    assert Categorizer(taxonomy).classify("ChatGPT agent builds an n8n workflow") == [
        "LLM", "AI Agents", "Automation",
    ]


def test_english_keyword_before_korean_particle(categorizer):
    """Hangul right after a Latin keyword is not part of the word."""
    assert categorizer.classify("AI를 활용한 Python 입문") == ["AI", "Coding"]
    assert categorizer.classify("Fresh air 산책") == []


def test_default_taxonomy_korean_title():
    categories = Categorizer(default_taxonomy()).classify("ChatGPT로 업무 자동화하기")

    assert categories[0] == "LLM"
    assert "Automation" in categories
    assert "Productivity" in categories
