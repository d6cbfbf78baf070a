"""
Category Taxonomy

Default category → keyword configuration and an optional JSON override.

Keyword matching rules live in the Categorizer; keep single English tokens
lowercase and put multi-word or Korean phrases as-is.
"""

import json
from pathlib import Path
from typing import Dict, List, Optional

from ..core.exceptions import ValidationError
from ..core.logging import get_logger
from ..models.taxonomy import Taxonomy

logger = get_logger(__name__)


# Declaration order decides the primary category of a video
DEFAULT_CATEGORY_KEYWORDS: Dict[str, List[str]] = {
    "LLM": [
        "gpt", "chatgpt", "claude", "gemini", "llama", "llm", "mistral",
        "deepseek", "grok", "language model", "언어 모델", "챗gpt", "챗지피티",
    ],
    "AI Agents": [
        "agent", "agents", "agentic", "mcp", "에이전트", "multi-agent",
    ],
    "Automation": [
        "n8n", "zapier", "automation", "workflow", "자동화", "워크플로우",
    ],
    "Coding": [
        "cursor", "copilot", "windsurf", "coding", "vibe coding", "python",
        "javascript", "개발", "코딩", "바이브 코딩",
    ],
    "Image Generation": [
        "midjourney", "dall-e", "stable diffusion", "flux", "ideogram",
        "이미지 생성", "그림",
    ],
    "Video Generation": [
        "sora", "runway", "kling", "veo", "pika", "heygen", "영상 생성", "동영상",
    ],
    "Productivity": [
        "notebooklm", "notion", "obsidian", "perplexity", "productivity",
        "생산성", "업무", "노션",
    ],
    "AI News": [
        "openai", "anthropic", "google", "nvidia", "news", "update", "release",
        "뉴스", "소식", "발표", "출시",
    ],
    "Business": [
        "startup", "business", "marketing", "revenue", "side hustle",
        "창업", "수익", "마케팅", "부업",
    ],
}


def default_taxonomy() -> Taxonomy:
    """The bundled taxonomy."""
    return Taxonomy.from_mapping(DEFAULT_CATEGORY_KEYWORDS)


def load_taxonomy(path: Optional[Path] = None) -> Taxonomy:
    """
    Load the taxonomy once at startup.

    Args:
        path: Optional JSON file containing an object of
            ``{"Category": ["keyword", ...]}``. When omitted the bundled
            taxonomy is used.

    Raises:
        ValidationError: if the override file is malformed.
    """
    if path is None:
        return default_taxonomy()

    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ValidationError(f"Unable to read category taxonomy {path}: {e}")

    if not isinstance(raw, dict) or not all(
        isinstance(keywords, list) and all(isinstance(k, str) for k in keywords)
        for keywords in raw.values()
    ):
        raise ValidationError(
            f"Category taxonomy {path} must map category names to lists of keywords"
        )

    taxonomy = Taxonomy.from_mapping(raw)
    logger.info("taxonomy_loaded", path=str(path), categories=len(taxonomy))
    return taxonomy
