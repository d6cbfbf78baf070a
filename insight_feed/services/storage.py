"""
JSON File Store

Durable JSON documents (channels.json, videos.json), rewritten wholesale
on every save. Assumes a single writer process.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, List

from ..core.logging import get_logger

logger = get_logger(__name__)


class JsonFileStore:
    """A JSON array document on disk."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> List[Any]:
        """Load the document. Missing or unreadable files yield an empty list."""
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("json_store_load_failed", path=str(self.path), error=str(e))
            return []

        if not isinstance(data, list):
            logger.warning("json_store_not_a_list", path=str(self.path))
            return []
        return data

    def save(self, data: List[Any]) -> None:
        """Replace the document atomically (temp file + rename)."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(data, indent=2, ensure_ascii=False, default=str) + "\n"

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp_name, self.path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

        logger.debug("json_store_saved", path=str(self.path), count=len(data))
