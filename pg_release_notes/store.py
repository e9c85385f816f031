"""File-backed store for cached release notes pages."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .constants import CACHE_DIR, DOCUMENT_SUFFIX, INDEX_KEY

logger = logging.getLogger(__name__)


class DocumentStore:
    """Maps a key (a version string or "index") to raw page content on disk."""

    def __init__(self, cache_dir: str | Path = CACHE_DIR):
        self.cache_dir = Path(cache_dir)

    def _path(self, key: str) -> Path:
        return self.cache_dir / f"{key}{DOCUMENT_SUFFIX}"

    def exists(self) -> bool:
        return self.cache_dir.is_dir()

    def __contains__(self, key: str) -> bool:
        return self._path(key).exists()

    def get(self, key: str) -> Optional[str]:
        """Return cached content for key, or None if it was never stored."""
        path = self._path(key)
        if not path.exists():
            logger.debug("Cache miss: %s", key)
            return None
        return path.read_text(encoding="utf-8")

    def put(self, key: str, content: str) -> None:
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        self._path(key).write_text(content, encoding="utf-8")
        logger.debug("Cached %s (%d chars)", key, len(content))

    def keys(self) -> list[str]:
        """All stored keys in lexical order."""
        if not self.exists():
            return []
        return sorted(
            path.name[: -len(DOCUMENT_SUFFIX)]
            for path in self.cache_dir.glob(f"*{DOCUMENT_SUFFIX}")
        )

    def release_keys(self) -> list[str]:
        """Stored keys excluding the release index page."""
        return [key for key in self.keys() if key != INDEX_KEY]
