"""
Persistent fallback cache for raw API responses.

The cache is a single JSON file holding named slots. The bracket driver
overwrites its slot after every successful fetch and reads it back only
when a fetch fails or returns nothing usable.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from bracketview.core.constants import BRACKET_CACHE_KEY, DEFAULT_CACHE_FILE

logger = logging.getLogger(__name__)


class SnapshotCache:
    """Key-value store of raw JSON documents backed by one file."""

    def __init__(self, path: str | Path = DEFAULT_CACHE_FILE):
        self.path = Path(path)

    def _read_all(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.error(f"Failed to read cache file {self.path}: {e}")
            return {}
        if not isinstance(payload, dict):
            logger.warning(f"Ignoring malformed cache file {self.path}")
            return {}
        return payload

    def load(self, key: str = BRACKET_CACHE_KEY) -> Any | None:
        """Return the cached document for ``key``, or None."""
        return self._read_all().get(key)

    def save(self, document: Any, key: str = BRACKET_CACHE_KEY) -> None:
        """Overwrite the slot for ``key`` with ``document``.

        The file is replaced atomically so a crash mid-write never leaves a
        truncated cache behind.
        """
        payload = self._read_all()
        payload[key] = document

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug(f"Cached {key} in {self.path}")
