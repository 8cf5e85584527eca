"""Text-binding targets addressed by fixed logical names."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)

# Logical names bound by the overlay and schedule panels
PLAYER1 = "player1"
PLAYER2 = "player2"
SCORE = "score"
ROUND = "round"
COUNTDOWN = "countdown"
SCHEDULE = "schedule"


@runtime_checkable
class TextSurface(Protocol):
    """Anything that can display a string under a logical name."""

    def set_text(self, name: str, value: str) -> None:
        ...


class MemorySurface:
    """Keeps bound texts in a dict."""

    def __init__(self) -> None:
        self.texts: dict[str, str] = {}

    def set_text(self, name: str, value: str) -> None:
        self.texts[name] = value

    def get(self, name: str, default: str = "") -> str:
        return self.texts.get(name, default)


class FileTextSurface:
    """One UTF-8 text file per logical name, for overlay text sources.

    Files are only rewritten when their content changes.
    """

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        self._last: dict[str, str] = {}

    def path_for(self, name: str) -> Path:
        return self.directory / f"{name}.txt"

    def set_text(self, name: str, value: str) -> None:
        if self._last.get(name) == value:
            return
        self.path_for(name).write_text(value, encoding="utf-8")
        self._last[name] = value
        logger.debug(f"{name} = {value!r}")
