"""Configuration dataclasses for the layout engine and the display drivers."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from bracketview.core.constants import (
    DEFAULT_AVAILABLE_HEIGHT,
    DEFAULT_BOX_HEIGHT,
    DEFAULT_BOX_WIDTH,
    DEFAULT_CACHE_FILE,
    DEFAULT_COLUMN_PITCH,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_SPACING_MODE,
    DEFAULT_X_OFFSET,
    DEFAULT_Y_OFFSET,
)


@dataclass(frozen=True)
class LayoutConfig:
    """Geometry used when placing one bracket side."""

    column_pitch: float = DEFAULT_COLUMN_PITCH
    x_offset: float = DEFAULT_X_OFFSET
    y_offset: float = DEFAULT_Y_OFFSET
    available_height: float = DEFAULT_AVAILABLE_HEIGHT

    # "centered" or "edge_anchored"
    spacing_mode: str = DEFAULT_SPACING_MODE

    # Match box size, only used by the renderer
    box_width: float = DEFAULT_BOX_WIDTH
    box_height: float = DEFAULT_BOX_HEIGHT

    def __post_init__(self) -> None:
        for name in ("column_pitch", "available_height"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")


@dataclass
class DisplayConfig:
    """What to display and where to write it."""

    phase_id: int | None = None
    tournament_slug: str | None = None
    stream_name: str | None = None

    output_dir: str = DEFAULT_OUTPUT_DIR
    cache_file: str = DEFAULT_CACHE_FILE

    # Rotate through pools instead of drawing one combined bracket
    pool_mode: bool = False

    layout: LayoutConfig = field(default_factory=LayoutConfig)

    @classmethod
    def from_env(cls, **overrides) -> DisplayConfig:
        """Build a config from BRACKETVIEW_* environment variables.

        Keyword overrides that are not None take precedence over the
        environment.
        """
        phase_raw = os.getenv("BRACKETVIEW_PHASE_ID")
        values = {
            "phase_id": int(phase_raw) if phase_raw else None,
            "tournament_slug": os.getenv("BRACKETVIEW_TOURNAMENT") or None,
            "stream_name": os.getenv("BRACKETVIEW_STREAM") or None,
        }
        values.update(
            {key: value for key, value in overrides.items() if value is not None}
        )
        return cls(**values)
