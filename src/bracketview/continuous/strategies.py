"""
Refresh strategy for the display drivers.

Defines how long each timer waits after its previous run has finished.
"""

from dataclasses import dataclass

from bracketview.core.constants import (
    DEFAULT_BRACKET_DELAY,
    DEFAULT_COUNTDOWN_DELAY,
    DEFAULT_OVERLAY_DELAY,
    DEFAULT_POOL_CYCLE_DELAY,
    DEFAULT_SCHEDULE_DELAY,
    DEFAULT_SIDE_TOGGLE_DELAY,
)


@dataclass
class RefreshStrategy:
    """
    Timer delays, in seconds.

    Every delay is measured from the end of the previous run (fixed delay),
    so a slow fetch pushes the next one back instead of overlapping it.
    """

    # Data refreshes
    bracket_delay: float = DEFAULT_BRACKET_DELAY  # Full bracket fetch + layout
    overlay_delay: float = DEFAULT_OVERLAY_DELAY  # Stream overlay
    schedule_delay: float = DEFAULT_SCHEDULE_DELAY  # Upcoming matches panel

    # Presentation-only toggles
    pool_cycle_delay: float = DEFAULT_POOL_CYCLE_DELAY
    side_toggle_delay: float = DEFAULT_SIDE_TOGGLE_DELAY
    countdown_delay: float = DEFAULT_COUNTDOWN_DELAY

    # Wait after an unexpected task failure before the task runs again
    error_delay: float = 60.0

    def __post_init__(self) -> None:
        for name in (
            "bracket_delay",
            "overlay_delay",
            "schedule_delay",
            "pool_cycle_delay",
            "side_toggle_delay",
            "countdown_delay",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
