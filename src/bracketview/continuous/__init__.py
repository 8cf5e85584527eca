"""Continuous refresh of the bracket, overlay and schedule displays."""

from __future__ import annotations

from bracketview.continuous.manager import (
    BracketDriver,
    FixedDelayScheduler,
    OverlayDriver,
    ScheduleDriver,
)
from bracketview.continuous.state import DisplaySession
from bracketview.continuous.strategies import RefreshStrategy

__all__ = [
    "FixedDelayScheduler",
    "BracketDriver",
    "OverlayDriver",
    "ScheduleDriver",
    "DisplaySession",
    "RefreshStrategy",
]
