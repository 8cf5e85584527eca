"""Text content of the stream overlay and the schedule panel."""

from __future__ import annotations

import math
from datetime import datetime
from zoneinfo import ZoneInfo

from bracketview.core.constants import (
    NO_MATCHES_TEXT,
    NOT_ACTIVE_TEXT,
    SCHEDULE_TIME_FORMAT,
    SCHEDULE_TIMEZONE,
    TBD,
)
from bracketview.core.models import MatchDetail
from bracketview.core.parser import default_round_label
from bracketview.render.surface import PLAYER1, PLAYER2, ROUND, SCORE


def _pad(values: tuple, fill, length: int = 2) -> list:
    return (list(values) + [fill] * length)[: max(length, len(values))]


def overlay_texts(detail: MatchDetail | None) -> dict[str, str]:
    """Texts for the overlay's player, score and round targets.

    Args:
        detail: The active match, or None when nothing is on stream.

    Returns:
        Mapping of logical name to text.
    """
    if detail is None:
        return {PLAYER1: "", PLAYER2: "", SCORE: NOT_ACTIVE_TEXT, ROUND: ""}

    names = _pad(detail.entrant_names, TBD)
    scores = _pad(detail.scores, 0)
    if detail.round_label:
        round_label = detail.round_label
    elif detail.round is not None:
        round_label = default_round_label(detail.round)
    else:
        round_label = ""

    return {
        PLAYER1: names[0],
        PLAYER2: names[1],
        SCORE: f"{scores[0]} - {scores[1]}",
        ROUND: round_label,
    }


def round_text(detail: MatchDetail) -> str:
    """Round name for a schedule entry, with its pool when known."""
    text = detail.round_label or detail.phase_name or "Unknown Round"
    if detail.pool_id:
        text += f" (Pool - {detail.pool_id})"
    return text


def format_start_time(
    timestamp: int | None,
    tz: str = SCHEDULE_TIMEZONE,
    fmt: str = SCHEDULE_TIME_FORMAT,
) -> str:
    """Local wall-clock time of a unix timestamp, e.g. ``Mar 02, 01:30 PM PST``."""
    if not timestamp:
        return ""
    local = datetime.fromtimestamp(timestamp, ZoneInfo(tz))
    return f"{local.strftime(fmt)} {local.tzname()}"


def schedule_entry(detail: MatchDetail) -> str:
    players = " vs ".join(detail.entrant_names or (TBD, TBD))
    lines = [round_text(detail), players]
    if detail.start_at:
        lines.append(f"Starts at: {format_start_time(detail.start_at)}")
    return "\n".join(lines)


def schedule_text(matches: list[MatchDetail]) -> str:
    """The whole schedule panel as one block of text."""
    if not matches:
        return NO_MATCHES_TEXT
    return "\n\n".join(schedule_entry(match) for match in matches)


def next_start(matches: list[MatchDetail], now: float) -> int | None:
    """Start time of the first listed match that has not started yet."""
    for match in matches:
        if match.start_at and match.start_at > now:
            return match.start_at
    return None


def format_countdown(target: int | None, now: float) -> str:
    """``MM:SS`` until ``target``; ``00:00`` when unknown or elapsed."""
    if target is None:
        return "00:00"
    remaining = target - now
    if remaining <= 0:
        return "00:00"
    minutes = math.floor(remaining / 60)
    seconds = math.floor(remaining % 60)
    return f"{minutes:02d}:{seconds:02d}"
