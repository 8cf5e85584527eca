"""Shared factories for bracket records and API documents."""

from __future__ import annotations

import pytest

from bracketview.core.models import Entrant, EntrantSource, MatchRecord, Slot


def _make_record(
    match_id: str,
    round_number: int,
    label: str = "",
    names: tuple = (None, None),
    winner: str | None = None,
    sources: tuple = (None, None),
    pool_id: str | None = None,
    display_score: str | None = None,
) -> MatchRecord:
    slots = tuple(
        Slot(entrant=Entrant(id=name.lower(), name=name)) if name else Slot()
        for name in names
    )
    entrant_sources = tuple(
        EntrantSource.from_match(source) if source else EntrantSource.terminal()
        for source in sources
    )
    return MatchRecord(
        id=match_id,
        round=round_number,
        round_label=label,
        slots=slots,
        entrant_sources=entrant_sources,
        winner_id=winner,
        pool_id=pool_id,
        display_score=display_score,
    )


@pytest.fixture
def make_record():
    return _make_record


def _set_node(
    set_id,
    round_number,
    label=None,
    names=(None, None),
    prereqs=(None, None),
    winner=None,
):
    slots = []
    for name, prereq in zip(names, prereqs):
        slot = {}
        if name:
            slot["entrant"] = {"id": f"e-{name}", "name": name}
        if prereq:
            slot["prereqType"] = "set"
            slot["prereqId"] = prereq
        else:
            slot["prereqType"] = "seed"
        slots.append(slot)
    node = {"id": set_id, "round": round_number, "slots": slots, "winnerId": winner}
    if label:
        node["fullRoundText"] = label
    return node


@pytest.fixture
def phase_document():
    """Small double-elimination phase with one pool."""
    sets = [
        _set_node(1, 1, "Winners Semi-Final", ("Alpha", "Bravo")),
        _set_node(2, 1, "Winners Semi-Final", ("Charlie", "Delta")),
        _set_node(3, 2, "Winners Final", prereqs=(1, 2)),
        _set_node(4, -1, "Losers Round 1", prereqs=(1, 2)),
        _set_node(5, -2, "Losers Final", prereqs=(4, 3)),
        _set_node(6, 3, "Grand Final", prereqs=(3, 5)),
        _set_node(7, 4, "Grand Final Reset", prereqs=(6, 6)),
    ]
    return {
        "data": {
            "phase": {
                "id": 100,
                "name": "Top 4",
                "phaseGroups": {
                    "nodes": [
                        {"id": 200, "displayIdentifier": "A1", "sets": {"nodes": sets}}
                    ]
                },
            }
        }
    }
