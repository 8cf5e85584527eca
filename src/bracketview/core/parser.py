"""
Ingestion of start.gg GraphQL documents.

This module is the validation boundary between the loosely-typed JSON the
API returns and the typed records the engine operates on. Every optional
field has a documented default and nothing in here raises on malformed
input: unusable entries are skipped and logged instead.

Defaults
--------
* missing ``round`` -> 1
* missing ``fullRoundText`` -> ``"Round <depth>"``
* missing entrant -> empty slot (rendered as ``"TBD"``)
* missing score -> 0
* ``prereqType`` other than ``"set"`` -> terminal entrant source
"""

from __future__ import annotations

import logging
from typing import Any

from bracketview.core.constants import TBD
from bracketview.core.models import (
    Entrant,
    EntrantSource,
    MatchDetail,
    MatchRecord,
    Slot,
    StreamEntry,
)

logger = logging.getLogger(__name__)


def _dig(document: Any, *keys: str) -> Any:
    """Walk nested dictionaries, returning None on any missing level."""
    current = document
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def _nodes(connection: Any) -> list[dict]:
    """Return the ``nodes`` list of a GraphQL connection, or a bare list."""
    if isinstance(connection, dict):
        connection = connection.get("nodes")
    if not isinstance(connection, list):
        return []
    return [node for node in connection if isinstance(node, dict)]


def _as_id(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _as_int(value: Any, default: int | None = None) -> int | None:
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        try:
            return int(float(value))
        except (TypeError, ValueError):
            return default


def default_round_label(round_number: int) -> str:
    """Generic label used when the API does not name a round."""
    return f"Round {abs(round_number)}"


def log_graphql_errors(document: Any, query_name: str) -> bool:
    """Log a GraphQL ``errors`` array if present.

    Returns:
        True if the document carried errors.
    """
    errors = _dig(document, "errors")
    if errors:
        logger.warning(f"{query_name} query returned errors: {errors}")
        return True
    return False


def _parse_entrant(raw: Any) -> Entrant | None:
    if not isinstance(raw, dict):
        return None
    entrant_id = _as_id(raw.get("id"))
    name = raw.get("name")
    if entrant_id is None and not name:
        return None
    return Entrant(id=entrant_id or "", name=str(name) if name else "")


def _parse_source(raw_slot: dict) -> EntrantSource:
    prereq_type = raw_slot.get("prereqType")
    prereq_id = _as_id(raw_slot.get("prereqId"))
    if prereq_type == "set" and prereq_id is not None:
        return EntrantSource.from_match(prereq_id)
    return EntrantSource.terminal()


def _parse_slot_score(raw_slot: dict) -> int | None:
    value = _dig(raw_slot, "standing", "stats", "score", "value")
    return _as_int(value)


def parse_set_node(
    node: dict,
    pool_id: str | None = None,
    phase_group_id: str | None = None,
) -> MatchRecord | None:
    """Convert one ``sets.nodes`` entry into a MatchRecord.

    Args:
        node: Raw set dictionary.
        pool_id: Display identifier of the phase group the set belongs to.
        phase_group_id: API id of that phase group.

    Returns:
        The record, or None when the node has no id.
    """
    match_id = _as_id(node.get("id"))
    if match_id is None:
        logger.debug(f"Skipping set without id: {node}")
        return None

    round_number = _as_int(node.get("round"), 1)
    label = node.get("fullRoundText") or default_round_label(round_number)

    raw_slots = (_nodes(node.get("slots")) + [{}, {}])[:2]

    slots = tuple(
        Slot(
            entrant=_parse_entrant(raw.get("entrant")),
            score=_parse_slot_score(raw),
        )
        for raw in raw_slots
    )
    sources = tuple(_parse_source(raw) for raw in raw_slots)

    return MatchRecord(
        id=match_id,
        round=round_number,
        round_label=str(label),
        slots=slots,
        entrant_sources=sources,
        winner_id=_as_id(node.get("winnerId")),
        pool_id=pool_id,
        display_score=node.get("displayScore") or None,
        phase_group_id=phase_group_id,
    )


def parse_phase_document(document: Any) -> list[MatchRecord]:
    """Parse a phase/bracket document into a flat list of match records.

    The document has the shape ``data.phase.phaseGroups.nodes[].sets.nodes[]``.
    Records keep the order in which the API lists them; each record carries
    the display identifier of its phase group as its pool id.

    Args:
        document: Decoded JSON response of the phase query.

    Returns:
        Flat list of records, empty when the document is unusable.
    """
    log_graphql_errors(document, "phase")
    phase = _dig(document, "data", "phase")
    if not isinstance(phase, dict):
        logger.info("Phase document contains no phase data")
        return []

    records: list[MatchRecord] = []
    for group in _nodes(phase.get("phaseGroups")):
        pool_id = _as_id(group.get("displayIdentifier"))
        group_id = _as_id(group.get("id"))
        for node in _nodes(group.get("sets")):
            record = parse_set_node(node, pool_id=pool_id, phase_group_id=group_id)
            if record is not None:
                records.append(record)

    logger.debug(f"Parsed {len(records)} sets from phase document")
    return records


def parse_stream_queue(document: Any) -> list[StreamEntry]:
    """Parse a stream-queue document into stream entries."""
    log_graphql_errors(document, "streamQueue")
    queue = _dig(document, "data", "tournament", "streamQueue")
    if not isinstance(queue, list):
        return []

    entries: list[StreamEntry] = []
    for raw in queue:
        if not isinstance(raw, dict):
            continue
        stream = raw.get("stream")
        if not isinstance(stream, dict):
            stream = {}
        set_ids = tuple(
            set_id
            for set_id in (_as_id(_dig(s, "id")) for s in _nodes(raw.get("sets")))
            if set_id is not None
        )
        entries.append(
            StreamEntry(
                source=str(stream.get("streamSource") or ""),
                name=str(stream.get("streamName") or ""),
                set_ids=set_ids,
            )
        )
    return entries


def _unwrap_set(document: Any) -> dict | None:
    """Accept ``{"data": {"set": ...}}``, ``{"data": ...}`` or a bare set."""
    for candidate in (
        _dig(document, "data", "set"),
        _dig(document, "data"),
        document,
    ):
        if isinstance(candidate, dict) and candidate.get("id") is not None:
            return candidate
    return None


def parse_set_detail(document: Any) -> MatchDetail | None:
    """Parse a match-detail document.

    Returns:
        The match detail, or None when the document holds no set.
    """
    log_graphql_errors(document, "set")
    raw = _unwrap_set(document)
    if raw is None:
        return None

    raw_slots = _nodes(raw.get("slots"))
    raw_slots = (raw_slots + [{}, {}])[: max(2, len(raw_slots))]

    names = tuple(_dig(s, "entrant", "name") or TBD for s in raw_slots)
    scores = tuple(_parse_slot_score(s) or 0 for s in raw_slots)

    return MatchDetail(
        id=str(raw["id"]),
        entrant_names=names,
        scores=scores,
        round_label=raw.get("fullRoundText") or None,
        round=_as_int(raw.get("round")),
        display_score=raw.get("displayScore") or None,
        phase_name=_dig(raw, "phaseGroup", "phase", "name") or None,
        pool_id=_as_id(_dig(raw, "phaseGroup", "displayIdentifier")),
        start_at=_as_int(raw.get("startAt")),
        completed_at=_as_int(raw.get("completedAt")),
    )


def parse_tournament_info(document: Any) -> dict[str, Any] | None:
    """Parse the tournament info document into ``id``, ``name`` and ``start_at``."""
    log_graphql_errors(document, "tournament")
    tournament = _dig(document, "data", "tournament")
    if not isinstance(tournament, dict):
        return None
    return {
        "id": _as_id(tournament.get("id")),
        "name": tournament.get("name") or "",
        "start_at": _as_int(tournament.get("startAt")),
    }
