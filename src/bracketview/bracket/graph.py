"""Resolve which matches feed into which.

The graph only drives connector drawing. Placement is computed from round
membership, so an incomplete graph never affects where a match is drawn.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from bracketview.core.models import BracketNode, MatchRecord

logger = logging.getLogger(__name__)


def parse_match_index(match_id: str) -> int:
    """Position of a match within its round, from a structured id.

    Structured ids look like ``prefix_pool_round_match``; the fourth
    underscore-delimited segment is the index. Anything else yields 0.

    Examples:
        >>> parse_match_index("preview_7_3_2")
        2
        >>> parse_match_index("abc")
        0
    """
    parts = str(match_id).split("_")
    if len(parts) < 4:
        return 0
    try:
        return int(parts[3])
    except ValueError:
        return 0


def sort_key(record: MatchRecord) -> tuple[int, int]:
    return (record.round, parse_match_index(record.id))


@dataclass
class BracketGraph:
    """Node map and root matches for one bracket side."""

    nodes: dict[str, BracketNode]
    roots: list[BracketNode]

    def edges(self) -> list[tuple[str, str]]:
        """All ``(parent_id, child_id)`` pairs, in child order."""
        return [
            (parent.id, node.id)
            for node in self.nodes.values()
            for parent in node.parents
        ]


def build_graph(records: list[MatchRecord]) -> BracketGraph:
    """Build the dependency graph for one bracket side.

    Match references whose target is not part of ``records`` (the other
    side, or data the API has not returned yet) are dropped silently.

    Args:
        records: Records of a single side.

    Returns:
        BracketGraph with one node per record.
    """
    nodes: dict[str, BracketNode] = {
        record.id: BracketNode(record=record) for record in records
    }

    ordered = sorted(records, key=sort_key)
    dropped = 0
    for record in ordered:
        node = nodes[record.id]
        for source in record.entrant_sources:
            if not source.is_match_reference:
                continue
            parent = nodes.get(source.match_id)
            if parent is None:
                dropped += 1
                continue
            parent.children.append(node)
            node.parents.append(parent)

    if dropped:
        logger.debug(f"Dropped {dropped} unresolved match references")

    roots = [nodes[r.id] for r in ordered if not nodes[r.id].parents]
    return BracketGraph(nodes=nodes, roots=roots)
