"""Normalize → partition → graph + layout, for one bracket or one pool."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from bracketview.bracket.graph import BracketGraph, build_graph
from bracketview.bracket.layout import LayoutEngine
from bracketview.bracket.normalizer import normalize_records
from bracketview.bracket.partition import RoundGroups, partition_records, round_keys
from bracketview.bracket.pools import UNNAMED_POOL, PoolIndex
from bracketview.core.constants import RESET_NAMESPACE
from bracketview.core.logging import log_timing
from bracketview.core.models import LayoutNode, MatchRecord, Side
from bracketview.core.parser import default_round_label

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColumnHeader:
    """Label drawn above one column."""

    column: int
    depth: int
    x: float
    label: str


@dataclass
class SideView:
    """Everything the renderer needs for one bracket side."""

    side: Side
    groups: RoundGroups = field(default_factory=dict)
    graph: BracketGraph = field(
        default_factory=lambda: BracketGraph(nodes={}, roots=[])
    )
    nodes: dict[str, LayoutNode] = field(default_factory=dict)
    headers: list[ColumnHeader] = field(default_factory=list)

    @property
    def records(self) -> list[MatchRecord]:
        return [record for group in self.groups.values() for record in group]

    @property
    def is_empty(self) -> bool:
        return not self.nodes


@dataclass
class BracketView:
    """Laid-out winners and losers sides of one bracket."""

    winners: SideView
    losers: SideView
    pool_id: str | None = None

    def side(self, side: Side) -> SideView:
        return self.winners if side is Side.WINNERS else self.losers

    @property
    def is_empty(self) -> bool:
        return self.winners.is_empty and self.losers.is_empty

    def layout_nodes(self) -> list[LayoutNode]:
        return list(self.winners.nodes.values()) + list(self.losers.nodes.values())


def column_headers(
    groups: RoundGroups, nodes: dict[str, LayoutNode]
) -> list[ColumnHeader]:
    """One header per column, labelled after the first match the API listed."""
    headers = []
    for column, depth in enumerate(round_keys(groups)):
        first = groups[depth][0]
        label = first.round_label or default_round_label(depth)
        headers.append(
            ColumnHeader(column=column, depth=depth, x=nodes[first.id].x, label=label)
        )
    return headers


def _build_side(
    side: Side, groups: RoundGroups, engine: LayoutEngine
) -> SideView:
    records = [record for group in groups.values() for record in group]
    nodes = engine.layout(groups)
    return SideView(
        side=side,
        groups=groups,
        graph=build_graph(records),
        nodes=nodes,
        headers=column_headers(groups, nodes),
    )


def build_bracket_view(
    records: list[MatchRecord],
    engine: LayoutEngine | None = None,
    namespace: str = RESET_NAMESPACE,
    pool_id: str | None = None,
) -> BracketView:
    """Run the full construction pipeline on one record set.

    The function is pure: the input list is not mutated and running it twice
    on the same records yields identical layout nodes.

    Args:
        records: Flat records of one bracket or one pool.
        engine: Layout engine. Defaults to the default geometry.
        namespace: Namespace for the reset match's synthetic id.
        pool_id: Pool identifier carried on the result, if any.

    Returns:
        BracketView with both sides laid out.
    """
    engine = engine or LayoutEngine()
    with log_timing(logger, f"building bracket view ({len(records)} sets)"):
        normalized = normalize_records(records, namespace=namespace)
        partition = partition_records(normalized)
        view = BracketView(
            winners=_build_side(Side.WINNERS, partition.winners, engine),
            losers=_build_side(Side.LOSERS, partition.losers, engine),
            pool_id=pool_id,
        )
    return view


def build_pool_view(
    index: PoolIndex, pool_id: str, engine: LayoutEngine | None = None
) -> BracketView:
    """Run the pipeline on one pool, namespacing the reset id by pool."""
    namespace = pool_id if pool_id != UNNAMED_POOL else RESET_NAMESPACE
    return build_bracket_view(
        index.members(pool_id),
        engine=engine,
        namespace=namespace,
        pool_id=pool_id,
    )
