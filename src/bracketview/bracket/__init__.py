"""Bracket construction and layout engine."""

from __future__ import annotations

from bracketview.bracket.graph import BracketGraph, build_graph, parse_match_index
from bracketview.bracket.layout import (
    CenteredSpacing,
    EdgeAnchoredSpacing,
    LayoutEngine,
    SpacingStrategy,
    get_spacing_strategy,
    layout_side,
    resolve_display_name,
)
from bracketview.bracket.normalizer import normalize_records, reset_was_played
from bracketview.bracket.partition import (
    Partition,
    group_by_depth,
    partition_records,
    round_keys,
    split_sides,
)
from bracketview.bracket.pipeline import (
    BracketView,
    ColumnHeader,
    SideView,
    build_bracket_view,
    build_pool_view,
)
from bracketview.bracket.pools import PoolIndex, advance_cursor

__all__ = [
    # Normalizer
    "normalize_records",
    "reset_was_played",
    # Partitioner
    "Partition",
    "partition_records",
    "split_sides",
    "group_by_depth",
    "round_keys",
    # Graph
    "BracketGraph",
    "build_graph",
    "parse_match_index",
    # Layout
    "LayoutEngine",
    "SpacingStrategy",
    "CenteredSpacing",
    "EdgeAnchoredSpacing",
    "get_spacing_strategy",
    "layout_side",
    "resolve_display_name",
    # Pools
    "PoolIndex",
    "advance_cursor",
    # Pipeline
    "BracketView",
    "SideView",
    "ColumnHeader",
    "build_bracket_view",
    "build_pool_view",
]
