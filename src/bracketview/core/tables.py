"""Tabular views of records and layouts for diagnostics and the dump command."""

from __future__ import annotations

from typing import TYPE_CHECKING

import polars as pl

from bracketview.bracket.graph import parse_match_index
from bracketview.core.models import MatchRecord

if TYPE_CHECKING:
    from bracketview.bracket.pipeline import BracketView

RECORD_SCHEMA = {
    "match_id": pl.Utf8,
    "round": pl.Int64,
    "match_index": pl.Int64,
    "round_label": pl.Utf8,
    "entrant1": pl.Utf8,
    "entrant2": pl.Utf8,
    "winner_id": pl.Utf8,
    "pool_id": pl.Utf8,
    "display_score": pl.Utf8,
}

LAYOUT_SCHEMA = {
    "side": pl.Utf8,
    "match_id": pl.Utf8,
    "round": pl.Int64,
    "match_index": pl.Int64,
    "x": pl.Float64,
    "y": pl.Float64,
    "round_label": pl.Utf8,
    "display_name": pl.Utf8,
}


def records_frame(records: list[MatchRecord]) -> pl.DataFrame:
    """One row per match record, in input order."""
    rows = [
        {
            "match_id": record.id,
            "round": record.round,
            "match_index": parse_match_index(record.id),
            "round_label": record.round_label,
            "entrant1": record.entrant_names[0] or None,
            "entrant2": record.entrant_names[1] or None,
            "winner_id": record.winner_id,
            "pool_id": record.pool_id,
            "display_score": record.display_score,
        }
        for record in records
    ]
    return pl.DataFrame(rows, schema=RECORD_SCHEMA)


def layout_frame(view: BracketView) -> pl.DataFrame:
    """One row per laid-out match, winners side first."""
    rows = [
        {
            "side": side_view.side.value,
            "match_id": node.id,
            "round": node.round,
            "match_index": node.match_index,
            "x": node.x,
            "y": node.y,
            "round_label": node.round_label,
            "display_name": node.display_name,
        }
        for side_view in (view.winners, view.losers)
        for node in side_view.nodes.values()
    ]
    return pl.DataFrame(rows, schema=LAYOUT_SCHEMA)


def round_summary(view: BracketView) -> pl.DataFrame:
    """Match count per (side, round) column."""
    frame = layout_frame(view)
    if frame.is_empty():
        return frame.select(["side", "round"]).with_columns(
            pl.lit(0, dtype=pl.UInt32).alias("matches")
        )
    return (
        frame.group_by(["side", "round"])
        .agg(pl.len().alias("matches"))
        .sort(["side", "round"], descending=[True, False])
    )
