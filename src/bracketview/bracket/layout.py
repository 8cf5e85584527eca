"""Column/row placement and display text for bracket matches.

Columns come from round membership: the i-th distinct round depth of a side
is drawn in column i, whatever the actual round numbers are. Inside a column
matches are ordered by match index and spread vertically by a spacing
strategy. Two strategies exist and a deployment picks exactly one:

* ``centered`` (default): every column uses the pitch of the largest round
  and is centered on the middle of the available height.
* ``edge_anchored``: each column is divided on its own into ``count + 2``
  slot boundaries, the outer two sitting on the column edges.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from bracketview.bracket.graph import parse_match_index
from bracketview.bracket.partition import RoundGroups, round_keys
from bracketview.core.config import LayoutConfig
from bracketview.core.constants import (
    ELLIPSIS,
    MAX_NAME_LENGTH,
    NAME_DELIMITER,
    TBD,
)
from bracketview.core.models import LayoutNode, MatchRecord

if TYPE_CHECKING:
    from typing import Any


@runtime_checkable
class SpacingStrategy(Protocol):
    """Protocol for vertical placement inside one column."""

    def positions(
        self,
        count: int,
        max_round_size: int,
        y_offset: float,
        available_height: float,
    ) -> list[float]:
        """Compute the y coordinate of each match in a column.

        Args:
            count: Number of matches in this column.
            max_round_size: Largest column size on this side.
            y_offset: Top of the drawing area.
            available_height: Height of the drawing area.

        Returns:
            ``count`` y coordinates, top to bottom.
        """
        ...


@dataclass(frozen=True)
class CenteredSpacing:
    """Uniform pitch derived from the largest round, centered vertically.

    ``spacing = H / (max_round_size + 1)`` and a column of ``n`` matches
    spans ``(n - 1) * spacing`` around ``y_offset + H / 2``.
    """

    def positions(
        self,
        count: int,
        max_round_size: int,
        y_offset: float,
        available_height: float,
    ) -> list[float]:
        if count <= 0:
            return []
        spacing = available_height / (max(max_round_size, count) + 1)
        total_height = (count - 1) * spacing
        center_y = y_offset + available_height / 2
        start_y = center_y - total_height / 2
        return [start_y + index * spacing for index in range(count)]


@dataclass(frozen=True)
class EdgeAnchoredSpacing:
    """Per-column spacing over ``count + 2`` virtual slot boundaries.

    The first and last boundary sit on the column edges and stay empty, so
    match ``i`` lands on boundary ``i + 1``.
    """

    def positions(
        self,
        count: int,
        max_round_size: int,
        y_offset: float,
        available_height: float,
    ) -> list[float]:
        if count <= 0:
            return []
        step = available_height / (count + 1)
        return [y_offset + (index + 1) * step for index in range(count)]


def get_spacing_strategy(mode: str, **kwargs: Any) -> SpacingStrategy:
    """Factory function to get a spacing strategy by name.

    Raises:
        ValueError: If the spacing mode is unknown.
    """
    strategy_classes = {
        "centered": CenteredSpacing,
        "edge_anchored": EdgeAnchoredSpacing,
    }

    strategy_class = strategy_classes.get(mode)
    if strategy_class is None:
        raise ValueError(f"Unknown spacing mode: {mode}")

    valid_fields = strategy_class.__dataclass_fields__.keys()
    return strategy_class(
        **{key: value for key, value in kwargs.items() if key in valid_fields}
    )


def short_tag(name: str) -> str:
    """Canonical short tag of an entrant name.

    ``"Team | Tag"`` resolves to ``"Tag"``; names without the delimiter are
    returned whole.
    """
    if NAME_DELIMITER in name:
        name = name.split(NAME_DELIMITER, 1)[1]
    return name.strip()


def truncate_name(name: str, limit: int = MAX_NAME_LENGTH) -> str:
    """Cut a name to ``limit`` visible characters, the last being an ellipsis."""
    if len(name) <= limit:
        return name
    return name[: limit - len(ELLIPSIS)] + ELLIPSIS


def resolve_display_name(record: MatchRecord) -> str:
    """``"A vs B"``, ``"A vs TBD"`` or ``"TBD vs TBD"``."""
    names = [
        truncate_name(short_tag(name))
        for name in record.entrant_names
        if name
    ]
    names = [name for name in names if name]
    if len(names) >= 2:
        return f"{names[0]} vs {names[1]}"
    if len(names) == 1:
        return f"{names[0]} vs {TBD}"
    return f"{TBD} vs {TBD}"


def layout_side(
    groups: RoundGroups,
    column_pitch: float,
    x_offset: float,
    available_height: float,
    y_offset: float = 0.0,
    spacing: SpacingStrategy | None = None,
) -> dict[str, LayoutNode]:
    """Place every match of one side.

    Args:
        groups: Records of one side keyed by round depth.
        column_pitch: Horizontal distance between columns.
        x_offset: X coordinate of the first column.
        available_height: Vertical extent to spread matches over.
        y_offset: Top of the vertical extent. Defaults to 0.0.
        spacing: Spacing strategy. Defaults to CenteredSpacing.

    Returns:
        LayoutNode per record id, in column then match-index order.
    """
    spacing = spacing or CenteredSpacing()
    if not groups:
        return {}

    max_round_size = max(len(group) for group in groups.values())
    nodes: dict[str, LayoutNode] = {}

    for column_index, depth in enumerate(round_keys(groups)):
        ordered = sorted(groups[depth], key=lambda r: parse_match_index(r.id))
        ys = spacing.positions(
            len(ordered), max_round_size, y_offset, available_height
        )
        x = column_index * column_pitch + x_offset
        for record, y in zip(ordered, ys):
            nodes[record.id] = LayoutNode(
                id=record.id,
                x=x,
                y=y,
                round=record.round,
                match_index=parse_match_index(record.id),
                round_label=record.round_label,
                display_name=resolve_display_name(record),
            )

    return nodes


@dataclass
class LayoutEngine:
    """Layout bound to one deployment's geometry and spacing strategy."""

    config: LayoutConfig = field(default_factory=LayoutConfig)

    def __post_init__(self) -> None:
        self.spacing = get_spacing_strategy(self.config.spacing_mode)

    def layout(self, groups: RoundGroups) -> dict[str, LayoutNode]:
        return layout_side(
            groups,
            column_pitch=self.config.column_pitch,
            x_offset=self.config.x_offset,
            available_height=self.config.available_height,
            y_offset=self.config.y_offset,
            spacing=self.spacing,
        )
