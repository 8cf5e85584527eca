"""Draw a laid-out bracket with plotly and write it as a self-reloading page."""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

import plotly.graph_objects as go

from bracketview.bracket.layout import short_tag, truncate_name
from bracketview.bracket.pipeline import BracketView, SideView
from bracketview.core.config import LayoutConfig
from bracketview.core.constants import NO_BRACKET_TEXT
from bracketview.core.models import LayoutNode, MatchRecord, Side

logger = logging.getLogger(__name__)

BACKGROUND = "#111111"
BOX_FILL = "#1f1f1f"
BOX_LINE = "#6E6E6E"
BOX_LINE_DONE = "#00EA64"
CONNECTOR = "#6E6E6E"
TEXT = "#f0f0f0"
HEADER_GAP = 30.0
VIEW_MARGIN = 20.0


@dataclass(frozen=True)
class Bounds:
    x0: float
    y0: float
    x1: float
    y1: float


def _records_by_id(side_view: SideView) -> dict[str, MatchRecord]:
    return {record.id: record for record in side_view.records}


def _box_text(node: LayoutNode, record: MatchRecord | None) -> str:
    text = node.display_name
    if record is None:
        return text
    details = []
    winner = record.winner_slot()
    if winner is not None:
        name = truncate_name(short_tag(record.entrant_names[winner]))
        details.append(f"<b>{name}</b>")
    if record.display_score:
        details.append(record.display_score)
    if details:
        text += "<br>" + " · ".join(details)
    return text


def _connector_path(
    parent: LayoutNode, child: LayoutNode, offset: float, config: LayoutConfig
) -> str:
    x0 = parent.x + config.box_width
    x1 = child.x
    y0 = parent.y + offset
    y1 = child.y + offset
    xm = (x0 + x1) / 2
    return f"M {x0},{y0} H {xm} V {y1} H {x1}"


def draw_side(
    fig: go.Figure,
    side_view: SideView,
    config: LayoutConfig,
    offset: float = 0.0,
) -> None:
    """Add boxes, labels, headers and connectors of one side to ``fig``."""
    records = _records_by_id(side_view)
    nodes = side_view.nodes
    half = config.box_height / 2

    for parent_id, child_id in side_view.graph.edges():
        parent, child = nodes.get(parent_id), nodes.get(child_id)
        if parent is None or child is None:
            continue
        fig.add_shape(
            type="path",
            path=_connector_path(parent, child, offset, config),
            line=dict(color=CONNECTOR, width=1),
            layer="below",
        )

    for node in nodes.values():
        record = records.get(node.id)
        done = record is not None and record.winner_id is not None
        fig.add_shape(
            type="rect",
            x0=node.x,
            x1=node.x + config.box_width,
            y0=node.y + offset - half,
            y1=node.y + offset + half,
            line=dict(color=BOX_LINE_DONE if done else BOX_LINE, width=1),
            fillcolor=BOX_FILL,
        )
        fig.add_annotation(
            x=node.x + config.box_width / 2,
            y=node.y + offset,
            text=_box_text(node, record),
            showarrow=False,
            font=dict(color=TEXT, size=11),
        )

    if nodes:
        top = min(node.y for node in nodes.values()) + offset - half
        for header in side_view.headers:
            fig.add_annotation(
                x=header.x + config.box_width / 2,
                y=top - HEADER_GAP,
                text=f"<b>{header.label}</b>",
                showarrow=False,
                font=dict(color=TEXT, size=12),
            )


def content_bounds(
    placed: list[tuple[SideView, float]], config: LayoutConfig
) -> Bounds:
    """Bounding box of everything drawn.

    Raises:
        ValueError: If nothing has been placed yet.
    """
    points = [
        (node.x, node.y + offset)
        for side_view, offset in placed
        for node in side_view.nodes.values()
    ]
    if not points:
        raise ValueError("no placed matches to measure")
    half = config.box_height / 2
    return Bounds(
        x0=min(x for x, _ in points) - VIEW_MARGIN,
        y0=min(y for _, y in points) - half - HEADER_GAP - VIEW_MARGIN,
        x1=max(x for x, _ in points) + config.box_width + VIEW_MARGIN,
        y1=max(y for _, y in points) + half + VIEW_MARGIN,
    )


def fit_view(
    fig: go.Figure, placed: list[tuple[SideView, float]], config: LayoutConfig
) -> bool:
    """Zoom the axes to the drawn content.

    Falls back to plotly's autorange when the content cannot be measured.

    Returns:
        True if the view was fitted to the content.
    """
    try:
        bounds = content_bounds(placed, config)
    except ValueError as e:
        logger.debug(f"Could not fit view, using autorange: {e}")
        fig.update_xaxes(autorange=True)
        fig.update_yaxes(autorange="reversed")
        return False

    fig.update_xaxes(range=[bounds.x0, bounds.x1])
    # Screen coordinates grow downwards
    fig.update_yaxes(range=[bounds.y1, bounds.y0])
    return True


def build_figure(
    view: BracketView,
    config: LayoutConfig | None = None,
    visible_side: Side | None = None,
    title: str | None = None,
) -> go.Figure:
    """Build a full figure for one bracket view.

    Args:
        view: Laid-out bracket.
        config: Geometry the view was laid out with.
        visible_side: Draw only this side; both sides are stacked when None.
        title: Optional figure title.

    Returns:
        A new figure; nothing from previous renders is reused.
    """
    config = config or LayoutConfig()
    fig = go.Figure()
    fig.update_layout(
        title=title,
        plot_bgcolor=BACKGROUND,
        paper_bgcolor=BACKGROUND,
        font=dict(color=TEXT),
        showlegend=False,
        margin=dict(l=10, r=10, t=40 if title else 10, b=10),
    )
    fig.update_xaxes(visible=False)
    fig.update_yaxes(visible=False)

    if visible_side is not None:
        placed = [(view.side(visible_side), 0.0)]
    else:
        band = config.y_offset + config.available_height
        placed = [(view.winners, 0.0), (view.losers, band)]

    for side_view, offset in placed:
        draw_side(fig, side_view, config, offset)

    if all(side_view.is_empty for side_view, _ in placed):
        fig.add_annotation(
            text=NO_BRACKET_TEXT,
            x=0.5,
            y=0.5,
            xref="paper",
            yref="paper",
            showarrow=False,
            font=dict(color=TEXT, size=18),
        )

    fit_view(fig, placed, config)
    return fig


def write_page(
    fig: go.Figure, path: str | Path, reload_seconds: int | None = None
) -> Path:
    """Write ``fig`` as a standalone HTML page, replacing any previous file.

    Args:
        fig: Figure to write.
        path: Destination file.
        reload_seconds: If set, the page reloads itself at this interval.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    html = fig.to_html(full_html=True, include_plotlyjs="cdn")
    if reload_seconds:
        html = html.replace(
            "<head>",
            f'<head><meta http-equiv="refresh" content="{int(reload_seconds)}">',
            1,
        )

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, suffix=".html.tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(html)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return path


class BracketRenderer:
    """Full redraw of the bracket page on every call."""

    def __init__(
        self,
        output_path: str | Path,
        config: LayoutConfig | None = None,
        reload_seconds: int | None = None,
    ):
        self.output_path = Path(output_path)
        self.config = config or LayoutConfig()
        self.reload_seconds = reload_seconds
        self.render_count = 0

    def render(
        self,
        view: BracketView,
        visible_side: Side | None = None,
        title: str | None = None,
    ) -> Path:
        fig = build_figure(view, self.config, visible_side=visible_side, title=title)
        path = write_page(fig, self.output_path, self.reload_seconds)
        self.render_count += 1
        logger.debug(f"Rendered {len(view.layout_nodes())} matches to {path}")
        return path
