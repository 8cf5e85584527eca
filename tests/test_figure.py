from pathlib import Path

import plotly.graph_objects as go
import pytest

from bracketview.bracket.pipeline import build_bracket_view
from bracketview.core.config import LayoutConfig
from bracketview.core.models import Side
from bracketview.core.parser import parse_phase_document
from bracketview.render.figure import (
    BracketRenderer,
    build_figure,
    content_bounds,
    fit_view,
    write_page,
)


@pytest.fixture
def view(phase_document):
    return build_bracket_view(parse_phase_document(phase_document))


def _texts(fig):
    return [a.text for a in fig.layout.annotations]


def test_both_sides_are_drawn(view):
    fig = build_figure(view)

    rects = [s for s in fig.layout.shapes if s.type == "rect"]
    paths = [s for s in fig.layout.shapes if s.type == "path"]
    assert len(rects) == 6
    # 3 winners-side edges plus 1 losers-side edge
    assert len(paths) == 4
    assert "Alpha vs Bravo" in _texts(fig)
    assert "<b>Winners Final</b>" in _texts(fig)
    assert "<b>Losers Final</b>" in _texts(fig)


def test_single_side(view):
    fig = build_figure(view, visible_side=Side.LOSERS)
    assert len([s for s in fig.layout.shapes if s.type == "rect"]) == 2
    assert "<b>Winners Final</b>" not in _texts(fig)


def test_winner_and_score_are_shown(make_record):
    record = make_record(
        "1", 1, names=("Alpha", "Bravo"), winner="bravo", display_score="Alpha 1 - Bravo 3"
    )
    fig = build_figure(build_bracket_view([record]))

    box = next(t for t in _texts(fig) if t.startswith("Alpha vs Bravo"))
    assert "<b>Bravo</b>" in box
    assert "Alpha 1 - Bravo 3" in box
    rect = next(s for s in fig.layout.shapes if s.type == "rect")
    assert rect.line.color == "#00EA64"


def test_view_fits_content(view):
    config = LayoutConfig()
    fig = build_figure(view, config)
    x0, x1 = fig.layout.xaxis.range
    assert x0 < config.x_offset
    assert x1 > 2 * config.column_pitch + config.x_offset


def test_empty_view_falls_back_to_autorange():
    fig = build_figure(build_bracket_view([]))

    assert "No bracket data." in _texts(fig)
    assert fig.layout.xaxis.autorange is True
    assert fig.layout.yaxis.autorange == "reversed"


def test_fit_view_reports_fallback(view):
    fig = go.Figure()
    assert fit_view(fig, [], LayoutConfig()) is False
    assert fit_view(fig, [(view.winners, 0.0)], LayoutConfig()) is True


def test_content_bounds_requires_nodes():
    with pytest.raises(ValueError):
        content_bounds([], LayoutConfig())


def test_write_page_adds_reload(tmp_path: Path):
    path = write_page(go.Figure(), tmp_path / "out" / "bracket.html", reload_seconds=30)

    html = path.read_text(encoding="utf-8")
    assert '<meta http-equiv="refresh" content="30">' in html
    assert [p.name for p in path.parent.iterdir()] == ["bracket.html"]


def test_renderer_redraws_file(view, tmp_path: Path):
    renderer = BracketRenderer(tmp_path / "bracket.html")
    renderer.render(view)
    renderer.render(view, visible_side=Side.WINNERS, title="Pool A1")

    assert renderer.render_count == 2
    html = (tmp_path / "bracket.html").read_text(encoding="utf-8")
    assert "Pool A1" in html
    assert "http-equiv" not in html
