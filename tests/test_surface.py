from pathlib import Path

from bracketview.render.surface import (
    FileTextSurface,
    MemorySurface,
    TextSurface,
)


def test_file_surface_writes_one_file_per_name(tmp_path: Path):
    surface = FileTextSurface(tmp_path / "display")
    surface.set_text("player1", "Alpha")
    surface.set_text("schedule", "R1\nAlpha vs Bravo")

    assert (tmp_path / "display" / "player1.txt").read_text(encoding="utf-8") == "Alpha"
    assert surface.path_for("schedule").read_text(encoding="utf-8") == (
        "R1\nAlpha vs Bravo"
    )


def test_file_surface_skips_unchanged_text(tmp_path: Path):
    surface = FileTextSurface(tmp_path)
    surface.set_text("score", "1 - 0")
    path = surface.path_for("score")
    path.write_text("edited elsewhere", encoding="utf-8")

    surface.set_text("score", "1 - 0")
    assert path.read_text(encoding="utf-8") == "edited elsewhere"

    surface.set_text("score", "2 - 0")
    assert path.read_text(encoding="utf-8") == "2 - 0"


def test_surfaces_satisfy_protocol(tmp_path: Path):
    assert isinstance(MemorySurface(), TextSurface)
    assert isinstance(FileTextSurface(tmp_path), TextSurface)


def test_memory_surface():
    surface = MemorySurface()
    surface.set_text("round", "Grand Final")
    assert surface.get("round") == "Grand Final"
    assert surface.get("countdown") == ""
