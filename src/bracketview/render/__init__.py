"""Bracket page rendering and overlay text panels."""

from __future__ import annotations

from bracketview.render.figure import BracketRenderer, build_figure, fit_view
from bracketview.render.panels import (
    format_countdown,
    overlay_texts,
    schedule_text,
)
from bracketview.render.surface import FileTextSurface, MemorySurface, TextSurface

__all__ = [
    "BracketRenderer",
    "build_figure",
    "fit_view",
    "overlay_texts",
    "schedule_text",
    "format_countdown",
    "TextSurface",
    "FileTextSurface",
    "MemorySurface",
]
