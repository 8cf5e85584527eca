"""Live start.gg bracket display."""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]

# Note: import directly from submodules:
# - bracketview.bracket: Normalizer, partitioner, graph, layout and pools
# - bracketview.scraping: start.gg client and fallback cache
# - bracketview.render: Plotly bracket page, overlay and schedule texts
# - bracketview.continuous: Scheduler, display drivers and CLI
