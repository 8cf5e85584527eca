"""Core types, configuration and parsing shared by the display."""

from bracketview.core.config import DisplayConfig, LayoutConfig
from bracketview.core.models import (
    BracketNode,
    Entrant,
    EntrantSource,
    LayoutNode,
    MatchDetail,
    MatchRecord,
    Side,
    Slot,
    SourceKind,
    StreamEntry,
)
from bracketview.core.parser import (
    parse_phase_document,
    parse_set_detail,
    parse_set_node,
    parse_stream_queue,
    parse_tournament_info,
)

__all__ = [
    # Models
    "MatchRecord",
    "Entrant",
    "Slot",
    "EntrantSource",
    "SourceKind",
    "Side",
    "BracketNode",
    "LayoutNode",
    "MatchDetail",
    "StreamEntry",
    # Config
    "LayoutConfig",
    "DisplayConfig",
    # Parser
    "parse_phase_document",
    "parse_set_node",
    "parse_stream_queue",
    "parse_set_detail",
    "parse_tournament_info",
]
