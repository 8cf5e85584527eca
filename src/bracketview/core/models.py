"""Data model shared by the bracket construction and layout engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class SourceKind(Enum):
    """Where a slot's occupant comes from."""

    TERMINAL = "terminal"  # Fixed seed or bye, no upstream match
    MATCH = "match"  # Winner/loser of another match


class Side(Enum):
    """Bracket side, tagged by the sign of a match's round."""

    WINNERS = "winners"
    LOSERS = "losers"


@dataclass(frozen=True)
class Entrant:
    """A player or team occupying a slot."""

    id: str
    name: str


@dataclass(frozen=True)
class Slot:
    """One of the two ordered positions in a match."""

    entrant: Entrant | None = None
    score: int | None = None


@dataclass(frozen=True)
class EntrantSource:
    """Descriptor explaining where a slot's occupant comes from."""

    kind: SourceKind = SourceKind.TERMINAL
    match_id: str | None = None

    @property
    def is_match_reference(self) -> bool:
        return self.kind is SourceKind.MATCH and self.match_id is not None

    @classmethod
    def terminal(cls) -> EntrantSource:
        return cls(kind=SourceKind.TERMINAL)

    @classmethod
    def from_match(cls, match_id: str) -> EntrantSource:
        return cls(kind=SourceKind.MATCH, match_id=match_id)


@dataclass(frozen=True)
class MatchRecord:
    """One bracket match ("set") after ingestion.

    The id is opaque. Ids generated for unstarted brackets follow the
    ``prefix_poolId_round_matchIndex`` structure, which is what the layout
    engine parses the match index from.
    """

    id: str
    round: int
    round_label: str = ""
    slots: tuple[Slot, Slot] = (Slot(), Slot())
    entrant_sources: tuple[EntrantSource, EntrantSource] = (
        EntrantSource(),
        EntrantSource(),
    )
    winner_id: str | None = None
    pool_id: str | None = None
    display_score: str | None = None
    phase_group_id: str | None = None

    @property
    def side(self) -> Side:
        return Side.WINNERS if self.round >= 0 else Side.LOSERS

    @property
    def depth(self) -> int:
        return abs(self.round)

    @property
    def entrant_names(self) -> tuple[str, str]:
        """Raw entrant names, empty when a slot is unfilled."""
        return tuple(
            slot.entrant.name if slot.entrant and slot.entrant.name else ""
            for slot in self.slots
        )

    def winner_slot(self) -> int | None:
        """Index of the slot holding the winner, if decided."""
        if self.winner_id is None:
            return None
        for index, slot in enumerate(self.slots):
            if slot.entrant is not None and slot.entrant.id == self.winner_id:
                return index
        return None


@dataclass(eq=False)
class BracketNode:
    """A MatchRecord plus its resolved dependency edges.

    Nodes belong to the node map of a single graph construction pass and
    are rebuilt from scratch on every refresh.
    """

    record: MatchRecord
    parents: list[BracketNode] = field(default_factory=list)
    children: list[BracketNode] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.record.id

    def __repr__(self) -> str:
        return (
            f"BracketNode(id={self.id!r}, "
            f"parents={[p.id for p in self.parents]}, "
            f"children={[c.id for c in self.children]})"
        )


@dataclass(frozen=True)
class LayoutNode:
    """Placement and resolved display text for one match."""

    id: str
    x: float
    y: float
    round: int
    match_index: int
    round_label: str
    display_name: str


@dataclass(frozen=True)
class MatchDetail:
    """A single match as shown by the overlay and schedule panels."""

    id: str
    entrant_names: tuple[str, ...] = ()
    scores: tuple[int, ...] = ()
    round_label: str | None = None
    round: int | None = None
    display_score: str | None = None
    phase_name: str | None = None
    pool_id: str | None = None
    start_at: int | None = None
    completed_at: int | None = None

    @property
    def is_completed(self) -> bool:
        return bool(self.completed_at)


@dataclass(frozen=True)
class StreamEntry:
    """One stream channel and the match ids queued on it."""

    source: str
    name: str
    set_ids: tuple[str, ...] = ()
