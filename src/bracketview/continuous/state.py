"""Display session: all state that outlives a single refresh."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from bracketview.bracket.pipeline import BracketView
from bracketview.bracket.pools import PoolIndex, advance_cursor
from bracketview.core.models import MatchDetail, MatchRecord, Side

logger = logging.getLogger(__name__)


@dataclass
class DisplaySession:
    """
    Explicit context object owned by the scheduler.

    Holds the current dataset and everything derived from it, plus the
    presentation cursors toggled by the independent timers. Refreshes
    replace the dataset wholesale; toggles only move cursors and flags.
    """

    records: list[MatchRecord] = field(default_factory=list)
    data_source: str = "empty"  # "live", "cache" or "empty"
    dataset_generation: int = 0
    updated_at: datetime | None = None

    # Views built by the last refresh, keyed by pool id (None = whole bracket)
    views: dict[str | None, BracketView] = field(default_factory=dict)

    # Presentation state
    pool_cursor: int = 0
    visible_side: Side = Side.WINNERS

    # Overlay / schedule memory
    last_active_set_id: str | None = None
    last_active_match: MatchDetail | None = None
    last_removed_match: MatchDetail | None = None
    upcoming: list[MatchDetail] = field(default_factory=list)
    shown: list[MatchDetail] = field(default_factory=list)

    _pool_index: PoolIndex | None = field(default=None, init=False, repr=False)
    _latest_refresh: int = field(default=0, init=False, repr=False)

    # ------------------------------------------------------------------
    # Refresh generations
    # ------------------------------------------------------------------

    def begin_refresh(self) -> int:
        """Start a refresh and return its generation number."""
        self._latest_refresh += 1
        return self._latest_refresh

    def commit_dataset(
        self, generation: int, records: list[MatchRecord], source: str
    ) -> bool:
        """Replace the dataset if ``generation`` is still the latest refresh.

        Results of a refresh that was overtaken by a newer one are discarded.

        Returns:
            True if the dataset was replaced.
        """
        if generation != self._latest_refresh:
            logger.debug(
                f"Discarding stale refresh {generation} "
                f"(latest is {self._latest_refresh})"
            )
            return False

        self.records = list(records)
        self.data_source = source
        self.dataset_generation = generation
        self.updated_at = datetime.now(timezone.utc)
        self.views = {}
        self._pool_index = None
        return True

    # ------------------------------------------------------------------
    # Pools
    # ------------------------------------------------------------------

    @property
    def pool_index(self) -> PoolIndex:
        """Pool index of the current dataset, built on first use."""
        if self._pool_index is None:
            self._pool_index = PoolIndex(self.records)
        return self._pool_index

    @property
    def active_pool_id(self) -> str | None:
        return self.pool_index.pool_at(self.pool_cursor)

    def advance_pool(self) -> str | None:
        """Move the rotation cursor to the next pool and show its winners side."""
        self.pool_cursor = advance_cursor(self.pool_cursor, len(self.pool_index))
        self.visible_side = Side.WINNERS
        return self.active_pool_id

    def toggle_side(self) -> Side:
        self.visible_side = (
            Side.LOSERS if self.visible_side is Side.WINNERS else Side.WINNERS
        )
        return self.visible_side

    # ------------------------------------------------------------------
    # Overlay / schedule
    # ------------------------------------------------------------------

    def note_active_set(self, set_id: str | None) -> str | None:
        """Remember the queued match; keep the previous one when none is queued."""
        if set_id is not None:
            self.last_active_set_id = set_id
        return self.last_active_set_id

    def select_schedule(
        self, matches: list[MatchDetail], limit: int
    ) -> list[MatchDetail]:
        """Matches to show: the most recently removed one, then upcoming ones.

        A match counts as removed when it was upcoming on the previous call
        and is not upcoming anymore (completed or dropped from the queue).
        """
        upcoming = [match for match in matches if not match.is_completed]
        upcoming_ids = {match.id for match in upcoming}
        by_id = {match.id: match for match in matches}

        for previous in self.upcoming:
            if previous.id not in upcoming_ids:
                self.last_removed_match = by_id.get(previous.id, previous)

        self.upcoming = upcoming

        display: list[MatchDetail] = []
        if (
            self.last_removed_match is not None
            and self.last_removed_match.id not in upcoming_ids
        ):
            display.append(self.last_removed_match)
        display.extend(upcoming)
        self.shown = display[:limit]
        return self.shown
