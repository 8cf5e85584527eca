"""Fixed-delay scheduler and the display drivers it runs."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from bracketview.bracket.layout import LayoutEngine
from bracketview.bracket.pipeline import (
    BracketView,
    build_bracket_view,
    build_pool_view,
)
from bracketview.continuous.state import DisplaySession
from bracketview.continuous.strategies import RefreshStrategy
from bracketview.core.config import DisplayConfig
from bracketview.core.constants import MAX_SCHEDULE_ENTRIES
from bracketview.core.models import MatchDetail, MatchRecord, StreamEntry
from bracketview.core.parser import (
    parse_phase_document,
    parse_set_detail,
    parse_stream_queue,
)
from bracketview.render.figure import BracketRenderer
from bracketview.render.panels import (
    format_countdown,
    next_start,
    overlay_texts,
    schedule_text,
)
from bracketview.render.surface import COUNTDOWN, SCHEDULE, TextSurface
from bracketview.scraping.api import FetchError, StartGGClient
from bracketview.scraping.storage import SnapshotCache

logger = logging.getLogger(__name__)


@dataclass
class ScheduledTask:
    """One recurring action and its bookkeeping."""

    name: str
    delay: float
    action: Callable[[], Any]
    next_run: float
    runs: int = 0
    failures: int = 0


class FixedDelayScheduler:
    """
    Cooperative single-threaded scheduler.

    Each task runs again ``delay`` seconds after its previous run finished,
    so a task never overlaps itself or any other task. A task that raises is
    logged and rescheduled after ``error_delay`` (or its own delay, if
    longer); the loop keeps going.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        error_delay: float = 60.0,
    ):
        self.clock = clock
        self.sleep = sleep
        self.error_delay = error_delay
        self.tasks: dict[str, ScheduledTask] = {}

    def add_task(
        self,
        name: str,
        delay: float,
        action: Callable[[], Any],
        initial_delay: float = 0.0,
    ) -> ScheduledTask:
        """Register ``action`` to run every ``delay`` seconds after completion."""
        if delay <= 0:
            raise ValueError(f"Delay for task {name!r} must be positive")
        task = ScheduledTask(
            name=name,
            delay=delay,
            action=action,
            next_run=self.clock() + initial_delay,
        )
        self.tasks[name] = task
        logger.debug(f"Scheduled task {name} every {delay}s")
        return task

    def next_due(self) -> float | None:
        if not self.tasks:
            return None
        return min(task.next_run for task in self.tasks.values())

    def _run_task(self, task: ScheduledTask) -> None:
        try:
            task.action()
        except Exception as e:
            task.failures += 1
            logger.error(f"Error in task {task.name}: {e}", exc_info=True)
            wait = max(task.delay, self.error_delay)
        else:
            wait = task.delay
        task.runs += 1
        task.next_run = self.clock() + wait

    def run_pending(self) -> int:
        """Run every task that is due, earliest first.

        Returns:
            Number of tasks that ran.
        """
        now = self.clock()
        due = sorted(
            (task for task in self.tasks.values() if task.next_run <= now),
            key=lambda task: task.next_run,
        )
        for task in due:
            self._run_task(task)
        return len(due)

    def run(self, max_runs: int | None = None, task_name: str | None = None) -> int:
        """
        Run until interrupted.

        Args:
            max_runs: Stop once this many runs have happened (None for
                unlimited).
            task_name: Count only runs of this task towards ``max_runs``.

        Returns:
            Number of counted runs.
        """
        def counted() -> int:
            if task_name is not None:
                return self.tasks[task_name].runs
            return sum(task.runs for task in self.tasks.values())

        logger.info(f"Starting scheduler with tasks: {', '.join(self.tasks)}")
        while max_runs is None or counted() < max_runs:
            try:
                self.run_pending()
                if max_runs is not None and counted() >= max_runs:
                    break
                next_due = self.next_due()
                if next_due is None:
                    break
                wait = next_due - self.clock()
                if wait > 0:
                    self.sleep(wait)
            except KeyboardInterrupt:
                logger.info("Interrupted by user")
                break

        runs = counted()
        logger.info(f"Scheduler stopped after {runs} runs")
        return runs


def find_stream(
    entries: list[StreamEntry], stream_name: str | None
) -> StreamEntry | None:
    """Entry of the configured channel, matched case-insensitively."""
    if not stream_name:
        return None
    wanted = stream_name.lower()
    for entry in entries:
        if entry.name.lower() == wanted:
            return entry
    return None


def queued_set_ids(entries: list[StreamEntry]) -> list[str]:
    """All queued set ids across streams, first occurrence wins."""
    seen: dict[str, None] = {}
    for entry in entries:
        for set_id in entry.set_ids:
            seen.setdefault(set_id, None)
    return list(seen)


class BracketDriver:
    """
    Fetches the bracket, lays it out and presents it.

    Handles the full refresh cycle including:
    - Live fetch with fallback to the cached snapshot
    - Stale refresh rejection through the session's generations
    - Per-pool views and the pool / side rotation in pool mode
    """

    def __init__(
        self,
        client: StartGGClient,
        cache: SnapshotCache,
        renderer: BracketRenderer,
        config: DisplayConfig,
        session: DisplaySession | None = None,
        engine: LayoutEngine | None = None,
    ):
        self.client = client
        self.cache = cache
        self.renderer = renderer
        self.config = config
        self.session = session or DisplaySession()
        self.engine = engine or LayoutEngine(config.layout)

    def load_records(self) -> tuple[list[MatchRecord], str]:
        """
        Fetch the phase, falling back to the cached snapshot.

        Returns:
            Records and their source: "live", "cache" or "empty".
        """
        if self.config.phase_id is None:
            logger.warning("No phase id configured, using cached bracket")
        else:
            try:
                document = self.client.fetch_phase(self.config.phase_id)
                records = parse_phase_document(document)
                if records:
                    try:
                        self.cache.save(document)
                    except OSError as e:
                        logger.warning(f"Could not update bracket cache: {e}")
                    return records, "live"
                logger.warning(
                    f"Phase {self.config.phase_id} returned no sets, "
                    "using cached bracket"
                )
            except FetchError as e:
                logger.warning(f"Bracket fetch failed, using cached bracket: {e}")

        cached = self.cache.load()
        if cached is not None:
            records = parse_phase_document(cached)
            if records:
                return records, "cache"

        logger.warning("No bracket data available")
        return [], "empty"

    def refresh(self) -> bool:
        """
        Run one refresh cycle.

        Returns:
            True if the new dataset was committed and presented.
        """
        generation = self.session.begin_refresh()
        records, source = self.load_records()
        if not self.session.commit_dataset(generation, records, source):
            return False

        if self.config.pool_mode:
            index = self.session.pool_index
            for pool_id in index.pool_ids:
                self.session.views[pool_id] = build_pool_view(
                    index, pool_id, self.engine
                )
        else:
            self.session.views[None] = build_bracket_view(records, self.engine)

        logger.info(
            f"Bracket refreshed from {source}: {len(records)} sets, "
            f"{len(self.session.views)} views"
        )
        self.present()
        return True

    def current_view(self) -> BracketView:
        key = self.session.active_pool_id if self.config.pool_mode else None
        view = self.session.views.get(key)
        if view is None:
            view = build_bracket_view([], self.engine, pool_id=key)
        return view

    def present(self) -> None:
        """Redraw the current view from the session, without fetching."""
        view = self.current_view()
        if self.config.pool_mode:
            title = f"Pool {view.pool_id}" if view.pool_id else None
            self.renderer.render(
                view, visible_side=self.session.visible_side, title=title
            )
        else:
            self.renderer.render(view)

    def rotate_pool(self) -> None:
        pool_id = self.session.advance_pool()
        logger.debug(f"Showing pool {pool_id!r}")
        self.present()

    def toggle_side(self) -> None:
        side = self.session.toggle_side()
        logger.debug(f"Showing {side.value} side")
        self.present()

    def get_status(self) -> dict[str, Any]:
        """
        Get current display status.

        Returns:
            Status information
        """
        view = self.current_view()
        return {
            "data_source": self.session.data_source,
            "generation": self.session.dataset_generation,
            "updated_at": (
                self.session.updated_at.isoformat()
                if self.session.updated_at
                else None
            ),
            "sets": len(self.session.records),
            "pools": self.session.pool_index.pool_ids,
            "active_pool": self.session.active_pool_id,
            "visible_side": self.session.visible_side.value,
            "winners_matches": len(view.winners.nodes),
            "losers_matches": len(view.losers.nodes),
        }


class OverlayDriver:
    """Binds the match queued on the configured stream to the overlay texts."""

    def __init__(
        self,
        client: StartGGClient,
        surface: TextSurface,
        config: DisplayConfig,
        session: DisplaySession | None = None,
    ):
        self.client = client
        self.surface = surface
        self.config = config
        self.session = session or DisplaySession()

    def _fetch_queue(self) -> list[StreamEntry] | None:
        if not self.config.tournament_slug:
            logger.warning("No tournament configured, stream queue unavailable")
            return None
        try:
            document = self.client.fetch_stream_queue(self.config.tournament_slug)
        except FetchError as e:
            logger.warning(f"Stream queue fetch failed: {e}")
            return None
        return parse_stream_queue(document)

    def active_match(self) -> MatchDetail | None:
        entries = self._fetch_queue()
        if entries is not None:
            entry = find_stream(entries, self.config.stream_name)
            queued = entry.set_ids[0] if entry and entry.set_ids else None
            self.session.note_active_set(queued)

        set_id = self.session.last_active_set_id
        if set_id is None:
            return None
        try:
            detail = parse_set_detail(self.client.fetch_set(set_id))
        except FetchError as e:
            logger.warning(f"Match {set_id} fetch failed, keeping last texts: {e}")
            return self.session.last_active_match
        self.session.last_active_match = detail
        return detail

    def tick(self) -> dict[str, str]:
        texts = overlay_texts(self.active_match())
        for name, value in texts.items():
            self.surface.set_text(name, value)
        return texts


class ScheduleDriver:
    """Keeps the upcoming-matches panel and its countdown current."""

    def __init__(
        self,
        client: StartGGClient,
        surface: TextSurface,
        config: DisplayConfig,
        session: DisplaySession | None = None,
        clock: Callable[[], float] = time.time,
        limit: int = MAX_SCHEDULE_ENTRIES,
    ):
        self.client = client
        self.surface = surface
        self.config = config
        self.session = session or DisplaySession()
        self.clock = clock
        self.limit = limit

    def queued_matches(self) -> list[MatchDetail] | None:
        """Details of every queued match, or None if the queue is unavailable."""
        if not self.config.tournament_slug:
            logger.warning("No tournament configured, stream queue unavailable")
            return None
        try:
            document = self.client.fetch_stream_queue(self.config.tournament_slug)
        except FetchError as e:
            logger.warning(f"Stream queue fetch failed: {e}")
            return None

        known = {match.id: match for match in self.session.upcoming}
        matches: list[MatchDetail] = []
        for set_id in queued_set_ids(parse_stream_queue(document)):
            try:
                detail = parse_set_detail(self.client.fetch_set(set_id))
            except FetchError as e:
                # a failed fetch keeps the match upcoming
                detail = known.get(set_id)
                logger.warning(f"Match {set_id} fetch failed: {e}")
            if detail is not None:
                matches.append(detail)
        return matches

    def tick(self) -> str | None:
        matches = self.queued_matches()
        if matches is None:
            return None
        display = self.session.select_schedule(matches, self.limit)
        text = schedule_text(display)
        self.surface.set_text(SCHEDULE, text)
        self.tick_countdown()
        return text

    def tick_countdown(self) -> str:
        now = self.clock()
        listed = [match for match in self.session.shown if not match.is_completed]
        text = format_countdown(next_start(listed, now), now)
        self.surface.set_text(COUNTDOWN, text)
        return text


def schedule_bracket(
    scheduler: FixedDelayScheduler,
    driver: BracketDriver,
    strategy: RefreshStrategy,
) -> str:
    """Register the bracket timers; returns the name of the refresh task."""
    scheduler.add_task("bracket", strategy.bracket_delay, driver.refresh)
    if driver.config.pool_mode:
        scheduler.add_task(
            "pool_cycle",
            strategy.pool_cycle_delay,
            driver.rotate_pool,
            initial_delay=strategy.pool_cycle_delay,
        )
        scheduler.add_task(
            "side_toggle",
            strategy.side_toggle_delay,
            driver.toggle_side,
            initial_delay=strategy.side_toggle_delay,
        )
    return "bracket"


def schedule_overlay(
    scheduler: FixedDelayScheduler,
    driver: OverlayDriver,
    strategy: RefreshStrategy,
) -> str:
    scheduler.add_task("overlay", strategy.overlay_delay, driver.tick)
    return "overlay"


def schedule_panel(
    scheduler: FixedDelayScheduler,
    driver: ScheduleDriver,
    strategy: RefreshStrategy,
) -> str:
    scheduler.add_task("schedule", strategy.schedule_delay, driver.tick)
    scheduler.add_task(
        "countdown",
        strategy.countdown_delay,
        driver.tick_countdown,
        initial_delay=strategy.countdown_delay,
    )
    return "schedule"
