import pytest

from bracketview.continuous.manager import FixedDelayScheduler


class FakeClock:
    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler(clock):
    return FixedDelayScheduler(clock=clock, sleep=clock.sleep, error_delay=10.0)


def test_next_run_counts_from_completion(clock, scheduler):
    starts = []

    def slow_refresh():
        starts.append(clock.now)
        clock.now += 2.0

    scheduler.add_task("bracket", 5.0, slow_refresh)
    runs = scheduler.run(max_runs=3, task_name="bracket")

    assert runs == 3
    assert starts == [0.0, 7.0, 14.0]


def test_independent_timers_interleave(clock, scheduler):
    log = []
    scheduler.add_task("refresh", 3.0, lambda: log.append(("refresh", clock.now)))
    scheduler.add_task(
        "toggle", 2.0, lambda: log.append(("toggle", clock.now)), initial_delay=2.0
    )
    scheduler.run(max_runs=3, task_name="refresh")

    assert log == [
        ("refresh", 0.0),
        ("toggle", 2.0),
        ("refresh", 3.0),
        ("toggle", 4.0),
        ("refresh", 6.0),
        ("toggle", 6.0),
    ]


def test_failing_task_is_rescheduled_after_error_delay(clock, scheduler, caplog):
    calls = []

    def flaky():
        calls.append(clock.now)
        if len(calls) == 1:
            raise RuntimeError("boom")

    task = scheduler.add_task("overlay", 1.0, flaky)
    scheduler.run(max_runs=3, task_name="overlay")

    assert calls == [0.0, 10.0, 11.0]
    assert task.failures == 1
    errors = [r for r in caplog.records if r.levelname == "ERROR"]
    assert "boom" in errors[0].getMessage()
    assert errors[0].exc_info is not None


def test_keyboard_interrupt_stops_loop(scheduler):
    def interrupt():
        raise KeyboardInterrupt

    scheduler.add_task("bracket", 1.0, interrupt)
    assert scheduler.run() == 0


def test_run_pending_only_runs_due_tasks(clock, scheduler):
    ran = []
    scheduler.add_task("now", 5.0, lambda: ran.append("now"))
    scheduler.add_task("later", 5.0, lambda: ran.append("later"), initial_delay=3.0)

    assert scheduler.run_pending() == 1
    assert ran == ["now"]
    assert scheduler.next_due() == 3.0


def test_rejects_non_positive_delay(scheduler):
    with pytest.raises(ValueError):
        scheduler.add_task("bad", 0, lambda: None)


def test_empty_scheduler_returns(scheduler):
    assert scheduler.next_due() is None
    assert scheduler.run() == 0
