"""Tests for the FIFO scheduler."""

from ucjs_loader.integrations.scheduler.queue import QueueScheduler


def test_defer_does_not_run_immediately() -> None:
    calls: list[str] = []
    scheduler = QueueScheduler()

    scheduler.defer(calls.append, "a")

    assert calls == []
    assert scheduler.pending_count == 1


def test_run_pending_is_fifo_and_includes_nested_defers() -> None:
    calls: list[str] = []
    scheduler = QueueScheduler()

    def first() -> None:
        calls.append("first")
        scheduler.defer(calls.append, "nested")

    scheduler.defer(first)
    scheduler.defer(calls.append, "second")

    assert scheduler.run_pending() == 3
    assert calls == ["first", "second", "nested"]
    assert scheduler.pending_count == 0


def test_run_next_on_empty_queue() -> None:
    assert not QueueScheduler().run_next()


def test_failing_continuation_is_recorded_and_others_run() -> None:
    calls: list[str] = []
    scheduler = QueueScheduler()

    def boom() -> None:
        raise RuntimeError("boom")

    scheduler.defer(boom)
    scheduler.defer(calls.append, "after")

    scheduler.run_pending()

    assert calls == ["after"]
    assert len(scheduler.failures) == 1
    assert str(scheduler.failures[0]) == "boom"
