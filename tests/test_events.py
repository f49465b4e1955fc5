from __future__ import annotations

import logging

from events import Debouncer, EventLoop, ManualClock


def test_call_later_waits_for_due_time(clock: ManualClock, loop: EventLoop) -> None:
    fired = []
    loop.call_later(100, fired.append, "a")
    clock.advance(99)
    assert loop.run_pending() == 0
    clock.advance(1)
    assert loop.run_pending() == 1
    assert fired == ["a"]


def test_timers_run_in_due_order(clock: ManualClock, loop: EventLoop) -> None:
    fired = []
    loop.call_later(50, fired.append, "late")
    loop.call_later(10, fired.append, "early")
    loop.call_soon(fired.append, "now")
    clock.advance(100)
    loop.run_pending()
    assert fired == ["now", "early", "late"]


def test_cancelled_timer_never_runs(clock: ManualClock, loop: EventLoop) -> None:
    fired = []
    handle = loop.call_later(10, fired.append, "x")
    handle.cancel()
    clock.advance(20)
    loop.run_pending()
    assert fired == []
    assert loop.pending() == 0


def test_frame_callbacks_run_before_timers(clock: ManualClock, loop: EventLoop) -> None:
    fired = []
    loop.call_soon(fired.append, "timer")
    loop.request_frame(fired.append, "frame")
    loop.run_pending()
    assert fired == ["frame", "timer"]


def test_failing_callback_does_not_stall_queue(loop: EventLoop, caplog) -> None:
    fired = []

    def boom() -> None:
        raise RuntimeError("boom")

    loop.call_soon(boom)
    loop.call_soon(fired.append, "after")
    with caplog.at_level(logging.ERROR, logger="events"):
        loop.run_pending()
    assert fired == ["after"]
    assert "failed" in caplog.text


def test_debouncer_fires_once_after_pause(clock: ManualClock, loop: EventLoop) -> None:
    calls = []
    debounced = Debouncer(loop, 300, lambda: calls.append(clock()))
    debounced()
    clock.advance(200)
    debounced()
    clock.advance(200)
    loop.run_pending()
    assert calls == []
    assert debounced.pending
    clock.advance(100)
    loop.run_pending()
    assert calls == [500]
    assert not debounced.pending


def test_debouncer_cancel(clock: ManualClock, loop: EventLoop) -> None:
    calls = []
    debounced = Debouncer(loop, 300, lambda: calls.append(1))
    debounced()
    debounced.cancel()
    clock.advance(1000)
    loop.run_pending()
    assert calls == []
