"""Single-threaded event queue: timers, next-frame callbacks and debouncing.

Nothing here blocks. Scheduling only records a callback; callbacks run when
the owner pumps the loop with run_pending(), which the terminal front end
does before every redraw. All callbacks run on the pumping thread, one at a
time, so task mutations never interleave.
"""
from __future__ import annotations
import heapq
import itertools
import logging
import time
from typing import Any, Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class ManualClock:
    """Clock that only moves when told to; milliseconds."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class TimerHandle:
    def __init__(self, when: float, callback: Callable[..., Any], args: Tuple[Any, ...]):
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        state = 'cancelled' if self.cancelled else 'pending'
        return f"TimerHandle(when={self.when:.1f}, {state})"


class EventLoop:
    def __init__(self, clock: Clock = monotonic_ms):
        self.clock = clock
        self._timers: List[Tuple[float, int, TimerHandle]] = []
        self._frames: List[TimerHandle] = []
        self._seq = itertools.count()

    def call_later(self, delay_ms: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        handle = TimerHandle(self.clock() + max(0.0, delay_ms), callback, args)
        heapq.heappush(self._timers, (handle.when, next(self._seq), handle))
        return handle

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        return self.call_later(0, callback, *args)

    def request_frame(self, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        """Run callback on the next paint cycle, ahead of any due timers."""
        handle = TimerHandle(self.clock(), callback, args)
        self._frames.append(handle)
        return handle

    def run_pending(self) -> int:
        """Run frame callbacks, then every timer that is due. Returns the number run."""
        ran = 0
        frames, self._frames = self._frames, []
        for handle in frames:
            if not handle.cancelled:
                self._invoke(handle)
                ran += 1
        now = self.clock()
        while self._timers and self._timers[0][0] <= now:
            _, _, handle = heapq.heappop(self._timers)
            if handle.cancelled:
                continue
            self._invoke(handle)
            ran += 1
        return ran

    def pending(self) -> int:
        live = sum(1 for _, _, h in self._timers if not h.cancelled)
        return live + sum(1 for h in self._frames if not h.cancelled)

    @staticmethod
    def _invoke(handle: TimerHandle) -> None:
        try:
            handle.callback(*handle.args)
        except Exception:
            # a failing callback must not stall the rest of the queue
            logger.exception("scheduled callback %r failed", handle.callback)


class Debouncer:
    """Delay func until calls have paused for delay_ms; each call resets the wait."""

    def __init__(self, loop: EventLoop, delay_ms: float, func: Callable[..., Any]):
        self.loop = loop
        self.delay_ms = delay_ms
        self.func = func
        self._handle: Optional[TimerHandle] = None

    def __call__(self, *args: Any) -> None:
        self.cancel()
        self._handle = self.loop.call_later(self.delay_ms, self._fire, *args)

    def _fire(self, *args: Any) -> None:
        self._handle = None
        self.func(*args)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    @property
    def pending(self) -> bool:
        return self._handle is not None
