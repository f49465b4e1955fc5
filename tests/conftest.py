from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from app import TodoApp, create_app
from config import Settings
from events import EventLoop, ManualClock
from storage import MemoryStorage


class StepClock:
    """datetime clock that advances one second per call."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(seconds=1)
        return current


@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture()
def loop(clock: ManualClock) -> EventLoop:
    return EventLoop(clock)


@pytest.fixture()
def step_clock() -> StepClock:
    return StepClock()


@pytest.fixture()
def backend() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(data_dir=tmp_path, log_dir=tmp_path, alt_screen=False)


@pytest.fixture()
def app(settings: Settings, loop: EventLoop, backend: MemoryStorage, step_clock: StepClock) -> TodoApp:
    return create_app(settings, loop=loop, backend=backend, task_clock=step_clock)


@pytest.fixture()
def notes(app: TodoApp):
    """Current notifications of the app as (message, severity) pairs."""
    def _notes() -> list[tuple[str, str]]:
        return [(n.message, n.severity.value) for n in app.notifier.active]
    return _notes
