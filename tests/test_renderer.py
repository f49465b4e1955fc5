from __future__ import annotations

import pytest

from models import Task
from renderer import Renderer, progress_percent, sort_tasks
from store import TaskStore
from surface import (COMPLETED_COUNTER, EMPTY_STATE, TASK_LIST, TOTAL_COUNTER,
                     Surface)


def _task(tid: str, created: str, completed: bool = False, text: str = "t") -> Task:
    return Task(id=tid, text=text, completed=completed, created_at=created, updated_at=created)


def test_sort_incomplete_first_then_newest() -> None:
    tasks = [
        _task("old", "2024-01-01T00:00:00.000Z"),
        _task("done-new", "2024-03-01T00:00:00.000Z", completed=True),
        _task("new", "2024-02-01T00:00:00.000Z"),
        _task("done-old", "2023-12-01T00:00:00.000Z", completed=True),
    ]
    assert [t.id for t in sort_tasks(tasks)] == ["new", "old", "done-new", "done-old"]


def test_unparseable_created_at_sorts_last_in_group() -> None:
    tasks = [_task("bad", "not a date"), _task("good", "2024-01-01T00:00:00Z")]
    assert [t.id for t in sort_tasks(tasks)] == ["good", "bad"]


@pytest.mark.parametrize("total, completed, expected", [
    (0, 0, 0), (1, 1, 100), (3, 1, 33), (3, 2, 67), (8, 1, 13), (2, 1, 50),
])
def test_progress_percent(total: int, completed: int, expected: int) -> None:
    assert progress_percent(total, completed) == expected


def test_render_projects_rows_counters_and_selection(step_clock) -> None:
    store = TaskStore(clock=step_clock)
    first = store.create("first <one>")
    store.add(first)
    second = store.create("second")
    store.add(second)
    store.toggle_completion(first.id)
    store.select(second.id)
    surface = Surface.standard()
    Renderer(surface).render(store)

    rows = surface[TASK_LIST].rows
    assert [r.task_id for r in rows] == [second.id, first.id]
    assert rows[0].selected and not rows[1].selected
    assert rows[1].text == "first <one>"
    assert rows[1].checkbox_title == "Mark as incomplete"
    assert rows[0].label == "Task: second"
    assert rows[0].delete_label == "Delete task: second"
    assert surface[TOTAL_COUNTER].text == "2"
    assert surface[TOTAL_COUNTER].title == "50% completed"
    assert surface[COMPLETED_COUNTER].text == "1"
    assert surface[EMPTY_STATE].visible is False
    assert surface[TASK_LIST].empty is False


def test_render_empty_store_shows_empty_state() -> None:
    surface = Surface.standard()
    Renderer(surface).render(TaskStore())
    assert surface[EMPTY_STATE].visible is True
    assert surface[TASK_LIST].rows == []
    assert surface[TOTAL_COUNTER].title == "0% completed"


def test_render_is_idempotent(step_clock) -> None:
    store = TaskStore(clock=step_clock)
    store.add(store.create("a"))
    surface = Surface.standard()
    renderer = Renderer(surface)
    renderer.render(store)
    snapshot = list(surface[TASK_LIST].rows)
    renderer.render(store)
    assert surface[TASK_LIST].rows == snapshot


def test_render_without_empty_state_element() -> None:
    surface = Surface.standard(omit=[EMPTY_STATE])
    Renderer(surface).render(TaskStore())
    assert surface[TASK_LIST].empty is True
