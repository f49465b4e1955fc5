"""Projection of store state onto the surface.

render() rebuilds every row and counter from scratch on each call. It keeps
no state of its own, so calling it twice in a row yields the same surface.
"""
from __future__ import annotations
import math
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from models import Task, parse_timestamp
from store import TaskStore
from text import display_text
from surface import (COMPLETED_COUNTER, EMPTY_STATE, TASK_LIST, TOTAL_COUNTER,
                     Row, Surface)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def sort_tasks(tasks: Iterable[Task]) -> List[Task]:
    """Incomplete before completed; newest created first within each group."""
    newest_first = sorted(tasks, key=lambda t: parse_timestamp(t.created_at) or _EPOCH, reverse=True)
    return sorted(newest_first, key=lambda t: t.completed)


def progress_percent(total: int, completed: int) -> int:
    if total == 0:
        return 0
    # half-up rounding
    return int(math.floor(completed / total * 100 + 0.5))


def build_row(task: Task, selected_id: Optional[str]) -> Row:
    text = display_text(task.text)
    return Row(
        task_id=task.id,
        text=text,
        completed=task.completed,
        selected=task.id == selected_id,
        label=f'Task: {text}',
        checkbox_title='Mark as incomplete' if task.completed else 'Mark as complete',
        delete_label=f'Delete task: {text}',
    )


class Renderer:
    def __init__(self, surface: Surface):
        self.surface = surface

    def render(self, store: TaskStore) -> None:
        self._render_tasks(store)
        self._update_counters(store)
        self._toggle_empty_state(store)

    def _render_tasks(self, store: TaskStore) -> None:
        task_list = self.surface[TASK_LIST]
        task_list.rows = [build_row(t, store.selected_id) for t in sort_tasks(store.all_tasks())]

    def _update_counters(self, store: TaskStore) -> None:
        total = store.count()
        completed = store.completed_count()
        total_counter = self.surface[TOTAL_COUNTER]
        total_counter.text = str(total)
        total_counter.title = f'{progress_percent(total, completed)}% completed'
        self.surface[COMPLETED_COUNTER].text = str(completed)

    def _toggle_empty_state(self, store: TaskStore) -> None:
        is_empty = store.count() == 0
        self.surface[TASK_LIST].empty = is_empty
        empty_state = self.surface.get(EMPTY_STATE)
        if empty_state is not None:
            empty_state.visible = is_empty
