"""Task store: the in-memory task mapping plus the selection slot.

No UI or storage knowledge lives here; callers persist and render after
each mutation. Display order is computed by the renderer, not stored.
"""
from __future__ import annotations
import logging
import uuid
from datetime import datetime, timedelta
from typing import Callable, Dict, Iterable, List, Optional

from models import Task, format_timestamp, parse_timestamp, utcnow
from text import MAX_TEXT_LENGTH, sanitize_text, validate_task_text

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def generate_id() -> str:
    return str(uuid.uuid4())


class TaskStore:
    def __init__(self, tasks: Optional[Iterable[Task]] = None, clock: Clock = utcnow,
                 max_length: int = MAX_TEXT_LENGTH):
        self.tasks: Dict[str, Task] = {}
        self.selected_id: Optional[str] = None
        self.clock = clock
        self.max_length = max_length
        if tasks:
            self.replace_all(tasks)

    # -------------------- creation --------------------
    def create(self, text: str) -> Task:
        """Build a new task from user text; raises InvalidInput. Not inserted."""
        trimmed = validate_task_text(text, self.max_length)
        now = format_timestamp(self.clock())
        return Task(id=generate_id(), text=sanitize_text(trimmed), completed=False,
                    created_at=now, updated_at=now)

    def add(self, task: Task) -> None:
        if task.id in self.tasks:
            raise ValueError(f"Task id {task.id} already in store")
        self.tasks[task.id] = task
        logger.debug("added task %s", task.id)

    def replace_all(self, tasks: Iterable[Task]) -> None:
        """Swap in a loaded collection; later duplicates of an id win."""
        self.tasks = {t.id: t for t in tasks}
        self.selected_id = None

    # -------------------- mutation --------------------
    def toggle_completion(self, task_id: str) -> Optional[Task]:
        task = self.tasks.get(task_id)
        if task is None:
            return None
        task.completed = not task.completed
        self._touch(task)
        logger.debug("toggled task %s -> completed=%s", task_id, task.completed)
        return task

    def update(self, task_id: str, new_text: str) -> Optional[Task]:
        """Replace a task's text; raises InvalidInput, no-op for unknown ids."""
        task = self.tasks.get(task_id)
        if task is None:
            return None
        trimmed = validate_task_text(new_text, self.max_length)
        task.text = sanitize_text(trimmed)
        self._touch(task)
        logger.debug("updated task %s", task_id)
        return task

    def remove(self, task_id: str) -> Optional[Task]:
        task = self.tasks.pop(task_id, None)
        if task is None:
            return None
        if self.selected_id == task_id:
            self.selected_id = None
        logger.debug("removed task %s", task_id)
        return task

    def clear(self) -> None:
        self.tasks.clear()
        self.selected_id = None

    def _touch(self, task: Task) -> None:
        # updated_at must strictly advance even when the clock does not
        now = self.clock()
        previous = parse_timestamp(task.updated_at)
        if previous is not None and now <= previous:
            now = previous + timedelta(microseconds=1)
        task.updated_at = format_timestamp(now)

    # -------------------- selection --------------------
    def select(self, task_id: str) -> bool:
        if task_id not in self.tasks:
            return False
        self.selected_id = task_id
        return True

    def clear_selection(self) -> None:
        self.selected_id = None

    @property
    def selected(self) -> Optional[Task]:
        if self.selected_id is None:
            return None
        return self.tasks.get(self.selected_id)

    # -------------------- queries --------------------
    def get(self, task_id: str) -> Optional[Task]:
        return self.tasks.get(task_id)

    def all_tasks(self) -> List[Task]:
        return list(self.tasks.values())

    def is_duplicate(self, text: str, exclude_id: Optional[str] = None) -> bool:
        """Case-insensitive, trimmed comparison against every other task."""
        normalized = sanitize_text(text).lower()
        return any(
            task.id != exclude_id and task.text.strip().lower() == normalized
            for task in self.tasks.values()
        )

    def count(self) -> int:
        return len(self.tasks)

    def completed_count(self) -> int:
        return sum(1 for task in self.tasks.values() if task.completed)

    def __len__(self) -> int:
        return len(self.tasks)

    def __str__(self) -> str:
        return f'Tasks: {self.count()}, Completed: {self.completed_count()}'
