"""Persistence for the task list.

A key-value storage slot holds the whole collection as one JSON array of
``{id, text, completed, createdAt, updatedAt}`` records. Writes always
replace the full array; there are no incremental updates or migrations.
"""
from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol

from errors import LoadFailure, MissingData, SaveFailure
from models import Task, format_timestamp, utcnow
from store import Clock, generate_id
from text import normalize_stored_text

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = 'todo_app_tasks'


class StorageQuotaExceeded(OSError):
    """Raised by a backend when a write would exceed its byte quota."""


class KeyValueStorage(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...


class MemoryStorage:
    """Dict-backed storage, mostly for tests and throwaway sessions."""

    def __init__(self, items: Optional[Mapping[str, str]] = None, quota_bytes: int = 0):
        self.items: Dict[str, str] = dict(items or {})
        self.quota_bytes = quota_bytes

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        _check_quota(value, self.quota_bytes)
        self.items[key] = value


class FileStorage:
    """One file per key under ``data_dir`` (``<key>.json``)."""

    def __init__(self, data_dir: Path, quota_bytes: int = 0):
        self.data_dir = Path(data_dir)
        self.quota_bytes = quota_bytes

    def path_for(self, key: str) -> Path:
        return self.data_dir / f'{key}.json'

    def get_item(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding='utf-8')

    def set_item(self, key: str, value: str) -> None:
        _check_quota(value, self.quota_bytes)
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(value, encoding='utf-8')


def _check_quota(value: str, quota_bytes: int) -> None:
    if quota_bytes and len(value.encode('utf-8')) > quota_bytes:
        raise StorageQuotaExceeded(f'write of {len(value)} chars exceeds quota of {quota_bytes} bytes')


class Storage:
    def __init__(self, backend: KeyValueStorage, key: str = DEFAULT_STORAGE_KEY, clock: Clock = utcnow):
        self.backend = backend
        self.key = key
        self.clock = clock

    def load(self) -> List[Task]:
        """Read all tasks from the slot.

        An absent slot raises MissingData, a LoadFailure the caller may treat
        as a first run. Unreadable data, data that is not JSON, or JSON that
        is not an array raises LoadFailure. Individual records are rebuilt
        defensively so a partially corrupt record never aborts the load.
        """
        try:
            raw = self.backend.get_item(self.key)
        except (OSError, UnicodeDecodeError) as exc:
            raise LoadFailure(f'Could not read storage slot {self.key!r}') from exc
        if raw is None:
            raise MissingData(f'Storage slot {self.key!r} is empty')
        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise LoadFailure(f'Storage slot {self.key!r} holds invalid JSON') from exc
        if not isinstance(data, list):
            raise LoadFailure(f'Storage slot {self.key!r} does not hold an array')
        tasks: List[Task] = []
        for index, record in enumerate(data):
            if not isinstance(record, dict):
                logger.warning('skipping non-object record #%d in %r', index, self.key)
                continue
            tasks.append(self._task_from_record(record))
        return tasks

    def save(self, tasks: Iterable[Task]) -> None:
        """Replace the slot with the full collection; raises SaveFailure."""
        payload = json.dumps([task.to_dict() for task in tasks], indent=4)
        try:
            self.backend.set_item(self.key, payload)
        except OSError as exc:
            raise SaveFailure(f'Could not write storage slot {self.key!r}') from exc

    def _task_from_record(self, record: Mapping[str, Any]) -> Task:
        now = format_timestamp(self.clock())
        raw_id = record.get('id')
        raw_text = record.get('text')
        created = record.get('createdAt')
        updated = record.get('updatedAt')
        return Task(
            id=str(raw_id) if raw_id else generate_id(),
            text=normalize_stored_text(str(raw_text)) if raw_text else '',
            completed=bool(record.get('completed')),
            created_at=created if isinstance(created, str) and created else now,
            updated_at=updated if isinstance(updated, str) and updated else now,
        )
