"""Data models for the to-do application.

Tasks persist with camelCase keys (createdAt / updatedAt) so the stored
JSON array keeps the same layout regardless of the Python attribute names.
"""
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class Severity(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class Task:
    """A single to-do item.

    Fields:
        id: Opaque unique string, never reassigned.
        text: Sanitized text (see text.sanitize_text).
        completed: Completion mark.
        created_at: ISO 8601 timestamp set once at creation.
        updated_at: ISO 8601 timestamp refreshed on every text/completion change.
    """
    id: str
    text: str
    completed: bool = False
    created_at: str = ""
    updated_at: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'text': self.text,
            'completed': self.completed,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        return f"Task(id={self.id}, text={self.text}, completed={self.completed})"


def format_timestamp(moment: datetime) -> str:
    """ISO 8601 in UTC with microsecond precision and a Z suffix."""
    return moment.astimezone(timezone.utc).isoformat(timespec='microseconds').replace('+00:00', 'Z')


def parse_timestamp(value: str) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp; None when it cannot be read."""
    if not isinstance(value, str) or not value:
        return None
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    try:
        moment = datetime.fromisoformat(value)
    except ValueError:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
