"""Settings loaded from environment variables (+ optional .env).

All variables use the TODO_ prefix. Malformed values fall back to the
defaults rather than failing startup. Command-line options override these.
"""
from __future__ import annotations
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

ENV_PREFIX = "TODO"

DEFAULT_DATA_DIR = Path(".local/todo")


def _k(suffix: str) -> str:
    return f"{ENV_PREFIX}_{suffix}"


def load_env() -> None:
    """Pull a local .env into os.environ without overriding real variables."""
    load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() not in {"0", "false", "no", "off", ""}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value >= 0 else default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True)
class Settings:
    data_dir: Path = DEFAULT_DATA_DIR
    storage_key: str = "todo_app_tasks"
    storage_quota: int = 0

    notification_ms: int = 3000
    transition_ms: int = 300
    debounce_ms: int = 300

    log_level: str = "WARNING"
    log_dir: Optional[Path] = None

    alt_screen: bool = True

    @staticmethod
    def from_env() -> "Settings":
        load_env()
        data_dir = _env_path(_k("DATA_DIR"), DEFAULT_DATA_DIR)
        raw_log_dir = _env(_k("LOG_DIR")).strip()
        return Settings(
            data_dir=data_dir,
            storage_key=_env(_k("STORAGE_KEY"), "todo_app_tasks").strip() or "todo_app_tasks",
            storage_quota=_env_int(_k("STORAGE_QUOTA"), 0),
            notification_ms=_env_int(_k("NOTIFICATION_MS"), 3000),
            transition_ms=_env_int(_k("TRANSITION_MS"), 300),
            debounce_ms=_env_int(_k("DEBOUNCE_MS"), 300),
            log_level=_env(_k("LOG_LEVEL"), "WARNING").strip().upper() or "WARNING",
            log_dir=Path(raw_log_dir).expanduser() if raw_log_dir else None,
            alt_screen=_env_bool(_k("ALT_SCREEN"), True),
        )

    @property
    def resolved_log_dir(self) -> Path:
        return self.log_dir if self.log_dir is not None else self.data_dir

    def with_overrides(self, **overrides: Any) -> "Settings":
        """Copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})
