"""Terminal drawing of the surface.

The screen only reads the surface; all state changes happen in the handler
and renderer before it is drawn. Rows are numbered by display position so
the CLI can address them.
"""
from __future__ import annotations
import re
import shutil
from typing import List, Optional

from models import Severity
from notifier import LEAVING
from surface import (ADD_BUTTON, COMPLETED_COUNTER, EMPTY_STATE, INPUT,
                     NOTIFICATIONS, TASK_LIST, TOTAL_COUNTER, Row, Surface)
from theme import (BOLD, C_DONE, C_PENDING, C_SELECTED, COUNTER_COLOR, DIM,
                   EMPTY_COLOR, HEADER_COLOR, REVERSE, SEVERITY_COLOR, STRIKE,
                   color)

ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")
MIN_WIDTH = 30
TITLE = "To-Do List"
SEVERITY_MARK = {
    Severity.INFO: 'i',
    Severity.SUCCESS: '✓',
    Severity.WARNING: '!',
    Severity.ERROR: '✗',
}


class Screen:
    def __init__(self, surface: Surface):
        self.surface = surface

    def display(self) -> None:
        width = max(MIN_WIDTH, shutil.get_terminal_size((80, 30)).columns)
        for line in self.lines(width):
            print(line)

    def lines(self, width: int = 80) -> List[str]:
        out: List[str] = []
        out.extend(self._header(width))
        out.extend(self._task_lines(width))
        out.append(color('-' * width, HEADER_COLOR))
        out.extend(self._input_lines())
        out.extend(self._notification_lines(width))
        out.extend(self._dialog_lines(width))
        return out

    # ---- header / counters ----
    def _header(self, width: int) -> List[str]:
        total = self.surface[TOTAL_COUNTER]
        completed = self.surface[COMPLETED_COUNTER]
        counters = (f"Total: {color(total.text, COUNTER_COLOR)} ({total.title})  "
                    f"Completed: {color(completed.text, COUNTER_COLOR)}")
        title = color(TITLE, HEADER_COLOR, BOLD)
        pad = width - self._visible_len(title) - self._visible_len(counters)
        line = title + ' ' * max(1, pad) + counters
        return [line, color('-' * width, HEADER_COLOR)]

    # ---- rows ----
    def _task_lines(self, width: int) -> List[str]:
        task_list = self.surface[TASK_LIST]
        if task_list.empty:
            empty_state = self.surface.get(EMPTY_STATE)
            if empty_state is not None and empty_state.visible:
                return [color(empty_state.message, EMPTY_COLOR)]
            return []
        lines: List[str] = []
        for number, row in enumerate(task_list.rows, start=1):
            lines.extend(self._wrap_row(number, row, width))
        return lines

    def _wrap_row(self, number: int, row: Row, width: int) -> List[str]:
        marker = '>' if row.selected else ' '
        box = '[x]' if row.completed else '[ ]'
        prefix = f"{marker}{number:>2}. {box} "
        limit = max(1, width - len(prefix))
        words = row.text.split() or ['<empty>']
        raw_lines: List[str] = []
        current = ''
        for w in words:
            # words longer than a whole line are hard-split
            while len(w) > limit:
                if current:
                    raw_lines.append(current)
                    current = ''
                raw_lines.append(w[:limit])
                w = w[limit:]
            candidate = w if not current else current + ' ' + w
            if len(candidate) <= limit:
                current = candidate
            else:
                raw_lines.append(current)
                current = w
        if current:
            raw_lines.append(current)
        styles = [C_DONE, STRIKE] if row.completed else [C_PENDING]
        if row.selected:
            styles = [C_SELECTED, REVERSE]
        out: List[str] = []
        for idx, raw_line in enumerate(raw_lines):
            lead = prefix if idx == 0 else ' ' * len(prefix)
            out.append(lead + color(raw_line, *styles))
        return out

    # ---- input ----
    def _input_lines(self) -> List[str]:
        input_field = self.surface[INPUT]
        add_button = self.surface[ADD_BUTTON]
        state = color(' [add disabled]', DIM) if add_button.disabled else ''
        draft = input_field.value if input_field.value else color('(type a task)', DIM)
        return [f"New task: {draft}{state}"]

    # ---- notifications ----
    def _notification_lines(self, width: int) -> List[str]:
        container = self.surface.get(NOTIFICATIONS)
        if container is None:
            return []
        lines: List[str] = []
        for n in container.items:
            text = f"{SEVERITY_MARK[n.severity]} {n.message}"[:width]
            styles = [SEVERITY_COLOR[n.severity]]
            if n.phase == LEAVING:
                styles.append(DIM)
            lines.append(color(text, *styles))
        return lines

    # ---- dialog ----
    def _dialog_lines(self, width: int) -> List[str]:
        dialog = self.surface.dialog
        if dialog is None:
            return []
        inner = max(10, min(width, 60) - 4)
        lines = ['', color('+' + '-' * (inner + 2) + '+', HEADER_COLOR),
                 self._boxed(color(dialog.title, BOLD), inner)]
        for part in dialog.message.splitlines():
            lines.append(self._boxed(part[:inner], inner))
        text: Optional[str] = getattr(dialog, 'text', None)
        if text is not None:
            lines.append(self._boxed(f"> {text}"[:inner], inner))
        lines.append(color('+' + '-' * (inner + 2) + '+', HEADER_COLOR))
        return lines

    def _boxed(self, content: str, inner: int) -> str:
        pad = inner - self._visible_len(content)
        edge = color('|', HEADER_COLOR)
        return f"{edge} {content}{' ' * max(0, pad)} {edge}"

    @staticmethod
    def _visible_len(s: str) -> int:
        return len(ANSI_RE.sub('', s))
