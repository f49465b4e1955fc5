"""Command-line interface loop for the to-do list.

Each command is translated into the same surface events a pointer or
keyboard would produce (clicks on rows, checkboxes, buttons, typing into
the input field), so all behavior lives in the interaction handler.
"""
from typing import Optional

import click

from app import TodoApp
from handler import EditDialog
from models import Severity
from screen import Screen
from surface import (ADD_BUTTON, CANCEL, CHECKBOX, CLEAR_ALL_BUTTON, DELETE,
                     DIALOG, EDIT_BUTTON, PAGE, ROW, TASK_LIST, YES, Click)

# --- terminal control helpers ---
# ESC[3J (scrollback), ESC[H (home), ESC[2J (screen), ESC[H (home)
# Order (3J first) improves reliability in some terminals.
def _clear_screen() -> None:
    click.echo("\033[3J\033[H\033[2J\033[H", nl=False)


def _enter_alt_screen() -> None:
    click.echo("\033[?1049h", nl=False)


def _leave_alt_screen() -> None:
    click.echo("\033[?1049l", nl=False)


ROW_COMMANDS = {
    'sel': ROW,
    'x': CHECKBOX,
    'rm': DELETE,
}

HELP_LINES = [
    "Commands:",
    "  add <text...>       Add a task (same as typing it and pressing Enter)",
    "  add                 Press the Add button with the current draft",
    "  type <text...>      Type into the new-task field without adding",
    "  sel <n>             Select row n (needed for edit)",
    "  desel               Click outside the list (drops the selection)",
    "  x <n>               Toggle completion of row n",
    "  rm <n>              Delete row n (asks for confirmation)",
    "  edit                Edit the selected task",
    "  clear               Delete all tasks (asks for confirmation)",
    "  help                Show this help (press Enter to return)",
    "  exit                Save and exit",
]


class CLI:
    def __init__(self, app: TodoApp, alt_screen: bool = True):
        self.app = app
        self.surface = app.surface
        self.screen = Screen(app.surface)
        self.alt_screen = alt_screen

    def run(self) -> None:
        """Main REPL loop; the screen is cleared and redrawn each cycle.

        Pending timers (notification expiry, debounced validation) are pumped
        before every redraw. Tasks are saved after every mutation by the
        handler and once more on the way out.
        """
        exit_message: Optional[str] = None
        if self.alt_screen:
            _enter_alt_screen()
        try:
            while True:
                self.redraw()
                if self.surface.dialog is not None:
                    self._answer_dialog()
                    continue
                line = click.prompt("", prompt_suffix="\n: ", default="", show_default=False).strip()
                if not line:
                    continue
                lower = line.lower()
                if lower == 'help':
                    _clear_screen()
                    click.echo("\n".join(HELP_LINES))
                    click.prompt("\nPress Enter to return", default="", show_default=False)
                    continue
                if lower == 'exit':
                    exit_message = "Goodbye."
                    break
                self.handle_command(line)
        except (KeyboardInterrupt, EOFError, click.Abort):
            exit_message = "Interrupted. Goodbye."
        finally:
            self.app.save()
            if self.alt_screen:
                _leave_alt_screen()
            if exit_message:
                click.echo(exit_message)

    def redraw(self) -> None:
        self.app.loop.run_pending()
        _clear_screen()
        self.screen.display()

    # -------------------- command dispatch --------------------
    def handle_command(self, line: str) -> None:
        tokens = line.split(None, 1)
        if not tokens:
            return
        cmd = tokens[0].lower()
        rest = tokens[1] if len(tokens) > 1 else ''
        if cmd == 'add':
            self._cmd_add(rest)
        elif cmd == 'type':
            self.surface.type_text(rest)
        elif cmd in ROW_COMMANDS:
            self._cmd_row(cmd, rest)
        elif cmd == 'edit':
            self._click_optional(EDIT_BUTTON, 'edit')
        elif cmd == 'clear':
            self._click_optional(CLEAR_ALL_BUTTON, 'clear')
        elif cmd == 'desel':
            self.surface.click(Click(PAGE))
        else:
            self._warn("Unknown command. Type 'help' for instructions.")

    def _cmd_add(self, rest: str) -> None:
        if rest:
            self.surface.type_text(rest)
            self.surface.press_enter()
        elif self.surface[ADD_BUTTON].disabled:
            self._warn("Add is disabled for the current text.")
        else:
            self.surface.click(Click(ADD_BUTTON))

    def _cmd_row(self, cmd: str, rest: str) -> None:
        task_id = self._row_task_id(rest)
        if task_id is None:
            self._warn(f"Usage: {cmd} <n>; n is a row number shown on the list")
            return
        self.surface.click(Click(TASK_LIST, task_id=task_id, part=ROW_COMMANDS[cmd]))

    def _row_task_id(self, raw: str) -> Optional[str]:
        raw = raw.strip().rstrip('.')
        if not raw.isdigit():
            return None
        rows = self.surface[TASK_LIST].rows
        idx = int(raw) - 1
        if idx < 0 or idx >= len(rows):
            return None
        return rows[idx].task_id

    def _click_optional(self, target: str, cmd: str) -> None:
        if self.surface.get(target) is None:
            self._warn(f"'{cmd}' is not available.")
            return
        self.surface.click(Click(target))

    def _warn(self, message: str) -> None:
        self.app.notifier.notify(message, Severity.WARNING)

    # -------------------- dialogs --------------------
    def _answer_dialog(self) -> None:
        dialog = self.surface.dialog
        if isinstance(dialog, EditDialog):
            text = click.prompt("\nTask text", default=dialog.text, show_default=False)
            if click.confirm("Save changes?", default=True):
                dialog.text = text
                self.surface.click(Click(DIALOG, part=YES))
            else:
                self.surface.click(Click(DIALOG, part=CANCEL))
            return
        if click.confirm(f"\n{dialog.yes_text}?", default=False):
            self.surface.click(Click(DIALOG, part=YES))
        else:
            self.surface.click(Click(DIALOG, part=CANCEL))

