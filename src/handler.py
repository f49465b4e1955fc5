"""Interaction handling: user events -> store operations.

Two small state machines live here:

- selection: NoSelection / Selected(id), held in the store's selection slot.
  While a task is selected a single document-level "outside click" listener
  is installed; it is created on first selection and disposed the moment
  selection returns to none, whatever caused that.
- dialogs: Idle / ConfirmPending / EditPending. Only one dialog can be open;
  a second request while one is open is rejected and logged.

Every operation catches errors at its own boundary and turns them into a
notification or a log entry. Mutations are always followed by save, render
and notify, in that order.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Union

from errors import InvalidInput, SaveFailure
from events import Debouncer, EventLoop
from models import Severity
from notifier import Notifier
from renderer import Renderer
from storage import Storage
from store import TaskStore
from surface import (ADD_BUTTON, BACKDROP, CANCEL, CHECKBOX, CLEAR_ALL_BUTTON,
                     DELETE, DIALOG, EDIT_BUTTON, INPUT, TASK_LIST, YES, Click,
                     ListenerHandle, Surface)
from text import MSG_DUPLICATE, display_text, validate_task_text

logger = logging.getLogger(__name__)

DEBOUNCE_DELAY_MS = 300

IDLE = 'idle'
CONFIRM_PENDING = 'confirm_pending'
EDIT_PENDING = 'edit_pending'

NO_SELECTION = 'no_selection'
SELECTED = 'selected'

MSG_ADDED = "Task added successfully!"
MSG_COMPLETED = "Task completed!"
MSG_UNCOMPLETED = "Task marked as incomplete"
MSG_DELETED = "Task deleted successfully!"
MSG_UPDATED = "Task updated successfully!"
MSG_CLEARED = "All tasks cleared!"
MSG_NOTHING_TO_CLEAR = "No tasks to clear!"
MSG_SELECT_FIRST = "Please select a task to edit first"
MSG_SELECTED_MISSING = "Selected task not found"
MSG_SAVE_FAILED = "Failed to save tasks"


@dataclass
class ConfirmDialog:
    title: str
    message: str
    yes_text: str
    on_yes: Callable[[], None]
    state: str = CONFIRM_PENDING


@dataclass
class EditDialog:
    """Edit prompt bound to the task that was selected when it opened."""
    task_id: str
    text: str
    title: str = 'Edit Task'
    message: str = 'Modify your task below:'
    yes_text: str = 'Save'
    state: str = EDIT_PENDING


Dialog = Union[ConfirmDialog, EditDialog]


class InteractionHandler:
    def __init__(self, store: TaskStore, storage: Storage, renderer: Renderer, notifier: Notifier,
                 surface: Surface, loop: EventLoop, debounce_ms: float = DEBOUNCE_DELAY_MS):
        self.store = store
        self.storage = storage
        self.renderer = renderer
        self.notifier = notifier
        self.surface = surface
        self.loop = loop
        self._outside_click: Optional[ListenerHandle] = None
        self._validate_debounced = Debouncer(loop, debounce_ms, self._validate_input)

    def bind(self) -> None:
        s = self.surface
        s.on_click(ADD_BUTTON, lambda _click: self.handle_add_task())
        s.on_enter(self.handle_add_task)
        s.on_click(TASK_LIST, self._handle_task_list_click)
        if s.get(EDIT_BUTTON) is not None:
            s.on_click(EDIT_BUTTON, lambda _click: self.handle_edit_task())
        if s.get(CLEAR_ALL_BUTTON) is not None:
            s.on_click(CLEAR_ALL_BUTTON, lambda _click: self.handle_clear_all_tasks())
        s.on_click(DIALOG, self._handle_dialog_click)
        s.on_input(lambda _value: self._validate_debounced())

    # -------------------- state --------------------
    @property
    def selection_state(self) -> str:
        return NO_SELECTION if self.store.selected_id is None else SELECTED

    @property
    def dialog(self) -> Optional[Dialog]:
        return self.surface.dialog

    @property
    def dialog_state(self) -> str:
        return IDLE if self.surface.dialog is None else self.surface.dialog.state

    @property
    def outside_click_installed(self) -> bool:
        return self._outside_click is not None

    # -------------------- add --------------------
    def handle_add_task(self) -> None:
        input_field = self.surface[INPUT]
        try:
            text = validate_task_text(input_field.value, self.store.max_length)
            if self.store.is_duplicate(text):
                raise InvalidInput(MSG_DUPLICATE)
            task = self.store.create(text)
        except InvalidInput as exc:
            self.notifier.notify(str(exc), Severity.WARNING)
            return
        self.store.add(task)
        input_field.value = ''
        self._commit()
        self.notifier.notify(MSG_ADDED, Severity.SUCCESS)

    def _validate_input(self) -> None:
        try:
            validate_task_text(self.surface[INPUT].value, self.store.max_length)
        except InvalidInput:
            self.surface[ADD_BUTTON].disabled = True
        else:
            self.surface[ADD_BUTTON].disabled = False

    # -------------------- list clicks --------------------
    def _handle_task_list_click(self, click: Click) -> None:
        if click.task_id is None:
            return
        if click.part == CHECKBOX:
            self._toggle_task_completion(click.task_id)
        elif click.part == DELETE:
            self._handle_delete_task(click.task_id)
        else:
            self._select_task(click.task_id)

    def _toggle_task_completion(self, task_id: str) -> None:
        task = self.store.toggle_completion(task_id)
        if task is None:
            return
        self._commit()
        self.notifier.notify(MSG_COMPLETED if task.completed else MSG_UNCOMPLETED, Severity.SUCCESS)

    def _select_task(self, task_id: str) -> None:
        if not self.store.select(task_id):
            return
        self.renderer.render(self.store)
        if self._outside_click is None:
            self._outside_click = self.surface.add_document_listener(self._handle_outside_click)

    def _handle_outside_click(self, click: Click) -> None:
        if click.target in (TASK_LIST, DIALOG):
            return
        self.store.clear_selection()
        self._sync_outside_click()
        self.renderer.render(self.store)

    def _sync_outside_click(self) -> None:
        if self.store.selected_id is None and self._outside_click is not None:
            self._outside_click.dispose()
            self._outside_click = None

    # -------------------- delete --------------------
    def _handle_delete_task(self, task_id: str) -> None:
        task = self.store.get(task_id)
        if task is None:
            return
        message = f'Are you sure you want to delete "{display_text(task.text)}"?'

        def on_yes() -> None:
            self.store.remove(task_id)
            self._sync_outside_click()
            self._commit()
            self.notifier.notify(MSG_DELETED, Severity.SUCCESS)

        self._open_dialog(ConfirmDialog('Delete Task?', message, 'Delete', on_yes))

    # -------------------- edit --------------------
    def handle_edit_task(self) -> None:
        if self.store.selected_id is None:
            self.notifier.notify(MSG_SELECT_FIRST, Severity.WARNING)
            return
        task = self.store.selected
        if task is None:
            self.notifier.notify(MSG_SELECTED_MISSING, Severity.ERROR)
            return
        self._open_dialog(EditDialog(task_id=task.id, text=display_text(task.text)))

    def submit_edit(self, text: Optional[str] = None) -> bool:
        """Save the edit prompt. On invalid text the prompt stays open for resubmission."""
        dialog = self.surface.dialog
        if not isinstance(dialog, EditDialog):
            return False
        if text is not None:
            dialog.text = text
        try:
            new_text = validate_task_text(dialog.text, self.store.max_length)
            if self.store.is_duplicate(new_text, dialog.task_id):
                raise InvalidInput(MSG_DUPLICATE)
            task = self.store.update(dialog.task_id, new_text)
        except InvalidInput as exc:
            self.notifier.notify(str(exc), Severity.WARNING)
            return False
        self._close_dialog()
        if task is None:
            self.notifier.notify(MSG_SELECTED_MISSING, Severity.ERROR)
            return False
        self._commit()
        self.notifier.notify(MSG_UPDATED, Severity.SUCCESS)
        return True

    # -------------------- clear all --------------------
    def handle_clear_all_tasks(self) -> None:
        total = self.store.count()
        if total == 0:
            self.notifier.notify(MSG_NOTHING_TO_CLEAR, Severity.INFO)
            return
        message = f'Are you sure you want to delete {total} tasks?\nThis cannot be undone.'

        def on_yes() -> None:
            self.store.clear()
            self._sync_outside_click()
            self._commit()
            self.notifier.notify(MSG_CLEARED, Severity.SUCCESS)

        self._open_dialog(ConfirmDialog('Clear All Tasks?', message, 'Clear All', on_yes))

    # -------------------- dialogs --------------------
    def _open_dialog(self, dialog: Dialog) -> None:
        if self.surface.dialog is not None:
            logger.warning("dialog %r requested while %r is open; rejected",
                           dialog.title, self.surface.dialog.title)
            return
        self.surface.dialog = dialog

    def _close_dialog(self) -> None:
        self.surface.dialog = None

    def confirm(self) -> None:
        dialog = self.surface.dialog
        if isinstance(dialog, EditDialog):
            self.submit_edit()
        elif isinstance(dialog, ConfirmDialog):
            self._close_dialog()
            dialog.on_yes()

    def cancel(self) -> None:
        self._close_dialog()

    def _handle_dialog_click(self, click: Click) -> None:
        if click.part == YES:
            self.confirm()
        elif click.part in (CANCEL, BACKDROP):
            self.cancel()

    # -------------------- persistence --------------------
    def _commit(self) -> None:
        try:
            self.storage.save(self.store.all_tasks())
        except SaveFailure:
            logger.error("saving tasks failed", exc_info=True)
            self.notifier.notify(MSG_SAVE_FAILED, Severity.ERROR)
        self.renderer.render(self.store)
