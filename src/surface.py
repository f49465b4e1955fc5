"""The UI tree the app mutates.

A Surface is a named set of elements (input field, buttons, list, counters,
empty-state indicator, notification container) plus click dispatch. A click
first reaches the handlers bound to its target element, then every
document-level listener, mirroring event bubbling. Disabled buttons swallow
clicks entirely, and while a dialog is open any click outside it lands on
the dialog's backdrop.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional

from errors import InitializationFailure

logger = logging.getLogger(__name__)

INPUT = 'input'
ADD_BUTTON = 'add_button'
EDIT_BUTTON = 'edit_button'
CLEAR_ALL_BUTTON = 'clear_all_button'
TASK_LIST = 'task_list'
TOTAL_COUNTER = 'total_counter'
COMPLETED_COUNTER = 'completed_counter'
EMPTY_STATE = 'empty_state'
NOTIFICATIONS = 'notifications'
PAGE = 'page'
DIALOG = 'dialog'

REQUIRED = (INPUT, ADD_BUTTON, TASK_LIST, TOTAL_COUNTER, COMPLETED_COUNTER)

# parts of a task row / dialog a click can land on
ROW = 'row'
CHECKBOX = 'checkbox'
DELETE = 'delete'
YES = 'yes'
CANCEL = 'cancel'
BACKDROP = 'backdrop'
BOX = 'box'


@dataclass
class InputField:
    value: str = ''
    focused: bool = False


@dataclass
class Button:
    label: str
    disabled: bool = False


@dataclass
class Row:
    task_id: str
    text: str
    completed: bool
    selected: bool
    label: str
    checkbox_title: str
    delete_label: str


@dataclass
class TaskListView:
    rows: List[Row] = field(default_factory=list)
    empty: bool = False


@dataclass
class Counter:
    text: str = '0'
    title: str = ''


@dataclass
class EmptyState:
    message: str = 'No tasks yet. Add one above!'
    visible: bool = False


@dataclass
class NotificationContainer:
    items: List[Any] = field(default_factory=list)


@dataclass(frozen=True)
class Click:
    target: str
    task_id: Optional[str] = None
    part: str = ROW


Listener = Callable[[Click], None]


class ListenerHandle:
    """Registration of a document-level listener; dispose() removes it once."""

    def __init__(self, surface: 'Surface', listener: Listener):
        self._surface = surface
        self.listener = listener
        self.disposed = False

    def dispose(self) -> None:
        if self.disposed:
            return
        self.disposed = True
        self._surface._document_listeners.remove(self)


class Surface:
    def __init__(self, elements: Optional[Dict[str, Any]] = None):
        self.elements: Dict[str, Any] = dict(elements or {})
        self.dialog: Optional[Any] = None
        self._handlers: Dict[str, List[Listener]] = {}
        self._input_handlers: List[Callable[[str], None]] = []
        self._enter_handlers: List[Callable[[], None]] = []
        self._document_listeners: List[ListenerHandle] = []

    @classmethod
    def standard(cls, omit: Iterable[str] = ()) -> 'Surface':
        """Every element the app knows about, minus ``omit``."""
        elements: Dict[str, Any] = {
            INPUT: InputField(),
            ADD_BUTTON: Button('Add'),
            EDIT_BUTTON: Button('Edit'),
            CLEAR_ALL_BUTTON: Button('Clear All'),
            TASK_LIST: TaskListView(),
            TOTAL_COUNTER: Counter(),
            COMPLETED_COUNTER: Counter(),
            EMPTY_STATE: EmptyState(),
            NOTIFICATIONS: NotificationContainer(),
        }
        for name in omit:
            elements.pop(name, None)
        return cls(elements)

    # -------------------- lookup --------------------
    def get(self, name: str) -> Optional[Any]:
        return self.elements.get(name)

    def __getitem__(self, name: str) -> Any:
        return self.elements[name]

    def require(self, names: Iterable[str] = REQUIRED) -> None:
        missing = [n for n in names if self.elements.get(n) is None]
        if missing:
            raise InitializationFailure(missing)

    def ensure_notification_container(self) -> NotificationContainer:
        container = self.elements.get(NOTIFICATIONS)
        if container is None:
            container = NotificationContainer()
            self.elements[NOTIFICATIONS] = container
        return container

    # -------------------- binding --------------------
    def on_click(self, target: str, handler: Listener) -> None:
        self._handlers.setdefault(target, []).append(handler)

    def on_input(self, handler: Callable[[str], None]) -> None:
        self._input_handlers.append(handler)

    def on_enter(self, handler: Callable[[], None]) -> None:
        self._enter_handlers.append(handler)

    def add_document_listener(self, listener: Listener) -> ListenerHandle:
        handle = ListenerHandle(self, listener)
        self._document_listeners.append(handle)
        return handle

    @property
    def document_listener_count(self) -> int:
        return len(self._document_listeners)

    # -------------------- dispatch --------------------
    def click(self, click: Click) -> None:
        if self.dialog is not None and click.target != DIALOG:
            # an open dialog covers the page
            click = Click(DIALOG, part=BACKDROP)
        element = self.elements.get(click.target)
        if isinstance(element, Button) and element.disabled:
            logger.debug("click on disabled %s ignored", click.target)
            return
        for handler in list(self._handlers.get(click.target, ())):
            handler(click)
        for handle in list(self._document_listeners):
            if not handle.disposed:
                handle.listener(click)

    def type_text(self, value: str) -> None:
        """Replace the input field's value as if typed, firing input handlers."""
        field_ = self.elements[INPUT]
        field_.value = value
        for handler in list(self._input_handlers):
            handler(value)

    def press_enter(self) -> None:
        for handler in list(self._enter_handlers):
            handler()
