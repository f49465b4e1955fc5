"""Application context: builds every component once and wires them together.

There is no module-level app instance; whoever drives the UI owns the
TodoApp returned by create_app().
"""
from __future__ import annotations
import logging
from typing import Optional

from config import Settings
from errors import InitializationFailure, LoadFailure, MissingData, SaveFailure
from events import EventLoop
from handler import InteractionHandler
from models import Severity, utcnow
from notifier import Notifier
from renderer import Renderer
from storage import FileStorage, KeyValueStorage, Storage
from store import Clock, TaskStore
from surface import INPUT, Surface

logger = logging.getLogger(__name__)

MSG_LOAD_FAILED = "Failed to load saved tasks"


class TodoApp:
    def __init__(self, surface: Surface, storage: Storage, loop: EventLoop, settings: Settings):
        self.surface = surface
        self.storage = storage
        self.loop = loop
        self.settings = settings
        self.store = TaskStore(clock=storage.clock)
        self.notifier: Optional[Notifier] = None
        self.renderer: Optional[Renderer] = None
        self.handler: Optional[InteractionHandler] = None
        self.ready = False

    def start(self) -> bool:
        """Validate the surface, load tasks, bind events and draw.

        Returns False (and leaves the app inert) when required elements are
        missing.
        """
        try:
            self.surface.require()
        except InitializationFailure:
            logger.error("initialization aborted", exc_info=True)
            return False
        self.notifier = Notifier(self.loop, self.surface.ensure_notification_container(),
                                 duration_ms=self.settings.notification_ms,
                                 transition_ms=self.settings.transition_ms)
        self.renderer = Renderer(self.surface)
        self.handler = InteractionHandler(self.store, self.storage, self.renderer, self.notifier,
                                          self.surface, self.loop, debounce_ms=self.settings.debounce_ms)
        self._load_tasks()
        self.handler.bind()
        self.renderer.render(self.store)
        self.surface[INPUT].focused = True
        self.ready = True
        return True

    def _load_tasks(self) -> None:
        try:
            tasks = self.storage.load()
        except MissingData:
            logger.info("no saved tasks in %r; starting empty", self.storage.key)
            tasks = []
        except LoadFailure:
            logger.error("loading tasks failed", exc_info=True)
            self.notifier.notify(MSG_LOAD_FAILED, Severity.ERROR)
            tasks = []
        self.store.replace_all(tasks)
        logger.debug("loaded %d tasks", len(self.store))

    def render(self) -> None:
        if self.renderer is not None:
            self.renderer.render(self.store)

    def save(self) -> None:
        """Final flush, used on exit; failures are logged only."""
        if not self.ready:
            return
        try:
            self.storage.save(self.store.all_tasks())
        except SaveFailure:
            logger.error("saving tasks on exit failed", exc_info=True)


def create_app(settings: Settings, surface: Optional[Surface] = None, loop: Optional[EventLoop] = None,
               backend: Optional[KeyValueStorage] = None, task_clock: Clock = utcnow) -> TodoApp:
    surface = surface if surface is not None else Surface.standard()
    loop = loop if loop is not None else EventLoop()
    if backend is None:
        backend = FileStorage(settings.data_dir, quota_bytes=settings.storage_quota)
    storage = Storage(backend, key=settings.storage_key, clock=task_clock)
    app = TodoApp(surface, storage, loop, settings)
    app.start()
    return app
