from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from threading import RLock
from typing import Any, Callable, Coroutine, Optional, Set

from annotator.internal_core.contracts import Annotation, KeyEvent, KeyHandling
from annotator.internal_core.draft_store import InMemoryDraftStore

from .keys import ENTER, normalize_key_name
from .save import SaveOrchestrator

logger = logging.getLogger(__name__)

TaskScheduler = Callable[[Coroutine[Any, Any, None]], Any]

_PASS_THROUGH = KeyHandling(handled=False, suppress_default=False)
_SAVE_TRIGGERED = KeyHandling(handled=True, suppress_default=True)


class ShortcutHandler:
    """Save the draft on Cmd+Enter or Ctrl+Enter unless it is empty.

    Saves are scheduled on the running event loop. Without one (a caller
    outside asyncio) they run on a single background worker, so the key
    handler still returns immediately. Pending saves are held until done.
    """

    def __init__(
        self,
        annotation: Annotation,
        drafts: InMemoryDraftStore,
        orchestrator: SaveOrchestrator,
        *,
        schedule: Optional[TaskScheduler] = None,
    ) -> None:
        self._annotation = annotation
        self._drafts = drafts
        self._orchestrator = orchestrator
        self._schedule = schedule or self._schedule_save
        self._lock = RLock()
        self._pending: Set[Any] = set()
        self._executor: Optional[ThreadPoolExecutor] = None
        self.last_task: Any = None

    @property
    def pending_saves(self) -> Set[Any]:
        with self._lock:
            return set(self._pending)

    def on_key_down(self, event: KeyEvent) -> KeyHandling:
        key = normalize_key_name(event.key)
        draft = self._drafts.get_draft(self._annotation)
        if draft is None or draft.is_empty:
            return _PASS_THROUGH

        if key != ENTER or not (event.meta_key or event.ctrl_key):
            return _PASS_THROUGH

        logger.debug("save shortcut annotation_id=%s", self._annotation.id)
        coro = self._orchestrator.save(self._annotation)
        try:
            task = self._schedule(coro)
        except Exception:
            coro.close()
            logger.warning(
                "save shortcut could not be scheduled annotation_id=%s",
                self._annotation.id,
                exc_info=True,
            )
            return _SAVE_TRIGGERED

        self.last_task = task
        if hasattr(task, "add_done_callback"):
            with self._lock:
                self._pending.add(task)
            task.add_done_callback(self._discard)
        return _SAVE_TRIGGERED

    def _discard(self, task: Any) -> None:
        with self._lock:
            self._pending.discard(task)

    def _schedule_save(self, coro: Coroutine[Any, Any, None]) -> Any:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return self._background_executor().submit(asyncio.run, coro)
        return loop.create_task(coro)

    def _background_executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                # One worker keeps saves for this annotation in press order.
                self._executor = ThreadPoolExecutor(
                    max_workers=1, thread_name_prefix="annotator-save"
                )
            return self._executor
