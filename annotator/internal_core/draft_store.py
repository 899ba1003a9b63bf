from __future__ import annotations

import logging
from threading import RLock
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from .contracts import Annotation, Draft, DraftOverrides

logger = logging.getLogger(__name__)

DraftListener = Callable[[str, Optional[Draft]], None]
AnnotationRef = Union[Annotation, str]


def _annotation_id(annotation: AnnotationRef) -> str:
    if isinstance(annotation, Annotation):
        return annotation.id
    return str(annotation)


class InMemoryDraftStore:
    """Holds at most one draft per annotation id.

    Drafts are immutable values; every change stores a new one and notifies
    subscribers with ``(annotation_id, draft)``. A ``None`` draft means the
    annotation left edit mode.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._drafts: Dict[str, Draft] = {}
        self._listeners: List[DraftListener] = []

    def get_draft(self, annotation: AnnotationRef) -> Optional[Draft]:
        with self._lock:
            return self._drafts.get(_annotation_id(annotation))

    def create_draft(
        self,
        annotation: Annotation,
        overrides: Union[DraftOverrides, Mapping[str, Any], None] = None,
    ) -> None:
        if overrides is None:
            overrides = DraftOverrides()
        elif not isinstance(overrides, DraftOverrides):
            overrides = DraftOverrides.model_validate(dict(overrides))

        fields = overrides.model_dump(exclude_none=True)
        draft = Draft(
            annotation_id=annotation.id,
            text=fields.get("text", annotation.text),
            tags=list(fields.get("tags", annotation.tags)),
            is_private=fields.get("is_private", annotation.is_private),
        )
        self.put_draft(draft)

    def put_draft(self, draft: Draft) -> None:
        with self._lock:
            self._drafts[draft.annotation_id] = draft
        logger.debug(
            "draft replaced annotation_id=%s tags=%d text_chars=%d",
            draft.annotation_id,
            len(draft.tags),
            len(draft.text),
        )
        self._notify(draft.annotation_id, draft)

    def remove_draft(self, annotation: AnnotationRef) -> None:
        annotation_id = _annotation_id(annotation)
        with self._lock:
            removed = self._drafts.pop(annotation_id, None)
        if removed is None:
            return
        self._notify(annotation_id, None)

    def subscribe(self, listener: DraftListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, annotation_id: str, draft: Optional[Draft]) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(annotation_id, draft)
            except Exception:
                # A broken subscriber must never block draft updates.
                logger.warning(
                    "draft listener failed annotation_id=%s", annotation_id, exc_info=True
                )
