from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from threading import RLock
from typing import Dict, List, Optional, Sequence, Tuple

from .contracts import Annotation, Group, TagRecord
from .draft_store import InMemoryDraftStore

logger = logging.getLogger(__name__)


class SaveError(RuntimeError):
    def __init__(self, code: str, message: str, annotation_id: str):
        super().__init__(message)
        self.code = code
        self.message = message
        self.annotation_id = annotation_id


class SaveService(ABC):
    @abstractmethod
    async def save(self, annotation: Annotation) -> Annotation: ...


class TagSuggestionService(ABC):
    @abstractmethod
    def store(self, tags: Sequence[TagRecord]) -> None: ...


class NotificationSink(ABC):
    @abstractmethod
    def error(self, message: str) -> None: ...


class GroupLookup(ABC):
    @abstractmethod
    def get_group(self, group_id: str) -> Optional[Group]: ...


class InMemoryGroupRegistry(GroupLookup):
    def __init__(self, groups: Sequence[Group] = ()) -> None:
        self._groups: Dict[str, Group] = {group.id: group for group in groups}

    def add_group(self, group: Group) -> None:
        self._groups[group.id] = group

    def get_group(self, group_id: str) -> Optional[Group]:
        return self._groups.get(group_id)


class InMemoryTagSuggestions(TagSuggestionService):
    """Counts how often each tag was used so suggestions favour popular tags."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._counts: Dict[str, int] = {}
        self._updated: Dict[str, float] = {}

    def store(self, tags: Sequence[TagRecord]) -> None:
        now = time.time()
        with self._lock:
            for record in tags:
                self._counts[record.text] = self._counts.get(record.text, 0) + 1
                self._updated[record.text] = now

    def filter(self, query: str, limit: Optional[int] = None) -> List[str]:
        needle = (query or "").lower()
        with self._lock:
            matches = [tag for tag in self._counts if tag.lower().startswith(needle)]
            matches.sort(key=lambda tag: (-self._counts[tag], -self._updated[tag], tag))
        if limit is not None:
            matches = matches[: max(0, int(limit))]
        return matches


class RecordingNotificationSink(NotificationSink):
    def __init__(self) -> None:
        self.messages: List[Tuple[str, str]] = []

    def error(self, message: str) -> None:
        logger.error("notification level=error message=%s", message)
        self.messages.append(("error", message))


class InMemoryAnnotationsService(SaveService):
    """Applies the current draft to the stored annotation and ends edit mode."""

    def __init__(self, drafts: InMemoryDraftStore, *, inject_failure: bool = False) -> None:
        self._drafts = drafts
        self._lock = RLock()
        self._annotations: Dict[str, Annotation] = {}
        self.inject_failure = inject_failure

    def add_annotation(self, annotation: Annotation) -> None:
        with self._lock:
            self._annotations[annotation.id] = annotation

    def get_annotation(self, annotation_id: str) -> Optional[Annotation]:
        with self._lock:
            return self._annotations.get(annotation_id)

    async def save(self, annotation: Annotation) -> Annotation:
        if self.inject_failure:
            raise SaveError("INJECTED_FAILURE", "save failure injected", annotation.id)

        draft = self._drafts.get_draft(annotation)
        if draft is None:
            raise SaveError("NO_DRAFT", f"No draft for annotation: {annotation.id}", annotation.id)

        saved = annotation.model_copy(
            update={
                "text": draft.text,
                "tags": list(draft.tags),
                "is_private": draft.is_private,
            }
        )
        with self._lock:
            self._annotations[saved.id] = saved
        self._drafts.remove_draft(saved.id)
        logger.info("annotation saved annotation_id=%s tags=%d", saved.id, len(saved.tags))
        return saved
