from __future__ import annotations

from typing import Any, Mapping, Optional

from annotator.internal_core.config import EditorConfig
from annotator.internal_core.contracts import (
    Annotation,
    Draft,
    EditorView,
    KeyEvent,
    KeyHandling,
)
from annotator.internal_core.draft_store import InMemoryDraftStore
from annotator.internal_core.services import (
    GroupLookup,
    NotificationSink,
    SaveService,
    TagSuggestionService,
)

from .save import SAVE_FAILED_MESSAGE, SaveOrchestrator
from .shortcut import ShortcutHandler, TaskScheduler
from .tags import TagInputBuffer, TagSetEditor
from .view import build_editor_view


class AnnotationEditor:
    """Editing state and actions for a single annotation.

    Collaborators are injected; nothing here reaches for a global store.
    """

    def __init__(
        self,
        annotation: Annotation,
        *,
        drafts: InMemoryDraftStore,
        groups: GroupLookup,
        save_service: SaveService,
        tag_suggestions: TagSuggestionService,
        notifications: NotificationSink,
        settings: Optional[Mapping[str, Any]] = None,
        config: Optional[EditorConfig] = None,
        schedule: Optional[TaskScheduler] = None,
    ) -> None:
        self.annotation = annotation
        self._drafts = drafts
        self._groups = groups
        self._settings = settings if settings is not None else (config.settings() if config else {})
        self.tag_input = TagInputBuffer()
        self.tags = TagSetEditor(annotation, drafts, tag_suggestions)
        self.saver = SaveOrchestrator(
            annotation,
            save_service,
            notifications,
            self.tags,
            self.tag_input,
            error_message=config.ANNOTATOR_SAVE_ERROR_MESSAGE if config else SAVE_FAILED_MESSAGE,
            flush_tag_input=config.ANNOTATOR_FLUSH_TAG_INPUT_ON_SAVE if config else True,
        )
        self.shortcuts = ShortcutHandler(annotation, drafts, self.saver, schedule=schedule)

    @property
    def draft(self) -> Optional[Draft]:
        return self._drafts.get_draft(self.annotation)

    def view(self) -> Optional[EditorView]:
        group = self._groups.get_group(self.annotation.group)
        return build_editor_view(self.annotation, self.draft, group, self._settings)

    def edit_text(self, text: str) -> bool:
        draft = self.draft
        if draft is None:
            return False
        self._drafts.put_draft(draft.model_copy(update={"text": text}))
        return True

    def set_private(self, is_private: bool) -> bool:
        draft = self.draft
        if draft is None:
            return False
        self._drafts.put_draft(draft.model_copy(update={"is_private": bool(is_private)}))
        return True

    def set_tag_input(self, value: str) -> None:
        self.tag_input.value = value

    def add_tag(self, candidate: str) -> bool:
        return self.tags.add_tag(candidate)

    def remove_tag(self, tag: str) -> bool:
        return self.tags.remove_tag(tag)

    async def save(self) -> None:
        await self.saver.save(self.annotation)

    def on_key_down(self, event: KeyEvent) -> KeyHandling:
        return self.shortcuts.on_key_down(event)
