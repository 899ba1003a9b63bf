from __future__ import annotations

import logging

from annotator.internal_core.contracts import Annotation
from annotator.internal_core.services import NotificationSink, SaveService

from .tags import TagInputBuffer, TagSetEditor

logger = logging.getLogger(__name__)

SAVE_FAILED_MESSAGE = "Saving annotation failed"


class SaveOrchestrator:
    """Commit the draft of one annotation through the save service.

    Pending tag input is promoted to a tag first. A failed save is reported
    once through the notification sink and never re-raised; the draft is left
    untouched so the user can retry.
    """

    def __init__(
        self,
        annotation: Annotation,
        save_service: SaveService,
        notifications: NotificationSink,
        tag_editor: TagSetEditor,
        tag_input: TagInputBuffer,
        *,
        error_message: str = SAVE_FAILED_MESSAGE,
        flush_tag_input: bool = True,
    ) -> None:
        self._annotation = annotation
        self._save_service = save_service
        self._notifications = notifications
        self._tag_editor = tag_editor
        self._tag_input = tag_input
        self._error_message = error_message
        self._flush_tag_input = flush_tag_input

    def flush_pending_tag(self) -> bool:
        pending = self._tag_input.value
        if not pending:
            return False
        added = self._tag_editor.add_tag(pending)
        if added:
            self._tag_input.clear()
        return added

    async def save(self, annotation: Annotation | None = None) -> None:
        annotation = annotation or self._annotation
        if self._flush_tag_input:
            # Best-effort; a rejected flush never blocks the save.
            self.flush_pending_tag()

        try:
            await self._save_service.save(annotation)
        except Exception as exc:
            logger.warning("annotation save failed annotation_id=%s error=%s", annotation.id, exc)
            self._notifications.error(self._error_message)
