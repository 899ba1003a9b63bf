from __future__ import annotations

"""
Add and remove tags on the active draft of one annotation.

Design intent:
- Tags are unique under exact string equality and keep insertion order.
- Rejections are reported as ``False`` returns, never as exceptions.
- Every accepted edit stores a new draft value instead of mutating the old one.
"""

import logging

from annotator.internal_core.contracts import Annotation, TagRecord
from annotator.internal_core.draft_store import InMemoryDraftStore
from annotator.internal_core.services import TagSuggestionService

logger = logging.getLogger(__name__)


class TagInputBuffer:
    """Text typed into the tag field that has not been committed as a tag yet."""

    def __init__(self, value: str = "") -> None:
        self.value = value

    def clear(self) -> None:
        self.value = ""


class TagSetEditor:
    def __init__(
        self,
        annotation: Annotation,
        drafts: InMemoryDraftStore,
        tag_suggestions: TagSuggestionService,
    ) -> None:
        self._annotation = annotation
        self._drafts = drafts
        self._tag_suggestions = tag_suggestions

    def add_tag(self, candidate: str) -> bool:
        draft = self._drafts.get_draft(self._annotation)
        if draft is None:
            return False

        value = (candidate or "").strip()
        if not value:
            return False
        if value in draft.tags:
            return False

        tags = [*draft.tags, value]
        # Keep the suggestion list in step with tags the user actually uses.
        self._tag_suggestions.store([TagRecord(text=tag) for tag in tags])
        self._drafts.put_draft(draft.model_copy(update={"tags": tags}))
        logger.debug("tag added annotation_id=%s count=%d", draft.annotation_id, len(tags))
        return True

    def remove_tag(self, tag: str) -> bool:
        draft = self._drafts.get_draft(self._annotation)
        if draft is None:
            return False

        tags = list(draft.tags)
        try:
            tags.remove(tag)
        except ValueError:
            return False

        self._drafts.put_draft(draft.model_copy(update={"tags": tags}))
        logger.debug("tag removed annotation_id=%s count=%d", draft.annotation_id, len(tags))
        return True
