from __future__ import annotations

from typing import Any, Mapping, Optional

from annotator.internal_core.contracts import Annotation, Draft, EditorView, Group

from .theme import apply_theme


def should_show_license(draft: Draft, group: Optional[Group]) -> bool:
    return not draft.is_private and group is not None and group.type != "private"


def build_editor_view(
    annotation: Annotation,
    draft: Optional[Draft],
    group: Optional[Group],
    settings: Mapping[str, Any],
) -> Optional[EditorView]:
    # Without a draft the annotation is not in edit mode.
    if draft is None:
        return None
    return EditorView(
        annotation_id=annotation.id,
        text=draft.text,
        tags=list(draft.tags),
        is_empty=draft.is_empty,
        publish_disabled=draft.is_empty,
        show_license=should_show_license(draft, group),
        text_style=apply_theme(["annotationFontFamily"], settings),
    )
