from __future__ import annotations

"""
HTTP surface for the annotation editor.

Design intent:
- Keep API orchestration thin; editing rules live in annotator.editor.
- Treat "no draft" as a normal state rather than an error.
- Report save failures through notifications, mirroring the editor contract.
"""

import logging
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from annotator.editor.session import AnnotationEditor
from annotator.internal_core.config import EditorConfig, load_config
from annotator.internal_core.contracts import (
    Annotation,
    DraftOverrides,
    EditorView,
    Group,
    KeyEvent,
    KeyHandling,
)
from annotator.internal_core.draft_store import InMemoryDraftStore
from annotator.internal_core.services import (
    InMemoryAnnotationsService,
    InMemoryGroupRegistry,
    InMemoryTagSuggestions,
    RecordingNotificationSink,
)


class EditorViewResponse(BaseModel):
    annotation_id: str
    editing: bool
    view: EditorView | None = None


class TextUpdateRequest(BaseModel):
    text: str


class TagInputRequest(BaseModel):
    value: str = ""


class AddTagRequest(BaseModel):
    tag: str


class TagEditResponse(BaseModel):
    annotation_id: str
    added: bool | None = None
    removed: bool | None = None
    tags: list[str] = Field(default_factory=list)


class SaveResponse(BaseModel):
    annotation_id: str
    draft_present: bool
    notifications: list[str] = Field(default_factory=list)
    annotation: Annotation | None = None


class NotificationsResponse(BaseModel):
    notifications: list[dict[str, str]] = Field(default_factory=list)


class TagSuggestionsResponse(BaseModel):
    query: str
    tags: list[str] = Field(default_factory=list)


app = FastAPI(title="annotator editor service")
logger = logging.getLogger(__name__)
load_config().configure_logging()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _get_state(name: str, factory: Any) -> Any:
    existing = getattr(app.state, name, None)
    if existing is not None:
        return existing
    created = factory()
    setattr(app.state, name, created)
    return created


def _get_config() -> EditorConfig:
    return _get_state("editor_config", load_config)


def _get_draft_store() -> InMemoryDraftStore:
    return _get_state("draft_store", InMemoryDraftStore)


def _get_annotations_service() -> InMemoryAnnotationsService:
    return _get_state(
        "annotations_service",
        lambda: InMemoryAnnotationsService(
            _get_draft_store(),
            inject_failure=_get_config().ANNOTATOR_TEST_INJECT_SAVE_FAIL,
        ),
    )


def _get_group_registry() -> InMemoryGroupRegistry:
    return _get_state("group_registry", InMemoryGroupRegistry)


def _get_tag_suggestions() -> InMemoryTagSuggestions:
    return _get_state("tag_suggestions", InMemoryTagSuggestions)


def _get_notifications() -> RecordingNotificationSink:
    return _get_state("notifications", RecordingNotificationSink)


def _get_editor_cache() -> dict[str, AnnotationEditor]:
    return _get_state("annotation_editors", dict)


def _require_annotation(annotation_id: str) -> Annotation:
    annotation = _get_annotations_service().get_annotation(annotation_id)
    if annotation is None:
        raise HTTPException(status_code=404, detail=f"Annotation not found: {annotation_id}")
    return annotation


def _get_editor(annotation_id: str) -> AnnotationEditor:
    annotation = _require_annotation(annotation_id)
    cache = _get_editor_cache()
    editor = cache.get(annotation_id)
    # A successful save replaces the stored annotation; rebind to the new value.
    if editor is None or editor.annotation is not annotation:
        editor = AnnotationEditor(
            annotation,
            drafts=_get_draft_store(),
            groups=_get_group_registry(),
            save_service=_get_annotations_service(),
            tag_suggestions=_get_tag_suggestions(),
            notifications=_get_notifications(),
            config=_get_config(),
        )
        cache[annotation_id] = editor
    return editor


def _tags_of(editor: AnnotationEditor) -> list[str]:
    draft = editor.draft
    return list(draft.tags) if draft is not None else []


@app.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/groups", response_model=Group)
async def register_group(payload: Group) -> Group:
    _get_group_registry().add_group(payload)
    return payload


@app.post("/annotations", response_model=Annotation)
async def register_annotation(payload: Annotation) -> Annotation:
    _get_annotations_service().add_annotation(payload)
    return payload


@app.get("/annotations/{annotation_id}", response_model=Annotation)
async def get_annotation(annotation_id: str) -> Annotation:
    return _require_annotation(annotation_id)


@app.post("/annotations/{annotation_id}/draft", response_model=EditorViewResponse)
async def create_draft(annotation_id: str, payload: DraftOverrides) -> EditorViewResponse:
    annotation = _require_annotation(annotation_id)
    try:
        _get_draft_store().create_draft(annotation, payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    view = _get_editor(annotation_id).view()
    return EditorViewResponse(annotation_id=annotation_id, editing=view is not None, view=view)


@app.get("/annotations/{annotation_id}/editor", response_model=EditorViewResponse)
async def editor_view(annotation_id: str) -> EditorViewResponse:
    view = _get_editor(annotation_id).view()
    return EditorViewResponse(annotation_id=annotation_id, editing=view is not None, view=view)


@app.put("/annotations/{annotation_id}/draft/text", response_model=EditorViewResponse)
async def edit_text(annotation_id: str, payload: TextUpdateRequest) -> EditorViewResponse:
    editor = _get_editor(annotation_id)
    editor.edit_text(payload.text)
    view = editor.view()
    return EditorViewResponse(annotation_id=annotation_id, editing=view is not None, view=view)


@app.put("/annotations/{annotation_id}/draft/tag-input", response_model=TagEditResponse)
async def set_tag_input(annotation_id: str, payload: TagInputRequest) -> TagEditResponse:
    editor = _get_editor(annotation_id)
    editor.set_tag_input(payload.value)
    return TagEditResponse(annotation_id=annotation_id, tags=_tags_of(editor))


@app.post("/annotations/{annotation_id}/draft/tags", response_model=TagEditResponse)
async def add_tag(annotation_id: str, payload: AddTagRequest) -> TagEditResponse:
    editor = _get_editor(annotation_id)
    added = editor.add_tag(payload.tag)
    return TagEditResponse(annotation_id=annotation_id, added=added, tags=_tags_of(editor))


@app.delete("/annotations/{annotation_id}/draft/tags/{tag:path}", response_model=TagEditResponse)
async def remove_tag(annotation_id: str, tag: str) -> TagEditResponse:
    editor = _get_editor(annotation_id)
    removed = editor.remove_tag(tag)
    return TagEditResponse(annotation_id=annotation_id, removed=removed, tags=_tags_of(editor))


@app.post("/annotations/{annotation_id}/save", response_model=SaveResponse)
async def save_annotation(annotation_id: str) -> SaveResponse:
    editor = _get_editor(annotation_id)
    notifications = _get_notifications()
    before = len(notifications.messages)
    await editor.save()
    return SaveResponse(
        annotation_id=annotation_id,
        draft_present=editor.draft is not None,
        notifications=[message for _, message in notifications.messages[before:]],
        annotation=_get_annotations_service().get_annotation(annotation_id),
    )


@app.post("/annotations/{annotation_id}/keydown", response_model=KeyHandling)
async def key_down(annotation_id: str, payload: KeyEvent) -> KeyHandling:
    editor = _get_editor(annotation_id)
    handling = editor.on_key_down(payload)
    if handling.handled and editor.shortcuts.last_task is not None:
        # The request is the dispatch layer here; finish the save before replying.
        await editor.shortcuts.last_task
    return handling


@app.get("/tags/suggestions", response_model=TagSuggestionsResponse)
async def tag_suggestions(query: str = "", limit: int = 10) -> TagSuggestionsResponse:
    return TagSuggestionsResponse(query=query, tags=_get_tag_suggestions().filter(query, limit))


@app.get("/notifications", response_model=NotificationsResponse)
async def list_notifications() -> NotificationsResponse:
    return NotificationsResponse(
        notifications=[
            {"level": level, "message": message}
            for level, message in _get_notifications().messages
        ]
    )
