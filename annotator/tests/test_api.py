import pytest
from fastapi.testclient import TestClient

from annotator.api.main import app
from annotator.internal_core.config import EditorConfig

_STATE_NAMES = [
    "editor_config",
    "draft_store",
    "annotations_service",
    "group_registry",
    "tag_suggestions",
    "notifications",
    "annotation_editors",
]


def _config(*, inject_failure: bool = False) -> EditorConfig:
    return EditorConfig(
        ANNOTATOR_LOG_LEVEL="INFO",
        ANNOTATOR_SAVE_ERROR_MESSAGE="Saving annotation failed",
        ANNOTATOR_FLUSH_TAG_INPUT_ON_SAVE=True,
        ANNOTATOR_ANNOTATION_FONT_FAMILY="Georgia",
        ANNOTATOR_SELECTION_FONT_FAMILY="",
        ANNOTATOR_ACCENT_COLOR="",
        ANNOTATOR_TEST_INJECT_SAVE_FAIL=inject_failure,
    )


def _reset_state() -> None:
    for name in _STATE_NAMES:
        if hasattr(app.state, name):
            delattr(app.state, name)


@pytest.fixture
def client():
    _reset_state()
    app.state.editor_config = _config()
    try:
        yield TestClient(app)
    finally:
        _reset_state()


def _register(client: TestClient, annotation_id: str = "ann_api") -> None:
    assert client.post("/groups", json={"id": "grp_api", "type": "open"}).status_code == 200
    response = client.post(
        "/annotations",
        json={"id": annotation_id, "group": "grp_api", "text": "", "tags": []},
    )
    assert response.status_code == 200


def test_healthz(client: TestClient) -> None:
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_unknown_annotation_returns_404(client: TestClient) -> None:
    response = client.get("/annotations/missing/editor")
    assert response.status_code == 404
    assert "Annotation not found" in response.json()["detail"]


def test_editor_is_empty_without_draft(client: TestClient) -> None:
    _register(client)
    response = client.get("/annotations/ann_api/editor")
    assert response.status_code == 200
    assert response.json()["editing"] is False
    assert response.json()["view"] is None


def test_tag_editing_scenario(client: TestClient) -> None:
    _register(client)
    created = client.post("/annotations/ann_api/draft", json={"tags": [], "text": ""})
    assert created.status_code == 200
    assert created.json()["editing"] is True
    assert created.json()["view"]["publish_disabled"] is True
    assert created.json()["view"]["show_license"] is True
    assert created.json()["view"]["text_style"] == {"fontFamily": "Georgia"}

    first = client.post("/annotations/ann_api/draft/tags", json={"tag": "science"})
    assert first.json()["added"] is True
    second = client.post("/annotations/ann_api/draft/tags", json={"tag": "science"})
    assert second.json()["added"] is False
    assert second.json()["tags"] == ["science"]

    removed = client.delete("/annotations/ann_api/draft/tags/science")
    assert removed.json()["removed"] is True
    assert removed.json()["tags"] == []

    missing = client.delete("/annotations/ann_api/draft/tags/science")
    assert missing.json()["removed"] is False

    suggestions = client.get("/tags/suggestions", params={"query": "sci"})
    assert suggestions.json()["tags"] == ["science"]


def test_duplicate_tags_in_draft_payload_rejected(client: TestClient) -> None:
    _register(client)
    response = client.post("/annotations/ann_api/draft", json={"tags": ["a", "a"]})
    assert response.status_code == 400


def test_keydown_on_empty_draft_does_not_save(client: TestClient) -> None:
    _register(client)
    client.post("/annotations/ann_api/draft", json={"text": "", "tags": []})
    response = client.post("/annotations/ann_api/keydown", json={"key": "Enter", "ctrl_key": True})
    assert response.status_code == 200
    assert response.json() == {"handled": False, "suppress_default": False}
    assert client.get("/annotations/ann_api/editor").json()["editing"] is True


def test_keydown_saves_draft_with_pending_tag(client: TestClient) -> None:
    _register(client)
    client.post("/annotations/ann_api/draft", json={"text": ""})
    client.put("/annotations/ann_api/draft/text", json={"text": "hello"})
    client.put("/annotations/ann_api/draft/tag-input", json={"value": " later "})

    response = client.post("/annotations/ann_api/keydown", json={"key": "Enter", "meta_key": True})
    assert response.json() == {"handled": True, "suppress_default": True}

    saved = client.get("/annotations/ann_api").json()
    assert saved["text"] == "hello"
    assert saved["tags"] == ["later"]
    assert client.get("/annotations/ann_api/editor").json()["editing"] is False


def test_failed_save_reports_notification_and_keeps_draft(client: TestClient) -> None:
    app.state.editor_config = _config(inject_failure=True)
    _register(client)
    client.post("/annotations/ann_api/draft", json={"text": "unsaved", "tags": ["a"]})

    response = client.post("/annotations/ann_api/save")
    assert response.status_code == 200
    payload = response.json()
    assert payload["draft_present"] is True
    assert payload["notifications"] == ["Saving annotation failed"]
    assert payload["annotation"]["text"] == ""

    view = client.get("/annotations/ann_api/editor").json()["view"]
    assert view["text"] == "unsaved"
    assert view["tags"] == ["a"]

    notifications = client.get("/notifications").json()["notifications"]
    assert notifications == [{"level": "error", "message": "Saving annotation failed"}]


def test_tags_containing_slashes_can_be_removed(client: TestClient) -> None:
    _register(client)
    client.post("/annotations/ann_api/draft", json={"tags": []})
    assert client.post("/annotations/ann_api/draft/tags", json={"tag": "ci/cd"}).json()["added"] is True
    assert client.post("/annotations/ann_api/draft/tags", json={"tag": "a/b/c"}).json()["added"] is True

    plain = client.delete("/annotations/ann_api/draft/tags/ci/cd")
    assert plain.status_code == 200
    assert plain.json()["removed"] is True
    assert plain.json()["tags"] == ["a/b/c"]

    encoded = client.delete("/annotations/ann_api/draft/tags/a%2Fb%2Fc")
    assert encoded.status_code == 200
    assert encoded.json()["removed"] is True
    assert encoded.json()["tags"] == []
