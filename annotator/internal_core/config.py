from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Dict


def _getenv_str(name: str, default: str) -> str:
    value = os.getenv(name)
    return default if value is None else value


def _getenv_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


@dataclass(frozen=True)
class EditorConfig:
    ANNOTATOR_LOG_LEVEL: str
    ANNOTATOR_SAVE_ERROR_MESSAGE: str
    ANNOTATOR_FLUSH_TAG_INPUT_ON_SAVE: bool
    ANNOTATOR_ANNOTATION_FONT_FAMILY: str
    ANNOTATOR_SELECTION_FONT_FAMILY: str
    ANNOTATOR_ACCENT_COLOR: str
    ANNOTATOR_TEST_INJECT_SAVE_FAIL: bool

    def settings(self) -> Dict[str, Dict[str, str]]:
        branding = {
            "annotationFontFamily": self.ANNOTATOR_ANNOTATION_FONT_FAMILY,
            "selectionFontFamily": self.ANNOTATOR_SELECTION_FONT_FAMILY,
            "accentColor": self.ANNOTATOR_ACCENT_COLOR,
        }
        branding = {key: value for key, value in branding.items() if value}
        return {"branding": branding} if branding else {}

    def configure_logging(self) -> None:
        level = getattr(logging, self.ANNOTATOR_LOG_LEVEL.strip().upper(), logging.INFO)
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


def load_config() -> EditorConfig:
    return EditorConfig(
        ANNOTATOR_LOG_LEVEL=_getenv_str("ANNOTATOR_LOG_LEVEL", "INFO"),
        ANNOTATOR_SAVE_ERROR_MESSAGE=_getenv_str(
            "ANNOTATOR_SAVE_ERROR_MESSAGE", "Saving annotation failed"
        ),
        ANNOTATOR_FLUSH_TAG_INPUT_ON_SAVE=_getenv_bool("ANNOTATOR_FLUSH_TAG_INPUT_ON_SAVE", True),
        ANNOTATOR_ANNOTATION_FONT_FAMILY=_getenv_str("ANNOTATOR_ANNOTATION_FONT_FAMILY", ""),
        ANNOTATOR_SELECTION_FONT_FAMILY=_getenv_str("ANNOTATOR_SELECTION_FONT_FAMILY", ""),
        ANNOTATOR_ACCENT_COLOR=_getenv_str("ANNOTATOR_ACCENT_COLOR", ""),
        ANNOTATOR_TEST_INJECT_SAVE_FAIL=_getenv_bool("ANNOTATOR_TEST_INJECT_SAVE_FAIL", False),
    )
