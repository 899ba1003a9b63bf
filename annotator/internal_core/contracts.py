from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

GroupType = Literal["private", "open", "restricted"]


class Annotation(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1)
    group: str
    is_private: bool = False
    text: str = ""
    tags: List[str] = Field(default_factory=list)


class Group(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    type: GroupType = "open"


class TagRecord(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    text: str


class Draft(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    annotation_id: str
    text: str = ""
    tags: List[str] = Field(default_factory=list)
    is_private: bool = False

    @model_validator(mode="after")
    def _validate_unique_tags(self) -> "Draft":
        if len(set(self.tags)) != len(self.tags):
            raise ValueError("Draft.tags must not contain duplicates")
        return self

    @property
    def is_empty(self) -> bool:
        return not self.text and not self.tags


class DraftOverrides(BaseModel):
    """Fields that replace the baseline draft wholesale when set."""

    model_config = ConfigDict(extra="forbid")

    text: Optional[str] = None
    tags: Optional[List[str]] = None
    is_private: Optional[bool] = None


class KeyEvent(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    key: str
    meta_key: bool = False
    ctrl_key: bool = False
    shift_key: bool = False
    alt_key: bool = False


class KeyHandling(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    handled: bool = False
    suppress_default: bool = False


class EditorView(BaseModel):
    model_config = ConfigDict(extra="forbid")

    annotation_id: str
    text: str
    tags: List[str] = Field(default_factory=list)
    is_empty: bool
    publish_disabled: bool
    show_license: bool
    text_style: Dict[str, str] = Field(default_factory=dict)
