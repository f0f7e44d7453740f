from __future__ import annotations

from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

AnnotationKind = Literal["Get", "Post", "Put", "Delete", "Generic"]


class AnnotationOccurrence(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: AnnotationKind
    raw_args: str = ""
    source_offset: int


class PathVariableBinding(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    declared_type: Optional[str] = None


class QueryParameterBinding(BaseModel):
    model_config = ConfigDict(frozen=True)

    effective_name: str = Field(min_length=1)
    declared_type: str


class ResolvedEndpoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    http_verb: str
    full_url: str


class DeleteLines(BaseModel):
    """Remove lines ``start..end`` (inclusive, pre-edit numbering)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["Delete"] = "Delete"
    start: int = Field(ge=0)
    end: int = Field(ge=0)


class InsertLine(BaseModel):
    """Insert ``text`` as a new line before pre-edit line ``line``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["Insert"] = "Insert"
    line: int = Field(ge=0)
    text: str
    seq: int = 0  # source order among inserts sharing a line


EditOperation = Union[DeleteLines, InsertLine]
