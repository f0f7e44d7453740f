from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterator, Optional

from routenote.domain.models import AnnotationKind, AnnotationOccurrence
from routenote.extractors.spring.paths import extract_path_fragments

logger = logging.getLogger(__name__)

_KINDS: dict[str, AnnotationKind] = {
    "GetMapping": "Get",
    "PostMapping": "Post",
    "PutMapping": "Put",
    "DeleteMapping": "Delete",
    "RequestMapping": "Generic",
}

# No nested-parenthesis awareness: a ")" inside a string literal ends the args.
_ANNOTATION_RE = re.compile(
    r"@(GetMapping|PostMapping|PutMapping|DeleteMapping|RequestMapping)\b(?:\s*\(([^)]*)\))?"
)
_TYPE_DECL_RE = re.compile(
    r"^[ \t]*(?:@[A-Za-z_][\w.]*(?:\([^)]*\))?\s+)*"
    r"(?:(?:public|protected|private|abstract|final|static|sealed|non-sealed|strictfp)\s+)*"
    r"(class)\s+[A-Za-z_]\w*",
    re.MULTILINE,
)
_REQUEST_METHOD_RE = re.compile(r"\bRequestMethod\s*\.\s*([A-Z]+)\b")

REQUEST_SENTINEL = "REQUEST"


def find_type_declaration(text: str) -> Optional[int]:
    """Offset of the first ``class`` keyword that opens a declaration, or None."""
    m = _TYPE_DECL_RE.search(text)
    return m.start(1) if m else None


@dataclass(frozen=True)
class AnnotationScan:
    """
    Method-level route annotations of one document, in source order.

    Iterating is lazy and can be repeated; each pass rescans ``text``.
    ``@RequestMapping`` occurrences before the class declaration belong to
    the class and are skipped.
    """

    text: str

    def __iter__(self) -> Iterator[AnnotationOccurrence]:
        class_at = find_type_declaration(self.text)
        for m in _ANNOTATION_RE.finditer(self.text):
            kind = _KINDS[m.group(1)]
            if kind == "Generic" and class_at is not None and m.start() < class_at:
                logger.debug("class-level @%s at offset %d skipped", m.group(1), m.start())
                continue
            yield AnnotationOccurrence(
                kind=kind,
                raw_args=m.group(2) or "",
                source_offset=m.start(),
            )


def scan_annotations(text: str) -> AnnotationScan:
    return AnnotationScan(text)


def resolve_class_base_path(text: str) -> str:
    class_at = find_type_declaration(text)
    if class_at is None:
        return ""

    base_path = ""
    # every candidate is visited; the last one before the declaration wins
    for m in _ANNOTATION_RE.finditer(text, 0, class_at):
        if _KINDS[m.group(1)] != "Generic":
            continue
        paths = extract_path_fragments(m.group(2) or "")
        base_path = paths[0] if paths else ""

    if base_path:
        logger.debug("class base path: %s", base_path)
    return base_path


def resolve_http_verbs(occurrence: AnnotationOccurrence) -> list[str]:
    """
    GET/POST/PUT/DELETE for the dedicated annotations. ``@RequestMapping``
    yields every ``RequestMethod.X`` it references, in order and with
    duplicates, or the ``REQUEST`` sentinel when it names none.
    """
    if occurrence.kind != "Generic":
        return [occurrence.kind.upper()]

    verbs = _REQUEST_METHOD_RE.findall(occurrence.raw_args)
    return verbs or [REQUEST_SENTINEL]
