from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Sequence

from routenote.compose.url import compose_url
from routenote.domain.models import (
    AnnotationOccurrence,
    DeleteLines,
    EditOperation,
    InsertLine,
    ResolvedEndpoint,
)
from routenote.extractors.spring.annotations import (
    REQUEST_SENTINEL,
    resolve_class_base_path,
    resolve_http_verbs,
    scan_annotations,
)
from routenote.extractors.spring.params import (
    extract_path_variables,
    extract_query_parameters,
    extract_signature_span,
)
from routenote.extractors.spring.paths import extract_path_fragments
from routenote.host.document import Document

logger = logging.getLogger(__name__)

# a line is only ever deleted if it starts with one of these prefixes
GENERATED_VERBS = ("GET", "POST", "PUT", "DELETE", REQUEST_SENTINEL)
GENERATED_PREFIXES = tuple(f"// {verb} " for verb in GENERATED_VERBS)

# RequestMethod.PATCH etc. also produce comments; those lines only count as
# generated when the URL after the verb starts with the run's base URL
EXTRA_VERBS = ("PATCH", "HEAD", "OPTIONS", "TRACE")
EXTRA_PREFIXES = tuple(f"// {verb} " for verb in EXTRA_VERBS)

_INDENT = re.compile(r"[ \t]*")


@dataclass(frozen=True)
class AnnotationPlan:
    occurrence: AnnotationOccurrence
    line: int
    endpoints: tuple[ResolvedEndpoint, ...]


@dataclass(frozen=True)
class EditPlan:
    annotations: tuple[AnnotationPlan, ...]
    operations: tuple[EditOperation, ...]

    @property
    def endpoint_count(self) -> int:
        return sum(len(a.endpoints) for a in self.annotations)

    @property
    def deleted_lines(self) -> int:
        return sum(op.end - op.start + 1 for op in self.operations if isinstance(op, DeleteLines))

    @property
    def inserted_lines(self) -> int:
        return sum(1 for op in self.operations if isinstance(op, InsertLine))


def resolve_endpoints(
    occurrence: AnnotationOccurrence,
    lines: Sequence[str],
    line: int,
    base_url: str,
    base_path: str,
) -> list[ResolvedEndpoint]:
    """Verb-major, then path-minor: N verbs x M paths endpoints."""
    span = extract_signature_span(lines, line)
    path_variables = extract_path_variables(span)
    query = extract_query_parameters(span)
    paths = extract_path_fragments(occurrence.raw_args)

    endpoints: list[ResolvedEndpoint] = []
    for verb in resolve_http_verbs(occurrence):
        for path in paths:
            url = compose_url(base_url, base_path, path, path_variables, query)
            endpoints.append(ResolvedEndpoint(http_verb=verb, full_url=url))
    return endpoints


def comment_block(indent: str, endpoints: Sequence[ResolvedEndpoint]) -> list[str]:
    return [f"{indent}// {e.http_verb} {e.full_url}".rstrip() for e in endpoints]


def is_generated_comment(line: str, base_url: str = "") -> bool:
    stripped = line.strip()
    if stripped.startswith(GENERATED_PREFIXES):
        return True
    base = compose_url(base_url, "", "")
    if not base or not stripped.startswith(EXTRA_PREFIXES):
        return False
    return stripped.split(" ", 2)[2].startswith(base)


def stale_comment_lines(lines: Sequence[str], line: int, base_url: str = "") -> list[int]:
    """Unbroken run of generated comment lines directly above ``line``."""
    out: list[int] = []
    i = line - 1
    while i >= 0 and is_generated_comment(lines[i], base_url):
        out.append(i)
        i -= 1
    out.reverse()
    return out


def _ranges(indices: set[int]) -> list[DeleteLines]:
    ranges: list[DeleteLines] = []
    start = prev = None
    for i in sorted(indices):
        if start is None:
            start = prev = i
        elif i == prev + 1:
            prev = i
        else:
            ranges.append(DeleteLines(start=start, end=prev))
            start = prev = i
    if start is not None:
        ranges.append(DeleteLines(start=start, end=prev))
    return ranges


def plan_document(document: Document, base_url: str) -> EditPlan:
    """
    Compute the complete edit set for one document from its current text.
    Line numbers in the result refer to that text; order is not significant
    here (see ``application_order``).
    """
    text = document.text()
    lines = [document.line_text(i) for i in range(document.line_count())]
    base_path = resolve_class_base_path(text)

    annotations: list[AnnotationPlan] = []
    to_delete: set[int] = set()
    inserts: list[InsertLine] = []
    seq = 0

    for occurrence in scan_annotations(text):
        line = document.offset_to_line(occurrence.source_offset)
        endpoints = resolve_endpoints(occurrence, lines, line, base_url, base_path)
        annotations.append(AnnotationPlan(occurrence=occurrence, line=line, endpoints=tuple(endpoints)))

        to_delete.update(stale_comment_lines(lines, line, base_url))

        indent = _INDENT.match(lines[line]).group(0) if lines else ""
        for comment in comment_block(indent, endpoints):
            inserts.append(InsertLine(line=line, text=comment, seq=seq))
            seq += 1

    operations: list[EditOperation] = [*_ranges(to_delete), *inserts]
    logger.debug(
        "planned %d delete range(s), %d insert(s) for %d annotation(s)",
        len(operations) - len(inserts),
        len(inserts),
        len(annotations),
    )
    return EditPlan(annotations=tuple(annotations), operations=tuple(operations))
