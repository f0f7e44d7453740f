from __future__ import annotations

import re
from typing import Optional, Sequence

from routenote.domain.models import PathVariableBinding, QueryParameterBinding

_ACCESS_RE = re.compile(r"\b(?:public|private|protected)\b")
_STRING_LITERAL = re.compile(r'"(?:[^"\\]|\\.)*"')

_TYPE = r"[A-Za-z_][\w.]*(?:\s*<[^>]*>)?(?:\s*\[\s*\])*"
_PREFIX = r"(?:\s*\(([^)]*)\)\s*|\s+)((?:(?:final|@[A-Za-z_][\w.]*(?:\s*\([^)]*\))?)\s+)*)"
_PATH_VARIABLE_RE = re.compile(r"@PathVariable\b" + _PREFIX + r"(" + _TYPE + r")\s+([A-Za-z_]\w*)")
_REQUEST_PARAM_RE = re.compile(r"@RequestParam\b" + _PREFIX + r"(" + _TYPE + r")\s+([A-Za-z_]\w*)")

_POSITIONAL_ALIAS = re.compile(r'^\s*"((?:[^"\\]|\\.)*)"\s*$')
_NAME_ALIAS = re.compile(r'\bname\s*=\s*"((?:[^"\\]|\\.)*)"')
_VALUE_ALIAS = re.compile(r'\bvalue\s*=\s*"((?:[^"\\]|\\.)*)"')


def extract_signature_span(lines: Sequence[str], start: int) -> str:
    """
    Join lines from ``start`` down to the end of the method signature: the
    first line holding ``{`` at or after a line with an access modifier,
    ignoring both inside string literals. Runs to the end of the document when no such line exists.
    """
    acc: list[str] = []
    modifier_seen = False
    for line in lines[start:]:
        acc.append(line)
        # "/public/{id}" in a mapping path is neither a modifier nor a body
        code = _STRING_LITERAL.sub('""', line)
        if not modifier_seen and _ACCESS_RE.search(code):
            modifier_seen = True
        if modifier_seen and "{" in code:
            break
    return "\n".join(acc)


def _alias(args: Optional[str]) -> Optional[str]:
    if not args:
        return None
    for pattern in (_POSITIONAL_ALIAS, _NAME_ALIAS, _VALUE_ALIAS):
        m = pattern.search(args)
        if m and m.group(1):
            return m.group(1)
    return None


def extract_path_variables(span: str) -> list[PathVariableBinding]:
    out: list[PathVariableBinding] = []
    for m in _PATH_VARIABLE_RE.finditer(span):
        args, _annotations, declared, ident = m.groups()
        out.append(
            PathVariableBinding(
                name=_alias(args) or ident,
                declared_type=declared.strip(),
            )
        )
    return out


def extract_query_parameters(span: str) -> dict[str, QueryParameterBinding]:
    """
    Query parameters keyed by effective name. A later duplicate replaces an
    earlier one since a URL declares each key once.
    """
    out: dict[str, QueryParameterBinding] = {}
    for m in _REQUEST_PARAM_RE.finditer(span):
        args, _annotations, declared, ident = m.groups()
        name = _alias(args) or ident
        out[name] = QueryParameterBinding(effective_name=name, declared_type=declared.strip())
    return out
