from __future__ import annotations

import re
from typing import Iterable, Mapping

from routenote.domain.models import PathVariableBinding, QueryParameterBinding
from routenote.extractors.spring.types import friendly_type

_PLACEHOLDER = re.compile(r"\{([^{}]+)\}")
# a run of slashes not directly after the scheme colon
_MULTI_SLASH = re.compile(r"(?<!:)/{2,}")


def _type_placeholders(path: str, path_variables: Iterable[PathVariableBinding]) -> str:
    types = {pv.name: pv.declared_type for pv in path_variables}

    def repl(m: re.Match[str]) -> str:
        # {id:[0-9]+} keeps only the variable name
        name = m.group(1).split(":", 1)[0].strip()
        return "{%s:%s}" % (name, friendly_type(types.get(name)))

    return _PLACEHOLDER.sub(repl, path)


def _query_string(query: Mapping[str, QueryParameterBinding]) -> str:
    return "&".join(
        f"{name}:{friendly_type(query[name].declared_type)}" for name in sorted(query)
    )


def compose_url(
    base_url: str,
    base_path: str,
    method_path: str,
    path_variables: Iterable[PathVariableBinding] = (),
    query: Mapping[str, QueryParameterBinding] | None = None,
) -> str:
    """
    Build the documented URL for one endpoint, e.g.
      https://localhost:8080/api/users/{id:int}?page:int&q:string

    Pure: identical inputs give an identical string.
    """
    typed_path = _type_placeholders(method_path or "", path_variables)

    parts = [(base_url or "").rstrip("/")]
    for segment in ((base_path or "").lstrip("/"), typed_path.lstrip("/")):
        if segment:
            parts.append(segment)
    url = "/".join(parts)

    qs = _query_string(query or {})
    if qs:
        url = f"{url}?{qs}"

    return _MULTI_SLASH.sub("/", url)
