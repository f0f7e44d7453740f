from __future__ import annotations

import re
from typing import Optional

_STRING = re.compile(r'"((?:[^"\\]|\\.)*)"')
_LEADING_KEY = re.compile(r"^\s*(?:(?:path|value)\s*=\s*)?")
_KEYED_LIST = re.compile(r"\b(?:path|value)\s*=\s*\{")
_KEYED_STRING = re.compile(r'\b(?:path|value)\s*=\s*"((?:[^"\\]|\\.)*)"')
_KEY_BEFORE = re.compile(r"([A-Za-z_][A-Za-z0-9_]*)\s*=\s*$")


def extract_path_fragments(raw_args: str) -> list[str]:
    """
    Return the literal paths declared by an annotation argument list.

    Recognized forms, checked in order:
      {"/a", "/b"}  /  value={"/a", "/b"}  /  path={...}   -> ["/a", "/b"]
      "/a"  /  value="/a"  /  path="/a"                     -> ["/a"]
      anything else                                          -> [""]
    """
    args = raw_args or ""

    start: Optional[int] = None
    stripped = _LEADING_KEY.sub("", args, count=1)
    if stripped.startswith("{"):
        start = len(args) - len(stripped)
    else:
        keyed = _KEYED_LIST.search(args)
        if keyed is not None:
            start = keyed.end() - 1

    if start is not None:
        body = _brace_body(args, start)
        return [_unquote(el) for el in _split_top_level(body) if el.strip()]

    literal = _first_path_literal(args)
    if literal is not None:
        return [literal]
    return [""]


def _first_path_literal(args: str) -> Optional[str]:
    keyed = _KEYED_STRING.search(args)
    if keyed is not None:
        return keyed.group(1)

    # positional literal; skip produces="..." and friends
    for m in _STRING.finditer(args):
        key = _KEY_BEFORE.search(args[: m.start()])
        if key is not None and key.group(1) not in ("path", "value"):
            continue
        return m.group(1)
    return None


def _brace_body(text: str, start: int) -> str:
    # text[start] == "{"; unbalanced input yields the remainder
    depth = 0
    in_string = False
    i = start
    while i < len(text):
        ch = text[i]
        if in_string:
            if ch == "\\":
                i += 2
                continue
            if ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start + 1 : i]
        i += 1
    return text[start + 1 :]


def _split_top_level(body: str) -> list[str]:
    parts: list[str] = []
    buf: list[str] = []
    in_string = False
    escaped = False
    for ch in body:
        if in_string:
            buf.append(ch)
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
            buf.append(ch)
        elif ch == ",":
            parts.append("".join(buf))
            buf = []
        else:
            buf.append(ch)
    parts.append("".join(buf))
    return parts


def _unquote(element: str) -> str:
    s = element.strip()
    if len(s) >= 2 and s[0] == '"' and s[-1] == '"':
        return s[1:-1]
    return s.strip('"').strip()
