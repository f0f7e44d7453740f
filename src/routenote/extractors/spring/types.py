from __future__ import annotations

from typing import Optional

FriendlyType = str  # one of: int, uuid, bool, number, string

_INT_TYPES = {
    "int",
    "integer",
    "long",
    "short",
    "byte",
    "java.lang.integer",
    "java.lang.long",
    "java.lang.short",
    "java.lang.byte",
}
_NUMBER_MARKERS = ("double", "float", "bigdecimal")


def friendly_type(declared: Optional[str]) -> FriendlyType:
    """Map a declared Java type name to a friendly tag. Never fails."""
    t = (declared or "").strip().lower()
    if not t:
        return "string"
    if t in _INT_TYPES:
        return "int"
    if "uuid" in t:
        return "uuid"
    if "boolean" in t:
        return "bool"
    if any(m in t for m in _NUMBER_MARKERS):
        return "number"
    return "string"
