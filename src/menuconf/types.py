"""
Primitive attribute types and their string encodings.

Every serializable attribute has one of the primitive types below. This
module knows how a value of each type is normalized in memory and how it
is turned into text and back:

    STRING, LOCALE_STRING  -> str
    STRING_LIST            -> list[str]
    UINT                   -> int (>= 0)
    BOOLEAN                -> bool
    OPAQUE                 -> anything; never serialized

String lists have two textual forms:
    - on disk in the schema dialects: "[a,b,c]" (',' and '\\' escaped
      with a backslash inside elements)
    - the legacy unbracketed form "a;b;c", accepted on read only
"""
from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional

from .errors import CoercionError


class PrimitiveType(Enum):
    STRING = "string"
    LOCALE_STRING = "locale"
    STRING_LIST = "list"
    UINT = "uint"
    BOOLEAN = "bool"
    OPAQUE = "opaque"

    @property
    def dump_tag(self) -> Optional[str]:
        """Tag of the typed child of <value> in the flat dump dialect."""
        return _DUMP_TAGS[self]

    @property
    def schema_type(self) -> Optional[str]:
        """Content of the <type> element in the schema dialects."""
        return _SCHEMA_TYPES[self]


_DUMP_TAGS = {
    PrimitiveType.STRING: "string",
    PrimitiveType.LOCALE_STRING: "string",
    PrimitiveType.STRING_LIST: "list",
    PrimitiveType.UINT: "int",
    PrimitiveType.BOOLEAN: "bool",
    PrimitiveType.OPAQUE: None,
}

_SCHEMA_TYPES = {
    PrimitiveType.STRING: "string",
    PrimitiveType.LOCALE_STRING: "string",
    PrimitiveType.STRING_LIST: "list",
    PrimitiveType.UINT: "int",
    PrimitiveType.BOOLEAN: "bool",
    PrimitiveType.OPAQUE: None,
}

LIST_ITEM_TYPE = "string"

_TRUE_LITERALS = ("true", "1")
_FALSE_LITERALS = ("false", "0")


# ---------------------------------------------------------------------------
# String lists
# ---------------------------------------------------------------------------


def _escape(element: str) -> str:
    return element.replace("\\", "\\\\").replace(",", "\\,")


def encode_string_list(values: List[str]) -> str:
    """Encode a list of strings as "[a,b]", escaping separators."""
    return "[" + ",".join(_escape(v) for v in values) + "]"


def decode_string_list(text: str) -> List[str]:
    """
    Decode a string list.

    Accepts the bracketed form produced by encode_string_list(), and the
    legacy semicolon-separated form. An empty text, or "[]", is an empty
    list.
    """
    stripped = text.strip()
    if not stripped:
        return []
    if not (stripped.startswith("[") and stripped.endswith("]")):
        return [part for part in stripped.split(";") if part]

    inner = stripped[1:-1]
    if not inner:
        return []

    result: List[str] = []
    current: List[str] = []
    escaped = False
    for char in inner:
        if escaped:
            current.append(char)
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == ",":
            result.append("".join(current))
            current = []
        else:
            current.append(char)
    if escaped:
        current.append("\\")
    result.append("".join(current))
    return result


# ---------------------------------------------------------------------------
# Normalization and coercion
# ---------------------------------------------------------------------------


def _parse_bool(text: str) -> bool:
    lowered = text.strip().lower()
    if lowered in _TRUE_LITERALS:
        return True
    if lowered in _FALSE_LITERALS:
        return False
    raise CoercionError(f"not a boolean: {text!r}")


def _parse_uint(text: str) -> int:
    stripped = text.strip()
    if not stripped.isdigit():
        raise CoercionError(f"not an unsigned integer: {text!r}")
    return int(stripped)


def normalize(ptype: PrimitiveType, value: Any) -> Any:
    """
    Bring an in-memory value to the canonical representation of ptype.

    Strings are accepted for every type and parsed, so that e.g.
    normalize(BOOLEAN, "TRUE") gives True.

    Raises:
        CoercionError: value cannot represent ptype
    """
    if ptype in (PrimitiveType.STRING, PrimitiveType.LOCALE_STRING):
        if value is None:
            return ""
        if not isinstance(value, str):
            raise CoercionError(f"expected a string, got {type(value).__name__}")
        return value

    if ptype == PrimitiveType.STRING_LIST:
        if isinstance(value, str):
            return decode_string_list(value)
        if not isinstance(value, (list, tuple)):
            raise CoercionError(f"expected a list of strings, got {type(value).__name__}")
        if not all(isinstance(v, str) for v in value):
            raise CoercionError("string list elements must be strings")
        return list(value)

    if ptype == PrimitiveType.BOOLEAN:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return _parse_bool(value)
        raise CoercionError(f"expected a boolean, got {type(value).__name__}")

    if ptype == PrimitiveType.UINT:
        if isinstance(value, bool):
            raise CoercionError("expected an unsigned integer, got bool")
        if isinstance(value, int):
            if value < 0:
                raise CoercionError(f"negative value for unsigned integer: {value}")
            return value
        if isinstance(value, str):
            return _parse_uint(value)
        raise CoercionError(f"expected an unsigned integer, got {type(value).__name__}")

    if ptype == PrimitiveType.OPAQUE:
        return value

    raise TypeError(f"Unsupported primitive type: {ptype}")


def encode(ptype: PrimitiveType, value: Any) -> str:
    """Convert a normalized value to its on-disk text."""
    value = normalize(ptype, value)
    if ptype in (PrimitiveType.STRING, PrimitiveType.LOCALE_STRING):
        return value
    if ptype == PrimitiveType.STRING_LIST:
        return encode_string_list(value)
    if ptype == PrimitiveType.BOOLEAN:
        return "true" if value else "false"
    if ptype == PrimitiveType.UINT:
        return str(value)
    raise TypeError(f"Primitive type {ptype} cannot be serialized")


def decode(ptype: PrimitiveType, text: str) -> Any:
    """Inverse of encode()."""
    if text is None:
        text = ""
    if ptype in (PrimitiveType.STRING, PrimitiveType.LOCALE_STRING):
        return text
    if ptype == PrimitiveType.STRING_LIST:
        return decode_string_list(text)
    if ptype == PrimitiveType.BOOLEAN:
        return _parse_bool(text)
    if ptype == PrimitiveType.UINT:
        return _parse_uint(text)
    raise TypeError(f"Primitive type {ptype} cannot be serialized")


__all__ = [
    "PrimitiveType",
    "LIST_ITEM_TYPE",
    "encode_string_list",
    "decode_string_list",
    "normalize",
    "encode",
    "decode",
]
