"""
Error taxonomy and diagnostic messages.

Two kinds of problems are distinguished:

    - Structural problems abort the whole operation and are raised as
      exceptions (subclasses of MenuConfError).
    - Per-element anomalies never abort an import; they are collected as
      Message objects and handed back to the caller next to the result.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class MenuConfError(Exception):
    """Base class of every error raised by menuconf."""


class CoercionError(MenuConfError, ValueError):
    """Text could not be converted to the declared primitive type."""


class SettingsError(MenuConfError):
    """The settings file holds an invalid value."""


# ---------------------------------------------------------------------------
# Import side
# ---------------------------------------------------------------------------


class ItemImportError(MenuConfError):
    """Base class of the errors which abort an import."""


class UnsupportedDialectError(ItemImportError):
    """
    The root element is not one of the known dialects.

    This is a "not willing to handle this document" signal rather than a
    data error: callers may try another importer.
    """

    def __init__(self, root_tag: str):
        self.root_tag = root_tag
        super().__init__(f"Unsupported document root element: {root_tag}")


class MalformedXmlError(ItemImportError):
    """The input is not well-formed XML."""


class MissingIdError(ItemImportError):
    def __init__(self):
        super().__init__("Item ID not found.")


class InvalidIdError(ItemImportError):
    """Two elements of the same document disagree on the item id."""

    def __init__(self, expected: str, found: str, line: Optional[int] = None):
        self.expected = expected
        self.found = found
        self.line = line
        super().__init__(
            f"Invalid item ID: waited for {expected}, found {found} at line {line}."
        )


class UnknownItemTypeError(ItemImportError):
    def __init__(self, type_name: str, line: Optional[int] = None):
        self.type_name = type_name
        self.line = line
        super().__init__(
            f"Unknown type {type_name} found at line {line}, "
            "while waiting for Action or Menu."
        )


class ImportCancelledError(ItemImportError):
    """The user, or the resolution policy, declined to import the item."""

    def __init__(self, item_id: str, reason: str = ""):
        self.item_id = item_id
        self.reason = reason
        super().__init__(reason or f"Item {item_id} already exists.")


class ResolutionError(ItemImportError, ValueError):
    """The Ask policy could not get a usable answer."""


# ---------------------------------------------------------------------------
# Export side
# ---------------------------------------------------------------------------


class ExportError(MenuConfError):
    """The writer could not produce a complete document."""


class WriteIoError(ExportError):
    """Creating, writing or closing the output file failed."""

    def __init__(self, path, message: str):
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------


class MessageKind(Enum):
    UNKNOWN_CHILD_NODE = "unknown-child-node"
    DUPLICATE_CHILD_NODE = "duplicate-child-node"
    MISSING_CHILD_NODE = "missing-child-node"
    UNDEALT_NODE = "undealt-node"
    INVALID_VALUE = "invalid-value"
    DEFAULT_TYPE = "default-type"
    NO_PROFILE = "no-profile"
    INFO = "info"


@dataclass(frozen=True)
class Message:
    """
    One human-readable diagnostic produced while importing.

    Properties:
        kind: What happened (see MessageKind)
        text: Ready-to-display text
        line: Source line of the offending XML node, when known
    """

    kind: MessageKind
    text: str
    line: Optional[int] = None

    def __str__(self) -> str:
        return self.text


__all__ = [
    "MenuConfError",
    "CoercionError",
    "SettingsError",
    "ItemImportError",
    "UnsupportedDialectError",
    "MalformedXmlError",
    "MissingIdError",
    "InvalidIdError",
    "UnknownItemTypeError",
    "ImportCancelledError",
    "ResolutionError",
    "ExportError",
    "WriteIoError",
    "MessageKind",
    "Message",
]
