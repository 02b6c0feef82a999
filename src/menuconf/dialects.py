"""
Dialect Strategies

The three XML shapes an item can be stored in. Each dialect fixes its
root/list/element tag names, how an attribute location is spelled, and
the file name used on export. All of it is wire contract.

Attribute locations are '/'-separated paths. The number of segments
tells an Item-level attribute from a Profile-level one:

    schema dialects  /apps/caja-actions/configurations/<item>/<key>            6 segments
                     /apps/caja-actions/configurations/<item>/<profile>/<key>  7 segments
    flat dump        <key>                                                     1 segment
                     <profile>/<key>                                           2 segments

(The leading empty segment of an absolute path is counted.)
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

CONFIGURATIONS_PATH = "/apps/caja-actions/configurations"
SCHEMAS_PATH = "/schemas" + CONFIGURATIONS_PATH
OWNER = "caja-actions"
DEFAULT_LOCALE = "C"


class Dialect(Enum):
    LEGACY_VERBOSE = "MateConfSchemaV1"
    CONCISE = "MateConfSchemaV2"
    FLAT_DUMP = "MateConfEntry"

    @classmethod
    def from_id(cls, dialect_id: str) -> "Dialect":
        """Lookup by stable identifier, case-insensitively."""
        for dialect in cls:
            if dialect.value.lower() == dialect_id.strip().lower():
                return dialect
        raise ValueError(f"Unknown dialect: {dialect_id}")

    @property
    def spec(self) -> "DialectSpec":
        return DIALECT_SPECS[self]

    @property
    def is_schema(self) -> bool:
        return self in (Dialect.LEGACY_VERBOSE, Dialect.CONCISE)


@dataclass(frozen=True)
class DialectSpec:
    """
    The fixed bundle of names and conventions of one dialect.

    Properties:
        root_tag, list_tag, element_tag: Document structure
        path_tag: Child of an element which holds the attribute location
        key_depth: Path segments of an Item-level attribute location
        filename_format: Export file name, formatted with type and id
        label, description: Shown to users choosing an export format
    """

    root_tag: str
    list_tag: str
    element_tag: str
    path_tag: str
    key_depth: int
    filename_format: str
    label: str
    description: str

    @property
    def profile_depth(self) -> int:
        return self.key_depth + 1


SCHEMA_ROOT = "mateconfschemafile"
DUMP_ROOT = "mateconfentryfile"

DIALECT_SPECS = {
    Dialect.LEGACY_VERBOSE: DialectSpec(
        root_tag=SCHEMA_ROOT,
        list_tag="schemalist",
        element_tag="schema",
        path_tag="applyto",
        key_depth=6,
        filename_format="config_{id}.schemas",
        label="Export as a _full MateConf schema file",
        description="This used to be the historical export format.\n"
                    "The exported file may later be imported via:\n"
                    "- Import assistant of the Caja-Actions Configuration Tool,\n"
                    "- or the mateconftool-2 --install-schema-file command-line tool.",
    ),
    Dialect.CONCISE: DialectSpec(
        root_tag=SCHEMA_ROOT,
        list_tag="schemalist",
        element_tag="schema",
        path_tag="applyto",
        key_depth=6,
        filename_format="config-{id}.schema",
        label="Export as a _light MateConf schema (v2) file",
        description="This format has been introduced in v 1.11.\n"
                    "This is a light schema file, which keeps only the data needed "
                    "to describe the item.\n"
                    "The exported file may later be imported via:\n"
                    "- Import assistant of the Caja-Actions Configuration Tool,\n"
                    "- or the mateconftool-2 --install-schema-file command-line tool.",
    ),
    Dialect.FLAT_DUMP: DialectSpec(
        root_tag=DUMP_ROOT,
        list_tag="entrylist",
        element_tag="entry",
        path_tag="key",
        key_depth=1,
        filename_format="{type}-{id}.xml",
        label="Export as a MateConf _dump file",
        description="This format has been introduced in v 1.11.\n"
                    "The exported file may later be imported via:\n"
                    "- Import assistant of the Caja-Actions Configuration Tool,\n"
                    "- or the mateconftool-2 --load command-line tool.",
    ),
}


def available_dialects() -> List[Dialect]:
    return list(Dialect)


def detect_family(root_tag: str) -> Optional[Dialect]:
    """
    Dialect suggested by a document root tag.

    Both schema dialects share their root tag: CONCISE is returned for
    them, and the reader refines it to LEGACY_VERBOSE once it has seen an
    element carrying the verbose-only children.
    """
    if root_tag == SCHEMA_ROOT:
        return Dialect.CONCISE
    if root_tag == DUMP_ROOT:
        return Dialect.FLAT_DUMP
    return None


def split_path(path: str) -> List[str]:
    return path.split("/")


def path_depth(path: str) -> int:
    return len(split_path(path))


def item_base_path(item_id: str) -> str:
    return f"{CONFIGURATIONS_PATH}/{item_id}"


def schema_key_path(key: str) -> str:
    return f"{SCHEMAS_PATH}/{key}"


def attribute_path(dialect: Dialect, item_id: str, key: str,
                   profile_id: Optional[str] = None) -> str:
    """Location of an attribute, as written in the dialect's path child."""
    segments = [profile_id, key] if profile_id else [key]
    if dialect.is_schema:
        segments = [item_base_path(item_id)] + segments
    return "/".join(segments)


def item_id_from_path(dialect: Dialect, path: str) -> Optional[str]:
    """
    Item id declared by a schema attribute location, or None.

    Flat dump locations carry no item id: it comes from the list's base
    attribute instead.
    """
    if not dialect.is_schema:
        return None
    segments = split_path(path)
    index = dialect.spec.key_depth - 2
    if len(segments) < dialect.spec.key_depth or not segments[index]:
        return None
    return segments[index]


def export_filename(dialect: Dialect, type_name: str, item_id: str) -> str:
    return dialect.spec.filename_format.format(type=type_name.lower(), id=item_id)


__all__ = [
    "CONFIGURATIONS_PATH",
    "SCHEMAS_PATH",
    "OWNER",
    "DEFAULT_LOCALE",
    "Dialect",
    "DialectSpec",
    "DIALECT_SPECS",
    "available_dialects",
    "detect_family",
    "split_path",
    "path_depth",
    "item_base_path",
    "schema_key_path",
    "attribute_path",
    "item_id_from_path",
    "export_filename",
]
