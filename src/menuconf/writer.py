"""
Writer (exporter)

Walks one Item and produces a complete XML document in the chosen
dialect. The walk is deterministic and never mutates the Item:

    1. root element, then a single list element
       (the flat dump stamps the list with the item base path)
    2. the discriminant ("Action" or "Menu"), written as a regular attribute
    3. every set, writable Typed Value of the Item, in descriptor order
    4. every set Typed Value of each Profile (Actions)

Menus only record the ordered ids of their children (the `items`
attribute); each child is a record of its own, see export_tree().
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional, Union
from urllib.parse import unquote, urlparse

from lxml import etree

from .dialects import (
    DEFAULT_LOCALE,
    OWNER,
    Dialect,
    attribute_path,
    export_filename,
    item_base_path,
    schema_key_path,
)
from .errors import CoercionError, ExportError, WriteIoError
from .fields import TYPE_FIELD, FieldDescriptor
from .model import Action, Item, Menu, ObjectNode, TypedValue
from .types import LIST_ITEM_TYPE, PrimitiveType

logger = logging.getLogger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'


def _as_dialect(dialect: Union[Dialect, str]) -> Dialect:
    if isinstance(dialect, Dialect):
        return dialect
    try:
        return Dialect.from_id(dialect)
    except ValueError as exc:
        raise ExportError(str(exc)) from exc


class ItemWriter:
    """Builds the document of one Item in one dialect."""

    def __init__(self, dialect: Union[Dialect, str]):
        self.dialect = _as_dialect(dialect)
        self.spec = self.dialect.spec

    def build(self, item: Item) -> etree._Element:
        root = etree.Element(self.spec.root_tag)
        list_node = etree.SubElement(root, self.spec.list_tag)
        if self.dialect == Dialect.FLAT_DUMP:
            list_node.set("base", item_base_path(item.id))

        self._write_type(list_node, item)
        self._write_node(list_node, item.id, item, None)
        if isinstance(item, Action):
            for profile in item.profiles:
                self._write_node(list_node, item.id, profile, profile.id)
        return root

    def to_string(self, item: Item) -> str:
        try:
            root = self.build(item)
        except (CoercionError, TypeError, ValueError) as exc:
            raise ExportError(f"Unable to export item {item.id}: {exc}") from exc
        return XML_DECLARATION + etree.tostring(root, encoding="unicode", pretty_print=True)

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------

    def _write_type(self, list_node, item: Item) -> None:
        typed = TypedValue(TYPE_FIELD, item.type_name, is_set=True)
        self._write_value(list_node, item.id, None, typed)

    def _write_node(self, list_node, item_id: str, node: ObjectNode,
                    profile_id: Optional[str]) -> None:
        for typed in node.set_values():
            descriptor = typed.descriptor
            if not descriptor.writable or descriptor.primitive_type == PrimitiveType.OPAQUE:
                continue
            self._write_value(list_node, item_id, profile_id, typed)

    def _write_value(self, list_node, item_id: str, profile_id: Optional[str],
                     typed: TypedValue) -> None:
        if self.dialect == Dialect.FLAT_DUMP:
            self._write_dump_entry(list_node, item_id, profile_id, typed)
        else:
            self._write_schema(list_node, item_id, profile_id, typed)

    def _write_schema(self, list_node, item_id, profile_id, typed: TypedValue) -> None:
        descriptor = typed.descriptor
        key = descriptor.serialization_key
        ptype = descriptor.primitive_type

        element = etree.SubElement(list_node, self.spec.element_tag)
        etree.SubElement(element, "key").text = schema_key_path(key)
        etree.SubElement(element, "applyto").text = attribute_path(
            self.dialect, item_id, key, profile_id
        )
        etree.SubElement(element, "type").text = ptype.schema_type
        if ptype == PrimitiveType.STRING_LIST:
            etree.SubElement(element, "list_type").text = LIST_ITEM_TYPE

        locale = None
        value_parent = element
        if descriptor.is_localizable:
            locale = etree.SubElement(element, "locale", name=DEFAULT_LOCALE)
            value_parent = locale
        etree.SubElement(value_parent, "default").text = typed.to_string()

        if self.dialect == Dialect.LEGACY_VERBOSE:
            if locale is None:
                locale = etree.SubElement(element, "locale", name=DEFAULT_LOCALE)
            etree.SubElement(element, "owner").text = OWNER
            self._write_labels(locale, descriptor)

    @staticmethod
    def _write_labels(locale, descriptor: FieldDescriptor) -> None:
        etree.SubElement(locale, "short").text = descriptor.short_label
        etree.SubElement(locale, "long").text = descriptor.long_label

    def _write_dump_entry(self, list_node, item_id, profile_id, typed: TypedValue) -> None:
        descriptor = typed.descriptor
        ptype = descriptor.primitive_type

        entry = etree.SubElement(list_node, self.spec.element_tag)
        etree.SubElement(entry, "key").text = attribute_path(
            self.dialect, item_id, descriptor.serialization_key, profile_id
        )
        value = etree.SubElement(entry, "value")
        if ptype == PrimitiveType.STRING_LIST:
            list_element = etree.SubElement(value, "list", type=LIST_ITEM_TYPE)
            inner = etree.SubElement(list_element, "value")
            for element in typed.effective_value:
                etree.SubElement(inner, LIST_ITEM_TYPE).text = element
        else:
            etree.SubElement(value, ptype.dump_tag).text = typed.to_string()


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def export_to_buffer(item: Item, dialect: Union[Dialect, str]) -> str:
    """
    Serialize one Item to an XML document.

    Returns:
        The UTF-8 document text, XML declaration included

    Raises:
        ExportError: unknown dialect, or a value which cannot be serialized
    """
    return ItemWriter(dialect).to_string(item)


def _folder_path(folder: Union[str, os.PathLike]) -> Path:
    text = os.fspath(folder)
    if isinstance(text, str) and text.startswith("file://"):
        return Path(unquote(urlparse(text).path))
    return Path(text)


def _free_filename(folder: Path, filename: str) -> Path:
    candidate = folder / filename
    if not candidate.exists():
        return candidate
    stem, ext = os.path.splitext(filename)
    n = 0
    while True:
        candidate = folder / f"{stem}_{n}{ext}"
        if not candidate.exists():
            return candidate
        n += 1


def export_to_file(item: Item, folder: Union[str, os.PathLike],
                   dialect: Union[Dialect, str]) -> Path:
    """
    Export one Item to a new file in folder.

    The file name follows the dialect convention; if it is already taken,
    '_0', '_1', ... is appended before the extension until a free name is
    found. An existing file is never overwritten.

    Raises:
        ExportError: the document could not be built
        WriteIoError: the file could not be created or written
    """
    writer = ItemWriter(dialect)
    buffer = writer.to_string(item)

    path = _free_filename(_folder_path(folder),
                          export_filename(writer.dialect, item.type_name, item.id))
    try:
        with open(path, "x", encoding="utf-8") as fh:
            fh.write(buffer)
    except OSError as exc:
        raise WriteIoError(path, exc.strerror or str(exc)) from exc

    logger.info("%s %s exported to %s", item.type_name, item.id, path)
    return path


def export_tree(item: Item, folder: Union[str, os.PathLike],
                dialect: Union[Dialect, str]) -> List[Path]:
    """Export an Item and, for a Menu, every descendant, one file each."""
    nodes = item.walk() if isinstance(item, Menu) else [item]
    return [export_to_file(node, folder, dialect) for node in nodes]


__all__ = [
    "ItemWriter",
    "export_to_buffer",
    "export_to_file",
    "export_tree",
]
