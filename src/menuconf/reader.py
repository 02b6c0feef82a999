"""
Reader (importer)

Turns one XML document into one populated Item. The work is a strictly
sequential state machine, with no backtracking:

    Parse            -> MalformedXmlError
    RootDetect       -> UnsupportedDialectError
    ListLocate       (extra or unknown root children are reported, ignored)
    ElementIterate
        pass A: validate elements, discover the item id and its type
                -> MissingIdError, InvalidIdError, UnknownItemTypeError
        pass B: for every descriptor of the item, consume the first
                matching element of the pool
    ProfileMaterialize (Actions)
    Undealt          (whatever is left in the pool is reported)

Elements are matched by the last segment of their path (the attribute's
serialization key) and by the path depth: Item-level and Profile-level
locations differ by one segment, the Profile id.

ARCHITECTURAL RULE:
    Structural problems raise; per-element anomalies are turned into
    Message objects and returned with the item. Nothing is silently
    dropped.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Union

from lxml import etree

from .dialects import Dialect, detect_family, item_id_from_path, split_path
from .errors import (
    CoercionError,
    InvalidIdError,
    MalformedXmlError,
    Message,
    MessageKind,
    MissingIdError,
    UnknownItemTypeError,
    UnsupportedDialectError,
)
from .fields import CONDITIONS, PROFILE, TYPE_ACTION, TYPE_FIELD, FieldDescriptor
from .model import Action, Item, ObjectNode, Profile, TypedValue, item_class_for_type
from .serialization import item_to_yaml
from .types import PrimitiveType

logger = logging.getLogger(__name__)

SCHEMA_CHILDREN = ("key", "applyto", "owner", "type", "list_type", "locale", "default")
DUMP_CHILDREN = ("key", "value")

PRE_V2_PROFILE_ID = "profile-pre-v2"
PRE_V2_PROFILE_LABEL = "Profile automatically created from pre-v2 action"
DEFAULT_PROFILE_ID = "profile-main"


def _text(node) -> str:
    if node is None:
        return ""
    return "".join(node.itertext())


def _is_element(node) -> bool:
    # comments and processing instructions have a non-string tag
    return isinstance(node.tag, str)


@dataclass
class ElementRecord:
    """
    One usable attribute element of the document.

    Properties:
        node: The lxml element
        line: Its source line
        path: Content of its path-bearing child
        children: Its children, by tag (each tag appears once)
    """

    node: etree._Element
    line: Optional[int]
    path: str
    children: Dict[str, etree._Element]

    @property
    def segments(self) -> List[str]:
        return split_path(self.path)

    @property
    def key(self) -> str:
        return self.segments[-1]

    @property
    def depth(self) -> int:
        return len(self.segments)

    @property
    def profile_id(self) -> Optional[str]:
        segments = self.segments
        return segments[-2] if len(segments) > 1 else None


@dataclass
class ReadResult:
    """Outcome of a successful read."""

    item: Item
    dialect: Dialect
    messages: List[Message] = field(default_factory=list)


class ItemReader:
    """
    Reads exactly one document.

    Usage:
        result = ItemReader("config-foo.schema").read(data)
        result.item, result.messages
    """

    def __init__(self, source_name: str = "<buffer>"):
        self.source_name = source_name
        self.messages: List[Message] = []
        self.dialect: Optional[Dialect] = None
        self._verbose_seen = False
        self._used = False

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def read(self, data: Union[bytes, str]) -> ReadResult:
        if self._used:
            raise RuntimeError("an ItemReader handles exactly one document")
        self._used = True

        root = self._parse(data)

        self.dialect = detect_family(root.tag)
        if self.dialect is None:
            raise UnsupportedDialectError(root.tag)
        spec = self.dialect.spec

        list_node = self._locate_list(root)
        pool: List[ElementRecord] = []
        if list_node is not None:
            pool = self._collect_elements(list_node)
        if self._verbose_seen:
            self.dialect = Dialect.LEGACY_VERBOSE

        item_id = self._discover_id(list_node, pool)
        item = self._discover_type(item_id, pool)

        self._populate(item, pool, spec.key_depth)
        if isinstance(item, Action):
            if self._is_pre_v2(item):
                self._convert_pre_v2(item, pool)
            self._materialize_profiles(item, pool)

        for record in pool:
            text = (f"Node {record.node.tag} at line {record.line} "
                    f"(path={record.path}) has not been dealt with.")
            self._add_message(MessageKind.UNDEALT_NODE, text, record.line)
            logger.warning("%s: %s", self.source_name, text)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%s: imported %s\n%s", self.source_name, item.type_name,
                         item_to_yaml(item))
        return ReadResult(item=item, dialect=self.dialect, messages=list(self.messages))

    # ------------------------------------------------------------------
    # Document structure
    # ------------------------------------------------------------------

    def _parse(self, data: Union[bytes, str]) -> etree._Element:
        if isinstance(data, str):
            data = data.encode("utf-8")
        parser = etree.XMLParser(resolve_entities=False, no_network=True,
                                 remove_comments=True, remove_pis=True)
        try:
            return etree.fromstring(data, parser)
        except (etree.XMLSyntaxError, ValueError) as exc:
            raise MalformedXmlError(f"{self.source_name}: {exc}") from exc

    def _locate_list(self, root) -> Optional[etree._Element]:
        spec = self.dialect.spec
        found = None
        for child in root:
            if not _is_element(child):
                continue
            if child.tag != spec.list_tag:
                self._unknown_node(child, spec.list_tag)
            elif found is not None:
                self._duplicate_node(child)
            else:
                found = child
        return found

    def _collect_elements(self, list_node) -> List[ElementRecord]:
        spec = self.dialect.spec
        pool = []
        for child in list_node:
            if not _is_element(child):
                continue
            if child.tag != spec.element_tag:
                self._unknown_node(child, spec.element_tag)
                continue
            record = self._validate_element(child)
            if record is not None:
                pool.append(record)
        return pool

    def _validate_element(self, node) -> Optional[ElementRecord]:
        """Check the children of one element; None if it is unusable."""
        spec = self.dialect.spec
        known = SCHEMA_CHILDREN if self.dialect.is_schema else DUMP_CHILDREN
        children: Dict[str, etree._Element] = {}
        usable = True

        for child in node:
            if not _is_element(child):
                continue
            if child.tag not in known:
                self._unknown_node(child, ", ".join(known))
                usable = False
                continue
            if child.tag in children:
                self._duplicate_node(child)
                usable = False
                continue
            children[child.tag] = child
            if child.tag == "owner" or (
                child.tag == "locale"
                and (child.find("short") is not None or child.find("long") is not None)
            ):
                self._verbose_seen = True

        if not usable:
            return None

        path = _text(children.get(spec.path_tag)).strip()
        if not path:
            self._add_message(
                MessageKind.MISSING_CHILD_NODE,
                f"Element {node.tag} at line {node.sourceline} has no {spec.path_tag}, ignored.",
                node.sourceline,
            )
            return None
        return ElementRecord(node=node, line=node.sourceline, path=path, children=children)

    # ------------------------------------------------------------------
    # Pass A: id and type
    # ------------------------------------------------------------------

    def _discover_id(self, list_node, pool: List[ElementRecord]) -> str:
        item_id = None
        if self.dialect.is_schema:
            for record in pool:
                found = item_id_from_path(self.dialect, record.path)
                if found is None:
                    continue
                if item_id is None:
                    item_id = found
                elif found != item_id:
                    raise InvalidIdError(item_id, found, record.line)
        elif list_node is not None:
            base = (list_node.get("base") or "").rstrip("/")
            item_id = split_path(base)[-1] if base else None

        if not item_id:
            raise MissingIdError()
        return item_id

    def _discover_type(self, item_id: str, pool: List[ElementRecord]) -> Item:
        key_depth = self.dialect.spec.key_depth
        type_name = None
        for record in list(pool):
            if record.key != TYPE_FIELD.serialization_key or record.depth != key_depth:
                continue
            value = _text(self._value_node(record, TYPE_FIELD)).strip()
            if item_class_for_type(value) is None:
                raise UnknownItemTypeError(value, record.line)
            if type_name is None:
                type_name = value
            else:
                self._add_message(
                    MessageKind.DUPLICATE_CHILD_NODE,
                    f"Type {value} at line {record.line} already found as "
                    f"{type_name}, ignored.",
                    record.line,
                )
            pool.remove(record)

        if type_name is None:
            type_name = TYPE_ACTION
            self._add_message(
                MessageKind.DEFAULT_TYPE,
                f"No type found for item {item_id}, defaulting to {TYPE_ACTION}.",
            )
        return item_class_for_type(type_name)(id=item_id)

    # ------------------------------------------------------------------
    # Pass B: attributes
    # ------------------------------------------------------------------

    def _populate(self, node: ObjectNode, pool: List[ElementRecord], depth: int,
                  profile_id: Optional[str] = None,
                  descriptors: Optional[Iterable[FieldDescriptor]] = None) -> None:
        if descriptors is None:
            descriptors = node.descriptors()
        for descriptor in descriptors:
            if not descriptor.readable or descriptor.primitive_type == PrimitiveType.OPAQUE:
                continue
            record = self._take(pool, descriptor.serialization_key, depth, profile_id)
            if record is None:
                continue
            try:
                node.set_typed(self._typed_value(record, descriptor))
            except CoercionError as exc:
                self._add_message(
                    MessageKind.INVALID_VALUE,
                    f"Invalid value for {descriptor.serialization_key} at line "
                    f"{record.line}: {exc}",
                    record.line,
                )

    @staticmethod
    def _take(pool: List[ElementRecord], key: str, depth: int,
              profile_id: Optional[str]) -> Optional[ElementRecord]:
        for record in pool:
            if record.key != key or record.depth != depth:
                continue
            if profile_id is not None and record.profile_id != profile_id:
                continue
            pool.remove(record)
            return record
        return None

    def _value_node(self, record: ElementRecord, descriptor: FieldDescriptor):
        """The node holding the value: <default> (schemas) or <value>'s typed child (dump)."""
        if self.dialect.is_schema:
            locale = record.children.get("locale")
            localized = locale.find("default") if locale is not None else None
            plain = record.children.get("default")
            if descriptor.is_localizable and localized is not None:
                return localized
            return plain if plain is not None else localized

        value = record.children.get("value")
        if value is None:
            return None
        for child in value:
            if _is_element(child):
                return child
        return None

    def _typed_value(self, record: ElementRecord, descriptor: FieldDescriptor) -> TypedValue:
        node = self._value_node(record, descriptor)
        if node is None:
            raise CoercionError("no value found")

        if node.tag == "list" and not self.dialect.is_schema:
            if descriptor.primitive_type != PrimitiveType.STRING_LIST:
                raise CoercionError(f"a list was found for a {descriptor.primitive_type.value}")
            inner = node.find("value")
            elements = [] if inner is None else [_text(s) for s in inner if _is_element(s)]
            return TypedValue(descriptor, elements, is_set=True)

        return TypedValue.from_string(descriptor, _text(node))

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    @staticmethod
    def _is_pre_v2(action: Action) -> bool:
        if action.is_set("iversion"):
            return action.get("iversion") < 2
        if action.is_set("version"):
            major = action.get("version").split(".")[0]
            return major.isdigit() and int(major) < 2
        return False

    def _convert_pre_v2(self, action: Action, pool: List[ElementRecord]) -> None:
        """
        Version 1 actions had a single, implicit profile whose data was
        stored at the action level. Move it to a real profile.
        """
        profile = Profile(id=PRE_V2_PROFILE_ID)
        profile.set("desc_name", PRE_V2_PROFILE_LABEL)
        for descriptor in CONDITIONS:
            if descriptor.applies_in_legacy_v1 and action.is_set(descriptor.name):
                profile.set_typed(action.values.pop(descriptor.name))
        self._populate(profile, pool, self.dialect.spec.key_depth,
                       descriptors=[d for d in PROFILE if d.applies_in_legacy_v1])
        action.attach_profile(profile)
        # the profile now lives at profile depth: a re-read must not convert again
        action.set("iversion", 3)
        self._add_message(
            MessageKind.INFO,
            f"Pre-v2 action {action.id} converted to profile {PRE_V2_PROFILE_ID}.",
        )

    def _materialize_profiles(self, action: Action, pool: List[ElementRecord]) -> None:
        profile_depth = self.dialect.spec.profile_depth
        profile_ids = list(action.get("items"))
        for record in pool:
            if record.depth == profile_depth and record.profile_id not in profile_ids:
                profile_ids.append(record.profile_id)

        for profile_id in profile_ids:
            if not profile_id or action.get_profile(profile_id) is not None:
                continue
            profile = Profile(id=profile_id)
            self._populate(profile, pool, profile_depth, profile_id)
            action.attach_profile(profile)

        if not action.profiles:
            action.attach_profile(Profile(id=DEFAULT_PROFILE_ID))
            self._add_message(
                MessageKind.NO_PROFILE,
                f"Action {action.id} has no profile, {DEFAULT_PROFILE_ID} added.",
            )

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def _add_message(self, kind: MessageKind, text: str, line: Optional[int] = None) -> None:
        self.messages.append(Message(kind=kind, text=text, line=line))
        logger.debug("%s: %s", self.source_name, text)

    def _unknown_node(self, node, expected: str) -> None:
        self._add_message(
            MessageKind.UNKNOWN_CHILD_NODE,
            f"Unknown element {node.tag} found at line {node.sourceline} "
            f"while waiting for {expected}.",
            node.sourceline,
        )

    def _duplicate_node(self, node) -> None:
        self._add_message(
            MessageKind.DUPLICATE_CHILD_NODE,
            f"Element {node.tag} at line {node.sourceline} already found, ignored.",
            node.sourceline,
        )


def read_item(data: Union[bytes, str], source_name: str = "<buffer>") -> ReadResult:
    """Read one document with a fresh ItemReader."""
    return ItemReader(source_name).read(data)


__all__ = [
    "ElementRecord",
    "ReadResult",
    "ItemReader",
    "read_item",
    "PRE_V2_PROFILE_ID",
    "PRE_V2_PROFILE_LABEL",
    "DEFAULT_PROFILE_ID",
]
