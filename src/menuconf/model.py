"""
Item Model

The in-memory tree of configuration records:

    - Menu:    an Item which owns an ordered list of child Items
    - Action:  an Item which owns an ordered list of Profiles
    - Profile: an execution variant, always attached to one Action

Every node carries an id and a collection of Typed Values, one per
attribute which has explicitly been set. Attributes which are not set
hold their descriptor's default and are never serialized.

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about XML or any dialect
        - Own their children exclusively (no node is shared by two trees)
        - Keep a non-owning back-reference to their parent, which is
          excluded from equality and repr
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Iterator, List, Optional, Tuple, Union

from .fields import (
    ACTION,
    CONDITIONS,
    ITEM,
    PROFILE,
    TYPE_ACTION,
    TYPE_MENU,
    FieldDescriptor,
    FieldGroup,
    coerce_from_string,
    coerce_to_string,
)
from .types import normalize


@dataclass
class TypedValue:
    """
    One concrete attribute occurrence.

    Properties:
        descriptor: The FieldDescriptor this value is an instance of
        value: The value, in the canonical representation of its type
        is_set: False means "use the default, do not serialize"
    """

    descriptor: FieldDescriptor
    value: Any = None
    is_set: bool = False

    def __post_init__(self):
        if self.is_set:
            self.value = normalize(self.descriptor.primitive_type, self.value)

    @property
    def effective_value(self) -> Any:
        if self.is_set:
            return self.value
        return self.descriptor.default

    def to_string(self) -> str:
        return coerce_to_string(self.descriptor, self.effective_value)

    @classmethod
    def from_string(cls, descriptor: FieldDescriptor, text: str) -> "TypedValue":
        return cls(descriptor=descriptor, value=coerce_from_string(descriptor, text), is_set=True)


@dataclass
class ObjectNode:
    """
    Base of every node of the tree.

    Properties:
        id:
            Unique within its sibling scope (top-level Items, or the
            Profiles of one Action)

        values:
            Set Typed Values, keyed by descriptor name. Insertion order is
            kept for display but is not significant for equality.

        parent:
            Back-reference to the owning node, or None for a root Item
    """

    GROUPS: ClassVar[Tuple[FieldGroup, ...]] = ()

    id: str
    values: Dict[str, TypedValue] = field(default_factory=dict)
    parent: Optional["ObjectNode"] = field(default=None, repr=False, compare=False)

    @classmethod
    def descriptors(cls) -> Iterator[FieldDescriptor]:
        """All the descriptors of this node type, in group order."""
        for group in cls.GROUPS:
            yield from group

    @classmethod
    def find_descriptor(cls, name: str) -> Optional[FieldDescriptor]:
        for descriptor in cls.descriptors():
            if descriptor.name == name:
                return descriptor
        return None

    @classmethod
    def descriptor_for_key(cls, key: str) -> Optional[FieldDescriptor]:
        """Lookup by on-disk serialization key."""
        for group in cls.GROUPS:
            descriptor = group.get(key)
            if descriptor is not None:
                return descriptor
        return None

    def _require(self, name: str) -> FieldDescriptor:
        descriptor = self.find_descriptor(name)
        if descriptor is None:
            raise KeyError(f"{type(self).__name__} has no attribute '{name}'")
        return descriptor

    def get(self, name: str) -> Any:
        """Value of an attribute, or its default when not set."""
        return self.typed_value(name).effective_value

    def typed_value(self, name: str) -> TypedValue:
        descriptor = self._require(name)
        return self.values.get(name, TypedValue(descriptor))

    def set(self, name: str, value: Any) -> None:
        descriptor = self._require(name)
        self.values[name] = TypedValue(descriptor=descriptor, value=value, is_set=True)

    def set_typed(self, typed: TypedValue) -> None:
        self._require(typed.descriptor.name)
        if typed.is_set:
            self.values[typed.descriptor.name] = typed
        else:
            self.values.pop(typed.descriptor.name, None)

    def unset(self, name: str) -> None:
        self._require(name)
        self.values.pop(name, None)

    def is_set(self, name: str) -> bool:
        return name in self.values

    def set_values(self) -> List[TypedValue]:
        """Set values, in descriptor order (the order they are written)."""
        return [self.values[d.name] for d in self.descriptors() if d.name in self.values]


@dataclass
class Item(ObjectNode):
    """A Menu or an Action: the top-level configuration records."""

    TYPE_NAME: ClassVar[str] = ""

    @property
    def type_name(self) -> str:
        return self.TYPE_NAME

    @property
    def label(self) -> str:
        return self.get("label")

    @label.setter
    def label(self, value: str) -> None:
        self.set("label", value)

    def _register_child_id(self, child_id: str) -> None:
        ids = list(self.get("items"))
        if child_id not in ids:
            ids.append(child_id)
            self.set("items", ids)


@dataclass
class Profile(ObjectNode):
    """
    An execution variant of an Action.

    Carries the command to run (path, parameters, ...) and its own set of
    context conditions.
    """

    GROUPS: ClassVar[Tuple[FieldGroup, ...]] = (PROFILE, CONDITIONS)

    @property
    def action(self) -> Optional["Action"]:
        return self.parent


@dataclass
class Action(Item):
    """
    An Action: a context menu entry which runs a command.

    Properties:
        profiles:
            Ordered list of Profiles. May be empty while the Action is
            being built; a complete Action has at least one.

    The `items` attribute holds the ordered profile ids. It is kept in
    sync by attach_profile().
    """

    TYPE_NAME: ClassVar[str] = TYPE_ACTION
    GROUPS: ClassVar[Tuple[FieldGroup, ...]] = (ITEM, ACTION, CONDITIONS)

    profiles: List[Profile] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return len(self.profiles) > 0

    @property
    def effective_toolbar_label(self) -> str:
        """The toolbar label, falling back to the main label when empty."""
        return self.get("toolbar_label") or self.label

    def attach_profile(self, profile: Profile) -> Profile:
        if self.get_profile(profile.id) is not None:
            raise ValueError(f"Action {self.id} already has a profile '{profile.id}'")
        profile.parent = self
        self.profiles.append(profile)
        self._register_child_id(profile.id)
        return profile

    def get_profile(self, profile_id: str) -> Optional[Profile]:
        for profile in self.profiles:
            if profile.id == profile_id:
                return profile
        return None

    def new_profile_id(self) -> str:
        """First unused id of the form 'profile-<n>'."""
        n = 1
        while self.get_profile(f"profile-{n}") is not None:
            n += 1
        return f"profile-{n}"


@dataclass
class Menu(Item):
    """
    A Menu: a context menu entry which opens a submenu.

    Properties:
        children:
            Ordered Menus and Actions. The `items` attribute holds their
            ids and is kept in sync by append_child().
    """

    TYPE_NAME: ClassVar[str] = TYPE_MENU
    GROUPS: ClassVar[Tuple[FieldGroup, ...]] = (ITEM,)

    children: List[Union["Menu", Action]] = field(default_factory=list)

    def append_child(self, item: Item) -> Item:
        item.parent = self
        self.children.append(item)
        self._register_child_id(item.id)
        return item

    def get_child(self, item_id: str) -> Optional[Item]:
        for child in self.children:
            if child.id == item_id:
                return child
        return None

    def walk(self) -> Iterator[Item]:
        """This menu, then every descendant, depth first."""
        yield self
        for child in self.children:
            if isinstance(child, Menu):
                yield from child.walk()
            else:
                yield child


def item_class_for_type(type_name: str) -> Optional[type]:
    """Item class matching a discriminant value, or None."""
    if type_name == TYPE_ACTION:
        return Action
    if type_name == TYPE_MENU:
        return Menu
    return None


__all__ = [
    "TypedValue",
    "ObjectNode",
    "Item",
    "Profile",
    "Action",
    "Menu",
    "item_class_for_type",
]
