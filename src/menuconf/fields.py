"""
Field Descriptor Table

Static metadata for every serializable attribute, organized in groups:

    - ITEM:       shared by Menus and Actions
    - ACTION:     Action-only attributes
    - PROFILE:    execution attributes of a Profile
    - CONDITIONS: context predicates, shared by Actions and Profiles

ARCHITECTURAL RULE:
    The reader and the writer never name an attribute. They iterate the
    descriptors of the node they are working on, and match XML nodes by
    serialization_key. Adding an attribute means adding one row here.

    serialization_key is unique within its group; each group carries a
    lookup dict built once at import time.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional, Tuple

from .types import PrimitiveType, decode, encode


@dataclass(frozen=True)
class FieldDescriptor:
    """
    Describes one serializable attribute.

    Properties:
        name:
            Stable internal key, used by the model (e.g. "target_selection")

        serialization_key:
            Key segment written on disk (e.g. "target-selection")

        primitive_type:
            One of PrimitiveType

        default_value:
            Default, as on-disk text. An attribute holding its default is
            never written.

        is_localizable:
            The value is translatable text. Schema dialects wrap it in a
            <locale name="C"> element.

        applies_in_legacy_v1:
            The attribute existed in version 1 actions, where it lived at
            the action level. Used when converting pre-v2 actions.

        short_label, long_label:
            Human descriptions, written by the legacy verbose dialect.

        readable, writable:
            Whether the reader/writer consider the attribute at all.
            Obsolete attributes are readable but not writable.
    """

    name: str
    serialization_key: str
    primitive_type: PrimitiveType
    default_value: str = ""
    is_localizable: bool = False
    applies_in_legacy_v1: bool = False
    short_label: str = ""
    long_label: str = ""
    readable: bool = True
    writable: bool = True

    @property
    def default(self) -> Any:
        """The default, decoded to its in-memory representation."""
        return decode(self.primitive_type, self.default_value)


class FieldGroup:
    """An ordered, named set of descriptors with a lookup by serialization key."""

    def __init__(self, name: str, descriptors: Tuple[FieldDescriptor, ...]):
        self.name = name
        self.descriptors = tuple(descriptors)
        self.by_key: Dict[str, FieldDescriptor] = {}
        for descriptor in self.descriptors:
            if descriptor.serialization_key in self.by_key:
                raise ValueError(
                    f"Duplicate serialization key '{descriptor.serialization_key}' "
                    f"in group {name}"
                )
            self.by_key[descriptor.serialization_key] = descriptor

    def __iter__(self) -> Iterator[FieldDescriptor]:
        return iter(self.descriptors)

    def __len__(self) -> int:
        return len(self.descriptors)

    def __repr__(self) -> str:
        return f"FieldGroup({self.name!r}, {len(self.descriptors)} fields)"

    def get(self, key: str) -> Optional[FieldDescriptor]:
        return self.by_key.get(key)


def coerce_to_string(descriptor: FieldDescriptor, value: Any) -> str:
    """Serialize value according to the descriptor's primitive type."""
    return encode(descriptor.primitive_type, value)


def coerce_from_string(descriptor: FieldDescriptor, text: str) -> Any:
    """
    Parse text according to the descriptor's primitive type.

    Raises:
        CoercionError: text is not valid for the type
    """
    return decode(descriptor.primitive_type, text)


# The discriminant pseudo-attribute. It belongs to no group: the writer
# emits it first through the dialect's type-write function, and the reader
# consumes it while discovering the item id.
TYPE_FIELD = FieldDescriptor(
    name="type",
    serialization_key="type",
    primitive_type=PrimitiveType.STRING,
    default_value="Action",
    short_label="The type of the item",
    long_label="The type of the item. Mandatory. Must be 'Action' or 'Menu'.",
    readable=False,
    writable=False,
)

TYPE_ACTION = "Action"
TYPE_MENU = "Menu"


ITEM = FieldGroup("item", (
    FieldDescriptor(
        "label", "label", PrimitiveType.LOCALE_STRING, "",
        is_localizable=True,
        short_label="Label of the context menu item (mandatory)",
        long_label="The label of the menu item that will appear in the file manager "
                   "context menu when the selection matches the appearance condition "
                   "settings. It is also used as a default for the toolbar label of "
                   "an action.",
    ),
    FieldDescriptor(
        "tooltip", "tooltip", PrimitiveType.LOCALE_STRING, "",
        is_localizable=True,
        short_label="Tooltip of the context menu item",
        long_label="The tooltip of the menu item that will appear in the file manager "
                   "statusbar when the user points to the file manager context menu "
                   "item with his/her mouse.",
    ),
    FieldDescriptor(
        "icon", "icon", PrimitiveType.LOCALE_STRING, "",
        is_localizable=True,
        short_label="Icon of the context menu item",
        long_label="The icon of the menu item that will appear next to the label in "
                   "the file manager context menu. May be the name of a themed icon, "
                   "or a full path to any appropriate image.",
    ),
    FieldDescriptor(
        "description", "description", PrimitiveType.LOCALE_STRING, "",
        is_localizable=True,
        short_label="Description relative to the item",
        long_label="Some text which explains the goal of the menu or the action.",
    ),
    FieldDescriptor(
        "items", "items", PrimitiveType.STRING_LIST, "[]",
        short_label="List of subitem ids",
        long_label="Ordered list of the IDs of the subitems. This may be actions or "
                   "menus if the item is a menu, or profiles if the item is an action. "
                   "If this list doesn't exist or is empty, subitems are attached in "
                   "the order of the read operations.",
    ),
    FieldDescriptor(
        "enabled", "enabled", PrimitiveType.BOOLEAN, "true",
        short_label="Whether the action or the menu is enabled (default)",
        long_label="If the action or the menu is disabled, it will never appear in "
                   "the file manager context menu. Defaults to TRUE.",
    ),
    FieldDescriptor(
        "iversion", "iversion", PrimitiveType.UINT, "3",
        short_label="Internal version of the item",
        long_label="The internal version of the configuration format of the item. "
                   "Items older than version 2 are converted when read.",
    ),
))

ACTION = FieldGroup("action", (
    FieldDescriptor(
        "version", "version", PrimitiveType.STRING, "2.0",
        short_label="Version of the format",
        long_label="The version of the configuration format that will be used to "
                   "manage backward compatibility.",
    ),
    FieldDescriptor(
        "target_selection", "target-selection", PrimitiveType.BOOLEAN, "true",
        short_label="Targets the selection context menu (default)",
        long_label="Whether the action targets the selection file manager context "
                   "menus. Defaults to TRUE.",
    ),
    FieldDescriptor(
        "target_location", "target-location", PrimitiveType.BOOLEAN, "false",
        short_label="Targets the location context menu",
        long_label="Whether the action targets the file manager context menus when "
                   "there is no selection, thus applying to current location. "
                   "Defaults to FALSE.",
    ),
    FieldDescriptor(
        "target_toolbar", "target-toolbar", PrimitiveType.BOOLEAN, "false",
        short_label="Targets the toolbar",
        long_label="Whether the action is candidate to be displayed in file manager "
                   "toolbar. Defaults to FALSE.",
    ),
    FieldDescriptor(
        "toolbar_label", "toolbar-label", PrimitiveType.LOCALE_STRING, "",
        is_localizable=True,
        short_label="Label of the toolbar item",
        long_label="The label displayed besides of the icon in the file manager "
                   "toolbar. Defaults to label of the context menu when not set or "
                   "empty.",
    ),
    FieldDescriptor(
        "toolbar_same_label", "toolbar-same-label", PrimitiveType.BOOLEAN, "true",
        short_label="Does the toolbar label is the same than the main one ?",
        long_label="Does the toolbar label is the same than the main one ?",
        writable=False,
    ),
))

PROFILE = FieldGroup("profile", (
    FieldDescriptor(
        "desc_name", "desc-name", PrimitiveType.LOCALE_STRING, "",
        is_localizable=True,
        short_label="Name of the profile",
        long_label="May be used as a description for the function of the profile. "
                   "If not set, it defaults to an auto-generated name.",
    ),
    FieldDescriptor(
        "path", "path", PrimitiveType.STRING, "",
        applies_in_legacy_v1=True,
        short_label="Path of the command",
        long_label="The path of the command to be executed when the user selects the "
                   "menu item in the file manager context menu or in the toolbar.",
    ),
    FieldDescriptor(
        "parameters", "parameters", PrimitiveType.STRING, "",
        applies_in_legacy_v1=True,
        short_label="Parameters of the command",
        long_label="The parameters of the command to be executed when the user "
                   "selects the menu item in the file manager context menu or in the "
                   "toolbar.",
    ),
    FieldDescriptor(
        "working_dir", "working-dir", PrimitiveType.STRING, "",
        short_label="Working directory",
        long_label="The working directory the command will be started in.",
    ),
    FieldDescriptor(
        "execution_mode", "execution-mode", PrimitiveType.STRING, "Normal",
        short_label="Execution mode",
        long_label="How the command is run: 'Normal', 'Terminal', 'Embedded' or "
                   "'DisplayOutput'. Defaults to 'Normal'.",
    ),
    FieldDescriptor(
        "startup_notify", "startup-notify", PrimitiveType.BOOLEAN, "false",
        short_label="Startup notification",
        long_label="Whether the command sends a startup notification. Defaults to "
                   "FALSE.",
    ),
    FieldDescriptor(
        "startup_wmclass", "startup-wmclass", PrimitiveType.STRING, "",
        short_label="Startup window manager class",
        long_label="The window manager class the command is expected to map.",
    ),
    FieldDescriptor(
        "execute_as", "execute-as", PrimitiveType.STRING, "",
        short_label="Execute as",
        long_label="The user the command should be run as.",
    ),
))

CONDITIONS = FieldGroup("conditions", (
    FieldDescriptor(
        "basenames", "basenames", PrimitiveType.STRING_LIST, "[*]",
        applies_in_legacy_v1=True,
        short_label="List of patterns to be matched against the selected file(s)/folder(s)",
        long_label="A list of strings with joker '*' or '?' to be matched against the "
                   "name(s) of the selected file(s)/folder(s). Defaults to '*'.",
    ),
    FieldDescriptor(
        "matchcase", "matchcase", PrimitiveType.BOOLEAN, "true",
        applies_in_legacy_v1=True,
        short_label="Whether the specified basenames are case sensitive (default)",
        long_label="Must be set to 'true' if the filename patterns are case "
                   "sensitive, to 'false' otherwise. Defaults to 'true'.",
    ),
    FieldDescriptor(
        "mimetypes", "mimetypes", PrimitiveType.STRING_LIST, "[*]",
        applies_in_legacy_v1=True,
        short_label="List of patterns to be matched against the mimetypes of the "
                    "selected file(s)/folder(s)",
        long_label="A list of strings with joker '*' to be matched against the "
                   "mimetypes of the selected file(s)/folder(s). Defaults to '*'.",
    ),
    FieldDescriptor(
        "isfile", "isfile", PrimitiveType.BOOLEAN, "true",
        applies_in_legacy_v1=True,
        short_label="Whether the profile applies to files",
        long_label="Set to 'true' if the selection can have files, to 'false' "
                   "otherwise. Defaults to 'true'.",
    ),
    FieldDescriptor(
        "isdir", "isdir", PrimitiveType.BOOLEAN, "false",
        applies_in_legacy_v1=True,
        short_label="Whether the profile applies to folders",
        long_label="Set to 'true' if the selection can have folders, to 'false' "
                   "otherwise. Defaults to 'false'.",
    ),
    FieldDescriptor(
        "accept_multiple", "accept-multiple-files", PrimitiveType.BOOLEAN, "false",
        applies_in_legacy_v1=True,
        short_label="Whether the selection may be multiple",
        long_label="If you need more than one files or folders to be selected, set "
                   "this key to 'true'. Defaults to 'false'.",
    ),
    FieldDescriptor(
        "schemes", "schemes", PrimitiveType.STRING_LIST, "[file]",
        applies_in_legacy_v1=True,
        short_label="List of schemes to be matched against those of selected "
                    "file(s)/folder(s)",
        long_label="Defines the list of valid schemes to be matched against the "
                   "selected items. Defaults to 'file'.",
    ),
    FieldDescriptor(
        "folders", "folders", PrimitiveType.STRING_LIST, "[/]",
        short_label="List of folders",
        long_label="Defines the list of valid paths to be matched against the "
                   "current folder. Defaults to '/'.",
    ),
    FieldDescriptor(
        "selection_count", "selection-count", PrimitiveType.STRING, "",
        short_label="Count of selected items",
        long_label="A condition on the count of selected items, as an operator "
                   "('<', '=' or '>') followed by a number, e.g. '>0'.",
    ),
    FieldDescriptor(
        "capabilities", "capabilities", PrimitiveType.STRING_LIST, "[]",
        short_label="List of capabilities",
        long_label="A list of capabilities each selected item must have, e.g. "
                   "'Readable' or '!Local'.",
    ),
    FieldDescriptor(
        "only_show_in", "only-show-in", PrimitiveType.STRING_LIST, "[]",
        short_label="Only show in these desktop environments",
        long_label="The item is candidate only in the listed desktop environments.",
    ),
    FieldDescriptor(
        "not_show_in", "not-show-in", PrimitiveType.STRING_LIST, "[]",
        short_label="Do not show in these desktop environments",
        long_label="The item is never candidate in the listed desktop environments.",
    ),
    FieldDescriptor(
        "try_exec", "try-exec", PrimitiveType.STRING, "",
        short_label="Executable must exist",
        long_label="The item is candidate only if this executable file exists.",
    ),
    FieldDescriptor(
        "show_if_registered", "show-if-registered", PrimitiveType.STRING, "",
        short_label="DBus name must be registered",
        long_label="The item is candidate only if this DBus service name is "
                   "registered.",
    ),
    FieldDescriptor(
        "show_if_true", "show-if-true", PrimitiveType.STRING, "",
        short_label="Command must output 'true'",
        long_label="The item is candidate only if this command outputs 'true'.",
    ),
    FieldDescriptor(
        "show_if_running", "show-if-running", PrimitiveType.STRING, "",
        short_label="Process must be running",
        long_label="The item is candidate only if a process of this name is "
                   "running.",
    ),
))


__all__ = [
    "FieldDescriptor",
    "FieldGroup",
    "coerce_to_string",
    "coerce_from_string",
    "TYPE_FIELD",
    "TYPE_ACTION",
    "TYPE_MENU",
    "ITEM",
    "ACTION",
    "PROFILE",
    "CONDITIONS",
]
