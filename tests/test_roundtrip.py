"""
Export then import, in every dialect.

These tests verify that an item survives the trip through each dialect:
attribute values, profiles and their order, string lists holding the
list separator, and attributes left at their default.
"""

import pytest

from menuconf.dialects import Dialect
from menuconf.errors import MessageKind
from menuconf.examples import (
    build_example_action,
    build_example_checksum_action,
    build_example_menu,
)
from menuconf.importer import import_item
from menuconf.model import Action, Menu, Profile
from menuconf.reader import read_item
from menuconf.serialization import item_to_dict
from menuconf.writer import export_to_buffer, export_to_file

ALL_DIALECTS = list(Dialect)


def roundtrip(item, dialect):
    return read_item(export_to_buffer(item, dialect))


@pytest.mark.parametrize("dialect", ALL_DIALECTS, ids=lambda d: d.value)
class TestRoundTrip:
    """import(export_to_buffer(item, dialect)) == item"""

    def test_example_action(self, dialect):
        """Should read back the example action unchanged."""
        action = build_example_action()
        result = roundtrip(action, dialect)
        assert result.item == action
        assert result.dialect is dialect
        assert result.messages == []

    def test_several_profiles_keep_order(self, dialect):
        """Should keep profiles in their order."""
        action = build_example_checksum_action()
        restored = roundtrip(action, dialect).item
        assert restored == action
        assert [p.id for p in restored.profiles] == ["profile-single", "profile-many"]

    def test_string_list_with_separator(self, dialect):
        """Should keep commas inside list elements."""
        action = Action(id="lists")
        profile = action.attach_profile(Profile(id="p"))
        profile.set("basenames", ["a", "b,c"])
        restored = roundtrip(action, dialect).item
        assert restored.get_profile("p").get("basenames") == ["a", "b,c"]

    def test_empty_values(self, dialect):
        """Should keep empty strings and empty lists."""
        action = Action(id="empty")
        action.set("tooltip", "")
        profile = action.attach_profile(Profile(id="p"))
        profile.set("capabilities", [])
        assert roundtrip(action, dialect).item == action

    def test_markup_and_unicode(self, dialect):
        """Should keep markup characters and non-ASCII text."""
        action = Action(id="text")
        action.label = "Ouvrir ici <vite> & bien, « merci »"
        action.set("description", "  padded  ")
        action.attach_profile(Profile(id="p"))
        assert roundtrip(action, dialect).item == action

    def test_defaults_stay_defaults(self, dialect):
        """An attribute never set is not written, and comes back unset."""
        action = Action(id="defaults")
        action.attach_profile(Profile(id="p"))
        restored = roundtrip(action, dialect).item
        assert not restored.is_set("target_selection")
        assert restored.get("target_selection") is True
        assert restored.get_profile("p").get("schemes") == ["file"]
        assert restored.values.keys() == action.values.keys()

    def test_menu_without_children(self, dialect):
        """Should keep the child id list of a lone menu."""
        menu = Menu(id="m")
        menu.label = "Menu"
        menu.set("items", ["x", "y"])
        assert roundtrip(menu, dialect).item == menu

    def test_menu_children_by_id(self, dialect):
        """A menu comes back with the ids of its children, in order."""
        menu = build_example_menu()
        restored = roundtrip(menu, dialect).item
        assert isinstance(restored, Menu)
        assert restored.get("items") == [c.id for c in menu.children]
        assert restored.label == menu.label

    def test_through_file(self, dialect, tmp_path):
        """Should survive a trip through a file."""
        action = build_example_action()
        path = export_to_file(action, tmp_path, dialect)
        result = import_item(path, find_existing=lambda item_id: None)
        assert result.item == action
        assert result.mode is None
        assert not result.exists


class TestCrossDialect:
    """Reading one dialect and writing another preserves the item."""

    def test_dump_to_schema(self):
        """Should read a dump and write a schema without loss."""
        action = build_example_checksum_action()
        via_dump = roundtrip(action, Dialect.FLAT_DUMP).item
        via_schema = roundtrip(via_dump, Dialect.CONCISE).item
        assert item_to_dict(via_schema) == item_to_dict(action)

    def test_no_undealt_nodes(self):
        """Should leave no undealt node in any dialect."""
        for dialect in ALL_DIALECTS:
            result = roundtrip(build_example_menu(), dialect)
            assert MessageKind.UNDEALT_NODE not in [m.kind for m in result.messages]


class TestConvertedPreV2:
    """A converted version 1 action survives a later export."""

    PRE_V2_DOC = (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        "<mateconfschemafile>\n<schemalist>\n"
        "<schema><key>/schemas/apps/caja-actions/configurations/version</key>"
        "<applyto>/apps/caja-actions/configurations/abc/version</applyto>"
        "<type>string</type><default>1.0</default></schema>\n"
        "<schema><key>/schemas/apps/caja-actions/configurations/path</key>"
        "<applyto>/apps/caja-actions/configurations/abc/path</applyto>"
        "<type>string</type><default>/usr/bin/gedit</default></schema>\n"
        "<schema><key>/schemas/apps/caja-actions/configurations/basenames</key>"
        "<applyto>/apps/caja-actions/configurations/abc/basenames</applyto>"
        "<type>list</type><list_type>string</list_type><default>[*.txt]</default></schema>\n"
        "</schemalist>\n</mateconfschemafile>\n"
    )

    @pytest.mark.parametrize("dialect", ALL_DIALECTS, ids=lambda d: d.value)
    def test_reimport_keeps_command(self, dialect):
        """Should keep the converted profile when the action is exported and read again."""
        first = read_item(self.PRE_V2_DOC).item
        again = roundtrip(first, dialect)
        profile = again.item.profiles[0]
        assert profile.get("path") == "/usr/bin/gedit"
        assert profile.get("basenames") == ["*.txt"]
        assert again.item == first
        assert MessageKind.UNDEALT_NODE not in [m.kind for m in again.messages]
