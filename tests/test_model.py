"""
Tests for the Item Model

These tests verify:
    - Typed values (set / unset / defaults)
    - Attribute access by name
    - Profiles attached to Actions, children appended to Menus
    - The `items` id list kept in sync with the tree
    - Equality semantics
"""

import pytest

from menuconf.errors import CoercionError
from menuconf.fields import ITEM
from menuconf.model import Action, Menu, Profile, TypedValue, item_class_for_type


class TestTypedValue:
    """Test TypedValue objects."""

    def test_unset_uses_default(self):
        """Should report the descriptor default when not set."""
        typed = TypedValue(ITEM.get("enabled"))
        assert not typed.is_set
        assert typed.effective_value is True
        assert typed.to_string() == "true"

    def test_set_value_is_normalized(self):
        """Should store the canonical representation of the type."""
        typed = TypedValue(ITEM.get("enabled"), "FALSE", is_set=True)
        assert typed.value is False

    def test_from_string(self):
        """Should decode text through the descriptor type."""
        typed = TypedValue.from_string(ITEM.get("items"), "[p1,p2]")
        assert typed.is_set
        assert typed.value == ["p1", "p2"]


class TestAttributes:
    """Test attribute access on nodes."""

    def test_default_when_not_set(self):
        """Should return defaults for unset attributes."""
        action = Action(id="a1")
        assert action.get("target_selection") is True
        assert action.get("label") == ""
        assert not action.is_set("label")

    def test_set_and_get(self):
        """Should store and return a set value."""
        action = Action(id="a1")
        action.set("target_toolbar", True)
        assert action.is_set("target_toolbar")
        assert action.get("target_toolbar") is True

    def test_set_to_default_is_still_set(self):
        """An explicitly set value is kept, even if equal to the default."""
        action = Action(id="a1")
        action.set("enabled", True)
        assert action.is_set("enabled")

    def test_unset(self):
        """Should forget an unset value."""
        action = Action(id="a1")
        action.set("icon", "gtk-open")
        action.unset("icon")
        assert not action.is_set("icon")
        assert action.get("icon") == ""

    def test_unknown_attribute(self):
        """Should refuse attributes not declared for the node type."""
        menu = Menu(id="m1")
        with pytest.raises(KeyError):
            menu.set("target_toolbar", True)
        with pytest.raises(KeyError):
            Profile(id="p").get("label")

    def test_invalid_value(self):
        """Should reject a value its type cannot hold."""
        with pytest.raises(CoercionError):
            Action(id="a1").set("iversion", -2)

    def test_set_values_in_descriptor_order(self):
        """Should list set values in descriptor order."""
        action = Action(id="a1")
        action.set("schemes", ["sftp"])
        action.set("label", "Hello")
        keys = [t.descriptor.serialization_key for t in action.set_values()]
        assert keys == ["label", "schemes"]

    def test_descriptor_for_key(self):
        """Should find descriptors by on-disk key."""
        assert Action.descriptor_for_key("target-location").name == "target_location"
        assert Menu.descriptor_for_key("target-location") is None
        assert Profile.descriptor_for_key("accept-multiple-files").name == "accept_multiple"


class TestAction:
    """Test Action objects and their profiles."""

    def test_attach_profile(self):
        """Should link the profile back to its action."""
        action = Action(id="a1")
        profile = action.attach_profile(Profile(id="profile-main"))
        assert profile.action is action
        assert action.get_profile("profile-main") is profile
        assert action.is_complete

    def test_attach_updates_items(self):
        """Should keep the ordered profile ids in `items`."""
        action = Action(id="a1")
        action.attach_profile(Profile(id="p2"))
        action.attach_profile(Profile(id="p1"))
        assert action.get("items") == ["p2", "p1"]

    def test_duplicate_profile_rejected(self):
        """Should refuse a second profile with the same id."""
        action = Action(id="a1")
        action.attach_profile(Profile(id="p"))
        with pytest.raises(ValueError):
            action.attach_profile(Profile(id="p"))

    def test_incomplete_without_profile(self):
        """Should not be complete without a profile."""
        assert not Action(id="a1").is_complete

    def test_new_profile_id(self):
        """Should pick the first free profile id."""
        action = Action(id="a1")
        assert action.new_profile_id() == "profile-1"
        action.attach_profile(Profile(id="profile-1"))
        assert action.new_profile_id() == "profile-2"

    def test_effective_toolbar_label(self):
        """Should fall back to the main label when the toolbar label is empty."""
        action = Action(id="a1")
        action.label = "Main"
        assert action.effective_toolbar_label == "Main"
        action.set("toolbar_label", "Short")
        assert action.effective_toolbar_label == "Short"

    def test_type_name(self):
        """Should name the item type."""
        assert Action(id="a").type_name == "Action"
        assert Menu(id="m").type_name == "Menu"


class TestMenu:
    """Test Menu objects and their children."""

    def test_append_child(self):
        """Should link the child and record its id."""
        menu = Menu(id="m1")
        child = menu.append_child(Action(id="a1"))
        assert child.parent is menu
        assert menu.get_child("a1") is child
        assert menu.get("items") == ["a1"]

    def test_walk(self):
        """Should visit the tree depth first."""
        root = Menu(id="root")
        sub = root.append_child(Menu(id="sub"))
        sub.append_child(Action(id="leaf"))
        root.append_child(Action(id="other"))
        assert [i.id for i in root.walk()] == ["root", "sub", "leaf", "other"]


class TestEquality:
    """Test equality semantics."""

    def test_insertion_order_not_significant(self):
        """Should compare values regardless of insertion order."""
        a = Action(id="x")
        a.set("label", "L")
        a.set("icon", "I")
        b = Action(id="x")
        b.set("icon", "I")
        b.set("label", "L")
        assert a == b

    def test_parent_ignored(self):
        """Should ignore the parent when comparing."""
        p1 = Profile(id="p")
        p2 = Profile(id="p")
        Action(id="a").attach_profile(p1)
        assert p1 == p2

    def test_different_kinds_differ(self):
        """Should tell an Action from a Menu with the same id."""
        assert Action(id="x") != Menu(id="x")


class TestItemClassForType:

    def test_known(self):
        """Should map known type names to classes."""
        assert item_class_for_type("Action") is Action
        assert item_class_for_type("Menu") is Menu

    def test_unknown(self):
        """Should return None for unknown type names."""
        assert item_class_for_type("Separator") is None
