"""
Tests for the dialect table and the attribute path conventions.
"""

import pytest

from menuconf.dialects import (
    Dialect,
    attribute_path,
    available_dialects,
    detect_family,
    export_filename,
    item_id_from_path,
    path_depth,
)


class TestDialectIds:
    """Test stable dialect identifiers."""

    def test_values(self):
        """Should expose the stable dialect ids."""
        assert Dialect.LEGACY_VERBOSE.value == "MateConfSchemaV1"
        assert Dialect.CONCISE.value == "MateConfSchemaV2"
        assert Dialect.FLAT_DUMP.value == "MateConfEntry"

    def test_from_id(self):
        """Should look ids up case-insensitively."""
        assert Dialect.from_id("mateconfentry") is Dialect.FLAT_DUMP
        with pytest.raises(ValueError):
            Dialect.from_id("Desktop1")

    def test_available(self):
        """Should list three dialects with label and description."""
        assert len(available_dialects()) == 3
        for dialect in available_dialects():
            assert dialect.spec.label
            assert dialect.spec.description


class TestTags:
    """Tag names are part of the wire contract."""

    def test_schema_tags(self):
        """Should share the schema file tags."""
        for dialect in (Dialect.LEGACY_VERBOSE, Dialect.CONCISE):
            spec = dialect.spec
            assert (spec.root_tag, spec.list_tag, spec.element_tag) == (
                "mateconfschemafile", "schemalist", "schema")

    def test_dump_tags(self):
        """Should use the entry file tags."""
        spec = Dialect.FLAT_DUMP.spec
        assert (spec.root_tag, spec.list_tag, spec.element_tag) == (
            "mateconfentryfile", "entrylist", "entry")

    def test_detect_family(self):
        """Should map a root tag to its dialect family."""
        assert detect_family("mateconfschemafile") is Dialect.CONCISE
        assert detect_family("mateconfentryfile") is Dialect.FLAT_DUMP
        assert detect_family("html") is None


class TestPaths:
    """Test attribute locations and their depth."""

    def test_schema_item_path(self):
        """Should build an item-level applyto path."""
        path = attribute_path(Dialect.CONCISE, "abc", "label")
        assert path == "/apps/caja-actions/configurations/abc/label"
        assert path_depth(path) == Dialect.CONCISE.spec.key_depth

    def test_schema_profile_path(self):
        """Should build a profile-level applyto path one level deeper."""
        path = attribute_path(Dialect.LEGACY_VERBOSE, "abc", "path", "profile-main")
        assert path == "/apps/caja-actions/configurations/abc/profile-main/path"
        assert path_depth(path) == Dialect.LEGACY_VERBOSE.spec.profile_depth

    def test_dump_paths(self):
        """Should build relative dump keys."""
        assert attribute_path(Dialect.FLAT_DUMP, "abc", "label") == "label"
        assert attribute_path(Dialect.FLAT_DUMP, "abc", "path", "p1") == "p1/path"
        assert Dialect.FLAT_DUMP.spec.key_depth == 1

    def test_item_id_from_path(self):
        """Should find the item id in a full path only."""
        assert item_id_from_path(
            Dialect.CONCISE, "/apps/caja-actions/configurations/abc/p1/path") == "abc"
        assert item_id_from_path(Dialect.CONCISE, "/apps/label") is None
        assert item_id_from_path(Dialect.FLAT_DUMP, "label") is None


class TestFilenames:

    def test_conventions(self):
        """Should name files after the dialect and item type."""
        assert export_filename(Dialect.LEGACY_VERBOSE, "Action", "x") == "config_x.schemas"
        assert export_filename(Dialect.CONCISE, "Menu", "x") == "config-x.schema"
        assert export_filename(Dialect.FLAT_DUMP, "Action", "x") == "action-x.xml"
        assert export_filename(Dialect.FLAT_DUMP, "Menu", "x") == "menu-x.xml"
