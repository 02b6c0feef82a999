"""
Tests for primitive types and coercion.

These tests verify:
    - Boolean case normalization
    - String list encodings (bracketed with escapes, legacy ';' form)
    - Unsigned integer validation
    - Descriptor-level coerce_to_string / coerce_from_string
"""

import pytest

from menuconf.errors import CoercionError
from menuconf.fields import ACTION, CONDITIONS, ITEM, coerce_from_string, coerce_to_string
from menuconf.types import (
    PrimitiveType,
    decode,
    decode_string_list,
    encode,
    encode_string_list,
    normalize,
)


class TestBoolean:
    """Test boolean coercion."""

    def test_lowercase_literals(self):
        """Should always write lowercase literals."""
        assert encode(PrimitiveType.BOOLEAN, True) == "true"
        assert encode(PrimitiveType.BOOLEAN, False) == "false"

    def test_any_case_accepted(self):
        """Should normalize text of any case before writing it."""
        assert encode(PrimitiveType.BOOLEAN, "TRUE") == "true"
        assert encode(PrimitiveType.BOOLEAN, "False") == "false"

    def test_decode(self):
        """Should parse true/false/1/0 case-insensitively."""
        assert decode(PrimitiveType.BOOLEAN, "True") is True
        assert decode(PrimitiveType.BOOLEAN, " false ") is False
        assert decode(PrimitiveType.BOOLEAN, "1") is True
        assert decode(PrimitiveType.BOOLEAN, "0") is False

    def test_invalid(self):
        """Should reject anything else."""
        with pytest.raises(CoercionError):
            decode(PrimitiveType.BOOLEAN, "maybe")
        with pytest.raises(CoercionError):
            normalize(PrimitiveType.BOOLEAN, 3)


class TestStringList:
    """Test string list encodings."""

    def test_encode(self):
        """Should write the bracketed form."""
        assert encode_string_list(["a", "b"]) == "[a,b]"
        assert encode_string_list([]) == "[]"

    def test_separator_is_escaped(self):
        """Should escape commas and backslashes inside elements."""
        assert encode_string_list(["a", "b,c"]) == "[a,b\\,c]"
        assert encode_string_list(["c:\\dir"]) == "[c:\\\\dir]"

    def test_decode_escaped(self):
        """Should restore escaped separators."""
        assert decode_string_list("[a,b\\,c]") == ["a", "b,c"]
        assert decode_string_list("[c:\\\\dir]") == ["c:\\dir"]

    def test_decode_empty(self):
        """Should read empty text as an empty list."""
        assert decode_string_list("") == []
        assert decode_string_list("[]") == []

    def test_decode_legacy_semicolon_form(self):
        """Should accept the legacy unbracketed form."""
        assert decode_string_list("file;sftp") == ["file", "sftp"]

    def test_inverse(self):
        """Encoding then decoding should give back the list."""
        values = ["*.txt", "a,b", "back\\slash", " spaced "]
        assert decode_string_list(encode_string_list(values)) == values


class TestUnsignedInt:
    """Test unsigned integer coercion."""

    def test_roundtrip(self):
        """Should write and read decimal text."""
        assert encode(PrimitiveType.UINT, 3) == "3"
        assert decode(PrimitiveType.UINT, "3") == 3

    def test_negative_rejected(self):
        """Should reject negative numbers."""
        with pytest.raises(CoercionError):
            normalize(PrimitiveType.UINT, -1)
        with pytest.raises(CoercionError):
            decode(PrimitiveType.UINT, "-1")

    def test_not_a_number(self):
        """Should reject non-numeric text."""
        with pytest.raises(CoercionError):
            decode(PrimitiveType.UINT, "three")

    def test_bool_is_not_an_int(self):
        """Should not take a bool for a number."""
        with pytest.raises(CoercionError):
            normalize(PrimitiveType.UINT, True)


class TestOpaque:
    """Opaque values are never serialized."""

    def test_encode_is_programmer_error(self):
        """Should refuse to encode opaque values."""
        with pytest.raises(TypeError):
            encode(PrimitiveType.OPAQUE, object())


class TestDescriptorCoercion:
    """Test coercion through field descriptors."""

    def test_bool_descriptor(self):
        """Should coerce booleans through the descriptor."""
        descriptor = ITEM.get("enabled")
        assert coerce_to_string(descriptor, False) == "false"
        assert coerce_from_string(descriptor, "FALSE") is False

    def test_list_descriptor(self):
        """Should coerce string lists through the descriptor."""
        descriptor = CONDITIONS.get("schemes")
        text = coerce_to_string(descriptor, ["file", "smb"])
        assert text == "[file,smb]"
        assert coerce_from_string(descriptor, text) == ["file", "smb"]

    def test_string_descriptor(self):
        """Should keep plain strings unchanged."""
        descriptor = ACTION.get("version")
        assert coerce_from_string(descriptor, coerce_to_string(descriptor, "2.0")) == "2.0"
