"""Tests for built-in validators and the validator registry."""

import math

import pytest

from typed_records.errors import InvalidNameError, UnknownValidatorError
from typed_records.types import StoredField, TypeTag
from typed_records.validators import (
    ValidatorRegistry,
    is_array,
    is_bool,
    is_decimal,
    is_float,
    is_hash,
    is_hex,
    is_string,
    is_word,
)


class TestBuiltins:
    """Tests for the built-in predicates."""

    def test_is_word(self):
        assert is_word("hotel_room")
        assert not is_word("hotel room")

    def test_is_hash(self):
        """Test map values: string keys (non-empty) to string values."""
        assert is_hash({})
        assert is_hash({"a": "1", "b": ""})
        assert not is_hash({"": "1"})
        assert not is_hash({"a": 1})
        assert not is_hash({1: "a"})
        assert not is_hash([("a", "1")])

    def test_is_array(self):
        assert is_array([])
        assert is_array(["a", ""])
        assert not is_array(["a", 1])
        assert not is_array(("a",))

    def test_is_bool(self):
        assert is_bool(True)
        assert is_bool(False)
        assert not is_bool(0)
        assert not is_bool("true")

    def test_is_float(self):
        assert is_float(0.0)
        assert is_float(-2.5)
        assert not is_float(1)
        assert not is_float(math.inf)
        assert not is_float(math.nan)
        assert not is_float("1.0")

    def test_is_hex(self):
        assert is_hex(0)
        assert is_hex(0xFF)
        assert not is_hex(-1)
        assert not is_hex(True)
        assert not is_hex("0xff")

    def test_is_decimal(self):
        assert is_decimal(-5)
        assert is_decimal(0)
        assert not is_decimal(False)
        assert not is_decimal(1.0)

    def test_is_string(self):
        assert is_string("")
        assert not is_string(None)

    def test_unencodable_text_rejected(self):
        """Test that strings with lone surrogates are rejected everywhere."""
        assert not is_string("a\ud800b")
        assert not is_array(["ok", "\udfff"])
        assert not is_hash({"k": "\ud800"})
        assert not is_hash({"\ud800": "v"})


class TestValidatorRegistry:
    """Tests for ValidatorRegistry."""

    def test_builtins_registered(self):
        """Test that every built-in is available by name."""
        registry = ValidatorRegistry()
        for name in ("is_word", "is_hash", "is_array", "is_bool",
                     "is_float", "is_hex", "is_decimal", "is_string"):
            assert name in registry

    def test_validators_for(self):
        """Test the default chain for each tag."""
        registry = ValidatorRegistry()
        for tag in TypeTag:
            chain = registry.validators_for(tag)
            assert [v.name for v in chain] == [tag.default_validator]

    def test_register_and_resolve(self):
        """Test registering a custom predicate."""
        registry = ValidatorRegistry()
        registry.register("is_even", lambda v: v % 2 == 0)
        validator = registry.resolve("is_even")
        assert validator(4) is True
        assert validator(3) is False

    def test_register_replaces(self):
        """Test that registering a name again replaces the predicate."""
        registry = ValidatorRegistry()
        registry.register("check", lambda v: False)
        registry.register("check", lambda v: True)
        assert registry.resolve("check")(None) is True

    def test_register_bad_name(self):
        with pytest.raises(InvalidNameError):
            ValidatorRegistry().register("not valid", lambda v: True)

    def test_register_not_callable(self):
        with pytest.raises(TypeError):
            ValidatorRegistry().register("check", "not callable")

    def test_resolve_unknown(self):
        """Test that resolving an unknown name raises UnknownValidatorError."""
        registry = ValidatorRegistry()
        assert registry.get("nope") is None
        with pytest.raises(UnknownValidatorError):
            registry.resolve("nope")

    def test_resolve_stored(self):
        """Test resolving a persisted field layout."""
        registry = ValidatorRegistry()
        registry.register("is_short", lambda v: len(v) < 5)
        stored = StoredField(name="telnum", tag=TypeTag.STRING, validators=("is_string", "is_short"))
        spec = registry.resolve_stored(stored)
        assert spec.validator_names == ["is_string", "is_short"]
        assert spec.validators[1]("abc") is True

    def test_resolve_stored_unknown(self):
        """Test that a persisted name missing from the registry fails."""
        stored = StoredField(name="x", tag=TypeTag.INT, validators=("is_decimal", "gone"))
        with pytest.raises(UnknownValidatorError):
            ValidatorRegistry().resolve_stored(stored)
