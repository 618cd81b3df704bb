"""Tests for defining, reading and deleting record types."""

import pytest

from conftest import HOTEL_ROOM_FIELDS
from typed_records.errors import (
    DuplicateFieldError,
    DuplicateTypeError,
    InvalidNameError,
    ParentNotFoundError,
    TypeNotFoundError,
    UnknownTypeTagError,
    UnknownValidatorError,
)
from typed_records.types import FieldDecl, TypeTag


class TestDefineType:
    """Tests for define_type."""

    def test_fields_round_trip(self, store):
        """Test that a defined type reads back with exactly its fields."""
        store.define_type("hotel_room", HOTEL_ROOM_FIELDS)
        type_def = store.get_type("hotel_room")

        assert type_def.name == "hotel_room"
        assert type_def.parent is None
        assert {f.name: f.tag.value for f in type_def.fields} == dict(HOTEL_ROOM_FIELDS)
        for f in type_def.fields:
            assert f.validators[0].name == f.tag.default_validator

    def test_returns_definition_in_declared_order(self, store):
        type_def = store.define_type("hotel_room", HOTEL_ROOM_FIELDS)
        assert type_def.field_names == [name for name, _ in HOTEL_ROOM_FIELDS]

    def test_extra_validators_persist(self, store):
        """Test that extra validators are kept after the built-in one."""
        store.register_validator("is_discount", lambda v: 0.0 <= v <= 1.0)
        store.define_type("promo", [FieldDecl("rate", TypeTag.FLOAT, ("is_discount",))])

        rate = store.get_type("promo").get_field("rate")
        assert rate.validator_names == ["is_float", "is_discount"]

    def test_empty_type(self, store):
        store.define_type("nothing")
        assert store.get_type("nothing").fields == []

    def test_duplicate_type(self, hotel_store):
        with pytest.raises(DuplicateTypeError) as exc_info:
            hotel_store.define_type("hotel_room", [("x", "Int")])
        assert exc_info.value.name == "hotel_room"

    def test_duplicate_field(self, store):
        with pytest.raises(DuplicateFieldError) as exc_info:
            store.define_type("t", [("a", "Int"), ("a", "String")])
        assert exc_info.value.name == "a"
        assert "t" not in store.list_types()

    @pytest.mark.parametrize("name", ["bad name", "", "a/b", "../x"])
    def test_invalid_type_name(self, store, name):
        with pytest.raises(InvalidNameError):
            store.define_type(name, [("a", "Int")])

    def test_invalid_field_name(self, store):
        with pytest.raises(InvalidNameError):
            store.define_type("t", [("a-b", "Int")])

    def test_unknown_tag(self, store):
        with pytest.raises(UnknownTypeTagError):
            store.define_type("t", [("a", "Decimal")])

    def test_unknown_validator_fails_at_definition(self, store):
        """Test that unknown validators fail before anything is written."""
        with pytest.raises(UnknownValidatorError):
            store.define_type("t", [("a", "Int", ["is_missing"])])
        assert store.list_types() == []

    def test_list_types(self, store):
        store.define_type("b_type")
        store.define_type("a_type")
        assert store.list_types() == ["a_type", "b_type"]

    def test_get_missing(self, store):
        with pytest.raises(TypeNotFoundError):
            store.get_type("missing")


class TestInheritance:
    """Tests for types defined from a parent."""

    def test_child_has_parent_fields_plus_own(self, hotel_store):
        """Test that hotel_room_vip has the 6 parent fields plus discount_rate."""
        vip = hotel_store.define_type(
            "hotel_room_vip", [("discount_rate", "Float")], inherit_from="hotel_room"
        )
        assert len(vip.fields) == 7
        assert vip.parent == "hotel_room"

        stored = hotel_store.get_type("hotel_room_vip")
        assert set(stored.field_names) == {name for name, _ in HOTEL_ROOM_FIELDS} | {
            "discount_rate"
        }
        assert stored.parent == "hotel_room"

    def test_parent_not_found(self, store):
        with pytest.raises(ParentNotFoundError) as exc_info:
            store.define_type("child", [("a", "Int")], inherit_from="ghost")
        assert exc_info.value.name == "ghost"

    def test_field_collides_with_parent(self, hotel_store):
        with pytest.raises(DuplicateFieldError):
            hotel_store.define_type("vip", [("rmnum", "Int")], inherit_from="hotel_room")

    def test_inherit_into_existing_name(self, hotel_store):
        with pytest.raises(DuplicateTypeError):
            hotel_store.define_type("hotel_room", [], inherit_from="hotel_room")

    def test_clone_without_fields(self, hotel_store):
        clone = hotel_store.define_type("hotel_room_copy", inherit_from="hotel_room")
        assert sorted(clone.field_names) == sorted(name for name, _ in HOTEL_ROOM_FIELDS)

    def test_child_is_a_snapshot(self, hotel_store):
        """Test that deleting and redefining the parent leaves the child alone."""
        hotel_store.define_type("vip", [("discount_rate", "Float")], inherit_from="hotel_room")
        before = hotel_store.get_type("vip")

        hotel_store.delete_type("hotel_room")
        assert hotel_store.get_type("vip") == before

        hotel_store.define_type("hotel_room", [("only", "String")])
        assert hotel_store.get_type("vip") == before

    def test_inherited_validators_copied(self, store):
        """Test that a parent's extra validators are copied into the child."""
        store.register_validator("is_positive", lambda v: v > 0)
        store.define_type("base", [("n", "Int", ["is_positive"])])
        store.define_type("derived", [("m", "Int")], inherit_from="base")
        assert store.get_type("derived").get_field("n").validator_names == [
            "is_decimal",
            "is_positive",
        ]


class TestDeleteType:
    """Tests for delete_type."""

    def test_delete(self, hotel_store):
        hotel_store.delete_type("hotel_room")
        assert hotel_store.list_types() == []
        with pytest.raises(TypeNotFoundError):
            hotel_store.get_type("hotel_room")

    def test_delete_missing_is_ok(self, store):
        store.delete_type("never_defined")

    def test_delete_invalid_name(self, store):
        with pytest.raises(InvalidNameError):
            store.delete_type("../data")

    def test_delete_keeps_instances(self, hotel_store, caplog):
        """Test that instances survive deleting their type, with a warning."""
        hotel_store.instantiate("hotel_room", "room101")
        with caplog.at_level("WARNING", logger="typed_records"):
            hotel_store.delete_type("hotel_room")

        assert hotel_store.list_instances() == ["room101"]
        assert hotel_store.load_instance("room101")["rmnum"] == 0
        assert "1 instance(s)" in caplog.text

        with pytest.raises(TypeNotFoundError):
            hotel_store.instantiate("hotel_room", "room102")


class TestDefineTypes:
    """Tests for defining types from DSL text."""

    def test_define_types(self, store):
        store.register_validator("is_discount", lambda v: 0.0 <= v <= 1.0)
        defs = store.define_types("""
            hotel_room {
                rmnum: Int,
                telnum: String,
                bednum: Sequence,
                beds: Map,
                occupied: Bool,
                occupant: Map,
            }
            hotel_room_vip from hotel_room {
                discount_rate: Float [is_discount],
            }
        """)
        assert [d.name for d in defs] == ["hotel_room", "hotel_room_vip"]
        assert len(store.get_type("hotel_room_vip").fields) == 7

    def test_tag_aliases(self, store):
        """Test that chars and long names work as tags in DSL text."""
        store.define_types("t { a: A, b: indexed_array, c: x }")
        tags = {f.name: f.tag for f in store.get_type("t").fields}
        assert tags == {"a": TypeTag.MAP, "b": TypeTag.SEQUENCE, "c": TypeTag.HEXINT}

    def test_stops_at_first_error(self, store):
        with pytest.raises(ParentNotFoundError):
            store.define_types("a {}\nb from ghost\nc {}")
        assert store.list_types() == ["a"]
