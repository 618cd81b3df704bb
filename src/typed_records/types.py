"""Type definitions for the typed_records library."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from typed_records.errors import InvalidNameError, UnknownTypeTagError

# Names of types, instances, fields and validators
IDENTIFIER_RE = re.compile(r"[A-Za-z0-9_]+")


def is_identifier(name: Any) -> bool:
    """Return whether name is a non-empty run of [A-Za-z0-9_]."""
    return isinstance(name, str) and IDENTIFIER_RE.fullmatch(name) is not None


def check_name(name: Any, what: str) -> str:
    """Raise InvalidNameError unless name is an identifier."""
    if not is_identifier(name):
        raise InvalidNameError(f"Invalid {what} name '{name}'", name=str(name))
    return name


class TypeTag(Enum):
    """Field kinds supported by record types."""

    MAP = "Map"
    SEQUENCE = "Sequence"
    BOOL = "Bool"
    FLOAT = "Float"
    HEXINT = "HexInt"
    INT = "Int"
    STRING = "String"

    @property
    def char(self) -> str:
        """Return the one-character code written to <field>_type files."""
        return _TAG_CHARS[self]

    @property
    def long_name(self) -> str:
        """Return the long name written to <field>_type files."""
        return _TAG_LONG_NAMES[self]

    @property
    def declare_flag(self) -> str:
        """Return the bash declare flag used in value files."""
        return _TAG_DECLARE_FLAGS[self]

    @property
    def default_validator(self) -> str:
        """Return the name of the built-in validator for this tag."""
        return _TAG_VALIDATORS[self]

    def zero_value(self) -> Any:
        """Return a fresh zero value for this tag."""
        if self is TypeTag.MAP:
            return {}
        if self is TypeTag.SEQUENCE:
            return []
        return _TAG_ZEROS[self]

    @classmethod
    def parse(cls, text: TypeTag | str) -> TypeTag:
        """Resolve a tag from its value, one-character code or long name.

        Raises:
            UnknownTypeTagError: If text names no tag.
        """
        if isinstance(text, TypeTag):
            return text
        tag = _TAG_LOOKUP.get(text) if isinstance(text, str) else None
        if tag is None:
            raise UnknownTypeTagError(f"Unknown type tag '{text}'", name=str(text))
        return tag


_TAG_CHARS: dict[TypeTag, str] = {
    TypeTag.MAP: "A",
    TypeTag.SEQUENCE: "a",
    TypeTag.BOOL: "b",
    TypeTag.FLOAT: "f",
    TypeTag.HEXINT: "x",
    TypeTag.INT: "i",
    TypeTag.STRING: "s",
}

_TAG_LONG_NAMES: dict[TypeTag, str] = {
    TypeTag.MAP: "associative_array",
    TypeTag.SEQUENCE: "indexed_array",
    TypeTag.BOOL: "boolean",
    TypeTag.FLOAT: "float",
    TypeTag.HEXINT: "hex_integer",
    TypeTag.INT: "integer",
    TypeTag.STRING: "string",
}

_TAG_DECLARE_FLAGS: dict[TypeTag, str] = {
    TypeTag.MAP: "-A",
    TypeTag.SEQUENCE: "-a",
    TypeTag.BOOL: "--",
    TypeTag.FLOAT: "--",
    TypeTag.HEXINT: "-i",
    TypeTag.INT: "-i",
    TypeTag.STRING: "--",
}

_TAG_VALIDATORS: dict[TypeTag, str] = {
    TypeTag.MAP: "is_hash",
    TypeTag.SEQUENCE: "is_array",
    TypeTag.BOOL: "is_bool",
    TypeTag.FLOAT: "is_float",
    TypeTag.HEXINT: "is_hex",
    TypeTag.INT: "is_decimal",
    TypeTag.STRING: "is_string",
}

_TAG_ZEROS: dict[TypeTag, Any] = {
    TypeTag.BOOL: False,
    TypeTag.FLOAT: 0.0,
    TypeTag.HEXINT: 0,
    TypeTag.INT: 0,
    TypeTag.STRING: "",
}

_TAG_LOOKUP: dict[str, TypeTag] = {}
for _tag in TypeTag:
    _TAG_LOOKUP[_tag.value] = _tag
    _TAG_LOOKUP[_TAG_CHARS[_tag]] = _tag
    _TAG_LOOKUP[_TAG_LONG_NAMES[_tag]] = _tag
del _tag


@dataclass(frozen=True)
class Validator:
    """A named predicate that accepts or rejects a field value."""

    name: str
    predicate: Callable[[Any], Any] = field(compare=False)

    def __call__(self, value: Any) -> bool:
        return bool(self.predicate(value))


@dataclass(frozen=True)
class FieldDecl:
    """A field as declared by a caller, before validators are resolved.

    ``validators`` lists the extra validator names only; the tag's built-in
    validator is always prepended when the field is resolved.
    """

    name: str
    tag: TypeTag | str
    validators: tuple[str, ...] = ()

    @classmethod
    def coerce(cls, value: FieldDecl | tuple[Any, ...]) -> FieldDecl:
        """Accept a FieldDecl or a (name, tag[, validators]) tuple."""
        if isinstance(value, FieldDecl):
            return value
        name, tag, *rest = value
        validators: tuple[str, ...] = ()
        if rest:
            validators = (rest[0],) if isinstance(rest[0], str) else tuple(rest[0])
        return cls(name=name, tag=tag, validators=validators)


@dataclass(frozen=True)
class FieldSpec:
    """A resolved field: name, tag and validator chain (built-in first)."""

    name: str
    tag: TypeTag
    validators: tuple[Validator, ...]

    @property
    def validator_names(self) -> list[str]:
        return [v.name for v in self.validators]

    def to_stored(self) -> StoredField:
        return StoredField(name=self.name, tag=self.tag, validators=tuple(self.validator_names))


@dataclass(frozen=True)
class StoredField:
    """A field layout as persisted: validators are kept by name."""

    name: str
    tag: TypeTag
    validators: tuple[str, ...]


@dataclass
class StoredType:
    """A type (or instance) layout as persisted.

    For instances, ``name`` is the instance name and ``type_name`` the type
    it was created from; for types both are the type name.
    """

    name: str
    type_name: str
    fields: list[StoredField] = field(default_factory=list)
    parent: str | None = None

    def get_field(self, name: str) -> StoredField | None:
        """Get a field by name."""
        for f in self.fields:
            if f.name == name:
                return f
        return None


@dataclass
class TypeDefinition:
    """A named record type: a flat list of resolved fields.

    A definition created with a parent holds a copy of the parent's fields
    taken at definition time; later changes to the parent are not seen.
    """

    name: str
    fields: list[FieldSpec] = field(default_factory=list)
    parent: str | None = None

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def get_field(self, name: str) -> FieldSpec | None:
        """Get a field by name."""
        for f in self.fields:
            if f.name == name:
                return f
        return None
