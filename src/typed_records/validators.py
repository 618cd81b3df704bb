"""Validator registry and the built-in field predicates."""

from __future__ import annotations

import math
from typing import Any, Callable

from typed_records.errors import InvalidNameError, UnknownValidatorError
from typed_records.types import (
    FieldDecl,
    FieldSpec,
    StoredField,
    TypeTag,
    Validator,
    is_identifier,
)


def _is_text(value: Any) -> bool:
    """Accept strings that encode as UTF-8 (no lone surrogates)."""
    if not isinstance(value, str):
        return False
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def is_word(value: Any) -> bool:
    """Accept identifiers: one or more of [A-Za-z0-9_]."""
    return is_identifier(value)


def is_hash(value: Any) -> bool:
    """Accept a dict of non-empty string keys to string values."""
    if not isinstance(value, dict):
        return False
    return all(
        _is_text(k) and k != "" and _is_text(v)
        for k, v in value.items()
    )


def is_array(value: Any) -> bool:
    """Accept a list of strings."""
    return isinstance(value, list) and all(_is_text(v) for v in value)


def is_bool(value: Any) -> bool:
    return isinstance(value, bool)


def is_float(value: Any) -> bool:
    """Accept finite floats."""
    return isinstance(value, float) and math.isfinite(value)


def is_hex(value: Any) -> bool:
    """Accept non-negative ints (stored as hex literals)."""
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def is_decimal(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_string(value: Any) -> bool:
    return _is_text(value)


BUILTIN_VALIDATORS: dict[str, Callable[[Any], bool]] = {
    "is_word": is_word,
    "is_hash": is_hash,
    "is_array": is_array,
    "is_bool": is_bool,
    "is_float": is_float,
    "is_hex": is_hex,
    "is_decimal": is_decimal,
    "is_string": is_string,
}


class ValidatorRegistry:
    """Registry of named validator predicates.

    The built-in predicates are registered on construction. Field validator
    chains are resolved against the registry once, when a FieldSpec is
    built, so unknown names fail at definition time.
    """

    def __init__(self) -> None:
        self._validators: dict[str, Validator] = {}
        self._register_builtins()

    def _register_builtins(self) -> None:
        """Register all built-in predicates."""
        for name, predicate in BUILTIN_VALIDATORS.items():
            self._validators[name] = Validator(name=name, predicate=predicate)

    def register(self, name: str, predicate: Callable[[Any], Any]) -> Validator:
        """Register (or replace) a named predicate.

        Raises:
            InvalidNameError: If name is not an identifier.
            TypeError: If predicate is not callable.
        """
        if not is_identifier(name):
            raise InvalidNameError(f"Invalid validator name '{name}'", name=str(name))
        if not callable(predicate):
            raise TypeError(f"Validator '{name}' is not callable")
        validator = Validator(name=name, predicate=predicate)
        self._validators[name] = validator
        return validator

    def get(self, name: str) -> Validator | None:
        """Get a validator by name."""
        return self._validators.get(name)

    def resolve(self, name: str) -> Validator:
        """Get a validator by name, raising if it is not registered."""
        validator = self._validators.get(name)
        if validator is None:
            raise UnknownValidatorError(f"Validator '{name}' is not registered", name=name)
        return validator

    def validators_for(self, tag: TypeTag) -> list[Validator]:
        """Return the default validator chain for a tag."""
        return [self.resolve(tag.default_validator)]

    def field_spec(self, decl: FieldDecl | tuple[Any, ...]) -> FieldSpec:
        """Resolve a declared field into a FieldSpec.

        Raises:
            InvalidNameError: If the field name is not an identifier.
            UnknownTypeTagError: If the tag is not recognised.
            UnknownValidatorError: If an extra validator is not registered.
        """
        decl = FieldDecl.coerce(decl)
        if not is_identifier(decl.name):
            raise InvalidNameError(f"Invalid field name '{decl.name}'", name=str(decl.name))
        tag = TypeTag.parse(decl.tag)
        chain = self.validators_for(tag)
        chain.extend(self.resolve(name) for name in decl.validators)
        return FieldSpec(name=decl.name, tag=tag, validators=tuple(chain))

    def resolve_stored(self, stored: StoredField) -> FieldSpec:
        """Resolve a persisted field layout into a FieldSpec."""
        chain = tuple(self.resolve(name) for name in stored.validators)
        return FieldSpec(name=stored.name, tag=stored.tag, validators=chain)

    def list_validators(self) -> list[str]:
        """List all registered validator names."""
        return list(self._validators.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._validators
