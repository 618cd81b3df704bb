"""Type definition store: named record schemas with snapshot inheritance."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from typed_records.errors import (
    DuplicateFieldError,
    DuplicateTypeError,
    ParentNotFoundError,
    TypeNotFoundError,
)
from typed_records.parsing import TypeParser
from typed_records.storage import RecordStore
from typed_records.types import FieldDecl, FieldSpec, TypeDefinition, check_name, is_identifier
from typed_records.validators import ValidatorRegistry

logger = logging.getLogger(__name__)


class TypeDefinitionStore:
    """Defines, reads and deletes persisted record types."""

    def __init__(self, records: RecordStore, validators: ValidatorRegistry) -> None:
        self.records = records
        self.validators = validators

    def define_type(
        self,
        name: str,
        fields: Iterable[FieldDecl | tuple[Any, ...]] = (),
        inherit_from: str | None = None,
    ) -> TypeDefinition:
        """Define and persist a new type.

        When inherit_from is given, the new type starts with a copy of the
        parent's fields and the supplied fields are appended. The copy is
        taken now; the two types are independent afterwards.

        Args:
            name: Name of the new type.
            fields: Field declarations (FieldDecl or (name, tag[, validators])).
            inherit_from: Optional name of an existing type to copy fields from.

        Returns:
            The new TypeDefinition.

        Raises:
            InvalidNameError: If a type or field name is not an identifier.
            UnknownTypeTagError: If a field tag is not recognised.
            UnknownValidatorError: If a field validator is not registered.
            ParentNotFoundError: If inherit_from does not exist.
            DuplicateTypeError: If name already exists.
            DuplicateFieldError: If a field name repeats, here or in the parent.
        """
        check_name(name, "type")
        if inherit_from is not None:
            check_name(inherit_from, "parent type")
        specs = [self.validators.field_spec(decl) for decl in fields]

        merged: list[FieldSpec] = []
        if inherit_from is not None:
            if not self.records.type_exists(inherit_from):
                raise ParentNotFoundError(
                    f"Parent type '{inherit_from}' not found", name=inherit_from
                )
            merged.extend(self.get_type(inherit_from).fields)

        if self.records.type_exists(name):
            raise DuplicateTypeError(f"Type '{name}' is already defined", name=name)

        seen = {f.name for f in merged}
        for spec in specs:
            if spec.name in seen:
                raise DuplicateFieldError(
                    f"Field '{spec.name}' is defined more than once in type '{name}'",
                    name=spec.name,
                )
            seen.add(spec.name)
            merged.append(spec)

        self.records.write_type(name, [f.to_stored() for f in merged], parent=inherit_from)
        logger.debug(
            "Defined type %s with %d fields%s",
            name,
            len(merged),
            f" (from {inherit_from})" if inherit_from else "",
        )
        return TypeDefinition(name=name, fields=merged, parent=inherit_from)

    def define_types(self, text: str) -> list[TypeDefinition]:
        """Parse type DSL text and define each declared type in order."""
        parser = TypeParser()
        return [
            self.define_type(decl.name, decl.fields, inherit_from=decl.parent)
            for decl in parser.parse(text)
        ]

    def delete_type(self, name: str) -> None:
        """Delete a type definition.

        Deleting a missing type succeeds. Instances created from the type are
        left in place.
        """
        check_name(name, "type")
        if not self.records.remove_type(name):
            return
        orphans = [
            inst
            for inst in self.records.list_instances()
            if self.records.read_instance(inst).type_name == name
        ]
        if orphans:
            logger.warning(
                "Deleted type %s; %d instance(s) created from it remain", name, len(orphans)
            )
        else:
            logger.debug("Deleted type %s", name)

    def get_type(self, name: str) -> TypeDefinition:
        """Get a type definition by name.

        Raises:
            TypeNotFoundError: If the type is not defined.
            UnknownValidatorError: If a stored validator is no longer registered.
        """
        check_name(name, "type")
        if not self.records.type_exists(name):
            raise TypeNotFoundError(f"Type '{name}' not found", name=name)
        stored = self.records.read_type(name)
        fields = [self.validators.resolve_stored(f) for f in stored.fields]
        return TypeDefinition(name=name, fields=fields, parent=stored.parent)

    def exists(self, name: str) -> bool:
        return is_identifier(name) and self.records.type_exists(name)

    def list_types(self) -> list[str]:
        """List all defined type names."""
        return self.records.list_types()
