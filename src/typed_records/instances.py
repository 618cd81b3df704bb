"""Instance store: materializes named instances from type definitions."""

from __future__ import annotations

import logging

from typed_records.codec import render_value, variable_name
from typed_records.errors import DuplicateInstanceError, InstanceNotFoundError, TypeNotFoundError
from typed_records.storage import RecordStore
from typed_records.typedefs import TypeDefinitionStore
from typed_records.types import FieldSpec, check_name, is_identifier

logger = logging.getLogger(__name__)


class InstanceStore:
    """Creates instances and answers questions about existing ones."""

    def __init__(self, records: RecordStore, types: TypeDefinitionStore) -> None:
        self.records = records
        self.types = types

    def instantiate(self, type_name: str, instance_name: str) -> None:
        """Create an instance of a type with every field at its zero value.

        Raises:
            InvalidNameError: If either name is not an identifier.
            TypeNotFoundError: If the type is not defined.
            DuplicateInstanceError: If the instance already exists.
        """
        check_name(type_name, "type")
        check_name(instance_name, "instance")
        if not self.records.type_exists(type_name):
            raise TypeNotFoundError(f"Type '{type_name}' not found", name=type_name)
        if self.records.instance_exists(instance_name):
            raise DuplicateInstanceError(
                f"Instance '{instance_name}' already exists", name=instance_name
            )

        stored = self.records.read_type(type_name)
        zeros = {
            f.name: render_value(f.tag, variable_name(instance_name, f.name), f.tag.zero_value())
            for f in stored.fields
        }
        self.records.create_instance(instance_name, type_name, zeros)
        logger.debug("Instantiated %s as %s", type_name, instance_name)

    def exists(self, name: str) -> bool:
        return is_identifier(name) and self.records.instance_exists(name)

    def list_instances(self) -> list[str]:
        """List all instance names."""
        return self.records.list_instances()

    def type_of(self, name: str) -> str:
        """Return the name of the type an instance was created from."""
        check_name(name, "instance")
        if not self.records.instance_exists(name):
            raise InstanceNotFoundError(f"Instance '{name}' not found", name=name)
        return self.records.read_instance(name).type_name

    def fields_of(self, name: str) -> list[FieldSpec]:
        """Return the resolved field specs of an instance.

        Raises:
            InstanceNotFoundError: If the instance does not exist.
            UnknownValidatorError: If a stored validator is not registered.
        """
        check_name(name, "instance")
        if not self.records.instance_exists(name):
            raise InstanceNotFoundError(f"Instance '{name}' not found", name=name)
        stored = self.records.read_instance(name)
        return [self.types.validators.resolve_stored(f) for f in stored.fields]
