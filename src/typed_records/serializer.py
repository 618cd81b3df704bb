"""Serialization engine: validates working values and persists them."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from typed_records.codec import render_value, variable_name
from typed_records.errors import (
    FieldNotFoundError,
    InstanceNotFoundError,
    TypeMismatchError,
    ValidationFailedError,
)
from typed_records.loader import read_field
from typed_records.storage import RecordStore
from typed_records.types import StoredField, TypeTag, check_name
from typed_records.validators import ValidatorRegistry

logger = logging.getLogger(__name__)


class SerializationEngine:
    """Writes field values of instances through their validator chains."""

    def __init__(self, records: RecordStore, validators: ValidatorRegistry) -> None:
        self.records = records
        self.validators = validators

    def _stored_field(self, instance_name: str, field_name: str) -> StoredField:
        if not self.records.instance_exists(instance_name):
            raise InstanceNotFoundError(f"Instance '{instance_name}' not found", name=instance_name)
        stored = self.records.read_instance(instance_name).get_field(field_name)
        if stored is None:
            raise FieldNotFoundError(
                f"Field '{field_name}' not found in instance '{instance_name}'", name=field_name
            )
        return stored

    def _write(self, instance_name: str, stored: StoredField, value: Any) -> None:
        """Run the validator chain for a field, then render and write the value."""
        spec = self.validators.resolve_stored(stored)
        for validator in spec.validators:
            if not validator(value):
                logger.warning(
                    "Validator %s rejected value for %s.%s",
                    validator.name,
                    instance_name,
                    stored.name,
                )
                raise ValidationFailedError(
                    f"Validator '{validator.name}' rejected the value for field "
                    f"'{stored.name}' of instance '{instance_name}'",
                    validator=validator.name,
                    field=stored.name,
                )

        text = render_value(stored.tag, variable_name(instance_name, stored.name), value)
        self.records.write_value(instance_name, stored.name, text)
        logger.debug("Stored %s.%s", instance_name, stored.name)

    def store_field(
        self, instance_name: str, field_name: str, expected_tag: TypeTag | str, value: Any
    ) -> None:
        """Validate and persist one field of an instance.

        Nothing is written unless every check passes.

        Args:
            instance_name: Name of the instance.
            field_name: Name of the field.
            expected_tag: Tag the caller believes the field has.
            value: Working value to store.

        Raises:
            InvalidNameError: If a name is not an identifier.
            InstanceNotFoundError: If the instance does not exist.
            FieldNotFoundError: If the instance has no such field.
            UnknownTypeTagError: If expected_tag is not a recognised tag.
            TypeMismatchError: If expected_tag differs from the field's tag.
            ValidationFailedError: If a validator rejects the value.
            StorageIOError: If the value file cannot be written.
        """
        check_name(instance_name, "instance")
        check_name(field_name, "field")
        stored = self._stored_field(instance_name, field_name)

        tag = TypeTag.parse(expected_tag)
        if tag is not stored.tag:
            raise TypeMismatchError(
                f"Field '{field_name}' of instance '{instance_name}' is "
                f"{stored.tag.value}, not {tag.value}",
                name=field_name,
            )

        self._write(instance_name, stored, value)

    def store_all(self, instance_name: str, values: Mapping[str, Any]) -> None:
        """Validate and persist every field of an instance, in field-name order.

        Fields missing from values are re-written from their persisted value.
        Stops at the first failing field; fields already written stay written.

        Raises:
            FieldNotFoundError: If values names a field the instance lacks.
            Any error store_field raises.
        """
        check_name(instance_name, "instance")
        if not self.records.instance_exists(instance_name):
            raise InstanceNotFoundError(f"Instance '{instance_name}' not found", name=instance_name)
        layout = self.records.read_instance(instance_name)

        known = {f.name for f in layout.fields}
        for name in values:
            if name not in known:
                raise FieldNotFoundError(
                    f"Field '{name}' not found in instance '{instance_name}'", name=name
                )

        for stored in layout.fields:
            if stored.name in values:
                value = values[stored.name]
            else:
                value = read_field(self.records, instance_name, stored)
            self._write(instance_name, stored, value)
