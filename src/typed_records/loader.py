"""Record loader: reads persisted field values back into working values."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from typed_records.codec import parse_value, variable_name
from typed_records.errors import InstanceNotFoundError, StorageIOError
from typed_records.storage import RecordStore
from typed_records.types import StoredField, check_name
from typed_records.validators import ValidatorRegistry

logger = logging.getLogger(__name__)


def read_field(records: RecordStore, instance_name: str, stored: StoredField) -> Any:
    """Read and decode the persisted value of one field.

    Raises:
        StorageIOError: If the value file is missing or malformed.
    """
    text = records.read_value(instance_name, stored.name)
    try:
        return parse_value(stored.tag, variable_name(instance_name, stored.name), text)
    except ValueError as e:
        raise StorageIOError(
            f"Malformed value file for '{instance_name}.{stored.name}': {e}", stored.name
        ) from e


@dataclass(frozen=True)
class VerificationIssue:
    """A persisted value that a field validator rejects."""

    field: str
    validator: str


class RecordLoader:
    """Loads instances from storage.

    Values are trusted once persisted: loading does not run validators.
    verify_instance runs them on demand for values edited outside the
    serialization engine.
    """

    def __init__(self, records: RecordStore, validators: ValidatorRegistry) -> None:
        self.records = records
        self.validators = validators

    def load_instance(self, instance_name: str) -> dict[str, Any]:
        """Load every field of an instance.

        Returns:
            Mapping of field name to working value.

        Raises:
            InvalidNameError: If the name is not an identifier.
            InstanceNotFoundError: If the instance does not exist.
            StorageIOError: If a value file is missing or malformed.
        """
        check_name(instance_name, "instance")
        if not self.records.instance_exists(instance_name):
            raise InstanceNotFoundError(f"Instance '{instance_name}' not found", name=instance_name)
        layout = self.records.read_instance(instance_name)
        values = {f.name: read_field(self.records, instance_name, f) for f in layout.fields}
        logger.debug("Loaded %s (%d fields)", instance_name, len(values))
        return values

    def verify_instance(self, instance_name: str) -> list[VerificationIssue]:
        """Run every field's validators over the persisted values.

        Returns:
            One issue per rejecting validator; empty when all values pass.
        """
        check_name(instance_name, "instance")
        if not self.records.instance_exists(instance_name):
            raise InstanceNotFoundError(f"Instance '{instance_name}' not found", name=instance_name)
        layout = self.records.read_instance(instance_name)

        issues = []
        for stored in layout.fields:
            value = read_field(self.records, instance_name, stored)
            spec = self.validators.resolve_stored(stored)
            issues.extend(
                VerificationIssue(field=stored.name, validator=v.name)
                for v in spec.validators
                if not v(value)
            )
        for issue in issues:
            logger.warning(
                "Validator %s rejects stored value of %s.%s",
                issue.validator,
                instance_name,
                issue.field,
            )
        return issues
