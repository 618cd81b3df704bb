"""Typed handle for a stored instance."""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any

from typed_records.errors import FieldNotFoundError
from typed_records.types import FieldSpec

if TYPE_CHECKING:
    from typed_records.schema import StructStore


class Instance:
    """Working copy of one instance's field values.

    get and set act on the working copy only. store and store_all write it
    through the serialization engine; load replaces it with the persisted
    values, discarding unsaved edits.
    """

    def __init__(
        self,
        store: StructStore,
        name: str,
        type_name: str,
        fields: list[FieldSpec],
        values: dict[str, Any],
    ) -> None:
        self.store = store
        self.name = name
        self.type_name = type_name
        self.fields = {f.name: f for f in fields}
        self._values = values

    def _field(self, field_name: str) -> FieldSpec:
        spec = self.fields.get(field_name)
        if spec is None:
            raise FieldNotFoundError(
                f"Field '{field_name}' not found in instance '{self.name}'", name=field_name
            )
        return spec

    def get(self, field_name: str) -> Any:
        """Return the working value of a field."""
        self._field(field_name)
        return self._values[field_name]

    def set(self, field_name: str, value: Any) -> None:
        """Replace the working value of a field. Validation happens on store."""
        self._field(field_name)
        self._values[field_name] = value

    def values(self) -> dict[str, Any]:
        """Return a deep copy of all working values."""
        return copy.deepcopy(self._values)

    def store_field(self, field_name: str) -> None:
        """Validate and persist the working value of one field."""
        spec = self._field(field_name)
        self.store.store_field(self.name, field_name, spec.tag, self._values[field_name])

    def store_all(self) -> None:
        """Validate and persist every working value, stopping at the first failure."""
        self.store.store_all(self.name, self._values)

    def load(self) -> None:
        """Replace the working values with the persisted ones."""
        self._values = self.store.load_instance(self.name)

    def __getitem__(self, field_name: str) -> Any:
        return self.get(field_name)

    def __setitem__(self, field_name: str, value: Any) -> None:
        self.set(field_name, value)

    def __repr__(self) -> str:
        return f"Instance({self.name!r}, type={self.type_name!r})"
