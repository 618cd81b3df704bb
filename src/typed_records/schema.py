"""StructStore: record types, instances and their values under one session."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Callable

from typed_records.config import StructConfig
from typed_records.instance import Instance
from typed_records.instances import InstanceStore
from typed_records.loader import RecordLoader, VerificationIssue
from typed_records.log import configure_logging
from typed_records.serializer import SerializationEngine
from typed_records.session import Session
from typed_records.storage import DirectoryRecordStore, RecordStore
from typed_records.typedefs import TypeDefinitionStore
from typed_records.types import FieldDecl, TypeDefinition, TypeTag, Validator
from typed_records.validators import ValidatorRegistry


class StructStore:
    """Record types and instances stored under a session directory."""

    def __init__(
        self,
        base_dir: Path | str | None = None,
        registry: ValidatorRegistry | None = None,
        config: StructConfig | None = None,
        records: RecordStore | None = None,
    ) -> None:
        """Initialize a store.

        Args:
            base_dir: Session directory. Defaults to config.struct_dir, and
                to a fresh temporary directory when that is unset too.
            registry: Validator registry; a new one is created if omitted.
            config: Settings; defaults to StructConfig().
            records: Storage backend; defaults to a DirectoryRecordStore
                under the session directory.
        """
        self.config = config or StructConfig()
        if self.config.verbose or self.config.debug:
            configure_logging(verbose=self.config.verbose, debug=self.config.debug)
        self.session = Session(
            base_dir if base_dir is not None else self.config.struct_dir,
            keep=self.config.keep,
        )
        if records is None:
            records = DirectoryRecordStore(
                self.session.path / self.config.typedir,
                self.session.path / self.config.datadir,
            )
        self.records = records
        self.validators = registry or ValidatorRegistry()

        self.types = TypeDefinitionStore(self.records, self.validators)
        self.instances = InstanceStore(self.records, self.types)
        self.serializer = SerializationEngine(self.records, self.validators)
        self.loader = RecordLoader(self.records, self.validators)

    @classmethod
    def parse(
        cls, type_definitions: str, base_dir: Path | str | None = None, **kwargs: Any
    ) -> StructStore:
        """Create a store and define the types in a DSL string.

        Args:
            type_definitions: DSL string defining types.
            base_dir: Session directory (see __init__).
            **kwargs: Passed to __init__.

        Returns:
            A new StructStore.
        """
        store = cls(base_dir, **kwargs)
        try:
            store.define_types(type_definitions)
        except BaseException:
            store.close()
            raise
        return store

    @property
    def path(self) -> Path:
        return self.session.path

    # -- validators ------------------------------------------------------

    def register_validator(self, name: str, predicate: Callable[[Any], Any]) -> Validator:
        """Register a named predicate for use in field definitions."""
        return self.validators.register(name, predicate)

    # -- types -----------------------------------------------------------

    def define_type(
        self,
        name: str,
        fields: Iterable[FieldDecl | tuple[Any, ...]] = (),
        inherit_from: str | None = None,
    ) -> TypeDefinition:
        return self.types.define_type(name, fields, inherit_from=inherit_from)

    def define_types(self, text: str) -> list[TypeDefinition]:
        return self.types.define_types(text)

    def delete_type(self, name: str) -> None:
        self.types.delete_type(name)

    def get_type(self, name: str) -> TypeDefinition:
        return self.types.get_type(name)

    def list_types(self) -> list[str]:
        return self.types.list_types()

    # -- instances -------------------------------------------------------

    def instantiate(self, type_name: str, instance_name: str) -> Instance:
        """Create an instance at its zero values and return a handle to it."""
        self.instances.instantiate(type_name, instance_name)
        return self.instance(instance_name)

    def instance(self, name: str) -> Instance:
        """Return a handle to an existing instance, loaded from storage."""
        fields = self.instances.fields_of(name)
        return Instance(
            self,
            name=name,
            type_name=self.instances.type_of(name),
            fields=fields,
            values=self.load_instance(name),
        )

    def list_instances(self) -> list[str]:
        return self.instances.list_instances()

    # -- values ----------------------------------------------------------

    def store_field(
        self, instance_name: str, field_name: str, expected_tag: TypeTag | str, value: Any
    ) -> None:
        self.serializer.store_field(instance_name, field_name, expected_tag, value)

    def store_all(self, instance_name: str, values: Mapping[str, Any]) -> None:
        self.serializer.store_all(instance_name, values)

    def load_instance(self, instance_name: str) -> dict[str, Any]:
        return self.loader.load_instance(instance_name)

    def verify_instance(self, instance_name: str) -> list[VerificationIssue]:
        return self.loader.verify_instance(instance_name)

    # -- lifecycle -------------------------------------------------------

    def close(self) -> None:
        """Close the session (removing a temporary session directory)."""
        self.session.close()

    def __enter__(self) -> StructStore:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
