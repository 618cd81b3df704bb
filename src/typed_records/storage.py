"""Record storage for typed records."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from pathlib import Path

from typed_records.errors import (
    FieldNotFoundError,
    InstanceNotFoundError,
    StorageIOError,
    TypeNotFoundError,
    UnknownTypeTagError,
)
from typed_records.types import StoredField, StoredType, TypeTag

logger = logging.getLogger(__name__)


class RecordStore(ABC):
    """Persistence boundary for type layouts and instance values.

    The stores above this interface check names and existence before calling
    it; implementations only move layouts and rendered value text in and out
    of durable storage.
    """

    @abstractmethod
    def type_exists(self, name: str) -> bool: ...

    @abstractmethod
    def list_types(self) -> list[str]: ...

    @abstractmethod
    def write_type(self, name: str, fields: Sequence[StoredField], parent: str | None = None) -> None:
        """Persist a new type layout."""

    @abstractmethod
    def read_type(self, name: str) -> StoredType:
        """Read a type layout. Raises TypeNotFoundError if missing."""

    @abstractmethod
    def remove_type(self, name: str) -> bool:
        """Remove a type layout, returning whether it existed."""

    @abstractmethod
    def instance_exists(self, name: str) -> bool: ...

    @abstractmethod
    def list_instances(self) -> list[str]: ...

    @abstractmethod
    def create_instance(self, name: str, type_name: str, values: Mapping[str, str]) -> None:
        """Copy a type's layout under an instance name and write initial value text."""

    @abstractmethod
    def read_instance(self, name: str) -> StoredType:
        """Read an instance's field layout. Raises InstanceNotFoundError if missing."""

    @abstractmethod
    def read_value(self, instance: str, field: str) -> str:
        """Read the rendered value text of one field."""

    @abstractmethod
    def write_value(self, instance: str, field: str, text: str) -> None:
        """Replace the rendered value text of one field."""


@contextmanager
def _io_errors(action: str) -> Iterator[None]:
    """Re-raise filesystem and text encoding errors as StorageIOError."""
    try:
        yield
    except (OSError, UnicodeError) as e:
        if isinstance(e, StorageIOError):
            raise
        raise StorageIOError(f"Failed to {action}: {e}") from e


class DirectoryRecordStore(RecordStore):
    """Stores each type and instance as a directory with one subdirectory per field.

    Layout::

        <type_dir>/<type>/.struct_type
        <type_dir>/<type>/.struct_parent          (derived types only)
        <type_dir>/<type>/<field>/<field>_type
        <type_dir>/<type>/<field>/<field>_validator
        <data_dir>/<instance>/...                 (copy of the type tree)
        <data_dir>/<instance>/<field>/<field>_value
    """

    TYPE_MARKER = ".struct_type"
    PARENT_MARKER = ".struct_parent"

    def __init__(self, type_dir: Path, data_dir: Path) -> None:
        """Initialize the record store.

        Args:
            type_dir: Directory holding one directory per type.
            data_dir: Directory holding one directory per instance.
        """
        self.type_dir = Path(type_dir)
        self.data_dir = Path(data_dir)

        with _io_errors("create store directories"):
            self.type_dir.mkdir(parents=True, exist_ok=True)
            self.data_dir.mkdir(parents=True, exist_ok=True)

    # -- helpers ---------------------------------------------------------

    @staticmethod
    def _list_dirs(root: Path) -> list[str]:
        """List visible subdirectory names, sorted."""
        with _io_errors(f"list {root}"):
            return sorted(
                p.name for p in root.iterdir() if p.is_dir() and not p.name.startswith(".")
            )

    @staticmethod
    def _write_text(path: Path, text: str) -> None:
        """Write text via a temporary sibling so readers never see a partial file."""
        tmp = path.with_name(f".{path.name}.tmp")
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp, path)
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise

    def _read_layout(self, root: Path, name: str) -> StoredType:
        """Read a type or instance layout rooted at root."""
        with _io_errors(f"read layout of '{name}'"):
            type_name = (root / self.TYPE_MARKER).read_text(encoding="utf-8").strip()
            parent_path = root / self.PARENT_MARKER
            parent = parent_path.read_text(encoding="utf-8").strip() if parent_path.exists() else None
            fields = [self._read_field(root / f, f) for f in self._list_dirs(root)]
        return StoredType(name=name, type_name=type_name, fields=fields, parent=parent)

    @staticmethod
    def _read_field(field_dir: Path, field: str) -> StoredField:
        type_line = (field_dir / f"{field}_type").read_text(encoding="utf-8").strip()
        char, _, long_name = type_line.partition(" ")
        try:
            tag = TypeTag.parse(char)
        except UnknownTypeTagError as e:
            raise StorageIOError(f"Bad type line for field '{field}': {type_line!r}", field) from e
        if tag.long_name != long_name:
            raise StorageIOError(f"Bad type line for field '{field}': {type_line!r}", field)
        validator_text = (field_dir / f"{field}_validator").read_text(encoding="utf-8")
        validators = tuple(line.strip() for line in validator_text.splitlines() if line.strip())
        return StoredField(name=field, tag=tag, validators=validators)

    # -- types -----------------------------------------------------------

    def type_exists(self, name: str) -> bool:
        return (self.type_dir / name / self.TYPE_MARKER).is_file()

    def list_types(self) -> list[str]:
        return self._list_dirs(self.type_dir)

    def write_type(self, name: str, fields: Sequence[StoredField], parent: str | None = None) -> None:
        with _io_errors(f"write type '{name}'"):
            staging = Path(tempfile.mkdtemp(prefix=f".{name}.", dir=self.type_dir))
            try:
                (staging / self.TYPE_MARKER).write_text(f"{name}\n", encoding="utf-8")
                if parent is not None:
                    (staging / self.PARENT_MARKER).write_text(f"{parent}\n", encoding="utf-8")
                for f in fields:
                    field_dir = staging / f.name
                    field_dir.mkdir()
                    (field_dir / f"{f.name}_type").write_text(
                        f"{f.tag.char} {f.tag.long_name}\n", encoding="utf-8"
                    )
                    (field_dir / f"{f.name}_validator").write_text(
                        "".join(v + "\n" for v in f.validators), encoding="utf-8"
                    )
                os.rename(staging, self.type_dir / name)
            except BaseException:
                shutil.rmtree(staging, ignore_errors=True)
                raise
        logger.debug("Wrote type layout %s (%d fields)", name, len(fields))

    def read_type(self, name: str) -> StoredType:
        if not self.type_exists(name):
            raise TypeNotFoundError(f"Type '{name}' not found", name=name)
        return self._read_layout(self.type_dir / name, name)

    def remove_type(self, name: str) -> bool:
        path = self.type_dir / name
        if not path.exists():
            return False
        with _io_errors(f"remove type '{name}'"):
            shutil.rmtree(path)
        return True

    # -- instances -------------------------------------------------------

    def instance_exists(self, name: str) -> bool:
        return (self.data_dir / name / self.TYPE_MARKER).is_file()

    def list_instances(self) -> list[str]:
        return self._list_dirs(self.data_dir)

    def create_instance(self, name: str, type_name: str, values: Mapping[str, str]) -> None:
        with _io_errors(f"create instance '{name}'"):
            staging = Path(tempfile.mkdtemp(prefix=f".{name}.", dir=self.data_dir))
            try:
                # copytree needs a missing destination
                tree = staging / "tree"
                shutil.copytree(self.type_dir / type_name, tree)
                for field, text in values.items():
                    self._write_text(tree / field / f"{field}_value", text)
                os.rename(tree, self.data_dir / name)
            finally:
                shutil.rmtree(staging, ignore_errors=True)
        logger.debug("Created instance layout %s from %s", name, type_name)

    def read_instance(self, name: str) -> StoredType:
        if not self.instance_exists(name):
            raise InstanceNotFoundError(f"Instance '{name}' not found", name=name)
        return self._read_layout(self.data_dir / name, name)

    def _value_path(self, instance: str, field: str) -> Path:
        if not self.instance_exists(instance):
            raise InstanceNotFoundError(f"Instance '{instance}' not found", name=instance)
        field_dir = self.data_dir / instance / field
        if not field_dir.is_dir():
            raise FieldNotFoundError(
                f"Field '{field}' not found in instance '{instance}'", name=field
            )
        return field_dir / f"{field}_value"

    def read_value(self, instance: str, field: str) -> str:
        path = self._value_path(instance, field)
        with _io_errors(f"read value of '{instance}.{field}'"):
            return path.read_text(encoding="utf-8")

    def write_value(self, instance: str, field: str, text: str) -> None:
        path = self._value_path(instance, field)
        with _io_errors(f"write value of '{instance}.{field}'"):
            self._write_text(path, text)
