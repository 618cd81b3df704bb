"""Typed Records - typed, file-backed records with validated fields."""

from typed_records.config import StructConfig
from typed_records.errors import (
    DuplicateFieldError,
    DuplicateInstanceError,
    DuplicateTypeError,
    ErrorKind,
    FieldNotFoundError,
    InstanceNotFoundError,
    InvalidNameError,
    ParentNotFoundError,
    StorageIOError,
    StructError,
    TypeMismatchError,
    TypeNotFoundError,
    UnknownTypeTagError,
    UnknownValidatorError,
    ValidationFailedError,
)
from typed_records.instance import Instance
from typed_records.loader import VerificationIssue
from typed_records.log import configure_logging
from typed_records.parsing import TypeParser
from typed_records.schema import StructStore
from typed_records.session import Session
from typed_records.storage import DirectoryRecordStore, RecordStore
from typed_records.types import FieldDecl, FieldSpec, TypeDefinition, TypeTag, Validator
from typed_records.validators import ValidatorRegistry

__all__ = [
    # Main API
    "StructStore",
    "Instance",
    "TypeParser",
    "VerificationIssue",
    # Types
    "TypeTag",
    "FieldDecl",
    "FieldSpec",
    "TypeDefinition",
    "Validator",
    "ValidatorRegistry",
    # Storage
    "RecordStore",
    "DirectoryRecordStore",
    "Session",
    # Ambient
    "StructConfig",
    "configure_logging",
    # Errors
    "ErrorKind",
    "StructError",
    "InvalidNameError",
    "UnknownTypeTagError",
    "UnknownValidatorError",
    "ParentNotFoundError",
    "DuplicateTypeError",
    "DuplicateFieldError",
    "TypeNotFoundError",
    "DuplicateInstanceError",
    "InstanceNotFoundError",
    "FieldNotFoundError",
    "TypeMismatchError",
    "ValidationFailedError",
    "StorageIOError",
]

__version__ = "0.1.0"
