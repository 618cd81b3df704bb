"""Error types raised by the record stores."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Kinds of failure a store operation can report."""

    INVALID_NAME = "InvalidName"
    UNKNOWN_TYPE_TAG = "UnknownTypeTag"
    UNKNOWN_VALIDATOR = "UnknownValidator"
    PARENT_NOT_FOUND = "ParentNotFound"
    DUPLICATE_TYPE = "DuplicateType"
    DUPLICATE_FIELD = "DuplicateField"
    TYPE_NOT_FOUND = "TypeNotFound"
    DUPLICATE_INSTANCE = "DuplicateInstance"
    INSTANCE_NOT_FOUND = "InstanceNotFound"
    FIELD_NOT_FOUND = "FieldNotFound"
    TYPE_MISMATCH = "TypeMismatch"
    VALIDATION_FAILED = "ValidationFailed"
    STORAGE_IO = "StorageIOError"


class StructError(Exception):
    """Base class for all record store errors.

    Attributes:
        kind: The ErrorKind of the failure.
        name: The offending type, instance, field or validator name.
    """

    kind: ErrorKind

    def __init__(self, message: str, name: str | None = None) -> None:
        super().__init__(message)
        self.name = name


class InvalidNameError(StructError, ValueError):
    kind = ErrorKind.INVALID_NAME


class UnknownTypeTagError(StructError, ValueError):
    kind = ErrorKind.UNKNOWN_TYPE_TAG


class UnknownValidatorError(StructError, LookupError):
    kind = ErrorKind.UNKNOWN_VALIDATOR


class ParentNotFoundError(StructError, LookupError):
    kind = ErrorKind.PARENT_NOT_FOUND


class DuplicateTypeError(StructError, ValueError):
    kind = ErrorKind.DUPLICATE_TYPE


class DuplicateFieldError(StructError, ValueError):
    kind = ErrorKind.DUPLICATE_FIELD


class TypeNotFoundError(StructError, LookupError):
    kind = ErrorKind.TYPE_NOT_FOUND


class DuplicateInstanceError(StructError, ValueError):
    kind = ErrorKind.DUPLICATE_INSTANCE


class InstanceNotFoundError(StructError, LookupError):
    kind = ErrorKind.INSTANCE_NOT_FOUND


class FieldNotFoundError(StructError, LookupError):
    kind = ErrorKind.FIELD_NOT_FOUND


class TypeMismatchError(StructError, TypeError):
    kind = ErrorKind.TYPE_MISMATCH


class ValidationFailedError(StructError, ValueError):
    """A validator rejected the value being stored."""

    kind = ErrorKind.VALIDATION_FAILED

    def __init__(self, message: str, validator: str, field: str | None = None) -> None:
        super().__init__(message, name=validator)
        self.validator = validator
        self.field = field


class StorageIOError(StructError, OSError):
    """Reading or writing the on-disk layout failed, or it is malformed."""

    kind = ErrorKind.STORAGE_IO

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""
