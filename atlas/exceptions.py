import reprlib
from enum import StrEnum, auto
from typing import Any


class AtlasError(Exception):
    """Base exception for conversion errors surfaced to callers."""

    def __init__(self, message: str):
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"detail": str(self)}


class ValidationReason(StrEnum):
    NOT_AN_OBJECT = auto()
    MISSING_FIELD = auto()
    WRONG_TYPE = auto()
    WRONG_VERSION = auto()


class ADFValidationError(AtlasError):
    """Raised when a pre-built document fails the envelope check.

    `field` is the envelope key at fault ("type", "version", "content"), `field_name`
    the caller's field the document was supplied for ("description", "comment").
    """

    def __init__(
        self,
        reason: ValidationReason,
        message: str,
        *,
        field: str | None = None,
        field_name: str | None = None,
    ):
        if field_name:
            message = f"{field_name}: {message}"
        super().__init__(message)
        self.reason = reason
        self.field = field
        self.field_name = field_name

    def to_dict(self) -> dict[str, Any]:
        return {"detail": str(self), "reason": str(self.reason), "field": self.field, "field_name": self.field_name}


class InvalidInputError(AtlasError):
    """Raised when an input value is neither text, an ADF object, nor null."""

    def __init__(self, field_name: str, value: Any):
        kind = type(value).__name__
        super().__init__(f"{field_name} must be string or ADF object, got {kind}: {reprlib.repr(value)}")
        self.field_name = field_name
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        return {"detail": str(self), "field_name": self.field_name}
