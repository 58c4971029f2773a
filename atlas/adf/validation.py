"""Top-level ADF envelope validation.

Only the `{type, version, content}` envelope is checked. Nested nodes are left to
the remote API; the renderer copes with malformed nodes on the way back.
"""

from collections.abc import Mapping
from typing import Any

from loguru import logger

from atlas.exceptions import ADFValidationError, ValidationReason


def _reject(reason: ValidationReason, message: str, field: str | None, field_name: str | None) -> ADFValidationError:
    logger.debug(f"Rejected ADF envelope ({reason}): {message}")
    return ADFValidationError(reason, f"Invalid ADF: {message}", field=field, field_name=field_name)


def validate_adf(value: Any, field_name: str | None = None) -> None:
    """Raise ADFValidationError unless `value` is a valid ADF document envelope.

    A valid document is a mapping with:
    - type: exactly "doc"
    - version: the integer 1 (1.0, "1" and True are rejected, not coerced)
    - content: a list (may be empty)

    Args:
        value: Decoded JSON value to check
        field_name: Caller's field name, included in error messages
    """
    if not isinstance(value, Mapping):
        raise _reject(ValidationReason.NOT_AN_OBJECT, "must be an object", None, field_name)

    doc_type = value.get("type")
    if not isinstance(doc_type, str):
        raise _reject(ValidationReason.MISSING_FIELD, "missing required field 'type'", "type", field_name)
    if doc_type != "doc":
        raise _reject(ValidationReason.WRONG_TYPE, f"type must be 'doc', got '{doc_type}'", "type", field_name)

    version = value.get("version")
    # bool is an int subclass; JSON true is not a version number
    if not isinstance(version, int) or isinstance(version, bool):
        raise _reject(ValidationReason.MISSING_FIELD, "missing required field 'version'", "version", field_name)
    if version != 1:
        raise _reject(ValidationReason.WRONG_VERSION, f"version must be 1, got {version}", "version", field_name)

    if "content" not in value:
        raise _reject(ValidationReason.MISSING_FIELD, "missing required field 'content'", "content", field_name)
    if not isinstance(value["content"], list):
        raise _reject(ValidationReason.WRONG_TYPE, "content must be array", "content", field_name)
