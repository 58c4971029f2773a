"""Turn user-supplied field values into ADF documents before they are sent.

Accepted values:
- str: Markdown (or plain) text, converted with the ADF builder
- mapping: a pre-built ADF document, validated and returned unchanged
- None: an empty document

Anything else (numbers, booleans, lists) is rejected with the field name in the error.
"""

from collections.abc import Mapping
from typing import Any

from loguru import logger

from atlas.adf.builder import text_to_adf
from atlas.adf.validation import validate_adf
from atlas.exceptions import InvalidInputError


def process_adf_input(value: Any, field_name: str) -> Any:
    """Process ADF input for any text field (description, comment, etc.)

    Args:
        value: The decoded input value
        field_name: Name of the field for error messages (e.g. "description", "comment")

    Returns:
        An ADF document as JSON-ready data; pre-built documents are returned as-is

    Raises:
        ADFValidationError: The mapping is not a valid ADF envelope
        InvalidInputError: The value is not a string, mapping or None
    """
    if isinstance(value, str):
        return text_to_adf(value).to_adf()
    if isinstance(value, Mapping):
        validate_adf(value, field_name=field_name)
        return value
    if value is None:
        return text_to_adf("").to_adf()

    logger.debug(f"Rejected {field_name} input of type {type(value).__name__}")
    raise InvalidInputError(field_name, value)


def process_description_input(value: Any) -> Any:
    """Process description input for create/update issue operations."""
    return process_adf_input(value, "description")


def process_comment_input(value: Any) -> Any:
    """Process comment input for add/update comment operations."""
    return process_adf_input(value, "comment")
