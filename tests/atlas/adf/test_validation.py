"""Tests for the ADF envelope validator."""

import pytest

from atlas.adf import validate_adf
from atlas.exceptions import ADFValidationError, ValidationReason


def envelope(**overrides):
    doc = {"type": "doc", "version": 1, "content": []}
    doc.update(overrides)
    return doc


def rejection(value, field_name=None) -> ADFValidationError:
    with pytest.raises(ADFValidationError) as exc_info:
        validate_adf(value, field_name=field_name)
    return exc_info.value


class TestValidEnvelopes:
    def test_empty_content(self):
        assert validate_adf(envelope()) is None

    def test_with_nodes(self):
        doc = envelope(content=[{"type": "paragraph", "content": [{"type": "text", "text": "Hi"}]}])
        validate_adf(doc)

    def test_nested_nodes_are_not_checked(self):
        """Only the envelope is validated; node shapes are the remote API's business."""
        validate_adf(envelope(content=[{"type": "madeUp"}, 42]))

    def test_extra_keys_allowed(self):
        validate_adf(envelope(extra="ignored"))


class TestNotAnObject:
    @pytest.mark.parametrize("value", [None, "doc", 1, [], ["doc"], True])
    def test_rejected(self, value):
        error = rejection(value)
        assert error.reason is ValidationReason.NOT_AN_OBJECT
        assert str(error) == "Invalid ADF: must be an object"


class TestType:
    def test_missing(self):
        doc = envelope()
        del doc["type"]
        error = rejection(doc)
        assert error.reason is ValidationReason.MISSING_FIELD
        assert error.field == "type"
        assert str(error) == "Invalid ADF: missing required field 'type'"

    def test_non_string_counts_as_missing(self):
        assert rejection(envelope(type=1)).reason is ValidationReason.MISSING_FIELD

    def test_wrong_value(self):
        error = rejection(envelope(type="paragraph"))
        assert error.reason is ValidationReason.WRONG_TYPE
        assert str(error) == "Invalid ADF: type must be 'doc', got 'paragraph'"


class TestVersion:
    """Only the integer 1 is accepted; nothing is coerced."""

    @pytest.mark.parametrize("version", [1.0, "1", True, None])
    def test_non_integer_counts_as_missing(self, version):
        error = rejection(envelope(version=version))
        assert error.reason is ValidationReason.MISSING_FIELD
        assert error.field == "version"
        assert str(error) == "Invalid ADF: missing required field 'version'"

    def test_absent(self):
        doc = envelope()
        del doc["version"]
        assert rejection(doc).reason is ValidationReason.MISSING_FIELD

    @pytest.mark.parametrize("version", [0, -1, 2])
    def test_wrong_number(self, version):
        error = rejection(envelope(version=version))
        assert error.reason is ValidationReason.WRONG_VERSION
        assert str(error) == f"Invalid ADF: version must be 1, got {version}"


class TestContent:
    def test_missing(self):
        doc = envelope()
        del doc["content"]
        error = rejection(doc)
        assert error.reason is ValidationReason.MISSING_FIELD
        assert str(error) == "Invalid ADF: missing required field 'content'"

    @pytest.mark.parametrize("content", [None, "text", {"type": "paragraph"}])
    def test_not_a_list(self, content):
        error = rejection(envelope(content=content))
        assert error.reason is ValidationReason.WRONG_TYPE
        assert error.field == "content"
        assert str(error) == "Invalid ADF: content must be array"


class TestFieldName:
    def test_prefixes_message(self):
        error = rejection(envelope(version=2), field_name="description")
        assert error.field_name == "description"
        assert str(error) == "description: Invalid ADF: version must be 1, got 2"

    def test_to_dict(self):
        error = rejection([], field_name="comment")
        assert error.to_dict() == {
            "detail": "comment: Invalid ADF: must be an object",
            "reason": "not_an_object",
            "field": None,
            "field_name": "comment",
        }
