"""Tests for field identifier validation."""

from __future__ import annotations

import pytest

from response_filtering.accessors import DocumentFieldAccessor, JsonbFieldAccessor
from response_filtering.exceptions import ResponseFilterError, UnsafeFieldIdError
from response_filtering.sanitizer import ensure_safe_field_id, is_safe_field_id

SAFE_IDS = ["valid-field-123", "field_1", "A", "0", "-", "_", "camelCaseId"]
UNSAFE_IDS = [
    "",
    "field'; DROP TABLE response; --",
    "field name",
    "field\nname",
    "field.name",
    "field$name",
    "data->>'x'",
    "fïeld",
    "field\t",
    " field",
]


@pytest.mark.parametrize("field_id", SAFE_IDS)
def test_safe_ids_are_returned_unchanged(field_id: str) -> None:
    assert is_safe_field_id(field_id)
    assert ensure_safe_field_id(field_id) == field_id


@pytest.mark.parametrize("field_id", UNSAFE_IDS)
def test_unsafe_ids_are_rejected(field_id: str) -> None:
    assert not is_safe_field_id(field_id)
    with pytest.raises(UnsafeFieldIdError):
        ensure_safe_field_id(field_id)


@pytest.mark.parametrize("field_id", [None, 12, ["a"]])
def test_non_strings_are_rejected(field_id) -> None:
    assert not is_safe_field_id(field_id)
    with pytest.raises(UnsafeFieldIdError):
        ensure_safe_field_id(field_id)


def test_error_message_and_payload() -> None:
    with pytest.raises(UnsafeFieldIdError) as exc_info:
        ensure_safe_field_id("bad id")

    err = exc_info.value
    assert str(err) == 'Invalid fieldId "bad id"'
    assert isinstance(err, ResponseFilterError)
    assert isinstance(err, ValueError)
    assert err.to_dict() == {
        "error": "INVALID_FIELD_ID",
        "message": 'Invalid fieldId "bad id"',
        "field_id": "bad id",
    }


class TestAccessors:
    """Accessors render field references and sanitize on construction."""

    def test_jsonb_accessor(self) -> None:
        field = JsonbFieldAccessor("valid-field-123")
        assert field.typed == "data->'valid-field-123'"
        assert field.text == "data->>'valid-field-123'"
        assert field.json_type == "jsonb_typeof(data->'valid-field-123')"

    def test_jsonb_accessor_custom_column(self) -> None:
        field = JsonbFieldAccessor("color", column='"Payload"')
        assert field.text == "\"Payload\"->>'color'"

    def test_document_accessor(self) -> None:
        field = DocumentFieldAccessor("color")
        assert field.path == "data.color"
        assert field.typed == field.text == field.path

    def test_document_accessor_without_prefix(self) -> None:
        assert DocumentFieldAccessor("color", prefix="").path == "color"

    @pytest.mark.parametrize("accessor", [JsonbFieldAccessor, DocumentFieldAccessor])
    def test_accessors_reject_unsafe_ids(self, accessor) -> None:
        with pytest.raises(UnsafeFieldIdError):
            accessor("x'); --")
