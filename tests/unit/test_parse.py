"""Tests for model output parsing and validation."""

from datetime import date

import pytest

from plainly.errors import (
    EventValidationError,
    InvalidCategoryError,
    MissingFieldsError,
    ParseError,
)
from plainly.llm.parse import (
    check_event_fields,
    normalize_date,
    parse_json_response,
    strip_code_fences,
    validate_extracted_data,
)

TODAY = date(2026, 1, 15)


@pytest.fixture
def payload() -> dict:
    return {
        "title": "Central bank holds rates",
        "date": "2026-01-14",
        "category": "economy",
        "what_happened": "The bank kept rates unchanged.",
        "why_people_care": "Rates drive mortgage costs.",
        "what_this_means": "Loan costs may stay flat.",
        "what_likely_does_not_change": None,
    }


class TestParseJsonResponse:
    """Recovering a JSON object from model text."""

    @pytest.mark.parametrize("raw", [
        '{"title": "A"}',
        '```json\n{"title": "A"}\n```',
        '```\n{"title": "A"}\n```',
        'Here is the JSON:\n{"title": "A"}\nHope that helps.',
        '  {"title": "A"}  ',
    ])
    def test_recovers_object(self, raw: str):
        assert parse_json_response(raw) == {"title": "A"}

    @pytest.mark.parametrize("raw", [
        "",
        "I could not read the article.",
        "[1, 2, 3]",
        '{"title": ',
    ])
    def test_unrecoverable(self, raw: str):
        with pytest.raises(ParseError) as exc_info:
            parse_json_response(raw)
        assert exc_info.value.raw_text == raw
        assert exc_info.value.stage == "parse"

    def test_strip_code_fences(self):
        assert strip_code_fences("```JSON\n{}\n```") == "{}"


class TestCheckEventFields:
    """Every violation is reported together."""

    def test_valid_payload(self, payload):
        check_event_fields(payload)

    def test_missing_fields_only(self, payload):
        payload["title"] = "   "
        del payload["what_this_means"]

        with pytest.raises(MissingFieldsError) as exc_info:
            check_event_fields(payload)

        assert exc_info.value.missing_fields == ["title", "what_this_means"]
        assert not exc_info.value.has_invalid_category

    def test_invalid_category_only(self, payload):
        payload["category"] = "sports"

        with pytest.raises(InvalidCategoryError) as exc_info:
            check_event_fields(payload)

        assert exc_info.value.invalid_category == "sports"
        assert "economy" in exc_info.value.allowed_categories
        assert exc_info.value.missing_fields == []

    def test_combined_violations(self, payload):
        payload["title"] = ""
        payload["category"] = "sports"

        with pytest.raises(EventValidationError) as exc_info:
            check_event_fields(payload)

        error = exc_info.value
        assert type(error) is EventValidationError
        assert error.missing_fields == ["title"]
        assert error.invalid_category == "sports"
        assert "missing required fields: title" in str(error)
        assert "invalid category 'sports'" in str(error)

    @pytest.mark.parametrize("category", [None, "", "Economy", 3])
    def test_bad_category_values(self, payload, category):
        payload["category"] = category
        with pytest.raises(InvalidCategoryError):
            check_event_fields(payload)


class TestNormalizeDate:
    @pytest.mark.parametrize("value,expected", [
        ("2025-12-31", "2025-12-31"),
        (" 2025-12-31 ", "2025-12-31"),
        (None, "2026-01-15"),
        ("", "2026-01-15"),
        ("last Tuesday", "2026-01-15"),
        ("2025-02-30", "2026-01-15"),
        ("31/12/2025", "2026-01-15"),
    ])
    def test_normalize(self, value, expected):
        assert normalize_date(value, TODAY) == expected


class TestValidateExtractedData:
    def test_strips_and_fills(self, payload):
        payload["title"] = "  Central bank holds rates  "
        payload["date"] = None
        payload["what_likely_does_not_change"] = "   "

        data = validate_extracted_data(payload, TODAY)

        assert data.title == "Central bank holds rates"
        assert data.date == "2026-01-15"
        assert data.what_likely_does_not_change is None

    def test_raises_before_building(self, payload):
        payload["what_happened"] = None
        with pytest.raises(MissingFieldsError):
            validate_extracted_data(payload, TODAY)
