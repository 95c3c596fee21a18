"""Tests for form sanitization and validation."""
from datetime import date

import pytest

from catalog_service.forms import (
    BookInstanceCreateForm,
    BookInstanceUpdateForm,
    parse_form,
    sanitize,
)


class TestSanitize:
    def test_trims_whitespace(self):
        assert sanitize("  Penguin  ") == "Penguin"

    def test_escapes_markup(self):
        assert sanitize("<b>Penguin</b> & Sons") == "&lt;b&gt;Penguin&lt;/b&gt; &amp; Sons"

    def test_missing_value_becomes_empty(self):
        assert sanitize(None) == ""


class TestCreateForm:
    def test_valid_submission(self):
        result = parse_form(
            BookInstanceCreateForm,
            {"book": "abc", "imprint": " Penguin ", "status": "Loaned", "due_back": "2026-11-30"},
        )

        assert result.is_valid
        assert result.form.book == "abc"
        assert result.form.imprint == "Penguin"
        assert result.form.status == "Loaned"
        assert result.form.due_back == date(2026, 11, 30)

    def test_due_back_is_optional(self):
        result = parse_form(BookInstanceCreateForm, {"book": "abc", "imprint": "Penguin"})

        assert result.is_valid
        assert result.form.due_back is None

    def test_status_defaults_to_maintenance(self):
        result = parse_form(BookInstanceCreateForm, {"book": "abc", "imprint": "Penguin", "status": " "})

        assert result.form.status == "Maintenance"

    def test_accepts_full_timestamp(self):
        result = parse_form(
            BookInstanceCreateForm,
            {"book": "abc", "imprint": "Penguin", "due_back": "2026-11-30T09:30:00"},
        )

        assert result.form.due_back == date(2026, 11, 30)

    def test_missing_book_and_imprint(self):
        result = parse_form(BookInstanceCreateForm, {"book": "  ", "imprint": ""})

        assert not result.is_valid
        messages = {e.field: e.message for e in result.errors}
        assert messages == {
            "book": "Book must be specified",
            "imprint": "Imprint must be specified",
        }

    @pytest.mark.parametrize("value", ["30/11/2026", "next tuesday", "2026-13-45"])
    def test_rejects_non_iso_date(self, value):
        result = parse_form(BookInstanceCreateForm, {"book": "abc", "imprint": "Penguin", "due_back": value})

        assert [(e.field, e.message) for e in result.errors] == [("due_back", "Invalid date")]

    def test_rejects_unknown_status(self):
        result = parse_form(BookInstanceCreateForm, {"book": "abc", "imprint": "Penguin", "status": "Lost"})

        assert [(e.field, e.message) for e in result.errors] == [("status", "Invalid status")]

    def test_keeps_sanitized_values_on_failure(self):
        result = parse_form(BookInstanceCreateForm, {"book": "", "imprint": " <i>Penguin</i> "})

        assert result.form is None
        assert result.values["imprint"] == "&lt;i&gt;Penguin&lt;/i&gt;"


class TestUpdateForm:
    def test_every_field_is_required(self):
        result = parse_form(BookInstanceUpdateForm, {})

        assert [(e.field, e.message) for e in result.errors] == [
            ("book", "Book must not be empty."),
            ("imprint", "Imprint must not be empty."),
            ("status", "Status must not be empty."),
            ("due_back", "due_back must not be empty"),
        ]

    def test_due_back_is_not_parsed(self):
        result = parse_form(
            BookInstanceUpdateForm,
            {"book": "abc", "imprint": "Penguin", "status": "Loaned", "due_back": "soon"},
        )

        assert result.is_valid
        assert result.form.due_back == "soon"
