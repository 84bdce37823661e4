"""
Tests for converters, validators and error classification.
"""

import pytest

from azdo_provider.errors import AzureDevOpsError, NotFoundError
from azdo_provider.utils import (
    atoi,
    int_at_least,
    no_empty_strings,
    response_was_not_found,
    string_in_slice,
    to_bool,
    to_int,
    to_string,
)


class TestConverters:
    """Tests for nil-safe converters."""

    def test_to_string(self):
        assert to_string(None, "default") == "default"
        assert to_string("", "default") == ""
        assert to_string("value", "default") == "value"

    def test_to_bool(self):
        assert to_bool(None, True) is True
        assert to_bool(False, True) is False

    def test_to_int(self):
        assert to_int(None, 5) == 5
        assert to_int("3", 5) == 3


class TestAtoi:
    """Tests for strict integer parsing."""

    def test_valid(self):
        assert atoi("42") == 42
        assert atoi("-1") == -1

    @pytest.mark.parametrize("value", ["", "abc", " 42", "42 ", "4_2", "1.0", "0x1f"])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            atoi(value)

    def test_non_string(self):
        with pytest.raises(ValueError):
            atoi(None)


class TestValidators:
    """Tests for schema validators."""

    def test_no_empty_strings(self):
        assert no_empty_strings("pool", "name") == []
        assert no_empty_strings("", "name") == ["name must not be empty"]
        assert no_empty_strings("   ", "name") == ["name must not be empty"]
        assert no_empty_strings(5, "name") == ["expected type of name to be string"]

    def test_string_in_slice_case_sensitive(self):
        validate = string_in_slice(["automation", "deployment"], False)
        assert validate("automation", "pool_type") == []
        assert len(validate("Automation", "pool_type")) == 1

    def test_string_in_slice_ignore_case(self):
        validate = string_in_slice(["Exact", "Prefix"], True)
        assert validate("prefix", "match_type") == []
        assert validate("EXACT", "match_type") == []
        errors = validate("Regex", "match_type")
        assert len(errors) == 1
        assert "Regex" in errors[0]

    def test_int_at_least(self):
        validate = int_at_least(1)
        assert validate(1, "reviewer_count") == []
        assert len(validate(0, "reviewer_count")) == 1
        assert len(validate(True, "reviewer_count")) == 1


class TestResponseWasNotFound:
    """Tests for not-found classification."""

    def test_not_found(self):
        assert response_was_not_found(NotFoundError("missing", status_code=404))

    def test_other_errors(self):
        assert not response_was_not_found(AzureDevOpsError("boom", status_code=500))
        assert not response_was_not_found(ValueError("x"))
        assert not response_was_not_found(None)
