"""
Phone Validator Tests
=====================
Tests for phone number validation and formatting.
"""

import pytest

from sms_otp_core.phone import (
    COUNTRY_FORMATS,
    PhoneValidator,
    PhoneValidationError,
    mask_phone,
    validate_e164,
)


class TestValidate:
    """Tests for PhoneValidator.validate."""

    def test_empty(self):
        """Should reject an empty number."""
        result = PhoneValidator.validate("")
        assert result.is_valid is False
        assert result.error == PhoneValidationError.EMPTY

    def test_separators_only(self):
        """Separators alone count as empty."""
        result = PhoneValidator.validate(" ( ) - ")
        assert result.error == PhoneValidationError.EMPTY

    def test_invalid_characters(self):
        """Should reject letters."""
        result = PhoneValidator.validate("+1 202 CALL NOW")
        assert result.is_valid is False
        assert result.error == PhoneValidationError.INVALID_CHARACTERS

    def test_plus_in_middle(self):
        result = PhoneValidator.validate("202+5551234")
        assert result.error == PhoneValidationError.INVALID_CHARACTERS

    def test_us_number(self):
        """Should validate a US number."""
        result = PhoneValidator.validate("+12025551234")
        assert result.is_valid is True
        assert result.country_code == "+1"
        assert result.country_name == "US/Canada"
        assert result.national_number == "2025551234"
        assert result.e164_format == "+12025551234"
        assert result.formatted_number == "+1 202 555 1234"

    def test_uk_number(self):
        result = PhoneValidator.validate("+447911123456")
        assert result.is_valid is True
        assert result.country_code == "+44"
        assert result.country_name == "UK"

    def test_india_number(self):
        result = PhoneValidator.validate("+919876543210")
        assert result.is_valid is True
        assert result.country_code == "+91"
        assert result.national_number == "9876543210"

    def test_longest_prefix_wins(self):
        """+971 must not be read as +9x or +97."""
        result = PhoneValidator.validate("+971501234567")
        assert result.is_valid is True
        assert result.country_code == "+971"
        assert result.country_name == "UAE"

    def test_short_national_number_formatting(self):
        """National numbers under 10 digits are not grouped."""
        result = PhoneValidator.validate("+6591234567")
        assert result.is_valid is True
        assert result.formatted_number == "+65 91234567"

    def test_too_short(self):
        result = PhoneValidator.validate("+1202555")
        assert result.is_valid is False
        assert result.error == PhoneValidationError.TOO_SHORT
        assert result.country_code == "+1"
        assert "US/Canada" in result.message

    def test_too_long(self):
        result = PhoneValidator.validate("+120255512345")
        assert result.is_valid is False
        assert result.error == PhoneValidationError.TOO_LONG

    def test_cleans_formatting(self):
        """Should strip spaces, dashes, dots and parentheses."""
        result = PhoneValidator.validate("+1 (202) 555-12.34")
        assert result.is_valid is True
        assert result.national_number == "2025551234"

    def test_without_country_code(self):
        """Numbers without + fall back to generic bounds."""
        result = PhoneValidator.validate("2025551234")
        assert result.is_valid is True
        assert result.country_code is None
        assert result.national_number == "2025551234"

    def test_generic_too_short(self):
        result = PhoneValidator.validate("12345")
        assert result.error == PhoneValidationError.TOO_SHORT

    def test_generic_too_long(self):
        result = PhoneValidator.validate("1234567890123456")
        assert result.error == PhoneValidationError.TOO_LONG

    def test_unknown_code_generic(self):
        """Unknown dialing codes get generic bounds by default."""
        result = PhoneValidator.validate("+2341234567890")
        assert result.is_valid is True
        assert result.country_code is None

    def test_unknown_code_strict(self):
        result = PhoneValidator.validate("+2341234567890", require_known_country=True)
        assert result.is_valid is False
        assert result.error == PhoneValidationError.UNKNOWN_COUNTRY_CODE

    def test_generic_bounds_count_digits(self):
        """The leading + is not counted towards the generic bounds."""
        result = PhoneValidator.validate("+2345678")
        assert result.is_valid is True
        assert result.national_number == "2345678"
        assert result.e164_format == "+2345678"

        assert PhoneValidator.validate("+234567").error == PhoneValidationError.TOO_SHORT

    @pytest.mark.parametrize("code", sorted(COUNTRY_FORMATS))
    def test_length_bounds_per_country(self, code):
        """Valid iff the national length is within the country's bounds."""
        fmt = COUNTRY_FORMATS[code]
        for length in range(fmt.min_length - 2, fmt.max_length + 3):
            if length < 1:
                continue
            result = PhoneValidator.validate(code + "5" * length)
            expected = fmt.min_length <= length <= fmt.max_length
            assert result.is_valid is expected, (code, length)
            if expected:
                assert result.country_code == code

    def test_str(self):
        assert "valid" in str(PhoneValidator.validate("+12025551234"))
        assert "too_short" in str(PhoneValidator.validate("+1202"))


class TestToE164:
    """Tests for PhoneValidator.to_e164."""

    def test_already_e164(self):
        assert PhoneValidator.to_e164("+1 202-555-1234") == "+12025551234"

    def test_default_country_code(self):
        assert PhoneValidator.to_e164("2025551234", default_country_code="+1") == "+12025551234"

    def test_default_country_code_without_plus(self):
        assert PhoneValidator.to_e164("2025551234", default_country_code="1") == "+12025551234"

    def test_no_code(self):
        assert PhoneValidator.to_e164("2025551234") is None


class TestHelpers:
    """Tests for lookup and utility helpers."""

    def test_supported_countries(self):
        countries = PhoneValidator.supported_countries()
        codes = {c.code for c in countries}
        assert len(countries) == 20
        assert {"+1", "+44", "+91"} <= codes

    def test_find_country(self):
        assert PhoneValidator.find_country("+966501234567").name == "Saudi Arabia"
        assert PhoneValidator.find_country("966501234567") is None

    def test_validate_e164(self):
        assert validate_e164("+14155551234") is True
        assert validate_e164("+1") is False
        assert validate_e164("4155551234") is False
        assert validate_e164("+04155551234") is False
        assert validate_e164("+1415555123456789") is False
        assert validate_e164("") is False

    def test_mask_phone(self):
        assert mask_phone("+1 202 555 1234") == "***234"
        assert mask_phone("12") == "***"
