"""
Phone Validator
===============
Normalization, validation and display formatting of phone numbers against
the static dialing-code table.
"""

import re
from typing import List, Optional

from .countries import (
    COUNTRY_FORMATS,
    CODES_BY_LENGTH,
    GENERIC_MIN_LENGTH,
    GENERIC_MAX_LENGTH,
)
from .models import PhoneNumberFormat, PhoneValidationError, PhoneValidationResult

_SEPARATORS = re.compile(r"[\s\-().]+")
_ALLOWED = re.compile(r"^\+?[0-9]+$")
_E164 = re.compile(r"\+[1-9][0-9]{1,14}")


def clean_phone_number(phone: str) -> str:
    """Remove whitespace and common separators."""
    return _SEPARATORS.sub("", phone).strip()


def validate_e164(phone: str) -> bool:
    """True for a ``+``-prefixed number of at most 15 digits with no leading zero."""
    return _E164.fullmatch(phone or "") is not None


def mask_phone(phone: str) -> str:
    """Mask a phone number for logging, showing only the last 3 digits."""
    digits = re.sub(r"\D", "", phone or "")
    return f"***{digits[-3:]}" if len(digits) > 3 else "***"


def format_for_display(country_code: str, national_number: str) -> str:
    """Group a national number for display, e.g. ``+1 202 555 1234``."""
    if len(national_number) >= 10:
        return (
            f"{country_code} {national_number[:3]} "
            f"{national_number[3:6]} {national_number[6:]}"
        )
    return f"{country_code} {national_number}"


class PhoneValidator:
    """Validates phone numbers against per-country length rules."""

    @staticmethod
    def find_country(phone: str) -> Optional[PhoneNumberFormat]:
        """
        Find the dialing-code entry for a number or code.

        The longest matching prefix wins. Numbers without a leading ``+``
        never match.
        """
        cleaned = clean_phone_number(phone)
        if not cleaned.startswith("+"):
            return None
        for code in CODES_BY_LENGTH:
            if cleaned.startswith(code):
                return COUNTRY_FORMATS[code]
        return None

    @classmethod
    def validate(cls, phone: str, require_known_country: bool = False) -> PhoneValidationResult:
        """
        Validate a phone number.

        Args:
            phone: Raw user input
            require_known_country: Reject ``+`` numbers whose dialing code
                is not in the table instead of applying generic bounds

        Returns:
            PhoneValidationResult with status and details
        """
        cleaned = clean_phone_number(phone or "")

        if not cleaned:
            return PhoneValidationResult(
                is_valid=False,
                error=PhoneValidationError.EMPTY,
                message="Phone number is required",
            )

        if not _ALLOWED.match(cleaned):
            return PhoneValidationResult(
                is_valid=False,
                error=PhoneValidationError.INVALID_CHARACTERS,
                message="Phone number contains invalid characters",
            )

        country = cls.find_country(cleaned)
        if country is not None:
            return cls._validate_national(cleaned, country)

        if require_known_country and cleaned.startswith("+"):
            return PhoneValidationResult(
                is_valid=False,
                error=PhoneValidationError.UNKNOWN_COUNTRY_CODE,
                message="Country code is not recognized",
                formatted_number=cleaned,
            )

        digits = cleaned.lstrip("+")
        if len(digits) < GENERIC_MIN_LENGTH:
            return PhoneValidationResult(
                is_valid=False,
                error=PhoneValidationError.TOO_SHORT,
                message="Phone number is too short",
            )

        if len(digits) > GENERIC_MAX_LENGTH:
            return PhoneValidationResult(
                is_valid=False,
                error=PhoneValidationError.TOO_LONG,
                message="Phone number is too long",
            )

        # Valid, but without a recognised country code
        return PhoneValidationResult(
            is_valid=True,
            national_number=digits,
            formatted_number=cleaned,
            e164_format=cleaned if validate_e164(cleaned) else None,
        )

    @staticmethod
    def _validate_national(cleaned: str, country: PhoneNumberFormat) -> PhoneValidationResult:
        national = cleaned[len(country.code):]

        if len(national) < country.min_length:
            return PhoneValidationResult(
                is_valid=False,
                error=PhoneValidationError.TOO_SHORT,
                message=f"Phone number is too short for {country.name}",
                country_code=country.code,
                formatted_number=cleaned,
            )

        if len(national) > country.max_length:
            return PhoneValidationResult(
                is_valid=False,
                error=PhoneValidationError.TOO_LONG,
                message=f"Phone number is too long for {country.name}",
                country_code=country.code,
                formatted_number=cleaned,
            )

        return PhoneValidationResult(
            is_valid=True,
            country_code=country.code,
            country_name=country.name,
            national_number=national,
            formatted_number=format_for_display(country.code, national),
            e164_format=cleaned,
        )

    @staticmethod
    def to_e164(phone: str, default_country_code: Optional[str] = None) -> Optional[str]:
        """
        Convert a phone number to E.164.

        Args:
            phone: Raw phone number
            default_country_code: Code used when the number has none,
                with or without the leading ``+``

        Returns:
            E.164 number, or None when no country code is available
        """
        cleaned = clean_phone_number(phone)

        if cleaned.startswith("+"):
            return cleaned

        if default_country_code:
            code = default_country_code if default_country_code.startswith("+") else f"+{default_country_code}"
            return f"{code}{cleaned}"

        return None

    @staticmethod
    def supported_countries() -> List[PhoneNumberFormat]:
        """All dialing codes in the table."""
        return list(COUNTRY_FORMATS.values())
