"""
Phone Models
============
Country formats and validation results.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class PhoneValidationError(str, Enum):
    """Reasons a phone number fails validation."""
    EMPTY = "empty"
    INVALID_CHARACTERS = "invalid_characters"
    TOO_SHORT = "too_short"
    TOO_LONG = "too_long"
    UNKNOWN_COUNTRY_CODE = "unknown_country_code"


@dataclass(frozen=True)
class PhoneNumberFormat:
    """Length rules for one dialing code."""
    code: str  # e.g. "+44"
    name: str
    min_length: int  # national number, without country code
    max_length: int

    def __str__(self) -> str:
        return f"PhoneNumberFormat({self.code}, {self.name})"


@dataclass(frozen=True)
class PhoneValidationResult:
    """Outcome of validating a phone number."""
    is_valid: bool
    country_code: Optional[str] = None
    country_name: Optional[str] = None
    national_number: Optional[str] = None
    formatted_number: Optional[str] = None
    e164_format: Optional[str] = None
    error: Optional[PhoneValidationError] = None
    message: Optional[str] = None

    def __str__(self) -> str:
        if self.is_valid:
            return f"PhoneValidationResult(valid: {self.formatted_number})"
        return f"PhoneValidationResult(invalid: {self.error.value} - {self.message})"
