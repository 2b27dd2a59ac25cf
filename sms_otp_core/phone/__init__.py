"""
Phone Number Validation
=======================
Dialing-code lookup, length checks and E.164 formatting.
"""

from .models import PhoneNumberFormat, PhoneValidationError, PhoneValidationResult
from .countries import COUNTRY_FORMATS
from .validator import (
    PhoneValidator,
    clean_phone_number,
    validate_e164,
    mask_phone,
    format_for_display,
)

__all__ = [
    # Models
    "PhoneNumberFormat",
    "PhoneValidationError",
    "PhoneValidationResult",
    "COUNTRY_FORMATS",
    # Validator
    "PhoneValidator",
    "clean_phone_number",
    "validate_e164",
    "mask_phone",
    "format_for_display",
]
