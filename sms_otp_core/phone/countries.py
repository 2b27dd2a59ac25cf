"""
Country Dialing Codes
=====================
Static table of dialing codes and national-number length bounds.
"""

from typing import Dict

from .models import PhoneNumberFormat

COUNTRY_FORMATS: Dict[str, PhoneNumberFormat] = {
    f.code: f
    for f in (
        PhoneNumberFormat("+1", "US/Canada", 10, 10),
        PhoneNumberFormat("+44", "UK", 10, 11),
        PhoneNumberFormat("+91", "India", 10, 10),
        PhoneNumberFormat("+86", "China", 11, 11),
        PhoneNumberFormat("+81", "Japan", 10, 11),
        PhoneNumberFormat("+49", "Germany", 10, 12),
        PhoneNumberFormat("+33", "France", 9, 10),
        PhoneNumberFormat("+61", "Australia", 9, 9),
        PhoneNumberFormat("+55", "Brazil", 10, 11),
        PhoneNumberFormat("+7", "Russia", 10, 10),
        PhoneNumberFormat("+82", "South Korea", 9, 10),
        PhoneNumberFormat("+39", "Italy", 9, 11),
        PhoneNumberFormat("+34", "Spain", 9, 9),
        PhoneNumberFormat("+31", "Netherlands", 9, 9),
        PhoneNumberFormat("+46", "Sweden", 7, 13),
        PhoneNumberFormat("+41", "Switzerland", 9, 9),
        PhoneNumberFormat("+65", "Singapore", 8, 8),
        PhoneNumberFormat("+971", "UAE", 9, 9),
        PhoneNumberFormat("+966", "Saudi Arabia", 9, 9),
        PhoneNumberFormat("+27", "South Africa", 9, 9),
    )
}

# Longest codes first so "+971" wins over any shorter prefix
CODES_BY_LENGTH = sorted(COUNTRY_FORMATS, key=len, reverse=True)

# Generic bounds when no dialing code is recognised
GENERIC_MIN_LENGTH = 7
GENERIC_MAX_LENGTH = 15
