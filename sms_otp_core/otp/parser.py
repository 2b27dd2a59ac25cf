"""
OTP Parser
==========
Regex-based extraction of one-time codes from free-form SMS text.
"""

import re
from typing import List, Optional, Pattern

import structlog

from .exceptions import ConfigurationError
from .models import OTPMessageFormat, MIN_OTP_LENGTH, MAX_OTP_LENGTH

logger = structlog.get_logger(__name__)

_FLAGS = re.IGNORECASE | re.ASCII

# Ordered from most to least specific
DEFAULT_OTP_PATTERNS: List[str] = [
    r"(?:code|otp|password|pin|verification)\s*(?:is|:)?\s*(\d{4,8})",  # Your code is 123456
    r"(\d{4,8})\s*(?:is\s+your|is\s+the)",  # 123456 is your OTP
    r"<#>\s*.*?(\d{4,8})",  # SMS Retriever format
    r"(?:code|otp|pin)\s*[-:]\s*(\d{4,8})",  # Code: 123456
    r"\b(\d{4,8})\b",  # isolated numeric code (fallback)
]

# Only the first bare run is considered; later ones go to the unique-run check
_BARE_RUN_PATTERN = DEFAULT_OTP_PATTERNS[-1]

_WHITESPACE = re.compile(r"\s+")
_DIGITS_ONLY = re.compile(r"^[0-9]+$")

# Keyword checks for detect_format, in priority order
_FORMAT_KEYWORDS = [
    (OTPMessageFormat.VERIFICATION, ("verification", "verify")),
    (OTPMessageFormat.LOGIN, ("login", "sign in")),
    (OTPMessageFormat.TRANSACTION, ("transaction", "payment")),
    (OTPMessageFormat.PASSWORD_RESET, ("reset", "recover")),
]


def _normalize(message: str) -> str:
    return message.lower().strip()


def validate_candidate(candidate: Optional[str], expected_length: Optional[int] = None) -> Optional[str]:
    """
    Validate an extracted OTP candidate.

    Args:
        candidate: Raw captured text
        expected_length: Required number of digits, if known

    Returns:
        The cleaned code, or None if it is not a plausible OTP
    """
    if not candidate:
        return None

    cleaned = _WHITESPACE.sub("", candidate)
    if not _DIGITS_ONLY.match(cleaned):
        return None

    if expected_length is not None and len(cleaned) != expected_length:
        return None

    if not MIN_OTP_LENGTH <= len(cleaned) <= MAX_OTP_LENGTH:
        return None

    return cleaned


class OTPParser:
    """Extracts OTP codes from SMS messages using ordered regex heuristics."""

    DEFAULT_PATTERNS: List[str] = DEFAULT_OTP_PATTERNS

    def __init__(self, custom_patterns: Optional[List[str]] = None):
        """
        Initialize OTP parser.

        Args:
            custom_patterns: Optional patterns tried before the defaults.
                Each must capture the code in group 1.

        Raises:
            ConfigurationError: If a pattern does not compile or has no group
        """
        patterns = list(custom_patterns or []) + self.DEFAULT_PATTERNS
        self._patterns: List[Pattern] = [self._compile(p) for p in patterns]

    @staticmethod
    def _compile(pattern: str) -> Pattern:
        try:
            compiled = re.compile(pattern, _FLAGS)
        except re.error as e:
            raise ConfigurationError(f"Invalid OTP pattern {pattern!r}: {e}") from e
        if compiled.groups < 1:
            raise ConfigurationError(f"OTP pattern {pattern!r} must capture the code in group 1")
        return compiled

    def extract_otp(
        self,
        message: str,
        expected_length: Optional[int] = None,
        custom_pattern: Optional[str] = None,
    ) -> Optional[str]:
        """
        Extract an OTP code from an SMS message.

        Args:
            message: Raw SMS text
            expected_length: Expected number of digits
            custom_pattern: Pattern tried before all others; group 1 is the code

        Returns:
            Extracted OTP or None
        """
        if not message:
            return None

        text = _normalize(message)

        if custom_pattern is not None:
            match = re.search(custom_pattern, text, _FLAGS)
            if match and match.re.groups >= 1:
                otp = validate_candidate(match.group(1), expected_length)
                if otp is not None:
                    return otp

        for pattern in self._patterns:
            for match in pattern.finditer(text):
                otp = validate_candidate(match.group(1), expected_length)
                if otp is not None:
                    logger.debug("otp_extracted", pattern=pattern.pattern)
                    return otp
                if pattern.pattern == _BARE_RUN_PATTERN:
                    break

        # Last resort: a single standalone run of exactly the expected length
        if expected_length is not None:
            runs = re.findall(rf"\b\d{{{expected_length}}}\b", text, _FLAGS)
            if len(runs) == 1:
                otp = validate_candidate(runs[0], expected_length)
                if otp is not None:
                    logger.debug("otp_extracted", pattern="unique_digit_run")
                    return otp

        logger.debug("otp_not_found", length=len(message))
        return None

    def contains_otp(self, message: str, expected_length: Optional[int] = None) -> bool:
        """Check whether a message contains a likely OTP code."""
        return self.extract_otp(message, expected_length=expected_length) is not None

    def extract_all_potential_otps(
        self,
        message: str,
        expected_length: Optional[int] = None,
    ) -> List[str]:
        """
        Extract every plausible OTP code from a message.

        Useful when several codes might be present.
        """
        if not message:
            return []

        text = _normalize(message)
        results: List[str] = []
        for pattern in self._patterns:
            for match in pattern.finditer(text):
                otp = validate_candidate(match.group(1), expected_length)
                if otp is not None and otp not in results:
                    results.append(otp)
        return results

    @staticmethod
    def detect_format(message: str) -> OTPMessageFormat:
        """Classify the purpose of an OTP message."""
        if "<#>" in message:
            return OTPMessageFormat.SMS_RETRIEVER

        text = _normalize(message)
        for message_format, keywords in _FORMAT_KEYWORDS:
            if any(keyword in text for keyword in keywords):
                return message_format

        return OTPMessageFormat.UNKNOWN


_default_parser = OTPParser()


def extract_otp(
    message: str,
    expected_length: Optional[int] = None,
    custom_pattern: Optional[str] = None,
) -> Optional[str]:
    """Extract an OTP using the default pattern set."""
    return _default_parser.extract_otp(message, expected_length, custom_pattern)


def contains_otp(message: str, expected_length: Optional[int] = None) -> bool:
    """Check for an OTP using the default pattern set."""
    return _default_parser.contains_otp(message, expected_length)


def extract_all_potential_otps(message: str, expected_length: Optional[int] = None) -> List[str]:
    """Extract all OTP candidates using the default pattern set."""
    return _default_parser.extract_all_potential_otps(message, expected_length)


def detect_format(message: str) -> OTPMessageFormat:
    """Classify the purpose of an OTP message."""
    return OTPParser.detect_format(message)
