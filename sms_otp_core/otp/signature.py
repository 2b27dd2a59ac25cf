"""
SMS Retriever App Signature
===========================
App-signature hashing and message helpers for the Android SMS Retriever
format.

A retriever message looks like::

    <#> Your verification code is 123456
    FA+9qCX9VSu

The trailing 11 characters identify the receiving app.
"""

import base64
import hashlib
import re
from typing import Iterable, List, Optional

import structlog

from .exceptions import ConfigurationError, InvalidOTPError

logger = structlog.get_logger(__name__)

RETRIEVER_PREFIX = "<#>"
NUM_HASHED_BYTES = 9
NUM_BASE64_CHARS = 11

_SIGNATURE_RE = re.compile(r"^[A-Za-z0-9+/]{11}$")
_TRAILING_SIGNATURE_RE = re.compile(r"(?:^|\s)([A-Za-z0-9+/]{11})\s*$")


def compute_app_signature(package_name: str, signing_certificate: str) -> str:
    """
    Compute the 11-character app signature hash.

    SHA-256 over ``"<package> <certificate>"``, truncated to 9 bytes and
    Base64-encoded.

    Args:
        package_name: Android application id
        signing_certificate: Signing certificate as a hex char string

    Returns:
        11-character Base64 hash
    """
    if not package_name or not signing_certificate:
        raise ConfigurationError("Package name and signing certificate are required")

    app_info = f"{package_name} {signing_certificate}"
    digest = hashlib.sha256(app_info.encode("utf-8")).digest()[:NUM_HASHED_BYTES]
    encoded = base64.b64encode(digest).decode("ascii").rstrip("=")
    return encoded[:NUM_BASE64_CHARS]


def compute_app_signatures(package_name: str, certificates: Iterable[str]) -> List[str]:
    """Compute one signature per signing certificate, skipping blanks."""
    signatures = []
    for certificate in certificates:
        if not certificate:
            continue
        signatures.append(compute_app_signature(package_name, certificate))
    logger.debug("app_signatures_computed", package=package_name, count=len(signatures))
    return signatures


def is_valid_signature(app_signature: str) -> bool:
    """Check the 11-character Base64 shape of an app signature."""
    return bool(app_signature and _SIGNATURE_RE.match(app_signature))


def build_retriever_message(body: str, app_signature: str) -> str:
    """
    Build an SMS body the SMS Retriever API will deliver to the app.

    Args:
        body: Message text containing the OTP
        app_signature: 11-character app signature

    Returns:
        Message prefixed with ``<#>`` and suffixed with the signature
    """
    if not is_valid_signature(app_signature):
        raise InvalidOTPError(
            f"App signature must be {NUM_BASE64_CHARS} Base64 characters",
            invalid_value=app_signature,
        )
    return f"{RETRIEVER_PREFIX} {body.strip()}\n{app_signature}"


def is_retriever_message(message: str, app_signature: Optional[str] = None) -> bool:
    """
    Check whether a message follows the SMS Retriever format.

    Args:
        message: Raw SMS text
        app_signature: If given, the trailing hash must match it
    """
    if not message or not message.lstrip().startswith(RETRIEVER_PREFIX):
        return False

    match = _TRAILING_SIGNATURE_RE.search(message)
    if not match:
        return False

    if app_signature is not None:
        return match.group(1) == app_signature
    return True
