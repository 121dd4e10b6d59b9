"""
Messaging deep links.

WhatsApp wants a full international number without '+'; the native SMS
composer takes the numbers as typed, minus punctuation.
"""

import re
from typing import Iterable
from urllib.parse import quote


# encodeURIComponent leaves these unescaped; messaging apps expect the same
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_message(message: str) -> str:
    return quote(message, safe=_URI_COMPONENT_SAFE)


def clean_phone(number: str) -> str:
    """Keep digits and '+' only."""
    return re.sub(r"[^\d+]", "", number or "")


def normalize_phone(number: str, country_code: str = "90") -> str:
    """
    Digits-only international number.

    A number that does not already start with the country code gets it
    prefixed, after dropping a leading trunk '0'.
    """
    digits = re.sub(r"\D", "", number or "")
    if not digits:
        return ""
    if digits.startswith("00"):
        digits = digits[2:]
    if digits.startswith(country_code):
        return digits
    if digits.startswith("0"):
        digits = digits[1:]
    return f"{country_code}{digits}"


def whatsapp_link(phone: str, message: str = "", country_code: str = "90") -> str:
    """
    Deep link that opens a WhatsApp chat with a pre-filled message.

    Raises:
        ValueError: If the phone number has no digits
    """
    normalized = normalize_phone(phone, country_code)
    if not normalized:
        raise ValueError(f"No digits in phone number: {phone!r}")
    return f"whatsapp://send?phone={normalized}&text={encode_message(message)}"


def sms_link(phones: Iterable[str], message: str) -> str:
    """
    Deep link that opens the native SMS composer for several recipients.

    Raises:
        ValueError: If no usable phone number is given
    """
    cleaned = [p for p in (clean_phone(phone) for phone in phones) if p]
    if not cleaned:
        raise ValueError("At least one phone number is required")
    return f"sms:{';'.join(cleaned)}?body={encode_message(message)}"
