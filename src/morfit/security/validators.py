"""
Format validators and input sanitizers.

Validators take a value and return a bool. They never raise, so a value of
the wrong type is simply invalid. Callers decide what to do with False.

Usage:
    from morfit.security.validators import is_valid_turkish_id, sanitize_email

    if not is_valid_turkish_id(body["tcNo"]):
        raise ValidationError("Validation failed", [...])
"""

import re
from typing import Any, Collection, Optional

EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

# Optional +90 or trunk 0, then the 10-digit subscriber number
TURKISH_PHONE_RE = re.compile(r"(?:\+90|0)?[0-9]{10}")

UUID_RE = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}",
    re.IGNORECASE,
)

URL_RE = re.compile(
    r"https?://(?:www\.)?[-a-zA-Z0-9@:%._+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b"
    r"[-a-zA-Z0-9()@:%_+.~#?&/=]*",
    re.ASCII,
)

TURKISH_ID_RE = re.compile(r"[0-9]{11}")


def _matches(pattern: re.Pattern, value: Any) -> bool:
    return isinstance(value, str) and pattern.fullmatch(value) is not None


def is_valid_email(email: Any) -> bool:
    return _matches(EMAIL_RE, email)


def is_valid_turkish_phone(phone: Any) -> bool:
    return _matches(TURKISH_PHONE_RE, phone)


def is_valid_uuid(value: Any) -> bool:
    """RFC 4122 text form, versions 1-5."""
    return _matches(UUID_RE, value)


def is_valid_url(url: Any) -> bool:
    return _matches(URL_RE, url)


def is_valid_turkish_id(value: Any) -> bool:
    """
    Check a T.C. Kimlik No.

    Eleven digits d0..d10. With odd = d0+d2+d4+d6+d8 and even = d1+d3+d5+d7,
    d9 must equal (odd*7 - even) mod 10 and d10 must equal (odd + even + d9) mod 10.

    The mod is Python's non-negative one, so IDs where odd*7 - even is
    negative (e.g. 19090909018) are accepted. A truncating remainder, as in
    JavaScript, would reject them.
    """
    if not _matches(TURKISH_ID_RE, value):
        return False

    digits = [int(c) for c in value]
    odd_sum = digits[0] + digits[2] + digits[4] + digits[6] + digits[8]
    even_sum = digits[1] + digits[3] + digits[5] + digits[7]
    tenth = (odd_sum * 7 - even_sum) % 10
    eleventh = (odd_sum + even_sum + tenth) % 10

    return digits[9] == tenth and digits[10] == eleventh


def is_valid_length(value: Any, min_length: int, max_length: Optional[int] = None) -> bool:
    """Inclusive length bounds. max_length=None means no upper bound."""
    if not isinstance(value, str):
        return False
    if len(value) < min_length:
        return False
    return max_length is None or len(value) <= max_length


def is_valid_range(number: Any, minimum: float, maximum: Optional[float] = None) -> bool:
    """Inclusive numeric bounds. maximum=None means no upper bound."""
    if isinstance(number, bool) or not isinstance(number, (int, float)):
        return False
    if number < minimum:
        return False
    return maximum is None or number <= maximum


def is_valid_enum(value: Any, allowed: Collection) -> bool:
    try:
        return value in allowed
    except TypeError:
        return False


def sanitize_string(value: str) -> str:
    """Trim and drop angle brackets from free text."""
    return value.strip().replace("<", "").replace(">", "")


def sanitize_email(email: str) -> str:
    """Normalize an email for storage and lookup."""
    return email.lower().strip()
