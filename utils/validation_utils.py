"""
utils/validation_utils.py

Purpose: Input validation

- Required-field checks for profile and ledger input
- Phone, email and OTP format checks
- Vehicle registration normalization
- Lenient amount coercion for aggregation
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional

from utils.constants import ALL_VEHICLES


def find_blank_fields(data: Dict[str, Any], required: Iterable[str]) -> List[str]:
    """
    Lists required keys whose value is missing or whitespace-only.

    Args:
        data: Input mapping
        required: Keys that must carry a value

    Returns:
        Names of blank fields, in ``required`` order
    """
    blank = []
    for field in required:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            blank.append(field)
    return blank


def normalize_phone(phone: Optional[str]) -> str:
    """
    Strips spaces, dashes and brackets so one number has one spelling.
    A leading "+" is kept.
    """
    if not phone:
        return ""
    phone = phone.strip()
    prefix = "+" if phone.startswith("+") else ""
    return prefix + re.sub(r"[^\d]", "", phone)


def validate_phone_number(phone: str) -> bool:
    """
    Validates a mobile number: 10 to 15 digits, optional leading "+".

    Args:
        phone: Phone number string

    Returns:
        True if the number is plausible
    """
    if not phone:
        return False
    return bool(re.match(r"^\+?\d{10,15}$", normalize_phone(phone)))


def validate_email(email: str) -> bool:
    """
    Loose email shape check (one "@", a dot in the domain).
    """
    if not email:
        return False
    return bool(re.match(r"^[^@\s]+@[^@\s]+\.[^@\s]+$", email.strip()))


def normalize_vehicle_no(vehicle_no: Optional[str]) -> str:
    """
    Canonical registration number: trimmed, inner whitespace removed, upper case.

    Example: " ka01 ab1234 " -> "KA01AB1234"
    """
    if not vehicle_no:
        return ""
    return re.sub(r"\s+", "", vehicle_no).upper()


def normalize_vehicle_filter(vehicle_filter: Optional[str]) -> Optional[str]:
    """
    Turns a dashboard vehicle filter into a registration number,
    or None for the "all vehicles" sentinel.
    """
    if vehicle_filter is None:
        return None
    cleaned = vehicle_filter.strip()
    if not cleaned or cleaned.lower() == ALL_VEHICLES:
        return None
    return normalize_vehicle_no(cleaned)


def to_decimal(value: Any) -> Decimal:
    """
    Coerces a stored amount to Decimal.

    Missing, non-numeric and non-finite values become zero; aggregation
    never fails on a malformed record.
    """
    if value is None or isinstance(value, bool):
        return Decimal("0")
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return Decimal("0")
    if not amount.is_finite():
        return Decimal("0")
    return amount


def sanitize_input(text: str, max_length: int = 1000) -> str:
    """
    Trims free text and collapses whitespace.

    Args:
        text: Input text
        max_length: Maximum allowed length

    Returns:
        Sanitized text
    """
    if not text:
        return ""

    text = text[:max_length]
    text = re.sub(r"[<>{}\[\]]", "", text)
    text = " ".join(text.split())

    return text.strip()
