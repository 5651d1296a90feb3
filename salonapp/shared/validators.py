"""Shared validation utilities"""

import re
from typing import Optional, Union

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def normalize_phone(phone: Optional[str]) -> Optional[str]:
    """
    Trim a phone number as typed by the operator or client.

    Phones are stored as entered so that public booking can match an existing
    client by exact string equality; only surrounding whitespace is removed.
    Returns None for blank input.
    """
    if phone is None:
        return None
    phone = phone.strip()
    return phone or None


def format_whatsapp_number(phone: str, country_code: str = "55") -> str:
    """
    Format a phone number for the WhatsApp click-to-chat API.

    Removes every non-digit and prefixes the country code when the number
    does not already start with it.
    """
    digits = re.sub(r"\D", "", phone)
    if not digits.startswith(country_code):
        digits = country_code + digits
    return digits


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return None

    email = email.strip().lower()

    # Basic email validation pattern
    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def validate_time_of_day(value: str) -> str:
    """Validate a wall-clock time in HH:MM (24h) format"""
    if not isinstance(value, str) or not TIME_PATTERN.match(value.strip()):
        raise ValueError("Time must be in HH:MM format")
    return value.strip()


def parse_specialties(value: Union[str, list, None]) -> list[str]:
    """Accept "Corte, Coloração" or ["Corte", "Coloração"]; drop blanks"""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [s.strip() for s in value if isinstance(s, str) and s.strip()]
