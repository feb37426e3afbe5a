"""Shared validation utilities"""

import re
from datetime import datetime
from typing import Optional


def validate_us_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate and normalize US phone number to E.164 format.

    Args:
        phone: Phone number string in various formats

    Returns:
        Normalized phone number in E.164 format (+1XXXXXXXXXX)

    Raises:
        ValueError: If phone number is invalid
    """
    if not phone:
        return phone

    # Remove all non-digit characters
    digits = re.sub(r"\D", "", phone)

    # Handle +1 prefix
    if digits.startswith("1") and len(digits) == 11:
        digits = digits[1:]

    # US phone numbers should have 10 digits
    if len(digits) != 10:
        raise ValueError("Phone number must be 10 digits for US numbers")

    return f"+1{digits}"


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def validate_time_of_day(value: Optional[str]) -> Optional[str]:
    """Validate an HH:mm time and normalize it to two-digit hours"""
    if value is None:
        return value

    match = re.match(r"^(\d{1,2}):(\d{2})$", value.strip())
    if not match or int(match.group(1)) > 23 or int(match.group(2)) > 59:
        raise ValueError("Time must be in HH:mm format (e.g. 16:00)")

    return f"{int(match.group(1)):02d}:{match.group(2)}"


def to_wall_clock(value: Optional[datetime]) -> Optional[datetime]:
    """
    Drop any UTC offset and keep the wall-clock fields.
    Schedules are stored as naive local times.
    """
    if value is None or value.tzinfo is None:
        return value
    return value.replace(tzinfo=None)
