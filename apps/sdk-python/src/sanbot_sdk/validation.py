"""Local checks for contact details before they reach the backend."""

from __future__ import annotations

import re

from .config import DEFAULT_COUNTRY_CODE

PHONE_RE = re.compile(r"^\+?[1-9]\d{1,14}$")
EMAIL_RE = re.compile(r"^[A-Za-z0-9+_.-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")
DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
NON_DIGIT_RE = re.compile(r"[^0-9]")

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100


def is_valid_phone(phone: str) -> bool:
    return PHONE_RE.fullmatch(phone) is not None


def is_valid_email(email: str | None) -> bool:
    """Blank addresses are allowed; email is optional on every form."""
    if email is None or not email.strip():
        return True
    return EMAIL_RE.fullmatch(email) is not None


def is_valid_name(name: str) -> bool:
    return NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH


def is_valid_date(date: str | None) -> bool:
    if date is None or not date.strip():
        return True
    return DATE_RE.fullmatch(date) is not None


def format_phone_number(phone: str, country_code: str = DEFAULT_COUNTRY_CODE) -> str:
    """Prefix local numbers with ``country_code``.

    A leading trunk ``0`` is dropped first. Numbers already written in
    international form, and input without any digits, are returned
    unchanged.
    """
    cleaned = NON_DIGIT_RE.sub("", phone)
    if not cleaned:
        return phone
    if cleaned.startswith("0"):
        return f"{country_code}{cleaned[1:]}"
    if not phone.startswith("+"):
        return f"{country_code}{cleaned}"
    return phone


__all__ = [
    "format_phone_number",
    "is_valid_date",
    "is_valid_email",
    "is_valid_name",
    "is_valid_phone",
]
