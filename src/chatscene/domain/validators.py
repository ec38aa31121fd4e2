"""Pure validators for registration input: name and birth date. No I/O."""

from __future__ import annotations

import re
from datetime import date, datetime

# Name: non-empty, reasonable length, allows letters spaces hyphens apostrophes
NAME_RE = re.compile(r"^[^\W\d_][\w\s\-']{0,119}$", re.UNICODE)
BIRTH_DATE_FORMATS = ("%Y-%m-%d", "%d.%m.%Y", "%d/%m/%Y")


def validate_name(value: str) -> tuple[bool, str]:
    """Return (is_valid, error_message)."""
    v = value.strip()
    if not v:
        return False, "Name is required."
    if v.startswith("/"):
        return False, "Please enter your name, not a command."
    if not NAME_RE.match(v):
        return False, "Please enter a valid name."
    return True, ""


def parse_birth_date(value: str) -> date | None:
    """Parse a birth date in one of the accepted formats, or None."""
    v = value.strip()
    for fmt in BIRTH_DATE_FORMATS:
        try:
            return datetime.strptime(v, fmt).date()
        except ValueError:
            continue
    return None


def validate_birth_date(value: str, today: date | None = None) -> tuple[bool, str]:
    """Return (is_valid, error_message). Dates in the future are rejected."""
    v = value.strip()
    if not v:
        return False, "Birth date is required."
    parsed = parse_birth_date(v)
    if parsed is None:
        return False, "Please enter a date like 1990-04-23 or 23.04.1990."
    if parsed > (today or date.today()):
        return False, "Birth date cannot be in the future."
    return True, ""
