from __future__ import annotations

import re

from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def require_non_empty(value: str, message: str) -> str:
    if not value or not value.strip():
        raise ValidationError(message)
    return value.strip()


def require_email(value: str) -> str:
    email = require_non_empty(value, "Please enter your email")
    if not _EMAIL_RE.match(email):
        raise ValidationError("Please enter a valid email")
    return email.lower()


def require_min_length(value: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"Password must be at least {min_len} characters")
    return value
