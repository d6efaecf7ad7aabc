# keep/schemas/common.py
from datetime import timezone


def sanitize(value: str) -> str:
    """Trim and drop angle brackets from user-entered text."""
    return value.strip().replace("<", "").replace(">", "")


def required_text(value: str) -> str:
    value = sanitize(value)
    if not value:
        raise ValueError("field cannot be empty")
    return value


def optional_text(value: str | None) -> str | None:
    if value is None:
        return None
    value = sanitize(value)
    return value or None


def to_utc(value):
    """Normalize a datetime to aware UTC; naive values are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
