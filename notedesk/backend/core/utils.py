"""
Core Utilities.

Shared utility functions used across the backend.
All modules should import utilities from this module.
"""

from collections.abc import Iterable
from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the application should be timezone-naive
    and assumed to be UTC.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def normalize_tag_name(raw_name: str) -> str:
    """Trim surrounding whitespace from a user-supplied tag name."""
    return raw_name.strip()


def tag_key(name: str) -> str:
    """
    Case-insensitive identity key for a tag name.

    Two names with the same key resolve to the same tag for one owner.
    """
    return normalize_tag_name(name).lower()


def unique_tag_names(names: Iterable[str]) -> list[str]:
    """
    Trim names and drop case-insensitive duplicates, keeping first occurrence.

    Example:
        unique_tag_names([" Work", "work", "home"]) -> ["Work", "home"]
    """
    seen: set[str] = set()
    result: list[str] = []
    for raw in names:
        name = normalize_tag_name(raw)
        key = name.lower()
        if key in seen:
            continue
        seen.add(key)
        result.append(name)
    return result


def to_utc_naive(value: datetime | None) -> datetime | None:
    """Convert an aware datetime to naive UTC; naive values are assumed UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
