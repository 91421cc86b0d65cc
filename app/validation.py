"""
Parsing helpers for raw command options.

The parse_* and is_valid_* helpers never raise: callers branch on the
result and answer the user with a correction hint. The require_* helpers
raise ValidationRejectedError instead.
"""

from typing import Optional
from urllib.parse import urlsplit
from uuid import UUID

from app.errors import ValidationRejectedError
from app.models.restaurant import City

CITY_CODES = {
    "-r": City.RAMALLAH,
    "r": City.RAMALLAH,
    "-n": City.NABLUS,
    "n": City.NABLUS,
}

ALLOWED_URL_SCHEMES = ("http", "https")


def parse_city(value: Optional[str]) -> Optional[City]:
    """Map a city code (-r/R, -n/N) to a City, None when unrecognised"""
    if value is None:
        return None
    return CITY_CODES.get(value.strip().lower())


def is_valid_url(value: Optional[str]) -> bool:
    """True only for absolute http(s) URLs with a host"""
    if not value:
        return False
    candidate = value.strip()
    if not candidate or any(ch.isspace() for ch in candidate):
        return False
    try:
        parts = urlsplit(candidate)
        # Accessing port validates it
        parts.port
    except ValueError:
        return False
    return parts.scheme in ALLOWED_URL_SCHEMES and bool(parts.hostname)


def parse_restaurant_id(value: Optional[str]) -> Optional[UUID]:
    """Parse the id an autocomplete choice hands back"""
    if not value:
        return None
    try:
        return UUID(value.strip())
    except ValueError:
        return None


def require_name(value: Optional[str]) -> str:
    """Trimmed restaurant name; raises ValidationRejectedError when blank"""
    if not value or not value.strip():
        raise ValidationRejectedError("name", value)
    return value.strip()


def require_city(value: Optional[str]) -> City:
    """Like parse_city, but raises ValidationRejectedError"""
    city = parse_city(value)
    if city is None:
        raise ValidationRejectedError("city", value)
    return city


def require_url(value: Optional[str]) -> Optional[str]:
    """Trimmed URL or None when blank; raises ValidationRejectedError when malformed"""
    if value is None or not value.strip():
        return None
    if not is_valid_url(value):
        raise ValidationRejectedError("url", value)
    return value.strip()
