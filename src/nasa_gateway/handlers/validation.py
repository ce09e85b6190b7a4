"""Shared validators for raw query and path parameters.

Every validator raises ``ValidationError`` (HTTP 400) with a message naming
the offending field and, where there is one, the set of valid values.
"""

import re
from datetime import date, datetime

from nasa_gateway.errors import ValidationError

DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)

VALID_ROVERS = ("curiosity", "opportunity", "spirit", "perseverance", "ingenuity")
VALID_MEDIA_TYPES = ("image", "video", "audio")
VALID_EPIC_TYPES = ("natural", "enhanced")

MAX_NEO_FEED_DAYS = 7


def require(value: str | None, message: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(message)
    return value.strip()


def validate_date(value: str, message: str = "Dates must be in YYYY-MM-DD format") -> str:
    if not DATE_PATTERN.fullmatch(value):
        raise ValidationError(message)
    return value


def parse_date(value: str, message: str = "Dates must be in YYYY-MM-DD format") -> date:
    """Check the format and parse into a calendar date."""
    validate_date(value, message)
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as e:
        raise ValidationError(f"Invalid calendar date: {value}") from e


def validate_choice(value: str, options: tuple[str, ...], field: str) -> str:
    """Check membership in a fixed set (case-insensitive).

    Returns:
        The value normalized to lower case
    """
    normalized = value.strip().lower()
    if normalized not in options:
        raise ValidationError(f"Invalid {field}. Valid options: {', '.join(options)}")
    return normalized


def parse_int(
    value: str | None,
    message: str,
    default: int | None = None,
    minimum: int | None = None,
    maximum: int | None = None,
) -> int:
    """Parse an integer parameter and check its bounds.

    Args:
        value: Raw parameter, or None when absent
        message: Error message used for every failure
        default: Value used when the parameter is absent
        minimum: Smallest accepted value (inclusive)
        maximum: Largest accepted value (inclusive)

    Returns:
        The parsed integer

    Raises:
        ValidationError: Missing without a default, not an integer, or out of range
    """
    if value is None or value == "":
        if default is None:
            raise ValidationError(message)
        return default

    try:
        number = int(value.strip())
    except ValueError as e:
        raise ValidationError(message) from e

    if minimum is not None and number < minimum:
        raise ValidationError(message)
    if maximum is not None and number > maximum:
        raise ValidationError(message)
    return number


def validate_rover(rover: str) -> str:
    return validate_choice(rover, VALID_ROVERS, "rover")


def validate_epic_type(image_type: str | None) -> str:
    return validate_choice(image_type or "natural", VALID_EPIC_TYPES, "type")
