"""Duration parsing for cache TTLs and rate-limit windows."""

import re

ISO8601_DURATION = re.compile(r"^P(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+(?:\.\d+)?)S)?)?$")
HUMAN_DURATION_PART = re.compile(r"(\d+)\s*([smhd])")

UNIT_SECONDS = {
    "s": 1,
    "m": 60,
    "h": 3600,
    "d": 86400,
}


class DurationParseError(ValueError):
    """Raised when a duration string cannot be parsed."""

    pass


def parse_duration(duration_str: str) -> int:
    """
    Parse a duration string to seconds.

    Supports both human-readable formats and ISO-8601 durations:
    - Human-readable: "30s", "1m", "1h", "2d", combinations like "1h30m"
    - ISO-8601: "PT30S", "PT1M", "PT1H", "P2D"

    Args:
        duration_str: Duration string to parse

    Returns:
        Duration in seconds

    Raises:
        DurationParseError: If the duration string is invalid or zero

    Examples:
        >>> parse_duration("1h")
        3600
        >>> parse_duration("PT1M")
        60
    """
    duration_str = str(duration_str).strip()

    if not duration_str:
        raise DurationParseError("Duration string cannot be empty")

    if duration_str.upper().startswith("P"):
        total_seconds = _parse_iso8601_duration(duration_str)
    else:
        total_seconds = _parse_human_readable_duration(duration_str)

    if total_seconds == 0:
        raise DurationParseError(f"Duration cannot be zero: '{duration_str}'")

    return total_seconds


def _parse_iso8601_duration(duration_str: str) -> int:
    """Parse P[n]D / PT[n]H[n]M[n]S durations."""
    match = ISO8601_DURATION.match(duration_str.upper())
    if not match:
        raise DurationParseError(
            f"Invalid ISO-8601 duration format: '{duration_str}'. "
            "Expected format like 'P1D', 'PT1H', 'PT1M', or 'PT30S'"
        )

    days, hours, minutes, seconds = match.groups()

    total_seconds = 0
    if days:
        total_seconds += int(days) * UNIT_SECONDS["d"]
    if hours:
        total_seconds += int(hours) * UNIT_SECONDS["h"]
    if minutes:
        total_seconds += int(minutes) * UNIT_SECONDS["m"]
    if seconds:
        total_seconds += int(float(seconds))
    return total_seconds


def _parse_human_readable_duration(duration_str: str) -> int:
    """Parse "30s", "1h30m" style durations."""
    matches = HUMAN_DURATION_PART.findall(duration_str.lower())

    if not matches:
        raise DurationParseError(
            f"Invalid duration format: '{duration_str}'. "
            "Expected format like '30s', '1m', '1h', '2d', or combinations like '1h30m'"
        )

    # Reject leftovers such as "1h30x"
    parsed_str = "".join(f"{num}{unit}" for num, unit in matches)
    cleaned_input = re.sub(r"\s+", "", duration_str.lower())
    if parsed_str != cleaned_input:
        raise DurationParseError(
            f"Invalid characters in duration: '{duration_str}'. "
            "Use only digits and units: s (seconds), m (minutes), h (hours), d (days)"
        )

    return sum(int(num) * UNIT_SECONDS[unit] for num, unit in matches)


def validate_duration_range(
    duration_seconds: int,
    min_seconds: int,
    max_seconds: int,
    label: str = "Duration",
) -> None:
    """
    Validate that a duration is within an acceptable range.

    Args:
        duration_seconds: Duration in seconds to validate
        min_seconds: Minimum allowed duration
        max_seconds: Maximum allowed duration
        label: Name of the setting, used in error messages

    Raises:
        DurationParseError: If duration is outside the valid range
    """
    if duration_seconds < min_seconds:
        raise DurationParseError(
            f"{label} too short: {_seconds_to_human_readable(duration_seconds)}. "
            f"Minimum is {_seconds_to_human_readable(min_seconds)}."
        )

    if duration_seconds > max_seconds:
        raise DurationParseError(
            f"{label} too long: {_seconds_to_human_readable(duration_seconds)}. "
            f"Maximum is {_seconds_to_human_readable(max_seconds)}."
        )


def _seconds_to_human_readable(seconds: int) -> str:
    """Convert seconds to e.g. "15 minutes", "1 hour", "2 days"."""
    if seconds < 60:
        return f"{seconds} second{'s' if seconds != 1 else ''}"
    elif seconds < 3600:
        minutes = seconds // 60
        return f"{minutes} minute{'s' if minutes != 1 else ''}"
    elif seconds < 86400:
        hours = seconds // 3600
        return f"{hours} hour{'s' if hours != 1 else ''}"
    else:
        days = seconds // 86400
        return f"{days} day{'s' if days != 1 else ''}"
