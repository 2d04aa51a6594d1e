"""
Query-parameter parsing and validation helpers.

Raw parameters arrive as strings; each helper either returns a clean value
or raises a typed ``ValidationError`` carrying the matching error code.
"""
import re
from datetime import date
from typing import List, Optional, Tuple

from ingres.exceptions import (
    InvalidLimit,
    InvalidOffset,
    InvalidParameterType,
    InvalidRange,
    InvalidYear,
    MalformedIdentifier,
    ValidationError,
)
from ingres.utils.constants import MIN_YEAR, PARAMETER_TYPES

_INT_RE = re.compile(r"^\s*[+-]?\d+\s*$")


def parse_int(value: Optional[str]) -> Optional[int]:
    """Parse a strict integer string, returning None when it is not one."""
    if value is None:
        return None
    if isinstance(value, int):
        return value
    if not _INT_RE.match(value):
        return None
    return int(value)


def parse_region_id(raw: Optional[str], code: str = "INVALID_REGION_ID") -> Optional[int]:
    """Parse a single region id; a malformed value names the bad token."""
    if raw is None or raw == "":
        return None
    region_id = parse_int(raw)
    if region_id is None:
        raise MalformedIdentifier(raw, code=code)
    return region_id


def parse_region_ids(raw: str) -> List[int]:
    """
    Parse a comma-separated list of region ids.

    Raises:
        MalformedIdentifier: for the first token that is not an integer
    """
    ids = []
    for token in raw.split(","):
        region_id = parse_int(token)
        if region_id is None:
            raise MalformedIdentifier(token.strip())
        ids.append(region_id)
    return ids


def parse_csv_list(raw: Optional[str]) -> List[str]:
    """Split a comma-list, dropping blanks."""
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def parse_pagination(
    limit: Optional[str],
    offset: Optional[str],
    limits: Tuple[int, int]
) -> Tuple[int, int]:
    """
    Parse limit/offset against a (default, ceiling) pair.

    Limits above the ceiling are clamped, not rejected.
    """
    default_limit, max_limit = limits

    parsed_limit = default_limit if limit in (None, "") else parse_int(limit)
    if parsed_limit is None or parsed_limit <= 0:
        raise InvalidLimit(f"Invalid limit parameter. Must be a positive integer (max {max_limit})")

    parsed_offset = 0 if offset in (None, "") else parse_int(offset)
    if parsed_offset is None or parsed_offset < 0:
        raise InvalidOffset("Invalid offset parameter. Must be a non-negative integer")

    return min(parsed_limit, max_limit), parsed_offset


def parse_year(
    raw: Optional[str],
    code: str = "INVALID_YEAR",
    label: str = "year",
    max_year: Optional[int] = None
) -> Optional[int]:
    """Parse an optional year within MIN_YEAR..max_year (default: current year)."""
    if raw is None or raw == "":
        return None
    year = parse_int(raw)
    upper = max_year if max_year is not None else date.today().year
    if year is None or year < MIN_YEAR or year > upper:
        raise InvalidYear(f"Invalid {label} format or {label} out of range", code=code)
    return year


def validate_year_range(start_year: Optional[int], end_year: Optional[int]):
    """Inclusive bounds; start must not exceed end."""
    if start_year is not None and end_year is not None and start_year > end_year:
        raise InvalidRange("Start year cannot be greater than end year")


def validate_parameter_type(parameter_type: Optional[str]) -> Optional[str]:
    if parameter_type is None or parameter_type == "":
        return None
    if parameter_type not in PARAMETER_TYPES:
        raise InvalidParameterType(
            f"parameter_type must be one of: {', '.join(PARAMETER_TYPES)}"
        )
    return parameter_type


def require(value: Optional[str], name: str, code: str) -> str:
    """Reject a missing or blank required parameter."""
    if value is None or str(value).strip() == "":
        raise ValidationError(f"{name} parameter is required", code=code)
    return value
