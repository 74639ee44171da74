"""
Search plan builder.

Turns a raw, untrusted SearchInput into an immutable SearchPlan. Geography,
dates and guest counts are rejected when invalid; pagination and radius are
quality-of-service parameters and are always clamped instead.
"""

import logging
import math
from datetime import date, datetime, timezone
from types import MappingProxyType
from typing import Any, Mapping, Optional

from staysearch.error_handling.errors import PlanErrorCode, SearchPlanValidationError
from staysearch.models import GeoPoint, SearchInput, SearchPlan


logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60
DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 20
DEFAULT_RADIUS_KM = 10.0
MIN_RADIUS_KM = 1.0
MAX_RADIUS_KM = 500.0
MIN_PAGE = 1
MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 100

LAT_MIN = -90.0
LAT_MAX = 90.0
LON_MIN = -180.0
LON_MAX = 180.0


def _to_float(value: Any) -> float:
    """Coerce a scalar to float; anything unusable becomes NaN."""
    if value is None or isinstance(value, bool):
        return math.nan
    try:
        return float(value)
    except (TypeError, ValueError, OverflowError):
        return math.nan


def parse_date(value: Any, field_name: str) -> datetime:
    """
    Parse a check-in or check-out value to an aware UTC datetime.

    Accepts ISO 8601 date or datetime strings and date/datetime objects.
    Naive values are taken as UTC.

    Args:
        value: Raw value from the request
        field_name: "checkIn" or "checkOut"

    Returns:
        Parsed datetime in UTC

    Raises:
        SearchPlanValidationError: INVALID_CHECK_IN / INVALID_CHECK_OUT
    """
    code = (
        PlanErrorCode.INVALID_CHECK_IN if field_name == "checkIn"
        else PlanErrorCode.INVALID_CHECK_OUT
    )

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            raise SearchPlanValidationError(
                code, f'{field_name} could not be parsed as a valid date: "{value}"'
            ) from None
    else:
        raise SearchPlanValidationError(
            code, f"{field_name} must be a non-empty ISO 8601 date string"
        )

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def clamp_int(
    value: Any,
    default: int,
    minimum: int,
    maximum: Optional[int] = None
) -> int:
    """Floor and clamp a numeric value; missing or non-finite gives the default."""
    if _is_int(value):
        result = max(minimum, value)
    else:
        n = _to_float(value)
        if not math.isfinite(n):
            return default
        result = max(minimum, math.floor(n))
    if maximum is not None:
        result = min(maximum, result)
    return result


def parse_geo(latitude: Any, longitude: Any) -> GeoPoint:
    """
    Validate the search center.

    Raises:
        SearchPlanValidationError: INVALID_LATITUDE / INVALID_LONGITUDE
    """
    lat = _to_float(latitude)
    lon = _to_float(longitude)
    if not math.isfinite(lat):
        raise SearchPlanValidationError(
            PlanErrorCode.INVALID_LATITUDE, "latitude must be a finite number"
        )
    if lat < LAT_MIN or lat > LAT_MAX:
        raise SearchPlanValidationError(
            PlanErrorCode.INVALID_LATITUDE,
            f"latitude must be between {LAT_MIN:g} and {LAT_MAX:g}"
        )
    if not math.isfinite(lon):
        raise SearchPlanValidationError(
            PlanErrorCode.INVALID_LONGITUDE, "longitude must be a finite number"
        )
    if lon < LON_MIN or lon > LON_MAX:
        raise SearchPlanValidationError(
            PlanErrorCode.INVALID_LONGITUDE,
            f"longitude must be between {LON_MIN:g} and {LON_MAX:g}"
        )
    return GeoPoint(lat=lat, lon=lon)


def parse_guest_count(value: Any, default: Optional[int] = None) -> int:
    """
    Validate a guest count.

    Counts must be finite, non-negative whole numbers. Numeric strings are
    accepted. Fractional counts such as 1.5 are rejected rather than floored,
    since the total is bound as an integer capacity filter.

    Raises:
        SearchPlanValidationError: INVALID_GUEST_COUNTS
    """
    if value is None and default is not None:
        return default
    if _is_int(value):
        if value < 0:
            raise SearchPlanValidationError(
                PlanErrorCode.INVALID_GUEST_COUNTS,
                "Adults and children must be non-negative whole numbers"
            )
        return value
    n = _to_float(value)
    if not math.isfinite(n) or n < 0 or not n.is_integer():
        raise SearchPlanValidationError(
            PlanErrorCode.INVALID_GUEST_COUNTS,
            "Adults and children must be non-negative whole numbers"
        )
    return int(n)


def extract_radius_km(filters: Optional[Mapping[str, Any]]) -> float:
    """Search radius from filters.radiusKm (or legacy filters.radius), clamped to [1, 500]."""
    if not isinstance(filters, Mapping):
        return DEFAULT_RADIUS_KM
    raw = filters.get("radiusKm")
    if raw is None:
        raw = filters.get("radius")
    if _is_int(raw):
        return float(min(MAX_RADIUS_KM, max(MIN_RADIUS_KM, raw)))
    n = _to_float(raw)
    if not math.isfinite(n):
        return DEFAULT_RADIUS_KM
    return min(MAX_RADIUS_KM, max(MIN_RADIUS_KM, n))


def build_search_plan(search_input: SearchInput) -> SearchPlan:
    """
    Build an immutable SearchPlan from raw SearchInput.

    Checks run in a fixed order: dates, stay length, guest counts, then
    geography. The first failing check raises.

    Args:
        search_input: Untrusted caller input

    Returns:
        Frozen SearchPlan

    Raises:
        SearchPlanValidationError: With the code of the first failed check
    """
    check_in_date = parse_date(search_input.check_in, "checkIn")
    check_out_date = parse_date(search_input.check_out, "checkOut")

    if check_in_date >= check_out_date:
        raise SearchPlanValidationError(
            PlanErrorCode.ARRIVAL_AFTER_DEPARTURE,
            "Arrival date must be before departure date"
        )

    nights = math.floor(
        (check_out_date - check_in_date).total_seconds() / SECONDS_PER_DAY
    )
    if nights < 1:
        raise SearchPlanValidationError(
            PlanErrorCode.STAY_TOO_SHORT, "Stay must be at least 1 night"
        )

    adults = parse_guest_count(search_input.adults)
    children = parse_guest_count(search_input.children, default=0)
    guests = adults + children
    if guests <= 0:
        raise SearchPlanValidationError(
            PlanErrorCode.NO_GUESTS, "Total guest count must be greater than 0"
        )

    page = clamp_int(search_input.page, DEFAULT_PAGE, MIN_PAGE)
    page_size = clamp_int(
        search_input.page_size, DEFAULT_PAGE_SIZE, MIN_PAGE_SIZE, MAX_PAGE_SIZE
    )

    geo = parse_geo(search_input.latitude, search_input.longitude)
    filters = search_input.filters if isinstance(search_input.filters, Mapping) else None
    radius = extract_radius_km(filters)

    plan = SearchPlan(
        check_in_date=check_in_date,
        check_out_date=check_out_date,
        nights=nights,
        adults=adults,
        children=children,
        guests=guests,
        page=page,
        page_size=page_size,
        geo=geo,
        radius=radius,
        has_children=children > 0,
        options=MappingProxyType(dict(filters) if filters else {}),
    )
    logger.debug(
        f"Built plan: nights={nights} guests={guests} geo=({geo.lat}, {geo.lon}) "
        f"radius={radius}km page={page} page_size={page_size}"
    )
    return plan
