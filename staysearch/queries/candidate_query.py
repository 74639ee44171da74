"""
Candidate query: fetch property candidates from the property store.

Applies:
- Capacity filter: {capacity_column} >= plan.guests when options.capacityColumn
  names an allow-listed column ('max_guests', 'maximum_guests', 'capacity')
- PostGIS spatial filter: ST_DWithin(geo_column, center, radius_meters) with
  the distance projected as distance_meters (options.geoColumn: 'location'
  by default, or 'geo')
- Hard limit: the configured cap, overridable per request through
  options.candidateHardLimit but never above the configured ceiling

Identifiers only ever come from the allow-lists below. Every scalar
(guests, coordinates, radius, limit) is a bound $n parameter.

Schema: at minimum id, name and the geo column. Optional: city, country,
capacity column, destination_id.

Spatial index:
    CREATE INDEX idx_properties_location ON properties USING GIST (location);
"""

import logging
import math
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Mapping, Optional, Sequence, Tuple

import asyncpg

from staysearch import db
from staysearch.config import get_search_settings
from staysearch.config.search_config import CandidateConfig
from staysearch.error_handling.errors import CandidateRowError, CandidateStoreUnavailable
from staysearch.models import CandidateProperty, SearchPlan


logger = logging.getLogger(__name__)

CAPACITY_COLUMNS = ("max_guests", "maximum_guests", "capacity")
GEO_COLUMNS = ("location", "geo")
DEFAULT_GEO_COLUMN = "location"

# Capacity columns are int4; larger guest totals are bound at the column maximum
MAX_BOUND_GUESTS = 2**31 - 1

FetchFn = Callable[..., Awaitable[Sequence[Mapping[str, Any]]]]

STORE_ERRORS = (
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    OSError,
    db.DatabaseNotReadyError,
)


@dataclass(frozen=True)
class CandidateQuery:
    """SQL text plus its bound values, in placeholder order."""
    text: str
    values: Tuple[Any, ...]
    limit: int
    capacity_column: Optional[str]
    geo_column: str


def resolve_candidate_limit(plan: SearchPlan, config: Optional[CandidateConfig] = None) -> int:
    """
    Effective row cap for this plan.

    A positive finite numeric options.candidateHardLimit overrides the
    default, floored and clamped to the ceiling. Anything else is ignored.
    """
    config = config or get_search_settings().candidate
    ceiling = config.hard_limit_max
    override = plan.options.get("candidateHardLimit")
    if isinstance(override, bool):
        return config.effective_hard_limit
    if isinstance(override, int) and override >= 1:
        return min(override, ceiling)
    if isinstance(override, float) and math.isfinite(override) and override >= 1:
        return min(math.floor(override), ceiling)
    return config.effective_hard_limit


def get_capacity_column(plan: SearchPlan) -> Optional[str]:
    """Allow-listed capacity column from options, or None (no capacity filter)."""
    column = plan.options.get("capacityColumn")
    if isinstance(column, str) and column in CAPACITY_COLUMNS:
        return column
    return None


def get_geo_column(plan: SearchPlan) -> str:
    """Allow-listed geo column from options, defaulting to 'location'."""
    column = plan.options.get("geoColumn")
    if isinstance(column, str) and column in GEO_COLUMNS:
        return column
    return DEFAULT_GEO_COLUMN


def build_candidate_sql(plan: SearchPlan, config: Optional[CandidateConfig] = None) -> CandidateQuery:
    """
    Assemble the candidate query for a plan.

    The query shape varies only through structural checks on the plan;
    no request string is ever spliced into the text.

    Args:
        plan: Validated search plan
        config: Row cap configuration (defaults to current settings)

    Returns:
        CandidateQuery with text and bound values
    """
    conditions: List[str] = []
    values: List[Any] = []
    select_parts = ["p.id", "p.name", "p.city", "p.country"]

    # Capacity
    capacity_column = get_capacity_column(plan)
    if capacity_column:
        values.append(min(plan.guests, MAX_BOUND_GUESTS))
        conditions.append(f"p.{capacity_column} >= ${len(values)}")
        if capacity_column == "max_guests":
            select_parts.append("p.max_guests")
        else:
            select_parts.append(f"p.{capacity_column} AS max_guests")

    # Geo
    geo_column = get_geo_column(plan)
    with_clause = ""
    from_clause = "FROM properties p"
    if plan.geo is not None:
        values.append(plan.geo.lon)
        lon_param = len(values)
        values.append(plan.geo.lat)
        lat_param = len(values)
        with_clause = (
            "WITH params AS (\n"
            f"  SELECT ST_SetSRID(ST_MakePoint(${lon_param}, ${lat_param}), 4326)::geography AS center\n"
            ")\n"
        )
        from_clause = "FROM properties p, params"

        values.append(plan.radius_meters)
        conditions.append(
            f"ST_DWithin(p.{geo_column}::geography, params.center, ${len(values)})"
        )
        select_parts.append(
            f"ST_Distance(p.{geo_column}::geography, params.center) AS distance_meters"
        )

    # Limit
    limit = resolve_candidate_limit(plan, config)
    values.append(limit)
    limit_param = len(values)

    where_clause = " AND ".join(conditions) if conditions else "TRUE"
    text = (
        f"{with_clause}"
        f"SELECT {', '.join(select_parts)}\n"
        f"{from_clause}\n"
        f"WHERE {where_clause}\n"
        f"ORDER BY p.id\n"
        f"LIMIT ${limit_param}"
    )
    return CandidateQuery(
        text=text,
        values=tuple(values),
        limit=limit,
        capacity_column=capacity_column,
        geo_column=geo_column,
    )


def format_distance(value: Any) -> Optional[str]:
    """Render a distance in meters as e.g. '1234 Meters' (floored)."""
    if value is None:
        return None
    meters = float(value)
    if not math.isfinite(meters) or meters < 0:
        raise ValueError(f"invalid distance {value!r}")
    return f"{math.floor(meters)} Meters"


def _parse_capacity(value: Any) -> Optional[int]:
    """Whole-number guest capacity; fractional or non-finite values are rejected."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f"invalid max_guests {value!r}")
    if isinstance(value, int):
        return value
    n = float(value)
    if not math.isfinite(n) or not n.is_integer():
        raise ValueError(f"invalid max_guests {value!r}")
    return int(n)


def map_row_to_candidate(row: Mapping[str, Any]) -> CandidateProperty:
    """
    Map one store row to a CandidateProperty.

    Raises:
        CandidateRowError: If the row lacks an id or carries unparseable
            distance or capacity values
    """
    data = dict(row)
    raw_id = data.get("id")
    if raw_id is None:
        raise CandidateRowError("Candidate row is missing an id")
    row_id = str(raw_id)

    try:
        distance = format_distance(data.get("distance_meters"))
        max_guests = _parse_capacity(data.get("max_guests"))
    except (TypeError, ValueError, OverflowError) as e:
        raise CandidateRowError(
            f"Malformed candidate row {row_id}: {e}", row_id=row_id
        ) from e

    location = ", ".join(str(part) for part in (data.get("city"), data.get("country")) if part)
    destination_id = data.get("destination_id")

    return CandidateProperty(
        id=row_id,
        name=data.get("name") or "",
        location=location or None,
        distance_meters=distance,
        destination_id=str(destination_id) if destination_id is not None else None,
        max_guests=max_guests,
    )


async def run_candidate_query(
    plan: SearchPlan,
    fetch: Optional[FetchFn] = None,
    config: Optional[CandidateConfig] = None
) -> List[CandidateProperty]:
    """
    Run the candidate query: capacity, spatial filter and hard limit.

    No retry is attempted here; store failures surface as
    CandidateStoreUnavailable.

    Args:
        plan: Validated search plan
        fetch: Coroutine `(text, *values) -> rows` (defaults to db.fetch)
        config: Row cap configuration (defaults to current settings)

    Returns:
        Candidates ordered by id ascending, at most the effective cap

    Raises:
        CandidateStoreUnavailable: Store unreachable or query failed
        CandidateRowError: A row could not be mapped
    """
    query = build_candidate_sql(plan, config)
    fetch = fetch or db.fetch

    started = time.perf_counter()
    try:
        rows = await fetch(query.text, *query.values)
    except STORE_ERRORS as e:
        logger.error(f"Candidate query failed: {type(e).__name__}: {e}")
        raise CandidateStoreUnavailable(f"Property store unavailable: {e}", cause=e) from e
    elapsed_ms = (time.perf_counter() - started) * 1000

    logger.info(
        f"Candidate query returned {len(rows)} rows in {elapsed_ms:.0f}ms "
        f"(limit={query.limit}, capacity_column={query.capacity_column})"
    )
    return [map_row_to_candidate(row) for row in rows[:query.limit]]
