"""
Data models for stay search.

This module defines the request, plan and property structures threaded
through the search pipeline. Property records form a widening chain:
CandidateProperty -> AvailableProperty -> PricedProperty, each stage only
adding fields.
"""

from dataclasses import dataclass, field, fields
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional


@dataclass
class SearchInput:
    """Raw, untrusted search request as supplied by a caller.

    No field is validated here; the plan builder is the only place that
    interprets these values.

    Attributes:
        latitude: Search center latitude in decimal degrees
        longitude: Search center longitude in decimal degrees
        check_in: Arrival date string (ISO 8601)
        check_out: Departure date string (ISO 8601)
        adults: Adult guest count
        children: Child guest count (optional)
        page: Requested page number (optional)
        page_size: Requested page size (optional)
        filters: Free-form filter map (radiusKm, resolver tuning knobs, ...)
    """
    latitude: Any
    longitude: Any
    check_in: Any
    check_out: Any
    adults: Any
    children: Any = None
    page: Any = None
    page_size: Any = None
    filters: Optional[Mapping[str, Any]] = None

    # Accepted spellings for each field when building from a mapping
    _ALIASES = {
        "latitude": ("latitude", "lat"),
        "longitude": ("longitude", "lon", "lng"),
        "check_in": ("checkIn", "check_in"),
        "check_out": ("checkOut", "check_out"),
        "adults": ("adults",),
        "children": ("children",),
        "page": ("page",),
        "page_size": ("pageSize", "page_size"),
        "filters": ("filters",),
    }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'SearchInput':
        """Create SearchInput from a request mapping.

        Accepts camelCase keys as sent by API clients as well as the
        snake_case attribute names. Missing keys become None.

        Args:
            data: Mapping with request values

        Returns:
            SearchInput instance
        """
        values = {}
        for name, keys in cls._ALIASES.items():
            values[name] = next((data[k] for k in keys if k in data), None)
        return cls(**values)


@dataclass(frozen=True)
class GeoPoint:
    """Validated search center."""
    lat: float
    lon: float


@dataclass(frozen=True)
class SearchPlan:
    """Immutable, validated execution plan built from a SearchInput.

    Constructed once per search by the plan builder and shared read-only
    by every stage. `options` is a read-only shallow copy of the input
    filter map.

    Attributes:
        check_in_date: Parsed arrival instant (UTC)
        check_out_date: Parsed departure instant (UTC), after check_in_date
        nights: Whole nights between the two dates, at least 1
        adults: Adult guest count
        children: Child guest count
        guests: adults + children, greater than 0
        page: Page number, at least 1
        page_size: Page size in [1, 100]
        geo: Search center
        radius: Search radius in kilometers, in [1, 500]
        has_children: True when children > 0
        options: Read-only resolver tuning map
    """
    check_in_date: datetime
    check_out_date: datetime
    nights: int
    adults: int
    children: int
    guests: int
    page: int
    page_size: int
    geo: GeoPoint
    radius: float
    has_children: bool
    options: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def radius_meters(self) -> float:
        return self.radius * 1000.0


@dataclass
class CandidateProperty:
    """Property matching capacity and proximity filters.

    Carries no availability or pricing information yet.
    """
    id: str
    name: str
    property_type: Optional[str] = None
    location: Optional[str] = None
    distance_meters: Optional[str] = None
    destination_id: Optional[str] = None
    amenities: Optional[List[str]] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    max_guests: Optional[int] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    # JSON key for each attribute; attributes not listed use their own name
    _JSON_KEYS = {
        "property_type": "propertyType",
        "destination_id": "destinationId",
        "max_guests": "maxGuests",
        "unit_id": "unitId",
        "total_price": "totalPrice",
        "price_per_night": "pricePerNight",
    }

    def to_dict(self) -> dict:
        """Convert property to a JSON-serializable dictionary.

        None values are omitted; extra source fields are merged at the
        top level without overriding known fields.

        Returns:
            Dictionary representation with camelCase keys
        """
        data = {}
        for f in fields(self):
            if f.name == "extra":
                continue
            value = getattr(self, f.name)
            if value is None:
                continue
            data[self._JSON_KEYS.get(f.name, f.name)] = value
        for key, value in self.extra.items():
            data.setdefault(key, value)
        return data

    def _base_values(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(CandidateProperty)}


@dataclass
class AvailableProperty(CandidateProperty):
    """Candidate confirmed available for the requested dates."""
    available: bool = True
    unit_id: Optional[str] = None

    @classmethod
    def from_candidate(
        cls,
        candidate: CandidateProperty,
        unit_id: Optional[str] = None
    ) -> 'AvailableProperty':
        """Widen a candidate into an available property (copies extra)."""
        values = candidate._base_values()
        values["extra"] = dict(candidate.extra)
        return cls(**values, available=True, unit_id=unit_id)


@dataclass
class PricedProperty(AvailableProperty):
    """Available property with pricing attached."""
    total_price: Optional[float] = None
    currency: Optional[str] = None
    price_per_night: Optional[float] = None
    breakdown: Optional[Dict[str, float]] = None

    @classmethod
    def from_available(
        cls,
        available: AvailableProperty,
        total_price: Optional[float] = None,
        currency: Optional[str] = None,
        price_per_night: Optional[float] = None,
        breakdown: Optional[Dict[str, float]] = None
    ) -> 'PricedProperty':
        """Widen an available property with pricing fields."""
        values = available._base_values()
        values["extra"] = dict(available.extra)
        return cls(
            **values,
            available=available.available,
            unit_id=available.unit_id,
            total_price=total_price,
            currency=currency,
            price_per_night=price_per_night,
            breakdown=dict(breakdown) if breakdown is not None else None,
        )


@dataclass(frozen=True)
class PaginationInfo:
    """Pagination metadata for a result page."""
    page: int
    page_size: int
    total: int
    total_pages: int

    def to_dict(self) -> dict:
        return {
            "page": self.page,
            "pageSize": self.page_size,
            "total": self.total,
            "totalPages": self.total_pages,
        }


@dataclass(frozen=True)
class SearchResult:
    """Final read-only view: one page of properties plus pagination."""
    properties: List[PricedProperty]
    pagination: PaginationInfo

    def to_dict(self) -> dict:
        """Convert result to the JSON response shape.

        Returns:
            Dictionary with `properties` and `pagination` keys
        """
        return {
            "properties": [p.to_dict() for p in self.properties],
            "pagination": self.pagination.to_dict(),
        }
