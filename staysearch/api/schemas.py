"""Request/response models for the search API"""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Union

from staysearch.models import SearchInput

# Scalars are accepted loosely so the plan builder, not the transport,
# decides which values are invalid and with which error code.
Scalar = Union[int, float, str, None]


class SearchRequest(BaseModel):
    """Search request body"""
    latitude: Scalar = None
    longitude: Scalar = None
    check_in: Scalar = Field(None, alias="checkIn")
    check_out: Scalar = Field(None, alias="checkOut")
    adults: Scalar = None
    children: Scalar = None
    page: Scalar = None
    page_size: Scalar = Field(None, alias="pageSize")
    filters: Any = None

    class Config:
        populate_by_name = True

    def to_search_input(self) -> SearchInput:
        return SearchInput(
            latitude=self.latitude,
            longitude=self.longitude,
            check_in=self.check_in,
            check_out=self.check_out,
            adults=self.adults,
            children=self.children,
            page=self.page,
            page_size=self.page_size,
            filters=self.filters,
        )


class PaginationResponse(BaseModel):
    """Pagination metadata"""
    page: int
    pageSize: int
    total: int
    totalPages: int


class SearchResponse(BaseModel):
    """One page of properties with pagination metadata"""
    properties: List[Dict[str, Any]]
    pagination: PaginationResponse


class LocationResponse(BaseModel):
    """Reverse-geocoded label for a coordinate"""
    lat: float
    lon: float
    location: str
