"""
Search routes for property search.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional

from staysearch.api.schemas import LocationResponse, SearchRequest, SearchResponse
from staysearch.error_handling.errors import ErrorCategory, SearchError
from staysearch.geocoding import ReverseGeocoder
from staysearch.pipeline import SearchPipeline

logger = logging.getLogger(__name__)

router = APIRouter()

_pipeline: Optional[SearchPipeline] = None
_geocoder: Optional[ReverseGeocoder] = None


def get_search_pipeline() -> SearchPipeline:
    """Shared pipeline with the default stages"""
    global _pipeline
    if _pipeline is None:
        _pipeline = SearchPipeline()
    return _pipeline


def get_reverse_geocoder() -> ReverseGeocoder:
    """Shared reverse geocoder; 503 when no API key is configured"""
    global _geocoder
    if _geocoder is None:
        try:
            _geocoder = ReverseGeocoder()
        except ValueError as e:
            logger.warning(f"Reverse geocoding unavailable: {e}")
            raise HTTPException(status_code=503, detail="Reverse geocoding is not configured")
    return _geocoder


async def close_reverse_geocoder():
    """Close the shared geocoder session, if one was opened"""
    global _geocoder
    if _geocoder is not None:
        await _geocoder.close()
        _geocoder = None


def _status_for(error: SearchError) -> int:
    if error.category is ErrorCategory.CLIENT:
        return 400
    return 503


@router.post("/search", response_model=SearchResponse)
async def search_properties(
    request: SearchRequest,
    pipeline: SearchPipeline = Depends(get_search_pipeline),
):
    """
    Search properties around a point for a stay window.

    1. Builds and validates the search plan (400 on invalid input)
    2. Resolves candidates from the property store (503 when unavailable)
    3. Runs availability, stay rules, pricing and ranking
    4. Returns the requested page with pagination metadata
    """
    try:
        result = await pipeline.run(request.to_search_input())
    except SearchError as e:
        status = _status_for(e)
        if status >= 500:
            logger.error(f"Search failed: {type(e).__name__}: {e}")
        raise HTTPException(status_code=status, detail=e.to_dict())
    except Exception as e:
        logger.exception(f"Search failed: {e}")
        raise HTTPException(status_code=500, detail="Search failed")

    logger.info(
        f"Returning {len(result.properties)} of {result.pagination.total} properties "
        f"(page {result.pagination.page}/{result.pagination.total_pages})"
    )
    return result.to_dict()


@router.get("/search/location", response_model=LocationResponse)
async def reverse_geocode(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    geocoder: ReverseGeocoder = Depends(get_reverse_geocoder),
):
    """
    Resolve a coordinate to a "City, Country" label.

    Args:
        lat: Latitude in decimal degrees
        lon: Longitude in decimal degrees

    Returns:
        The coordinate with its place label
    """
    try:
        location = await geocoder.reverse(lat, lon)
    except SearchError as e:
        logger.error(f"Reverse geocoding failed: {e}")
        raise HTTPException(status_code=_status_for(e), detail=e.to_dict())
    return {"lat": lat, "lon": lon, "location": location}
