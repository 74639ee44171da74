"""
Tests for the search API routes.

The pipeline and geocoder dependencies are overridden so no database or
network access is needed.
"""

import asyncio
import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock

from staysearch.api.main import app
from staysearch.api.routers.search import get_reverse_geocoder, get_search_pipeline
from staysearch.config.search_config import GeocodingConfig
from staysearch.error_handling.errors import CandidateStoreUnavailable, GeocodingError
from staysearch.geocoding import ReverseGeocoder
from staysearch.models import CandidateProperty
from staysearch.pipeline import SearchPipeline


REQUEST = {
    "latitude": 52.3676,
    "longitude": 4.9041,
    "checkIn": "2026-01-12",
    "checkOut": "2026-01-14",
    "adults": 2,
}


def candidates(count):
    return [
        CandidateProperty(id=str(i).zfill(3), name=f"Stay {i}", location="Amsterdam, Netherlands")
        for i in range(count)
    ]


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


def use_pipeline(pipeline):
    app.dependency_overrides[get_search_pipeline] = lambda: pipeline


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_search_returns_page(client):
    use_pipeline(SearchPipeline(candidate=lambda plan, previous: candidates(45)))

    response = client.post("/api/search", json={**REQUEST, "page": 3, "pageSize": 20})

    assert response.status_code == 200
    data = response.json()
    assert len(data["properties"]) == 5
    assert data["properties"][0]["id"] == "040"
    assert data["properties"][0]["location"] == "Amsterdam, Netherlands"
    assert data["pagination"] == {"page": 3, "pageSize": 20, "total": 45, "totalPages": 3}


def test_filters_reach_the_plan(client):
    seen = {}

    def capture(plan, previous):
        seen["plan"] = plan
        return []

    use_pipeline(SearchPipeline(candidate=capture))
    response = client.post(
        "/api/search",
        json={**REQUEST, "filters": {"radiusKm": 25, "capacityColumn": "max_guests", "custom": 1}},
    )

    assert response.status_code == 200
    assert seen["plan"].radius == 25
    assert seen["plan"].options["capacityColumn"] == "max_guests"
    assert seen["plan"].options["custom"] == 1


@pytest.mark.parametrize("overrides,code", [
    ({"latitude": 132}, "INVALID_LATITUDE"),
    ({"longitude": "west"}, "INVALID_LONGITUDE"),
    ({"checkOut": "2026-01-12"}, "ARRIVAL_AFTER_DEPARTURE"),
    ({"checkIn": None}, "INVALID_CHECK_IN"),
    ({"checkIn": 20260112}, "INVALID_CHECK_IN"),
    ({"pageSize": 10**400, "latitude": 10**400}, "INVALID_LATITUDE"),
    ({"adults": 0}, "NO_GUESTS"),
    ({"adults": -2}, "INVALID_GUEST_COUNTS"),
])
def test_validation_errors_are_400(client, overrides, code):
    candidate_stage = AsyncMock(return_value=[])
    use_pipeline(SearchPipeline(candidate=candidate_stage))

    response = client.post("/api/search", json={**REQUEST, **overrides})

    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["code"] == code
    assert detail["category"] == "client_error"
    candidate_stage.assert_not_called()


def test_extreme_page_size_clamped(client):
    use_pipeline(SearchPipeline(candidate=lambda plan, previous: candidates(3)))

    response = client.post("/api/search", json={**REQUEST, "pageSize": 10**400})

    assert response.status_code == 200
    assert response.json()["pagination"]["pageSize"] == 100


def test_non_object_filters_ignored(client):
    use_pipeline(SearchPipeline(candidate=lambda plan, previous: candidates(1)))

    response = client.post("/api/search", json={**REQUEST, "filters": "radiusKm=25"})

    assert response.status_code == 200


def test_store_unavailable_is_503(client):
    use_pipeline(SearchPipeline(
        candidate=AsyncMock(side_effect=CandidateStoreUnavailable("Property store unavailable"))
    ))

    response = client.post("/api/search", json=REQUEST)

    assert response.status_code == 503
    assert response.json()["detail"]["category"] == "infrastructure_error"


def test_unexpected_stage_error_is_500(client):
    use_pipeline(SearchPipeline(ranking=AsyncMock(side_effect=KeyError("score")),
                                candidate=lambda plan, previous: candidates(2)))

    response = client.post("/api/search", json=REQUEST)

    assert response.status_code == 500
    assert response.json()["detail"] == "Search failed"


def test_location_lookup(client):
    geocoder = AsyncMock()
    geocoder.reverse.return_value = "Amsterdam, Netherlands"
    app.dependency_overrides[get_reverse_geocoder] = lambda: geocoder

    response = client.get("/api/search/location", params={"lat": 52.3676, "lon": 4.9041})

    assert response.status_code == 200
    assert response.json() == {"lat": 52.3676, "lon": 4.9041, "location": "Amsterdam, Netherlands"}
    geocoder.reverse.assert_awaited_once_with(52.3676, 4.9041)


def test_location_lookup_failure_is_503(client):
    geocoder = AsyncMock()
    geocoder.reverse.side_effect = GeocodingError("Reverse geocode request failed: 500")
    app.dependency_overrides[get_reverse_geocoder] = lambda: geocoder

    response = client.get("/api/search/location", params={"lat": 52.3676, "lon": 4.9041})

    assert response.status_code == 503


def test_location_lookup_rejects_out_of_range(client):
    app.dependency_overrides[get_reverse_geocoder] = lambda: AsyncMock()
    response = client.get("/api/search/location", params={"lat": 132, "lon": 4.9})
    assert response.status_code == 422


class TimingOutSession:
    closed = False

    def get(self, url, params=None):
        raise asyncio.TimeoutError()


def test_location_lookup_timeout_is_503(client):
    geocoder = ReverseGeocoder(GeocodingConfig(api_key="test-key"))
    geocoder._session = TimingOutSession()
    app.dependency_overrides[get_reverse_geocoder] = lambda: geocoder

    response = client.get("/api/search/location", params={"lat": 52.3676, "lon": 4.9041})

    assert response.status_code == 503
    assert response.json()["detail"]["code"] == "GeocodingError"
