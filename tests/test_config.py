"""Tests for configuration module."""

from staysearch.config import (
    SEARCH_CONFIG,
    SearchSettings,
    DatabaseConfig,
    CandidateConfig,
    GeocodingConfig,
    get_search_settings,
)


def test_search_config_exists():
    """Test that SEARCH_CONFIG dictionary is properly defined."""
    assert isinstance(SEARCH_CONFIG, dict)
    assert "log_level" in SEARCH_CONFIG
    assert "database" in SEARCH_CONFIG
    assert "candidate" in SEARCH_CONFIG
    assert "geocoding" in SEARCH_CONFIG


def test_search_config_defaults():
    """Test that the dataclass defaults match the documented values."""
    candidate = CandidateConfig()
    assert candidate.hard_limit == 1000
    assert candidate.hard_limit_max == 3000

    database = DatabaseConfig()
    assert database.min_pool_size == 2
    assert database.max_pool_size == 20
    assert database.idle_timeout_seconds == 30.0
    assert database.connect_timeout_seconds == 5.0

    geocoding = GeocodingConfig()
    assert geocoding.api_key is None
    assert geocoding.base_url == "https://geocode.maps.co/reverse"


def test_get_search_settings():
    """Test that get_search_settings returns proper SearchSettings object."""
    settings = get_search_settings()

    assert isinstance(settings, SearchSettings)
    assert isinstance(settings.database, DatabaseConfig)
    assert isinstance(settings.candidate, CandidateConfig)
    assert isinstance(settings.geocoding, GeocodingConfig)
    assert settings.database.url == SEARCH_CONFIG["database"]["url"]
    assert settings.candidate.hard_limit == SEARCH_CONFIG["candidate"]["hard_limit"]


def test_search_settings_with_custom_values():
    """Test that SearchSettings can be created with custom values."""
    settings = SearchSettings(
        log_level="DEBUG",
        candidate=CandidateConfig(hard_limit=200, hard_limit_max=500),
    )

    assert settings.log_level == "DEBUG"
    assert settings.candidate.hard_limit == 200
    assert isinstance(settings.database, DatabaseConfig)
    assert isinstance(settings.geocoding, GeocodingConfig)


def test_effective_hard_limit_never_above_ceiling():
    assert CandidateConfig(hard_limit=1000, hard_limit_max=3000).effective_hard_limit == 1000
    assert CandidateConfig(hard_limit=9000, hard_limit_max=3000).effective_hard_limit == 3000
