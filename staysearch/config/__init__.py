"""Configuration module for stay search."""

from .search_config import (
    SEARCH_CONFIG,
    SearchSettings,
    DatabaseConfig,
    CandidateConfig,
    GeocodingConfig,
    get_search_settings,
)

__all__ = [
    'SEARCH_CONFIG',
    'SearchSettings',
    'DatabaseConfig',
    'CandidateConfig',
    'GeocodingConfig',
    'get_search_settings',
]
