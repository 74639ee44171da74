"""
Error handling module for stay search.

Defines the error taxonomy shared by the plan builder, candidate resolver,
pipeline stages and HTTP boundary.
"""

from .errors import (
    ErrorCategory,
    SearchError,
    PlanErrorCode,
    SearchPlanValidationError,
    CandidateResolutionError,
    CandidateStoreUnavailable,
    CandidateRowError,
    StageError,
    GeocodingError,
)

__all__ = [
    'ErrorCategory',
    'SearchError',
    'PlanErrorCode',
    'SearchPlanValidationError',
    'CandidateResolutionError',
    'CandidateStoreUnavailable',
    'CandidateRowError',
    'StageError',
    'GeocodingError',
]
