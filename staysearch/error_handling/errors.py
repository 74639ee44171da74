"""
Error taxonomy for stay search.

Three families of failure exist:

- plan validation errors: caller-input problems, each with a distinct code
- resolver/store errors: infrastructure failures, never retried in the core
- stage errors: raised by downstream collaborators and propagated unchanged

The category lets the HTTP boundary tell client errors from infrastructure
errors so callers only retry the latter.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(str, Enum):
    """Boundary category of a search failure."""
    CLIENT = "client_error"
    INFRASTRUCTURE = "infrastructure_error"


class SearchError(Exception):
    """Base class for every failure raised by the search core."""

    category: ErrorCategory = ErrorCategory.INFRASTRUCTURE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": type(self).__name__,
            "message": str(self),
            "category": self.category.value,
        }


class PlanErrorCode(str, Enum):
    """Distinct codes for each way a search request can fail validation."""
    INVALID_CHECK_IN = "INVALID_CHECK_IN"
    INVALID_CHECK_OUT = "INVALID_CHECK_OUT"
    INVALID_LATITUDE = "INVALID_LATITUDE"
    INVALID_LONGITUDE = "INVALID_LONGITUDE"
    ARRIVAL_AFTER_DEPARTURE = "ARRIVAL_AFTER_DEPARTURE"
    STAY_TOO_SHORT = "STAY_TOO_SHORT"
    NO_GUESTS = "NO_GUESTS"
    INVALID_GUEST_COUNTS = "INVALID_GUEST_COUNTS"


class SearchPlanValidationError(SearchError):
    """
    Raised by the plan builder when raw input cannot become a valid plan.

    Attributes:
        code: The PlanErrorCode identifying the failed check
    """

    category = ErrorCategory.CLIENT

    def __init__(self, code: PlanErrorCode, message: str):
        super().__init__(message)
        self.code = code

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "message": str(self),
            "category": self.category.value,
        }


class CandidateResolutionError(SearchError):
    """Base class for candidate resolver failures."""

    category = ErrorCategory.INFRASTRUCTURE


class CandidateStoreUnavailable(CandidateResolutionError):
    """The property store could not be reached or the query failed."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class CandidateRowError(CandidateResolutionError):
    """
    A store row could not be mapped to a candidate.

    Fatal for the whole stage: a malformed row means the schema does not
    match what the resolver expects.
    """

    def __init__(self, message: str, row_id: Optional[str] = None):
        super().__init__(message)
        self.row_id = row_id


class StageError(SearchError):
    """Typed failure a downstream collaborator may raise."""

    def __init__(self, stage: str, message: str):
        super().__init__(f"{stage}: {message}")
        self.stage = stage


class GeocodingError(SearchError):
    """Reverse geocoding request failed or returned an unusable payload."""
