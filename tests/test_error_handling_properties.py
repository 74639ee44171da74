"""
Tests for the error taxonomy.

Validation errors must be distinguishable from infrastructure errors at
the boundary so callers only retry the latter.
"""

import pytest
from hypothesis import given, settings, strategies as st

from staysearch.error_handling import (
    CandidateRowError,
    CandidateStoreUnavailable,
    ErrorCategory,
    GeocodingError,
    PlanErrorCode,
    SearchError,
    SearchPlanValidationError,
    StageError,
)


@given(code=st.sampled_from(list(PlanErrorCode)), message=st.text(max_size=80))
@settings(max_examples=50)
def test_plan_errors_are_client_errors(code, message):
    """
    **Feature: stay-search, Property 17: Error categories**

    Every plan validation error is a client error carrying its own code.
    """
    error = SearchPlanValidationError(code, message)

    assert error.category == ErrorCategory.CLIENT
    assert error.to_dict() == {
        "code": code.value,
        "message": message,
        "category": "client_error",
    }


@pytest.mark.parametrize("error", [
    CandidateStoreUnavailable("down"),
    CandidateRowError("bad row", row_id="7"),
    StageError("pricing", "rate source unavailable"),
    GeocodingError("no address"),
])
def test_infrastructure_errors(error):
    assert isinstance(error, SearchError)
    assert error.category == ErrorCategory.INFRASTRUCTURE
    assert error.to_dict()["category"] == "infrastructure_error"
    assert error.to_dict()["code"] == type(error).__name__


def test_plan_error_codes_are_distinct():
    assert len({c.value for c in PlanErrorCode}) == len(PlanErrorCode) == 8


def test_stage_error_names_stage():
    error = StageError("availability", "calendar timeout")
    assert error.stage == "availability"
    assert str(error) == "availability: calendar timeout"
