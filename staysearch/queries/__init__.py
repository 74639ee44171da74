"""Store queries used by the search stages."""

from .candidate_query import (
    CAPACITY_COLUMNS,
    GEO_COLUMNS,
    CandidateQuery,
    build_candidate_sql,
    map_row_to_candidate,
    resolve_candidate_limit,
    run_candidate_query,
)

__all__ = [
    "CAPACITY_COLUMNS",
    "GEO_COLUMNS",
    "CandidateQuery",
    "build_candidate_sql",
    "map_row_to_candidate",
    "resolve_candidate_limit",
    "run_candidate_query",
]
