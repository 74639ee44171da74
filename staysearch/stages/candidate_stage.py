from typing import List, Optional

from staysearch.models import CandidateProperty, SearchPlan
from staysearch.queries.candidate_query import run_candidate_query


async def candidate(plan: SearchPlan, previous: Optional[list] = None) -> List[CandidateProperty]:
    """Candidate stage: resolve plan -> property candidates (capacity, PostGIS radius, hard limit)."""
    return await run_candidate_query(plan)
