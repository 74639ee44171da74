from typing import List

from staysearch.models import AvailableProperty, CandidateProperty, SearchPlan


async def availability(plan: SearchPlan, candidates: List[CandidateProperty]) -> List[AvailableProperty]:
    """Availability stage: no calendar source yet, every candidate is marked available."""
    return [AvailableProperty.from_candidate(c) for c in candidates]
