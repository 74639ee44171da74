from typing import List

from staysearch.models import AvailableProperty, SearchPlan


async def stay_rules(plan: SearchPlan, properties: List[AvailableProperty]) -> List[AvailableProperty]:
    """Stay-rules stage: min/max stay and arrival rules. (Pass-through.)"""
    return list(properties)
