from typing import List

from staysearch.models import PricedProperty, SearchPlan


async def ranking(plan: SearchPlan, properties: List[PricedProperty]) -> List[PricedProperty]:
    """Ranking stage: keeps candidate order (id ascending). (Pass-through.)"""
    return list(properties)
