from typing import List

from staysearch.models import AvailableProperty, PricedProperty, SearchPlan


async def pricing(plan: SearchPlan, properties: List[AvailableProperty]) -> List[PricedProperty]:
    """Pricing stage: widens to PricedProperty; price and currency stay unset until a rate source exists."""
    return [PricedProperty.from_available(p) for p in properties]
