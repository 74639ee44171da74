"""
Pagination stage: slice the ranked list into one page.
"""

import math
from typing import List

from staysearch.models import PaginationInfo, PricedProperty, SearchPlan, SearchResult


def paginate(plan: SearchPlan, properties: List[PricedProperty]) -> SearchResult:
    """
    Slice the fully ranked list into the plan's page.

    `total` is the length of the ranked list, not the store's match count.
    A page past the end yields an empty page with correct metadata.

    Args:
        plan: Search plan carrying page and page_size
        properties: Fully ranked list

    Returns:
        SearchResult for the requested page
    """
    total = len(properties)
    total_pages = max(1, math.ceil(total / plan.page_size))
    start = (plan.page - 1) * plan.page_size
    return SearchResult(
        properties=list(properties[start:start + plan.page_size]),
        pagination=PaginationInfo(
            page=plan.page,
            page_size=plan.page_size,
            total=total,
            total_pages=total_pages,
        ),
    )


async def pagination(plan: SearchPlan, properties: List[PricedProperty]) -> SearchResult:
    """Pagination stage: page, page_size, total, total_pages."""
    return paginate(plan, properties)
