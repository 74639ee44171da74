"""Search pipeline stages, in execution order."""

from .candidate_stage import candidate
from .availability_stage import availability
from .stay_rules_stage import stay_rules
from .pricing_stage import pricing
from .ranking_stage import ranking
from .pagination_stage import pagination, paginate

__all__ = [
    "candidate",
    "availability",
    "stay_rules",
    "pricing",
    "ranking",
    "pagination",
    "paginate",
]
