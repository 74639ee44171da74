"""Search pipeline orchestration"""

from .search_pipeline import STAGE_ORDER, SearchPipeline, search

__all__ = ["STAGE_ORDER", "SearchPipeline", "search"]
