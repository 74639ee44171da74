"""Search plan building: validation and normalization of raw requests."""

from .plan_builder import build_search_plan

__all__ = ['build_search_plan']
