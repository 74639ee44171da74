"""
Search pipeline - runs the fixed stage sequence for one search request.

plan -> candidate -> availability -> stay_rules -> pricing -> ranking -> pagination

Each stage is any callable `(plan, previous_output) -> next_output`, sync or
async. Stages run strictly one after another; the first failure aborts the
rest and propagates unchanged.
"""

import inspect
import logging
import time
from typing import Any, Callable, Mapping, Optional, Tuple, Union

from staysearch import stages
from staysearch.error_handling.errors import SearchPlanValidationError
from staysearch.models import SearchInput, SearchPlan, SearchResult
from staysearch.planning.plan_builder import build_search_plan


logger = logging.getLogger(__name__)

STAGE_ORDER = (
    "candidate",
    "availability",
    "stay_rules",
    "pricing",
    "ranking",
    "pagination",
)

Stage = Callable[[SearchPlan, Any], Any]


class SearchPipeline:
    """Orchestrate the complete search workflow"""

    def __init__(
        self,
        candidate: Optional[Stage] = None,
        availability: Optional[Stage] = None,
        stay_rules: Optional[Stage] = None,
        pricing: Optional[Stage] = None,
        ranking: Optional[Stage] = None,
        pagination: Optional[Stage] = None,
        plan_builder: Callable[[SearchInput], SearchPlan] = build_search_plan
    ):
        """
        Initialize the pipeline. Any stage left as None uses the shipped default.

        Args:
            candidate: Resolves the plan to candidates (previous output is None)
            availability: Filters candidates by availability
            stay_rules: Applies min/max stay and arrival rules
            pricing: Attaches prices
            ranking: Orders priced properties
            pagination: Slices the ranked list into a SearchResult
            plan_builder: Turns raw input into a SearchPlan
        """
        self.plan_builder = plan_builder
        self.stages: Tuple[Tuple[str, Stage], ...] = (
            ("candidate", candidate or stages.candidate),
            ("availability", availability or stages.availability),
            ("stay_rules", stay_rules or stages.stay_rules),
            ("pricing", pricing or stages.pricing),
            ("ranking", ranking or stages.ranking),
            ("pagination", pagination or stages.pagination),
        )

    async def run(self, search_input: Union[SearchInput, Mapping[str, Any]]) -> SearchResult:
        """
        Run the full search pipeline and return a result.

        Args:
            search_input: Raw SearchInput, or a request mapping

        Returns:
            Paginated SearchResult

        Raises:
            SearchPlanValidationError: Input rejected; no stage has run
            Exception: Whatever the failing stage raised
        """
        if not isinstance(search_input, SearchInput):
            search_input = SearchInput.from_dict(search_input)

        try:
            plan = self.plan_builder(search_input)
        except SearchPlanValidationError as e:
            logger.info(f"Search rejected: {e.code.value}: {e}")
            raise

        started = time.perf_counter()
        output: Any = None
        for name, stage in self.stages:
            try:
                output = await self._run_stage(stage, plan, output)
            except Exception as e:
                logger.warning(f"Search aborted at stage '{name}': {type(e).__name__}: {e}")
                raise
            if isinstance(output, list):
                logger.debug(f"Stage '{name}' produced {len(output)} properties")

        logger.info(f"Search pipeline completed in {(time.perf_counter() - started) * 1000:.0f}ms")
        return output

    async def _run_stage(self, stage: Stage, plan: SearchPlan, previous: Any) -> Any:
        result = stage(plan, previous)
        if inspect.isawaitable(result):
            result = await result
        return result


_default_pipeline: Optional[SearchPipeline] = None


async def search(search_input: Union[SearchInput, Mapping[str, Any]]) -> SearchResult:
    """Run a search with the default stages."""
    global _default_pipeline
    if _default_pipeline is None:
        _default_pipeline = SearchPipeline()
    return await _default_pipeline.run(search_input)
