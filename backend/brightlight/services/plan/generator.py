"""Chunked wellness plan generation with structural validation."""
from __future__ import annotations

import logging
from typing import Callable, Dict, List, Protocol

from brightlight.core.errors import IncompletePlanError, StructureValidationError
from brightlight.observability.metrics import log_metric
from brightlight.observability.tracing import trace
from brightlight.services.assessment import Assessment
from brightlight.services.plan.parser import parse_plan
from brightlight.services.plan.prompts import build_chunk_prompt, build_plan_prompt
from brightlight.services.plan.types import PLAN_LENGTH_DAYS, DayPlan, DayRange, Plan, split_day_ranges
from brightlight.services.plan.validator import missing_markers, validate_plan_structure

logger = logging.getLogger(__name__)

CHUNK_SEPARATOR = "\n\n"


class CompletionClient(Protocol):
    def complete(self, prompt: str, *, use_cache: bool = True) -> str:
        ...


class PlanGenerator:
    """
    Turn an assessment into a complete 14-day Plan.

    Day ranges are requested one after another; a range whose text lacks the
    required markers is asked for exactly once more before giving up. Either
    every day 1..14 comes back or an error is raised: no partial plans.
    """

    def __init__(
        self,
        completion_client: CompletionClient,
        *,
        chunk_size: int = PLAN_LENGTH_DAYS,
        parser: Callable[[str], List[DayPlan]] = parse_plan,
    ):
        self._client = completion_client
        self._ranges = split_day_ranges(PLAN_LENGTH_DAYS, chunk_size)
        self._parse = parser

    def generate_14_day_plan(self, assessment: Assessment, *, user_id: str | None = None) -> Plan:
        metadata = {
            "gad_score": assessment.gad_score,
            "phq_score": assessment.phq_score,
            "preference_count": len(assessment.preferences),
            "chunks": len(self._ranges),
        }
        with trace("wellness_plan.generate", metadata=metadata, user_id=user_id):
            raw_text = self.generate_plan_text(build_plan_prompt(assessment))
            plan = self._assemble(raw_text)

        logger.info("Generated %d-day plan with %d activities", len(plan.days), sum(1 for _ in plan.iter_activities()))
        return plan

    def generate_plan_text(self, requirements: str) -> str:
        """Concatenated raw text for days 1..14, each chunk already structurally valid."""
        chunks = [self._generate_chunk(requirements, day_range) for day_range in self._ranges]
        return CHUNK_SEPARATOR.join(chunks)

    def _generate_chunk(self, requirements: str, day_range: DayRange) -> str:
        prompt = build_chunk_prompt(requirements, day_range)
        response = self._client.complete(prompt)
        if validate_plan_structure(response, day_range):
            return response

        logger.warning(
            "Plan chunk %d-%d missing markers %s; retrying once",
            day_range.first,
            day_range.last,
            missing_markers(response, day_range),
        )
        log_metric("wellness_plan.chunk_retry", 1, metadata={"first_day": day_range.first, "last_day": day_range.last})
        # The memo holds the rejected answer.
        response = self._client.complete(prompt, use_cache=False)
        if not validate_plan_structure(response, day_range):
            logger.error(
                "Plan chunk %d-%d still missing markers %s",
                day_range.first,
                day_range.last,
                missing_markers(response, day_range),
            )
            raise StructureValidationError(day_range.first, day_range.last)
        return response

    def _assemble(self, raw_text: str) -> Plan:
        by_day: Dict[int, DayPlan] = {}
        for day_plan in self._parse(raw_text):
            if day_plan.day_number <= PLAN_LENGTH_DAYS:
                by_day.setdefault(day_plan.day_number, day_plan)

        missing = set(range(1, PLAN_LENGTH_DAYS + 1)) - set(by_day)
        if missing:
            log_metric("wellness_plan.incomplete", len(missing))
            raise IncompletePlanError(missing)
        return Plan(days=[by_day[day] for day in sorted(by_day)])
