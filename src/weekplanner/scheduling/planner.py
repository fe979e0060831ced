"""Main planner interface.

This module provides the high-level WeeklyPlanner class that runs the
planning stages in order: blocked time, prioritization, free slots,
matching, household distribution and reporting.
"""

import logging
from datetime import datetime
from typing import Optional

from weekplanner.domain.models import (
    PlannerConfig,
    PlanRequest,
    PlanResponse,
    ScheduleInputError,
    ScheduleResult,
    TimeSlot,
    Weekday,
)
from weekplanner.domain.policies import (
    DefaultEnergyPolicy,
    DefaultHouseholdPolicy,
    DefaultPriorityPolicy,
    EnergyPolicy,
    HouseholdPolicy,
    PriorityPolicy,
)
from weekplanner.scheduling.blocked_time import BlockedTimeExtractor
from weekplanner.scheduling.household import HouseholdDistributor
from weekplanner.scheduling.prioritizer import TaskPrioritizer
from weekplanner.scheduling.reporter import ScheduleReporter
from weekplanner.scheduling.slot_finder import SlotFinder
from weekplanner.scheduling.slot_matcher import SlotMatcher

logger = logging.getLogger(__name__)


class WeeklyPlanner:
    """High-level planner for generating weekly plans.

    The planner holds only configuration and policies. Each call works on
    its own data, so one instance can serve concurrent requests.

    Example:
        >>> planner = WeeklyPlanner()
        >>> request = PlanRequest(
        ...     commitments=[WeeklyCommitment(Weekday.THURSDAY, 540, 660)],
        ...     tasks=[Task(id="t1", name="VAT report", category="vat")],
        ... )
        >>> response = planner.generate_plan(request)
        >>> response.success
        True
    """

    def __init__(
        self,
        config: Optional[PlannerConfig] = None,
        priority_policy: Optional[PriorityPolicy] = None,
        energy_policy: Optional[EnergyPolicy] = None,
        household_policy: Optional[HouseholdPolicy] = None,
    ):
        """Initialize planner with configuration and policies.

        Args:
            config: Working hours, work days and thresholds.
            priority_policy: Policy for task priority scoring.
            energy_policy: Policy for time-of-day energy levels.
            household_policy: Policy for family roles.
        """
        self.config = config or PlannerConfig()
        self.priority_policy = priority_policy or DefaultPriorityPolicy()
        self.energy_policy = energy_policy or DefaultEnergyPolicy()
        self.household_policy = household_policy or DefaultHouseholdPolicy()

        self.extractor = BlockedTimeExtractor(config=self.config)
        self.prioritizer = TaskPrioritizer(
            priority_policy=self.priority_policy, config=self.config
        )
        self.slot_finder = SlotFinder(
            energy_policy=self.energy_policy, config=self.config
        )
        self.matcher = SlotMatcher(config=self.config)
        self.distributor = HouseholdDistributor(household_policy=self.household_policy)
        self.reporter = ScheduleReporter(config=self.config)

    def generate_plan(
        self,
        request: PlanRequest,
        now: Optional[datetime] = None,
    ) -> PlanResponse:
        """Generate a complete weekly plan.

        Any failure in any stage is returned as an unsuccessful response
        carrying the error message; no partial schedule is returned.

        Args:
            request: Commitments, tasks and preferences.
            now: Reference time for deadline calculations (defaults to now).

        Returns:
            PlanResponse with schedule, summary and warnings, or an error.
        """
        try:
            return self._run(request, now or datetime.now())
        except Exception as exc:
            logger.exception("Weekly planning failed")
            return PlanResponse.failure(str(exc))

    def generate_plan_from_dict(
        self,
        payload: dict,
        now: Optional[datetime] = None,
    ) -> PlanResponse:
        """Parse a JSON-style payload and plan it.

        Parsing errors are reported the same way as planning errors.
        """
        try:
            request = PlanRequest.from_dict(payload)
        except Exception as exc:
            logger.exception("Invalid planning request")
            return PlanResponse.failure(str(exc))
        return self.generate_plan(request, now)

    def find_free_slots(self, request: PlanRequest) -> dict[Weekday, list[TimeSlot]]:
        """Free slots for the request's commitments, before any matching."""
        return self.slot_finder.find_slots(self.extractor.extract(request.commitments))

    def _run(self, request: PlanRequest, now: datetime) -> PlanResponse:
        duplicates = request.duplicate_task_ids()
        if duplicates:
            raise ScheduleInputError(f"Duplicate task id: {', '.join(duplicates)}")

        blocked = self.extractor.extract(request.commitments)
        prioritized = self.prioritizer.prioritize(request.tasks, now)
        available = self.slot_finder.find_slots(blocked)
        matched = self.matcher.match(prioritized, available, request.preferences, now)
        family_tasks = self.distributor.distribute(matched.household)

        schedule = ScheduleResult(
            work=matched.work,
            household=matched.household,
            personal=matched.personal,
            unscheduled=matched.unscheduled,
            family_tasks=family_tasks,
        )
        schedule.metadata = self.reporter.aggregate(schedule)

        response = PlanResponse(
            success=True,
            schedule=schedule,
            summary=self.reporter.summarize(schedule),
            warnings=self.reporter.check_warnings(schedule, now),
        )
        logger.info(
            "Planned %d tasks (%d unscheduled, %.1f hours)",
            response.summary.total_tasks,
            response.summary.unscheduled_tasks,
            response.summary.total_hours,
        )
        return response
