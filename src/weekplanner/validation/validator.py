"""Validation module for verifying plan correctness.

This module provides a single source of truth for the guarantees a weekly
plan must meet. Every generated plan should pass validation before being
shown or printed.
"""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from weekplanner.domain.models import (
    FixedBlock,
    PlannerConfig,
    PlanRequest,
    ScheduledTask,
    ScheduleResult,
    TaskContext,
    Weekday,
    format_hhmm,
    intervals_overlap,
)
from weekplanner.domain.policies import DefaultHouseholdPolicy, HouseholdPolicy
from weekplanner.scheduling.blocked_time import BlockedTimeExtractor


class ValidationErrorType(Enum):
    """Types of validation errors."""

    TASK_MISSING = "task_missing"
    TASK_DUPLICATED = "task_duplicated"
    UNKNOWN_TASK = "unknown_task"
    WRONG_BUCKET = "wrong_bucket"
    TASKS_OVERLAP = "tasks_overlap"
    OVERLAPS_FIXED_BLOCK = "overlaps_fixed_block"
    OVERLAPS_LUNCH = "overlaps_lunch"
    OUTSIDE_WORKING_HOURS = "outside_working_hours"
    NOT_A_WORK_DAY = "not_a_work_day"
    DURATION_MISMATCH = "duration_mismatch"
    ROLE_CAP_EXCEEDED = "role_cap_exceeded"
    ROLE_NOT_CAPABLE = "role_not_capable"
    FAMILY_TASK_MISMATCH = "family_task_mismatch"


@dataclass
class ValidationError:
    """A single validation error."""

    error_type: ValidationErrorType
    message: str
    task_id: Optional[str] = None
    day: Optional[Weekday] = None
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        parts = [f"[{self.error_type.value}]"]
        if self.task_id:
            parts.append(f"Task {self.task_id}:")
        parts.append(self.message)
        if self.day is not None:
            parts.append(f"({self.day.value})")
        return " ".join(parts)


@dataclass
class ValidationResult:
    """Result of validating a plan."""

    is_valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, error: ValidationError) -> None:
        """Add an error and mark as invalid."""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str) -> None:
        """Add a warning (doesn't affect validity)."""
        self.warnings.append(warning)


class ScheduleValidator:
    """Validates weekly plans against all guarantees.

    Checks that every task lands in exactly one bucket, that placed tasks
    keep their duration, stay inside working hours and never overlap each
    other, fixed blocks or lunch, and that family roles stay within their
    caps.

    Example:
        >>> validator = ScheduleValidator()
        >>> result = validator.validate(response.schedule, request)
        >>> if not result.is_valid:
        ...     for error in result.errors:
        ...         print(error)
    """

    def __init__(
        self,
        config: Optional[PlannerConfig] = None,
        household_policy: Optional[HouseholdPolicy] = None,
    ):
        self.config = config or PlannerConfig()
        self.household_policy = household_policy or DefaultHouseholdPolicy()

    def validate(
        self,
        schedule: ScheduleResult,
        request: PlanRequest,
    ) -> ValidationResult:
        """Validate a complete plan.

        Args:
            schedule: The plan to validate.
            request: Original request the plan was built from.

        Returns:
            ValidationResult with is_valid flag and any errors.
        """
        result = ValidationResult(is_valid=True)

        self._validate_partition(schedule, request, result)
        self._validate_buckets(schedule, result)

        blocked = BlockedTimeExtractor(config=self.config).extract(request.commitments)
        for scheduled in schedule.scheduled_tasks():
            self._validate_placement(scheduled, blocked.get(scheduled.day, []), result)

        for day in Weekday:
            self._validate_no_overlap(schedule.tasks_on(day), result)

        self._validate_family_tasks(schedule, result)

        return result

    def _validate_partition(
        self,
        schedule: ScheduleResult,
        request: PlanRequest,
        result: ValidationResult,
    ) -> None:
        """Every input task appears exactly once across all buckets."""
        placed_ids = [t.task.id for t in schedule.scheduled_tasks()]
        placed_ids.extend(t.id for t in schedule.unscheduled)
        counts = Counter(placed_ids)
        expected = {t.id for t in request.tasks}

        for task_id in expected:
            if counts[task_id] == 0:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.TASK_MISSING,
                        message="Task is in no bucket",
                        task_id=task_id,
                    )
                )
            elif counts[task_id] > 1:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.TASK_DUPLICATED,
                        message=f"Task appears {counts[task_id]} times",
                        task_id=task_id,
                        details={"count": counts[task_id]},
                    )
                )

        for task_id in counts:
            if task_id not in expected:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.UNKNOWN_TASK,
                        message="Task was not part of the request",
                        task_id=task_id,
                    )
                )

    def _validate_buckets(self, schedule: ScheduleResult, result: ValidationResult) -> None:
        """Tasks are filed by context first, then by the personal category."""
        buckets = {
            "work": schedule.work,
            "household": schedule.household,
            "personal": schedule.personal,
        }
        for bucket, tasks in buckets.items():
            for scheduled in tasks:
                task = scheduled.task
                if task.context == TaskContext.HOME:
                    expected = "household"
                elif task.category == "personal":
                    expected = "personal"
                else:
                    expected = "work"
                if bucket != expected:
                    result.add_error(
                        ValidationError(
                            error_type=ValidationErrorType.WRONG_BUCKET,
                            message=f"Task filed under {bucket}, expected {expected}",
                            task_id=task.id,
                        )
                    )

    def _validate_placement(
        self,
        scheduled: ScheduledTask,
        day_blocked: list[FixedBlock],
        result: ValidationResult,
    ) -> None:
        """Check duration, working hours, fixed blocks and lunch for one task."""
        task_id = scheduled.task.id
        hours = self.config.working_hours

        if scheduled.day not in self.config.work_days:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.NOT_A_WORK_DAY,
                    message="Task placed on a day outside the work week",
                    task_id=task_id,
                    day=scheduled.day,
                )
            )

        if scheduled.duration_minutes != scheduled.task.duration_minutes:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.DURATION_MISMATCH,
                    message=(
                        f"Placed for {scheduled.duration_minutes} min, "
                        f"needs {scheduled.task.duration_minutes} min"
                    ),
                    task_id=task_id,
                    day=scheduled.day,
                )
            )

        if scheduled.start < hours.day_start or scheduled.end > hours.day_end:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.OUTSIDE_WORKING_HOURS,
                    message=(
                        f"{format_hhmm(scheduled.start)}-{format_hhmm(scheduled.end)} "
                        f"is outside working hours"
                    ),
                    task_id=task_id,
                    day=scheduled.day,
                )
            )

        if intervals_overlap(scheduled.start, scheduled.end, hours.lunch_start, hours.lunch_end):
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.OVERLAPS_LUNCH,
                    message="Task overlaps the lunch break",
                    task_id=task_id,
                    day=scheduled.day,
                )
            )

        for block in day_blocked:
            if block.overlaps(scheduled.start, scheduled.end):
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.OVERLAPS_FIXED_BLOCK,
                        message=(
                            f"Task overlaps {block.kind.value} "
                            f"{format_hhmm(block.start)}-{format_hhmm(block.end)}"
                        ),
                        task_id=task_id,
                        day=scheduled.day,
                    )
                )

    def _validate_no_overlap(
        self,
        day_tasks: list[ScheduledTask],
        result: ValidationResult,
    ) -> None:
        """No two tasks on one day may overlap."""
        for i, earlier in enumerate(day_tasks):
            for later in day_tasks[i + 1 :]:
                if not intervals_overlap(earlier.start, earlier.end, later.start, later.end):
                    continue
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.TASKS_OVERLAP,
                        message=f"Overlaps task {earlier.task.id}",
                        task_id=later.task.id,
                        day=later.day,
                    )
                )

    def _validate_family_tasks(self, schedule: ScheduleResult, result: ValidationResult) -> None:
        """Household tasks map one-to-one onto roles, within caps."""
        roles = {role.name: role for role in self.household_policy.roles()}
        fallback = self.household_policy.fallback_role()

        household_ids = Counter(t.task.id for t in schedule.household)
        family_ids = Counter(
            t.task.id for tasks in schedule.family_tasks.values() for t in tasks
        )
        if household_ids != family_ids:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.FAMILY_TASK_MISMATCH,
                    message="Family assignments do not match the household bucket",
                    details={
                        "missing": sorted((household_ids - family_ids).keys()),
                        "extra": sorted((family_ids - household_ids).keys()),
                    },
                )
            )

        for role_name, tasks in schedule.family_tasks.items():
            role = roles.get(role_name)
            if role is None:
                continue

            if role_name == fallback:
                if len(tasks) > role.max_tasks:
                    result.add_warning(
                        f"Fallback role {role_name} has {len(tasks)} tasks "
                        f"(cap {role.max_tasks})"
                    )
                continue

            if len(tasks) > role.max_tasks:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.ROLE_CAP_EXCEEDED,
                        message=f"Role {role_name} has {len(tasks)} tasks (cap {role.max_tasks})",
                        details={"role": role_name, "count": len(tasks)},
                    )
                )
            for scheduled in tasks:
                if not role.accepts(scheduled.task):
                    result.add_error(
                        ValidationError(
                            error_type=ValidationErrorType.ROLE_NOT_CAPABLE,
                            message=f"Role {role_name} cannot do {scheduled.task.category}",
                            task_id=scheduled.task.id,
                        )
                    )
