"""Schedule aggregation, summary and warnings."""

import logging
from datetime import datetime
from typing import Optional

from weekplanner.domain.models import (
    PlannerConfig,
    ScheduledTask,
    ScheduleMetadata,
    ScheduleResult,
    ScheduleSummary,
    ScheduleWarning,
    WarningType,
    Weekday,
    days_between,
    round_hours,
)

logger = logging.getLogger(__name__)


class ScheduleReporter:
    """Computes statistics and warnings for a finished schedule.

    Nothing here changes the schedule; warnings are informational only.
    """

    def __init__(self, config: Optional[PlannerConfig] = None):
        self.config = config or PlannerConfig()

    def aggregate(self, schedule: ScheduleResult) -> ScheduleMetadata:
        """Total counts, total hours and per-day workload.

        Totals cover every list, unscheduled included, so ``total_tasks``
        equals the number of input tasks.
        """
        scheduled = schedule.scheduled_tasks()
        total_tasks = len(scheduled) + len(schedule.unscheduled)
        total_minutes = sum(t.task.duration_minutes for t in scheduled) + sum(
            t.duration_minutes for t in schedule.unscheduled
        )

        return ScheduleMetadata(
            total_tasks=total_tasks,
            total_hours=total_minutes / 60,
            workload_balance={
                day: self.daily_load(scheduled, day) for day in self.config.work_days
            },
        )

    @staticmethod
    def daily_load(scheduled: list[ScheduledTask], day: Weekday) -> float:
        """Scheduled hours on a day, rounded to one decimal."""
        minutes = sum(t.task.duration_minutes for t in scheduled if t.day == day)
        return round_hours(minutes / 60)

    def summarize(self, schedule: ScheduleResult) -> ScheduleSummary:
        metadata = schedule.metadata
        return ScheduleSummary(
            total_tasks=metadata.total_tasks,
            total_hours=round_hours(metadata.total_hours),
            unscheduled_tasks=len(schedule.unscheduled),
            family_participation={
                role: len(tasks) for role, tasks in schedule.family_tasks.items()
            },
            busy_days=[
                day
                for day, hours in metadata.workload_balance.items()
                if hours > self.config.busy_day_hours
            ],
        )

    def check_warnings(
        self,
        schedule: ScheduleResult,
        now: Optional[datetime] = None,
    ) -> list[ScheduleWarning]:
        """Derive overload, unscheduled and deadline risk warnings.

        Args:
            schedule: Aggregated schedule.
            now: Reference time for deadline risk (defaults to now).

        Returns:
            Warnings in the order overload, unscheduled, deadline risk.
        """
        now = now or datetime.now()
        warnings = []

        for day, hours in schedule.metadata.workload_balance.items():
            if hours > self.config.overload_hours:
                warnings.append(
                    ScheduleWarning(
                        warning_type=WarningType.OVERLOAD,
                        day=day,
                        message=f"{day.value} is overloaded ({hours} hours)",
                    )
                )

        if schedule.unscheduled:
            count = len(schedule.unscheduled)
            warnings.append(
                ScheduleWarning(
                    warning_type=WarningType.UNSCHEDULED,
                    count=count,
                    tasks=[t.name for t in schedule.unscheduled],
                    message=f"{count} tasks could not be scheduled",
                )
            )

        for task in schedule.unscheduled:
            if task.deadline is None:
                continue
            if days_between(task.deadline, now) <= self.config.deadline_risk_days:
                warnings.append(
                    ScheduleWarning(
                        warning_type=WarningType.DEADLINE_RISK,
                        task=task.name,
                        message=f'Task "{task.name}" is at risk of missing its deadline',
                    )
                )

        if warnings:
            logger.info("Schedule produced %d warnings", len(warnings))
        return warnings
