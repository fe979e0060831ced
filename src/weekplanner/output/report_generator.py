"""Plain-text weekly agenda.

This module creates a text report of a weekly plan showing:
- Each day's tasks in time order
- Daily workload with a simple bar
- Household assignments per family role
- Unscheduled tasks and warnings
"""

from pathlib import Path
from typing import Union

from weekplanner.domain.models import (
    PlanResponse,
    Weekday,
    format_hhmm,
)


class ReportGenerator:
    """Generates a text agenda for a weekly plan.

    Example:
        >>> generator = ReportGenerator()
        >>> print(generator.generate_to_string(response))
    """

    def __init__(self, work_days: tuple[Weekday, ...] = ()):
        self.work_days = work_days

    def generate(
        self,
        response: PlanResponse,
        output_path: Union[str, Path],
    ) -> str:
        """Generate the agenda and save it to a file.

        Args:
            response: A successful planning response.
            output_path: Path to save the text file.

        Returns:
            The generated text content.
        """
        content = self._generate_content(response)
        Path(output_path).write_text(content, encoding="utf-8")
        return content

    def generate_to_string(self, response: PlanResponse) -> str:
        return self._generate_content(response)

    def _generate_content(self, response: PlanResponse) -> str:
        """Generate the full agenda."""
        if not response.success:
            raise ValueError(f"Cannot report a failed plan: {response.error}")

        schedule = response.schedule
        summary = response.summary
        days = self.work_days or tuple(schedule.metadata.workload_balance.keys())
        lines = []

        lines.append("=" * 72)
        lines.append("WEEKLY PLAN")
        lines.append("=" * 72)
        lines.append(f"Total tasks: {summary.total_tasks}")
        lines.append(f"Total hours: {summary.total_hours}")
        lines.append(f"Unscheduled: {summary.unscheduled_tasks}")
        if summary.busy_days:
            lines.append("Busy days: " + ", ".join(d.value for d in summary.busy_days))
        lines.append("")

        for day in days:
            hours = schedule.metadata.workload_balance.get(day, 0.0)
            lines.append("-" * 72)
            lines.append(f"{day.value.upper():<12} {hours:>5.1f}h  {'#' * int(round(hours * 2))}")
            lines.append("-" * 72)

            day_tasks = schedule.tasks_on(day)
            if not day_tasks:
                lines.append("  (free)")
            for scheduled in day_tasks:
                time_str = f"{format_hhmm(scheduled.start)}-{format_hhmm(scheduled.end)}"
                lines.append(
                    f"  {time_str}  {scheduled.task.name[:36]:<36} "
                    f"{scheduled.location.value:<6} score {scheduled.match_score}"
                )
            lines.append("")

        lines.append("-" * 72)
        lines.append("HOUSEHOLD")
        lines.append("-" * 72)
        for role, tasks in schedule.family_tasks.items():
            names = ", ".join(t.task.name for t in tasks) or "-"
            lines.append(f"  {role:<10} ({len(tasks)}): {names}")
        lines.append("")

        if schedule.unscheduled:
            lines.append("-" * 72)
            lines.append("UNSCHEDULED")
            lines.append("-" * 72)
            for task in schedule.unscheduled:
                due = f" (due {task.deadline.isoformat()})" if task.deadline else ""
                lines.append(f"  {task.name}{due}, {task.duration_minutes} min")
            lines.append("")

        if response.warnings:
            lines.append("-" * 72)
            lines.append("WARNINGS")
            lines.append("-" * 72)
            for warning in response.warnings:
                lines.append(f"  {warning}")
            lines.append("")

        lines.append("=" * 72)
        return "\n".join(lines)
