"""Task prioritization.

Assigns each task a deterministic integer score and orders tasks for the
greedy slot matcher.
"""

import logging
from datetime import datetime
from typing import Optional

from weekplanner.domain.models import (
    PlannerConfig,
    PrioritizedTask,
    Task,
    days_between,
)
from weekplanner.domain.policies import DefaultPriorityPolicy, PriorityPolicy

logger = logging.getLogger(__name__)


class TaskPrioritizer:
    """Scores and orders tasks.

    Score = category weight + deadline urgency + effort bonuses. Ordering is
    by descending score with ties kept in input order, so the same input
    always yields the same assignment sequence.
    """

    def __init__(
        self,
        priority_policy: Optional[PriorityPolicy] = None,
        config: Optional[PlannerConfig] = None,
    ):
        self.priority_policy = priority_policy or DefaultPriorityPolicy()
        self.config = config or PlannerConfig()

    def score_task(self, task: Task, now: datetime) -> int:
        """Calculate the priority score of a single task."""
        score = self.priority_policy.category_weight(task.category)

        if task.deadline is not None:
            buffer_days = (
                task.buffer_days
                if task.buffer_days is not None
                else self.config.default_buffer_days
            )
            score += self.priority_policy.urgency_bonus(
                days_between(task.deadline, now), buffer_days
            )

        score += self.priority_policy.effort_bonus(
            task.duration_minutes, task.energy_level
        )
        return score

    def prioritize(
        self,
        tasks: list[Task],
        now: Optional[datetime] = None,
    ) -> list[PrioritizedTask]:
        """Score all tasks and sort them for assignment.

        Args:
            tasks: Tasks in caller order.
            now: Reference time for deadline urgency (defaults to now).

        Returns:
            Prioritized tasks, highest score first.
        """
        now = now or datetime.now()
        scored = [PrioritizedTask(task, self.score_task(task, now)) for task in tasks]
        # sorted() is stable, which keeps input order for equal scores
        ordered = sorted(scored, key=lambda p: p.priority_score, reverse=True)

        if ordered:
            logger.debug(
                "Prioritized %d tasks (top: %s=%d)",
                len(ordered),
                ordered[0].task.id,
                ordered[0].priority_score,
            )
        return ordered
