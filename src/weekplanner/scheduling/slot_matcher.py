"""Greedy slot matching.

This module assigns prioritized tasks to free slots:
1. Score every slot that is long enough for the task
2. Place the task at the start of the best slot
3. Shrink or remove the consumed slot
4. Leave tasks with no fitting slot unscheduled
"""

import copy
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from weekplanner.domain.models import (
    EnergyLevel,
    LocationFlexibility,
    PlannerConfig,
    PrioritizedTask,
    ScheduledTask,
    SlotLocation,
    Task,
    TaskContext,
    TimeOfDay,
    TimeSlot,
    Weekday,
    days_between,
)

logger = logging.getLogger(__name__)


@dataclass
class MatchResult:
    """Output of the slot matcher.

    Attributes:
        work: Placed work tasks.
        household: Placed home-context tasks.
        personal: Placed personal tasks.
        unscheduled: Tasks with no fitting slot.
        remaining_slots: The matcher's working copy after all assignments.
    """

    work: list[ScheduledTask] = field(default_factory=list)
    household: list[ScheduledTask] = field(default_factory=list)
    personal: list[ScheduledTask] = field(default_factory=list)
    unscheduled: list[Task] = field(default_factory=list)
    remaining_slots: dict[Weekday, list[TimeSlot]] = field(default_factory=dict)

    def add(self, scheduled: ScheduledTask) -> None:
        """File a placed task into its bucket."""
        task = scheduled.task
        if task.context == TaskContext.HOME:
            self.household.append(scheduled)
        elif task.category == "personal":
            self.personal.append(scheduled)
        else:
            self.work.append(scheduled)


@dataclass(frozen=True)
class SlotChoice:
    """The winning slot for a task: its position in the working copy and score."""

    day: Weekday
    index: int
    score: int


class SlotMatcher:
    """Greedy matcher of tasks to free slots.

    Tasks are placed one at a time in priority order and never revisited.
    All mutation happens on a deep copy of the slot map, so the caller's
    slots are left untouched.
    """

    def __init__(
        self,
        config: Optional[PlannerConfig] = None,
    ):
        self.config = config or PlannerConfig()

    def match(
        self,
        prioritized: list[PrioritizedTask],
        available_slots: dict[Weekday, list[TimeSlot]],
        preferences: Optional[dict[str, dict[Weekday, bool]]] = None,
        now: Optional[datetime] = None,
    ) -> MatchResult:
        """Assign tasks to slots.

        Args:
            prioritized: Tasks in assignment order.
            available_slots: Free slots per day; not modified.
            preferences: category -> day -> bool scoring bonus.
            now: Reference time for deadline proximity.

        Returns:
            MatchResult with bucketed tasks and the remaining slots.
        """
        preferences = preferences or {}
        now = now or datetime.now()
        remaining = copy.deepcopy(available_slots)
        result = MatchResult(remaining_slots=remaining)

        for item in prioritized:
            task = item.task
            choice = self.find_best_slot(task, remaining, preferences, now)

            if choice is None:
                logger.debug("No slot fits task %s", task.id)
                result.unscheduled.append(task)
                continue

            slot = remaining[choice.day][choice.index]
            scheduled = ScheduledTask(
                task=task,
                day=choice.day,
                start=slot.start,
                end=slot.start + task.duration_minutes,
                location=slot.location,
                match_score=choice.score,
            )
            result.add(scheduled)
            self._consume_slot(remaining[choice.day], choice.index, task.duration_minutes)

        logger.debug(
            "Matched %d tasks, %d unscheduled",
            len(prioritized) - len(result.unscheduled),
            len(result.unscheduled),
        )
        return result

    def find_best_slot(
        self,
        task: Task,
        slots: dict[Weekday, list[TimeSlot]],
        preferences: dict[str, dict[Weekday, bool]],
        now: datetime,
    ) -> Optional[SlotChoice]:
        """Highest scoring slot that can hold the task; earliest wins ties."""
        best: Optional[SlotChoice] = None
        best_score = -1

        for day, day_slots in slots.items():
            for index, slot in enumerate(day_slots):
                if slot.duration < task.duration_minutes:
                    continue

                score = self.score_slot(task, slot, preferences, now)
                if score > best_score:
                    best_score = score
                    best = SlotChoice(day=day, index=index, score=score)

        return best

    def score_slot(
        self,
        task: Task,
        slot: TimeSlot,
        preferences: dict[str, dict[Weekday, bool]],
        now: datetime,
    ) -> int:
        """Calculate how well a slot suits a task.

        Energy match, location fit, time-of-day preference, deadline
        proximity and the user's category/day preference each add points.
        """
        score = 0

        if task.energy_level == slot.energy_level:
            score += 30
        elif task.energy_level == EnergyLevel.HIGH and slot.energy_level == EnergyLevel.MEDIUM:
            score += 20
        elif task.energy_level == EnergyLevel.LOW and slot.energy_level != EnergyLevel.LOW:
            score += 10

        flexibility = task.location_flexibility
        if flexibility == LocationFlexibility.ANYWHERE:
            score += 20
        elif (
            flexibility == LocationFlexibility.REMOTE_POSSIBLE
            and slot.location != SlotLocation.OFFICE
        ):
            score += 25
        elif (
            flexibility == LocationFlexibility.OFFICE_ONLY
            and slot.location == SlotLocation.OFFICE
        ):
            score += 30

        if (
            task.preferred_time_of_day is not None
            and TimeOfDay.from_minutes(slot.start) == task.preferred_time_of_day
        ):
            score += 20

        if task.deadline is not None and slot.day in self.config.work_days:
            if self.config.day_index(slot.day) < days_between(task.deadline, now):
                score += 10

        if preferences.get(task.category, {}).get(slot.day):
            score += 15

        return score

    @staticmethod
    def _consume_slot(day_slots: list[TimeSlot], index: int, minutes: int) -> None:
        """Advance a slot's start past a placed task, dropping it when used up."""
        slot = day_slots[index]
        new_start = slot.start + minutes
        if new_start < slot.end:
            slot.start = new_start
        else:
            del day_slots[index]
