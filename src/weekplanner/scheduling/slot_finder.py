"""Free slot discovery.

Scans each working day in fixed steps and produces the maximal free
intervals that avoid blocked time and the lunch break.
"""

import logging
from typing import Optional

from weekplanner.domain.models import (
    BlockKind,
    FixedBlock,
    PlannerConfig,
    SlotLocation,
    TimeSlot,
    Weekday,
    intervals_overlap,
)
from weekplanner.domain.policies import DefaultEnergyPolicy, EnergyPolicy

logger = logging.getLogger(__name__)


class SlotFinder:
    """Finds free time slots for each configured work day.

    The scan walks forward from the start of the working day in
    ``step_minutes`` increments:

    1. A step that overlaps a blocked interval or lunch is skipped.
    2. From a free step the slot is extended one step at a time until the
       end of the day, a step touching blocked time or lunch, or the exact
       start of lunch. Steps are clipped to the end of the working day.
    3. The closed slot is tagged with the energy level at its start and a
       location, and the scan resumes at its end.

    Example:
        >>> finder = SlotFinder()
        >>> slots = finder.find_slots(blocked)
        >>> slots[Weekday.SUNDAY][0]
        TimeSlot(Sunday 08:00-12:30, high, home)
    """

    def __init__(
        self,
        energy_policy: Optional[EnergyPolicy] = None,
        config: Optional[PlannerConfig] = None,
    ):
        self.energy_policy = energy_policy or DefaultEnergyPolicy()
        self.config = config or PlannerConfig()

    def find_slots(
        self,
        blocked: dict[Weekday, list[FixedBlock]],
    ) -> dict[Weekday, list[TimeSlot]]:
        """Find free slots for every work day.

        Args:
            blocked: Blocked intervals per day (days may be missing).

        Returns:
            Dict mapping every configured work day to its free slots, in
            time order.
        """
        slots = {}
        for day in self.config.work_days:
            slots[day] = self.find_day_slots(day, blocked.get(day, []))
            logger.debug("%s: %d free slots", day.value, len(slots[day]))
        return slots

    def find_day_slots(self, day: Weekday, day_blocked: list[FixedBlock]) -> list[TimeSlot]:
        """Find free slots for a single day."""
        hours = self.config.working_hours
        step = self.config.step_minutes
        slots = []

        current = hours.day_start
        while current < hours.day_end:
            step_end = min(current + step, hours.day_end)
            if not self._is_usable(current, step_end, day_blocked):
                current += step
                continue

            slot_end = step_end
            while slot_end < hours.day_end:
                next_end = min(slot_end + step, hours.day_end)
                if not self._is_usable(slot_end, next_end, day_blocked):
                    break
                # Extension stops at the lunch boundary even if the step is free
                if slot_end == hours.lunch_start:
                    break
                slot_end = next_end

            slots.append(
                TimeSlot(
                    day=day,
                    start=current,
                    end=slot_end,
                    energy_level=self.energy_policy.energy_at(current),
                    location=self.determine_location(current, day_blocked),
                )
            )
            current = slot_end

        return slots

    def determine_location(self, start: int, day_blocked: list[FixedBlock]) -> SlotLocation:
        """Office if a commute ends close to the slot start, otherwise home."""
        proximity = self.config.commute_proximity_minutes
        near_transit = any(
            block.kind == BlockKind.COMMUTE and abs(start - block.end) < proximity
            for block in day_blocked
        )
        return SlotLocation.OFFICE if near_transit else SlotLocation.HOME

    def _is_usable(self, start: int, end: int, day_blocked: list[FixedBlock]) -> bool:
        """A step is usable when it avoids lunch and every blocked interval."""
        hours = self.config.working_hours
        if intervals_overlap(start, end, hours.lunch_start, hours.lunch_end):
            return False
        return not self._is_blocked(start, end, day_blocked)

    @staticmethod
    def _is_blocked(start: int, end: int, day_blocked: list[FixedBlock]) -> bool:
        return any(block.overlaps(start, end) for block in day_blocked)
