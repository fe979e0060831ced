"""Policy definitions for planning rules.

This module contains configurable policies that define business rules for
task priority, time-of-day energy and household roles. Policies are kept
separate from the planning engine to allow independent testing and easy
modification.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from weekplanner.domain.models import EnergyLevel, EnergyWindow, FamilyRole


class PriorityPolicy(ABC):
    """Abstract base class for task priority rules."""

    @abstractmethod
    def category_weight(self, category: str) -> int:
        """Base priority for a task category (0 if unknown)."""
        pass

    @abstractmethod
    def urgency_bonus(self, days_left: int, buffer_days: int) -> int:
        """Bonus for a task whose deadline is ``days_left`` days away."""
        pass

    @abstractmethod
    def effort_bonus(self, duration_minutes: int, energy: Optional[EnergyLevel]) -> int:
        """Bonus for long or demanding tasks that need early planning."""
        pass


class EnergyPolicy(ABC):
    """Abstract base class for time-of-day energy rules."""

    @abstractmethod
    def energy_at(self, minutes: int) -> EnergyLevel:
        """Expected energy level for a time of day."""
        pass


class HouseholdPolicy(ABC):
    """Abstract base class for household role rules."""

    @abstractmethod
    def roles(self) -> list[FamilyRole]:
        """Configured roles, in output order."""
        pass

    @abstractmethod
    def fallback_role(self) -> str:
        """Role that receives tasks no other role can take."""
        pass


def _default_category_weights() -> dict[str, int]:
    return {
        "salary": 100,
        "vat": 90,
        "reconciliation": 80,
        "reporting": 70,
        "client_work": 60,
        "household": 40,
        "personal": 30,
    }


@dataclass
class DefaultPriorityPolicy(PriorityPolicy):
    """Default priority policy implementation.

    Deadline urgency:
    - due within 1 day: +200
    - due within 3 days: +100
    - due within 7 days: +50
    - within the task's buffer days: a further +150

    Effort:
    - longer than 2 hours (120 min): +30
    - high energy required: +20
    """

    category_weights: dict[str, int] = field(default_factory=_default_category_weights)

    critical_days: int = 1
    critical_bonus: int = 200
    soon_days: int = 3
    soon_bonus: int = 100
    week_days: int = 7
    week_bonus: int = 50
    buffer_bonus: int = 150

    long_task_minutes: int = 120
    long_task_bonus: int = 30
    high_energy_bonus: int = 20

    def category_weight(self, category: str) -> int:
        return self.category_weights.get(category, 0)

    def urgency_bonus(self, days_left: int, buffer_days: int) -> int:
        bonus = 0
        if days_left <= self.critical_days:
            bonus += self.critical_bonus
        elif days_left <= self.soon_days:
            bonus += self.soon_bonus
        elif days_left <= self.week_days:
            bonus += self.week_bonus

        # Independent of the tiers above
        if days_left <= buffer_days:
            bonus += self.buffer_bonus
        return bonus

    def effort_bonus(self, duration_minutes: int, energy: Optional[EnergyLevel]) -> int:
        bonus = 0
        if duration_minutes > self.long_task_minutes:
            bonus += self.long_task_bonus
        if energy == EnergyLevel.HIGH:
            bonus += self.high_energy_bonus
        return bonus


def _default_energy_windows() -> list[EnergyWindow]:
    return [
        EnergyWindow("morning", 8 * 60, 10 * 60, EnergyLevel.HIGH),
        EnergyWindow("morning", 10 * 60, 12 * 60, EnergyLevel.MEDIUM),
        EnergyWindow("afternoon", 13 * 60, 15 * 60, EnergyLevel.LOW),
        EnergyWindow("afternoon", 15 * 60, 17 * 60, EnergyLevel.MEDIUM),
        EnergyWindow("evening", 17 * 60, 20 * 60, EnergyLevel.LOW),
    ]


@dataclass
class DefaultEnergyPolicy(EnergyPolicy):
    """Default energy pattern.

    08-10 high, 10-12 medium, 13-15 low, 15-17 medium, anything else low.
    Windows are matched on the hour only, so 13:30 falls in the 13-15 window.
    """

    windows: list[EnergyWindow] = field(default_factory=_default_energy_windows)
    fallback: EnergyLevel = EnergyLevel.LOW

    def energy_at(self, minutes: int) -> EnergyLevel:
        hour_start = (minutes // 60) * 60
        for window in self.windows:
            if window.contains(hour_start):
                return window.energy
        return self.fallback


def _default_family_roles() -> list[FamilyRole]:
    return [
        FamilyRole("parent", max_tasks=15, capabilities=frozenset({"all"})),
        FamilyRole(
            "teen16",
            max_tasks=7,
            capabilities=frozenset({"driving", "cooking_simple", "cleaning", "garden"}),
        ),
        FamilyRole(
            "teen14",
            max_tasks=5,
            capabilities=frozenset({"cleaning", "dishes", "laundry", "garden_simple"}),
        ),
    ]


@dataclass
class DefaultHouseholdPolicy(HouseholdPolicy):
    """Default household roles.

    - parent: up to 15 tasks, any task
    - teen16: up to 7 tasks (driving, simple cooking, cleaning, garden)
    - teen14: up to 5 tasks (cleaning, dishes, laundry, simple garden work)

    Tasks nobody can take go to the parent regardless of the parent's cap.
    """

    family_roles: list[FamilyRole] = field(default_factory=_default_family_roles)
    fallback: str = "parent"

    def roles(self) -> list[FamilyRole]:
        return list(self.family_roles)

    def fallback_role(self) -> str:
        return self.fallback
