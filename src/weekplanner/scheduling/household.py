"""Household task distribution among family roles."""

import logging
from typing import Optional

from weekplanner.domain.models import ScheduledTask
from weekplanner.domain.policies import DefaultHouseholdPolicy, HouseholdPolicy

logger = logging.getLogger(__name__)


class HouseholdDistributor:
    """Allocates scheduled household tasks to family roles.

    Each task goes to the first role in its ``suitable_for`` list that
    accepts its category and still has capacity. Anything left over goes to
    the fallback role, whose cap is not enforced on that path.
    """

    def __init__(self, household_policy: Optional[HouseholdPolicy] = None):
        self.household_policy = household_policy or DefaultHouseholdPolicy()

    def distribute(
        self,
        household_tasks: list[ScheduledTask],
    ) -> dict[str, list[ScheduledTask]]:
        """Assign every household task to exactly one role.

        Args:
            household_tasks: Placed tasks from the household bucket.

        Returns:
            Dict mapping every configured role name to its tasks.
        """
        roles = {role.name: role for role in self.household_policy.roles()}
        fallback = self.household_policy.fallback_role()
        distribution: dict[str, list[ScheduledTask]] = {name: [] for name in roles}
        distribution.setdefault(fallback, [])

        for scheduled in household_tasks:
            assigned_to = None
            for member in scheduled.task.suitable_for:
                role = roles.get(member)
                if role is None:
                    continue
                if not role.accepts(scheduled.task):
                    continue
                if len(distribution[member]) >= role.max_tasks:
                    continue
                assigned_to = member
                break

            if assigned_to is None:
                assigned_to = fallback
                logger.debug("Task %s falls back to %s", scheduled.task.id, fallback)

            distribution[assigned_to].append(scheduled)

        return distribution
