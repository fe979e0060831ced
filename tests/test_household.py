"""Tests for household task distribution."""

import pytest

from weekplanner.domain.models import (
    FamilyRole,
    ScheduledTask,
    SlotLocation,
    Task,
    TaskContext,
    Weekday,
)
from weekplanner.domain.policies import DefaultHouseholdPolicy
from weekplanner.scheduling.household import HouseholdDistributor


def make_home_task(task_id: str, category: str, suitable_for=()) -> ScheduledTask:
    task = Task(
        id=task_id,
        name=task_id,
        category=category,
        context=TaskContext.HOME,
        suitable_for=tuple(suitable_for),
    )
    return ScheduledTask(task, Weekday.SUNDAY, 480, 510, SlotLocation.HOME, 0)


def ids(tasks):
    return [t.task.id for t in tasks]


class TestHouseholdDistributor:
    """Tests for HouseholdDistributor."""

    @pytest.fixture
    def distributor(self):
        return HouseholdDistributor()

    def test_every_role_present(self, distributor):
        assert distributor.distribute([]) == {"parent": [], "teen16": [], "teen14": []}

    def test_first_suitable_role_wins(self, distributor):
        result = distributor.distribute(
            [make_home_task("h1", "cleaning", ["teen14", "teen16"])]
        )
        assert ids(result["teen14"]) == ["h1"]
        assert result["teen16"] == []

    def test_incapable_role_is_skipped(self, distributor):
        result = distributor.distribute(
            [make_home_task("h1", "driving", ["teen14", "teen16"])]
        )
        assert ids(result["teen16"]) == ["h1"]
        assert result["teen14"] == []

    def test_no_suitable_role_falls_back_to_parent(self, distributor):
        result = distributor.distribute([make_home_task("h1", "maintenance", ["teen16"])])
        assert ids(result["parent"]) == ["h1"]

    def test_empty_suitable_for_goes_to_parent(self, distributor):
        result = distributor.distribute([make_home_task("h1", "cleaning")])
        assert ids(result["parent"]) == ["h1"]

    def test_unknown_role_is_ignored(self, distributor):
        result = distributor.distribute(
            [make_home_task("h1", "cleaning", ["grandma", "teen16"])]
        )
        assert ids(result["teen16"]) == ["h1"]
        assert "grandma" not in result

    def test_role_cap_is_enforced(self, distributor):
        tasks = [make_home_task(f"h{i}", "dishes", ["teen14"]) for i in range(7)]
        result = distributor.distribute(tasks)
        assert ids(result["teen14"]) == ["h0", "h1", "h2", "h3", "h4"]
        assert ids(result["parent"]) == ["h5", "h6"]

    def test_overflow_moves_to_next_suitable_role(self, distributor):
        tasks = [make_home_task(f"h{i}", "cleaning", ["teen14", "teen16"]) for i in range(7)]
        result = distributor.distribute(tasks)
        assert len(result["teen14"]) == 5
        assert ids(result["teen16"]) == ["h5", "h6"]

    def test_every_task_assigned_exactly_once(self, distributor):
        tasks = [
            make_home_task("a", "cleaning", ["teen14"]),
            make_home_task("b", "driving", ["teen16"]),
            make_home_task("c", "laundry", ["teen16", "teen14"]),
            make_home_task("d", "repairs", []),
        ]
        result = distributor.distribute(tasks)
        assigned = [t for role_tasks in result.values() for t in ids(role_tasks)]
        assert sorted(assigned) == ["a", "b", "c", "d"]

    def test_fallback_ignores_its_cap(self):
        policy = DefaultHouseholdPolicy(family_roles=[FamilyRole("parent", max_tasks=1)])
        tasks = [make_home_task(f"h{i}", "cleaning") for i in range(3)]
        result = HouseholdDistributor(policy).distribute(tasks)
        assert len(result["parent"]) == 3

    def test_fallback_role_is_always_present(self):
        policy = DefaultHouseholdPolicy(
            family_roles=[FamilyRole("kid", max_tasks=2, capabilities=frozenset({"dishes"}))],
            fallback="adult",
        )
        result = HouseholdDistributor(policy).distribute(
            [make_home_task("h1", "cooking", ["kid"])]
        )
        assert list(result) == ["kid", "adult"]
        assert ids(result["adult"]) == ["h1"]
