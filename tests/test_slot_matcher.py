"""Tests for greedy slot matching."""

from datetime import date, datetime

import pytest

from weekplanner.domain.models import (
    EnergyLevel,
    LocationFlexibility,
    PlannerConfig,
    PrioritizedTask,
    SlotLocation,
    Task,
    TaskContext,
    TimeOfDay,
    TimeSlot,
    Weekday,
    parse_hhmm,
)
from weekplanner.scheduling.slot_matcher import SlotMatcher

NOW = datetime(2024, 1, 14, 8, 0)


def make_slot(
    day: Weekday,
    start: str,
    end: str,
    energy: EnergyLevel = EnergyLevel.LOW,
    location: SlotLocation = SlotLocation.HOME,
) -> TimeSlot:
    return TimeSlot(day, parse_hhmm(start), parse_hhmm(end), energy, location)


def prioritized(*tasks: Task) -> list[PrioritizedTask]:
    return [PrioritizedTask(task, 0) for task in tasks]


class TestScoreSlot:
    """Tests for SlotMatcher.score_slot."""

    @pytest.fixture
    def matcher(self):
        return SlotMatcher()

    def score(self, matcher, task, slot, preferences=None):
        return matcher.score_slot(task, slot, preferences or {}, NOW)

    def test_plain_task_scores_zero(self, matcher):
        slot = make_slot(Weekday.SUNDAY, "08:00", "12:30", EnergyLevel.HIGH)
        assert self.score(matcher, Task(id="a"), slot) == 0

    @pytest.mark.parametrize(
        "task_energy, slot_energy, expected",
        [
            (EnergyLevel.HIGH, EnergyLevel.HIGH, 30),
            (EnergyLevel.HIGH, EnergyLevel.MEDIUM, 20),
            (EnergyLevel.HIGH, EnergyLevel.LOW, 0),
            (EnergyLevel.MEDIUM, EnergyLevel.HIGH, 0),
            (EnergyLevel.LOW, EnergyLevel.LOW, 30),
            (EnergyLevel.LOW, EnergyLevel.MEDIUM, 10),
            (EnergyLevel.LOW, EnergyLevel.HIGH, 10),
        ],
    )
    def test_energy_match(self, matcher, task_energy, slot_energy, expected):
        task = Task(id="a", energy_level=task_energy)
        slot = make_slot(Weekday.SUNDAY, "08:00", "09:00", slot_energy)
        assert self.score(matcher, task, slot) == expected

    @pytest.mark.parametrize(
        "flexibility, location, expected",
        [
            (LocationFlexibility.ANYWHERE, SlotLocation.OFFICE, 20),
            (LocationFlexibility.ANYWHERE, SlotLocation.HOME, 20),
            (LocationFlexibility.REMOTE_POSSIBLE, SlotLocation.HOME, 25),
            (LocationFlexibility.REMOTE_POSSIBLE, SlotLocation.OFFICE, 0),
            (LocationFlexibility.OFFICE_ONLY, SlotLocation.OFFICE, 30),
            (LocationFlexibility.OFFICE_ONLY, SlotLocation.HOME, 0),
        ],
    )
    def test_location_fit(self, matcher, flexibility, location, expected):
        task = Task(id="a", location_flexibility=flexibility)
        slot = make_slot(Weekday.SUNDAY, "08:00", "09:00", location=location)
        assert self.score(matcher, task, slot) == expected

    def test_time_of_day_preference(self, matcher):
        task = Task(id="a", preferred_time_of_day=TimeOfDay.AFTERNOON)
        afternoon = make_slot(Weekday.SUNDAY, "13:30", "15:00")
        evening = make_slot(Weekday.SUNDAY, "17:00", "20:00")
        assert self.score(matcher, task, afternoon) == 20
        assert self.score(matcher, task, evening) == 0

    def test_deadline_proximity(self, matcher):
        # Due in 3 days: Sunday (0), Monday (1), Tuesday (2) are before it
        task = Task(id="a", deadline=date(2024, 1, 17))
        assert self.score(matcher, task, make_slot(Weekday.SUNDAY, "08:00", "09:00")) == 10
        assert self.score(matcher, task, make_slot(Weekday.TUESDAY, "08:00", "09:00")) == 10
        assert self.score(matcher, task, make_slot(Weekday.WEDNESDAY, "08:00", "09:00")) == 0

    def test_passed_deadline_counts_distance(self, matcher):
        # Four days and eight hours ago rounds up to five days
        task = Task(id="a", deadline=date(2024, 1, 10))
        assert self.score(matcher, task, make_slot(Weekday.SUNDAY, "08:00", "09:00")) == 10
        assert self.score(matcher, task, make_slot(Weekday.THURSDAY, "08:00", "09:00")) == 10

    def test_category_day_preference(self, matcher):
        task = Task(id="a", category="vat")
        preferences = {"vat": {Weekday.MONDAY: True, Weekday.TUESDAY: False}}
        monday = make_slot(Weekday.MONDAY, "08:00", "09:00")
        tuesday = make_slot(Weekday.TUESDAY, "08:00", "09:00")
        assert self.score(matcher, task, monday, preferences) == 15
        assert self.score(matcher, task, tuesday, preferences) == 0

    def test_components_add_up(self, matcher):
        task = Task(
            id="a",
            category="vat",
            deadline=date(2024, 1, 17),
            energy_level=EnergyLevel.HIGH,
            location_flexibility=LocationFlexibility.REMOTE_POSSIBLE,
            preferred_time_of_day=TimeOfDay.MORNING,
        )
        slot = make_slot(Weekday.SUNDAY, "08:00", "12:30", EnergyLevel.HIGH)
        preferences = {"vat": {Weekday.SUNDAY: True}}
        assert self.score(matcher, task, slot, preferences) == 30 + 25 + 20 + 10 + 15


class TestSlotMatcher:
    """Tests for SlotMatcher.match."""

    @pytest.fixture
    def matcher(self):
        return SlotMatcher()

    def test_places_task_at_slot_start(self, matcher):
        slots = {Weekday.SUNDAY: [make_slot(Weekday.SUNDAY, "08:00", "12:30")]}
        result = matcher.match(
            prioritized(Task(id="a", category="vat", estimated_duration=60)), slots, now=NOW
        )

        assert len(result.work) == 1
        placed = result.work[0]
        assert (placed.day, placed.start, placed.end) == (Weekday.SUNDAY, 480, 540)
        assert placed.duration_minutes == 60

    def test_slot_shrinks_after_placement(self, matcher):
        slots = {Weekday.SUNDAY: [make_slot(Weekday.SUNDAY, "08:00", "12:30")]}
        result = matcher.match(
            prioritized(Task(id="a", estimated_duration=60)), slots, now=NOW
        )
        remaining = result.remaining_slots[Weekday.SUNDAY]
        assert [(s.start, s.end) for s in remaining] == [(540, 750)]

    def test_exhausted_slot_is_removed(self, matcher):
        slots = {Weekday.SUNDAY: [make_slot(Weekday.SUNDAY, "12:00", "12:30")]}
        result = matcher.match(prioritized(Task(id="a")), slots, now=NOW)
        assert result.remaining_slots[Weekday.SUNDAY] == []

    def test_caller_slots_are_not_modified(self, matcher):
        slots = {Weekday.SUNDAY: [make_slot(Weekday.SUNDAY, "08:00", "12:30")]}
        matcher.match(prioritized(Task(id="a", estimated_duration=90)), slots, now=NOW)
        assert (slots[Weekday.SUNDAY][0].start, slots[Weekday.SUNDAY][0].end) == (480, 750)

    def test_too_short_slots_are_skipped(self, matcher):
        slots = {
            Weekday.SUNDAY: [
                make_slot(Weekday.SUNDAY, "12:00", "12:30", EnergyLevel.HIGH),
                make_slot(Weekday.SUNDAY, "13:30", "20:00"),
            ]
        }
        task = Task(id="a", category="vat", estimated_duration=60, energy_level=EnergyLevel.HIGH)
        result = matcher.match(prioritized(task), slots, now=NOW)
        assert result.work[0].start == parse_hhmm("13:30")
        assert result.work[0].match_score == 0

    def test_no_fitting_slot_leaves_task_unscheduled(self, matcher):
        slots = {Weekday.SUNDAY: [make_slot(Weekday.SUNDAY, "08:00", "09:00")]}
        result = matcher.match(
            prioritized(Task(id="a", estimated_duration=120)), slots, now=NOW
        )
        assert [t.id for t in result.unscheduled] == ["a"]
        assert result.work == []

    def test_ties_go_to_first_slot(self, matcher):
        slots = {
            Weekday.SUNDAY: [make_slot(Weekday.SUNDAY, "13:30", "20:00")],
            Weekday.MONDAY: [make_slot(Weekday.MONDAY, "13:30", "20:00")],
        }
        result = matcher.match(prioritized(Task(id="a", category="vat")), slots, now=NOW)
        assert result.work[0].day == Weekday.SUNDAY

    def test_best_score_wins_over_order(self, matcher):
        slots = {
            Weekday.SUNDAY: [make_slot(Weekday.SUNDAY, "13:30", "20:00", EnergyLevel.LOW)],
            Weekday.MONDAY: [make_slot(Weekday.MONDAY, "08:00", "12:30", EnergyLevel.HIGH)],
        }
        task = Task(id="a", category="vat", energy_level=EnergyLevel.HIGH)
        result = matcher.match(prioritized(task), slots, now=NOW)
        assert result.work[0].day == Weekday.MONDAY
        assert result.work[0].match_score == 30

    def test_preference_steers_day(self, matcher):
        slots = {
            Weekday.SUNDAY: [make_slot(Weekday.SUNDAY, "08:00", "12:30")],
            Weekday.MONDAY: [make_slot(Weekday.MONDAY, "08:00", "12:30")],
        }
        result = matcher.match(
            prioritized(Task(id="a", category="vat")),
            slots,
            preferences={"vat": {Weekday.MONDAY: True}},
            now=NOW,
        )
        assert result.work[0].day == Weekday.MONDAY

    def test_tasks_are_placed_back_to_back(self, matcher):
        slots = {Weekday.SUNDAY: [make_slot(Weekday.SUNDAY, "08:00", "12:30")]}
        tasks = prioritized(
            Task(id="a", category="vat", estimated_duration=60),
            Task(id="b", category="vat", estimated_duration=45),
            Task(id="c", category="vat"),
        )
        result = matcher.match(tasks, slots, now=NOW)
        placed = [(t.task.id, t.start, t.end) for t in result.work]
        assert placed == [("a", 480, 540), ("b", 540, 585), ("c", 585, 615)]

    def test_bucketing(self, matcher):
        slots = {Weekday.SUNDAY: [make_slot(Weekday.SUNDAY, "08:00", "12:30")]}
        tasks = prioritized(
            Task(id="work", category="vat"),
            Task(id="home", category="personal", context=TaskContext.HOME),
            Task(id="me", category="personal"),
        )
        result = matcher.match(tasks, slots, now=NOW)
        assert [t.task.id for t in result.work] == ["work"]
        assert [t.task.id for t in result.household] == ["home"]
        assert [t.task.id for t in result.personal] == ["me"]

    def test_location_copied_from_slot(self, matcher):
        config = PlannerConfig(work_days=(Weekday.THURSDAY,))
        slots = {
            Weekday.THURSDAY: [
                make_slot(Weekday.THURSDAY, "12:00", "12:30", location=SlotLocation.OFFICE)
            ]
        }
        task = Task(id="a", category="vat", location_flexibility=LocationFlexibility.OFFICE_ONLY)
        result = SlotMatcher(config).match(prioritized(task), slots, now=NOW)
        assert result.work[0].location == SlotLocation.OFFICE
        assert result.work[0].match_score == 30
