"""Tests for plan validation."""

from datetime import datetime

import pytest

from weekplanner.domain.models import (
    PlannerConfig,
    PlanRequest,
    ScheduledTask,
    ScheduleResult,
    SlotLocation,
    Task,
    TaskContext,
    Weekday,
    WeeklyCommitment,
    parse_hhmm,
)
from weekplanner.scheduling.planner import WeeklyPlanner
from weekplanner.validation.validator import (
    ScheduleValidator,
    ValidationError,
    ValidationErrorType,
)

NOW = datetime(2024, 1, 14, 8, 0)


def place(task: Task, day: Weekday, start: str, minutes=None) -> ScheduledTask:
    begin = parse_hhmm(start)
    length = minutes if minutes is not None else task.duration_minutes
    return ScheduledTask(task, day, begin, begin + length, SlotLocation.HOME, 0)


def error_types(result):
    return {e.error_type for e in result.errors}


class TestScheduleValidator:
    """Tests for ScheduleValidator."""

    @pytest.fixture
    def validator(self):
        return ScheduleValidator()

    def test_generated_plan_is_valid(self, validator):
        request = PlanRequest(
            commitments=[
                WeeklyCommitment(Weekday.MONDAY, parse_hhmm("09:00"), parse_hhmm("11:00"))
            ],
            tasks=[
                Task(id="a", category="vat", estimated_duration=120),
                Task(id="b", estimated_duration=60),
                Task(id="c", category="dishes", context=TaskContext.HOME, suitable_for=("teen14",)),
            ],
        )
        response = WeeklyPlanner().generate_plan(request, now=NOW)
        result = validator.validate(response.schedule, request)
        assert result.is_valid
        assert result.errors == []

    def test_missing_task(self, validator):
        request = PlanRequest(tasks=[Task(id="a"), Task(id="b")])
        schedule = ScheduleResult(unscheduled=[Task(id="a")])
        result = validator.validate(schedule, request)
        assert not result.is_valid
        assert [(e.error_type, e.task_id) for e in result.errors] == [
            (ValidationErrorType.TASK_MISSING, "b")
        ]

    def test_duplicated_task(self, validator):
        task = Task(id="a", category="vat")
        request = PlanRequest(tasks=[task])
        schedule = ScheduleResult(
            work=[place(task, Weekday.SUNDAY, "08:00")],
            unscheduled=[task],
        )
        assert ValidationErrorType.TASK_DUPLICATED in error_types(validator.validate(schedule, request))

    def test_unknown_task(self, validator):
        schedule = ScheduleResult(unscheduled=[Task(id="ghost")])
        result = validator.validate(schedule, PlanRequest())
        assert error_types(result) == {ValidationErrorType.UNKNOWN_TASK}

    def test_wrong_bucket(self, validator):
        task = Task(id="a", category="personal")
        schedule = ScheduleResult(work=[place(task, Weekday.SUNDAY, "08:00")])
        result = validator.validate(schedule, PlanRequest(tasks=[task]))
        assert error_types(result) == {ValidationErrorType.WRONG_BUCKET}

    def test_overlapping_tasks(self, validator):
        a = Task(id="a", category="vat", estimated_duration=60)
        b = Task(id="b", category="vat", estimated_duration=60)
        schedule = ScheduleResult(
            work=[place(a, Weekday.SUNDAY, "08:00"), place(b, Weekday.SUNDAY, "08:30")]
        )
        result = validator.validate(schedule, PlanRequest(tasks=[a, b]))
        assert error_types(result) == {ValidationErrorType.TASKS_OVERLAP}
        assert result.errors[0].task_id == "b"

    def test_back_to_back_is_fine(self, validator):
        a = Task(id="a", category="vat", estimated_duration=60)
        b = Task(id="b", category="vat", estimated_duration=60)
        schedule = ScheduleResult(
            work=[place(a, Weekday.SUNDAY, "08:00"), place(b, Weekday.SUNDAY, "09:00")]
        )
        assert validator.validate(schedule, PlanRequest(tasks=[a, b])).is_valid

    def test_overlaps_commute(self, validator):
        task = Task(id="a", category="vat", estimated_duration=60)
        request = PlanRequest(
            commitments=[
                WeeklyCommitment(Weekday.MONDAY, parse_hhmm("10:00"), parse_hhmm("11:00"))
            ],
            tasks=[task],
        )
        schedule = ScheduleResult(work=[place(task, Weekday.MONDAY, "08:30")])
        result = validator.validate(schedule, request)
        assert error_types(result) == {ValidationErrorType.OVERLAPS_FIXED_BLOCK}
        assert "commute" in result.errors[0].message

    def test_overlaps_lunch(self, validator):
        task = Task(id="a", category="vat", estimated_duration=60)
        schedule = ScheduleResult(work=[place(task, Weekday.SUNDAY, "12:00")])
        result = validator.validate(schedule, PlanRequest(tasks=[task]))
        assert error_types(result) == {ValidationErrorType.OVERLAPS_LUNCH}

    def test_outside_working_hours(self, validator):
        task = Task(id="a", category="vat", estimated_duration=60)
        schedule = ScheduleResult(work=[place(task, Weekday.SUNDAY, "19:30")])
        result = validator.validate(schedule, PlanRequest(tasks=[task]))
        assert error_types(result) == {ValidationErrorType.OUTSIDE_WORKING_HOURS}

    def test_not_a_work_day(self, validator):
        task = Task(id="a", category="vat")
        schedule = ScheduleResult(work=[place(task, Weekday.FRIDAY, "08:00")])
        result = validator.validate(schedule, PlanRequest(tasks=[task]))
        assert error_types(result) == {ValidationErrorType.NOT_A_WORK_DAY}

    def test_duration_mismatch(self, validator):
        task = Task(id="a", category="vat", estimated_duration=60)
        schedule = ScheduleResult(work=[place(task, Weekday.SUNDAY, "08:00", minutes=30)])
        result = validator.validate(schedule, PlanRequest(tasks=[task]))
        assert error_types(result) == {ValidationErrorType.DURATION_MISMATCH}

    def test_role_cap_exceeded(self, validator):
        tasks = [
            Task(id=f"h{i}", category="dishes", context=TaskContext.HOME, estimated_duration=30)
            for i in range(6)
        ]
        placed = [
            place(task, Weekday.SUNDAY, f"{8 + i // 2:02d}:{(i % 2) * 30:02d}")
            for i, task in enumerate(tasks)
        ]
        schedule = ScheduleResult(
            household=placed,
            family_tasks={"parent": [], "teen16": [], "teen14": placed},
        )
        result = validator.validate(schedule, PlanRequest(tasks=tasks))
        assert error_types(result) == {ValidationErrorType.ROLE_CAP_EXCEEDED}

    def test_role_not_capable(self, validator):
        task = Task(id="h", category="driving", context=TaskContext.HOME)
        placed = place(task, Weekday.SUNDAY, "08:00")
        schedule = ScheduleResult(
            household=[placed],
            family_tasks={"parent": [], "teen16": [], "teen14": [placed]},
        )
        result = validator.validate(schedule, PlanRequest(tasks=[task]))
        assert error_types(result) == {ValidationErrorType.ROLE_NOT_CAPABLE}

    def test_family_mismatch(self, validator):
        task = Task(id="h", category="dishes", context=TaskContext.HOME)
        schedule = ScheduleResult(
            household=[place(task, Weekday.SUNDAY, "08:00")],
            family_tasks={"parent": [], "teen16": [], "teen14": []},
        )
        result = validator.validate(schedule, PlanRequest(tasks=[task]))
        assert error_types(result) == {ValidationErrorType.FAMILY_TASK_MISMATCH}
        assert result.errors[0].details["missing"] == ["h"]

    def test_fallback_over_cap_is_a_warning(self, validator):
        tasks = [
            Task(id=f"h{i:02d}", category="repairs", context=TaskContext.HOME, estimated_duration=30)
            for i in range(16)
        ]
        config = PlannerConfig()
        placed = [
            place(task, config.work_days[i // 8], f"{8 + (i % 8) // 2:02d}:{(i % 2) * 30:02d}")
            for i, task in enumerate(tasks)
        ]
        schedule = ScheduleResult(
            household=placed,
            family_tasks={"parent": placed, "teen16": [], "teen14": []},
        )
        result = validator.validate(schedule, PlanRequest(tasks=tasks))
        assert result.is_valid
        assert result.warnings == ["Fallback role parent has 16 tasks (cap 15)"]


class TestValidationError:
    def test_str(self):
        error = ValidationError(
            error_type=ValidationErrorType.OVERLAPS_LUNCH,
            message="Task overlaps the lunch break",
            task_id="a",
            day=Weekday.SUNDAY,
        )
        assert str(error) == "[overlaps_lunch] Task a: Task overlaps the lunch break (Sunday)"
