"""Domain models for the weekly planning engine.

This module contains all core data structures used throughout the planner,
including commitments, tasks, free time slots, scheduled tasks and the
schedule outputs. Times are held as integer minutes since midnight; the
``"HH:MM"`` string form only appears at the dict boundary.
"""

import math
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

_HHMM = re.compile(r"^(\d{1,2}):(\d{2})$")


class ScheduleInputError(ValueError):
    """Raised when a planning request payload is malformed."""


def parse_hhmm(value: str) -> int:
    """Convert an ``"HH:MM"`` 24-hour string to minutes since midnight."""
    if not isinstance(value, str):
        raise ScheduleInputError(f"Invalid time value: {value!r}")
    match = _HHMM.match(value.strip())
    if not match:
        raise ScheduleInputError(f"Invalid time string: {value!r}")
    hours, mins = int(match.group(1)), int(match.group(2))
    if hours > 23 or mins > 59:
        raise ScheduleInputError(f"Time out of range: {value!r}")
    return hours * 60 + mins


def format_hhmm(minutes: int) -> str:
    """Convert minutes since midnight to ``"HH:MM"``.

    Values past midnight are not wrapped, so a commute buffer after a late
    treatment renders as e.g. ``"24:30"``.
    """
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


def intervals_overlap(start1: int, end1: int, start2: int, end2: int) -> bool:
    """Half-open overlap test; touching endpoints do not overlap."""
    return start1 < end2 and end1 > start2


def round_hours(value: float) -> float:
    """Round to one decimal, halves away from zero."""
    return math.floor(value * 10 + 0.5) / 10


def days_between(deadline: date, now: datetime) -> int:
    """Whole days between ``now`` and the start of ``deadline`` (ceiling).

    The distance is unsigned, so a deadline that has passed counts the days
    since it, not a negative number.
    """
    deadline_start = datetime(deadline.year, deadline.month, deadline.day)
    return math.ceil(abs((deadline_start - now).total_seconds()) / 86400)


class Weekday(Enum):
    """Days of the week, in the order the planner presents them."""

    SUNDAY = "Sunday"
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"

    @classmethod
    def parse(cls, value: Any) -> "Weekday":
        """Accept a Weekday, a day name in any case, or a 0-6 index (Sunday=0)."""
        if isinstance(value, Weekday):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            if 0 <= value < 7:
                return list(cls)[value]
        elif isinstance(value, str):
            for day in cls:
                if day.value.lower() == value.strip().lower():
                    return day
        raise ScheduleInputError(f"Unknown day: {value!r}")


DEFAULT_WORK_WEEK: tuple[Weekday, ...] = (
    Weekday.SUNDAY,
    Weekday.MONDAY,
    Weekday.TUESDAY,
    Weekday.WEDNESDAY,
    Weekday.THURSDAY,
)


class EnergyLevel(Enum):
    """Expected focus capacity."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class LocationFlexibility(Enum):
    """How constrained a task is to a particular location."""

    ANYWHERE = "anywhere"
    REMOTE_POSSIBLE = "remote_possible"
    OFFICE_ONLY = "office_only"


class TimeOfDay(Enum):
    """Coarse period of the day used for task preferences."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"

    @classmethod
    def from_minutes(cls, minutes: int) -> "TimeOfDay":
        """Bucket a time by its hour: before 12, 12-17, 17 and later."""
        hour = minutes // 60
        if hour < 12:
            return cls.MORNING
        if hour < 17:
            return cls.AFTERNOON
        return cls.EVENING


class TaskContext(Enum):
    """Where a task belongs in the user's life."""

    WORK = "work"
    HOME = "home"


class BlockKind(Enum):
    """Kinds of blocked time."""

    TREATMENT = "treatment"
    COMMUTE = "commute"


class SlotLocation(Enum):
    """Where a free slot is expected to be spent."""

    OFFICE = "office"
    HOME = "home"


class WarningType(Enum):
    """Types of schedule warnings."""

    OVERLOAD = "overload"
    UNSCHEDULED = "unscheduled"
    DEADLINE_RISK = "deadline_risk"


def _parse_enum(enum_cls, value: Any, field_name: str):
    if value is None or value == "":
        return None
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise ScheduleInputError(f"Invalid {field_name}: {value!r}") from None


def _parse_minutes(value: Any) -> int:
    """Accept a whole, non-negative number of minutes; JSON may send 45.0."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ScheduleInputError(f"Invalid estimated duration: {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ScheduleInputError(f"Invalid estimated duration: {value!r}")
    if value < 0:
        raise ScheduleInputError(f"Invalid estimated duration: {value!r}")
    return int(value)


def _get(data: dict, *keys: str, default: Any = None) -> Any:
    """Return the first present key, so snake_case and camelCase both work."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


@dataclass(frozen=True)
class WorkingHoursConfig:
    """Working day bounds and lunch break, in minutes since midnight.

    Attributes:
        day_start: When the working day starts (default 08:00).
        day_end: When the working day ends (default 20:00).
        lunch_start: Lunch break start (default 12:30).
        lunch_end: Lunch break end (default 13:30).
    """

    day_start: int = 480
    day_end: int = 1200
    lunch_start: int = 750
    lunch_end: int = 810

    def __post_init__(self):
        if self.day_start >= self.day_end:
            raise ScheduleInputError("Working day must end after it starts")
        if self.lunch_start > self.lunch_end:
            raise ScheduleInputError("Lunch break must end after it starts")

    @classmethod
    def from_times(
        cls,
        day_start: str,
        day_end: str,
        lunch_start: str,
        lunch_end: str,
    ) -> "WorkingHoursConfig":
        """Create a config from ``"HH:MM"`` strings."""
        return cls(
            day_start=parse_hhmm(day_start),
            day_end=parse_hhmm(day_end),
            lunch_start=parse_hhmm(lunch_start),
            lunch_end=parse_hhmm(lunch_end),
        )


@dataclass(frozen=True)
class EnergyWindow:
    """A named period of the day mapped to a default energy level."""

    name: str
    start: int
    end: int
    energy: EnergyLevel

    def contains(self, minutes: int) -> bool:
        return self.start <= minutes < self.end


@dataclass
class PlannerConfig:
    """Tunable parameters of the planning engine.

    Attributes:
        working_hours: Day bounds and lunch break.
        work_days: Ordered days that get free slots; the index of a day in
            this tuple is its position for deadline proximity scoring.
        step_minutes: Granularity of the free slot scan.
        commute_buffer_minutes: Travel time blocked before and after a commitment.
        commute_proximity_minutes: A slot starting this close to the end of a
            commute is considered an office slot.
        default_buffer_days: Buffer days for tasks that do not set them.
        overload_hours: Daily hours above which an overload warning is raised.
        busy_day_hours: Daily hours above which a day is listed as busy.
        deadline_risk_days: Unscheduled tasks due within this many days raise
            a deadline risk warning.
    """

    working_hours: WorkingHoursConfig = field(default_factory=WorkingHoursConfig)
    work_days: tuple[Weekday, ...] = DEFAULT_WORK_WEEK
    step_minutes: int = 30
    commute_buffer_minutes: int = 60
    commute_proximity_minutes: int = 60
    default_buffer_days: int = 2
    overload_hours: float = 10.0
    busy_day_hours: float = 8.0
    deadline_risk_days: int = 2

    def __post_init__(self):
        if self.step_minutes <= 0:
            raise ScheduleInputError("step_minutes must be positive")
        if len(set(self.work_days)) != len(self.work_days):
            raise ScheduleInputError("work_days must not repeat a day")

    def day_index(self, day: Weekday) -> int:
        """Position of a day within the configured week."""
        return self.work_days.index(day)

    @classmethod
    def from_dict(cls, data: dict) -> "PlannerConfig":
        """Build a config from a JSON-style dict; missing keys keep defaults."""
        kwargs: dict[str, Any] = {}
        hours = _get(data, "working_hours", "workingHours")
        if hours:
            lunch = _get(hours, "lunch_break", "lunchBreak", default={})
            defaults = WorkingHoursConfig()
            kwargs["working_hours"] = WorkingHoursConfig(
                day_start=parse_hhmm(hours["start"]) if "start" in hours else defaults.day_start,
                day_end=parse_hhmm(hours["end"]) if "end" in hours else defaults.day_end,
                lunch_start=parse_hhmm(lunch["start"]) if "start" in lunch else defaults.lunch_start,
                lunch_end=parse_hhmm(lunch["end"]) if "end" in lunch else defaults.lunch_end,
            )
        days = _get(data, "work_days", "workDays")
        if days:
            kwargs["work_days"] = tuple(Weekday.parse(d) for d in days)
        for name, alias in (
            ("step_minutes", "stepMinutes"),
            ("commute_buffer_minutes", "commuteBufferMinutes"),
            ("commute_proximity_minutes", "commuteProximityMinutes"),
            ("default_buffer_days", "defaultBufferDays"),
            ("overload_hours", "overloadHours"),
            ("busy_day_hours", "busyDayHours"),
            ("deadline_risk_days", "deadlineRiskDays"),
        ):
            value = _get(data, name, alias)
            if value is not None:
                kwargs[name] = value
        return cls(**kwargs)


@dataclass(frozen=True)
class WeeklyCommitment:
    """A caller-supplied fixed commitment (e.g. a treatment) for one day."""

    day: Weekday
    start: int
    end: int
    title: str = ""
    location: str = "hospital"

    @classmethod
    def from_dict(cls, data: dict) -> "WeeklyCommitment":
        if "day" not in data:
            raise ScheduleInputError(f"Commitment without a day: {data!r}")
        start = parse_hhmm(_get(data, "start_time", "startTime", "start"))
        end = parse_hhmm(_get(data, "end_time", "endTime", "end"))
        if end <= start:
            raise ScheduleInputError(
                f"Commitment on {data['day']} ends at or before it starts"
            )
        return cls(
            day=Weekday.parse(data["day"]),
            start=start,
            end=end,
            title=_get(data, "title", "name", default=""),
            location=_get(data, "location", default="hospital"),
        )


@dataclass(frozen=True)
class FixedBlock:
    """An immovable occupied interval on a given day."""

    day: Weekday
    start: int
    end: int
    kind: BlockKind
    location: str

    def overlaps(self, start: int, end: int) -> bool:
        return intervals_overlap(start, end, self.start, self.end)

    def to_dict(self) -> dict:
        return {
            "day": self.day.value,
            "start": format_hhmm(self.start),
            "end": format_hhmm(self.end),
            "type": self.kind.value,
            "location": self.location,
        }


@dataclass(frozen=True)
class Task:
    """A unit of work to schedule.

    Attributes:
        id: Unique identifier.
        name: Display name, used in warnings.
        category: Category key for priority weighting.
        deadline: Optional due date.
        buffer_days: Slack needed before the deadline (None means default).
        estimated_duration: Minutes; None or 0 means the default duration.
        energy_level: Required energy level.
        location_flexibility: Where the task can be done.
        preferred_time_of_day: Optional preferred period.
        context: Work or home; home tasks go to the household bucket.
        suitable_for: Family roles that may take the task, in preference order.
    """

    id: str
    name: str = ""
    category: str = "personal"
    deadline: Optional[date] = None
    buffer_days: Optional[int] = None
    estimated_duration: Optional[int] = None
    energy_level: Optional[EnergyLevel] = None
    location_flexibility: Optional[LocationFlexibility] = None
    preferred_time_of_day: Optional[TimeOfDay] = None
    context: TaskContext = TaskContext.WORK
    suitable_for: tuple[str, ...] = ()

    @property
    def duration_minutes(self) -> int:
        return self.estimated_duration or 30

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        """Parse a task record; accepts snake_case and camelCase keys."""
        if data.get("id") is None:
            raise ScheduleInputError(f"Task without an id: {data!r}")

        deadline = _get(data, "deadline", "due_date", "dueDate")
        if isinstance(deadline, str):
            try:
                deadline = date.fromisoformat(deadline[:10])
            except ValueError:
                raise ScheduleInputError(f"Invalid deadline: {deadline!r}") from None
        elif isinstance(deadline, datetime):
            deadline = deadline.date()

        duration = _get(data, "estimated_duration", "estimatedDuration")
        if duration is not None:
            duration = _parse_minutes(duration)

        return cls(
            id=str(data["id"]),
            name=_get(data, "name", "title", default=str(data["id"])),
            category=_get(data, "category", default="personal"),
            deadline=deadline,
            buffer_days=_get(data, "buffer_days", "bufferDays"),
            estimated_duration=duration,
            energy_level=_parse_enum(
                EnergyLevel, _get(data, "energy_level", "energyLevel"), "energy level"
            ),
            location_flexibility=_parse_enum(
                LocationFlexibility,
                _get(data, "location_flexibility", "locationFlexibility"),
                "location flexibility",
            ),
            preferred_time_of_day=_parse_enum(
                TimeOfDay,
                _get(data, "preferred_time_of_day", "preferredTimeOfDay"),
                "preferred time of day",
            ),
            context=_parse_enum(TaskContext, data.get("context"), "context")
            or TaskContext.WORK,
            suitable_for=tuple(_get(data, "suitable_for", "suitableFor", default=())),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "deadline": self.deadline.isoformat() if self.deadline else None,
            "estimatedDuration": self.duration_minutes,
            "energyLevel": self.energy_level.value if self.energy_level else None,
            "locationFlexibility": (
                self.location_flexibility.value if self.location_flexibility else None
            ),
            "preferredTimeOfDay": (
                self.preferred_time_of_day.value if self.preferred_time_of_day else None
            ),
            "context": self.context.value,
            "suitableFor": list(self.suitable_for),
        }


@dataclass(frozen=True)
class PrioritizedTask:
    """A task paired with its priority score."""

    task: Task
    priority_score: int


@dataclass
class TimeSlot:
    """A free interval on a day.

    Slots are working state: the matcher moves ``start`` forward as tasks
    consume them, so the matcher only ever mutates its own copy.
    """

    day: Weekday
    start: int
    end: int
    energy_level: EnergyLevel
    location: SlotLocation

    @property
    def duration(self) -> int:
        return self.end - self.start

    def __repr__(self) -> str:
        return (
            f"TimeSlot({self.day.value} {format_hhmm(self.start)}-"
            f"{format_hhmm(self.end)}, {self.energy_level.value}, {self.location.value})"
        )


@dataclass(frozen=True)
class ScheduledTask:
    """A task placed into a slot."""

    task: Task
    day: Weekday
    start: int
    end: int
    location: SlotLocation
    match_score: int

    @property
    def duration_minutes(self) -> int:
        return self.end - self.start

    def to_dict(self) -> dict:
        data = self.task.to_dict()
        data.update(
            {
                "day": self.day.value,
                "startTime": format_hhmm(self.start),
                "endTime": format_hhmm(self.end),
                "location": self.location.value,
                "matchScore": self.match_score,
            }
        )
        return data


@dataclass(frozen=True)
class FamilyRole:
    """A household member role with a task cap and capability set."""

    name: str
    max_tasks: int
    capabilities: frozenset[str] = frozenset({"all"})

    def accepts(self, task: Task) -> bool:
        return "all" in self.capabilities or task.category in self.capabilities


@dataclass
class ScheduleMetadata:
    """Aggregate statistics for a schedule."""

    total_tasks: int = 0
    total_hours: float = 0.0
    workload_balance: dict[Weekday, float] = field(default_factory=dict)


@dataclass
class ScheduleResult:
    """Complete weekly plan.

    Attributes:
        work: Scheduled work tasks.
        household: Scheduled home-context tasks.
        personal: Scheduled personal tasks.
        unscheduled: Tasks that fit no slot.
        family_tasks: Household tasks grouped by family role.
        metadata: Totals and per-day workload.
    """

    work: list[ScheduledTask] = field(default_factory=list)
    household: list[ScheduledTask] = field(default_factory=list)
    personal: list[ScheduledTask] = field(default_factory=list)
    unscheduled: list[Task] = field(default_factory=list)
    family_tasks: dict[str, list[ScheduledTask]] = field(default_factory=dict)
    metadata: ScheduleMetadata = field(default_factory=ScheduleMetadata)

    def scheduled_tasks(self) -> list[ScheduledTask]:
        """All placed tasks across the work, household and personal buckets."""
        return [*self.work, *self.household, *self.personal]

    def tasks_on(self, day: Weekday) -> list[ScheduledTask]:
        """Placed tasks on a day, ordered by start time."""
        return sorted(
            (t for t in self.scheduled_tasks() if t.day == day),
            key=lambda t: t.start,
        )

    def bucket_for(self, task_id: str) -> Optional[str]:
        """Name of the bucket holding a task id, if any."""
        for name in ("work", "household", "personal"):
            if any(t.task.id == task_id for t in getattr(self, name)):
                return name
        if any(t.id == task_id for t in self.unscheduled):
            return "unscheduled"
        return None

    def to_dict(self) -> dict:
        return {
            "work": [t.to_dict() for t in self.work],
            "household": [t.to_dict() for t in self.household],
            "personal": [t.to_dict() for t in self.personal],
            "unscheduled": [t.to_dict() for t in self.unscheduled],
            "familyTasks": {
                role: [t.to_dict() for t in tasks]
                for role, tasks in self.family_tasks.items()
            },
            "metadata": {
                "totalTasks": self.metadata.total_tasks,
                "totalHours": self.metadata.total_hours,
                "workloadBalance": {
                    day.value: hours
                    for day, hours in self.metadata.workload_balance.items()
                },
            },
        }


@dataclass
class ScheduleSummary:
    """Compact projection of the schedule metadata."""

    total_tasks: int
    total_hours: float
    unscheduled_tasks: int
    family_participation: dict[str, int]
    busy_days: list[Weekday]

    def to_dict(self) -> dict:
        return {
            "totalTasks": self.total_tasks,
            "totalHours": self.total_hours,
            "unscheduledTasks": self.unscheduled_tasks,
            "familyParticipation": dict(self.family_participation),
            "busyDays": [d.value for d in self.busy_days],
        }


@dataclass
class ScheduleWarning:
    """An informational warning about a plan."""

    warning_type: WarningType
    message: str
    day: Optional[Weekday] = None
    task: Optional[str] = None
    count: Optional[int] = None
    tasks: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        return f"[{self.warning_type.value}] {self.message}"

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"type": self.warning_type.value, "message": self.message}
        if self.day is not None:
            data["day"] = self.day.value
        if self.task is not None:
            data["task"] = self.task
        if self.count is not None:
            data["count"] = self.count
            data["tasks"] = list(self.tasks)
        return data


@dataclass
class PlanRequest:
    """Inputs for one planning run.

    Attributes:
        commitments: Fixed weekly commitments.
        tasks: Tasks to place.
        preferences: category -> day -> bool; a true entry adds a scoring
            bonus for placing that category on that day.
    """

    commitments: list[WeeklyCommitment] = field(default_factory=list)
    tasks: list[Task] = field(default_factory=list)
    preferences: dict[str, dict[Weekday, bool]] = field(default_factory=dict)

    def duplicate_task_ids(self) -> list[str]:
        """Task ids that occur more than once, in first-seen order."""
        seen = set()
        duplicates = []
        for task in self.tasks:
            if task.id in seen and task.id not in duplicates:
                duplicates.append(task.id)
            seen.add(task.id)
        return duplicates

    def prefers(self, category: str, day: Weekday) -> bool:
        return bool(self.preferences.get(category, {}).get(day))

    @classmethod
    def from_dict(cls, data: dict) -> "PlanRequest":
        """Parse a request payload.

        Commitments are read from ``weekly_commitments``/``weeklyCommitments``
        or from ``treatments`` (optionally nested in a ``weekly_schedule``).
        """
        commitments = _get(data, "weekly_commitments", "weeklyCommitments", "treatments")
        if commitments is None:
            nested = _get(data, "weekly_schedule", "weeklySchedule", default={})
            commitments = nested.get("treatments", [])
        preferences = {
            category: {Weekday.parse(day): bool(flag) for day, flag in days.items()}
            for category, days in (data.get("preferences") or {}).items()
        }
        return cls(
            commitments=[WeeklyCommitment.from_dict(c) for c in commitments],
            tasks=[Task.from_dict(t) for t in data.get("tasks", [])],
            preferences=preferences,
        )


@dataclass
class PlanResponse:
    """Outcome of a planning run: a full plan or an error, never both."""

    success: bool
    schedule: Optional[ScheduleResult] = None
    summary: Optional[ScheduleSummary] = None
    warnings: list[ScheduleWarning] = field(default_factory=list)
    error: Optional[str] = None

    @classmethod
    def failure(cls, error: str) -> "PlanResponse":
        return cls(success=False, error=error)

    def to_dict(self) -> dict:
        if not self.success:
            return {"success": False, "error": self.error}
        return {
            "success": True,
            "schedule": self.schedule.to_dict(),
            "summary": self.summary.to_dict(),
            "warnings": [w.to_dict() for w in self.warnings],
        }
