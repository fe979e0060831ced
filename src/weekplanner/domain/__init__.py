"""Domain models and business rules for weekly planning."""

from weekplanner.domain.models import (
    DEFAULT_WORK_WEEK,
    BlockKind,
    EnergyLevel,
    EnergyWindow,
    FamilyRole,
    FixedBlock,
    LocationFlexibility,
    PlannerConfig,
    PlanRequest,
    PlanResponse,
    PrioritizedTask,
    ScheduledTask,
    ScheduleInputError,
    ScheduleMetadata,
    ScheduleResult,
    ScheduleSummary,
    ScheduleWarning,
    SlotLocation,
    Task,
    TaskContext,
    TimeOfDay,
    TimeSlot,
    WarningType,
    Weekday,
    WeeklyCommitment,
    WorkingHoursConfig,
    format_hhmm,
    parse_hhmm,
)
from weekplanner.domain.policies import (
    DefaultEnergyPolicy,
    DefaultHouseholdPolicy,
    DefaultPriorityPolicy,
    EnergyPolicy,
    HouseholdPolicy,
    PriorityPolicy,
)

__all__ = [
    # Models
    "BlockKind",
    "DEFAULT_WORK_WEEK",
    "EnergyLevel",
    "EnergyWindow",
    "FamilyRole",
    "FixedBlock",
    "LocationFlexibility",
    "PlannerConfig",
    "PlanRequest",
    "PlanResponse",
    "PrioritizedTask",
    "ScheduledTask",
    "ScheduleInputError",
    "ScheduleMetadata",
    "ScheduleResult",
    "ScheduleSummary",
    "ScheduleWarning",
    "SlotLocation",
    "Task",
    "TaskContext",
    "TimeOfDay",
    "TimeSlot",
    "WarningType",
    "Weekday",
    "WeeklyCommitment",
    "WorkingHoursConfig",
    "format_hhmm",
    "parse_hhmm",
    # Policies
    "DefaultEnergyPolicy",
    "DefaultHouseholdPolicy",
    "DefaultPriorityPolicy",
    "EnergyPolicy",
    "HouseholdPolicy",
    "PriorityPolicy",
]
