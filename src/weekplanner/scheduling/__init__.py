"""Planning engine for generating weekly plans."""

from weekplanner.scheduling.blocked_time import BlockedTimeExtractor
from weekplanner.scheduling.household import HouseholdDistributor
from weekplanner.scheduling.planner import WeeklyPlanner
from weekplanner.scheduling.prioritizer import TaskPrioritizer
from weekplanner.scheduling.reporter import ScheduleReporter
from weekplanner.scheduling.slot_finder import SlotFinder
from weekplanner.scheduling.slot_matcher import MatchResult, SlotChoice, SlotMatcher

__all__ = [
    # Core planner
    "WeeklyPlanner",
    # Stages
    "BlockedTimeExtractor",
    "TaskPrioritizer",
    "SlotFinder",
    "SlotMatcher",
    "HouseholdDistributor",
    "ScheduleReporter",
    # Matcher results
    "MatchResult",
    "SlotChoice",
]
