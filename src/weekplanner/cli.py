"""Command-line interface for the weekly planner."""

import argparse
import json
import logging
import sys
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Optional

from weekplanner.domain.models import (
    EnergyLevel,
    LocationFlexibility,
    PlannerConfig,
    PlanRequest,
    PlanResponse,
    Task,
    TaskContext,
    TimeOfDay,
    Weekday,
    WeeklyCommitment,
    parse_hhmm,
)
from weekplanner.output.pdf_generator import PDFGenerator
from weekplanner.output.report_generator import ReportGenerator
from weekplanner.scheduling.planner import WeeklyPlanner
from weekplanner.validation.validator import ScheduleValidator

logger = logging.getLogger(__name__)


def create_sample_request(today: Optional[date] = None) -> PlanRequest:
    """Create a sample week: two treatments and a mix of office and home tasks.

    Args:
        today: Reference date for deadlines. If None, uses today.
    """
    today = today or date.today()

    commitments = [
        WeeklyCommitment(Weekday.MONDAY, parse_hhmm("09:00"), parse_hhmm("11:00"), "Treatment"),
        WeeklyCommitment(Weekday.THURSDAY, parse_hhmm("14:00"), parse_hhmm("16:00"), "Treatment"),
    ]

    tasks = [
        Task(
            id="T001",
            name="Monthly payroll",
            category="salary",
            deadline=today + timedelta(days=2),
            estimated_duration=150,
            energy_level=EnergyLevel.HIGH,
            location_flexibility=LocationFlexibility.OFFICE_ONLY,
        ),
        Task(
            id="T002",
            name="VAT report",
            category="vat",
            deadline=today + timedelta(days=5),
            estimated_duration=90,
            energy_level=EnergyLevel.HIGH,
            location_flexibility=LocationFlexibility.REMOTE_POSSIBLE,
        ),
        Task(
            id="T003",
            name="Bank reconciliation",
            category="reconciliation",
            estimated_duration=60,
            energy_level=EnergyLevel.MEDIUM,
            location_flexibility=LocationFlexibility.ANYWHERE,
        ),
        Task(
            id="T004",
            name="Quarterly report",
            category="reporting",
            deadline=today + timedelta(days=10),
            estimated_duration=120,
            energy_level=EnergyLevel.MEDIUM,
            preferred_time_of_day=TimeOfDay.MORNING,
        ),
        Task(
            id="T005",
            name="Client call",
            category="client_work",
            estimated_duration=30,
            energy_level=EnergyLevel.LOW,
            preferred_time_of_day=TimeOfDay.AFTERNOON,
        ),
        Task(
            id="T006",
            name="Yoga",
            category="personal",
            estimated_duration=60,
            energy_level=EnergyLevel.LOW,
            preferred_time_of_day=TimeOfDay.EVENING,
        ),
        Task(
            id="T007",
            name="Clean the kitchen",
            category="cleaning",
            estimated_duration=45,
            energy_level=EnergyLevel.LOW,
            context=TaskContext.HOME,
            suitable_for=("teen14", "teen16"),
        ),
        Task(
            id="T008",
            name="Grocery run",
            category="driving",
            estimated_duration=60,
            energy_level=EnergyLevel.LOW,
            context=TaskContext.HOME,
            suitable_for=("teen16",),
        ),
        Task(
            id="T009",
            name="Fix the faucet",
            category="maintenance",
            estimated_duration=30,
            context=TaskContext.HOME,
            suitable_for=("teen16",),
        ),
    ]

    return PlanRequest(
        commitments=commitments,
        tasks=tasks,
        preferences={"vat": {Weekday.SUNDAY: True}},
    )


def print_response(
    response: PlanResponse,
    request: Optional[PlanRequest],
    config: PlannerConfig,
) -> bool:
    """Print a plan summary, warnings and validation status.

    Returns:
        True if the plan was produced and passed validation.
    """
    if not response.success:
        print(f"Planning FAILED: {response.error}")
        return False

    summary = response.summary
    print(f"\n{'=' * 60}")
    print("Weekly Plan")
    print(f"{'=' * 60}")
    print(f"  Total Tasks: {summary.total_tasks}")
    print(f"  Total Hours: {summary.total_hours}")
    print(f"  Unscheduled: {summary.unscheduled_tasks}")
    if summary.busy_days:
        print(f"  Busy Days: {', '.join(d.value for d in summary.busy_days)}")

    print("\nDaily Workload:")
    for day, hours in response.schedule.metadata.workload_balance.items():
        print(f"  {day.value:<10} {hours:>5.1f}h")

    print("\nFamily Participation:")
    for role, count in summary.family_participation.items():
        print(f"  {role:<10} {count}")

    if response.warnings:
        print(f"\nWarnings ({len(response.warnings)}):")
        for warning in response.warnings:
            print(f"    - {warning}")

    if request is None:
        return True

    validator = ScheduleValidator(config=config)
    result = validator.validate(response.schedule, request)
    if result.is_valid:
        print("\nValidation: PASSED")
    else:
        print(f"\nValidation: FAILED ({len(result.errors)} errors)")
        for error in result.errors[:5]:
            print(f"    - {error}")
        if len(result.errors) > 5:
            print(f"    ... and {len(result.errors) - 5} more errors")
    for warning in result.warnings:
        print(f"    ! {warning}")
    return result.is_valid


def write_outputs(
    response: PlanResponse,
    request: Optional[PlanRequest],
    config: PlannerConfig,
    report_path: Optional[str] = None,
    pdf_path: Optional[str] = None,
    json_path: Optional[str] = None,
) -> None:
    """Write the requested output files; only JSON is written for a failed plan."""
    if json_path:
        Path(json_path).write_text(
            json.dumps(response.to_dict(), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        print(f"\nJSON written to {json_path}")
    if not response.success:
        return
    if report_path:
        ReportGenerator(work_days=config.work_days).generate(response, report_path)
        print(f"Report written to {report_path}")
    if pdf_path:
        print(f"\nGenerating PDF: {pdf_path}")
        PDFGenerator(config=config).generate(response, request, pdf_path)
        print("  PDF created successfully!")


def run_plan(
    input_path: str,
    now: Optional[datetime] = None,
    report_path: Optional[str] = None,
    pdf_path: Optional[str] = None,
    json_path: Optional[str] = None,
) -> int:
    """Plan a week from a JSON input file.

    The file holds ``weeklyCommitments`` (or ``treatments``), ``tasks``,
    optional ``preferences`` and an optional ``config`` section.
    """
    payload = json.loads(Path(input_path).read_text(encoding="utf-8"))
    logger.debug("Loaded %d tasks from %s", len(payload.get("tasks", [])), input_path)
    config = PlannerConfig.from_dict(payload.get("config") or {})
    planner = WeeklyPlanner(config=config)

    response = planner.generate_plan_from_dict(payload, now=now)
    request = PlanRequest.from_dict(payload) if response.success else None

    valid = print_response(response, request, config)
    write_outputs(response, request, config, report_path, pdf_path, json_path)
    return 0 if valid else 1


def run_demo(report_path: Optional[str] = None, pdf_path: Optional[str] = None) -> int:
    """Run a demo plan over a sample week."""
    print("Generating demo weekly plan...")

    config = PlannerConfig()
    request = create_sample_request()
    response = WeeklyPlanner(config=config).generate_plan(request)

    valid = print_response(response, request, config)
    write_outputs(response, request, config, report_path, pdf_path)
    if response.success and not report_path:
        print()
        print(ReportGenerator(work_days=config.work_days).generate_to_string(response))
    return 0 if valid else 1


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="Weekly Planner - Treatment-aware weekly scheduling",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s demo                        Plan a sample week
  %(prog)s demo --pdf week.pdf         Also print the plan to PDF

  %(prog)s plan week.json              Plan the week described in week.json
  %(prog)s plan week.json --json-out plan.json --report plan.txt
  %(prog)s plan week.json --now 2024-01-14T08:00
        """,
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    demo_parser = subparsers.add_parser("demo", help="Plan a sample week")
    demo_parser.add_argument("--report", "-r", type=str, help="Output text report path")
    demo_parser.add_argument("--pdf", "-o", type=str, help="Output PDF file path")

    plan_parser = subparsers.add_parser("plan", help="Plan a week from a JSON file")
    plan_parser.add_argument("input", type=str, help="JSON input file")
    plan_parser.add_argument(
        "--now",
        type=datetime.fromisoformat,
        help="Reference time for deadlines (ISO format, default: now)",
    )
    plan_parser.add_argument("--json-out", "-j", type=str, help="Output JSON file path")
    plan_parser.add_argument("--report", "-r", type=str, help="Output text report path")
    plan_parser.add_argument("--pdf", "-o", type=str, help="Output PDF file path")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.command == "demo":
        return run_demo(args.report, args.pdf)
    elif args.command == "plan":
        return run_plan(args.input, args.now, args.report, args.pdf, args.json_out)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
