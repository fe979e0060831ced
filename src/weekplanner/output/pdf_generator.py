"""PDF generation for weekly plans.

This module creates a printable weekly plan showing:
- A day-by-column timeline with fixed blocks, lunch and placed tasks
- A summary page with daily workload, household roles and warnings
"""

from io import BytesIO
from pathlib import Path
from typing import Optional, Union

from weekplanner.domain.models import (
    BlockKind,
    PlannerConfig,
    PlanRequest,
    PlanResponse,
    ScheduledTask,
    format_hhmm,
)
from weekplanner.scheduling.blocked_time import BlockedTimeExtractor

# Color definitions (RGB tuples, 0-1 scale)
COLORS = {
    "work": (0.4, 0.6, 0.85),  # Blue
    "household": (0.45, 0.75, 0.45),  # Green
    "personal": (0.75, 0.5, 0.8),  # Purple
    BlockKind.TREATMENT: (0.85, 0.4, 0.4),  # Red
    BlockKind.COMMUTE: (0.8, 0.8, 0.8),  # Gray
    "lunch": (1.0, 0.9, 0.5),  # Yellow
    "free": (0.97, 0.97, 0.97),  # Light gray
}


class PDFGenerator:
    """Generates printable PDF weekly plans.

    Example:
        >>> generator = PDFGenerator()
        >>> generator.generate(response, request, "week.pdf")
    """

    def __init__(
        self,
        config: Optional[PlannerConfig] = None,
        page_width: float = 792,  # Letter landscape width (11")
        page_height: float = 612,  # Letter landscape height (8.5")
        margin: float = 36,  # 0.5 inch margins
    ):
        self.config = config or PlannerConfig()
        self.page_width = page_width
        self.page_height = page_height
        self.margin = margin

    def generate(
        self,
        response: PlanResponse,
        request: PlanRequest,
        output_path: Union[str, Path],
        include_summary: bool = True,
    ) -> None:
        """Generate PDF plan and save to file.

        Args:
            response: A successful planning response.
            request: The request the plan was built from (for fixed blocks).
            output_path: Path to save the PDF.
            include_summary: Whether to include the summary page.
        """
        canvas = self._canvas_module()
        c = canvas.Canvas(str(output_path), pagesize=(self.page_width, self.page_height))
        self._draw(c, response, request, include_summary)
        c.save()

    def generate_to_buffer(
        self,
        response: PlanResponse,
        request: PlanRequest,
        include_summary: bool = True,
    ) -> BytesIO:
        """Generate PDF and return as bytes buffer."""
        canvas = self._canvas_module()
        buffer = BytesIO()
        c = canvas.Canvas(buffer, pagesize=(self.page_width, self.page_height))
        self._draw(c, response, request, include_summary)
        c.save()
        buffer.seek(0)
        return buffer

    @staticmethod
    def _canvas_module():
        try:
            from reportlab.pdfgen import canvas
        except ImportError:
            raise ImportError(
                "reportlab is required for PDF generation. "
                "Install with: pip install reportlab"
            )
        return canvas

    def _draw(self, c, response: PlanResponse, request: PlanRequest, include_summary: bool) -> None:
        if not response.success:
            raise ValueError(f"Cannot print a failed plan: {response.error}")
        self._draw_week_page(c, response, request)
        if include_summary:
            self._draw_summary_page(c, response)

    def _draw_week_page(self, c, response: PlanResponse, request: PlanRequest) -> None:
        """Draw the week grid with one column per work day."""
        hours = self.config.working_hours
        days = self.config.work_days
        blocked = BlockedTimeExtractor(config=self.config).extract(request.commitments)

        header_height = 50
        axis_width = 40
        grid_left = self.margin + axis_width
        grid_top = self.page_height - self.margin - header_height
        grid_bottom = self.margin + 30
        grid_height = grid_top - grid_bottom
        column_width = (self.page_width - self.margin - grid_left) / len(days)
        day_minutes = hours.day_end - hours.day_start

        def y_for(minutes: int) -> float:
            clamped = min(max(minutes, hours.day_start), hours.day_end)
            return grid_top - (clamped - hours.day_start) / day_minutes * grid_height

        # Header
        c.setFont("Helvetica-Bold", 16)
        c.drawString(self.margin, self.page_height - self.margin - 20, "Weekly Plan")
        c.setFont("Helvetica", 10)
        summary = response.summary
        c.drawString(
            self.margin,
            self.page_height - self.margin - 35,
            f"{summary.total_tasks} tasks, {summary.total_hours} hours, "
            f"{summary.unscheduled_tasks} unscheduled",
        )

        # Time axis
        c.setFont("Helvetica", 7)
        c.setStrokeColorRGB(0.7, 0.7, 0.7)
        for minutes in range(hours.day_start - hours.day_start % 60, hours.day_end + 1, 60):
            if minutes < hours.day_start:
                continue
            y = y_for(minutes)
            c.line(grid_left - 4, y, self.page_width - self.margin, y)
            c.drawRightString(grid_left - 6, y - 2, format_hhmm(minutes))

        for i, day in enumerate(days):
            x = grid_left + i * column_width

            c.setFillColorRGB(0, 0, 0)
            c.setFont("Helvetica-Bold", 9)
            c.drawCentredString(x + column_width / 2, grid_top + 6, day.value)

            c.setFillColorRGB(*COLORS["free"])
            c.rect(x + 2, grid_bottom, column_width - 4, grid_height, fill=1, stroke=0)

            # Lunch
            c.setFillColorRGB(*COLORS["lunch"])
            top, bottom = y_for(hours.lunch_start), y_for(hours.lunch_end)
            c.rect(x + 2, bottom, column_width - 4, top - bottom, fill=1, stroke=0)

            for block in blocked.get(day, []):
                top, bottom = y_for(block.start), y_for(block.end)
                if top - bottom <= 0:
                    continue
                c.setFillColorRGB(*COLORS[block.kind])
                c.rect(x + 2, bottom, column_width - 4, top - bottom, fill=1, stroke=0)

            for bucket in ("work", "household", "personal"):
                for scheduled in getattr(response.schedule, bucket):
                    if scheduled.day == day:
                        self._draw_task(c, scheduled, bucket, x, column_width, y_for)

        self._draw_legend(c, self.margin, self.margin + 5)
        c.showPage()

    def _draw_task(self, c, scheduled: ScheduledTask, bucket: str, x: float, width: float, y_for) -> None:
        """Draw a single placed task inside a day column."""
        top, bottom = y_for(scheduled.start), y_for(scheduled.end)
        c.setFillColorRGB(*COLORS[bucket])
        c.setStrokeColorRGB(0.3, 0.3, 0.3)
        c.setLineWidth(0.5)
        c.rect(x + 4, bottom, width - 8, top - bottom, fill=1, stroke=1)

        if top - bottom >= 9:
            c.setFillColorRGB(0, 0, 0)
            c.setFont("Helvetica", 6)
            label = f"{format_hhmm(scheduled.start)} {scheduled.task.name}"
            c.drawString(x + 6, top - 7, label[: int(width / 3)])

    def _draw_legend(self, c, x: float, y: float) -> None:
        """Draw legend for colors."""
        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica-Bold", 8)
        c.drawString(x, y, "Legend:")

        items = [
            ("work", "Work"),
            ("household", "Household"),
            ("personal", "Personal"),
            (BlockKind.TREATMENT, "Treatment"),
            (BlockKind.COMMUTE, "Commute"),
            ("lunch", "Lunch"),
        ]

        c.setFont("Helvetica", 7)
        current_x = x + 45
        for key, label in items:
            c.setFillColorRGB(*COLORS[key])
            c.rect(current_x, y - 2, 12, 10, fill=1, stroke=1)
            c.setFillColorRGB(0, 0, 0)
            c.drawString(current_x + 15, y, label)
            current_x += 75

    def _draw_summary_page(self, c, response: PlanResponse) -> None:
        """Draw summary page with workload, household roles and warnings."""
        schedule = response.schedule

        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica-Bold", 16)
        c.drawString(self.margin, self.page_height - self.margin - 20, "Plan Summary")

        y = self.page_height - self.margin - 60
        c.setFont("Helvetica-Bold", 12)
        c.drawString(self.margin, y, "Daily Workload")
        y -= 20

        bar_left = self.margin + 90
        scale = 25  # points per hour
        c.setFont("Helvetica", 9)
        for day, hours in schedule.metadata.workload_balance.items():
            c.setFillColorRGB(0, 0, 0)
            c.drawString(self.margin + 10, y, day.value)
            if hours > self.config.overload_hours:
                c.setFillColorRGB(*COLORS[BlockKind.TREATMENT])
            else:
                c.setFillColorRGB(*COLORS["work"])
            c.rect(bar_left, y - 2, hours * scale, 10, fill=1, stroke=0)
            c.setFillColorRGB(0, 0, 0)
            c.drawString(bar_left + hours * scale + 5, y, f"{hours}h")
            y -= 15

        y -= 15
        c.setFont("Helvetica-Bold", 12)
        c.drawString(self.margin, y, "Household")
        y -= 18
        c.setFont("Helvetica", 9)
        for role, tasks in schedule.family_tasks.items():
            names = ", ".join(t.task.name for t in tasks) or "-"
            c.drawString(self.margin + 10, y, f"{role} ({len(tasks)}): {names}"[:120])
            y -= 14

        if response.warnings:
            y -= 15
            c.setFont("Helvetica-Bold", 12)
            c.drawString(self.margin, y, "Warnings")
            y -= 18
            c.setFont("Helvetica", 9)
            for warning in response.warnings:
                if y < self.margin:
                    break
                c.drawString(self.margin + 10, y, str(warning)[:120])
                y -= 14

        c.showPage()
