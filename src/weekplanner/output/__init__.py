"""Output generation for weekly plans (PDF, text)."""

from weekplanner.output.pdf_generator import PDFGenerator
from weekplanner.output.report_generator import ReportGenerator

__all__ = [
    "PDFGenerator",
    "ReportGenerator",
]
