"""Income report pipeline -- range filtering, valuation, assembly and CSV output."""

from stakegain.report.assembler import ReportAssembler
from stakegain.report.calculator import GainCalculator
from stakegain.report.range_filter import DateRange, filter_range
from stakegain.report.writer import render_report, write_report

__all__ = [
    "DateRange",
    "GainCalculator",
    "ReportAssembler",
    "filter_range",
    "render_report",
    "write_report",
]
