# ==============================================================================
# Report Generators
# ==============================================================================
"""
Report generators over a resolved ReportData graph.

- usage.py: one row per (teacher, module, mode)
- session.py: one row per (session, teacher, module, mode)
- columns.py: the plugin column taxonomy both reports share
"""

import logging
from enum import Enum

from tereport.core.models import ReportData
from tereport.reports.columns import ReportTable
from tereport.reports.session import generate_session_report, session_report_csv
from tereport.reports.usage import generate_usage_report, usage_report_csv

logger = logging.getLogger(__name__)


class ReportType(str, Enum):
    """Report selectors, as passed in the "report" query parameter."""

    USAGE = "usageReport"
    SESSION = "sessionReport"


def generate_report(report_type: ReportType, report_data: ReportData) -> ReportTable:
    """Dispatch to the generator for report_type."""
    if report_type == ReportType.USAGE:
        table = generate_usage_report(report_data)
    elif report_type == ReportType.SESSION:
        table = generate_session_report(report_data)
    else:
        raise ValueError(f"Unrecognized report type: {report_type!r}")
    logger.info("Generated %s with %d row(s)", report_type.value, len(table.rows))
    return table


__all__ = [
    "ReportTable",
    "ReportType",
    "generate_report",
    "generate_session_report",
    "generate_usage_report",
    "session_report_csv",
    "usage_report_csv",
]
