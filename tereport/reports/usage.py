# ==============================================================================
# Usage Report
# ==============================================================================
"""
Teacher-Edition usage report.

One row per (teacher, module, mode) with at least one event, summarizing
sessions, activities, duration and plugin tab usage across all of the
teacher's sessions with that module.
"""

from dataclasses import dataclass

from tereport.core.models import Event, Module, ReportData, Session, Teacher, TEMode
from tereport.reports.columns import (
    ColumnName,
    ReportTable,
    all_group_cells,
    build_header,
    count_activities,
    format_duration,
    format_timestamp,
    preview_group_cells,
)

USAGE_COLUMNS: list[ColumnName] = [
    ColumnName("User ID", "ID"),
    ColumnName("Teacher Name", "Name"),
    ColumnName("TE Module Name", "Module"),
    ColumnName("Mode - TE or Preview", "Mode"),
    ColumnName("Number of Sessions Launched", "Sessions"),
    ColumnName("Time of First Session's Launch", "First Launch"),
    ColumnName("Time of Last Session's Launch", "Last Launch"),
    ColumnName("Number of Activities Used", "Activities"),
    ColumnName("Total Duration for Module (d:h:m:s)", "Duration"),
]


@dataclass
class UsageRow:
    teacher: Teacher
    module: Module
    te_mode: TEMode
    events: list[Event]


def extract_usage_rows(report_data: ReportData) -> list[UsageRow]:
    """Group events by (teacher, module, mode), skipping empty groups."""
    rows: list[UsageRow] = []
    for teacher in report_data.teachers:
        for module in teacher.modules:
            for mode in (TEMode.TEACHER_EDITION, TEMode.PREVIEW):
                events = [e for e in teacher.events if e.module is module and e.te_mode == mode]
                if events:
                    rows.append(UsageRow(teacher=teacher, module=module, te_mode=mode, events=events))
    return rows


def _row_sessions(row: UsageRow) -> list[Session]:
    sessions = list(dict.fromkeys(e.session for e in row.events))
    sessions.sort(key=lambda s: s.first_date)
    return sessions


def usage_row_cells(row: UsageRow) -> list[str]:
    sessions = _row_sessions(row)
    first_launch = sessions[0].first_date
    last_launch = sessions[-1].first_date if len(sessions) > 1 else None
    duration = max(s.last_date for s in sessions) - min(s.first_date for s in sessions)

    cells = [
        row.teacher.id,
        row.teacher.name,
        row.module.name,
        row.te_mode.value,
        str(len(sessions)),
        format_timestamp(first_launch),
        format_timestamp(last_launch),
        str(count_activities(row.events)),
        format_duration(duration),
    ]
    if row.te_mode == TEMode.TEACHER_EDITION:
        cells.extend(all_group_cells(row.module, row.events))
    else:
        cells.extend(preview_group_cells())
    return cells


def generate_usage_report(report_data: ReportData) -> ReportTable:
    """
    Build the usage report table.

    Args:
        report_data: Resolved report-data graph

    Returns:
        ReportTable with the usage header and one row per
        (teacher, module, mode)
    """
    header = build_header(USAGE_COLUMNS)
    rows = [usage_row_cells(row) for row in extract_usage_rows(report_data)]
    return ReportTable(header=header, rows=rows)


def usage_report_csv(report_data: ReportData) -> str:
    return generate_usage_report(report_data).to_csv()
