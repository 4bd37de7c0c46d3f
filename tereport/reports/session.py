# ==============================================================================
# Session Report
# ==============================================================================
"""
Teacher-Edition session report.

One row per (session, teacher, module, mode) with at least one event. The
columns match the usage report but are scoped to a single session's events.
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

SESSION_COLUMNS: list[ColumnName] = [
    ColumnName("User ID", "ID"),
    ColumnName("Teacher Name", "Name"),
    ColumnName("TE Module Name", "Module"),
    ColumnName("Mode - TE or Preview", "Mode"),
    ColumnName("First Session Event", "First"),
    ColumnName("Last Session Event", "Last"),
    ColumnName("Total Duration for Session (d:h:m:s)", "Duration"),
    ColumnName("Number of Activities Used", "Activities"),
]


@dataclass
class SessionRow:
    session: Session
    teacher: Teacher
    module: Module
    te_mode: TEMode
    events: list[Event]


def extract_session_rows(report_data: ReportData) -> list[SessionRow]:
    """Group each session's events by (teacher, module, mode)."""
    rows: list[SessionRow] = []
    for session in report_data.sessions:
        for teacher in session.teachers:
            for module in session.modules:
                for mode in (TEMode.TEACHER_EDITION, TEMode.PREVIEW):
                    # session.events is already in timestamp order
                    events = [
                        e
                        for e in session.events
                        if e.teacher is teacher and e.module is module and e.te_mode == mode
                    ]
                    if events:
                        rows.append(
                            SessionRow(
                                session=session,
                                teacher=teacher,
                                module=module,
                                te_mode=mode,
                                events=events,
                            )
                        )
    return rows


def session_row_cells(row: SessionRow) -> list[str]:
    first = row.events[0].event_date
    last = row.events[-1].event_date

    cells = [
        row.teacher.id,
        row.teacher.name,
        row.module.name,
        row.te_mode.value,
        format_timestamp(first),
        format_timestamp(last),
        format_duration(last - first),
        str(count_activities(row.events)),
    ]
    if row.te_mode == TEMode.TEACHER_EDITION:
        cells.extend(all_group_cells(row.module, row.events))
    else:
        cells.extend(preview_group_cells())
    return cells


def generate_session_report(report_data: ReportData) -> ReportTable:
    header = build_header(SESSION_COLUMNS)
    rows = [session_row_cells(row) for row in extract_session_rows(report_data)]
    return ReportTable(header=header, rows=rows)


def session_report_csv(report_data: ReportData) -> str:
    return generate_session_report(report_data).to_csv()
