# ==============================================================================
# Core Domain Logic
# ==============================================================================
"""
Report-data construction with no network or framework dependencies.

This module contains:
- Domain models (RawEvent, Module, Plugin, Event, Teacher, Session, ReportData)
- Plugin classification and module/teacher resolution
- The two-phase report-data builder

Upstream services are reached only through the ports in tereport.base, so
everything here is unit-testable with in-memory fakes.
"""

from tereport.core.models import (
    Activity,
    Event,
    EventSubType,
    Module,
    Plugin,
    PluginType,
    RawEvent,
    ReportData,
    Session,
    Teacher,
    TEMode,
    WindowShadeType,
)
from tereport.core.report_data import build_report_data

__all__ = [
    "Activity",
    "Event",
    "EventSubType",
    "Module",
    "Plugin",
    "PluginType",
    "RawEvent",
    "ReportData",
    "Session",
    "Teacher",
    "TEMode",
    "WindowShadeType",
    "build_report_data",
]
