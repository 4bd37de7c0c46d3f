# ==============================================================================
# Shared Column Definitions
# ==============================================================================
"""
Column taxonomy shared by the usage and session reports.

Each plugin column group covers one (plugin type, sub-type) pair and expands
to four sub-columns: tabs in the module, toggle events, tabs toggled at
least once, and the percentage of tabs toggled.
"""

import math
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from tereport.core.models import (
    Event,
    EventSubType,
    Module,
    Plugin,
    PluginType,
    QuestionWrapperDef,
    WindowShadeDef,
    WindowShadeType,
)
from tereport.infrastructure.csv_writer import write_csv


@dataclass(frozen=True)
class ColumnName:
    title: str
    short_title: str


@dataclass(frozen=True)
class PluginColumnGroup:
    """
    One group of four plugin columns.

    Attributes:
        title: Column title prefix, e.g. "Window Shade - Teacher Tip"
        short_title: Abbreviation, e.g. "WS-TT"
        plugin_type: Plugin family the group counts
        selects: Predicate picking this group's plugins ("tabs") from a module
        event_matcher: Event-type pattern of this group's toggle events
        event_sub_type: Sub-type toggle events must carry, or None for any
    """

    title: str
    short_title: str
    plugin_type: PluginType
    selects: Callable[[Plugin], bool]
    event_matcher: re.Pattern
    event_sub_type: Optional[EventSubType]

    def tabs(self, module: Module) -> list[Plugin]:
        return list(
            dict.fromkeys(
                p for p in module.plugins if p.plugin_type == self.plugin_type and self.selects(p)
            )
        )

    def toggle_events(self, events: Iterable[Event]) -> list[Event]:
        return [
            e
            for e in events
            if self.event_matcher.search(e.event_type)
            and (self.event_sub_type is None or e.event_sub_type == self.event_sub_type)
        ]


# ==============================================================================
# Group Definitions
# ==============================================================================

_QUESTION_WRAPPER_EVENTS = re.compile(r"^TeacherEdition-questionWrapper-\w+ Tab(Opened|Closed)$")
_WINDOW_SHADE_EVENTS = re.compile(r"^TeacherEdition-windowShade-\w+ Tab(Opened|Closed)$")
_SIDE_TIP_EVENTS = re.compile(r"^TeacherEdition-sideTip-\w+ Tab(Opened|Closed)$")


def _question_wrapper(attribute: str) -> Callable[[Plugin], bool]:
    def selects(plugin: Plugin) -> bool:
        definition = plugin.definition
        return isinstance(definition, QuestionWrapperDef) and getattr(definition, attribute)

    return selects


def _window_shade(shade_type: WindowShadeType) -> Callable[[Plugin], bool]:
    def selects(plugin: Plugin) -> bool:
        definition = plugin.definition
        return isinstance(definition, WindowShadeDef) and definition.window_shade_type == shade_type

    return selects


def _question_wrapper_group(
    title: str, short_title: str, attribute: str, sub_type: EventSubType
) -> PluginColumnGroup:
    return PluginColumnGroup(
        title=f"Question Wrapper - {title}",
        short_title=short_title,
        plugin_type=PluginType.QUESTION_WRAPPER,
        selects=_question_wrapper(attribute),
        event_matcher=_QUESTION_WRAPPER_EVENTS,
        event_sub_type=sub_type,
    )


def _window_shade_group(
    shade_type: WindowShadeType, short_title: str, sub_type: EventSubType
) -> PluginColumnGroup:
    return PluginColumnGroup(
        title=f"Window Shade - {shade_type.value}",
        short_title=short_title,
        plugin_type=PluginType.WINDOW_SHADE,
        selects=_window_shade(shade_type),
        event_matcher=_WINDOW_SHADE_EVENTS,
        event_sub_type=sub_type,
    )


PLUGIN_COLUMN_GROUPS: list[PluginColumnGroup] = [
    _question_wrapper_group(
        "Correct Tab", "QW-C", "is_correct_explanation", EventSubType.CORRECT_EXPLANATION
    ),
    _question_wrapper_group(
        "Distractors Tab",
        "QW-D",
        "is_distractors_explanation",
        EventSubType.DISTRACTORS_EXPLANATION,
    ),
    _question_wrapper_group(
        "Teacher Tip Tab", "QW-T", "is_teacher_tip", EventSubType.TEACHER_TIP
    ),
    _question_wrapper_group("Exemplar Tab", "QW-E", "is_exemplar", EventSubType.EXEMPLAR),
    _window_shade_group(
        WindowShadeType.TEACHER_TIP, "WS-TT", EventSubType.WINDOW_SHADE_TEACHER_TIP
    ),
    _window_shade_group(
        WindowShadeType.THEORY_AND_BACKGROUND,
        "WS-TB",
        EventSubType.WINDOW_SHADE_THEORY_AND_BACKGROUND,
    ),
    _window_shade_group(
        WindowShadeType.DISCUSSION_POINTS, "WS-DP", EventSubType.WINDOW_SHADE_DISCUSSION_POINTS
    ),
    _window_shade_group(
        WindowShadeType.DIGGING_DEEPER, "WS-DD", EventSubType.WINDOW_SHADE_DIGGING_DEEPER
    ),
    _window_shade_group(
        WindowShadeType.HOW_TO_USE, "WS-HTU", EventSubType.WINDOW_SHADE_HOW_TO_USE
    ),
    _window_shade_group(
        WindowShadeType.FRAMING_THE_ACTIVITY,
        "WS-FTA",
        EventSubType.WINDOW_SHADE_FRAMING_THE_ACTIVITY,
    ),
    _window_shade_group(WindowShadeType.DEMO, "WS-DEMO", EventSubType.WINDOW_SHADE_DEMO),
    _window_shade_group(
        WindowShadeType.OFFLINE_ACTIVITY, "WS-OA", EventSubType.WINDOW_SHADE_OFFLINE_ACTIVITY
    ),
    PluginColumnGroup(
        title="Side Tip",
        short_title="ST",
        plugin_type=PluginType.SIDE_TIP,
        selects=lambda plugin: True,
        event_matcher=_SIDE_TIP_EVENTS,
        event_sub_type=None,
    ),
]

SUB_COLUMNS: list[ColumnName] = [
    ColumnName("Number of Tabs in Module", "Tabs"),
    ColumnName("Total Number of Toggles", "Toggles"),
    ColumnName("Number of Tabs Toggled at Least Once", "Toggled"),
    ColumnName("% of Tabs Toggled at least Once", "%"),
]

EMPTY_GROUP_CELLS = ["0", "", "", ""]
PREVIEW_GROUP_CELLS = ["", "", "", ""]


# ==============================================================================
# Cell Helpers
# ==============================================================================


def build_header(identity_columns: list[ColumnName]) -> list[str]:
    """Identity column titles followed by "<group>: <sub-column>" titles."""
    header = [column.title for column in identity_columns]
    for group in PLUGIN_COLUMN_GROUPS:
        for sub_column in SUB_COLUMNS:
            header.append(f"{group.title}: {sub_column.title}")
    return header


def percent(toggled: int, tabs: int) -> int:
    """toggled/tabs as a whole percentage, rounding halves up."""
    return math.floor(toggled / tabs * 100 + 0.5)


def plugin_group_cells(group: PluginColumnGroup, module: Module, events: list[Event]) -> list[str]:
    """
    The four cells of one plugin column group.

    Args:
        group: Column group
        module: Module of the row
        events: The row's Teacher-Edition events

    Returns:
        [tabs, toggles, toggled, percent] as strings; ["0", "", "", ""] when
        the module has no tabs of this kind
    """
    tabs = group.tabs(module)
    if not tabs:
        return list(EMPTY_GROUP_CELLS)

    toggles = group.toggle_events(events)
    tab_set = set(tabs)
    toggled = {e.plugin for e in toggles if e.plugin is not None and e.plugin in tab_set}
    return [
        str(len(tabs)),
        str(len(toggles)),
        str(len(toggled)),
        str(percent(len(toggled), len(tabs))),
    ]


def all_group_cells(module: Module, events: list[Event]) -> list[str]:
    cells: list[str] = []
    for group in PLUGIN_COLUMN_GROUPS:
        cells.extend(plugin_group_cells(group, module, events))
    return cells


def preview_group_cells() -> list[str]:
    return PREVIEW_GROUP_CELLS * len(PLUGIN_COLUMN_GROUPS)


def format_duration(span: timedelta) -> str:
    """Format a span as days:hours:minutes:seconds, e.g. "0:1:5:30"."""
    total = max(int(span.total_seconds()), 0)
    days, remainder = divmod(total, 86400)
    hours, remainder = divmod(remainder, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{days}:{hours}:{minutes}:{seconds}"


def format_timestamp(value: Optional[datetime]) -> str:
    if value is None:
        return ""
    return value.isoformat()


def count_activities(events: Iterable[Event]) -> int:
    """Distinct activity ids among events."""
    return len({e.activity_id for e in events if e.activity_id is not None})


@dataclass
class ReportTable:
    """A generated report: column titles plus string-cell rows."""

    header: list[str]
    rows: list[list[str]]

    def to_csv(self) -> str:
        return write_csv(self.header, self.rows)
