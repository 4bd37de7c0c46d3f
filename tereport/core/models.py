# ==============================================================================
# Report Domain Models
# ==============================================================================
"""
Models for raw log events, content modules and the report-data graph.

Two kinds of model live here:
- Pydantic models for data crossing a boundary (raw log-puller records) and
  for immutable content entities (plugins, activities, modules).
- Dataclasses for the cross-linked graph nodes (events, teachers, sessions).
  These reference each other in cycles, so they compare and hash by
  identity rather than by value.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ==============================================================================
# Enumerations
# ==============================================================================


class TEMode(str, Enum):
    """Viewing mode recorded in an event's URL. Unresolved modes are None."""

    TEACHER_EDITION = "Teacher Edition"
    PREVIEW = "Preview"


class PluginType(str, Enum):
    """Teacher-Edition plugin families."""

    QUESTION_WRAPPER = "Question Wrapper"
    WINDOW_SHADE = "Window Shade"
    SIDE_TIP = "Side Tip"


class WindowShadeType(str, Enum):
    """Window-shade variants authors can choose from."""

    TEACHER_TIP = "Teacher Tip"
    THEORY_AND_BACKGROUND = "Theory & Background"
    DISCUSSION_POINTS = "Discussion Points"
    DIGGING_DEEPER = "Digging Deeper"
    HOW_TO_USE = "How To Use"
    FRAMING_THE_ACTIVITY = "Framing The Activity"
    DEMO = "Demo"
    OFFLINE_ACTIVITY = "Offline Activity"


class EventSubType(str, Enum):
    """Which plugin tab a toggle event refers to."""

    CORRECT_EXPLANATION = "Correct Explanation"
    DISTRACTORS_EXPLANATION = "Distractors Explanation"
    EXEMPLAR = "Exemplar"
    TEACHER_TIP = "Teacher Tip"
    WINDOW_SHADE_TEACHER_TIP = "Window Shade Teacher Tip"
    WINDOW_SHADE_THEORY_AND_BACKGROUND = "Window Shade Theory & Background"
    WINDOW_SHADE_DISCUSSION_POINTS = "Window Shade Discussion Points"
    WINDOW_SHADE_DIGGING_DEEPER = "Window Shade Digging Deeper"
    WINDOW_SHADE_HOW_TO_USE = "Window Shade How To Use"
    WINDOW_SHADE_FRAMING_THE_ACTIVITY = "Window Shade Framing The Activity"
    WINDOW_SHADE_DEMO = "Window Shade Demo"
    WINDOW_SHADE_OFFLINE_ACTIVITY = "Window Shade Offline Activity"


WINDOW_SHADE_SUB_TYPES: dict[WindowShadeType, EventSubType] = {
    WindowShadeType.TEACHER_TIP: EventSubType.WINDOW_SHADE_TEACHER_TIP,
    WindowShadeType.THEORY_AND_BACKGROUND: EventSubType.WINDOW_SHADE_THEORY_AND_BACKGROUND,
    WindowShadeType.DISCUSSION_POINTS: EventSubType.WINDOW_SHADE_DISCUSSION_POINTS,
    WindowShadeType.DIGGING_DEEPER: EventSubType.WINDOW_SHADE_DIGGING_DEEPER,
    WindowShadeType.HOW_TO_USE: EventSubType.WINDOW_SHADE_HOW_TO_USE,
    WindowShadeType.FRAMING_THE_ACTIVITY: EventSubType.WINDOW_SHADE_FRAMING_THE_ACTIVITY,
    WindowShadeType.DEMO: EventSubType.WINDOW_SHADE_DEMO,
    WindowShadeType.OFFLINE_ACTIVITY: EventSubType.WINDOW_SHADE_OFFLINE_ACTIVITY,
}


# ==============================================================================
# Raw Log Records
# ==============================================================================


def _id_to_str(value: Any) -> Any:
    """Log-puller ids arrive as numbers or strings; keep them as strings."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class RawEventExtras(BaseModel):
    """The free-form "extras" bag of a log-puller record."""

    model_config = ConfigDict(extra="ignore")

    url: Optional[str] = None
    activity_id: Optional[str] = None
    embeddable_plugin_id: Optional[str] = None
    event_value: Optional[str] = None

    @field_validator("activity_id", "embeddable_plugin_id", "event_value", mode="before")
    @classmethod
    def normalize_ids(cls, value: Any) -> Any:
        return _id_to_str(value)


class RawEvent(BaseModel):
    """
    One record from the log-puller.

    Attributes:
        id: Log record id
        session: Session token shared by all events of one visit
        username: Teacher identifier, e.g. "28@learn.staging.concord.org"
        activity: Module reference of the form "<type>: <id>"
        event: Event-type label, e.g. "TeacherEdition-sideTip-TeacherTip TabOpened"
        time: When the event happened (always timezone-aware)
        extras: URL, activity id and plugin id, when recorded
        event_value: Event value string, when recorded
    """

    model_config = ConfigDict(extra="ignore")

    id: Union[int, str]
    session: str
    username: str
    activity: str
    event: str
    time: datetime
    extras: Optional[RawEventExtras] = None
    event_value: Optional[str] = None
    application: Optional[str] = None
    parameters: Optional[Any] = None
    run_remote_endpoint: Optional[str] = None

    @field_validator("event_value", mode="before")
    @classmethod
    def normalize_event_value(cls, value: Any) -> Any:
        return _id_to_str(value)

    @field_validator("time")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


# ==============================================================================
# Content Entities
# ==============================================================================


class QuestionWrapperDef(BaseModel):
    """Which tabs of a question wrapper carry significant author text."""

    model_config = ConfigDict(frozen=True)

    plugin_type: Literal[PluginType.QUESTION_WRAPPER] = PluginType.QUESTION_WRAPPER
    is_correct_explanation: bool = False
    is_distractors_explanation: bool = False
    is_exemplar: bool = False
    is_teacher_tip: bool = False


class WindowShadeDef(BaseModel):
    model_config = ConfigDict(frozen=True)

    plugin_type: Literal[PluginType.WINDOW_SHADE] = PluginType.WINDOW_SHADE
    window_shade_type: WindowShadeType


class SideTipDef(BaseModel):
    model_config = ConfigDict(frozen=True)

    plugin_type: Literal[PluginType.SIDE_TIP] = PluginType.SIDE_TIP


PluginDefinition = Annotated[
    Union[QuestionWrapperDef, WindowShadeDef, SideTipDef],
    Field(discriminator="plugin_type"),
]


class Plugin(BaseModel):
    """
    One Teacher-Edition annotation embedded in an activity.

    Attributes:
        ref_id: Embeddable reference, e.g. "729-Embeddable::EmbeddablePlugin"
        definition: Type-specific definition, tagged by plugin type
    """

    model_config = ConfigDict(frozen=True)

    ref_id: str
    definition: PluginDefinition

    @property
    def plugin_type(self) -> PluginType:
        return self.definition.plugin_type


class Activity(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    plugins: tuple[Plugin, ...] = ()


class Module(BaseModel):
    """
    An activity or a sequence of activities.

    Attributes:
        external_id: Reference used in the log, e.g. "sequence: 55"
        name: Display name for the reports
        is_te_module: True if the export uses the Teacher-Edition plugin
        activities: Activities in authored order (one for a lone activity)
    """

    model_config = ConfigDict(frozen=True)

    external_id: str
    name: str
    is_te_module: bool
    activities: tuple[Activity, ...] = ()

    @property
    def plugins(self) -> list[Plugin]:
        """All plugins in the module, in activity order."""
        return [plugin for activity in self.activities for plugin in activity.plugins]


# ==============================================================================
# Report-Data Graph
# ==============================================================================


@dataclass(eq=False)
class Teacher:
    id: str
    name: str
    events: list["Event"] = field(default_factory=list)
    modules: list[Module] = field(default_factory=list)
    sessions: list["Session"] = field(default_factory=list)


@dataclass(eq=False)
class Session:
    """
    Events sharing one session token.

    first_date and last_date are filled in by the report-data builder once
    the event set is final.
    """

    session_token: str
    events: list["Event"] = field(default_factory=list)
    modules: list[Module] = field(default_factory=list)
    teachers: list[Teacher] = field(default_factory=list)
    first_date: Optional[datetime] = None
    last_date: Optional[datetime] = None


@dataclass(frozen=True, eq=False)
class Event:
    """
    A sanitized log event linked into the graph.

    te_mode, module and activity_id are None when they could not be
    resolved; such events never survive reduction.
    """

    session: Session
    teacher: Teacher
    te_mode: Optional[TEMode]
    event_date: datetime
    event_type: str
    event_sub_type: Optional[EventSubType]
    module: Optional[Module]
    activity_id: Optional[str]
    plugin: Optional[Plugin] = None


@dataclass
class ReportData:
    """The resolved graph handed to the report generators."""

    events: list[Event] = field(default_factory=list)
    teachers: list[Teacher] = field(default_factory=list)
    modules: list[Module] = field(default_factory=list)
    sessions: list[Session] = field(default_factory=list)
