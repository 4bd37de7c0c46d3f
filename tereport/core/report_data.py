# ==============================================================================
# Report-Data Builder
# ==============================================================================
"""
Build the cross-linked report-data graph from a raw event log.

The build runs in two phases:

1. Ingestion - raw events are processed strictly in log order. Each event
   resolves (and memoizes) its session, teacher and module, decodes its
   mode, activity id and sub-type, and is appended to the event list.
2. Reduction - only Teacher-Edition modules, and events with a resolved
   mode, module and activity id, are kept. Teachers and sessions are
   recomputed from the surviving events and all back-references are filled.

All mutable state lives in a BuildContext created per build, so separate
builds never share caches.
"""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Optional, TypeVar, Union

from pydantic import ValidationError

from tereport.base import IdentitySource, ModuleSource
from tereport.core.memo import MemoCache
from tereport.core.models import (
    WINDOW_SHADE_SUB_TYPES,
    Event,
    EventSubType,
    Module,
    Plugin,
    RawEvent,
    ReportData,
    Session,
    Teacher,
    TEMode,
)
from tereport.core.modules import ModuleCache, resolve_module
from tereport.core.plugins import parse_window_shade_type
from tereport.core.teachers import TeacherCache, resolve_teacher
from tereport.exceptions import ReportBuildError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_TE_MODE_PATTERN = re.compile(r"\?.*mode=teacher-edition")
_QUESTION_WRAPPER_EVENT = re.compile(r"^TeacherEdition-questionWrapper-\w+ Tab(?:Opened|Closed)$")
_WINDOW_SHADE_EVENT = re.compile(r"^TeacherEdition-windowShade-(\w+) Tab(?:Opened|Closed)$")

_QUESTION_WRAPPER_TABS: dict[str, EventSubType] = {
    "correct": EventSubType.CORRECT_EXPLANATION,
    "correctexplanation": EventSubType.CORRECT_EXPLANATION,
    "distractors": EventSubType.DISTRACTORS_EXPLANATION,
    "distractorsexplanation": EventSubType.DISTRACTORS_EXPLANATION,
    "exemplar": EventSubType.EXEMPLAR,
    "teachertip": EventSubType.TEACHER_TIP,
}


# ==============================================================================
# Build Context
# ==============================================================================


@dataclass
class BuildContext:
    """Mutable state of one build, threaded through every resolver call."""

    module_source: ModuleSource
    identity_source: IdentitySource
    events: list[Event] = field(default_factory=list)
    sessions: dict[str, Session] = field(default_factory=dict)
    teachers: TeacherCache = field(default_factory=MemoCache)
    modules: ModuleCache = field(default_factory=MemoCache)

    def session_for(self, session_token: str) -> Session:
        session = self.sessions.get(session_token)
        if session is None:
            session = Session(session_token=session_token)
            self.sessions[session_token] = session
        return session


# ==============================================================================
# Decoders
# ==============================================================================


def decode_te_mode(raw_event: RawEvent) -> Optional[TEMode]:
    """
    Decode the viewing mode from the event's URL.

    Returns:
        TEACHER_EDITION if the URL's query has mode=teacher-edition,
        PREVIEW if a URL is present without it, None if there is no URL
    """
    url = raw_event.extras.url if raw_event.extras else None
    if url is None:
        return None
    if _TE_MODE_PATTERN.search(url):
        return TEMode.TEACHER_EDITION
    return TEMode.PREVIEW


def decode_activity_id(raw_event: RawEvent) -> Optional[str]:
    if raw_event.extras is None or not raw_event.extras.activity_id:
        return None
    return raw_event.extras.activity_id


def _event_value(raw_event: RawEvent) -> Optional[str]:
    if raw_event.event_value:
        return raw_event.event_value
    if raw_event.extras is not None:
        return raw_event.extras.event_value
    return None


def decode_event_sub_type(raw_event: RawEvent) -> Optional[EventSubType]:
    """
    Work out which plugin tab a toggle event refers to.

    Question-wrapper tabs are named by the event value only; the tab token in
    their event name is always "TeacherTip" whatever tab was toggled.
    Window-shade tabs are named by the shade token in the event name. Other
    events have no sub-type.
    """
    if _QUESTION_WRAPPER_EVENT.match(raw_event.event) is not None:
        value = _event_value(raw_event)
        if not value:
            return None
        return _QUESTION_WRAPPER_TABS.get(re.sub(r"[^a-z]", "", value.lower()))

    match = _WINDOW_SHADE_EVENT.match(raw_event.event)
    if match is not None:
        shade_type = parse_window_shade_type(match.group(1))
        return WINDOW_SHADE_SUB_TYPES.get(shade_type) if shade_type else None

    return None


def find_plugin(module: Module, plugin_id: str) -> Optional[Plugin]:
    """
    Find the plugin an event refers to.

    The log records either the full reference ("729-Embeddable::EmbeddablePlugin")
    or just its numeric part ("729").
    """
    for plugin in module.plugins:
        if plugin.ref_id == plugin_id or plugin.ref_id.split("-", 1)[0] == plugin_id:
            return plugin
    return None


# ==============================================================================
# Phase 1 - Ingestion
# ==============================================================================


def _validate(raw: Union[RawEvent, dict], position: int) -> RawEvent:
    if isinstance(raw, RawEvent):
        return raw
    try:
        return RawEvent.model_validate(raw)
    except ValidationError as e:
        raise ReportBuildError(f"Invalid raw event at position {position}: {e}") from e


async def ingest_event(ctx: BuildContext, raw_event: RawEvent) -> Event:
    """Resolve one raw event against the build context and record it."""
    session = ctx.session_for(raw_event.session)
    teacher = await resolve_teacher(ctx.teachers, raw_event.username, ctx.identity_source)
    te_mode = decode_te_mode(raw_event)
    module = await resolve_module(ctx.modules, raw_event.activity, ctx.module_source)
    activity_id = decode_activity_id(raw_event)

    plugin = None
    plugin_id = raw_event.extras.embeddable_plugin_id if raw_event.extras else None
    if module is not None and module.is_te_module and plugin_id:
        plugin = find_plugin(module, plugin_id)

    event = Event(
        session=session,
        teacher=teacher,
        te_mode=te_mode,
        event_date=raw_event.time,
        event_type=raw_event.event,
        event_sub_type=decode_event_sub_type(raw_event),
        module=module,
        activity_id=activity_id,
        plugin=plugin,
    )
    ctx.events.append(event)
    return event


# ==============================================================================
# Phase 2 - Reduction and Cross-Referencing
# ==============================================================================


def _unique(items: Iterable[T]) -> list[T]:
    """Drop duplicates (by identity for graph nodes), keeping first occurrence."""
    return list(dict.fromkeys(items))


def reduce_to_teacher_edition(ctx: BuildContext) -> ReportData:
    """
    Keep only Teacher-Edition modules and the events that can be reported.

    Events are stable-sorted by timestamp; teachers and sessions are those
    reachable from the kept events.
    """
    modules = [m for m in ctx.modules.values() if m.is_te_module]
    te_module_ids = {id(m) for m in modules}

    events = [
        e
        for e in ctx.events
        if e.module is not None
        and id(e.module) in te_module_ids
        and e.te_mode is not None
        and e.activity_id is not None
    ]
    events.sort(key=lambda e: e.event_date)

    return ReportData(
        events=events,
        teachers=_unique(e.teacher for e in events),
        modules=modules,
        sessions=_unique(e.session for e in events),
    )


def resolve_cross_references(report_data: ReportData) -> None:
    """Fill session and teacher back-references from the kept events."""
    session_events: dict[int, list[Event]] = {id(s): [] for s in report_data.sessions}
    teacher_events: dict[int, list[Event]] = {id(t): [] for t in report_data.teachers}
    for event in report_data.events:
        session_events[id(event.session)].append(event)
        teacher_events[id(event.teacher)].append(event)

    for session in report_data.sessions:
        events = session_events[id(session)]
        session.events = events
        session.modules = _unique(e.module for e in events)
        session.teachers = _unique(e.teacher for e in events)
        session.first_date = events[0].event_date
        session.last_date = events[-1].event_date

    for teacher in report_data.teachers:
        events = teacher_events[id(teacher)]
        teacher.events = events
        teacher.modules = _unique(e.module for e in events)
        teacher.sessions = _unique(e.session for e in events)


# ==============================================================================
# Entry Point
# ==============================================================================


async def build_report_data(
    raw_events: Iterable[Union[RawEvent, dict[str, Any]]],
    module_source: ModuleSource,
    identity_source: IdentitySource,
) -> ReportData:
    """
    Build the report-data graph for one log.

    Args:
        raw_events: Log records in log order (dicts or RawEvent models)
        module_source: Content-authoring collaborator
        identity_source: Identity collaborator

    Returns:
        The reduced, fully cross-referenced ReportData

    Raises:
        ReportBuildError: If a raw event is structurally invalid
        InvalidModuleIdError: If an event's module reference is malformed
        MalformedContentError: If a fetched export's plugin data is broken
    """
    ctx = BuildContext(module_source=module_source, identity_source=identity_source)

    # Resolve one event at a time: first touches follow log order.
    for position, raw in enumerate(raw_events):
        await ingest_event(ctx, _validate(raw, position))

    logger.info(
        "%d event(s) resolved with references to %d module(s)",
        len(ctx.events),
        len(ctx.modules.values()),
    )

    report_data = reduce_to_teacher_edition(ctx)
    logger.info(
        "%d event(s), %d module(s), %d teacher(s) and %d session(s) remain after filtering",
        len(report_data.events),
        len(report_data.modules),
        len(report_data.teachers),
        len(report_data.sessions),
    )

    resolve_cross_references(report_data)
    return report_data
