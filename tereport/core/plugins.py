# ==============================================================================
# Plugin Classifier
# ==============================================================================
"""
Extract Teacher-Edition plugins from an activity's content export.

The export nests plugins as pages[].embeddables[].embeddable.plugin. Only
plugins carrying the Teacher-Edition script label are considered; their
author data is a JSON document whose "tipType" selects the plugin family.
"""

import json
import logging
import re
from typing import Any, Optional

from tereport.core.models import (
    Plugin,
    QuestionWrapperDef,
    SideTipDef,
    WindowShadeDef,
    WindowShadeType,
)
from tereport.exceptions import MalformedContentError

logger = logging.getLogger(__name__)

TE_SCRIPT_LABEL = "teacherEditionTips"

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def _normalize(name: str) -> str:
    return _NON_ALNUM.sub("", name.lower())


# "teacherTip", "Teacher Tip", "TEACHER_TIP" and "TeacherTip" all normalize alike.
_WINDOW_SHADE_NAMES: dict[str, WindowShadeType] = {
    **{_normalize(shade.value): shade for shade in WindowShadeType},
    **{_normalize(shade.name): shade for shade in WindowShadeType},
}


def parse_window_shade_type(name: Any) -> Optional[WindowShadeType]:
    """Map an author- or event-supplied shade name to a WindowShadeType."""
    if not isinstance(name, str):
        return None
    return _WINDOW_SHADE_NAMES.get(_normalize(name))


def is_significant(value: Any) -> bool:
    """True if value is present and not only whitespace."""
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    return True


def _load_author_data(plugin: dict, ref_id: str) -> dict:
    author_data = plugin.get("author_data")
    if isinstance(author_data, dict):
        return author_data
    try:
        parsed = json.loads(author_data)
    except (TypeError, json.JSONDecodeError) as e:
        raise MalformedContentError(
            f"Unparseable author data for plugin {ref_id or '<no ref_id>'}: {e}"
        ) from e
    if not isinstance(parsed, dict):
        raise MalformedContentError(
            f"Author data for plugin {ref_id or '<no ref_id>'} is not a JSON object"
        )
    return parsed


def classify_plugin(ref_id: str, author_data: dict) -> Optional[Plugin]:
    """
    Build a Plugin from parsed author data.

    Args:
        ref_id: The embeddable's reference id
        author_data: Parsed author data of a Teacher-Edition plugin

    Returns:
        The Plugin, or None (with a warning) if the tip type or window-shade
        type is missing or unrecognized
    """
    tip_type = author_data.get("tipType")

    if tip_type == "questionWrapper":
        wrapper = author_data.get("questionWrapper") or {}
        if not isinstance(wrapper, dict):
            logger.warning(
                "Skipping question-wrapper plugin %s: expected an object, got %r", ref_id, wrapper
            )
            return None
        definition = QuestionWrapperDef(
            is_correct_explanation=is_significant(wrapper.get("correctExplanation")),
            is_distractors_explanation=is_significant(wrapper.get("distractorsExplanation")),
            is_exemplar=is_significant(wrapper.get("exemplar")),
            is_teacher_tip=is_significant(wrapper.get("teacherTip")),
        )
        return Plugin(ref_id=ref_id, definition=definition)

    if tip_type == "windowShade":
        shade = author_data.get("windowShade") or {}
        if not isinstance(shade, dict):
            logger.warning(
                "Skipping window-shade plugin %s: expected an object, got %r", ref_id, shade
            )
            return None
        # Older exports name the field "type" instead of "windowShadeType".
        shade_name = shade.get("windowShadeType") or shade.get("type")
        shade_type = parse_window_shade_type(shade_name)
        if shade_type is None:
            logger.warning(
                "Skipping window-shade plugin %s: unrecognized shade type %r", ref_id, shade_name
            )
            return None
        return Plugin(ref_id=ref_id, definition=WindowShadeDef(window_shade_type=shade_type))

    if tip_type == "sideTip":
        return Plugin(ref_id=ref_id, definition=SideTipDef())

    if tip_type is None:
        logger.warning("Skipping plugin %s: no tipType in author data (old version?)", ref_id)
    else:
        logger.warning("Skipping plugin %s: unrecognized tipType %r", ref_id, tip_type)
    return None


def extract_plugins(raw_activity: Any) -> list[Plugin]:
    """
    Extract the Teacher-Edition plugins of one activity.

    Args:
        raw_activity: Activity export with a pages[] list; may be None

    Returns:
        Plugins in page/embeddable order. Empty if the export has no pages.

    Raises:
        MalformedContentError: If a Teacher-Edition plugin's author data
            is not valid JSON
    """
    if not isinstance(raw_activity, dict):
        return []
    pages = raw_activity.get("pages")
    if not isinstance(pages, list):
        return []

    plugins: list[Plugin] = []
    for page in pages:
        if not isinstance(page, dict):
            continue
        for item in page.get("embeddables") or []:
            embeddable = item.get("embeddable") if isinstance(item, dict) else None
            if not isinstance(embeddable, dict):
                continue
            plugin = embeddable.get("plugin")
            if not isinstance(plugin, dict):
                continue
            if plugin.get("approved_script_label") != TE_SCRIPT_LABEL:
                continue

            ref_id = str(embeddable.get("ref_id") or "")
            author_data = _load_author_data(plugin, ref_id)
            classified = classify_plugin(ref_id, author_data)
            if classified is not None:
                plugins.append(classified)
    return plugins
