# ==============================================================================
# Module Resolver
# ==============================================================================
"""
Fetch, normalize and classify content modules.

A module is either a lone activity or a sequence of activities. Both are
normalized to a Module holding a list of Activities, each with the
Teacher-Edition plugins found in its pages.
"""

import json
import logging
import re
from typing import Optional

from tereport.base import ModuleSource
from tereport.core.memo import MemoCache
from tereport.core.models import Activity, Module
from tereport.core.plugins import TE_SCRIPT_LABEL, extract_plugins
from tereport.exceptions import InvalidModuleIdError, ModuleFetchError, TEReportError

logger = logging.getLogger(__name__)

ModuleCache = MemoCache[str, Module]

_EXTERNAL_ID_PATTERN = re.compile(r"^(.+): (.+)$")
_SEQUENCE_PATTERN = re.compile(r"^sequence")
_TE_LABEL_PATTERN = re.compile(r'"approved_script_label":\s*"' + TE_SCRIPT_LABEL + '"')


def parse_external_id(external_id: str) -> tuple[str, str]:
    """
    Split a module reference into its type and id.

    Args:
        external_id: Reference such as "activity: 100" or "sequence: 55"

    Returns:
        (module_type, module_id)

    Raises:
        InvalidModuleIdError: If the reference is not "<type>: <id>"
    """
    match = _EXTERNAL_ID_PATTERN.match(external_id or "")
    if match is None:
        raise InvalidModuleIdError(f"Malformed module reference: {external_id!r}")
    return match.group(1), match.group(2)


def is_sequence(module_ref: str) -> bool:
    """True for a sequence reference or type name ("sequence: 55", "sequence")."""
    return _SEQUENCE_PATTERN.match(module_ref) is not None


def is_te_export(raw_module: dict) -> bool:
    """True if the serialized export mentions the Teacher-Edition script label."""
    return _TE_LABEL_PATTERN.search(json.dumps(raw_module)) is not None


def build_module(external_id: str, raw_module: dict) -> Module:
    """
    Normalize a raw export into a Module.

    Sequences contribute one Activity per listed activity. A lone activity
    becomes a one-element list; its pages are read from a nested "activity"
    object when the export has one, else from the export itself.
    """
    if is_sequence(external_id):
        activities = [
            Activity(name=raw.get("name") or "", plugins=extract_plugins(raw))
            for raw in raw_module.get("activities") or []
            if isinstance(raw, dict)
        ]
        name = raw_module.get("display_title") or raw_module.get("title") or ""
    else:
        content = raw_module.get("activity")
        if not isinstance(content, dict):
            content = raw_module
        name = raw_module.get("name") or ""
        activities = [Activity(name=name, plugins=extract_plugins(content))]

    return Module(
        external_id=external_id,
        name=name,
        is_te_module=is_te_export(raw_module),
        activities=activities,
    )


async def _fetch_and_build(external_id: str, source: ModuleSource) -> Optional[Module]:
    module_type, module_id = parse_external_id(external_id)
    try:
        raw_module = await source.fetch_module(module_type, module_id)
    except ModuleFetchError as e:
        logger.error(
            "Failed to fetch module %s (url=%s, status=%s): %s",
            external_id,
            e.url,
            e.status_code,
            e,
        )
        return None
    except TEReportError:
        raise
    except Exception:
        logger.error("Failed to fetch module %s", external_id, exc_info=True)
        return None

    if not raw_module:
        logger.warning("No content returned for module %s", external_id)
        return None

    module = build_module(external_id, raw_module)
    logger.debug(
        "Resolved module %s (%s): %d activities, te=%s",
        external_id,
        module.name,
        len(module.activities),
        module.is_te_module,
    )
    return module


async def resolve_module(
    cache: ModuleCache, external_id: str, source: ModuleSource
) -> Optional[Module]:
    """
    Resolve a module reference, fetching it on first touch.

    Args:
        cache: Per-build module cache keyed by external id
        external_id: Reference such as "activity: 100"
        source: Content-authoring collaborator

    Returns:
        The Module (the same instance for every call with the same id), or
        None if the upstream fetch failed or returned no content

    Raises:
        InvalidModuleIdError: If external_id is malformed
        MalformedContentError: If the export's plugin data is broken
    """
    parse_external_id(external_id)
    return await cache.get_or_fetch(external_id, lambda: _fetch_and_build(external_id, source))
