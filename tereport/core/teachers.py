# ==============================================================================
# Identity Resolver
# ==============================================================================
"""
Resolve teacher identifiers to Teacher nodes with display names.

Name lookups never fail a build: any upstream problem yields the
NAME_NOT_AVAILABLE sentinel.
"""

import logging

from tereport.base import IdentitySource
from tereport.core.memo import MemoCache
from tereport.core.models import Teacher
from tereport.exceptions import IdentityFetchError

logger = logging.getLogger(__name__)

NAME_NOT_AVAILABLE = "Not available"

TeacherCache = MemoCache[str, Teacher]


async def fetch_teacher_name(teacher_id: str, source: IdentitySource) -> str:
    """Look up a display name, substituting the sentinel on any failure."""
    try:
        name = await source.fetch_name(teacher_id)
    except IdentityFetchError as e:
        logger.warning(
            "Name lookup failed for %s (url=%s, status=%s): %s",
            teacher_id,
            e.url,
            e.status_code,
            e,
        )
        return NAME_NOT_AVAILABLE
    except Exception:
        logger.warning("Name lookup failed for %s", teacher_id, exc_info=True)
        return NAME_NOT_AVAILABLE

    if not isinstance(name, str) or not name.strip():
        logger.warning("Unusable name %r returned for %s", name, teacher_id)
        return NAME_NOT_AVAILABLE
    return name.strip()


async def resolve_teacher(cache: TeacherCache, teacher_id: str, source: IdentitySource) -> Teacher:
    """
    Return the Teacher for teacher_id, creating it on first reference.

    The identity service is called once per id per cache.
    """

    async def create() -> Teacher:
        return Teacher(id=teacher_id, name=await fetch_teacher_name(teacher_id, source))

    return await cache.get_or_fetch(teacher_id, create)
