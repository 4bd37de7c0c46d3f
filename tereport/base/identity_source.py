# ==============================================================================
# Identity Source Abstract Base Class
# ==============================================================================
"""
Abstract interface for resolving teacher identifiers to display names.

Implementations: PortalIdentitySource, StaticIdentitySource
"""

from abc import ABC, abstractmethod


class IdentitySource(ABC):
    """Resolves a teacher identifier to a display name."""

    @abstractmethod
    async def fetch_name(self, teacher_id: str) -> str:
        """
        Fetch a teacher's display name.

        Args:
            teacher_id: Identifier from the log, e.g. "28@learn.staging.concord.org"

        Returns:
            Display name

        Raises:
            IdentityFetchError: If the name cannot be resolved
        """
        ...
