# ==============================================================================
# Module Source Abstract Base Class
# ==============================================================================
"""
Abstract interface for fetching content exports from the authoring service.

Implementations: AuthoringModuleSource
"""

from abc import ABC, abstractmethod
from typing import Optional


class ModuleSource(ABC):
    """Fetches raw activity and sequence exports."""

    @abstractmethod
    async def fetch_module(self, module_type: str, module_id: str) -> Optional[dict]:
        """
        Fetch a raw content export.

        Args:
            module_type: "activity", "sequence", ... as found in the log
            module_id: Numeric id of the activity or sequence

        Returns:
            The export as a dict, or None if the service has no content for it

        Raises:
            ModuleFetchError: On transport or service failure
        """
        ...
