# ==============================================================================
# Event Source Abstract Base Class
# ==============================================================================
"""
Abstract interface for supplying the raw event log.

Implementations: LogPullerEventSource, FileEventSource
"""

from abc import ABC, abstractmethod


class EventSource(ABC):
    """Supplies raw log records in log order."""

    @abstractmethod
    def get_events(self) -> list[dict]:
        """
        Fetch the raw event records.

        Returns:
            List of raw event dicts, in the order the log recorded them

        Raises:
            EventSourceError: If the log cannot be retrieved
        """
        ...
