# ==============================================================================
# Base Abstract Classes
# ==============================================================================
"""
Abstract ports for the upstream collaborators the report pipeline consumes.

The core depends only on these interfaces; HTTP and file implementations
live in tereport.infrastructure.
"""

from tereport.base.event_source import EventSource
from tereport.base.identity_source import IdentitySource
from tereport.base.module_source import ModuleSource

__all__ = [
    "EventSource",
    "IdentitySource",
    "ModuleSource",
]
