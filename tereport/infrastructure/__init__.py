# ==============================================================================
# Infrastructure Layer
# ==============================================================================
"""
Concrete adapters for the upstream collaborators and the CSV serializer.

- authoring.py: AuthoringModuleSource (httpx)
- portal.py: PortalIdentitySource (httpx), StaticIdentitySource
- log_puller.py: LogPullerEventSource (requests), FileEventSource
- csv_writer.py: write_csv
"""

from tereport.infrastructure.authoring import AuthoringModuleSource
from tereport.infrastructure.csv_writer import write_csv
from tereport.infrastructure.log_puller import FileEventSource, LogPullerEventSource
from tereport.infrastructure.portal import PortalIdentitySource, StaticIdentitySource

__all__ = [
    "AuthoringModuleSource",
    "FileEventSource",
    "LogPullerEventSource",
    "PortalIdentitySource",
    "StaticIdentitySource",
    "write_csv",
]
