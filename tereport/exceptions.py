# ==============================================================================
# Exceptions
# ==============================================================================
"""
Exception hierarchy for the report pipeline.

Unresolvable references (failed module fetches, missing modes or activity
ids) never surface as exceptions; they are excluded during reduction.
The exceptions below are either fatal to a build or raised by upstream
adapters and translated into "unresolved" by the resolvers.
"""

from typing import Optional


class TEReportError(Exception):
    """Base class for all report pipeline errors."""


class ReportBuildError(TEReportError):
    """A raw event record is structurally invalid. Fatal for the build."""


class InvalidModuleIdError(TEReportError, ValueError):
    """A module reference does not look like "<type>: <id>"."""


class MalformedContentError(TEReportError):
    """A content export is structurally broken (e.g. unparseable plugin JSON)."""


class UpstreamError(TEReportError):
    """
    Failure talking to an upstream service.

    Attributes:
        url: Request URL, when known
        status_code: HTTP status, or None for transport failures
    """

    def __init__(
        self, message: str, url: Optional[str] = None, status_code: Optional[int] = None
    ):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ModuleFetchError(UpstreamError):
    """The content-authoring service could not supply a module export."""


class IdentityFetchError(UpstreamError):
    """The identity service could not supply a teacher's name."""


class EventSourceError(UpstreamError):
    """The event log could not be retrieved."""
