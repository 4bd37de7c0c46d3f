# ==============================================================================
# Report Commands
# ==============================================================================
"""
Report commands for the te-report CLI.

Builds the usage or session report for one event log and writes it as CSV,
to stdout or to --output.
"""

import asyncio
import logging
import sys
from contextlib import AsyncExitStack
from pathlib import Path
from typing import Annotated, Optional

import typer

from tereport.base import IdentitySource
from tereport.cli.shared import (
    build_event_source,
    build_identity_source,
    print_error,
    print_success,
)
from tereport.core import ReportData, build_report_data
from tereport.exceptions import TEReportError
from tereport.infrastructure import AuthoringModuleSource, PortalIdentitySource
from tereport.reports import ReportType, generate_report
from tereport.utils.config import get_settings
from tereport.utils.log import configure_logging

logger = logging.getLogger(__name__)


# ==============================================================================
# Option Types
# ==============================================================================

LogFileOption = Annotated[
    Optional[Path],
    typer.Option(
        "--log-file",
        "-l",
        help="JSON file holding the raw event log",
        exists=True,
        dir_okay=False,
    ),
]
RequestJsonOption = Annotated[
    Optional[str],
    typer.Option("--request-json", help="Signed portal report request (pulls from the log-puller)"),
]
SignatureOption = Annotated[
    Optional[str],
    typer.Option("--signature", help="Portal signature of --request-json"),
]
PortalTokenOption = Annotated[
    Optional[str],
    typer.Option("--portal-token", help="Bearer token for teacher name lookups"),
]
NamesOption = Annotated[
    Optional[Path],
    typer.Option(
        "--names",
        help="JSON object of teacher id -> name, used instead of the portal",
        exists=True,
        dir_okay=False,
    ),
]
OutputOption = Annotated[
    Optional[Path],
    typer.Option("--output", "-o", help="Write CSV here instead of stdout"),
]


# ==============================================================================
# Helper Functions
# ==============================================================================


async def _build(raw_events: list[dict], identity_source: IdentitySource) -> ReportData:
    async with AsyncExitStack() as stack:
        module_source = await stack.enter_async_context(AuthoringModuleSource())
        if isinstance(identity_source, PortalIdentitySource):
            await stack.enter_async_context(identity_source)
        return await build_report_data(raw_events, module_source, identity_source)


def _run_report(
    report_type: ReportType,
    log_file: Optional[Path],
    request_json: Optional[str],
    signature: Optional[str],
    portal_token: Optional[str],
    names: Optional[Path],
    output: Optional[Path],
) -> None:
    configure_logging(get_settings().effective_log_level)
    event_source = build_event_source(log_file, request_json, signature)

    try:
        raw_events = event_source.get_events()
        identity_source = build_identity_source(names, portal_token)
        report_data = asyncio.run(_build(raw_events, identity_source))
    except TEReportError as e:
        logger.debug("Report build failed", exc_info=True)
        print_error(f"Report failed: {e}")
        raise typer.Exit(1)

    csv_text = generate_report(report_type, report_data).to_csv()

    if output is None:
        sys.stdout.write(csv_text)
        return

    output.write_text(csv_text, encoding="utf-8")
    print_success(f"Wrote {report_type.value} to {output}")


# ==============================================================================
# Commands
# ==============================================================================


def report_usage(
    log_file: LogFileOption = None,
    request_json: RequestJsonOption = None,
    signature: SignatureOption = None,
    portal_token: PortalTokenOption = None,
    names: NamesOption = None,
    output: OutputOption = None,
) -> None:
    """Usage report: one row per teacher, module and mode.

    Examples:
        tereport report usage --log-file log.json
        tereport report usage --request-json "$JSON" --signature "$SIG" -o usage.csv
    """
    _run_report(ReportType.USAGE, log_file, request_json, signature, portal_token, names, output)


def report_session(
    log_file: LogFileOption = None,
    request_json: RequestJsonOption = None,
    signature: SignatureOption = None,
    portal_token: PortalTokenOption = None,
    names: NamesOption = None,
    output: OutputOption = None,
) -> None:
    """Session report: one row per session, teacher, module and mode.

    Examples:
        tereport report session --log-file log.json --names names.json
    """
    _run_report(ReportType.SESSION, log_file, request_json, signature, portal_token, names, output)
