# ==============================================================================
# Shared Utilities for CLI Commands
# ==============================================================================
"""
Shared utilities used across CLI command modules.

This module provides:
- ANSI color codes and status icons
- Error printing (to stderr, so stdout can carry CSV)
- Builders for the event and identity sources chosen by CLI options
"""

import sys
from pathlib import Path
from typing import Optional

import typer

from tereport.base import EventSource, IdentitySource
from tereport.infrastructure import (
    FileEventSource,
    LogPullerEventSource,
    PortalIdentitySource,
    StaticIdentitySource,
)

# ==============================================================================
# ANSI Colors and Icons
# ==============================================================================


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    CYAN = "\033[36m"
    WHITE = "\033[37m"

    BRIGHT_RED = "\033[91m"
    BRIGHT_GREEN = "\033[92m"
    BRIGHT_YELLOW = "\033[93m"


class Icons:
    """Status icons using Unicode symbols."""

    CHECK = "✓"
    CROSS = "✗"
    WARN = "!"
    ARROW = "→"


C, I = Colors, Icons


def print_error(message: str) -> None:
    print(f"{C.BRIGHT_RED}{I.CROSS} {message}{C.RESET}", file=sys.stderr)


def print_success(message: str) -> None:
    print(f"{C.BRIGHT_GREEN}{I.CHECK} {message}{C.RESET}", file=sys.stderr)


def mask_secret(value: Optional[str]) -> str:
    """Show only that a secret is set, never its value."""
    return "********" if value else "(not set)"


# ==============================================================================
# Source Builders
# ==============================================================================


def build_event_source(
    log_file: Optional[Path],
    request_json: Optional[str],
    signature: Optional[str],
) -> EventSource:
    """
    Pick the event source from CLI options.

    Exactly one of --log-file or the --request-json/--signature pair must be
    given.

    Raises:
        typer.BadParameter: If the options are missing or conflicting
    """
    if log_file is not None:
        if request_json or signature:
            raise typer.BadParameter("--log-file cannot be combined with --request-json")
        return FileEventSource(log_file)

    if request_json and signature:
        return LogPullerEventSource(request_json, signature)

    raise typer.BadParameter("Pass --log-file, or both --request-json and --signature")


def build_identity_source(names: Optional[Path], portal_token: Optional[str]) -> IdentitySource:
    """Static names from a JSON file if given, else the portal."""
    if names is not None:
        return StaticIdentitySource.from_json_file(names)
    return PortalIdentitySource(token=portal_token)
