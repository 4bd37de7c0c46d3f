# ==============================================================================
# CLI Commands Module
# ==============================================================================
"""
CLI commands for te-report.

Commands are organized into separate modules:
- shared.py: Colors, icons and source builders
- report.py: usage and session reports
- modules.py: inspect one module's Teacher-Edition plugins
- config.py: show effective configuration
"""

from tereport.cli.shared import (
    C,
    Colors,
    I,
    Icons,
    build_event_source,
    build_identity_source,
    mask_secret,
    print_error,
    print_success,
)

__all__ = [
    "C",
    "Colors",
    "I",
    "Icons",
    "build_event_source",
    "build_identity_source",
    "mask_secret",
    "print_error",
    "print_success",
]
