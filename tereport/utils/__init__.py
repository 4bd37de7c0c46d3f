# ==============================================================================
# Report Pipeline Utilities
# ==============================================================================
"""
Shared utilities for the report pipeline.

This module exports configuration and logging helpers.
"""

from tereport.utils.config import (
    AuthoringSettings,
    LogPullerSettings,
    PortalSettings,
    Settings,
    get_settings,
)
from tereport.utils.log import configure_logging

__all__ = [
    # Config
    "AuthoringSettings",
    "LogPullerSettings",
    "PortalSettings",
    "Settings",
    "get_settings",
    # Logging
    "configure_logging",
]
