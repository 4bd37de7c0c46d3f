# ==============================================================================
# Config Commands
# ==============================================================================
"""
Configuration commands for the te-report CLI.
"""

import json
from typing import Annotated

import typer

from tereport.cli.shared import C, mask_secret
from tereport.utils.config import get_settings


def config_show(
    json_output: Annotated[
        bool, typer.Option("--json", "-j", help="Output configuration as JSON")
    ] = False,
) -> None:
    """Display current configuration (includes secrets in JSON mode)."""
    settings = get_settings()

    if json_output:
        config = {
            "authoring": {
                "server": settings.authoring.server,
                "base_url": settings.authoring.base_url,
                "api_key": settings.authoring.api_key,
                "timeout_seconds": settings.authoring.timeout_seconds,
            },
            "portal": {
                "server": settings.portal.server,
                "base_url": settings.portal.base_url,
                "token": settings.portal.token,
                "timeout_seconds": settings.portal.timeout_seconds,
            },
            "log_puller": {
                "production_url": settings.log_puller.production_url,
                "staging_url": settings.log_puller.staging_url,
                "production_domains": settings.log_puller.production_domains,
                "timeout_seconds": settings.log_puller.timeout_seconds,
            },
            "log_level": settings.effective_log_level,
        }
        print(json.dumps(config, indent=2))
        return

    print()
    print(f"{C.BOLD}Configuration{C.RESET}")
    print()

    print(f"{C.CYAN}Authoring{C.RESET}")
    print(f"  Server:     {C.WHITE}{settings.authoring.base_url}{C.RESET}")
    print(f"  API key:    {C.WHITE}{mask_secret(settings.authoring.api_key)}{C.RESET}")
    print(f"  Timeout:    {C.WHITE}{settings.authoring.timeout_seconds:g}s{C.RESET}")
    print()

    print(f"{C.CYAN}Portal{C.RESET}")
    print(f"  Server:     {C.WHITE}{settings.portal.base_url}{C.RESET}")
    print(f"  Token:      {C.WHITE}{mask_secret(settings.portal.token)}{C.RESET}")
    print(f"  Timeout:    {C.WHITE}{settings.portal.timeout_seconds:g}s{C.RESET}")
    print()

    print(f"{C.CYAN}Log-puller{C.RESET}")
    print(f"  Production: {C.WHITE}{settings.log_puller.production_url}{C.RESET}")
    for i, domain in enumerate(settings.log_puller.production_domains):
        label = "  Domains:    " if i == 0 else "              "
        print(f"{label}{C.WHITE}{domain}{C.RESET}")
    print(f"  Staging:    {C.WHITE}{settings.log_puller.staging_url}{C.RESET}")
    print()

    print(f"{C.CYAN}Logging{C.RESET}")
    print(f"  Level:      {C.WHITE}{settings.effective_log_level}{C.RESET}")
    print()
