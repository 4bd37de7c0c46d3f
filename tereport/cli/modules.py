# ==============================================================================
# Module Commands
# ==============================================================================
"""
Module inspection commands for the te-report CLI.

Resolves one module from the authoring service and lists the
Teacher-Edition plugins found in each of its activities.
"""

import asyncio
import json as _json
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from tereport.cli.shared import C, I, print_error
from tereport.core.models import Module, Plugin, QuestionWrapperDef, WindowShadeDef
from tereport.core.modules import ModuleCache, resolve_module
from tereport.exceptions import TEReportError
from tereport.infrastructure import AuthoringModuleSource
from tereport.utils.config import get_settings
from tereport.utils.log import configure_logging

# ==============================================================================
# Helper Functions
# ==============================================================================

_QUESTION_WRAPPER_TABS = {
    "is_correct_explanation": "correct",
    "is_distractors_explanation": "distractors",
    "is_exemplar": "exemplar",
    "is_teacher_tip": "teacher tip",
}


def describe_plugin(plugin: Plugin) -> str:
    """Short human description of a plugin's definition."""
    definition = plugin.definition
    if isinstance(definition, QuestionWrapperDef):
        tabs = [label for attr, label in _QUESTION_WRAPPER_TABS.items() if getattr(definition, attr)]
        return ", ".join(tabs) or "no significant tabs"
    if isinstance(definition, WindowShadeDef):
        return definition.window_shade_type.value
    return ""


async def _resolve(external_id: str) -> Optional[Module]:
    async with AuthoringModuleSource() as source:
        return await resolve_module(ModuleCache(), external_id, source)


# ==============================================================================
# Commands
# ==============================================================================


def modules_show(
    external_id: Annotated[str, typer.Argument(help='Module reference, e.g. "activity: 100"')],
    json_output: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Show a module's activities and Teacher-Edition plugins.

    Examples:
        tereport modules show "activity: 100"
        tereport modules show "sequence: 55" --json
    """
    configure_logging(get_settings().effective_log_level)

    try:
        module = asyncio.run(_resolve(external_id))
    except TEReportError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if module is None:
        print_error(f"Module {external_id} could not be resolved")
        raise typer.Exit(1)

    if json_output:
        print(_json.dumps(module.model_dump(mode="json"), indent=2))
        return

    te_label = f"{C.BRIGHT_GREEN}{I.CHECK} yes" if module.is_te_module else f"{C.DIM}no"
    print()
    print(f"{C.BOLD}{module.name or module.external_id}{C.RESET}")
    print(f"  Reference:        {C.WHITE}{module.external_id}{C.RESET}")
    print(f"  Teacher Edition:  {te_label}{C.RESET}")
    print()

    table = Table(show_header=True, header_style="bold")
    table.add_column("Activity")
    table.add_column("Plugin")
    table.add_column("Type")
    table.add_column("Detail")

    for activity in module.activities:
        if not activity.plugins:
            table.add_row(activity.name, "-", "-", "")
            continue
        for plugin in activity.plugins:
            table.add_row(
                activity.name,
                plugin.ref_id,
                plugin.plugin_type.value,
                describe_plugin(plugin),
            )

    Console().print(table)
    print()
