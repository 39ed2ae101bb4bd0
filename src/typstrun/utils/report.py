from typing import List, Optional
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.text import Text

from ..parsing.diagnostics import Diagnostic, Severity
from .state import BuildState

# Theme Colors
C_ERROR = "#e5534b"
C_WARNING = "#fecd91"
C_SPAN = "#9FBFC5"
C_OK = "#94bfc1"

SEVERITY_STYLES = {
    Severity.ERROR: f"bold {C_ERROR}",
    Severity.WARNING: f"bold {C_WARNING}",
}


def diagnostics_table(diagnostics: List[Diagnostic]) -> Table:
    table = Table(box=None, header_style=f"bold {C_SPAN}", expand=True)
    table.add_column("Severity", no_wrap=True)
    table.add_column("Location", style=C_SPAN, no_wrap=True)
    table.add_column("Message")

    for diag in diagnostics:
        table.add_row(
            Text(diag.severity.value, style=SEVERITY_STYLES[diag.severity]),
            str(diag.span) if diag.span else "",
            Text(diag.message),
        )
    return table


def print_build(state: BuildState, console: Optional[Console] = None):
    """Prints the outcome of a build: a green line on success, otherwise a panel of diagnostics."""
    console = console or Console(stderr=True)

    if state.tool_error:
        console.print(Panel(Text(state.tool_error), title="typst failed to run", border_style=C_ERROR))
        return

    if not state.diagnostics and not state.has_errors:
        console.print(Text(f"compiled {state.source_path} -> {state.output_path}", style=C_OK))
        return

    if not state.diagnostics:
        body = Text(state.preamble or "typst reported a failure without any diagnostics")
        console.print(Panel(body, title="compilation failed", title_align="left", border_style=C_ERROR))
        return

    border = C_ERROR if state.has_errors else C_WARNING
    title = "compilation failed" if state.has_errors else "compiled with warnings"
    console.print(Panel(diagnostics_table(state.diagnostics), title=title, title_align="left", border_style=border))
