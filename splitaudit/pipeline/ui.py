"""Central UI handler for splitaudit.

Single source of truth for Rich console styling. The console is bound to
stderr: stdout carries only the JSON report.

Usage:
    from splitaudit.pipeline.ui import console, print_summary

    print_summary(report)
"""

import inspect
import io

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

from splitaudit.models import Severity, UnifiedReport

AUDIT_THEME = Theme({
    "info": "bold cyan",
    "warning": "bold yellow",
    "error": "bold red",
    "success": "bold green",
    "critical": "bold red",
    "high": "bold yellow",
    "moderate": "bold blue",
    "low": "cyan",
    "unknown": "dim white",
    "dim": "dim white",
    "cmd": "bold magenta",
    "section": "bold cyan",
})

# Single console instance - import this, don't create your own
console = Console(theme=AUDIT_THEME, stderr=True)

# Worst first
SEVERITY_DISPLAY_ORDER = [
    Severity.CRITICAL,
    Severity.HIGH,
    Severity.MODERATE,
    Severity.LOW,
    Severity.INFO,
    Severity.UNKNOWN,
]


def print_summary(report: UnifiedReport) -> None:
    """Render per-severity package counts and submission errors."""
    counts = report.counts()

    table = Table(title="Vulnerable packages", title_justify="left")
    table.add_column("Severity")
    table.add_column("prod", justify="right")
    table.add_column("dev", justify="right")

    for severity in SEVERITY_DISPLAY_ORDER:
        prod = counts["prod"].get(severity, 0)
        dev = counts["dev"].get(severity, 0)
        if not prod and not dev:
            continue
        style = "dim" if severity is Severity.INFO else severity.value
        table.add_row(f"[{style}]{severity.value}[/{style}]", str(prod), str(dev))

    if table.row_count:
        console.print(table)
    else:
        print_status_panel("CLEAN", "No known vulnerabilities found", "", level="success")

    if report.errors:
        console.print(f"[warning]{len(report.errors)} dependencies could not be audited:[/warning]")
        for dep, message in sorted(report.errors.items()):
            console.print(f"  - {dep}: {message}", markup=False, highlight=False)


def print_status_panel(status: str, message: str, detail: str, level: str = "info") -> None:
    """Print a status panel with colored border."""
    style_map = {
        "critical": ("bold red", "red"),
        "high": ("bold yellow", "yellow"),
        "success": ("bold green", "green"),
        "info": ("bold cyan", "cyan"),
    }
    text_style, border_style = style_map.get(level, ("white", "white"))

    panel = Panel(
        Text.assemble(
            (f"STATUS: [{status}]\n", text_style),
            (message, border_style),
            (f"\n{detail}" if detail else "", border_style),
        ),
        border_style=border_style,
        expand=False,
    )
    console.print(panel)


class RichCommand(click.Command):
    """click.Command whose help page is rendered through Rich with the audit theme.

    Docstring lines ending in ':' become section headings, click's ``\\b``
    markers are dropped, and options are laid out as a two-column table.
    """

    def format_help(self, ctx, formatter):
        buffer = io.StringIO()
        help_console = Console(
            file=buffer,
            theme=AUDIT_THEME,
            width=formatter.width or 80,
            force_terminal=ctx.color is True,
        )

        usage = " ".join(self.collect_usage_pieces(ctx))
        help_console.print(Text.assemble(("Usage: ", "bold"), f"{ctx.command_path} {usage}"))
        help_console.print()

        for line in inspect.cleandoc(self.help or "").splitlines():
            if line.strip() == "\b":
                continue
            is_heading = line.endswith(":") and not line.startswith(" ")
            help_console.print(Text(line, style="section" if is_heading else ""))

        table = Table(show_header=False, box=None, padding=(0, 2, 0, 2))
        table.add_column("Option", style="cmd")
        table.add_column("Description")
        for param in self.get_params(ctx):
            record = param.get_help_record(ctx)
            if record:
                table.add_row(Text(record[0]), Text(record[1]))

        help_console.print()
        help_console.print(Text("Options:", style="section"))
        help_console.print(table)
        formatter.write(buffer.getvalue())
