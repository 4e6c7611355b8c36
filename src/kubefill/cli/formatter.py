# src/kubefill/cli/formatter.py
from typing import Any, Dict, List

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from kubefill.core.config import OperatorConfig

# Initialize the Rich console for high-quality terminal output
console = Console()


class KubeFormatter:
    """
    KubeFormatter: rendering for the CLI.
    Responsible for side-by-side diffs, config tables and execution reports.
    """

    def display_diff(self, file_path: str, old_content: str, new_content: str):
        """
        Renders the original manifest next to the rendered one.
        """
        if not old_content or not new_content:
            return

        old_syntax = Syntax(old_content.strip(), "yaml", theme="ansi_dark", line_numbers=True)
        new_syntax = Syntax(new_content.strip(), "yaml", theme="monokai", line_numbers=True)

        layout_table = Table.grid(expand=True, padding=1)
        layout_table.add_column(ratio=1)
        layout_table.add_column(ratio=1)

        layout_table.add_row(
            Panel(old_syntax, title=f"[bold red]ORIGINAL: {file_path}[/bold red]", border_style="red"),
            Panel(new_syntax, title=f"[bold green]RENDERED: {file_path}[/bold green]", border_style="green")
        )
        console.print(layout_table)

    def show_config(self, config: OperatorConfig):
        table = Table(title="Operator Configuration", show_header=True, header_style="bold magenta")
        table.add_column("Key", style="cyan")
        table.add_column("Value")

        table.add_row("managedNamespace", config.managed_namespace)
        table.add_row("controllerImage", config.controller_image or "[dim]<unchanged>[/dim]")
        table.add_row("cloudNodeImage", config.cloud_node_image or "[dim]<unchanged>[/dim]")
        table.add_row("isSingleReplica", str(config.is_single_replica))
        table.add_row("infrastructureName", config.infrastructure_name or "[dim]<empty>[/dim]")

        console.print(table)

    def print_final_table(self, reports: List[Dict[str, Any]], summary: Dict[str, Any]):
        """
        Builds the summary table shown at the very end of a render.
        """
        table = Table(title="KubeFill Render Report", show_lines=True, header_style="bold magenta")
        table.add_column("File Path", style="cyan")
        table.add_column("Kinds", style="white")
        table.add_column("Status", style="bold")
        table.add_column("Result", justify="center")

        for r in reports:
            if r.get("error"):
                console.print(f"[bold red]Error in {r['file_path']}:[/bold red] {r['error']}")

            success = r.get("success", False)
            status_color = "green" if success else "red"
            table.add_row(
                str(r.get("file_path")),
                ", ".join(r.get("kinds", [])) or "-",
                f"[{status_color}]{r.get('status', 'FAILED')}[/{status_color}]",
                "✅" if success else "❌"
            )

        console.print(table)
        console.print(Panel(
            f"[bold white]Summary Report[/bold white]\n"
            f"════════════════════════════════════════\n"
            f"Total Files:      {summary['total_files']}\n"
            f"Objects Rendered: {summary['objects_rendered']}\n"
            f"Written:          {summary['written_to_disk']}\n"
            f"Errors:           [red]{summary['system_errors']}[/red]",
            border_style="dim"
        ))
