#!/usr/bin/env python3
"""
KUBEFILL CLI
------------
Renders operator manifests with environment-specific values: namespace,
image references, single-replica mode and infrastructure name.

Author: KubeFill Team
Date: 2026-01-16
"""

import sys
import logging
import argparse
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
    BarColumn,
    TaskProgressColumn
)

from kubefill.cli.formatter import KubeFormatter
from kubefill.core.config import compose_config
from kubefill.core.engine import RenderEngine
from kubefill.core.errors import ConfigError

# Global console for consistent styling across the application
console = Console()


class KubeFillCLI:
    """
    CLI wrapper that translates user commands into RenderEngine actions.
    """

    def __init__(self):
        self.parser = argparse.ArgumentParser(
            prog="kubefill",
            description="KubeFill - fill operator config values into Kubernetes manifests",
        )
        self.formatter = KubeFormatter()
        self._setup_args()

    def _setup_args(self):
        """Configures the command-line flags and subcommands."""
        self.parser.add_argument("--version", action="version", version="kubefill v0.1.0")
        self.parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
        subparsers = self.parser.add_subparsers(dest="command", metavar="Command")

        # Accept -v after the subcommand too; SUPPRESS keeps a top-level -v intact
        common = argparse.ArgumentParser(add_help=False)
        common.add_argument("-v", "--verbose", action="store_true", default=argparse.SUPPRESS,
                            help="Enable debug logging")

        render_parser = subparsers.add_parser("render", parents=[common], help="Fill config values into manifests")
        render_parser.add_argument("path", help="Path to a YAML file or directory")
        render_parser.add_argument("-c", "--config", required=True, help="Operator config file (YAML/JSON)")
        render_parser.add_argument("--images", help="Images JSON file overriding image references")
        render_parser.add_argument("--write", action="store_true", help="Write rendered manifests in place")
        render_parser.add_argument("--diff", action="store_true", help="Display side-by-side comparison")
        render_parser.add_argument("--ext", default=".yaml", help="File extension filter (default: .yaml)")

        show_parser = subparsers.add_parser("show-config", parents=[common], help="Print the composed operator config")
        show_parser.add_argument("-c", "--config", required=True, help="Operator config file (YAML/JSON)")
        show_parser.add_argument("--images", help="Images JSON file overriding image references")

    def _run_render(self, args: argparse.Namespace) -> int:
        input_path = Path(args.path).resolve()
        if not input_path.exists():
            console.print(f"[bold red]Error:[/bold red] Path '{args.path}' not found.")
            return 1

        config = compose_config(args.config, args.images)
        workspace = input_path if input_path.is_dir() else input_path.parent
        engine = RenderEngine(config, str(workspace))

        if input_path.is_file():
            reports = [engine.render_file(input_path.name, dry_run=not args.write)]
        else:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(bar_width=40),
                TaskProgressColumn(),
                TimeElapsedColumn(),
                console=console
            ) as progress:
                task_id = progress.add_task("Rendering manifests...", total=None)

                def on_progress(done: int, total: int):
                    progress.update(task_id, completed=done, total=total)

                reports = engine.render_directory(args.ext, dry_run=not args.write,
                                                  progress_callback=on_progress)

        if not reports:
            console.print(f"\n[bold yellow]⚠️  No manifests matching '*{args.ext}' found.[/bold yellow]")
            return 0

        if args.diff:
            for r in reports:
                if r.get("rendered_content"):
                    self.formatter.display_diff(r["file_path"], r["original_content"], r["rendered_content"])

        self.formatter.print_final_table(reports, engine.generate_summary(reports))
        return 0 if all(r.get("success") for r in reports) else 1

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Primary routing entry point."""
        args = self.parser.parse_args(argv)

        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.WARNING,
            format="%(levelname)s %(name)s: %(message)s"
        )

        try:
            if args.command == "render":
                console.print(Panel.fit("[bold cyan]KubeFill v0.1.0[/bold cyan]", title="Render", border_style="cyan"))
                return self._run_render(args)
            if args.command == "show-config":
                self.formatter.show_config(compose_config(args.config, args.images))
                return 0
        except ConfigError as e:
            console.print(f"[bold red]CONFIG ERROR:[/bold red] {e}")
            return 1

        self.parser.print_help()
        return 0


def main():
    """Application entry point with interrupt handling."""
    try:
        sys.exit(KubeFillCLI().run())
    except KeyboardInterrupt:
        console.print("\n[bold red]Terminated by user.[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
