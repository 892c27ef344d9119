from __future__ import annotations

from pathlib import Path

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from prokpan.config import CheckConfig, merge_command_config
from prokpan.exceptions import ProkPanError
from prokpan.logging import configure_logging, get_logger
from prokpan.paths import default_reference_gff, pipeline_layout
from prokpan.pipeline.preflight import check_reference_annotation, tool_report
from prokpan.runners.panaroo import PanarooRunner
from prokpan.runners.prokka import ProkkaRunner

app = typer.Typer(help="Report external tool availability and the reference annotation.")
console = Console()


def run_check(
    *,
    config_path: Path | None,
    base_dir: Path | None,
    reference_gff: Path | None,
    prokka_executable: str | None,
    panaroo_executable: str | None,
    verbose: bool | None,
    quiet: bool | None,
) -> int:
    try:
        cfg = merge_command_config(
            config_path=config_path,
            section="check",
            model_cls=CheckConfig,
            cli_overrides={
                "base_dir": base_dir,
                "reference_gff": reference_gff,
                "prokka_executable": prokka_executable,
                "panaroo_executable": panaroo_executable,
                "verbose": verbose,
                "quiet": quiet,
            },
        )
        configure_logging(verbose=cfg.verbose, quiet=cfg.quiet)
        logger = get_logger("prokpan.check")

        layout = pipeline_layout(cfg.base_dir)
        check_reference_annotation(cfg.reference_gff or default_reference_gff(layout), logger)

        statuses = tool_report([ProkkaRunner(cfg.prokka_executable), PanarooRunner(cfg.panaroo_executable)])

        table = Table(title="[bold]External tools[/bold]", box=box.SIMPLE_HEAVY, expand=False)
        table.add_column("Tool", style="bold cyan")
        table.add_column("Executable", style="white")
        table.add_column("Status")
        table.add_column("Version", style="white")
        for status in statuses:
            table.add_row(
                status.name,
                status.executable,
                "[green]found[/green]" if status.available else "[red]missing[/red]",
                status.version or "-",
            )
        console.print(table)

        missing = [status.name for status in statuses if not status.available]
        if missing:
            logger.error("Missing external tools: %s", ", ".join(missing))
            return 1
        return 0

    except ProkPanError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        return exc.exit_code


@app.callback(invoke_without_command=True)
def check_callback(
    ctx: typer.Context,
    config: Path | None = typer.Option(None, "--config", help="YAML config file."),
    base_dir: Path | None = typer.Option(None, "--base-dir", help="Project root directory."),
    reference_gff: Path | None = typer.Option(None, "--reference-gff", help="Reference annotation to look for."),
    prokka: str | None = typer.Option(None, "--prokka", help="Prokka executable."),
    panaroo: str | None = typer.Option(None, "--panaroo", help="Panaroo executable."),
    verbose: bool | None = typer.Option(None, "--verbose", help="Enable verbose logging."),
    quiet: bool | None = typer.Option(None, "--quiet", help="Only show errors."),
) -> None:
    if ctx.invoked_subcommand is not None:
        return

    exit_code = run_check(
        config_path=config,
        base_dir=base_dir,
        reference_gff=reference_gff,
        prokka_executable=prokka,
        panaroo_executable=panaroo,
        verbose=verbose,
        quiet=quiet,
    )
    raise typer.Exit(exit_code)
