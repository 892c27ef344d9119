from __future__ import annotations

import typer
from rich.console import Console
from rich.panel import Panel

from prokpan import __version__
from prokpan.commands import check, run

console = Console()

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Batch Prokka annotation and Panaroo pangenome analysis for bacterial assemblies.",
)

app.add_typer(run.app, name="run", help="Annotate assemblies and build the pangenome.")
app.add_typer(check.app, name="check", help="Check external tools and the reference annotation.")


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"prokpan {__version__}")
        raise typer.Exit()


def _print_startup_intro(command_name: str) -> None:
    banner = Panel(
        f"[bold cyan]prokpan {__version__}[/bold cyan] [white]{command_name}[/white]\n"
        "[white]Prokka annotation + Panaroo pangenome[/white]",
        title="[bold]CLI Start[/bold]",
        border_style="cyan",
        expand=False,
    )
    console.print(banner)


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show prokpan version and exit.",
    ),
) -> None:
    if ctx.invoked_subcommand:
        _print_startup_intro(ctx.invoked_subcommand)
