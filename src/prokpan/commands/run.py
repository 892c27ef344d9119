from __future__ import annotations

import sys
from pathlib import Path

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from prokpan.config import RunConfig, merge_command_config
from prokpan.context import RunContext, create_run_context
from prokpan.exceptions import ProkPanError
from prokpan.logging import get_logger
from prokpan.manifest import create_run_manifest, finalize_manifest, write_manifest
from prokpan.paths import manifest_path
from prokpan.pipeline.preflight import tool_report
from prokpan.pipeline.samples import discover_samples
from prokpan.pipeline.stages import STAGE_PLAN, run_pipeline
from prokpan.runners.panaroo import PanarooRunner
from prokpan.runners.prokka import ProkkaRunner
from prokpan.utils.subprocess import shell_join

app = typer.Typer(help="Annotate every assembly with Prokka and build a Panaroo pangenome.")
console = Console()


def _print_session_summary(context: RunContext, tool_versions: dict[str, str]) -> None:
    cfg = context.config
    stats = Table(
        title="[bold]Session Summary[/bold]",
        box=box.SIMPLE_HEAVY,
        show_header=False,
        expand=False,
    )
    stats.add_column("Key", style="bold cyan")
    stats.add_column("Value", style="white")
    stats.add_row("Base dir", escape(str(context.layout.root)))
    stats.add_row("Organism", escape(f"{cfg.kingdom} / {cfg.organism}"))
    stats.add_row("Threads", str(cfg.threads))
    stats.add_row("Assemblies", escape(f"{context.layout.input_dir}/*/*{cfg.assembly_suffix}"))
    stats.add_row(
        "Panaroo settings",
        f"{cfg.clean_mode} clean, {cfg.alignment} alignment with {cfg.aligner}, core >= {cfg.core_threshold:g}",
    )
    stats.add_row("Prokka version", escape(tool_versions.get("prokka", "not found on PATH")))
    stats.add_row("Panaroo version", escape(tool_versions.get("panaroo", "not found on PATH")))
    stats.add_row("Run log", escape(str(context.log_file)))
    console.print(stats)


def _print_plan(step_plan: list[str]) -> None:
    console.print("[bold]Pipeline step plan[/bold]")
    for idx, step in enumerate(step_plan, start=1):
        console.print(f"  {idx}. {step}")


def _dry_run(context: RunContext, prokka: ProkkaRunner, panaroo: PanarooRunner) -> list[str]:
    cfg = context.config
    logger = context.logger
    sample_ids: list[str] = []
    expected_annotations: list[Path] = []

    for sample in discover_samples(context.layout, cfg.assembly_suffix):
        planned = prokka.annotate(
            assembly=sample.normalized_path,
            output_dir=sample.annotation_dir,
            prefix=sample.sample_id,
            genus=cfg.genus,
            species=cfg.species,
            threads=cfg.threads,
            kingdom=cfg.kingdom,
            dry_run=True,
        )
        logger.info("Would annotate %s: %s", sample.sample_id, shell_join(planned.command))
        sample_ids.append(sample.sample_id)
        expected_annotations.append(sample.annotation_dir / f"{sample.sample_id}{cfg.annotation_extension}")

    if expected_annotations:
        planned = panaroo.pangenome(
            annotations=expected_annotations,
            output_dir=context.layout.pangenome_dir,
            threads=cfg.threads,
            clean_mode=cfg.clean_mode,
            alignment=cfg.alignment,
            aligner=cfg.aligner,
            core_threshold=cfg.core_threshold,
            dry_run=True,
        )
        logger.info("Would build pangenome: %s", shell_join(planned.command))

    logger.info("Dry-run requested; %d samples discovered, stopping before annotation.", len(sample_ids))
    return sample_ids


def run_run(
    *,
    config_path: Path | None,
    base_dir: Path | None,
    genus: str | None,
    species: str | None,
    threads: int | None,
    reference_gff: Path | None,
    assembly_suffix: str | None,
    kingdom: str | None,
    clean_mode: str | None,
    alignment: str | None,
    aligner: str | None,
    core_threshold: float | None,
    prokka_executable: str | None,
    panaroo_executable: str | None,
    dry_run: bool | None,
    verbose: bool | None,
    quiet: bool | None,
) -> int:
    context: RunContext | None = None
    try:
        cfg = merge_command_config(
            config_path=config_path,
            section="run",
            model_cls=RunConfig,
            cli_overrides={
                "base_dir": base_dir,
                "genus": genus,
                "species": species,
                "threads": threads,
                "reference_gff": reference_gff,
                "assembly_suffix": assembly_suffix,
                "kingdom": kingdom,
                "clean_mode": clean_mode,
                "alignment": alignment,
                "aligner": aligner,
                "core_threshold": core_threshold,
                "prokka_executable": prokka_executable,
                "panaroo_executable": panaroo_executable,
                "dry_run": dry_run,
                "verbose": verbose,
                "quiet": quiet,
            },
        )
        context = create_run_context(cfg)
        logger = context.logger

        prokka = ProkkaRunner(cfg.prokka_executable, logger=get_logger("prokpan.runners.prokka"))
        panaroo = PanarooRunner(cfg.panaroo_executable, logger=get_logger("prokpan.runners.panaroo"))
        tool_versions = {
            status.name: status.version
            for status in tool_report([prokka, panaroo])
            if status.version is not None
        }

        manifest = create_run_manifest(
            command="run",
            argv=sys.argv,
            base_dir=context.layout.root,
            organism=cfg.organism,
            dry_run=cfg.dry_run,
            threads=cfg.threads,
            config_path=config_path,
            log_file=context.log_file,
            planned_steps=STAGE_PLAN,
            tool_versions=tool_versions,
        )
        manifest_file = manifest_path(context.layout)
        write_manifest(manifest_file, manifest)

        _print_session_summary(context, tool_versions)
        _print_plan(STAGE_PLAN)
        logger.info("Run log: %s", context.log_file)
        if cfg.dry_run:
            sample_ids = _dry_run(context, prokka, panaroo)
            finalize_manifest(manifest, status="dry-run", samples=sample_ids)
            write_manifest(manifest_file, manifest)
            return 0

        report = run_pipeline(context, prokka=prokka, panaroo=panaroo)

        outputs: list[Path] = list(report.annotations)
        if report.pangenome_dir is not None:
            outputs.append(report.pangenome_dir)
        finalize_manifest(
            manifest,
            status=report.status,
            samples=[sample.sample_id for sample in report.samples],
            output_paths=outputs,
            failed_stage=report.failed_stage,
        )
        write_manifest(manifest_file, manifest)

        if not report.ok:
            console.print(f"[red]Error:[/red] {escape(str(report.error))}")
        return report.exit_code

    except ProkPanError as exc:
        if context is not None:
            context.logger.error("%s", exc)
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        return exc.exit_code
    except Exception as exc:  # pragma: no cover - defensive catch-all
        get_logger("prokpan.run").exception("Unhandled pipeline error")
        console.print(f"[red]Unexpected error:[/red] {escape(str(exc))}")
        return 1
    finally:
        if context is not None:
            context.close()


@app.callback(invoke_without_command=True)
def run_callback(
    ctx: typer.Context,
    config: Path | None = typer.Option(None, "--config", help="YAML config file."),
    base_dir: Path | None = typer.Option(
        None,
        "--base-dir",
        help="Project root holding assembly/, annotations/, panaroo_output/ and logs/.",
    ),
    genus: str | None = typer.Option(None, "--genus", help="Organism genus passed to Prokka."),
    species: str | None = typer.Option(None, "--species", help="Organism species passed to Prokka."),
    threads: int | None = typer.Option(None, "--threads", min=1, help="Threads for each tool."),
    reference_gff: Path | None = typer.Option(
        None,
        "--reference-gff",
        help="Optional reference annotation (default: annotations/reference.gff3).",
    ),
    assembly_suffix: str | None = typer.Option(
        None,
        "--assembly-suffix",
        help="File name suffix identifying assemblies (default: contigs.fasta).",
    ),
    kingdom: str | None = typer.Option(None, "--kingdom", help="Prokka kingdom (default: Bacteria)."),
    clean_mode: str | None = typer.Option(
        None,
        "--clean-mode",
        help="Panaroo clean mode: strict, moderate or sensitive.",
    ),
    alignment: str | None = typer.Option(None, "--alignment", help="Panaroo alignment product: core or pan."),
    aligner: str | None = typer.Option(None, "--aligner", help="Panaroo aligner: mafft, prank or clustal."),
    core_threshold: float | None = typer.Option(
        None,
        "--core-threshold",
        min=0.0,
        max=1.0,
        help="Fraction of genomes a gene must appear in to be core.",
    ),
    prokka: str | None = typer.Option(None, "--prokka", help="Prokka executable."),
    panaroo: str | None = typer.Option(None, "--panaroo", help="Panaroo executable."),
    dry_run: bool | None = typer.Option(None, "--dry-run", help="Plan only, do not run tools."),
    verbose: bool | None = typer.Option(None, "--verbose", help="Enable verbose logging."),
    quiet: bool | None = typer.Option(None, "--quiet", help="Only show errors."),
) -> None:
    if ctx.invoked_subcommand is not None:
        return

    exit_code = run_run(
        config_path=config,
        base_dir=base_dir,
        genus=genus,
        species=species,
        threads=threads,
        reference_gff=reference_gff,
        assembly_suffix=assembly_suffix,
        kingdom=kingdom,
        clean_mode=clean_mode,
        alignment=alignment,
        aligner=aligner,
        core_threshold=core_threshold,
        prokka_executable=prokka,
        panaroo_executable=panaroo,
        dry_run=dry_run,
        verbose=verbose,
        quiet=quiet,
    )
    raise typer.Exit(exit_code)
