from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from pathlib import Path
from typing import Callable, Generic, TypeVar

from prokpan.context import RunContext
from prokpan.exceptions import NormalizationError, ProkPanError
from prokpan.pipeline.collect import collect_annotations
from prokpan.pipeline.fasta import rename_contigs
from prokpan.pipeline.preflight import check_reference_annotation
from prokpan.pipeline.samples import Sample, discover_samples
from prokpan.runners.panaroo import PanarooRunner
from prokpan.runners.prokka import ProkkaRunner

T = TypeVar("T")

STAGE_PLAN = [
    "Check for the optional reference annotation",
    "Discover assemblies and rename contigs per sample",
    "Annotate each sample with Prokka",
    "Collect GFF files from all samples",
    "Build the pangenome with Panaroo",
]


@dataclass(frozen=True, slots=True)
class StageResult(Generic[T]):
    """Outcome of one stage: either a value or the error that stopped it."""

    stage: str
    value: T | None = None
    error: ProkPanError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(slots=True)
class PipelineReport:
    samples: list[Sample] = field(default_factory=list)
    annotations: list[Path] = field(default_factory=list)
    pangenome_dir: Path | None = None
    reference_found: bool = False
    failed_stage: str | None = None
    error: ProkPanError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def exit_code(self) -> int:
        return 0 if self.error is None else self.error.exit_code

    @property
    def status(self) -> str:
        return "completed" if self.ok else "failed"


def run_stage(name: str, func: Callable[..., T], *args: object, **kwargs: object) -> StageResult[T]:
    try:
        return StageResult(stage=name, value=func(*args, **kwargs))
    except ProkPanError as exc:
        return StageResult(stage=name, error=exc)


def preflight_stage(context: RunContext) -> bool:
    return check_reference_annotation(context.reference_gff, context.logger)


def annotate_stage(context: RunContext, prokka: ProkkaRunner) -> list[Sample]:
    """Rename contigs and run Prokka for every discovered sample, in order.

    The first Prokka failure propagates and no further samples are touched.
    """

    cfg = context.config
    logger = context.logger
    annotated: list[Sample] = []

    for sample in discover_samples(context.layout, cfg.assembly_suffix):
        sample.annotation_dir.mkdir(parents=True, exist_ok=True)

        logger.info("Cleaning contig names for %s...", sample.sample_id)
        try:
            contigs = rename_contigs(sample.assembly_path, sample.normalized_path)
        except (OSError, ValueError) as exc:
            raise NormalizationError(
                f"Cannot rename contigs for {sample.sample_id} ({sample.assembly_path}): {exc}"
            ) from exc
        logger.debug("Wrote %d contigs to %s", contigs, sample.normalized_path)

        logger.info("Annotating %s as %s...", sample.sample_id, cfg.organism)
        prokka.annotate(
            assembly=sample.normalized_path,
            output_dir=sample.annotation_dir,
            prefix=sample.sample_id,
            genus=cfg.genus,
            species=cfg.species,
            threads=cfg.threads,
            kingdom=cfg.kingdom,
        )

        logger.info("Finished annotation for %s", sample.sample_id)
        logger.info("Annotated files stored in: %s", sample.annotation_dir)
        annotated.append(replace(sample, annotated=True))

    if annotated:
        logger.info("All Prokka annotations completed (%d samples).", len(annotated))
    else:
        logger.warning(
            "No assemblies matching *%s found under %s.",
            cfg.assembly_suffix,
            context.layout.input_dir,
        )
    return annotated


def collect_stage(context: RunContext) -> list[Path]:
    return collect_annotations(
        context.layout.annotation_dir,
        extension=context.config.annotation_extension,
        logger=context.logger,
    )


def pangenome_stage(context: RunContext, panaroo: PanarooRunner, annotations: list[Path]) -> Path:
    cfg = context.config
    output_dir = context.layout.pangenome_dir

    context.logger.info("Starting Panaroo analysis...")
    panaroo.pangenome(
        annotations=annotations,
        output_dir=output_dir,
        threads=cfg.threads,
        clean_mode=cfg.clean_mode,
        alignment=cfg.alignment,
        aligner=cfg.aligner,
        core_threshold=cfg.core_threshold,
    )
    context.logger.info(
        "Panaroo analysis completed successfully. Results saved to %s", output_dir
    )
    return output_dir


def _now() -> str:
    return datetime.now().strftime("%a %d %b %Y %H:%M:%S")


def _fail(context: RunContext, report: PipelineReport, result: StageResult) -> PipelineReport:
    report.failed_stage = result.stage
    report.error = result.error
    context.logger.error("%s", result.error)
    context.logger.error("=== PIPELINE FAILED during %s at %s ===", result.stage, _now())
    return report


def run_pipeline(
    context: RunContext,
    *,
    prokka: ProkkaRunner,
    panaroo: PanarooRunner,
) -> PipelineReport:
    """Run every stage in order, stopping at the first one that fails."""

    report = PipelineReport()
    context.logger.info("=== PROKKA + PANAROO PIPELINE STARTED at %s ===", _now())

    preflight = run_stage("preflight", preflight_stage, context)
    if not preflight.ok:
        return _fail(context, report, preflight)
    report.reference_found = bool(preflight.value)

    annotate = run_stage("annotate", annotate_stage, context, prokka)
    if not annotate.ok:
        return _fail(context, report, annotate)
    report.samples = annotate.value or []

    collect = run_stage("collect", collect_stage, context)
    if not collect.ok:
        return _fail(context, report, collect)
    report.annotations = collect.value or []

    pangenome = run_stage("pangenome", pangenome_stage, context, panaroo, report.annotations)
    if not pangenome.ok:
        return _fail(context, report, pangenome)
    report.pangenome_dir = pangenome.value

    context.logger.info("=== PIPELINE COMPLETED SUCCESSFULLY at %s ===", _now())
    return report
