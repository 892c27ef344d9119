from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from prokpan.config import RunConfig
from prokpan.logging import configure_logging, get_logger, shutdown_logging
from prokpan.paths import PipelineLayout, create_pipeline_layout, default_reference_gff, run_log_path

TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"


@dataclass(slots=True)
class RunContext:
    """State for one pipeline execution, passed explicitly to every stage."""

    config: RunConfig
    layout: PipelineLayout
    started_at: datetime
    log_file: Path
    logger: logging.Logger

    @property
    def timestamp(self) -> str:
        return self.started_at.strftime(TIMESTAMP_FORMAT)

    @property
    def reference_gff(self) -> Path:
        if self.config.reference_gff is not None:
            return self.config.reference_gff
        return default_reference_gff(self.layout)

    def close(self) -> None:
        shutdown_logging()


def create_run_context(config: RunConfig, *, now: datetime | None = None) -> RunContext:
    """Create the directory layout, open the run log and return the context.

    Raises ``LayoutError`` before any logging is configured when the layout
    cannot be created.
    """

    started_at = now or datetime.now()
    layout = create_pipeline_layout(config.base_dir)
    log_file = run_log_path(layout, started_at.strftime(TIMESTAMP_FORMAT))
    configure_logging(verbose=config.verbose, quiet=config.quiet, log_file=log_file)

    return RunContext(
        config=config,
        layout=layout,
        started_at=started_at,
        log_file=log_file,
        logger=get_logger("prokpan.pipeline"),
    )
