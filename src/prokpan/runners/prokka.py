from __future__ import annotations

import logging
from pathlib import Path

from prokpan.runners.base import ToolRunner
from prokpan.utils.subprocess import CommandExecutor, CommandResult


class ProkkaRunner(ToolRunner):
    """Wrapper around Prokka genome annotation."""

    tool_name = "prokka"

    def __init__(
        self,
        executable: str = "prokka",
        *,
        executor: CommandExecutor | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(executable, executor=executor, logger=logger)

    def plan_annotate_args(
        self,
        *,
        assembly: Path,
        output_dir: Path,
        prefix: str,
        genus: str,
        species: str,
        threads: int,
        kingdom: str = "Bacteria",
    ) -> list[str]:
        return [
            "--outdir",
            str(output_dir),
            "--prefix",
            prefix,
            "--kingdom",
            kingdom,
            "--genus",
            genus,
            "--species",
            species,
            "--usegenus",
            "--compliant",
            "--force",
            "--cpus",
            str(threads),
            str(assembly),
        ]

    def annotate(
        self,
        *,
        assembly: Path,
        output_dir: Path,
        prefix: str,
        genus: str,
        species: str,
        threads: int,
        kingdom: str = "Bacteria",
        dry_run: bool = False,
    ) -> CommandResult:
        return self.run(
            self.plan_annotate_args(
                assembly=assembly,
                output_dir=output_dir,
                prefix=prefix,
                genus=genus,
                species=species,
                threads=threads,
                kingdom=kingdom,
            ),
            dry_run=dry_run,
        )
