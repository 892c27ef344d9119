from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from prokpan.runners.base import ToolRunner
from prokpan.utils.subprocess import CommandExecutor, CommandResult


class PanarooRunner(ToolRunner):
    """Wrapper around Panaroo pangenome construction."""

    tool_name = "panaroo"

    def __init__(
        self,
        executable: str = "panaroo",
        *,
        executor: CommandExecutor | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(executable, executor=executor, logger=logger)

    def plan_pangenome_args(
        self,
        *,
        annotations: Sequence[Path],
        output_dir: Path,
        threads: int,
        clean_mode: str = "strict",
        alignment: str = "core",
        aligner: str = "mafft",
        core_threshold: float = 0.95,
        remove_invalid_genes: bool = True,
        merge_paralogs: bool = True,
    ) -> list[str]:
        if not annotations:
            raise ValueError("`annotations` cannot be empty.")

        args: list[str] = ["-i", *[str(path) for path in annotations]]
        args.extend(["-o", str(output_dir), "--clean-mode", clean_mode])
        if remove_invalid_genes:
            args.append("--remove-invalid-genes")
        if merge_paralogs:
            args.append("--merge_paralogs")
        args.extend(
            [
                "-a",
                alignment,
                "--aligner",
                aligner,
                "--core_threshold",
                f"{core_threshold:g}",
                "-t",
                str(threads),
            ]
        )
        return args

    def pangenome(
        self,
        *,
        annotations: Sequence[Path],
        output_dir: Path,
        threads: int,
        clean_mode: str = "strict",
        alignment: str = "core",
        aligner: str = "mafft",
        core_threshold: float = 0.95,
        dry_run: bool = False,
    ) -> CommandResult:
        return self.run(
            self.plan_pangenome_args(
                annotations=annotations,
                output_dir=output_dir,
                threads=threads,
                clean_mode=clean_mode,
                alignment=alignment,
                aligner=aligner,
                core_threshold=core_threshold,
            ),
            dry_run=dry_run,
        )
