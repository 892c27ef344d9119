from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

import pytest

from prokpan.logging import shutdown_logging
from prokpan.utils.subprocess import CommandResult


class FakeTool:
    """Stands in for prokka and panaroo: records argv and returns scripted exit codes."""

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.failing_samples: set[str] = set()
        self.panaroo_returncode = 0

    def __call__(
        self,
        command: Sequence[str],
        *,
        dry_run: bool = False,
        merge_stderr: bool = False,
        logger: logging.Logger | None = None,
    ) -> CommandResult:
        argv = [str(part) for part in command]
        self.calls.append(argv)
        if dry_run:
            return CommandResult(command=argv, returncode=0, stdout="", stderr="", dry_run=True)
        tool = Path(argv[0]).name

        if tool == "prokka":
            outdir = Path(argv[argv.index("--outdir") + 1])
            prefix = argv[argv.index("--prefix") + 1]
            if prefix in self.failing_samples:
                return self._result(argv, 2, f"[fake prokka] ERROR: could not annotate {prefix}\n")
            outdir.mkdir(parents=True, exist_ok=True)
            (outdir / f"{prefix}.gff").write_text("##gff-version 3\n", encoding="utf-8")
            (outdir / f"{prefix}.gbk").write_text("LOCUS\n", encoding="utf-8")
            return self._result(argv, 0, f"[fake prokka] annotated {prefix}\n")

        if tool == "panaroo":
            if self.panaroo_returncode != 0:
                return self._result(argv, self.panaroo_returncode, "[fake panaroo] ERROR: clustering failed\n")
            outdir = Path(argv[argv.index("-o") + 1])
            (outdir / "gene_presence_absence.csv").write_text("Gene\n", encoding="utf-8")
            return self._result(argv, 0, "[fake panaroo] done\n")

        return self._result(argv, 0, "")

    @staticmethod
    def _result(argv: list[str], returncode: int, output: str) -> CommandResult:
        return CommandResult(command=argv, returncode=returncode, stdout=output, stderr="", dry_run=False)

    def calls_for(self, tool: str) -> list[list[str]]:
        return [call for call in self.calls if Path(call[0]).name == tool]


@pytest.fixture
def fake_tool() -> FakeTool:
    return FakeTool()


@pytest.fixture(autouse=True)
def _release_log_files():
    yield
    shutdown_logging()


def _write_assembly(base_dir: Path, sample_id: str, contigs: Sequence[tuple[str, str]]) -> Path:
    sample_dir = base_dir / "assembly" / sample_id
    sample_dir.mkdir(parents=True, exist_ok=True)
    assembly = sample_dir / f"{sample_id}_contigs.fasta"
    assembly.write_text(
        "".join(f">{header}\n{sequence}\n" for header, sequence in contigs),
        encoding="utf-8",
    )
    return assembly


@pytest.fixture
def write_assembly():
    return _write_assembly
