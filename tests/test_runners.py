from __future__ import annotations

from pathlib import Path

import pytest

from prokpan.exceptions import ToolExecutionError
from prokpan.logging import configure_logging, shutdown_logging
from prokpan.runners.base import ToolRunner
from prokpan.runners.panaroo import PanarooRunner
from prokpan.runners.prokka import ProkkaRunner
from prokpan.utils.subprocess import CommandResult, run_command


def test_prokka_annotate_builds_expected_command(fake_tool) -> None:
    runner = ProkkaRunner(executor=fake_tool)

    runner.annotate(
        assembly=Path("assembly/SAMPLE1_clean.fasta"),
        output_dir=Path("annotations/SAMPLE1"),
        prefix="SAMPLE1",
        genus="Pseudomonas",
        species="aeruginosa",
        threads=4,
    )

    assert fake_tool.calls == [
        [
            "prokka",
            "--outdir",
            "annotations/SAMPLE1",
            "--prefix",
            "SAMPLE1",
            "--kingdom",
            "Bacteria",
            "--genus",
            "Pseudomonas",
            "--species",
            "aeruginosa",
            "--usegenus",
            "--compliant",
            "--force",
            "--cpus",
            "4",
            "assembly/SAMPLE1_clean.fasta",
        ]
    ]


def test_panaroo_pangenome_passes_every_annotation(tmp_path: Path, fake_tool) -> None:
    runner = PanarooRunner(executor=fake_tool)
    gffs = [Path("annotations/A/A.gff"), Path("annotations/B/B.gff")]

    runner.pangenome(annotations=gffs, output_dir=tmp_path, threads=8)

    assert fake_tool.calls == [
        [
            "panaroo",
            "-i",
            "annotations/A/A.gff",
            "annotations/B/B.gff",
            "-o",
            str(tmp_path),
            "--clean-mode",
            "strict",
            "--remove-invalid-genes",
            "--merge_paralogs",
            "-a",
            "core",
            "--aligner",
            "mafft",
            "--core_threshold",
            "0.95",
            "-t",
            "8",
        ]
    ]


def test_panaroo_rejects_empty_annotation_set(tmp_path: Path, fake_tool) -> None:
    runner = PanarooRunner(executor=fake_tool)

    with pytest.raises(ValueError):
        runner.pangenome(annotations=[], output_dir=tmp_path, threads=1)
    assert fake_tool.calls == []


def test_tool_runner_raises_on_nonzero_exit() -> None:
    def _failing(command, **kwargs):  # type: ignore[no-untyped-def]
        return CommandResult(command=list(command), returncode=3, stdout="boom\n", stderr="", dry_run=False)

    runner = ProkkaRunner(executor=_failing)

    with pytest.raises(ToolExecutionError) as excinfo:
        runner.run(["--version"])

    assert excinfo.value.returncode == 3
    assert excinfo.value.tool == "prokka"
    assert excinfo.value.exit_code == 4


def test_tool_runner_wraps_missing_executable() -> None:
    def _missing(command, **kwargs):  # type: ignore[no-untyped-def]
        raise FileNotFoundError(2, "No such file or directory", command[0])

    runner = PanarooRunner("/nonexistent/panaroo", executor=_missing)

    with pytest.raises(ToolExecutionError) as excinfo:
        runner.run(["--help"])

    assert excinfo.value.returncode == 127


def test_tool_runner_merges_streams_and_appends_output_to_run_log(tmp_path: Path) -> None:
    seen: dict[str, object] = {}

    def _chatty(command, **kwargs):  # type: ignore[no-untyped-def]
        seen.update(kwargs)
        return CommandResult(
            command=list(command),
            returncode=1,
            stdout="[12:00:01] Loading\n[12:00:02] Error: bad contig\n",
            stderr="",
            dry_run=False,
        )

    log_file = tmp_path / "logs" / "pipeline.log"
    configure_logging(log_file=log_file)
    runner = ToolRunner("fake", executor=_chatty)

    with pytest.raises(ToolExecutionError):
        runner.run(["input.fasta"])
    shutdown_logging()

    assert seen["merge_stderr"] is True
    assert log_file.read_text(encoding="utf-8") == "[12:00:01] Loading\n[12:00:02] Error: bad contig\n"


def test_tool_runner_version_uses_first_output_line() -> None:
    def _version(command, **kwargs):  # type: ignore[no-untyped-def]
        return CommandResult(command=list(command), returncode=0, stdout="", stderr="prokka 1.14.6\n", dry_run=False)

    assert ProkkaRunner(executor=_version).version() == "prokka 1.14.6"


def test_tool_runner_keeps_non_utf8_output_from_real_process(tmp_path: Path) -> None:
    script = tmp_path / "prokka"
    script.write_text("#!/bin/sh\nprintf 'ok \\377\\n'\nexit 0\n", encoding="utf-8")
    script.chmod(0o755)
    log_file = tmp_path / "logs" / "pipeline.log"
    configure_logging(log_file=log_file)

    result = ProkkaRunner(str(script)).run(["--version"])
    shutdown_logging()

    assert result.returncode == 0
    assert result.output == "ok \\xff\n"
    assert log_file.read_text(encoding="utf-8") == "ok \\xff\n"


def test_run_command_dry_run_does_not_execute() -> None:
    result = run_command(["/nonexistent/prokka", "--version"], dry_run=True)

    assert result.dry_run is True
    assert result.returncode == 0
    assert result.command == ["/nonexistent/prokka", "--version"]


def test_prokka_annotate_dry_run_plans_without_side_effects(tmp_path: Path, fake_tool) -> None:
    outdir = tmp_path / "annotations" / "S1"

    result = ProkkaRunner(executor=fake_tool).annotate(
        assembly=tmp_path / "S1_clean.fasta",
        output_dir=outdir,
        prefix="S1",
        genus="Pseudomonas",
        species="aeruginosa",
        threads=1,
        dry_run=True,
    )

    assert result.dry_run is True
    assert result.command[:3] == ["prokka", "--outdir", str(outdir)]
    assert not outdir.exists()
