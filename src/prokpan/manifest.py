from __future__ import annotations

import json
import sys
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Mapping, Sequence

from prokpan import __version__


@dataclass(slots=True)
class RunManifest:
    command: str
    argv: list[str]
    started_at: str
    ended_at: str | None
    status: str
    base_dir: str
    organism: str
    dry_run: bool
    threads: int
    config_path: str | None
    log_file: str
    versions: dict[str, str]
    samples: list[str] = field(default_factory=list)
    output_paths: list[str] = field(default_factory=list)
    planned_steps: list[str] = field(default_factory=list)
    failed_stage: str | None = None


def _utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _package_version(package_name: str) -> str:
    try:
        return version(package_name)
    except PackageNotFoundError:
        return "unknown"


def create_run_manifest(
    *,
    command: str,
    argv: Sequence[str],
    base_dir: Path,
    organism: str,
    dry_run: bool,
    threads: int,
    config_path: Path | None,
    log_file: Path,
    planned_steps: Sequence[str],
    tool_versions: Mapping[str, str] | None = None,
) -> RunManifest:
    versions = {
        "prokpan": __version__,
        "python": sys.version.split()[0],
        "typer": _package_version("typer"),
        "pydantic": _package_version("pydantic"),
        "rich": _package_version("rich"),
    }
    if tool_versions:
        versions.update(tool_versions)

    return RunManifest(
        command=command,
        argv=list(argv),
        started_at=_utcnow_iso(),
        ended_at=None,
        status="running",
        base_dir=str(base_dir),
        organism=organism,
        dry_run=dry_run,
        threads=threads,
        config_path=str(config_path) if config_path is not None else None,
        log_file=str(log_file),
        versions=versions,
        planned_steps=list(planned_steps),
    )


def finalize_manifest(
    manifest: RunManifest,
    *,
    status: str,
    samples: Sequence[str] = (),
    output_paths: Sequence[Path | str] = (),
    failed_stage: str | None = None,
) -> RunManifest:
    manifest.status = status
    manifest.ended_at = _utcnow_iso()
    manifest.samples = list(samples)
    manifest.output_paths = [str(path) for path in output_paths]
    manifest.failed_stage = failed_stage
    return manifest


def write_manifest(path: Path, manifest: RunManifest) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(manifest), indent=2, ensure_ascii=True), encoding="utf-8")
    return path
