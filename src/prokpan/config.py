from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Mapping, TypeVar

import yaml
from pydantic import BaseModel, ConfigDict, Field, PositiveInt, ValidationError, model_validator

from prokpan.exceptions import PipelineUsageError


class CommonConfig(BaseModel):
    """Options shared by every prokpan subcommand."""

    model_config = ConfigDict(extra="forbid")

    base_dir: Path = Field(default_factory=Path.cwd)
    threads: PositiveInt = 4
    reference_gff: Path | None = None
    prokka_executable: str = "prokka"
    panaroo_executable: str = "panaroo"
    verbose: bool = False
    quiet: bool = False

    @model_validator(mode="after")
    def _validate_verbosity(self) -> "CommonConfig":
        if self.verbose and self.quiet:
            raise ValueError("`verbose` and `quiet` cannot both be true.")
        return self


class CheckConfig(CommonConfig):
    pass


class RunConfig(CommonConfig):
    genus: str = Field(min_length=1)
    species: str = Field(min_length=1)
    kingdom: str = "Bacteria"

    assembly_suffix: str = Field(default="contigs.fasta", min_length=1)
    annotation_extension: str = Field(default=".gff", min_length=1)

    clean_mode: Literal["strict", "moderate", "sensitive"] = "strict"
    alignment: Literal["core", "pan"] = "core"
    aligner: Literal["mafft", "prank", "clustal"] = "mafft"
    core_threshold: float = Field(default=0.95, ge=0.0, le=1.0)

    dry_run: bool = False

    @property
    def organism(self) -> str:
        return f"{self.genus} {self.species}"


class ProkPanConfig(BaseModel):
    """Top-level YAML config model.

    Sections stay unvalidated here and are checked once CLI overrides are merged
    in, so a YAML file may leave out required values given on the command line.
    """

    model_config = ConfigDict(extra="forbid")

    run: dict[str, Any] | None = None
    check: dict[str, Any] | None = None


def load_config_sections(config_path: Path | None) -> dict[str, dict[str, Any]]:
    """Load a YAML config file into unvalidated per-command sections."""

    if config_path is None:
        return {}

    if not config_path.exists():
        raise PipelineUsageError(f"Config file does not exist: {config_path}")

    if not config_path.is_file():
        raise PipelineUsageError(f"Config path is not a file: {config_path}")

    payload_raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if payload_raw is None:
        payload_raw = {}

    if not isinstance(payload_raw, dict):
        raise PipelineUsageError("Config YAML must be a key/value mapping at the top level.")

    try:
        sections = ProkPanConfig.model_validate(payload_raw)
    except ValidationError as exc:
        raise PipelineUsageError(f"Invalid config file: {config_path}\n{exc}") from exc

    return {name: value for name, value in sections.model_dump().items() if value is not None}


T = TypeVar("T", bound=CommonConfig)


def merge_command_config(
    *,
    config_path: Path | None,
    section: str,
    model_cls: type[T],
    cli_overrides: Mapping[str, Any],
) -> T:
    """Merge YAML config values with explicit CLI overrides and validate."""

    merged: dict[str, Any] = dict(load_config_sections(config_path).get(section, {}))

    for key, value in cli_overrides.items():
        if value is not None:
            merged[key] = value

    try:
        return model_cls.model_validate(merged)
    except ValidationError as exc:
        raise PipelineUsageError(f"Invalid merged config for `{section}`:\n{exc}") from exc
