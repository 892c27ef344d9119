from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from prokpan.exceptions import PipelineUsageError
from prokpan.paths import PipelineLayout, normalized_assembly_path, sample_annotation_dir


@dataclass(frozen=True, slots=True)
class Sample:
    """One assembly and the paths derived from its sample ID."""

    sample_id: str
    assembly_path: Path
    normalized_path: Path
    annotation_dir: Path
    annotated: bool = False


def discover_samples(layout: PipelineLayout, suffix: str = "contigs.fasta") -> Iterator[Sample]:
    """Yield one sample per ``assembly/<sample_id>/*<suffix>`` file, in sorted order.

    The sample ID is the name of the directory holding the assembly, not the
    file name. Files directly under ``assembly/`` are ignored.
    """

    if not layout.input_dir.is_dir():
        return

    seen: dict[str, Path] = {}
    for assembly in sorted(layout.input_dir.glob(f"*/*{suffix}")):
        if not assembly.is_file():
            continue

        sample_id = assembly.parent.name
        if sample_id in seen:
            raise PipelineUsageError(
                f"Sample `{sample_id}` has more than one assembly: {seen[sample_id]} and {assembly}"
            )
        seen[sample_id] = assembly

        yield Sample(
            sample_id=sample_id,
            assembly_path=assembly,
            normalized_path=normalized_assembly_path(layout, sample_id),
            annotation_dir=sample_annotation_dir(layout, sample_id),
        )
