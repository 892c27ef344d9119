from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from prokpan.exceptions import LayoutError

ASSEMBLY_DIRNAME = "assembly"
ANNOTATION_DIRNAME = "annotations"
PANGENOME_DIRNAME = "panaroo_output"
LOG_DIRNAME = "logs"
MANIFEST_FILENAME = "prokpan_manifest.json"


@dataclass(frozen=True, slots=True)
class PipelineLayout:
    root: Path
    input_dir: Path
    annotation_dir: Path
    pangenome_dir: Path
    log_dir: Path


def pipeline_layout(base_dir: Path) -> PipelineLayout:
    """Derive the working directories for ``base_dir`` without touching disk."""

    root = base_dir
    return PipelineLayout(
        root=root,
        input_dir=root / ASSEMBLY_DIRNAME,
        annotation_dir=root / ANNOTATION_DIRNAME,
        pangenome_dir=root / PANGENOME_DIRNAME,
        log_dir=root / LOG_DIRNAME,
    )


def create_pipeline_layout(base_dir: Path) -> PipelineLayout:
    layout = pipeline_layout(base_dir)

    for path in (layout.root, layout.input_dir, layout.annotation_dir, layout.pangenome_dir, layout.log_dir):
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise LayoutError(f"Cannot create directory {path}: {exc}") from exc

    return layout


def sample_annotation_dir(layout: PipelineLayout, sample_id: str) -> Path:
    return layout.annotation_dir / sample_id


def normalized_assembly_path(layout: PipelineLayout, sample_id: str) -> Path:
    return layout.input_dir / f"{sample_id}_clean.fasta"


def default_reference_gff(layout: PipelineLayout) -> Path:
    return layout.annotation_dir / "reference.gff3"


def run_log_path(layout: PipelineLayout, timestamp: str) -> Path:
    return layout.log_dir / f"pipeline_{timestamp}.log"


def manifest_path(layout: PipelineLayout) -> Path:
    return layout.root / MANIFEST_FILENAME
