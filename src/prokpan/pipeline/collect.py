from __future__ import annotations

import logging
from pathlib import Path

from prokpan.exceptions import MissingAnnotationsError


def collect_annotations(
    annotation_dir: Path,
    *,
    extension: str = ".gff",
    logger: logging.Logger | None = None,
) -> list[Path]:
    """Recursively gather annotation files; an empty result is fatal."""

    found: list[Path] = []
    if annotation_dir.is_dir():
        found = sorted(path for path in annotation_dir.rglob(f"*{extension}") if path.is_file())

    if not found:
        raise MissingAnnotationsError(f"No {extension} files found in {annotation_dir}!")

    if logger is not None:
        logger.info("Found %d %s files for Panaroo.", len(found), extension.upper().lstrip("."))
    return found
