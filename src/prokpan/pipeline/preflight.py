from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from prokpan.runners.base import ToolRunner


@dataclass(frozen=True, slots=True)
class ToolStatus:
    name: str
    executable: str
    available: bool
    version: str | None


def check_reference_annotation(path: Path, logger: logging.Logger) -> bool:
    """Report whether the optional reference annotation exists. Never fatal."""

    if path.is_file():
        logger.info("Reference annotation found: %s", path)
        return True

    logger.warning(
        "Reference annotation file not found at %s. Consider adding one matching your pathogen.",
        path,
    )
    return False


def tool_report(runners: Iterable[ToolRunner]) -> list[ToolStatus]:
    statuses: list[ToolStatus] = []
    for runner in runners:
        available = runner.is_available()
        statuses.append(
            ToolStatus(
                name=runner.tool_name,
                executable=runner.executable,
                available=available,
                version=runner.version() if available else None,
            )
        )
    return statuses
