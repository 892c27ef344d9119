from __future__ import annotations

import logging
from pathlib import Path

from rich.logging import RichHandler

TOOL_OUTPUT_LOGGER = "prokpan.tool_output"
RUN_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
RUN_LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(verbose: bool, quiet: bool) -> int:
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    return logging.INFO


def _close_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
) -> None:
    """Configure console logging plus the optional plain-text run log.

    External tool output goes through the ``prokpan.tool_output`` logger, which
    only writes to the run log and copies each message verbatim.
    """

    root = logging.getLogger()
    _close_handlers(root)
    root.setLevel(_resolve_level(verbose, quiet))

    rich_handler = RichHandler(rich_tracebacks=True, show_path=False, markup=False)
    rich_handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(rich_handler)

    tool_logger = logging.getLogger(TOOL_OUTPUT_LOGGER)
    _close_handlers(tool_logger)
    tool_logger.propagate = False
    tool_logger.setLevel(logging.INFO)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(RUN_LOG_FORMAT, datefmt=RUN_LOG_DATEFMT))
        # Keep the file at INFO even when the console is quieted.
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        root.addHandler(file_handler)
        if quiet:
            root.setLevel(logging.INFO)
            rich_handler.setLevel(logging.ERROR)

        raw_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        raw_handler.setFormatter(logging.Formatter("%(message)s"))
        tool_logger.addHandler(raw_handler)
    else:
        tool_logger.addHandler(logging.NullHandler())


def shutdown_logging() -> None:
    """Flush and detach every file handler opened by ``configure_logging``."""

    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    _close_handlers(logging.getLogger(TOOL_OUTPUT_LOGGER))


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def get_tool_output_logger() -> logging.Logger:
    return logging.getLogger(TOOL_OUTPUT_LOGGER)
