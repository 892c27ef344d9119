from __future__ import annotations


class ProkPanError(Exception):
    """Base class for prokpan exceptions."""

    exit_code: int = 1


class PipelineUsageError(ProkPanError):
    """Raised when command arguments or inputs are invalid."""

    exit_code = 2


class LayoutError(ProkPanError):
    """Raised when the working directory layout cannot be created."""

    exit_code = 2


class MissingAnnotationsError(ProkPanError):
    """Raised when no annotation files are available for the pangenome step."""

    exit_code = 3


class ToolExecutionError(ProkPanError):
    """An external tool exited with a non-zero status."""

    exit_code = 4

    def __init__(self, tool: str, command: str, returncode: int, detail: str = "") -> None:
        self.tool = tool
        self.command = command
        self.returncode = returncode
        self.detail = detail
        message = f"{tool} failed with exit code {returncode}: {command}"
        if detail:
            message = f"{message}\n{detail}"
        super().__init__(message)


class NormalizationError(ProkPanError):
    """Raised when an assembly cannot be copied with renamed contigs."""
