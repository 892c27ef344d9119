from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from typing import Protocol, Sequence


@dataclass(frozen=True, slots=True)
class CommandResult:
    command: list[str]
    returncode: int
    stdout: str
    stderr: str
    dry_run: bool

    @property
    def output(self) -> str:
        """Everything the command printed; stderr is empty when streams were merged."""
        return self.stdout + self.stderr


class CommandExecutor(Protocol):
    def __call__(
        self,
        command: Sequence[str],
        *,
        dry_run: bool = False,
        merge_stderr: bool = False,
        logger: logging.Logger | None = None,
    ) -> CommandResult: ...


def shell_join(command: Sequence[str]) -> str:
    return shlex.join(list(command))


def run_command(
    command: Sequence[str],
    *,
    dry_run: bool = False,
    merge_stderr: bool = False,
    logger: logging.Logger | None = None,
) -> CommandResult:
    """Run ``command`` to completion and capture its output.

    Bytes that are not valid UTF-8 are kept as backslash escapes instead of
    failing the decode. The exit status is returned, never raised.
    """

    command_list = list(command)

    if logger is not None:
        logger.debug("Executing command: %s", shell_join(command_list))

    if dry_run:
        return CommandResult(command=command_list, returncode=0, stdout="", stderr="", dry_run=True)

    completed = subprocess.run(
        command_list,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT if merge_stderr else subprocess.PIPE,
        encoding="utf-8",
        errors="backslashreplace",
        check=False,
    )

    return CommandResult(
        command=command_list,
        returncode=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
        dry_run=False,
    )
