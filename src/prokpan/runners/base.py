from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Sequence

from prokpan.exceptions import ToolExecutionError
from prokpan.logging import get_tool_output_logger
from prokpan.utils.subprocess import CommandExecutor, CommandResult, run_command, shell_join


class ToolRunner:
    """Base abstraction for external tools with dry-run aware execution.

    The command executor is injectable so tests can swap in a fake tool that
    records its arguments and returns a scripted exit code.
    """

    tool_name = "tool"

    def __init__(
        self,
        executable: str,
        *,
        executor: CommandExecutor | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.executable = executable
        self.executor = executor if executor is not None else run_command
        self.logger = logger

    def command(self, args: Sequence[str | Path]) -> list[str]:
        return [self.executable, *[str(arg) for arg in args]]

    def is_available(self) -> bool:
        return shutil.which(self.executable) is not None

    def version(self) -> str:
        result = self.run(["--version"], check=False, record_output=False)
        return result.output.strip().splitlines()[0] if result.output.strip() else "unknown"

    def run(
        self,
        args: Sequence[str | Path],
        *,
        dry_run: bool = False,
        check: bool = True,
        record_output: bool = True,
    ) -> CommandResult:
        """Run the tool with stdout and stderr merged.

        The combined output is appended verbatim to the run log before the exit
        status is checked, so a failing tool still leaves its messages behind.
        """

        command = self.command(args)
        try:
            result = self.executor(
                command,
                dry_run=dry_run,
                merge_stderr=True,
                logger=self.logger,
            )
        except OSError as exc:
            raise ToolExecutionError(self.tool_name, shell_join(command), 127, str(exc)) from exc

        output = result.output.rstrip("\n")
        if record_output and output:
            get_tool_output_logger().info(output)

        if check and result.returncode != 0:
            raise ToolExecutionError(self.tool_name, shell_join(command), result.returncode)

        return result
