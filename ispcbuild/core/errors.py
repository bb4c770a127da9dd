# SPDX-License-Identifier: MIT
"""Custom exceptions for ispcbuild.

All ispcbuild exceptions inherit from IspcBuildError. Every error is
fatal for the build: library code raises, and only the command-line
entry point catches and reports.
"""

from __future__ import annotations

from collections.abc import Sequence


class IspcBuildError(Exception):
    """Base class for all ispcbuild exceptions.

    Attributes:
        message: The error message.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigurationError(IspcBuildError):
    """The build configuration is invalid.

    Raised before any process is spawned, e.g. for a malformed archive
    name or two targets naming the same ISA family.
    """


class BuildEnvironmentError(IspcBuildError):
    """A required environment variable is missing or unusable.

    Attributes:
        variable: The name of the offending variable.
    """

    def __init__(self, variable: str, message: str) -> None:
        self.variable = variable
        super().__init__(message)


class ToolNotFoundError(IspcBuildError):
    """An external tool could not be located or executed.

    Attributes:
        tool: The tool binary that failed to start.
    """

    def __init__(self, tool: str, reason: str | None = None) -> None:
        self.tool = tool
        message = f"failed to execute command: {tool}"
        if reason:
            message += f": {reason}"
        message += f"\nIs `{tool}` not installed?"
        super().__init__(message)


class ToolExecutionError(IspcBuildError):
    """An external tool ran but exited with a non-zero status.

    Attributes:
        command: The full command line that was run.
        returncode: The exit status of the process.
        stdout: Captured standard output, verbatim.
        stderr: Captured standard error, verbatim.
    """

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        self.command = list(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        lines = [
            f"command did not execute successfully, got exit status {self.returncode}",
            f"command: {' '.join(self.command)}",
        ]
        if self.stdout:
            lines += ["--- stdout ---", self.stdout, "--- end stdout ---"]
        if self.stderr:
            lines += ["--- stderr ---", self.stderr, "--- end stderr ---"]
        return "\n".join(lines)
