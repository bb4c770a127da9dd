# SPDX-License-Identifier: MIT
"""Running external tools.

Both ispc and the archiver are run the same way: spawn, wait, capture
both output streams, echo everything to the build log, and turn every
failure into an ispcbuild error. There are no retries and no timeouts.
"""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from ispcbuild.core.buildlog import BuildLog
from ispcbuild.core.errors import ToolExecutionError, ToolNotFoundError

logger = logging.getLogger(__name__)

# Signature of subprocess.run, replaceable in tests
Runner = Callable[..., "subprocess.CompletedProcess[bytes]"]


def _decode(data: bytes | str | None) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


def run_tool(
    cmd: Sequence[str],
    *,
    env: Mapping[str, str] | None = None,
    log: BuildLog | None = None,
    runner: Runner | None = None,
) -> subprocess.CompletedProcess[bytes]:
    """Run a tool to completion.

    Args:
        cmd: Command line, binary first.
        env: Variables to override in the inherited environment.
        log: Build log receiving the command and its output.
        runner: Replacement for subprocess.run.

    Returns:
        The completed process (exit status 0).

    Raises:
        ToolNotFoundError: If the binary could not be started.
        ToolExecutionError: If it exited with a non-zero status.
    """
    log = log or BuildLog()
    runner = runner or subprocess.run
    cmd = [str(part) for part in cmd]

    kwargs: dict[str, Any] = {"capture_output": True}
    if env:
        full_env = os.environ.copy()
        full_env.update(env)
        kwargs["env"] = full_env

    log.command(cmd)
    logger.info("Running: %s", " ".join(cmd))

    try:
        result = runner(cmd, **kwargs)
    except OSError as e:
        logger.error("Failed to run %s: %s", cmd[0], e)
        raise ToolNotFoundError(cmd[0], str(e)) from e

    stdout = _decode(result.stdout)
    stderr = _decode(result.stderr)
    log.write(f"exit status: {result.returncode}")
    log.captured("stdout", stdout)
    log.captured("stderr", stderr)

    if result.returncode != 0:
        raise ToolExecutionError(cmd, result.returncode, stdout, stderr)
    return result


def probe_version(binary: str, version_flag: str = "--version") -> str | None:
    """Return the first non-empty line of ``binary --version``, or None."""
    try:
        result = subprocess.run(
            [binary, version_flag],
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (subprocess.TimeoutExpired, OSError):
        return None
    if result.returncode != 0:
        return None
    for line in result.stdout.split("\n"):
        line = line.strip()
        if line:
            return line
    return None
