# SPDX-License-Identifier: MIT
"""The ispc compiler tool.

Provides:
- ResolvedInvocation: binary, arguments and environment for ispc
- IspcCompiler: compiles one source file to one object path
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from ispcbuild.core.arguments import build_arguments
from ispcbuild.core.buildlog import BuildLog
from ispcbuild.core.environment import ISPC_VAR, BuildEnv
from ispcbuild.core.resolver import ResolvedConfig
from ispcbuild.tools.tool import Runner, probe_version, run_tool

logger = logging.getLogger(__name__)

DEFAULT_ISPC = "ispc"


@dataclass(frozen=True)
class ResolvedInvocation:
    """Everything needed to run ispc, minus the per-file paths.

    Attributes:
        binary: ispc binary, a path or a name looked up on PATH.
        arguments: Ordered ispc arguments.
        env: Variables overridden in the inherited environment.
    """

    binary: str
    arguments: tuple[str, ...]
    env: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        config: ResolvedConfig,
        env: BuildEnv,
        overrides: Mapping[str, str] | None = None,
    ) -> ResolvedInvocation:
        """Resolve the binary from $ISPC and translate ``config``."""
        binary = env.get(ISPC_VAR) or DEFAULT_ISPC
        return cls(binary, tuple(build_arguments(config)), dict(overrides or {}))

    def command_for(self, source: Path, dest: Path) -> list[str]:
        """Full command line compiling ``source`` to ``dest``."""
        return [self.binary, *self.arguments, str(source), "-o", str(dest)]


class IspcCompiler:
    """Runs ispc for single source files.

    Example:
        compiler = IspcCompiler(invocation)
        compiler.compile(Path("src/mandel.ispc"), out_dir / "src/mandel.o")
    """

    def __init__(
        self,
        invocation: ResolvedInvocation,
        *,
        log: BuildLog | None = None,
        runner: Runner | None = None,
    ) -> None:
        self.invocation = invocation
        self.log = log or BuildLog()
        self._runner = runner

    def compile(self, source: Path, dest: Path) -> None:
        """Compile ``source`` to ``dest``, creating dest's directory.

        Raises:
            ToolNotFoundError: If ispc could not be started.
            ToolExecutionError: If ispc reported failure.
        """
        dest.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Compiling %s", source)
        run_tool(
            self.invocation.command_for(source, dest),
            env=self.invocation.env,
            log=self.log,
            runner=self._runner,
        )

    def version(self) -> str | None:
        """Version line reported by the ispc binary, if it runs."""
        return probe_version(self.invocation.binary)

    def __repr__(self) -> str:
        return f"IspcCompiler({self.invocation.binary!r})"
