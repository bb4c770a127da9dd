# SPDX-License-Identifier: MIT
"""
ispcbuild: compile ispc sources into a static library at build time.

ispcbuild translates a build configuration into an ispc command line,
runs ispc over each source file, collects the per-ISA objects it wrote,
and bundles them into one lib<name>.a for linking into a host program.
Ambient settings (target triple, profile, optimization level, output
directory) are read from the environment set up by the surrounding
build.
"""

from __future__ import annotations

__version__ = "0.1.0"

from ispcbuild.build import compile_config, compile_library  # noqa: E402
from ispcbuild.core.config import Config  # noqa: E402
from ispcbuild.core.environment import BuildEnv  # noqa: E402
from ispcbuild.core.errors import (  # noqa: E402
    BuildEnvironmentError,
    ConfigurationError,
    IspcBuildError,
    ToolExecutionError,
    ToolNotFoundError,
)
from ispcbuild.core.options import Addr, Arch, Cpu, Math, Target  # noqa: E402

# Public API exports
__all__ = [
    # Version
    "__version__",
    # Entry points
    "Config",
    "compile_config",
    "compile_library",
    "BuildEnv",
    # Options
    "Addr",
    "Arch",
    "Cpu",
    "Math",
    "Target",
    # Errors
    "IspcBuildError",
    "ConfigurationError",
    "BuildEnvironmentError",
    "ToolNotFoundError",
    "ToolExecutionError",
]
