# SPDX-License-Identifier: MIT
"""Access to the ambient build environment.

The surrounding build orchestrator describes the build through
environment variables. All reads go through BuildEnv so that resolution
code never touches os.environ directly and tests can supply synthetic
values without mutating process state.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from typing import TYPE_CHECKING

from ispcbuild.core.errors import BuildEnvironmentError

if TYPE_CHECKING:
    from ispcbuild.core.buildlog import BuildLog

logger = logging.getLogger(__name__)

# Variables consumed from the environment
ISPC_VAR = "ISPC"
AR_VAR = "AR"
OUT_DIR_VAR = "OUT_DIR"
TARGET_VAR = "TARGET"
PROFILE_VAR = "PROFILE"
OPT_LEVEL_VAR = "OPT_LEVEL"


class BuildEnv:
    """Read-one-variable interface over the build environment.

    Variables can be overlaid on top of the process environment:
        env = BuildEnv(overrides={"PROFILE": "debug"})

    Precedence (highest to lowest):
        1. overrides (e.g. KEY=value on the command line)
        2. the base mapping (os.environ unless given)

    Every read is logged, and echoed on the build log when one is
    attached, so a failed build shows what it saw.
    """

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        *,
        overrides: Mapping[str, str] | None = None,
        log: BuildLog | None = None,
    ) -> None:
        self._environ = os.environ if environ is None else environ
        self._overrides = dict(overrides or {})
        self.log = log

    def get(self, name: str) -> str | None:
        """Return the value of a variable, or None if it is not set."""
        if name in self._overrides:
            value: str | None = self._overrides[name]
        else:
            value = self._environ.get(name)
        logger.debug("%s = %r", name, value)
        if self.log is not None:
            self.log.env_read(name, value)
        return value

    def require(self, name: str) -> str:
        """Return the value of a variable that must be set.

        Raises:
            BuildEnvironmentError: If the variable is not defined.
        """
        value = self.get(name)
        if value is None:
            raise BuildEnvironmentError(
                name, f"environment variable `{name}` not defined"
            )
        return value

    def __repr__(self) -> str:
        return f"BuildEnv(overrides={sorted(self._overrides)})"
