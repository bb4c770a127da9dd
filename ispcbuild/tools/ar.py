# SPDX-License-Identifier: MIT
"""Static archive creation with the native archiver.

Variables:
    AR: Archiver command (default: 'ar')
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from ispcbuild.core.buildlog import BuildLog
from ispcbuild.core.errors import ConfigurationError
from ispcbuild.tools.tool import Runner, run_tool

logger = logging.getLogger(__name__)

DEFAULT_AR = "ar"
AR_FLAGS = "crs"

_ARCHIVE_NAME = re.compile(r"lib(?P<name>[^/\\]+)\.a")


def validate_archive_name(output: str) -> str:
    """Check that ``output`` looks like lib<name>.a.

    Returns:
        The library name, e.g. 'mandelbrot' for 'libmandelbrot.a'.

    Raises:
        ConfigurationError: If the name does not match.
    """
    match = _ARCHIVE_NAME.fullmatch(output)
    if match is None:
        raise ConfigurationError(
            f"archive name must begin with `lib` and end with `.a`, got {output!r}"
        )
    return match.group("name")


class StaticArchiver:
    """Builds one static archive from object files.

    Members are added with add_object() and the archive is written by
    finish(). An existing archive at the output path is replaced, so
    the archive holds exactly the added members.

    Attributes:
        output: Path of the archive to create.
        ar: Archiver binary.
        objects: Members added so far, in order.
    """

    def __init__(
        self,
        output: Path,
        *,
        ar: str = DEFAULT_AR,
        log: BuildLog | None = None,
        runner: Runner | None = None,
    ) -> None:
        self.output = Path(output)
        self.ar = ar
        self.objects: list[Path] = []
        self.log = log or BuildLog()
        self._runner = runner

    @property
    def lib_name(self) -> str:
        return validate_archive_name(self.output.name)

    def add_object(self, path: Path) -> StaticArchiver:
        self.objects.append(Path(path))
        return self

    def command(self) -> list[str]:
        return [self.ar, AR_FLAGS, str(self.output), *(str(o) for o in self.objects)]

    def finish(self) -> Path:
        """Write the archive and announce it on the build log.

        Raises:
            ConfigurationError: If there are no members or a bad name.
            ToolNotFoundError: If the archiver could not be started.
            ToolExecutionError: If the archiver reported failure.
        """
        name = self.lib_name
        if not self.objects:
            raise ConfigurationError(f"no object files to archive into {self.output}")

        self.output.parent.mkdir(parents=True, exist_ok=True)
        if self.output.exists():
            logger.debug("Removing stale archive %s", self.output)
            self.output.unlink()

        logger.info("Archiving %d objects into %s", len(self.objects), self.output)
        run_tool(self.command(), log=self.log, runner=self._runner)

        self.log.link_static(name, self.output.parent)
        return self.output

    def __repr__(self) -> str:
        return f"StaticArchiver({str(self.output)!r}, objects={len(self.objects)})"
