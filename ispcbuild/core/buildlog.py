# SPDX-License-Identifier: MIT
"""Build-log side channel.

The surrounding build orchestrator reads this process's standard output.
Lines carrying the metadata prefix are instructions to it (rebuild when
a source changes, link this archive); everything else is plain text kept
for people reading a failed build.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from pathlib import Path
from typing import TextIO


class BuildLog:
    """Writer for the build-log stream.

    Attributes:
        prefix: Prefix marking a line as orchestrator metadata.
    """

    def __init__(self, stream: TextIO | None = None, prefix: str = "cargo:") -> None:
        self._stream = stream
        self.prefix = prefix

    @property
    def stream(self) -> TextIO:
        # Looked up late so pytest's capsys sees the output
        return self._stream if self._stream is not None else sys.stdout

    def write(self, text: str = "") -> None:
        print(text, file=self.stream)

    def metadata(self, key: str, value: str) -> None:
        self.write(f"{self.prefix}{key}={value}")

    def rerun_if_changed(self, path: Path | str) -> None:
        """Declare that the build output depends on ``path``."""
        self.metadata("rerun-if-changed", str(path))

    def link_static(self, name: str, search_dir: Path | str) -> None:
        """Tell the consumer to link lib<name>.a found in ``search_dir``."""
        self.metadata("rustc-link-lib", f"static={name}")
        self.metadata("rustc-link-search", f"native={search_dir}")

    def env_read(self, name: str, value: str | None) -> None:
        self.write(f"{name} = {value!r}")

    def command(self, cmd: Sequence[str]) -> None:
        self.write("running: " + " ".join(cmd))

    def captured(self, label: str, text: str) -> None:
        """Echo a captured output stream, if it has any content."""
        if not text:
            return
        self.write()
        self.write(f"--- {label} ---")
        self.write(text)
        self.write(f"--- end {label} ---")
        self.write()
