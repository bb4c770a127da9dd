# SPDX-License-Identifier: MIT
"""Shared fixtures for ispcbuild tests."""

from __future__ import annotations

import subprocess
from collections.abc import Callable
from pathlib import Path

import pytest


class FakeRunner:
    """Stands in for subprocess.run and records every command.

    Attributes:
        calls: Command lines received, in order.
        kwargs: Keyword arguments received, in order.
    """

    def __init__(
        self,
        returncode: int = 0,
        stdout: bytes = b"",
        stderr: bytes = b"",
        side_effect: Callable[[list[str]], None] | None = None,
        raises: OSError | None = None,
    ) -> None:
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.side_effect = side_effect
        self.raises = raises
        self.calls: list[list[str]] = []
        self.kwargs: list[dict[str, object]] = []

    def __call__(self, cmd: list[str], **kwargs: object):
        self.calls.append(list(cmd))
        self.kwargs.append(kwargs)
        if self.raises is not None:
            raise self.raises
        if self.side_effect is not None:
            self.side_effect(list(cmd))
        return subprocess.CompletedProcess(
            cmd, self.returncode, stdout=self.stdout, stderr=self.stderr
        )


def write_outputs(*suffixes: str) -> Callable[[list[str]], None]:
    """Side effect for ispc: write the object at -o plus ISA variants."""

    def effect(cmd: list[str]) -> None:
        if "-o" not in cmd:
            return
        dest = Path(cmd[cmd.index("-o") + 1])
        for suffix in suffixes:
            dest.with_name(f"{dest.stem}{suffix}{dest.suffix}").write_bytes(b"obj")

    return effect


@pytest.fixture
def make_runner() -> type[FakeRunner]:
    """The FakeRunner class, for tests needing a custom runner."""
    return FakeRunner


@pytest.fixture
def ispc_writes() -> Callable[..., Callable[[list[str]], None]]:
    """Factory for ispc side effects writing the given object variants."""
    return write_outputs
