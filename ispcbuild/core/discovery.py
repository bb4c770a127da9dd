# SPDX-License-Identifier: MIT
"""Discovery of the object files ispc actually produced.

When compiling for several targets, ispc decides per module which ISA
specializations it needs and writes one object per specialization next
to the requested output, with the ISA name inserted before the
extension (foo.o -> foo_sse4.o, foo_avx2.o, ...). It reports nothing
about which ones it wrote, so the set is found by probing the
filesystem after the compiler has exited.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

# Suffixes ispc appends to per-ISA objects, in probe order
ISA_SUFFIXES: tuple[str, ...] = ("_sse2", "_sse4", "_avx", "_avx11", "_avx2")


@dataclass(frozen=True)
class ProducedObjectSet:
    """Objects found on disk for one compiled source file.

    Attributes:
        source: The source file that was compiled.
        expected: The object path ispc was asked to write.
        objects: The paths that actually exist, in probe order.
    """

    source: Path
    expected: Path
    objects: tuple[Path, ...]


def object_path(out_dir: Path, source: Path, suffix: str = ".o") -> Path:
    """Where the object for ``source`` is written inside ``out_dir``.

    Relative sources keep their directory structure. Absolute sources
    keep their whole path minus the anchor, so /x/a/k.ispc and
    /x/b/k.ispc get distinct objects and neither lands beside its source.
    """
    relative = source.relative_to(source.anchor) if source.is_absolute() else source
    return (out_dir / relative).with_suffix(suffix)


def candidate_objects(expected: Path) -> list[Path]:
    """All paths ispc may have written for ``expected``, base path first."""
    candidates = [expected]
    for isa_suffix in ISA_SUFFIXES:
        candidates.append(
            expected.with_name(f"{expected.stem}{isa_suffix}{expected.suffix}")
        )
    return candidates


def discover_objects(source: Path, expected: Path) -> ProducedObjectSet:
    """Probe the filesystem for the objects produced for ``source``.

    Missing candidates are skipped silently.
    """
    found: list[Path] = []
    for candidate in candidate_objects(expected):
        exists = candidate.exists()
        logger.debug("candidate %s exists=%s", candidate, exists)
        if exists:
            found.append(candidate)
    return ProducedObjectSet(source=source, expected=expected, objects=tuple(found))
