# SPDX-License-Identifier: MIT
"""Option vocabularies understood by ispc.

Each enumeration carries the exact text ispc expects on its command
line as the member value, so translating an option is a lookup and a
new member cannot be added without its wire form.
"""

from __future__ import annotations

from enum import Enum


class Addr(Enum):
    """Addressing mode for compiled code.

    ispc addresses arrays with 32-bit offsets unless told otherwise;
    arrays with more than 2^31 elements need 64-bit addressing.
    """

    A32 = "32"
    A64 = "64"


class Arch(Enum):
    """Target architecture, normally inferred from the target triple."""

    X86 = "x86"
    X86_64 = "x86_64"

    @property
    def is_64bit(self) -> bool:
        return self is Arch.X86_64


class Cpu(Enum):
    """CPU families ispc can tune code for."""

    GENERIC = "generic"
    ATOM = "atom"
    CORE2 = "core2"
    PENRYN = "penryn"
    COREI7 = "corei7"
    COREI7_AVX = "corei7-avx"
    CORE_AVX_I = "core-avx-i"
    CORE_AVX2 = "core-avx2"
    BROADWELL = "broadwell"
    SLM = "slm"


class Math(Enum):
    """Which math library compiled code calls out to.

    SVML must be linked by the consumer; SYSTEM may be quite slow.
    """

    DEFAULT = "default"
    FAST = "fast"
    SVML = "svml"
    SYSTEM = "system"


class Isa(Enum):
    """Instruction set families ispc generates code for."""

    SSE2 = "sse2"
    SSE4 = "sse4"
    AVX1 = "avx1"
    AVX1_1 = "avx1.1"
    AVX2 = "avx2"


class Width(Enum):
    """Lane width: element type times elements per vector operation."""

    I32X4 = "i32x4"
    I32X8 = "i32x8"
    I32X16 = "i32x16"
    I16X8 = "i16x8"
    I8X16 = "i8x16"
    I64X4 = "i64x4"


class Target(Enum):
    """An ISA family paired with an optional explicit lane width.

    Without a width ispc picks the natural width for the family. Only
    one width per family may appear in a target list.
    """

    SSE2 = (Isa.SSE2, None)
    SSE2_I32X4 = (Isa.SSE2, Width.I32X4)
    SSE2_I32X8 = (Isa.SSE2, Width.I32X8)

    SSE4 = (Isa.SSE4, None)
    SSE4_I32X4 = (Isa.SSE4, Width.I32X4)
    SSE4_I32X8 = (Isa.SSE4, Width.I32X8)
    SSE4_I16X8 = (Isa.SSE4, Width.I16X8)
    SSE4_I8X16 = (Isa.SSE4, Width.I8X16)

    AVX1 = (Isa.AVX1, None)
    AVX1_I32X4 = (Isa.AVX1, Width.I32X4)
    AVX1_I32X8 = (Isa.AVX1, Width.I32X8)
    AVX1_I32X16 = (Isa.AVX1, Width.I32X16)
    AVX1_I64X4 = (Isa.AVX1, Width.I64X4)

    AVX1_1 = (Isa.AVX1_1, None)
    AVX1_1_I32X8 = (Isa.AVX1_1, Width.I32X8)
    AVX1_1_I32X16 = (Isa.AVX1_1, Width.I32X16)
    AVX1_1_I64X4 = (Isa.AVX1_1, Width.I64X4)

    AVX2 = (Isa.AVX2, None)
    AVX2_I32X8 = (Isa.AVX2, Width.I32X8)
    AVX2_I32X16 = (Isa.AVX2, Width.I32X16)
    AVX2_I64X4 = (Isa.AVX2, Width.I64X4)

    def __init__(self, isa: Isa, width: Width | None) -> None:
        self.isa = isa
        self.width = width

    @property
    def wire(self) -> str:
        """The target name as written on the ispc command line."""
        if self.width is None:
            return self.isa.value
        return f"{self.isa.value}-{self.width.value}"

    @classmethod
    def from_wire(cls, text: str) -> Target:
        """Look up a target by its command-line name (e.g. 'sse4-i32x8')."""
        for target in cls:
            if target.wire == text:
                return target
        known = ", ".join(t.wire for t in cls)
        raise ValueError(f"unknown ispc target {text!r} (known: {known})")


DEFAULT_TARGETS: tuple[Target, ...] = (
    Target.SSE2,
    Target.SSE4,
    Target.AVX1,
    Target.AVX1_1,
    Target.AVX2,
)
