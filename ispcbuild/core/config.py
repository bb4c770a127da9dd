# SPDX-License-Identifier: MIT
"""Build configuration for ispc compilation.

Options are recorded on a plain BuildOptions record through the fluent
Config builder. Nothing is validated and nothing is read from the
environment until the configuration is resolved at compile time.

Example:
    Config() \\
        .file("src/mandelbrot.ispc") \\
        .define("FOO", "bar") \\
        .math_lib(Math.FAST) \\
        .enable_fast_math(True) \\
        .addressing(Addr.A64) \\
        .compile("libmandelbrot.a")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, NamedTuple

from ispcbuild.core.options import Addr, Arch, Cpu, Math, Target

if TYPE_CHECKING:
    from ispcbuild.core.buildlog import BuildLog
    from ispcbuild.core.environment import BuildEnv


class Definition(NamedTuple):
    """A preprocessor definition, -DNAME or -DNAME=VALUE."""

    name: str
    value: str | None = None


@dataclass
class BuildOptions:
    """Caller intent for one ispc build.

    None means "not specified" and is filled in during resolution, from
    the environment where the option has an environmental default.
    """

    addressing: Addr | None = None
    architecture: Arch | None = None
    cpus: list[Cpu] = field(default_factory=list)
    definitions: list[Definition] = field(default_factory=list)
    force_alignment: int | None = None
    debug: bool | None = None
    math_lib: Math = Math.DEFAULT
    files: list[Path] = field(default_factory=list)
    opt_level: int | None = None
    assertions: bool = True
    fma: bool = True
    loop_unroll: bool = True
    fast_masked_vload: bool = False
    fast_math: bool = False
    force_aligned_memory: bool = False
    pic: bool | None = None
    targets: list[Target] | None = None
    werror: bool = True
    warnings: bool = True
    perf_warnings: bool = True
    env: dict[str, str] = field(default_factory=dict)


class Config:
    """Fluent builder for BuildOptions.

    Every setter records the value and returns the builder, so calls
    can be chained. The builder is finished with compile().

    Attributes:
        options: The recorded options.
    """

    def __init__(self, options: BuildOptions | None = None) -> None:
        self.options = options if options is not None else BuildOptions()

    def addressing(self, addr: Addr) -> Config:
        """Set the addressing mode (ispc defaults to 32-bit)."""
        self.options.addressing = addr
        return self

    def architecture(self, arch: Arch) -> Config:
        """Override the architecture inferred from the target triple."""
        self.options.architecture = arch
        return self

    def cpu(self, cpu: Cpu) -> Config:
        """Add a CPU to the target CPU set.

        By default the set is empty and ispc derives it from the targets.
        """
        self.options.cpus.append(cpu)
        return self

    def define(self, name: str, value: str | None = None) -> Config:
        """Add a -D definition. Duplicates are kept in order."""
        self.options.definitions.append(Definition(name, value))
        return self

    def force_alignment(self, alignment: int) -> Config:
        self.options.force_alignment = alignment
        return self

    def debug(self, enabled: bool) -> Config:
        """Turn debug info on or off (default: from the build profile)."""
        self.options.debug = enabled
        return self

    def math_lib(self, math: Math) -> Config:
        self.options.math_lib = math
        return self

    def file(self, path: Path | str) -> Config:
        """Add a source file to be compiled into the archive."""
        self.options.files.append(Path(path))
        return self

    def opt_level(self, level: int) -> Config:
        """Set the optimization level. Values above 3 mean 3."""
        self.options.opt_level = level
        return self

    def enable_assertions(self, enabled: bool) -> Config:
        self.options.assertions = enabled
        return self

    def enable_fma(self, enabled: bool) -> Config:
        """Enable or disable fused multiply-add instructions."""
        self.options.fma = enabled
        return self

    def enable_loop_unroll(self, enabled: bool) -> Config:
        self.options.loop_unroll = enabled
        return self

    def enable_fast_masked_vload(self, enabled: bool) -> Config:
        """Enable faster masked vector loads on SSE.

        These may read past the end of arrays.
        """
        self.options.fast_masked_vload = enabled
        return self

    def enable_fast_math(self, enabled: bool) -> Config:
        """Enable non-IEEE-754 compliant math.

        Faster, but with unpredictable error, and inf/NaN corner cases
        may not be handled.
        """
        self.options.fast_math = enabled
        return self

    def force_aligned_memory(self, enabled: bool) -> Config:
        """Emit aligned vector loads and stores.

        Undefined behavior if buffers are not suitably aligned.
        """
        self.options.force_aligned_memory = enabled
        return self

    def pic(self, enabled: bool) -> Config:
        """Set position-independent code (default: on for x86-64)."""
        self.options.pic = enabled
        return self

    def target(self, target: Target) -> Config:
        """Add a target ISA.

        The first call replaces the default target list; later calls
        append to it. Only one width per ISA family may be selected.
        """
        if self.options.targets is None:
            self.options.targets = []
        self.options.targets.append(target)
        return self

    def werror(self, enabled: bool) -> Config:
        """Treat warnings as errors (default: on)."""
        self.options.werror = enabled
        return self

    def warn(self, enabled: bool) -> Config:
        self.options.warnings = enabled
        return self

    def warn_perf(self, enabled: bool) -> Config:
        """Enable warnings about suboptimal performance.

        These never become errors, even with werror.
        """
        self.options.perf_warnings = enabled
        return self

    def env(self, key: str, value: str) -> Config:
        """Set a variable in the compiler's process environment."""
        self.options.env[key] = value
        return self

    def compile(
        self,
        output: str,
        *,
        env: BuildEnv | None = None,
        log: BuildLog | None = None,
    ) -> Path:
        """Compile all files and archive them as ``output``.

        ``output`` must look like lib<name>.a.

        Returns:
            Path to the created archive.
        """
        from ispcbuild.build import compile_config

        return compile_config(self, output, env=env, log=log)

    def __repr__(self) -> str:
        files = ", ".join(str(f) for f in self.options.files)
        return f"Config(files=[{files}])"
