# SPDX-License-Identifier: MIT
"""Resolution of build options against the environment.

Resolution turns caller intent (BuildOptions, with gaps) into a complete
ResolvedConfig. It is the only place that consults the environment, and
it does so once per build.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ispcbuild.core.config import BuildOptions, Definition
from ispcbuild.core.environment import (
    OPT_LEVEL_VAR,
    PROFILE_VAR,
    TARGET_VAR,
    BuildEnv,
)
from ispcbuild.core.errors import BuildEnvironmentError, ConfigurationError
from ispcbuild.core.options import DEFAULT_TARGETS, Addr, Arch, Cpu, Math, Target

logger = logging.getLogger(__name__)

MAX_OPT_LEVEL = 3


@dataclass(frozen=True)
class ResolvedConfig:
    """A fully resolved, immutable build configuration."""

    architecture: Arch
    opt_level: int
    debug: bool
    pic: bool
    targets: tuple[Target, ...]
    addressing: Addr | None = None
    cpus: tuple[Cpu, ...] = ()
    definitions: tuple[Definition, ...] = ()
    force_alignment: int | None = None
    math_lib: Math = Math.DEFAULT
    assertions: bool = True
    fma: bool = True
    loop_unroll: bool = True
    fast_masked_vload: bool = False
    fast_math: bool = False
    force_aligned_memory: bool = False
    werror: bool = True
    warnings: bool = True
    perf_warnings: bool = True


def resolve_opt_level(options: BuildOptions, env: BuildEnv) -> int:
    """Explicit level clamped to 3, else OPT_LEVEL from the environment."""
    if options.opt_level is not None:
        if options.opt_level < 0:
            raise ConfigurationError(
                f"optimization level must be non-negative, got {options.opt_level}"
            )
        return min(options.opt_level, MAX_OPT_LEVEL)

    raw = env.require(OPT_LEVEL_VAR)
    try:
        level = int(raw)
    except ValueError:
        level = -1
    if level < 0:
        raise BuildEnvironmentError(
            OPT_LEVEL_VAR,
            f"environment variable `{OPT_LEVEL_VAR}` is not a non-negative "
            f"integer: {raw!r}",
        )
    return min(level, MAX_OPT_LEVEL)


def resolve_debug(options: BuildOptions, env: BuildEnv) -> bool:
    if options.debug is not None:
        return options.debug
    return env.require(PROFILE_VAR) == "debug"


def arch_from_triple(triple: str) -> Arch:
    """Infer the architecture from a target triple.

    Raises:
        BuildEnvironmentError: If the triple is not an x86 target.
    """
    if "x86_64" in triple:
        return Arch.X86_64
    if "i686" in triple or "i586" in triple:
        return Arch.X86
    raise BuildEnvironmentError(
        TARGET_VAR,
        f"unsupported target: ispc can only target x86 or x86_64, "
        f"your current target is {triple}",
    )


def resolve_architecture(options: BuildOptions, env: BuildEnv) -> Arch:
    if options.architecture is not None:
        return options.architecture
    return arch_from_triple(env.require(TARGET_VAR))


def resolve_pic(options: BuildOptions, arch: Arch) -> bool:
    if options.pic is not None:
        return options.pic
    return arch.is_64bit


def resolve_targets(options: BuildOptions) -> tuple[Target, ...]:
    """Explicit targets, or the default five-tier list.

    Raises:
        ConfigurationError: If two targets share an ISA family.
    """
    if not options.targets:
        return DEFAULT_TARGETS

    seen: dict[str, Target] = {}
    for target in options.targets:
        family = target.isa.value
        if family in seen:
            raise ConfigurationError(
                f"only one target per ISA family may be selected: "
                f"{seen[family].wire} and {target.wire} are both {family}"
            )
        seen[family] = target
    return tuple(options.targets)


def resolve_config(options: BuildOptions, env: BuildEnv) -> ResolvedConfig:
    """Resolve options against the environment.

    Raises:
        ConfigurationError: If the options are inconsistent.
        BuildEnvironmentError: If a needed variable is missing or invalid.
    """
    targets = resolve_targets(options)
    architecture = resolve_architecture(options, env)
    resolved = ResolvedConfig(
        architecture=architecture,
        opt_level=resolve_opt_level(options, env),
        debug=resolve_debug(options, env),
        pic=resolve_pic(options, architecture),
        targets=targets,
        addressing=options.addressing,
        cpus=tuple(options.cpus),
        definitions=tuple(options.definitions),
        force_alignment=options.force_alignment,
        math_lib=options.math_lib,
        assertions=options.assertions,
        fma=options.fma,
        loop_unroll=options.loop_unroll,
        fast_masked_vload=options.fast_masked_vload,
        fast_math=options.fast_math,
        force_aligned_memory=options.force_aligned_memory,
        werror=options.werror,
        warnings=options.warnings,
        perf_warnings=options.perf_warnings,
    )
    logger.debug("Resolved configuration: %s", resolved)
    return resolved
