# SPDX-License-Identifier: MIT
"""Translation of a resolved configuration into ispc arguments.

The mapping is pure and the argument order is fixed, so the same
configuration always yields the same command line:

    1. --addressing        (if set)
    2. --arch
    3. --colored-output
    4. --cpu=a,b           (if any CPUs)
    5. -DNAME[=VALUE]      (one per definition)
    6. --emit-obj
    7. --force-alignment   (if set)
    8. -g                  (if debug)
    9. --math-lib
   10. -O<level>
   11. --opt=...           (only features differing from their default)
   12. --pic               (if pic)
   13. --target=a,b
   14. --werror            (if set)
   15. --woff              (if warnings are off)
   16. --wno-perf          (if performance warnings are off)
"""

from __future__ import annotations

from collections.abc import Iterable

from ispcbuild.core.config import Definition
from ispcbuild.core.resolver import ResolvedConfig

CPU_FLAG = "--cpu="
TARGET_FLAG = "--target="


def join_list_flag(flag: str, values: Iterable[str]) -> str:
    """Join values into one flag: ('--cpu=', [a, b]) -> '--cpu=a,b'."""
    return flag + ",".join(values)


def split_list_flag(arg: str, flag: str) -> list[str]:
    """Inverse of join_list_flag.

    Raises:
        ValueError: If ``arg`` does not start with ``flag``.
    """
    if not arg.startswith(flag):
        raise ValueError(f"{arg!r} is not a {flag} argument")
    values = arg[len(flag) :]
    return values.split(",") if values else []


def definition_arg(definition: Definition) -> str:
    if definition.value is None:
        return f"-D{definition.name}"
    return f"-D{definition.name}={definition.value}"


def feature_args(config: ResolvedConfig) -> list[str]:
    """Flags for the six feature toggles that deviate from their default."""
    toggles = [
        (not config.assertions, "disable-assertions"),
        (not config.fma, "disable-fma"),
        (not config.loop_unroll, "disable-loop-unroll"),
        (config.fast_masked_vload, "fast-masked-vload"),
        (config.fast_math, "fast-math"),
        (config.force_aligned_memory, "force-aligned-memory"),
    ]
    return [f"--opt={name}" for enabled, name in toggles if enabled]


def build_arguments(config: ResolvedConfig) -> list[str]:
    """Build the ispc argument list for a resolved configuration.

    The list excludes the binary, the source file and the output path,
    which are added per invocation.
    """
    args: list[str] = []

    if config.addressing is not None:
        args.append(f"--addressing={config.addressing.value}")

    args.append(f"--arch={config.architecture.value}")
    args.append("--colored-output")

    if config.cpus:
        args.append(join_list_flag(CPU_FLAG, (cpu.value for cpu in config.cpus)))

    args.extend(definition_arg(d) for d in config.definitions)

    args.append("--emit-obj")

    if config.force_alignment is not None:
        args.append(f"--force-alignment={config.force_alignment}")

    if config.debug:
        args.append("-g")

    args.append(f"--math-lib={config.math_lib.value}")
    args.append(f"-O{config.opt_level}")
    args.extend(feature_args(config))

    if config.pic:
        args.append("--pic")

    args.append(join_list_flag(TARGET_FLAG, (t.wire for t in config.targets)))

    if config.werror:
        args.append("--werror")
    if not config.warnings:
        args.append("--woff")
    if not config.perf_warnings:
        args.append("--wno-perf")

    return args
