# SPDX-License-Identifier: MIT
"""Command-line interface for ispcbuild."""

from __future__ import annotations

import argparse
import logging
import shutil
import sys

from ispcbuild.build import compile_config, resolve_invocation
from ispcbuild.core.buildlog import BuildLog
from ispcbuild.core.config import Config
from ispcbuild.core.environment import ISPC_VAR, BuildEnv
from ispcbuild.core.errors import IspcBuildError
from ispcbuild.core.options import Addr, Arch, Cpu, Math, Target
from ispcbuild.tools.ispc import DEFAULT_ISPC, IspcCompiler, ResolvedInvocation

# Set up logging
logger = logging.getLogger("ispcbuild")


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging based on verbosity level."""
    if debug:
        level = logging.DEBUG
        fmt = "%(levelname)s: %(name)s: %(message)s"
    elif verbose:
        level = logging.INFO
        fmt = "%(levelname)s: %(message)s"
    else:
        level = logging.WARNING
        fmt = "%(levelname)s: %(message)s"

    logging.basicConfig(level=level, format=fmt)


def parse_variables(args: list[str]) -> tuple[dict[str, str], list[str]]:
    """Parse KEY=value arguments from a list.

    Args:
        args: List of arguments.

    Returns:
        Tuple of (variables dict, remaining args).
    """
    variables: dict[str, str] = {}
    remaining: list[str] = []

    for arg in args:
        if "=" in arg and not arg.startswith("-"):
            key, _, value = arg.partition("=")
            if key:  # Valid KEY=value
                variables[key] = value
            else:
                remaining.append(arg)
        else:
            remaining.append(arg)

    return variables, remaining


def parse_define(text: str) -> tuple[str, str | None]:
    """Split NAME or NAME=VALUE."""
    name, sep, value = text.partition("=")
    if not name:
        raise argparse.ArgumentTypeError(f"invalid definition: {text!r}")
    return name, (value if sep else None)


def parse_target(text: str) -> Target:
    try:
        return Target.from_wire(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def config_from_args(args: argparse.Namespace, sources: list[str]) -> Config:
    """Build a Config from parsed command-line options."""
    config = Config()
    for source in sources:
        config.file(source)

    if args.addressing:
        config.addressing(Addr(args.addressing))
    if args.arch:
        config.architecture(Arch(args.arch))
    for cpu in args.cpu or []:
        config.cpu(Cpu(cpu))
    for name, value in args.define or []:
        config.define(name, value)
    if args.force_alignment is not None:
        config.force_alignment(args.force_alignment)
    if args.debug_info is not None:
        config.debug(args.debug_info)
    if args.math_lib:
        config.math_lib(Math(args.math_lib))
    if args.opt_level is not None:
        config.opt_level(args.opt_level)
    if args.pic is not None:
        config.pic(args.pic)
    for target in args.target or []:
        config.target(target)
    if args.werror is not None:
        config.werror(args.werror)

    config.enable_assertions(not args.no_assertions)
    config.enable_fma(not args.no_fma)
    config.enable_loop_unroll(not args.no_loop_unroll)
    config.enable_fast_masked_vload(args.fast_masked_vload)
    config.enable_fast_math(args.fast_math)
    config.force_aligned_memory(args.force_aligned_memory)
    config.warn(not args.woff)
    config.warn_perf(not args.wno_perf)
    return config


def cmd_compile(args: argparse.Namespace) -> int:
    """Compile sources and archive them.

    Build variables given as KEY=value override the process environment.
    """
    setup_logging(args.verbose, args.debug)

    variables, sources = parse_variables(args.inputs)
    if not sources:
        logger.error("No source files given")
        return 1

    log = BuildLog()
    env = BuildEnv(overrides=variables, log=log)
    config = config_from_args(args, sources)

    try:
        archive = compile_config(config, args.output, env=env, log=log)
    except IspcBuildError as e:
        logger.error("%s", e)
        return 1

    logger.info("Created %s", archive)
    return 0


def cmd_args(args: argparse.Namespace) -> int:
    """Print the ispc command line without running anything."""
    setup_logging(args.verbose, args.debug)

    variables, sources = parse_variables(args.inputs)
    env = BuildEnv(overrides=variables)
    config = config_from_args(args, sources)

    try:
        invocation = resolve_invocation(config, env)
    except IspcBuildError as e:
        logger.error("%s", e)
        return 1

    print(" ".join([invocation.binary, *invocation.arguments]))
    return 0


def cmd_info(args: argparse.Namespace) -> int:
    """Show which ispc would be used and its version."""
    setup_logging(args.verbose, args.debug)

    variables, _ = parse_variables(args.inputs)
    env = BuildEnv(overrides=variables)
    binary = env.get(ISPC_VAR) or DEFAULT_ISPC
    found = shutil.which(binary)

    if found is None:
        logger.error("%s not found", binary)
        logger.info("Install ispc: https://ispc.github.io/")
        return 1

    print(f"ispc: {found}")
    version = IspcCompiler(ResolvedInvocation(found, ())).version()
    print(f"version: {version or '(unknown)'}")
    return 0


def add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add common arguments to a parser."""
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--debug", action="store_true", help="Debug output")


def add_option_args(parser: argparse.ArgumentParser) -> None:
    """Add arguments mirroring the Config setters."""
    parser.add_argument("--addressing", choices=[a.value for a in Addr])
    parser.add_argument("--arch", choices=[a.value for a in Arch])
    parser.add_argument(
        "--cpu", action="append", choices=[c.value for c in Cpu], help="Repeatable"
    )
    parser.add_argument(
        "-D",
        dest="define",
        action="append",
        type=parse_define,
        metavar="NAME[=VALUE]",
        help="Preprocessor definition (repeatable)",
    )
    parser.add_argument("--force-alignment", type=int, metavar="N")
    parser.add_argument(
        "-g",
        "--debug-info",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Generate debug info (default: PROFILE=debug)",
    )
    parser.add_argument("--math-lib", choices=[m.value for m in Math])
    parser.add_argument(
        "-O",
        dest="opt_level",
        type=int,
        metavar="LEVEL",
        help="Optimization level 0-3 (default: $OPT_LEVEL)",
    )
    parser.add_argument("--no-assertions", action="store_true")
    parser.add_argument("--no-fma", action="store_true")
    parser.add_argument("--no-loop-unroll", action="store_true")
    parser.add_argument("--fast-masked-vload", action="store_true")
    parser.add_argument("--fast-math", action="store_true")
    parser.add_argument("--force-aligned-memory", action="store_true")
    parser.add_argument(
        "--pic",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Position-independent code (default: on for x86_64)",
    )
    parser.add_argument(
        "--target",
        action="append",
        type=parse_target,
        metavar="ISA[-WIDTH]",
        help="Target ISA, e.g. sse4-i32x8 (repeatable)",
    )
    parser.add_argument(
        "--werror",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Treat warnings as errors (default: on)",
    )
    parser.add_argument("--woff", action="store_true", help="Disable warnings")
    parser.add_argument(
        "--wno-perf", action="store_true", help="Disable performance warnings"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ispcbuild",
        description="Compile ispc sources into a static library.",
        epilog="Run 'ispcbuild <command> --help' for command-specific help.",
    )
    from ispcbuild import __version__

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # ispcbuild compile
    compile_parser = subparsers.add_parser(
        "compile", help="Compile sources into lib<name>.a"
    )
    add_common_args(compile_parser)
    add_option_args(compile_parser)
    compile_parser.add_argument("output", help="Archive name, lib<name>.a")
    compile_parser.add_argument(
        "inputs", nargs="*", help="Source files and build variables (KEY=value)"
    )
    compile_parser.set_defaults(func=cmd_compile)

    # ispcbuild args
    args_parser = subparsers.add_parser(
        "args", help="Print the ispc command line for the given options"
    )
    add_common_args(args_parser)
    add_option_args(args_parser)
    args_parser.add_argument(
        "inputs", nargs="*", help="Build variables (KEY=value)"
    )
    args_parser.set_defaults(func=cmd_args)

    # ispcbuild info
    info_parser = subparsers.add_parser("info", help="Show the ispc in use")
    add_common_args(info_parser)
    info_parser.add_argument(
        "inputs", nargs="*", help="Build variables (KEY=value)"
    )
    info_parser.set_defaults(func=cmd_info)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the ispcbuild CLI."""
    parser = build_parser()
    args, extra = parser.parse_known_args(argv)

    # Positionals given after options land in extra; fold them back
    unknown = [arg for arg in extra if arg.startswith("-")]
    if unknown or (extra and not hasattr(args, "inputs")):
        parser.error(f"unrecognized arguments: {' '.join(unknown or extra)}")
    if extra:
        args.inputs = [*args.inputs, *extra]

    if args.command is None:
        parser.print_help()
        return 1

    result: int = args.func(args)
    return result


if __name__ == "__main__":
    sys.exit(main())
