# SPDX-License-Identifier: MIT
"""The compile pipeline: resolve, invoke, discover, archive.

One configuration produces one archive in one sequential pass. Source
files are compiled in the configured order and the first failure aborts
the build; no archive is written unless every file compiled.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from pathlib import Path

from ispcbuild.core.buildlog import BuildLog
from ispcbuild.core.config import Config
from ispcbuild.core.discovery import ProducedObjectSet, discover_objects, object_path
from ispcbuild.core.environment import AR_VAR, OUT_DIR_VAR, BuildEnv
from ispcbuild.core.errors import ConfigurationError
from ispcbuild.core.resolver import resolve_config
from ispcbuild.tools.ar import DEFAULT_AR, StaticArchiver, validate_archive_name
from ispcbuild.tools.ispc import IspcCompiler, ResolvedInvocation
from ispcbuild.tools.tool import Runner

logger = logging.getLogger(__name__)

ArchiverFactory = Callable[[Path], StaticArchiver]


def resolve_invocation(config: Config, env: BuildEnv) -> ResolvedInvocation:
    """Resolve ``config`` against ``env`` into an ispc invocation."""
    resolved = resolve_config(config.options, env)
    return ResolvedInvocation.create(resolved, env, config.options.env)


def check_object_paths(sources: Iterable[Path], out_dir: Path) -> None:
    """Reject distinct sources that would write the same object.

    Raises:
        ConfigurationError: If two sources map to one object path.
    """
    owners: dict[Path, Path] = {}
    for source in sources:
        dest = object_path(out_dir, source)
        other = owners.setdefault(dest, source)
        if other != source:
            raise ConfigurationError(
                f"{other} and {source} would both compile to {dest}"
            )


def compile_sources(
    compiler: IspcCompiler,
    sources: Iterable[Path],
    out_dir: Path,
    log: BuildLog,
) -> list[ProducedObjectSet]:
    """Compile each source in turn and collect what it produced."""
    produced: list[ProducedObjectSet] = []
    for source in sources:
        log.rerun_if_changed(source)
        expected = object_path(out_dir, source)
        compiler.compile(source, expected)
        objects = discover_objects(source, expected)
        logger.info("%s produced %d object(s)", source, len(objects.objects))
        produced.append(objects)
    return produced


def compile_config(
    config: Config,
    output: str,
    *,
    env: BuildEnv | None = None,
    log: BuildLog | None = None,
    runner: Runner | None = None,
    archiver_factory: ArchiverFactory | None = None,
) -> Path:
    """Compile every file of ``config`` and archive them as ``output``.

    Args:
        config: The build configuration.
        output: Archive file name, lib<name>.a.
        env: Environment lookup (default: the process environment).
        log: Build log (default: standard output).
        runner: Replacement for subprocess.run, used for every tool.
        archiver_factory: Creates the archiver for an output path.

    Returns:
        Path to the created archive inside the output directory.

    Raises:
        ConfigurationError: For a bad archive name, no source files, or
            two sources sharing an object path.
        BuildEnvironmentError: For missing or invalid environment.
        ToolNotFoundError: If ispc or the archiver cannot be started.
        ToolExecutionError: If ispc or the archiver fails.
    """
    validate_archive_name(output)
    if not config.options.files:
        raise ConfigurationError(f"no source files given for {output}")

    log = log or BuildLog()
    if env is None:
        env = BuildEnv(log=log)

    invocation = resolve_invocation(config, env)
    out_dir = Path(env.require(OUT_DIR_VAR))
    ar = env.get(AR_VAR) or DEFAULT_AR
    check_object_paths(config.options.files, out_dir)

    compiler = IspcCompiler(invocation, log=log, runner=runner)
    produced = compile_sources(compiler, config.options.files, out_dir, log)

    if archiver_factory is None:
        archiver = StaticArchiver(out_dir / output, ar=ar, log=log, runner=runner)
    else:
        archiver = archiver_factory(out_dir / output)
    for objects in produced:
        for obj in objects.objects:
            archiver.add_object(obj)
    return archiver.finish()


def compile_library(
    output: str,
    files: Iterable[Path | str],
    *,
    env: BuildEnv | None = None,
    log: BuildLog | None = None,
) -> Path:
    """Compile ``files`` with the default configuration into ``output``.

    Example:
        compile_library("libmandelbrot.a", ["src/mandelbrot.ispc"])
    """
    config = Config()
    for f in files:
        config.file(f)
    return compile_config(config, output, env=env, log=log)
