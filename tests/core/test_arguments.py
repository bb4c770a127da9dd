# SPDX-License-Identifier: MIT
"""Tests for ispcbuild.core.arguments."""

import pytest

from ispcbuild.core.arguments import (
    CPU_FLAG,
    TARGET_FLAG,
    build_arguments,
    join_list_flag,
    split_list_flag,
)
from ispcbuild.core.config import Config
from ispcbuild.core.environment import BuildEnv
from ispcbuild.core.options import Addr, Arch, Cpu, Math, Target
from ispcbuild.core.resolver import resolve_config


def resolved(config: Config, **env):
    values = {"TARGET": "x86_64-pc-linux", "PROFILE": "release", "OPT_LEVEL": "2"}
    values.update(env)
    return resolve_config(config.options, BuildEnv(values))


def list_arg(args, flag):
    matches = [a for a in args if a.startswith(flag)]
    assert len(matches) == 1
    return split_list_flag(matches[0], flag)


class TestListFlags:
    def test_join(self):
        assert join_list_flag("--cpu=", ["core2", "slm"]) == "--cpu=core2,slm"

    def test_join_single(self):
        assert join_list_flag("--target=", ["sse2"]) == "--target=sse2"

    def test_split_inverts_join(self):
        values = ["sse2-i32x4", "avx1.1", "avx2-i64x4"]
        assert split_list_flag(join_list_flag("--target=", values), "--target=") == values

    def test_split_wrong_flag(self):
        with pytest.raises(ValueError):
            split_list_flag("--cpu=core2", "--target=")


class TestBuildArguments:
    def test_minimal_release(self):
        args = build_arguments(resolved(Config()))
        assert args == [
            "--arch=x86_64",
            "--colored-output",
            "--emit-obj",
            "--math-lib=default",
            "-O2",
            "--pic",
            "--target=sse2,sse4,avx1,avx1.1,avx2",
            "--werror",
        ]

    def test_everything_in_canonical_order(self):
        config = (
            Config()
            .addressing(Addr.A64)
            .cpu(Cpu.COREI7)
            .cpu(Cpu.CORE_AVX2)
            .define("FOO")
            .define("BAR", "1")
            .force_alignment(32)
            .debug(True)
            .math_lib(Math.SVML)
            .opt_level(3)
            .enable_assertions(False)
            .enable_fma(False)
            .enable_loop_unroll(False)
            .enable_fast_masked_vload(True)
            .enable_fast_math(True)
            .force_aligned_memory(True)
            .target(Target.SSE4_I8X16)
            .target(Target.AVX2_I32X16)
            .warn(False)
            .warn_perf(False)
        )
        assert build_arguments(resolved(config)) == [
            "--addressing=64",
            "--arch=x86_64",
            "--colored-output",
            "--cpu=corei7,core-avx2",
            "-DFOO",
            "-DBAR=1",
            "--emit-obj",
            "--force-alignment=32",
            "-g",
            "--math-lib=svml",
            "-O3",
            "--opt=disable-assertions",
            "--opt=disable-fma",
            "--opt=disable-loop-unroll",
            "--opt=fast-masked-vload",
            "--opt=fast-math",
            "--opt=force-aligned-memory",
            "--pic",
            "--target=sse4-i8x16,avx2-i32x16",
            "--werror",
            "--woff",
            "--wno-perf",
        ]

    def test_no_werror(self):
        args = build_arguments(resolved(Config().werror(False)))
        assert "--werror" not in args

    def test_32bit_without_pic(self):
        args = build_arguments(resolved(Config(), TARGET="i686-unknown-linux-gnu"))
        assert "--arch=x86" in args
        assert "--pic" not in args

    def test_explicit_pic_on_32bit(self):
        args = build_arguments(resolved(Config().pic(True), TARGET="i686-pc-linux"))
        assert "--pic" in args

    def test_duplicate_definitions_preserved(self):
        config = Config().define("X", "1").define("X", "1")
        args = build_arguments(resolved(config))
        assert args.count("-DX=1") == 2

    def test_no_cpu_flag_when_unspecified(self):
        args = build_arguments(resolved(Config()))
        assert not any(a.startswith(CPU_FLAG) for a in args)

    @pytest.mark.parametrize(
        "cpus",
        [[Cpu.GENERIC], [Cpu.ATOM, Cpu.PENRYN], [Cpu.SLM, Cpu.BROADWELL, Cpu.CORE2]],
    )
    def test_cpu_list_round_trips(self, cpus):
        config = Config()
        for cpu in cpus:
            config.cpu(cpu)
        args = build_arguments(resolved(config))
        assert list_arg(args, CPU_FLAG) == [c.value for c in cpus]

    @pytest.mark.parametrize(
        "targets",
        [
            [Target.SSE2],
            [Target.AVX1_1_I32X16, Target.SSE4_I16X8],
            [Target.SSE2_I32X8, Target.SSE4, Target.AVX1_I64X4, Target.AVX2],
        ],
    )
    def test_target_list_round_trips(self, targets):
        config = Config()
        for target in targets:
            config.target(target)
        args = build_arguments(resolved(config))
        assert list_arg(args, TARGET_FLAG) == [t.wire for t in targets]

    def test_deterministic(self):
        config = Config().define("A").cpu(Cpu.SLM).target(Target.AVX2)
        assert build_arguments(resolved(config)) == build_arguments(resolved(config))

    @pytest.mark.parametrize("arch,flag", [(Arch.X86, "--arch=x86"), (Arch.X86_64, "--arch=x86_64")])
    def test_explicit_architecture(self, arch, flag):
        args = build_arguments(resolved(Config().architecture(arch)))
        assert args[0] == flag
