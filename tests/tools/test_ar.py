# SPDX-License-Identifier: MIT
"""Tests for ispcbuild.tools.ar."""

import io
import shutil
import subprocess

import pytest

from ispcbuild.core.buildlog import BuildLog
from ispcbuild.core.errors import ConfigurationError, ToolExecutionError
from ispcbuild.tools.ar import StaticArchiver, validate_archive_name


class TestValidateArchiveName:
    @pytest.mark.parametrize(
        "output,name",
        [
            ("libmandelbrot.a", "mandelbrot"),
            ("libfoo-bar.a", "foo-bar"),
            ("liba.a", "a"),
            ("liblib.a.a", "lib.a"),
        ],
    )
    def test_valid(self, output, name):
        assert validate_archive_name(output) == name

    @pytest.mark.parametrize(
        "output",
        ["notlib.a", "libfoo.so", "foo.a", "lib.a", "libfoo.a.bak", "lib/foo.a", ""],
    )
    def test_invalid(self, output):
        with pytest.raises(ConfigurationError, match="must begin with `lib`"):
            validate_archive_name(output)


class TestStaticArchiver:
    def test_command(self, tmp_path):
        archiver = StaticArchiver(tmp_path / "libk.a", ar="llvm-ar")
        archiver.add_object(tmp_path / "k_sse2.o").add_object(tmp_path / "k_avx2.o")
        assert archiver.command() == [
            "llvm-ar",
            "crs",
            str(tmp_path / "libk.a"),
            str(tmp_path / "k_sse2.o"),
            str(tmp_path / "k_avx2.o"),
        ]

    def test_finish_runs_archiver_and_announces_link(self, tmp_path, make_runner):
        runner = make_runner()
        stream = io.StringIO()
        archiver = StaticArchiver(
            tmp_path / "libk.a", log=BuildLog(stream), runner=runner
        )
        archiver.add_object(tmp_path / "k.o")

        assert archiver.finish() == tmp_path / "libk.a"

        assert runner.calls == [["ar", "crs", str(tmp_path / "libk.a"), str(tmp_path / "k.o")]]
        lines = stream.getvalue().splitlines()
        assert "cargo:rustc-link-lib=static=k" in lines
        assert f"cargo:rustc-link-search=native={tmp_path}" in lines

    def test_no_deduplication(self, tmp_path, make_runner):
        runner = make_runner()
        archiver = StaticArchiver(
            tmp_path / "libk.a", log=BuildLog(io.StringIO()), runner=runner
        )
        archiver.add_object(tmp_path / "k.o").add_object(tmp_path / "k.o")
        archiver.finish()
        assert runner.calls[0].count(str(tmp_path / "k.o")) == 2

    def test_stale_archive_removed(self, tmp_path, make_runner):
        stale = tmp_path / "libk.a"
        stale.write_bytes(b"!<arch>\nold")
        archiver = StaticArchiver(stale, log=BuildLog(io.StringIO()), runner=make_runner())
        archiver.add_object(tmp_path / "k.o")
        archiver.finish()
        assert not stale.exists()

    def test_no_members(self, tmp_path, make_runner):
        runner = make_runner()
        archiver = StaticArchiver(tmp_path / "libk.a", runner=runner)
        with pytest.raises(ConfigurationError, match="no object files"):
            archiver.finish()
        assert runner.calls == []

    def test_bad_name(self, tmp_path, make_runner):
        runner = make_runner()
        archiver = StaticArchiver(tmp_path / "k.a", runner=runner)
        archiver.add_object(tmp_path / "k.o")
        with pytest.raises(ConfigurationError):
            archiver.finish()
        assert runner.calls == []

    def test_archiver_failure(self, tmp_path, make_runner):
        runner = make_runner(returncode=1, stderr=b"ar: k.o: No such file")
        archiver = StaticArchiver(
            tmp_path / "libk.a", log=BuildLog(io.StringIO()), runner=runner
        )
        archiver.add_object(tmp_path / "k.o")
        with pytest.raises(ToolExecutionError, match="No such file"):
            archiver.finish()


has_ar = shutil.which("ar") is not None
has_cc = shutil.which("cc") is not None


@pytest.mark.skipif(not (has_ar and has_cc), reason="ar and cc not available")
class TestStaticArchiverWithTool:
    """Tests that require a real archiver."""

    def test_creates_archive(self, tmp_path):
        source = tmp_path / "k.c"
        source.write_text("int k(void) { return 1; }\n")
        obj = tmp_path / "k.o"
        subprocess.run(["cc", "-c", str(source), "-o", str(obj)], check=True)

        archiver = StaticArchiver(tmp_path / "out" / "libk.a", log=BuildLog(io.StringIO()))
        archiver.add_object(obj)
        archive = archiver.finish()

        assert archive.read_bytes().startswith(b"!<arch>\n")
