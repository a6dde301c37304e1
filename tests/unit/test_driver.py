"""Tests for the per-file driver and the command line"""
from io import StringIO

import pytest
from typer.testing import CliRunner

from skeleton_extractor import SkeletonWriter, extract_skeletons
from skeleton_extractor.cli import app
from skeleton_extractor.errors import SourceParseError, SourceReadError
from skeleton_extractor.printer import display_path

runner = CliRunner()


def _run(root):
    buffer = StringIO()
    count = extract_skeletons(root, SkeletonWriter(buffer), extension=".rs")
    return count, buffer.getvalue()


def test_header_per_file_in_discovery_order(tmp_path, write_rs):
    write_rs("src/main.rs", "fn main() {}\n")
    write_rs("build.rs", "// nothing to show\n")
    count, output = _run(tmp_path)
    assert count == 2
    assert output.splitlines() == [
        "// ************* build.rs",
        "// ************* src/main.rs",
        "fn main () ;",
    ]


def test_empty_directory_produces_no_output(tmp_path):
    assert _run(tmp_path) == (0, "")


def test_parse_error_aborts_but_keeps_prior_output(tmp_path, write_rs):
    write_rs("a.rs", "fn ok() {}\n")
    write_rs("b.rs", "fn broken( {\n")
    write_rs("c.rs", "fn never() {}\n")
    buffer = StringIO()
    with pytest.raises(SourceParseError) as excinfo:
        extract_skeletons(tmp_path, SkeletonWriter(buffer), extension=".rs")
    assert excinfo.value.path.name == "b.rs"
    assert buffer.getvalue() == "// ************* a.rs\nfn ok () ;\n"


def test_undecodable_file_raises_read_error(tmp_path):
    (tmp_path / "bad.rs").write_bytes(b"fn \xff\xfe() {}\n")
    with pytest.raises(SourceReadError) as excinfo:
        _run(tmp_path)
    assert "Failed to read" in str(excinfo.value)
    assert "bad.rs" in str(excinfo.value)


def test_display_path_falls_back_to_absolute(tmp_path, write_rs):
    path = write_rs("lib.rs")
    assert display_path(path, tmp_path) == "lib.rs"
    assert display_path(path, path) == "lib.rs"
    assert display_path(path, tmp_path / "elsewhere") == path.resolve().as_posix()


def test_output_is_stable_across_runs(tmp_path, write_rs):
    write_rs("lib.rs", "pub enum E { A, B }\nimpl E { pub fn a(&self) {} }\n")
    assert _run(tmp_path) == _run(tmp_path)


def test_cli_prints_skeleton(tmp_path, write_rs):
    write_rs("lib.rs", "pub fn add(a: i32, b: i32) -> i32 { a + b }\n")
    result = runner.invoke(app, [str(tmp_path)])
    assert result.exit_code == 0
    assert result.stdout == "// ************* lib.rs\npub fn add (a : i32 , b : i32) -> i32 ;\n"


def test_cli_empty_directory_exits_zero(tmp_path):
    result = runner.invoke(app, [str(tmp_path)])
    assert result.exit_code == 0
    assert result.stdout == ""


def test_cli_parse_error_exits_non_zero(tmp_path, write_rs):
    write_rs("broken.rs", "struct {\n")
    result = runner.invoke(app, [str(tmp_path)])
    assert result.exit_code == 1
    assert "Failed to parse" in result.output
    assert "broken.rs" in result.output


def test_every_directory_is_scanned(tmp_path, write_rs):
    write_rs("target/debug/gen.rs", "fn generated() {}\n")
    write_rs(".hidden/lib.rs", "fn hidden() {}\n")
    _count, output = _run(tmp_path)
    assert "// ************* .hidden/lib.rs" in output
    assert "// ************* target/debug/gen.rs" in output
