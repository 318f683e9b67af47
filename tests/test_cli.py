"""CLI tests using typer's CliRunner."""

import sys
from pathlib import Path

import pytest
from typer.testing import CliRunner

sys.path.insert(0, str(Path(__file__).parent.parent))

from fhandle import config as config_module  # noqa: E402
from fhandle.cli import app, format_size, hexdump_rows  # noqa: E402
from fhandle.config import load_settings  # noqa: E402

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch):
    monkeypatch.setattr(config_module, "_CONFIG_SEARCH_PATHS", [])
    for key in ("FHANDLE_CONFIG", "FHANDLE_MAX_DUMP_SIZE", "FHANDLE_DEFAULT_BACKEND", "FHANDLE_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)


# ── helpers ───────────────────────────────────────────────────


def test_hexdump_rows():
    rows = hexdump_rows(b"ABCD\x00", offset=16, width=4)
    assert rows[0].startswith("00000010  41 42 43 44")
    assert rows[0].endswith("ABCD")
    assert rows[1].startswith("00000014  00")
    assert rows[1].endswith(".")


def test_format_size():
    assert format_size(512) == "512.0 B"
    assert format_size(2048) == "2.0 KB"


# ── commands ──────────────────────────────────────────────────


@pytest.mark.parametrize("backend", ["standard", "stream"])
def test_info(abcd_file: Path, backend: str):
    result = runner.invoke(app, ["info", str(abcd_file), "--backend", backend])
    assert result.exit_code == 0
    assert backend in result.output
    assert "End of stream" in result.output


def test_info_missing_file(tmp_path: Path):
    result = runner.invoke(app, ["info", str(tmp_path / "missing.bin")])
    assert result.exit_code == 1
    assert "Cannot open" in result.output


def test_unknown_backend_option(abcd_file: Path):
    result = runner.invoke(app, ["info", str(abcd_file), "-b", "floppy"])
    assert result.exit_code == 2
    assert "Unknown backend" in result.output


@pytest.mark.parametrize("backend", ["standard", "stream"])
def test_dump(alphabet_file: Path, backend: str):
    result = runner.invoke(app, ["dump", str(alphabet_file), "-o", "2", "-n", "4", "-b", backend])
    assert result.exit_code == 0
    assert "00000002  63 64 65 66" in result.output
    assert "cdef" in result.output


@pytest.mark.parametrize("backend", ["standard", "stream"])
def test_dump_huge_length_reads_to_end(alphabet_file: Path, backend: str):
    result = runner.invoke(app, ["dump", str(alphabet_file), "-o", "24", "-n", "10GB", "-b", backend])
    assert result.exit_code == 0
    assert "00000018  79 7a" in result.output
    assert "yz" in result.output


def test_lines(tmp_path: Path):
    path = tmp_path / "lines.txt"
    path.write_bytes(b"first\nsecond\n")
    result = runner.invoke(app, ["lines", str(path)])
    assert result.exit_code == 0
    assert "first" in result.output
    assert "second" in result.output


@pytest.mark.parametrize("length", ["1", "0", "-3"])
def test_lines_rejects_length_below_two(abcd_file: Path, length: str):
    result = runner.invoke(app, ["lines", str(abcd_file), "-l", length])
    assert result.exit_code == 2


@pytest.mark.parametrize("backend", ["standard", "stream"])
def test_lines_minimum_length(tmp_path: Path, backend: str):
    path = tmp_path / "lines.txt"
    path.write_bytes(b"ab\n")
    result = runner.invoke(app, ["lines", str(path), "-l", "2", "-b", backend])
    assert result.exit_code == 0
    assert result.output.split() == ["a", "b"]


@pytest.mark.parametrize("backend", ["standard", "stream"])
def test_copy(tmp_path: Path, backend: str):
    src = tmp_path / "src.bin"
    dst = tmp_path / "dst.bin"
    src.write_bytes(bytes(range(256)) * 300)
    result = runner.invoke(app, ["copy", str(src), str(dst), "-b", backend])
    assert result.exit_code == 0
    assert dst.read_bytes() == src.read_bytes()


def test_config_output(tmp_path: Path):
    out = tmp_path / "conf" / "fhandle.yaml"
    result = runner.invoke(app, ["config", "-o", str(out)])
    assert result.exit_code == 0
    settings = load_settings(out)
    assert settings.default_backend == "standard"
    assert settings.max_dump_size == 64 * 1024
