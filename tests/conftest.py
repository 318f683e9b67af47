"""Shared fixtures for fhandle tests."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from fhandle import rwops  # noqa: E402
from fhandle.common.models import HandleKind  # noqa: E402


@pytest.fixture(params=[HandleKind.STANDARD, HandleKind.ABSTRACT_STREAM], ids=["standard", "stream"])
def kind(request) -> HandleKind:
    """Run a test once per backend."""
    return request.param


@pytest.fixture
def abcd_file(tmp_path: Path) -> Path:
    path = tmp_path / "t.bin"
    path.write_bytes(b"ABCD")
    return path


@pytest.fixture
def alphabet_file(tmp_path: Path) -> Path:
    path = tmp_path / "alphabet.bin"
    path.write_bytes(b"abcdefghijklmnopqrstuvwxyz")
    return path


@pytest.fixture(autouse=True)
def _clear_stream_error():
    """The stream error text is thread-local; start every test clean."""
    rwops.clear_error()
    yield
    rwops.clear_error()
