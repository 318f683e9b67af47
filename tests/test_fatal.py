"""Unknown backend kinds terminate the process.

The subprocess test keeps the real exit isolated from the rest of the suite.
"""

import os
import subprocess
import sys
import textwrap
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from fhandle import open_handle  # noqa: E402
from fhandle.common.constants import FATAL_EXIT_CODE  # noqa: E402
from fhandle.common.errors import FatalError, UnknownBackendKindError, fatal_error  # noqa: E402

PROJECT_ROOT = Path(__file__).parent.parent


def test_unknown_kind_terminates_process(abcd_file: Path):
    code = textwrap.dedent(
        f"""\
        from fhandle import open_handle
        open_handle({str(abcd_file)!r}, "rb", "floppy")
        print("still running")
        """
    )
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(PROJECT_ROOT), env.get("PYTHONPATH", "")]))

    proc = subprocess.run([sys.executable, "-c", code], capture_output=True, text=True, env=env, timeout=60)

    assert proc.returncode == FATAL_EXIT_CODE
    assert "still running" not in proc.stdout
    assert "unknown file handle type" in proc.stderr


def test_unknown_kind_raises_typed_fatal_error(abcd_file: Path):
    with pytest.raises(UnknownBackendKindError) as exc_info:
        open_handle(abcd_file, "rb", "floppy")

    err = exc_info.value
    assert isinstance(err, SystemExit)
    assert not isinstance(err, Exception)
    assert err.code == FATAL_EXIT_CODE
    assert "unknown file handle type" in str(err)


def test_fatal_error_logs_critical(caplog):
    with caplog.at_level("CRITICAL", logger="fhandle.errors"):
        with pytest.raises(FatalError):
            fatal_error("invariant broken")
    assert "invariant broken" in caplog.text
