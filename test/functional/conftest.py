###############################################################################
#
# MIT License
#
# Copyright (c) 2025 Advanced Micro Devices, Inc.
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.
#
###############################################################################
import os
import shutil
import stat
import subprocess
import sys
from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def rules_path():
    return FIXTURES / "rules.yaml"


@pytest.fixture
def journal_path(tmp_path):
    path = tmp_path / "journal.txt"
    path.write_bytes(
        b"-- Logs begin at Thu 2018-05-31 09:32:33 CEST. --\n"
        b"Mai 31 16:42:47 session[14529]: aborting\n"
        b"Mai 31 16:42:48 session[14529]: assertion failed\n"
        b"Mai 31 16:43:01 systemd[1]: Started Session 42 of user test.\n"
    )
    return path


@pytest.fixture
def fake_journalctl(tmp_path):
    """Executable copy of the journalctl stand-in"""
    if shutil.which("bash") is None:
        pytest.skip("fake journalctl needs bash")
    path = tmp_path / "fake-journalctl.sh"
    shutil.copy(FIXTURES / "fake-journalctl.sh", path)
    path.chmod(path.stat().st_mode | stat.S_IXUSR)
    return path


@pytest.fixture
def invocation_log(tmp_path, monkeypatch):
    path = tmp_path / "invocations.log"
    monkeypatch.setenv("FAKE_JOURNALCTL_LOG", str(path))

    def _invocations() -> list[str]:
        if not path.exists():
            return []
        return path.read_text().splitlines()

    return _invocations


@pytest.fixture
def run_cli_command():
    """Run check_journal in a subprocess"""

    def _run(args: list[str], env: dict = None) -> subprocess.CompletedProcess:
        return subprocess.run(
            [sys.executable, "-m", "journalcheck", *args],
            capture_output=True,
            env={**os.environ, **(env or {})},
            timeout=60,
            check=False,
        )

    return _run
