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
import subprocess

import pytest

from journalcheck.enums import CursorMode
from journalcheck.errors import CheckTimeout, ExecError
from journalcheck.runner import CheckRunner, split_cursor
from journalcheck.statefile import Statefile
from journalcheck.timeout import Deadline

SEEK_FAILURE = "Failed to seek to cursor: Invalid argument\n"


@pytest.fixture
def runner_for(make_config, conn_mock, logger):
    def _runner(**kwargs) -> CheckRunner:
        return CheckRunner(make_config(**kwargs), connection=conn_mock, logger=logger)

    return _runner


def test_build_command_defaults(runner_for):
    assert runner_for().build_command() == [
        "journalctl",
        "--no-pager",
        "--lines=250",
        "--since=-601s",
    ]


def test_build_command_all_options(runner_for, tmp_path):
    runner = runner_for(
        journalctl="/usr/bin/journalctl",
        span="1h",
        units=["sshd.service", "cron.service"],
        user=True,
        statefile=tmp_path / "cursor",
        lines=3,
    )
    assert runner.build_command() == [
        "/usr/bin/journalctl",
        "--no-pager",
        "--lines=30",
        "--since=-1h",
        "--user",
        "--unit=sshd.service",
        "--unit=cron.service",
        f"--cursor-file={tmp_path / 'cursor'}",
    ]


@pytest.mark.parametrize(
    "kwargs, expected",
    [
        ({"lines": 0}, None),
        ({"lines": 0, "journal_lines": 500}, "--lines=500"),
        ({"lines": 10, "journal_lines": 0}, None),
        ({"lines": 10}, "--lines=100"),
    ],
)
def test_build_command_line_cap(runner_for, kwargs, expected):
    cmd = runner_for(**kwargs).build_command()
    lines_args = [arg for arg in cmd if arg.startswith("--lines=")]
    assert lines_args == ([expected] if expected else [])


def test_build_command_statefile_mode(runner_for, tmp_path):
    runner = runner_for(statefile=tmp_path / "state.yaml", cursor_mode=CursorMode.STATEFILE)
    assert runner.build_command()[-1] == "--show-cursor"
    assert runner.build_command("s=abc;i=1")[-2:] == ["--show-cursor", "--after-cursor=s=abc;i=1"]


def test_exec_returns_stdout(runner_for, conn_mock, artifact):
    conn_mock.run_command.return_value = artifact(stdout=b"line\n")
    assert runner_for().exec() == b"line\n"
    conn_mock.run_command.assert_called_once()


def test_exec_passes_remaining_time(runner_for, conn_mock, artifact):
    conn_mock.run_command.return_value = artifact()
    runner_for().exec(Deadline(30))
    timeout = conn_mock.run_command.call_args.kwargs["timeout"]
    assert 0 < timeout <= 30


def test_exec_nonzero_exit(runner_for, conn_mock, artifact):
    conn_mock.run_command.return_value = artifact(
        stdout=b"partial\n", stderr="No journal files were found.\n", exit_code=1
    )
    with pytest.raises(ExecError) as exc_info:
        runner_for().exec()
    assert exc_info.value.exit_code == 1
    assert exc_info.value.stderr == "No journal files were found."
    assert exc_info.value.stdout == b"partial\n"


def test_exec_accepted_exit_codes(runner_for, conn_mock, artifact):
    conn_mock.run_command.return_value = artifact(stdout=b"line\n", exit_code=1)
    assert runner_for(ok_exit_codes=[0, 1]).exec() == b"line\n"


def test_exec_stderr_on_success_is_logged(runner_for, conn_mock, artifact, caplog):
    conn_mock.run_command.return_value = artifact(stdout=b"", stderr="Hint: permissions\n")
    with caplog.at_level("WARNING"):
        assert runner_for().exec() == b""
    assert "Hint: permissions" in caplog.text


def test_exec_launch_failure(runner_for, conn_mock):
    conn_mock.run_command.side_effect = FileNotFoundError(2, "No such file or directory")
    with pytest.raises(ExecError) as exc_info:
        runner_for(journalctl="/nonexistent/journalctl").exec()
    assert exc_info.value.exit_code is None
    assert str(exc_info.value).startswith("Failed to execute '/nonexistent/journalctl --no-pager")
    assert "No such file or directory" in str(exc_info.value)


def test_exec_timeout(runner_for, conn_mock):
    conn_mock.run_command.side_effect = subprocess.TimeoutExpired(["journalctl"], 0.5)
    with pytest.raises(CheckTimeout) as exc_info:
        runner_for().exec(Deadline(2))
    assert str(exc_info.value) == "timed out after 2s"


def test_exec_expired_deadline_does_not_run(runner_for, conn_mock, monkeypatch):
    deadline = Deadline(1)
    monkeypatch.setattr(deadline, "_expires", 0.0)
    with pytest.raises(CheckTimeout):
        runner_for().exec(deadline)
    conn_mock.run_command.assert_not_called()


def test_exec_retries_after_seek_failure(runner_for, conn_mock, artifact, tmp_path):
    cursor_file = tmp_path / "cursor"
    cursor_file.write_text("old-format\n")
    conn_mock.run_command.side_effect = [
        artifact(stderr=SEEK_FAILURE, exit_code=1),
        artifact(stdout=b"line\n"),
    ]

    assert runner_for(statefile=cursor_file).exec() == b"line\n"

    assert conn_mock.run_command.call_count == 2
    assert cursor_file.read_text() == ""


def test_exec_gives_up_after_second_seek_failure(runner_for, conn_mock, artifact, tmp_path):
    cursor_file = tmp_path / "cursor"
    cursor_file.write_text("old-format\n")
    conn_mock.run_command.return_value = artifact(stderr=SEEK_FAILURE, exit_code=1)

    with pytest.raises(ExecError) as exc_info:
        runner_for(statefile=cursor_file).exec()

    assert conn_mock.run_command.call_count == 2
    assert exc_info.value.stderr == SEEK_FAILURE.strip()


def test_exec_second_seek_failure_fails_even_on_success(
    runner_for, conn_mock, artifact, tmp_path
):
    conn_mock.run_command.return_value = artifact(stderr=SEEK_FAILURE, exit_code=0)
    with pytest.raises(ExecError) as exc_info:
        runner_for(statefile=tmp_path / "cursor").exec()
    assert conn_mock.run_command.call_count == 2
    assert "cannot seek to cursor" in str(exc_info.value)
    assert "exit code 0" in str(exc_info.value)


def test_exec_seek_failure_without_statefile_is_not_retried(runner_for, conn_mock, artifact):
    conn_mock.run_command.return_value = artifact(stderr=SEEK_FAILURE, exit_code=1)
    with pytest.raises(ExecError):
        runner_for().exec()
    conn_mock.run_command.assert_called_once()


def test_exec_statefile_mode_tracks_cursor(runner_for, conn_mock, artifact, tmp_path):
    state_path = tmp_path / "state.yaml"
    Statefile(state_path).update_cursor("s=old")
    conn_mock.run_command.return_value = artifact(stdout=b"line\n-- cursor: s=new\n")

    runner = runner_for(statefile=state_path, cursor_mode=CursorMode.STATEFILE)

    assert runner.exec() == b"line\n"
    assert conn_mock.run_command.call_args.args[0][-1] == "--after-cursor=s=old"
    assert Statefile.load(state_path).cursor == "s=new"


def test_exec_statefile_mode_unexpected_keys_read_by_span(
    runner_for, conn_mock, artifact, tmp_path
):
    state_path = tmp_path / "state.yaml"
    state_path.write_text("1: foo\n")
    conn_mock.run_command.return_value = artifact(stdout=b"line\n-- cursor: s=new\n")

    runner = runner_for(statefile=state_path, cursor_mode=CursorMode.STATEFILE)

    assert runner.exec() == b"line\n"
    assert conn_mock.run_command.call_args.args[0][-1] == "--show-cursor"
    assert Statefile.load(state_path).cursor == "s=new"


def test_exec_statefile_mode_resets_on_seek_failure(runner_for, conn_mock, artifact, tmp_path):
    state_path = tmp_path / "state.yaml"
    Statefile(state_path).update_cursor("garbage")
    conn_mock.run_command.side_effect = [
        artifact(stderr=SEEK_FAILURE, exit_code=1),
        artifact(stdout=b"-- cursor: s=fresh\n"),
    ]

    runner = runner_for(statefile=state_path, cursor_mode=CursorMode.STATEFILE)

    assert runner.exec() == b""
    assert conn_mock.run_command.call_args.args[0][-1] == "--show-cursor"
    assert Statefile.load(state_path).cursor == "s=fresh"


@pytest.mark.parametrize(
    "stdout, body, cursor",
    [
        (b"a\nb\n-- cursor: s=1;i=2\n", b"a\nb\n", "s=1;i=2"),
        (b"-- cursor: s=1", b"", "s=1"),
        (b"a\nb\n", b"a\nb\n", None),
        (b"", b"", None),
        (b"a\n-- cursor: \n", b"a\n", None),
    ],
)
def test_split_cursor(stdout, body, cursor):
    assert split_cursor(stdout) == (body, cursor)
