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
import logging
import subprocess
from typing import Optional

from journalcheck.connection.inband import CommandArtifact, InBandConnection, LocalShell
from journalcheck.constants import (
    CURSOR_LINE_PREFIX,
    DEFAULT_LOGGER,
    SEEK_FAILURE_MARKER,
)
from journalcheck.enums import CursorMode
from journalcheck.errors import CheckError, CheckTimeout, ExecError
from journalcheck.models import CheckConfig
from journalcheck.statefile import Statefile, reset_statefile
from journalcheck.timeout import Deadline, remaining
from journalcheck.utils import join_command


def split_cursor(stdout: bytes) -> tuple[bytes, Optional[str]]:
    """Separate the trailing '-- cursor: ...' line printed by journalctl --show-cursor

    Args:
        stdout (bytes): journalctl output

    Returns:
        tuple[bytes, Optional[str]]: output without the cursor line, and the cursor if present
    """
    body = stdout[:-1] if stdout.endswith(b"\n") else stdout
    start = body.rfind(b"\n") + 1
    if not body.startswith(CURSOR_LINE_PREFIX, start):
        return stdout, None
    cursor = body[start + len(CURSOR_LINE_PREFIX) :].decode("utf-8", errors="replace").strip()
    return stdout[:start], cursor or None


class CheckRunner:
    """Executes journalctl and hands back its raw output"""

    def __init__(
        self,
        config: CheckConfig,
        connection: Optional[InBandConnection] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.config = config
        self.logger = logger or logging.getLogger(DEFAULT_LOGGER)
        self.connection = connection or LocalShell(logger=self.logger)

    @property
    def owns_statefile(self) -> bool:
        return self.config.statefile is not None and self.config.cursor_mode == CursorMode.STATEFILE

    def build_command(self, cursor: Optional[str] = None) -> list[str]:
        """Build the journalctl invocation

        Args:
            cursor (Optional[str], optional): cursor to continue after, only used when the
                check owns the state file. Defaults to None.

        Returns:
            list[str]: argument vector
        """
        cfg = self.config
        cmd = [cfg.journalctl, "--no-pager"]
        if cfg.journal_line_cap is not None:
            cmd.append(f"--lines={cfg.journal_line_cap}")
        cmd.append(f"--since=-{cfg.span}")
        if cfg.user:
            cmd.append("--user")
        cmd.extend(f"--unit={unit}" for unit in cfg.units)

        if cfg.statefile is not None:
            if cfg.cursor_mode == CursorMode.JOURNAL:
                cmd.append(f"--cursor-file={cfg.statefile}")
            else:
                cmd.append("--show-cursor")
                if cursor:
                    cmd.append(f"--after-cursor={cursor}")
        return cmd

    def exec(self, deadline: Optional[Deadline] = None) -> bytes:
        """Run journalctl, retrying once if the stored cursor is unusable

        Args:
            deadline (Optional[Deadline], optional): run deadline. Defaults to None.

        Raises:
            ExecError: if journalctl cannot be launched or exits with an unexpected status
            CheckTimeout: if the deadline expires

        Returns:
            bytes: captured stdout
        """
        statefile = self._load_statefile()
        res = self._run(self.build_command(statefile.cursor if statefile else None), deadline)

        if self.config.statefile is not None and SEEK_FAILURE_MARKER in res.stderr:
            # Probably an old-style state file. Truncate it and try again, exactly once.
            self.logger.warning(
                "journalctl cannot seek to stored cursor, resetting %s and retrying",
                self.config.statefile,
            )
            self._reset_statefile(statefile)
            res = self._run(self.build_command(), deadline)
            if SEEK_FAILURE_MARKER in res.stderr:
                raise ExecError(
                    res.command,
                    res.exit_code,
                    res.stderr_stripped,
                    stdout=res.stdout,
                    reason="cannot seek to cursor after resetting the state file",
                )

        self._check_exit(res)

        stdout = res.stdout
        if statefile is not None:
            stdout, cursor = split_cursor(stdout)
            if cursor:
                statefile.update_cursor(cursor)
        return stdout

    def _run(self, command: list[str], deadline: Optional[Deadline]) -> CommandArtifact:
        timeout = remaining(deadline)
        try:
            res = self.connection.run_command(command, timeout=timeout)
        except subprocess.TimeoutExpired as e:
            raise CheckTimeout(deadline.timeout if deadline else e.timeout) from e
        except OSError as e:
            raise ExecError(join_command(command), None, e.strerror or str(e)) from e

        self.logger.debug(
            "%s exited with %d, %d bytes stdout", res.command, res.exit_code, len(res.stdout)
        )
        return res

    def _check_exit(self, res: CommandArtifact) -> None:
        if res.exit_code not in self.config.ok_exit_codes:
            raise ExecError(res.command, res.exit_code, res.stderr_stripped, stdout=res.stdout)
        if res.stderr_stripped:
            self.logger.warning("journalctl stderr: %s", res.stderr_stripped)

    def _load_statefile(self) -> Optional[Statefile]:
        if not self.owns_statefile:
            return None
        try:
            return Statefile.load(self.config.statefile)
        except OSError as e:
            raise CheckError(f"Cannot create state file {self.config.statefile}: {e}") from e

    def _reset_statefile(self, statefile: Optional[Statefile]) -> None:
        try:
            if statefile is not None:
                statefile.reset()
            else:
                reset_statefile(self.config.statefile)
        except OSError as e:
            raise CheckError(f"Cannot reset state file {self.config.statefile}: {e}") from e
