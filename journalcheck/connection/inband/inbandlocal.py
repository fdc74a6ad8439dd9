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
from typing import Optional, Sequence

from journalcheck.constants import DEFAULT_LOGGER
from journalcheck.utils import join_command

from .inband import CommandArtifact, InBandConnection


class LocalShell(InBandConnection):

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(DEFAULT_LOGGER)

    def run_command(
        self, command: Sequence[str], timeout: Optional[float] = None
    ) -> CommandArtifact:
        """Run a local command

        The child gets /dev/null as stdin so it can never wait for interactive input.
        On timeout the child is killed and subprocess.TimeoutExpired propagates.

        Args:
            command (Sequence[str]): argument vector, first item is the executable
            timeout (Optional[float], optional): timeout for command in seconds. Defaults to None.

        Raises:
            OSError: if the executable cannot be launched
            subprocess.TimeoutExpired: if the command does not finish in time

        Returns:
            CommandArtifact: command result object
        """
        self.logger.debug("Running command: %s", join_command(command))
        res = subprocess.run(
            list(command),
            stdin=subprocess.DEVNULL,
            capture_output=True,
            timeout=timeout,
            check=False,
        )

        return CommandArtifact(
            command=join_command(command),
            stdout=res.stdout,
            stderr=res.stderr.decode("utf-8", errors="replace"),
            exit_code=res.returncode,
        )
