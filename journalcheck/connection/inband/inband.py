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
import abc
from typing import Optional, Sequence

from pydantic import BaseModel


class CommandArtifact(BaseModel):
    """Artifact for the result of command execution"""

    command: str
    stdout: bytes
    stderr: str
    exit_code: int

    @property
    def stderr_stripped(self) -> str:
        return self.stderr.strip()


class InBandConnection(abc.ABC):

    @abc.abstractmethod
    def run_command(
        self, command: Sequence[str], timeout: Optional[float] = None
    ) -> CommandArtifact:
        """Run a command with closed stdin, capturing stdout and stderr separately

        Args:
            command (Sequence[str]): argument vector, first item is the executable
            timeout (Optional[float], optional): timeout for command in seconds. Defaults to None.

        Returns:
            CommandArtifact: command result object
        """
