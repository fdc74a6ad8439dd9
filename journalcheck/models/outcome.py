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
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_serializer

from journalcheck.constants import PROGRAM_NAME
from journalcheck.enums import CheckStatus
from journalcheck.errors import CheckError, ExecError


class Status(BaseModel):
    """Severity of a finished run plus the numbers behind it"""

    model_config = ConfigDict(frozen=True)

    state: CheckStatus
    summary: str = ""
    critical: int = 0
    warning: int = 0

    @field_serializer("state")
    def serialize_state(self, state: CheckStatus, _info) -> str:
        """Use state name when serializing status

        Args:
            state (CheckStatus): state enum

        Returns:
            str: state name string
        """
        return state.name

    @classmethod
    def ok(cls, summary: str) -> "Status":
        return cls(state=CheckStatus.OK, summary=summary)

    @classmethod
    def warn(cls, warning: int) -> "Status":
        return cls(state=CheckStatus.WARNING, warning=warning)

    @classmethod
    def crit(cls, critical: int, warning: int) -> "Status":
        return cls(state=CheckStatus.CRITICAL, critical=critical, warning=warning)

    @classmethod
    def unknown(cls, summary: str) -> "Status":
        return cls(state=CheckStatus.UNKNOWN, summary=summary)

    @property
    def keyword(self) -> str:
        return self.state.name

    @property
    def exit_code(self) -> int:
        return self.state.exit_code

    def describe(self) -> str:
        """Human readable one-line summary

        Returns:
            str: summary text
        """
        if self.state == CheckStatus.CRITICAL:
            return f"{self.critical} critical, {self.warning} warning line(s) found"
        if self.state == CheckStatus.WARNING:
            return f"{self.warning} warning line(s) found"
        return self.summary


class Outcome(BaseModel):
    """End-to-end result of one run: status plus rendered match listing"""

    status: Status
    message: bytes = b""

    @classmethod
    def no_output(cls) -> "Outcome":
        return cls(status=Status.ok("no output"))

    @classmethod
    def from_error(cls, exception: Exception) -> "Outcome":
        """Build an UNKNOWN outcome for an aborted run

        Args:
            exception (Exception): error which aborted the run

        Returns:
            Outcome: outcome carrying the error text, and journalctl output if available
        """
        if isinstance(exception, CheckError):
            summary = str(exception)
        else:
            summary = f"{type(exception).__name__}: {exception}"

        message = b""
        if isinstance(exception, ExecError):
            if exception.stdout:
                message += b"\n*** stdout ***\n" + exception.stdout
                if not exception.stdout.endswith(b"\n"):
                    message += b"\n"
            if exception.stderr:
                message += b"\n*** stderr ***\n" + exception.stderr.encode("utf-8", "replace") + b"\n"

        return cls(status=Status.unknown(summary), message=message)

    @property
    def exit_code(self) -> int:
        return self.status.exit_code

    def render(self, program: Optional[str] = None) -> bytes:
        """Render the plugin output: status line followed by the message

        Args:
            program (Optional[str], optional): program name for the status line. Defaults to None.

        Returns:
            bytes: full plugin output
        """
        line = f"{program or PROGRAM_NAME} {self.status.keyword} - {self.status.describe()}\n"
        return line.encode("utf-8") + self.message
