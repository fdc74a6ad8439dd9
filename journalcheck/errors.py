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


class CheckError(Exception):
    """Base class for errors which abort a check run with an UNKNOWN result"""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.details = details or {}


class CompileError(CheckError):
    """A rule pattern could not be compiled"""

    def __init__(self, label: str, kind: str, index: int, pattern: str, reason: str):
        self.label = label
        self.kind = kind
        self.index = index
        self.pattern = pattern
        self.reason = reason
        super().__init__(
            f"Failed to load {label} {kind}: #{index} {pattern!r}: {reason}",
            details={
                "label": label,
                "kind": kind,
                "index": index,
                "pattern": pattern,
                "reason": reason,
            },
        )


class LoadError(CheckError):
    """Rules source could not be retrieved or parsed"""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(
            f"Failed to load rules from {source}: {reason}",
            details={"source": source, "reason": reason},
        )


class ExecError(CheckError):
    """journalctl could not be launched or exited with an unexpected status"""

    def __init__(
        self,
        command: str,
        exit_code: Optional[int],
        stderr: str = "",
        stdout: bytes = b"",
        reason: Optional[str] = None,
    ):
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr
        self.stdout = stdout
        self.reason = reason
        if exit_code is None:
            message = f"Failed to execute '{command}': {stderr}"
        elif reason:
            message = f"journalctl failed: {reason} (exit code {exit_code})"
        else:
            message = f"journalctl failed with exit code {exit_code}"
        super().__init__(
            message,
            details={
                "command": command,
                "exit_code": exit_code,
                "stderr": stderr,
                "stdout_bytes": len(stdout),
                "reason": reason,
            },
        )


class CheckTimeout(CheckError):
    """Run deadline expired before the check finished"""

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"timed out after {timeout:g}s", details={"timeout": timeout})
