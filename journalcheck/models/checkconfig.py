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
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from journalcheck.constants import JOURNAL_LINES_FACTOR
from journalcheck.enums import CursorMode


class CheckConfig(BaseModel):
    """Fully resolved configuration for one check run"""

    rules: str
    """Rules YAML, local file name or URL"""

    journalctl: str = "journalctl"
    """journalctl executable to call"""

    span: str = "601s"
    """Read journal entries from the last span (journalctl time suffixes accepted)"""

    units: list[str] = Field(default_factory=list)
    """Restrict journal entries to these units"""

    user: bool = False
    """Read the user journal instead of the system journal"""

    statefile: Optional[Path] = None
    """Cursor state file for incremental reads"""

    cursor_mode: CursorMode = CursorMode.JOURNAL

    lines: int = Field(default=25, ge=0)
    """Maximum lines shown per category, 0 for no limit"""

    max_bytes: int = Field(default=8192, ge=0)
    """Truncate the rendered message to this many bytes, 0 for no limit"""

    timeout: float = Field(default=60, gt=0)
    """Abort the run after this many seconds"""

    journal_lines: Optional[int] = Field(default=None, ge=0)
    """Explicit journalctl --lines cap, defaults to a multiple of lines"""

    ok_exit_codes: list[int] = Field(default_factory=lambda: [0])

    @field_validator("span")
    @classmethod
    def validate_span(cls, span: str) -> str:
        """Ensure span is a single non-empty token

        Args:
            span (str): span input

        Raises:
            ValueError: if span is empty or contains whitespace

        Returns:
            str: span without leading '-'
        """
        span = span.strip().lstrip("-")
        if not span or any(c.isspace() for c in span):
            raise ValueError(f"invalid time span: {span!r}")
        return span

    @field_validator("units", mode="before")
    @classmethod
    def validate_units(cls, units):
        if units is None:
            return []
        if isinstance(units, str):
            return [units]
        return [unit for unit in units if unit]

    @field_validator("ok_exit_codes")
    @classmethod
    def validate_ok_exit_codes(cls, codes: list[int]) -> list[int]:
        if not codes:
            raise ValueError("at least one accepted exit code is required")
        return codes

    @property
    def line_limit(self) -> Optional[int]:
        """Per-category display limit, None when unlimited"""
        return self.lines or None

    @property
    def byte_limit(self) -> Optional[int]:
        """Message byte budget, None when unlimited"""
        return self.max_bytes or None

    @property
    def journal_line_cap(self) -> Optional[int]:
        """Value for journalctl --lines, None when journalctl output is not capped"""
        if self.journal_lines is not None:
            return self.journal_lines or None
        if self.line_limit is None:
            return None
        return JOURNAL_LINES_FACTOR * self.line_limit
