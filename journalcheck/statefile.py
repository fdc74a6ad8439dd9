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
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, ValidationError

from journalcheck.constants import DEFAULT_LOGGER

logger = logging.getLogger(DEFAULT_LOGGER)


class State(BaseModel):
    """What actually gets written to disk"""

    cursor: str = ""


class Statefile:
    """Cursor state file owned by the check

    A missing, empty or unreadable file means "no cursor": the next run reads the
    configured span instead.
    """

    def __init__(self, filename: Union[str, Path], state: Optional[State] = None):
        self.filename = Path(filename)
        self.state = state or State()

    @classmethod
    def load(cls, filename: Union[str, Path]) -> "Statefile":
        """Load state, touching the file if it does not exist

        Args:
            filename (Union[str, Path]): state file name

        Raises:
            OSError: if a missing state file cannot be created

        Returns:
            Statefile: loaded or empty state
        """
        filename = Path(filename)
        try:
            with open(filename, "r", encoding="utf-8") as state_file:
                data = yaml.safe_load(state_file)
            if isinstance(data, dict):
                return cls(filename, State.model_validate(data))
            if data is not None:
                logger.warning("Ignoring malformed state file %s", filename)
        except FileNotFoundError:
            filename.touch()
        except (OSError, yaml.YAMLError, ValidationError) as e:
            logger.warning("Ignoring unreadable state file %s: %s", filename, e)

        return cls(filename)

    @property
    def cursor(self) -> str:
        return self.state.cursor

    def update_cursor(self, new_cursor: str) -> None:
        """Persist a new cursor

        Written to a temp file and moved into place so an interrupted write never
        leaves a partial document behind.

        Args:
            new_cursor (str): cursor reported by journalctl
        """
        self.state = State(cursor=new_cursor)
        self._write(yaml.safe_dump(self.state.model_dump(), default_flow_style=False))

    def reset(self) -> None:
        """Truncate the state file so the next read falls back to the span"""
        logger.info("Resetting state file %s", self.filename)
        self.state = State()
        self._write("")

    def _write(self, content: str) -> None:
        directory = self.filename.parent
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.filename.name}.", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp_file:
                tmp_file.write(content)
            os.replace(tmp_name, self.filename)
        except BaseException:
            os.unlink(tmp_name)
            raise


def reset_statefile(filename: Union[str, Path]) -> None:
    """Truncate a state file whose format only journalctl knows

    Args:
        filename (Union[str, Path]): state file name
    """
    logger.info("Truncating state file %s", filename)
    with open(filename, "w", encoding="utf-8"):
        pass
