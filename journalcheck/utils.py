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
import shlex
import traceback
from typing import Sequence


def get_exception_traceback(exception: Exception) -> dict:
    """get traceback and exception type from an exception

    Args:
        exception (Exception): exception

    Returns:
        dict: exception details dict
    """
    return {
        "exception_type": type(exception).__name__,
        "traceback": traceback.format_tb(exception.__traceback__),
    }


def is_url(source: str) -> bool:
    """Check if a rules source refers to a remote location

    Args:
        source (str): file name or URL

    Returns:
        bool: True if source contains a scheme separator
    """
    return "://" in source


def join_command(command: Sequence[str]) -> str:
    """Render an argument vector as a shell-quoted string for messages

    Args:
        command (Sequence[str]): argument vector

    Returns:
        str: printable command line
    """
    return shlex.join(command)
