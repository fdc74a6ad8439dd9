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
import argparse


def non_negative_int(arg: str) -> int:
    """argparse type for counts where 0 means unlimited

    Args:
        arg (str): raw argument

    Raises:
        argparse.ArgumentTypeError: if arg is not an integer >= 0

    Returns:
        int: parsed value
    """
    try:
        value = int(arg)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected an integer, got {arg!r}") from e
    if value < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {value}")
    return value


def positive_float(arg: str) -> float:
    """argparse type for durations in seconds

    Args:
        arg (str): raw argument

    Raises:
        argparse.ArgumentTypeError: if arg is not a number > 0

    Returns:
        float: parsed value
    """
    try:
        value = float(arg)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected a number, got {arg!r}") from e
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {arg}")
    return value
