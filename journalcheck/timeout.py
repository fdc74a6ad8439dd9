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
import time
from typing import Optional

from journalcheck.errors import CheckTimeout


class Deadline:
    """Caller-owned time budget for one check run

    The budget starts counting when the object is created. Blocking calls ask for
    ``remaining()`` and pass it on as their own timeout.
    """

    def __init__(self, timeout: float):
        self.timeout = timeout
        self._expires = time.monotonic() + timeout

    def remaining(self) -> float:
        """Seconds left in the budget

        Raises:
            CheckTimeout: if the budget is spent

        Returns:
            float: remaining seconds, always > 0
        """
        left = self._expires - time.monotonic()
        if left <= 0:
            raise CheckTimeout(self.timeout)
        return left

    def cap(self, value: float) -> float:
        """Limit a per-operation timeout to the remaining budget"""
        return min(value, self.remaining())


def remaining(deadline: Optional[Deadline]) -> Optional[float]:
    """Remaining seconds of an optional deadline, None means unbounded"""
    return deadline.remaining() if deadline is not None else None
