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
from typing import Iterator

from journalcheck.enums import MatchCategory

LineView = tuple[int, int]


class Collection:
    """Matched lines grouped by category

    Lines are kept as (start, stop) offsets into the raw journalctl output, the
    buffer itself is owned by the run and outlives the collection.
    """

    def __init__(self, raw: bytes):
        self.raw = raw
        self.critical: list[LineView] = []
        self.warning: list[LineView] = []

    def add(self, category: MatchCategory, view: LineView) -> None:
        if category == MatchCategory.CRITICAL:
            self.critical.append(view)
        else:
            self.warning.append(view)

    def views(self, category: MatchCategory) -> list[LineView]:
        return self.critical if category == MatchCategory.CRITICAL else self.warning

    def count(self, category: MatchCategory) -> int:
        return len(self.views(category))

    def lines(self, category: MatchCategory) -> Iterator[memoryview]:
        """Iterate over matched lines without copying them out of the raw buffer

        Args:
            category (MatchCategory): category to iterate

        Yields:
            memoryview: view of one matched line, without line terminator
        """
        buf = memoryview(self.raw)
        for start, stop in self.views(category):
            yield buf[start:stop]
