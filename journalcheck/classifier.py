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
from typing import Optional

from journalcheck.constants import DEFAULT_LOGGER, LOG_BEGIN_PREFIX, TRUNCATION_MARKER
from journalcheck.enums import MatchCategory
from journalcheck.models import Collection, Outcome, Status
from journalcheck.rules import Rules

logger = logging.getLogger(DEFAULT_LOGGER)


def utf8_boundary(data: bytes, limit: int) -> int:
    """Largest cut position <= limit which does not split a UTF-8 sequence"""
    limit = min(limit, len(data))
    while 0 < limit < len(data) and data[limit] & 0xC0 == 0x80:
        limit -= 1
    return limit


class Classifier:
    """Sorts journal lines into critical and warning hits and renders the report"""

    def __init__(
        self,
        rules: Rules,
        lines: Optional[int] = None,
        max_bytes: Optional[int] = None,
    ):
        """
        Args:
            rules (Rules): compiled rules
            lines (Optional[int], optional): lines shown per category, 0 or None for no limit.
                Defaults to None.
            max_bytes (Optional[int], optional): message byte budget, 0 or None for no limit.
                Defaults to None.
        """
        self.rules = rules
        self.lines = lines or None
        self.max_bytes = max_bytes or None

    def collect(self, raw: bytes) -> Collection:
        """Classify every line of raw journalctl output

        Empty lines and the '-- Logs begin' preamble are skipped.

        Args:
            raw (bytes): journalctl stdout

        Returns:
            Collection: matched line views
        """
        collection = Collection(raw)
        buf = memoryview(raw)
        start = 0
        size = len(raw)
        while start < size:
            stop = raw.find(b"\n", start)
            if stop == -1:
                stop = size
            if stop > start and not raw.startswith(LOG_BEGIN_PREFIX, start):
                category = self.rules.classify(buf[start:stop])
                if category is not None:
                    collection.add(category, (start, stop))
            start = stop + 1
        return collection

    def render_section(self, collection: Collection, category: MatchCategory) -> bytes:
        """Render the listing for one category

        Args:
            collection (Collection): matched lines
            category (MatchCategory): category to render

        Returns:
            bytes: section text, empty if the category has no hits
        """
        count = collection.count(category)
        if not count:
            return b""

        truncated = self.lines is not None and count > self.lines
        header = f"\n*** {category.value} hits{' (truncated)' if truncated else ''} ***\n\n"
        out = bytearray(header.encode("utf-8"))
        for index, line in enumerate(collection.lines(category)):
            if self.lines is not None and index >= self.lines:
                break
            out += line
            out += b"\n"
        return bytes(out)

    def render(self, collection: Collection) -> bytes:
        """Render critical then warning sections and apply the byte budget

        Args:
            collection (Collection): matched lines

        Returns:
            bytes: report message
        """
        message = self.render_section(collection, MatchCategory.CRITICAL) + self.render_section(
            collection, MatchCategory.WARNING
        )
        if self.max_bytes is not None and len(message) > self.max_bytes:
            logger.debug("Truncating %d byte message to %d bytes", len(message), self.max_bytes)
            message = message[: utf8_boundary(message, self.max_bytes)] + TRUNCATION_MARKER
        return message

    @staticmethod
    def status(collection: Collection) -> Status:
        """Derive severity from true match counts

        Args:
            collection (Collection): matched lines

        Returns:
            Status: CRITICAL if any critical hit, WARNING if any warning hit, OK otherwise
        """
        crit = collection.count(MatchCategory.CRITICAL)
        warn = collection.count(MatchCategory.WARNING)
        if crit:
            return Status.crit(crit, warn)
        if warn:
            return Status.warn(warn)
        return Status.ok("no matches")

    def evaluate(self, raw: bytes) -> Outcome:
        """Classify journalctl output and build the outcome

        Args:
            raw (bytes): journalctl stdout

        Returns:
            Outcome: status and rendered message
        """
        collection = self.collect(raw)
        outcome = Outcome(status=self.status(collection), message=self.render(collection))
        logger.info(
            "Classified output: %d critical, %d warning",
            collection.count(MatchCategory.CRITICAL),
            collection.count(MatchCategory.WARNING),
        )
        return outcome
