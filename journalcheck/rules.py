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
import re
from typing import Optional, Sequence, Union

import requests
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from journalcheck.constants import (
    DEFAULT_LOGGER,
    RULES_CONNECT_TIMEOUT,
    RULES_READ_TIMEOUT,
)
from journalcheck.enums import MatchCategory
from journalcheck.errors import CompileError, LoadError
from journalcheck.timeout import Deadline
from journalcheck.utils import is_url

logger = logging.getLogger(DEFAULT_LOGGER)

Line = Union[str, bytes, memoryview]


def _compile(patterns: Sequence[str], label: str, kind: str) -> tuple[re.Pattern, ...]:
    compiled = []
    for index, pattern in enumerate(patterns, start=1):
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            raise CompileError(label, kind, index, pattern, str(e)) from e
    return tuple(compiled)


def _as_text(line: Line) -> str:
    if isinstance(line, str):
        return line
    return bytes(line).decode("utf-8", errors="replace")


class RuleSet:
    """Pair of regular expression sets for matching and excepting lines"""

    def __init__(
        self,
        patterns: Sequence[str] = (),
        exceptions: Sequence[str] = (),
        label: str = "",
    ):
        """Create rule set from match patterns and exceptions

        Args:
            patterns (Sequence[str], optional): match patterns. Defaults to ().
            exceptions (Sequence[str], optional): exception patterns. Defaults to ().
            label (str, optional): category name used in error messages. Defaults to "".

        Raises:
            CompileError: for the first pattern which is not a valid regular expression
        """
        self.label = label
        self.matches = _compile(patterns, label, "patterns")
        self.exceptions = _compile(exceptions, label, "exceptions")

    def is_match(self, line: Line) -> bool:
        """Returns true if line matches a pattern but no exception

        Args:
            line (Line): journal line, bytes are decoded as UTF-8

        Returns:
            bool: match result
        """
        if not self.matches:
            return False
        text = _as_text(line)
        return any(p.search(text) for p in self.matches) and not any(
            p.search(text) for p in self.exceptions
        )

    def __len__(self) -> int:
        return len(self.matches)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(label={self.label!r}, "
            f"matches={len(self.matches)}, exceptions={len(self.exceptions)})"
        )


class RulesDocument(BaseModel):
    """On-disk layout of a rules YAML file"""

    model_config = ConfigDict(extra="allow")

    criticalpatterns: list[str] = Field(default_factory=list)
    criticalexceptions: list[str] = Field(default_factory=list)
    warningpatterns: list[str] = Field(default_factory=list)
    warningexceptions: list[str] = Field(default_factory=list)

    @field_validator(
        "criticalpatterns",
        "criticalexceptions",
        "warningpatterns",
        "warningexceptions",
        mode="before",
    )
    @classmethod
    def validate_pattern_list(cls, value):
        """Treat null sections as empty lists

        Args:
            value: raw YAML value

        Raises:
            ValueError: if value is not a list

        Returns:
            list: pattern list
        """
        if value is None:
            return []
        if not isinstance(value, list):
            raise ValueError("must be a list of regular expressions")
        return value


class Rules:
    """Pair of rule sets for critical and warning rules"""

    def __init__(self, critical: Optional[RuleSet] = None, warning: Optional[RuleSet] = None):
        self.critical = critical or RuleSet(label=MatchCategory.CRITICAL.value)
        self.warning = warning or RuleSet(label=MatchCategory.WARNING.value)

    @classmethod
    def from_document(cls, document: RulesDocument) -> "Rules":
        return cls(
            critical=RuleSet(
                document.criticalpatterns,
                document.criticalexceptions,
                MatchCategory.CRITICAL.value,
            ),
            warning=RuleSet(
                document.warningpatterns,
                document.warningexceptions,
                MatchCategory.WARNING.value,
            ),
        )

    @classmethod
    def parse(cls, content: Union[str, bytes], source: str = "<string>") -> "Rules":
        """Parse a rules YAML document

        Args:
            content (Union[str, bytes]): YAML text
            source (str, optional): file name or URL for error messages. Defaults to "<string>".

        Raises:
            LoadError: if YAML is malformed, has the wrong shape or contains invalid patterns

        Returns:
            Rules: compiled rules
        """
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise LoadError(source, f"parse YAML: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise LoadError(source, "top level must be a mapping")

        try:
            document = RulesDocument(**{str(k): v for k, v in data.items()})
        except ValidationError as e:
            raise LoadError(source, f"invalid rules document: {e}") from e

        if document.model_extra:
            logger.debug(
                "Ignoring unknown keys in %s: %s", source, ", ".join(document.model_extra)
            )

        try:
            rules = cls.from_document(document)
        except CompileError as e:
            raise LoadError(source, str(e)) from e

        logger.debug("Loaded rules from %s: %s, %s", source, rules.critical, rules.warning)
        return rules

    @classmethod
    def load(cls, source: str, deadline: Optional[Deadline] = None) -> "Rules":
        """Gets the rules YAML document from either a local file path or the net

        Args:
            source (str): file name or URL
            deadline (Optional[Deadline], optional): run deadline bounding the download. Defaults to None.

        Raises:
            LoadError: if the source cannot be read or parsed
            CheckTimeout: if the deadline is already spent

        Returns:
            Rules: compiled rules
        """
        source = str(source)
        if is_url(source):
            return cls.parse(cls._fetch(source, deadline), source)

        try:
            with open(source, "rb") as rules_file:
                content = rules_file.read()
        except OSError as e:
            raise LoadError(source, f"cannot open rules file: {e.strerror or e}") from e

        return cls.parse(content, source)

    @staticmethod
    def _fetch(url: str, deadline: Optional[Deadline] = None) -> bytes:
        connect_timeout, read_timeout = RULES_CONNECT_TIMEOUT, RULES_READ_TIMEOUT
        if deadline is not None:
            connect_timeout = deadline.cap(connect_timeout)
            read_timeout = deadline.cap(read_timeout)

        logger.info("Retrieving remote rules from %s", url)
        try:
            response = requests.get(url, timeout=(connect_timeout, read_timeout))
        except requests.exceptions.RequestException as e:
            raise LoadError(url, f"request failed: {e}") from e

        if not response.ok:
            raise LoadError(url, f"HTTP {response.status_code} {response.reason}")

        return response.content

    def classify(self, line: Line) -> Optional[MatchCategory]:
        """Apply critical rules first, then warning rules

        Args:
            line (Line): journal line

        Returns:
            Optional[MatchCategory]: first matching category or None
        """
        if self.critical.is_match(line):
            return MatchCategory.CRITICAL
        if self.warning.is_match(line):
            return MatchCategory.WARNING
        return None
