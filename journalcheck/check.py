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

from journalcheck.classifier import Classifier
from journalcheck.connection.inband import InBandConnection
from journalcheck.constants import DEFAULT_LOGGER
from journalcheck.models import CheckConfig, Outcome
from journalcheck.rules import Rules
from journalcheck.runner import CheckRunner
from journalcheck.timeout import Deadline


class Check:
    """Controls one check execution: load rules, run journalctl, classify output"""

    def __init__(
        self,
        config: CheckConfig,
        connection: Optional[InBandConnection] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.config = config
        self.logger = logger or logging.getLogger(DEFAULT_LOGGER)
        self.runner = CheckRunner(config, connection=connection, logger=self.logger)

    def examine(self, raw: bytes, rules: Rules) -> Outcome:
        """Turn journalctl output into an outcome

        Args:
            raw (bytes): journalctl stdout
            rules (Rules): compiled rules

        Returns:
            Outcome: OK "no output" for empty output, classification result otherwise
        """
        if not raw:
            self.logger.info("journalctl returned no output")
            return Outcome.no_output()
        classifier = Classifier(
            rules, lines=self.config.line_limit, max_bytes=self.config.byte_limit
        )
        return classifier.evaluate(raw)

    def run(self, deadline: Optional[Deadline] = None) -> Outcome:
        """Execute the check

        Args:
            deadline (Optional[Deadline], optional): run deadline, created from the configured
                timeout if not given. Defaults to None.

        Raises:
            CheckError: on any fatal error (rules, journalctl, timeout)

        Returns:
            Outcome: check result
        """
        deadline = deadline or Deadline(self.config.timeout)
        rules = Rules.load(self.config.rules, deadline=deadline)
        raw = self.runner.exec(deadline=deadline)
        return self.examine(raw, rules)
