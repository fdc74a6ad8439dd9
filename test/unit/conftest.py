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
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from journalcheck.connection.inband import CommandArtifact
from journalcheck.models import CheckConfig
from journalcheck.rules import Rules


@pytest.fixture
def fixtures_path():
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def rules_path(fixtures_path):
    return fixtures_path / "rules.yaml"


@pytest.fixture
def rules(rules_path):
    return Rules.load(str(rules_path))


@pytest.fixture
def simple_rules():
    return Rules.parse("criticalpatterns: ['error']\nwarningpatterns: ['warn']\n")


@pytest.fixture
def journal(fixtures_path):
    return (fixtures_path / "journal.txt").read_bytes()


@pytest.fixture
def conn_mock():
    return MagicMock()


@pytest.fixture
def logger():
    return logging.getLogger("test_logger")


@pytest.fixture
def make_config(rules_path):
    def _make(**kwargs) -> CheckConfig:
        kwargs.setdefault("rules", str(rules_path))
        return CheckConfig(**kwargs)

    return _make


@pytest.fixture
def artifact():
    def _artifact(stdout=b"", stderr="", exit_code=0, command="journalctl --no-pager"):
        return CommandArtifact(command=command, stdout=stdout, stderr=stderr, exit_code=exit_code)

    return _artifact
