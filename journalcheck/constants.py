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
DEFAULT_LOGGER = "journalcheck"

PROGRAM_NAME = "check_journal"

# Preamble journalctl prints before the first entry, never classified
LOG_BEGIN_PREFIX = b"-- Logs begin "

# Printed by journalctl --show-cursor after the last entry
CURSOR_LINE_PREFIX = b"-- cursor: "

# journalctl stderr when the stored cursor is incompatible or corrupted
SEEK_FAILURE_MARKER = "Failed to seek to cursor"

TRUNCATION_MARKER = b"\n*** output truncated ***\n"

RULES_CONNECT_TIMEOUT = 30.0
RULES_READ_TIMEOUT = 300.0

# journalctl --lines cap relative to the display limit, bounds memory use
JOURNAL_LINES_FACTOR = 10
