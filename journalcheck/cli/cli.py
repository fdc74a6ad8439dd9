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
import logging
import sys
from typing import Optional

from pydantic import ValidationError

from journalcheck import __version__
from journalcheck.check import Check
from journalcheck.constants import DEFAULT_LOGGER, PROGRAM_NAME
from journalcheck.enums import CheckStatus, CursorMode
from journalcheck.errors import CheckError
from journalcheck.models import CheckConfig, Outcome
from journalcheck.utils import get_exception_traceback

from .inputargtypes import non_negative_int, positive_float


class PluginArgumentParser(argparse.ArgumentParser):
    """Argument parser reporting usage errors as UNKNOWN, not with exit code 2 (CRITICAL)"""

    def error(self, message: str):
        self.print_usage(sys.stderr)
        sys.stdout.write(f"{self.prog} UNKNOWN - {message}\n")
        sys.exit(CheckStatus.UNKNOWN.exit_code)


def build_parser() -> argparse.ArgumentParser:
    """Build an argument parser

    Returns:
        argparse.ArgumentParser: check_journal argument parser
    """
    parser = PluginArgumentParser(
        prog=PROGRAM_NAME,
        description="Nagios/Icinga compatible plugin to search journalctl output for matching lines",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument("rules", metavar="RULES_YAML", help="match patterns (file name or URL)")

    parser.add_argument(
        "-j", "--journalctl", default="journalctl", metavar="PATH", help="Executable to call"
    )

    parser.add_argument(
        "-s",
        "--span",
        default="601s",
        metavar="TIMESPEC",
        help="Reads journal entries from the last TIMESPEC (time suffixes accepted)",
    )

    parser.add_argument(
        "-u",
        "--unit",
        dest="units",
        action="append",
        default=[],
        metavar="UNIT",
        help="Restrict to journal entries of UNIT, may be given multiple times",
    )

    parser.add_argument("--user", action="store_true", help="Read the user journal")

    parser.add_argument(
        "-f",
        "--statefile",
        default=None,
        metavar="PATH",
        help="Continue reading after the cursor stored in PATH",
    )

    parser.add_argument(
        "--cursor-mode",
        choices=[mode.value for mode in CursorMode],
        default=CursorMode.JOURNAL.value,
        help="Let journalctl manage the state file, or store the cursor as YAML",
    )

    parser.add_argument(
        "-l",
        "--lines",
        "--limit",
        type=non_negative_int,
        default=25,
        metavar="N",
        help="Shows maximum N lines for critical/warning matches, 0 for no limit",
    )

    parser.add_argument(
        "-b",
        "--bytes",
        dest="max_bytes",
        type=non_negative_int,
        default=8192,
        metavar="B",
        help="Truncates output to B bytes total, 0 for no limit",
    )

    parser.add_argument(
        "-t",
        "--timeout",
        type=positive_float,
        default=60,
        metavar="T",
        help="Aborts check execution after T seconds",
    )

    parser.add_argument(
        "--journal-lines",
        type=non_negative_int,
        default=None,
        metavar="N",
        help="Passes --lines=N to journalctl, defaults to 10 times --lines",
    )

    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=logging._nameToLevel,
        help="Change python log level",
    )

    parser.add_argument("-v", "--verbose", action="store_true", help=argparse.SUPPRESS)

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser


def setup_logger(log_level: str = "WARNING") -> logging.Logger:
    """set up root logger when using the CLI

    Logs go to stderr, stdout is reserved for the plugin output.

    Args:
        log_level (str): log level to use

    Returns:
        logging.Logger: logger intstance
    """
    logging.basicConfig(
        force=True,
        level=getattr(logging, log_level, logging.WARNING),
        format="%(asctime)25s %(levelname)10s %(name)25s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S %Z",
        handlers=[logging.StreamHandler(stream=sys.stderr)],
    )
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    return logging.getLogger(DEFAULT_LOGGER)


def build_config(args: argparse.Namespace) -> CheckConfig:
    """build check config from parsed args

    Args:
        args (argparse.Namespace): parsed args

    Raises:
        CheckError: if the arguments do not form a valid configuration

    Returns:
        CheckConfig: resolved configuration
    """
    try:
        return CheckConfig(
            rules=args.rules,
            journalctl=args.journalctl,
            span=args.span,
            units=args.units,
            user=args.user,
            statefile=args.statefile,
            cursor_mode=args.cursor_mode,
            lines=args.lines,
            max_bytes=args.max_bytes,
            timeout=args.timeout,
            journal_lines=args.journal_lines,
        )
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise CheckError(f"invalid configuration: {problems}") from e


def run_check(config: CheckConfig, logger: logging.Logger) -> Outcome:
    """Run the check and map fatal errors to an UNKNOWN outcome

    Args:
        config (CheckConfig): resolved configuration
        logger (logging.Logger): logger instance

    Returns:
        Outcome: check outcome
    """
    try:
        return Check(config, logger=logger).run()
    except CheckError as e:
        logger.debug("Check aborted: %s", e.details)
        return Outcome.from_error(e)
    except Exception as e:
        logger.error("Unexpected exception: %s", get_exception_traceback(e))
        return Outcome.from_error(e)


def main(arg_input: Optional[list[str]] = None):
    if arg_input is None:
        arg_input = sys.argv[1:]

    parser = build_parser()
    parsed_args = parser.parse_args(arg_input)
    logger = setup_logger(parsed_args.log_level)

    try:
        config = build_config(parsed_args)
        outcome = run_check(config, logger)
    except CheckError as e:
        outcome = Outcome.from_error(e)
    except KeyboardInterrupt:
        logger.info("Received Ctrl+C. Shutting down...")
        sys.exit(130)

    sys.stdout.flush()
    sys.stdout.buffer.write(outcome.render())
    sys.stdout.flush()
    sys.exit(outcome.exit_code)


if __name__ == "__main__":
    main()
