"""
tracealign version {version}

tracealign finds a primer, vector or adapter sequence in a sequencing read by
alignment. IUPAC wildcard characters are supported in both the read and the
query.

Usage:
    tracealign [options] READ QUERY

By default, the leftmost occurrence of QUERY at or after the --start position
is reported (use --backward for the rightmost one at or before it). With
--vector 5 or --vector 3, QUERY is located by quality-weighted alignment near
the 5' or 3' end of the read instead.

If found, the position and the score of the match are written to standard
output, separated by a tab, and the exit status is 0. Otherwise, nothing is
written and the exit status is 1.

Run "tracealign --help" to see all command-line options.
"""
import sys
import shutil
import logging
from typing import Optional
from argparse import ArgumentParser, SUPPRESS, HelpFormatter

import dnaio

from tracealign import __version__
from tracealign.align import (
    Match,
    VECTOR_MIN_MATCH,
    format_matrix,
    scoring_matrix,
    search_by_alignment_backward,
    search_by_alignment_forward,
    vector_search3,
    vector_search5,
)
from tracealign.log import setup_logging
from tracealign.read import Read

logger = logging.getLogger()


class TracealignArgumentParser(ArgumentParser):
    """
    This ArgumentParser customizes two things:
    - The usage message is not prefixed with 'usage:'
    - A brief message is shown on errors, not full usage
    """

    class CustomUsageHelpFormatter(HelpFormatter):
        def __init__(self, *args, **kwargs):
            kwargs["width"] = min(24 + 80, shutil.get_terminal_size().columns)
            super().__init__(*args, **kwargs)

        def add_usage(self, usage, actions, groups, prefix=None):
            if usage is not SUPPRESS:  # pragma: no cover
                args = usage, actions, groups, ""
                self._add_item(self._format_usage, args)

    def __init__(self, *args, **kwargs):
        kwargs["formatter_class"] = self.CustomUsageHelpFormatter
        kwargs["usage"] = kwargs["usage"].replace("{version}", __version__)
        super().__init__(*args, **kwargs)

    def error(self, message):
        """
        If you override this in a subclass, it should not return -- it
        should either exit or raise an exception.
        """
        print('Run "tracealign --help" to see command-line options.', file=sys.stderr)
        self.exit(2, f"\n{self.prog}: error: {message}\n")


class CommandLineError(Exception):
    pass


# fmt: off
def get_argument_parser() -> ArgumentParser:
    parser = TracealignArgumentParser(usage=__doc__, add_help=False)
    group = parser.add_argument_group("Options")
    group.add_argument("-h", "--help", action="help", help="Show this help message and exit")
    group.add_argument("--version", action="version", help="Show version number and exit",
        version=__version__)
    group.add_argument("--debug", action="count", default=0,
        help="Print debug log. Use twice to also print the scoring matrix")
    group.add_argument("--quiet", default=False, action="store_true",
        help="Print only error messages")

    group = parser.add_argument_group("Searching")
    group.add_argument("-p", "--min-percent", type=int, default=80, metavar="PERCENT",
        help="Minimum alignment score in percent of the score of a perfect match. "
            "Default: %(default)s")
    group.add_argument("-s", "--start", type=int, default=None, metavar="POS",
        help="0-based read position at which the search begins. "
            "Default: start of the read (end of the read with --backward)")
    group.add_argument("--backward", action="store_true", default=False,
        help="Report the rightmost match starting at or before --start instead of "
            "the leftmost match starting at or after it.")
    group.add_argument("--vector", choices=("5", "3"), default=None,
        help="Locate QUERY by quality-weighted alignment as a vector preceding (5) "
            "or following (3) the insert. The reported position is the last (5) "
            "or first (3) read base aligned to the vector.")
    group.add_argument("-m", "--min-match", type=int, default=VECTOR_MIN_MATCH, metavar="N",
        help="With --vector: Number of query bases that need to align. "
            "Default: %(default)s")
    group.add_argument("-q", "--qualities", default=None, metavar="QUALITIES",
        help="Phred quality values of the read, ASCII-encoded with offset 33. "
            "Only used with --vector. Default: no qualities")

    parser.add_argument("read", metavar="READ", help="Read sequence")
    parser.add_argument("query", metavar="QUERY", help="Sequence to search for")
    return parser
# fmt: on


def make_read(sequence: str, qualities: Optional[str]) -> Read:
    try:
        record = dnaio.SequenceRecord("read", sequence, qualities)
    except ValueError as e:
        raise CommandLineError(f"Cannot use the given qualities: {e}")
    return Read.from_record(record)


def check_arguments(args, read: Read) -> None:
    if args.start is None:
        args.start = max(len(read) - 1, 0) if args.backward and not args.vector else 0
    if not 0 <= args.start <= len(read):
        raise CommandLineError(
            f"The start position {args.start} is outside of the read "
            f"(length {len(read)})"
        )
    if args.min_match < 1:
        raise CommandLineError("The value for --min-match must be at least 1")
    if args.vector is None and args.qualities is not None:
        logger.warning("Qualities are only used with --vector, ignoring them")


def run_search(args, read: Read) -> Optional[Match]:
    if args.vector == "5":
        return vector_search5(read, args.query, args.min_percent, args.min_match)
    elif args.vector == "3":
        return vector_search3(
            read, args.start, args.query, args.min_percent, args.min_match
        )
    elif args.backward:
        return search_by_alignment_backward(
            read, args.start, args.query, args.min_percent
        )
    else:
        return search_by_alignment_forward(
            read, args.start, args.query, args.min_percent
        )


def main_cli():  # pragma: no cover
    """Entry point for command-line script"""
    match = main(sys.argv[1:])
    return 0 if match is not None else 1


def main(cmdlineargs, outfile=None) -> Optional[Match]:
    """
    Run a single search as specified by the command-line arguments and
    return the match (or None if the query was not found).
    """
    parser = get_argument_parser()
    args = parser.parse_args(args=cmdlineargs)
    # Setup logging only if there are not already any handlers (can happen when
    # this function is being called externally such as from unit tests)
    if not logging.root.handlers:
        setup_logging(logger, quiet=args.quiet, debug=args.debug)
    logger.debug("This is tracealign %s", __version__)
    if args.debug > 1:
        logger.debug("Scoring matrix:\n%s", format_matrix(scoring_matrix()))

    try:
        read = make_read(args.read, args.qualities)
        check_arguments(args, read)
    except CommandLineError as e:
        logger.debug("Command line error. Traceback:", exc_info=True)
        parser.error(str(e))

    match = run_search(args, read)
    if match is None:
        logger.info("Query not found")
    else:
        print(match.start, match.score, sep="\t", file=outfile)
    return match
