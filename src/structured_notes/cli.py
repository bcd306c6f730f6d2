"""
Command line interface: validate parameters, tabulate, and report.

Usage:
    structured-notes                          # Default term sheet, console table
    structured-notes --params note.json       # Override record
    structured-notes --returns 0.1 -0.1 -0.5  # Custom sample returns
    structured-notes --format json -o table.json
"""

import argparse
import logging
import sys

from structured_notes import __version__
from structured_notes.data.loader import resolve_parameters
from structured_notes.errors import InvalidParameterError, ParameterLoadError
from structured_notes.reporting import PaymentTableReporter
from structured_notes.table import DEFAULT_SAMPLE_RETURNS, generate_payment_table
from structured_notes.validation.gates import validate_parameters

logger = logging.getLogger(__name__)

#: Exit code for invalid or unreadable parameter sets
EXIT_INVALID_PARAMETERS = 2

#: Exit code when the report cannot be written
EXIT_OUTPUT_ERROR = 1


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="structured-notes",
        description="Payment at maturity table for a buffered structured note",
    )
    parser.add_argument(
        "--params",
        metavar="PATH",
        default=None,
        help="JSON parameter override record "
             "(default: $STRUCTURED_NOTES_PARAMS, else built-in term sheet)",
    )
    parser.add_argument(
        "--returns",
        metavar="R",
        type=float,
        nargs="+",
        default=None,
        help="Underlying returns to tabulate, as decimals (default: 14 sample returns)",
    )
    parser.add_argument(
        "--format",
        dest="fmt",
        choices=["console", "markdown", "json", "csv"],
        default="console",
        help="Output format (default: console)",
    )
    parser.add_argument(
        "-o",
        "--output",
        metavar="PATH",
        default=None,
        help="Write the report to a file instead of stdout",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log progress at INFO level",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Run the calculator end to end.

    Parameters
    ----------
    argv : list[str], optional
        Arguments (default: sys.argv[1:])

    Returns
    -------
    int
        Process exit code
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        params = resolve_parameters(args.params)
        validate_parameters(params)
    except (ParameterLoadError, InvalidParameterError) as e:
        logger.error(f"Error in main execution: {e}")
        return EXIT_INVALID_PARAMETERS

    returns = args.returns if args.returns is not None else DEFAULT_SAMPLE_RETURNS
    rows = generate_payment_table(returns, params)

    reporter = PaymentTableReporter(params)
    if args.output:
        try:
            path = reporter.save(rows, args.output, args.fmt)
        except OSError as e:
            logger.error(f"Failed to write report to {args.output}: {e}")
            return EXIT_OUTPUT_ERROR
        logger.info(f"Wrote {args.fmt} report to {path}")
    else:
        sys.stdout.write(reporter.render(rows, args.fmt) + "\n")

    return 0


if __name__ == "__main__":
    sys.exit(main())
