"""
Command-line interface module for genoscan.
Handles argument parsing and logging configuration.
"""

import argparse
import logging
from pathlib import Path

from rich.logging import RichHandler

from genoscan.reporting import DEFAULT_CSV_NAME
from genoscan.workflow import console, run_analysis_workflow


def parse_args(argv=None):
    """
    Parse command-line arguments for genoscan.

    Args:
        argv: Argument list, sys.argv[1:] when None

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description="Match consumer raw genotype data (23andMe, AncestryDNA, VCF) against a reference dataset"
    )

    # Input/output arguments
    parser.add_argument("raw_file", help="Path to the raw data file to analyze")
    parser.add_argument("--reference", required=True,
                        help="Path to the reference dataset JSON file")
    parser.add_argument("--output-dir", type=str, default="output",
                        help="Output directory for reports")
    parser.add_argument("--csv-name", type=str, default=DEFAULT_CSV_NAME,
                        help="File name of the CSV report")

    # Output options
    parser.add_argument("--no-csv", action="store_true",
                        help="Skip CSV report generation")
    parser.add_argument("--no-html", action="store_true",
                        help="Skip HTML report generation")

    # Matching options
    parser.add_argument("--strand-tolerant", action="store_true",
                        help="Also match genotypes reported on the opposite strand")
    parser.add_argument("--dynamic-typing", action="store_true",
                        help="Type numeric-looking fields while splitting rows")

    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable debug logging")

    args = parser.parse_args(argv)

    # Convert string paths to Path objects
    args.output_dir = Path(args.output_dir)
    args.reference = Path(args.reference)

    return args


def configure_logging(verbose=False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, console=console)]
    )


def main(argv=None):
    args = parse_args(argv)
    configure_logging(args.verbose)
    run_analysis_workflow(args)


if __name__ == "__main__":
    main()
