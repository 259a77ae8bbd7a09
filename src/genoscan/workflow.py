"""
Workflow module for genoscan.
Handles the end-to-end analysis of a raw data file and report generation.
"""

import sys
import logging
import traceback
from pathlib import Path
from typing import Callable, Dict, List, Optional

from rich.console import Console
from rich.progress import BarColumn, Progress, TextColumn, TimeElapsedColumn

from genoscan.detection import SourceFile
from genoscan.exceptions import GenoscanError
from genoscan.matching import filter_notable
from genoscan.models import GeneVariant
from genoscan.reference import load_reference_dataset
from genoscan.reporting import generate_html_report, save_csv_report
from genoscan.streaming import GeneDataParser

# Configure logging
log = logging.getLogger("genoscan")
console = Console()


def analyze_file(
    source: SourceFile,
    reference,
    progress_callback: Optional[Callable[[float], None]] = None,
    completion_callback: Optional[Callable[[], None]] = None,
    strand_tolerant: bool = False,
    dynamic_typing: bool = False
) -> List[GeneVariant]:
    """
    Detect, parse and match a raw data file.

    Args:
        source: Raw data file
        reference: ReferenceDataset
        progress_callback: Called with a percentage after each chunk
        completion_callback: Called once when parsing completes
        strand_tolerant: Also accept complement genotypes when matching
        dynamic_typing: Type numeric-looking fields while splitting rows

    Returns:
        Variants whose genotype is notable, in file order
    """
    parser = GeneDataParser.from_source(source, reference, dynamic_typing=dynamic_typing)
    variants = parser.parse(progress_callback, completion_callback)
    return filter_notable(variants, reference, strand_tolerant=strand_tolerant)


def run_with_progress(args, source: SourceFile, reference) -> List[GeneVariant]:
    """
    Run the analysis while rendering a progress bar.

    Args:
        args: Command-line arguments namespace
        source: Raw data file
        reference: ReferenceDataset

    Returns:
        Matched variants
    """
    progress_bar = Progress(
        TextColumn("Parsing {task.description}"),
        BarColumn(),
        TextColumn("{task.percentage:>3.0f}%"),
        TimeElapsedColumn(),
        console=console
    )

    with progress_bar as progress:
        task = progress.add_task(source.name, total=100)
        return analyze_file(
            source,
            reference,
            progress_callback=lambda percent: progress.update(task, completed=percent),
            completion_callback=lambda: progress.update(task, completed=100),
            strand_tolerant=args.strand_tolerant,
            dynamic_typing=args.dynamic_typing
        )


def write_reports(args, matches: List[GeneVariant], source_name: str) -> Dict[str, Optional[Path]]:
    """
    Write the CSV and HTML reports requested on the command line.

    Args:
        args: Command-line arguments namespace
        matches: Matched variants
        source_name: Name of the raw data file

    Returns:
        Dict of report paths, None for reports that were skipped
    """
    paths = {'csv_path': None, 'html_path': None}
    if not args.no_csv:
        paths['csv_path'] = save_csv_report(matches, args.output_dir, args.csv_name)
    if not args.no_html:
        paths['html_path'] = generate_html_report(matches, args.output_dir, source_name)
    return paths


def print_summary(matches: List[GeneVariant], paths: Dict[str, Optional[Path]]):
    if not matches:
        console.print("No matching SNPs found")
    else:
        console.print(f"[bold green]Found {len(matches)} matching SNPs[/]")
        for variant in matches:
            console.print(f"  {variant.rsid}  {variant.genotype}  {variant.gene}  {variant.phenotype}")

    for label, path in paths.items():
        if path is not None:
            console.print(f"{label}: {path}")


def run_analysis_workflow(args) -> List[GeneVariant]:
    """
    Run the main analysis workflow.

    Args:
        args: Command-line arguments namespace

    Returns:
        Matched variants
    """
    try:
        # Step 1: Load the reference dataset
        reference = load_reference_dataset(args.reference)

        # Step 2: Parse and match the raw data file
        source = SourceFile.from_path(args.raw_file)
        matches = run_with_progress(args, source, reference)

        # Step 3: Write reports
        paths = write_reports(args, matches, source.name)

        print_summary(matches, paths)
        return matches

    except GenoscanError as e:
        console.print(f"[bold red]Genoscan Error:[/] {e.message}")
        if e.details:
            console.print(f"[bold red]Details:[/] {e.details}")
        sys.exit(1)
    except Exception as e:
        console.print(f"[bold red]Unhandled exception:[/] {e}")
        console.print(traceback.format_exc())
        sys.exit(1)
