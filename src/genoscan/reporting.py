"""
Reporting module for genoscan.
Provides functions to export matched variants as CSV and HTML reports.
"""

import time
import logging
import pandas as pd
from jinja2 import Template
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from genoscan.exceptions import ReportingError
from genoscan.matching import group_by_phenotype, sort_by_phenotype
from genoscan.models import RECORD_FIELDS, GeneVariant

# Configure logging
log = logging.getLogger("genoscan")

DEFAULT_CSV_NAME = "genoscan-report.csv"
SNPEDIA_URL = "https://www.snpedia.com/index.php/"

# Columns of the per-phenotype tables, with their headings
TABLE_COLUMNS = [
    ("rsid", "RSID"),
    ("genotype", "Genotype"),
    ("pathogenic", "Pathogenic"),
    ("chromosome", "Chromosome"),
    ("position", "Position"),
    ("gene", "Gene"),
]


def variants_to_dataframe(variants: Sequence[GeneVariant]) -> pd.DataFrame:
    """
    Convert variants to a DataFrame with one row per variant.

    Args:
        variants: Variants to convert

    Returns:
        DataFrame with RECORD_FIELDS columns, all as text
    """
    records = [variant.to_record() for variant in variants]
    return pd.DataFrame(records, columns=RECORD_FIELDS, dtype=str)


def save_csv_report(
    variants: Sequence[GeneVariant],
    output_dir: Union[str, Path],
    filename: str = DEFAULT_CSV_NAME
) -> Path:
    """
    Save matched variants as a CSV report.

    Args:
        variants: Matched variants
        output_dir: Directory to save the report
        filename: Name of the CSV file

    Returns:
        Path to the written CSV file
    """
    try:
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        csv_path = output_dir / filename

        variant_df = variants_to_dataframe(variants)
        variant_df.to_csv(csv_path, index=False)
        log.info(f"Saved {len(variant_df)} variants to: {csv_path}")
        return csv_path
    except OSError as e:
        error_msg = f"Error saving CSV report: {e}"
        log.error(error_msg)
        raise ReportingError(error_msg, details=str(e)) from e


def build_report_tables(variants: Sequence[GeneVariant]) -> List[Dict]:
    """
    Arrange variants into one table per phenotype.

    Args:
        variants: Matched variants

    Returns:
        List of {"phenotype", "rows"} dicts in display order
    """
    groups = group_by_phenotype(sort_by_phenotype(variants))
    return [
        {"phenotype": phenotype, "rows": [variant.to_record() for variant in group]}
        for phenotype, group in groups.items()
    ]


def generate_html_report(
    variants: Sequence[GeneVariant],
    output_dir: Union[str, Path] = ".",
    source_name: Optional[str] = None
) -> Path:
    """
    Generate an HTML report of matched variants grouped by phenotype.

    Args:
        variants: Matched variants
        output_dir: Directory to save the report
        source_name: Name of the raw data file shown in the summary

    Returns:
        Path to the generated HTML report
    """
    output_dir = Path(output_dir)
    timestamp = time.strftime("%Y%m%d-%H%M%S")
    report_path = output_dir / f"genoscan_report_{timestamp}.html"

    log.info(f"Generating HTML report: {report_path}")

    stats = {
        'total_variants': len(variants),
        'total_phenotypes': len({v.phenotype for v in variants}),
        'analysis_time': time.strftime("%Y-%m-%d %H:%M:%S"),
        'source_name': source_name or 'N/A'
    }

    template_str = """
    <!DOCTYPE html>
    <html lang="en">
    <head>
        <meta charset="UTF-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
        <title>Genoscan Report</title>
        <style>
            body {
                font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif;
                margin: 0;
                padding: 20px;
                background-color: #f8f9fa;
            }
            .container {
                max-width: 1200px;
                margin: 0 auto;
                background-color: white;
                padding: 30px;
                border-radius: 10px;
            }
            h1 {
                color: #2c3e50;
                border-bottom: 2px solid #3498db;
                padding-bottom: 10px;
            }
            h3 {
                color: #2c3e50;
                margin-top: 30px;
            }
            table {
                width: 100%;
                border-collapse: collapse;
                margin-bottom: 20px;
            }
            th, td {
                padding: 8px 12px;
                border: 1px solid #dee2e6;
                text-align: left;
            }
            th {
                background-color: #e9ecef;
            }
        </style>
    </head>
    <body>
        <div class="container">
            <h1>Genoscan Report</h1>
            <p>
                Source file: {{ stats.source_name }} |
                Matching variants: {{ stats.total_variants }} |
                Phenotypes: {{ stats.total_phenotypes }}
            </p>

            {% if not tables %}
            <p>No matching SNPs found</p>
            {% endif %}

            {% for table in tables %}
            <h3>{{ table.phenotype }}</h3>
            <table border="1">
                <tr>
                    {% for key, heading in columns %}
                    <th>{{ heading }}</th>
                    {% endfor %}
                </tr>
                {% for row in table.rows %}
                <tr>
                    {% for key, heading in columns %}
                    {% if key == "rsid" %}
                    <td><a href="{{ snpedia_url }}{{ row.rsid }}">{{ row.rsid }}</a></td>
                    {% else %}
                    <td>{{ row[key] }}</td>
                    {% endif %}
                    {% endfor %}
                </tr>
                {% endfor %}
            </table>
            {% endfor %}

            <div class="footer">
                <p>Genoscan | Generated on {{ stats.analysis_time }}</p>
            </div>
        </div>
    </body>
    </html>
    """

    template = Template(template_str, autoescape=True)
    html_content = template.render(
        stats=stats,
        tables=build_report_tables(variants),
        columns=TABLE_COLUMNS,
        snpedia_url=SNPEDIA_URL
    )

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        with open(report_path, 'w', encoding='utf-8') as f:
            f.write(html_content)
    except OSError as e:
        error_msg = f"Error writing HTML report: {e}"
        log.error(error_msg)
        raise ReportingError(error_msg, details=str(e)) from e

    log.info(f"HTML report generated successfully: {report_path}")
    return report_path
