"""
Unit tests for the reporting module.
"""

import tempfile
import pandas as pd
import pytest
from pathlib import Path

from genoscan.exceptions import ReportingError
from genoscan.genotype import Genotype
from genoscan.models import RECORD_FIELDS, GeneVariant
from genoscan.reporting import (
    DEFAULT_CSV_NAME,
    SNPEDIA_URL,
    build_report_tables,
    generate_html_report,
    save_csv_report,
    variants_to_dataframe,
)


@pytest.fixture
def matches(reference):
    """Return matched variants in file order."""
    return [
        GeneVariant.from_reference("rs1695", "11", "67352689", Genotype.from_string("GA"), reference["rs1695"]),
        GeneVariant.from_reference("rs4680", "22", "19951271", Genotype.from_string("AA"), reference["rs4680"]),
        GeneVariant.from_reference("rs1050450", "3", "49357401", Genotype.from_string("TT"), reference["rs1050450"]),
        GeneVariant.from_reference("rs1801133", "1", "11856378", Genotype.from_string("AG"), reference["rs1801133"]),
    ]


class TestReporting:
    """Test cases for the reporting module."""

    def setup_method(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.output_dir = Path(self.temp_dir.name)

    def teardown_method(self):
        self.temp_dir.cleanup()

    def test_variants_to_dataframe(self, matches):
        df = variants_to_dataframe(matches)

        assert list(df.columns) == RECORD_FIELDS
        assert len(df) == 4
        row = df.iloc[0]
        assert row["rsid"] == "rs1695"
        assert row["genotype"] == "GA"
        assert row["pathogenic"] == "GG;AG"
        assert row["gene"] == "GSTP1"

    def test_variants_to_dataframe_empty(self):
        df = variants_to_dataframe([])
        assert df.empty
        assert list(df.columns) == RECORD_FIELDS

    def test_save_csv_report(self, matches):
        csv_path = save_csv_report(matches, self.output_dir)

        assert csv_path == self.output_dir / DEFAULT_CSV_NAME
        assert csv_path.exists()

        df = pd.read_csv(csv_path, dtype=str, keep_default_na=False)
        assert list(df.columns) == RECORD_FIELDS
        assert list(df["rsid"]) == ["rs1695", "rs4680", "rs1050450", "rs1801133"]
        assert list(df["chromosome"]) == ["11", "22", "3", "1"]
        assert df.iloc[2]["gene"] == ""
        assert df.iloc[3]["pathogenic"] == "AA;AG"

    def test_save_csv_report_custom_name(self, matches):
        csv_path = save_csv_report(matches, self.output_dir / "nested", "report.csv")
        assert csv_path == self.output_dir / "nested" / "report.csv"
        assert csv_path.exists()

    def test_save_csv_report_unwritable(self, matches):
        blocker = self.output_dir / "blocker"
        blocker.write_text("not a directory")

        with pytest.raises(ReportingError):
            save_csv_report(matches, blocker)

    def test_build_report_tables(self, matches):
        tables = build_report_tables(matches)

        assert [table["phenotype"] for table in tables] == [
            "DNA Methylation",
            "Estrogen Deactivation",
            "Detoxification",
        ]
        assert [row["rsid"] for row in tables[2]["rows"]] == ["rs1695", "rs1050450"]

    def test_generate_html_report(self, matches):
        report_path = generate_html_report(matches, self.output_dir, "genome.txt")

        assert report_path.exists()
        assert report_path.parent == self.output_dir
        assert report_path.name.startswith("genoscan_report_")

        html = report_path.read_text(encoding='utf-8')
        assert "genome.txt" in html
        assert f'<a href="{SNPEDIA_URL}rs4680">rs4680</a>' in html
        assert "No matching SNPs found" not in html

        positions = [html.index(f"<h3>{name}</h3>") for name in (
            "DNA Methylation", "Estrogen Deactivation", "Detoxification"
        )]
        assert positions == sorted(positions)

        headings = [html.index(f"<th>{name}</th>") for name in (
            "RSID", "Genotype", "Pathogenic", "Chromosome", "Position", "Gene"
        )]
        assert headings == sorted(headings)

    def test_generate_html_report_empty(self):
        report_path = generate_html_report([], self.output_dir)

        html = report_path.read_text(encoding='utf-8')
        assert "No matching SNPs found" in html
        assert "<table" not in html

    def test_generate_html_report_escapes_values(self):
        variant = GeneVariant(
            rsid="rs1",
            chromosome="1",
            position="1",
            genotype=Genotype.from_string("AA"),
            phenotype="<script>alert(1)</script>",
            gene="G&G"
        )

        html = generate_html_report([variant], self.output_dir).read_text(encoding='utf-8')

        assert "<script>alert(1)</script>" not in html
        assert "&lt;script&gt;" in html
        assert "G&amp;G" in html
