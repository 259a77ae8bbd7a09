"""
Unit tests for the workflow module.
"""

import json
import tempfile
import pytest
from argparse import Namespace
from pathlib import Path
from unittest.mock import patch

from genoscan.detection import SourceFile
from genoscan.reporting import DEFAULT_CSV_NAME
from genoscan.workflow import analyze_file, run_analysis_workflow, write_reports


class TestAnalyzeFile:
    """Test cases for analyze_file."""

    def test_twenty_three_and_me(self, reference, twenty_three_and_me_text):
        source = SourceFile.from_bytes("genome.txt", twenty_three_and_me_text.encode('utf-8'))
        progress = []
        completions = []

        matches = analyze_file(source, reference, progress.append, lambda: completions.append(True))

        assert [v.rsid for v in matches] == ["rs1801133"]
        assert matches[0].phenotype == "DNA Methylation"
        assert progress == [100]
        assert completions == [True]

    def test_ancestry_dna(self, reference, ancestry_dna_text):
        source = SourceFile.from_bytes("AncestryDNA.txt", ancestry_dna_text.encode('utf-8'))
        matches = analyze_file(source, reference)
        assert [(v.rsid, str(v.genotype)) for v in matches] == [("rs1801133", "AA"), ("rs1695", "GA")]

    def test_strand_tolerant(self, reference):
        text = "# generated by 23andMe\nrs4680\t22\t19951271\tTT\n"
        source = SourceFile.from_bytes("genome.txt", text.encode('utf-8'))

        assert analyze_file(source, reference) == []
        assert [v.rsid for v in analyze_file(source, reference, strand_tolerant=True)] == ["rs4680"]


class TestRunAnalysisWorkflow:
    """Test cases for the command-line workflow."""

    def setup_method(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.temp_path = Path(self.temp_dir.name)

    def teardown_method(self):
        self.temp_dir.cleanup()

    def _args(self, raw_text, reference_data, **overrides):
        raw_path = self.temp_path / "genome.txt"
        raw_path.write_text(raw_text, encoding='utf-8')
        reference_path = self.temp_path / "mps-data.json"
        reference_path.write_text(json.dumps(reference_data), encoding='utf-8')

        options = dict(
            raw_file=str(raw_path),
            reference=reference_path,
            output_dir=self.temp_path / "output",
            csv_name=DEFAULT_CSV_NAME,
            no_csv=False,
            no_html=False,
            strand_tolerant=False,
            dynamic_typing=False,
            verbose=False
        )
        options.update(overrides)
        return Namespace(**options)

    def test_writes_reports(self, reference_data, ancestry_dna_text):
        args = self._args(ancestry_dna_text, reference_data)

        matches = run_analysis_workflow(args)

        assert [v.rsid for v in matches] == ["rs1801133", "rs1695"]
        assert (args.output_dir / DEFAULT_CSV_NAME).exists()
        assert list(args.output_dir.glob("genoscan_report_*.html"))

    def test_reports_can_be_skipped(self, reference_data, ancestry_dna_text):
        args = self._args(ancestry_dna_text, reference_data, no_csv=True, no_html=True)

        run_analysis_workflow(args)

        assert not args.output_dir.exists()

    def test_undetected_format_exits(self, reference_data):
        args = self._args("not a raw data export\n", reference_data)

        with pytest.raises(SystemExit) as exc_info:
            run_analysis_workflow(args)
        assert exc_info.value.code == 1

    def test_missing_reference_exits(self, reference_data, twenty_three_and_me_text):
        args = self._args(twenty_three_and_me_text, reference_data)
        args.reference = self.temp_path / "missing.json"

        with pytest.raises(SystemExit) as exc_info:
            run_analysis_workflow(args)
        assert exc_info.value.code == 1

    def test_missing_raw_file_exits(self, reference_data, twenty_three_and_me_text):
        args = self._args(twenty_three_and_me_text, reference_data)
        args.raw_file = str(self.temp_path / "missing.txt")

        with pytest.raises(SystemExit) as exc_info:
            run_analysis_workflow(args)
        assert exc_info.value.code == 1

    @patch('genoscan.workflow.run_with_progress', side_effect=RuntimeError("boom"))
    def test_unexpected_error_exits(self, mock_run, reference_data, twenty_three_and_me_text):
        args = self._args(twenty_three_and_me_text, reference_data)

        with pytest.raises(SystemExit) as exc_info:
            run_analysis_workflow(args)
        assert exc_info.value.code == 1

    def test_write_reports_paths(self):
        args = Namespace(no_csv=False, no_html=True, output_dir=self.temp_path, csv_name="out.csv")
        paths = write_reports(args, [], "genome.txt")
        assert paths == {'csv_path': self.temp_path / "out.csv", 'html_path': None}
