"""
Test configuration for genoscan.
"""

import sys
import pytest
from pathlib import Path

# Add the source directory to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from genoscan.reference import ReferenceDataset


REFERENCE_DATA = {
    "rs1801133": {
        "phenotype": "DNA Methylation",
        "gene": "MTHFR",
        "pathogenic": ["AA", "AG"]
    },
    "rs4680": {
        "phenotype": "Estrogen Deactivation",
        "gene": "COMT",
        "pathogenic": ["AA"]
    },
    "rs1050450": {
        "phenotype": "Detoxification",
        "gene": None,
        "pathogenic": ["TT"]
    },
    "rs1695": {
        "phenotype": "Detoxification",
        "gene": "GSTP1",
        "pathogenic": ["GG", "AG"]
    }
}

TWENTY_THREE_AND_ME_TEXT = (
    "# This data file generated by 23andMe at: Mon Jan 01 00:00:00 2024\n"
    "#\n"
    "# rsid\tchromosome\tposition\tgenotype\n"
    "rs548049170\t1\t69869\tTT\n"
    "rs1801133\t1\t11856378\tGA\n"
    "rs4680\t22\t19951271\tGG\n"
    "rs1050450\t3\t49357401\t--\n"
)

ANCESTRY_DNA_TEXT = (
    "#AncestryDNA raw data download\n"
    "#This file was generated by AncestryDNA at: 01/01/2024 12:00:00 UTC\n"
    "#Data was collected using AncestryDNA array version: V2.0\n"
    "rsid\tchromosome\tposition\tallele1\tallele2\n"
    "rs3131972\t1\t752721\tA\tG\n"
    "rs1801133\t1\t11856378\tA\tA\n"
    "rs4680\t22\t19951271\tA\tG\n"
    "rs1695\t11\t67352689\tG\tA\n"
)

VCF_TEXT = (
    "##fileformat=VCFv4.2\n"
    "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\n"
    "1\t11856378\trs1801133\tG\tAA\t100\tPASS\t.\n"
    "22\t19951271\trs4680\tG\tA\t100\tPASS\t.\n"
    "3\t49357401\trs1050450\n"
    "11\t67352689\trs1695\tA\tAG\t100\tPASS\t.\n"
)


@pytest.fixture
def reference_data():
    """Return the raw reference dataset structure."""
    return {rsid: dict(entry) for rsid, entry in REFERENCE_DATA.items()}


@pytest.fixture
def reference(reference_data):
    """Return a ReferenceDataset built from the sample reference data."""
    return ReferenceDataset.from_dict(reference_data)


@pytest.fixture
def twenty_three_and_me_text():
    return TWENTY_THREE_AND_ME_TEXT


@pytest.fixture
def ancestry_dna_text():
    return ANCESTRY_DNA_TEXT


@pytest.fixture
def vcf_text():
    return VCF_TEXT
