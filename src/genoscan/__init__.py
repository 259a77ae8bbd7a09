"""
genoscan: match consumer raw genotype data against a reference dataset.

This package detects the format of 23andMe, AncestryDNA and VCF raw data
files, streams them in bounded chunks, and reports the variants whose
genotype is flagged as notable in the reference dataset.
"""

from genoscan.genotype import Genotype
from genoscan.models import GeneVariant, ReferenceEntry
from genoscan.reference import ReferenceDataset, load_reference_dataset
from genoscan.detection import ParseConfig, SourceFile, detect_format
from genoscan.streaming import GeneDataParser, ParseState, parse_file
from genoscan.matching import filter_notable, group_by_phenotype
from genoscan.workflow import analyze_file

__version__ = "0.1.0"

__all__ = [
    'Genotype',
    'GeneVariant',
    'ReferenceEntry',
    'ReferenceDataset',
    'load_reference_dataset',
    'ParseConfig',
    'SourceFile',
    'detect_format',
    'GeneDataParser',
    'ParseState',
    'parse_file',
    'filter_notable',
    'group_by_phenotype',
    'analyze_file',
]
