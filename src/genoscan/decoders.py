"""
Row decoders for genoscan.

One decoder per supported raw data format. A decoder turns a row of
fields into a GeneVariant when the row is well formed and its identifier
is in the reference dataset, and returns None for every other row.
Skipped rows are routine in raw exports (headers, comments, variants the
reference does not track) and are never reported as errors.
"""

from typing import Any, Dict, List, Optional, Sequence

from genoscan.genotype import Genotype
from genoscan.models import GeneVariant

TWENTY_THREE_AND_ME = "23andme"
ANCESTRY_DNA = "ancestrydna"
VCF = "vcf"


def field_text(row: Sequence[Any], index: int) -> str:
    """
    Read a field as text regardless of how the row splitter typed it.

    Args:
        row: Row of field values
        index: Column index

    Returns:
        The field as a string, "" when missing or empty
    """
    if index >= len(row):
        return ""
    value = row[index]
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


class RowDecoder:
    """
    Base class for per-format row decoders.

    Subclasses set the column layout and implement ``genotype_text``.
    """

    name = None
    delimiter = "\t"
    min_fields = 4
    id_index = 0
    chromosome_index = 1
    position_index = 2
    skip_comments = True

    def prepare(self, row: Sequence[Any]) -> Sequence[Any]:
        """Repair a raw row before column indices are applied."""
        return row

    def genotype_text(self, row: Sequence[Any]) -> str:
        raise NotImplementedError

    def decode_row(self, row: Sequence[Any], reference) -> Optional[GeneVariant]:
        """
        Decode a single row.

        Args:
            row: Fields produced by the row splitter
            reference: ReferenceDataset to look identifiers up in

        Returns:
            GeneVariant to emit, or None to skip the row
        """
        row = self.prepare(row)
        if len(row) < self.min_fields:
            return None
        if self.skip_comments and field_text(row, 0).startswith('#'):
            return None

        rsid = field_text(row, self.id_index)
        if rsid not in reference:
            return None

        return GeneVariant.from_reference(
            rsid=rsid,
            chromosome=field_text(row, self.chromosome_index),
            position=field_text(row, self.position_index),
            genotype=Genotype.from_string(self.genotype_text(row)),
            entry=reference[rsid]
        )

    def decode(self, rows: Sequence[Sequence[Any]], reference) -> List[GeneVariant]:
        """
        Decode a batch of rows, keeping input order.

        Args:
            rows: Rows of a single chunk
            reference: ReferenceDataset to look identifiers up in

        Returns:
            List of variants for the rows that were not skipped
        """
        variants = []
        for row in rows:
            variant = self.decode_row(row, reference)
            if variant is not None:
                variants.append(variant)
        return variants

    def __repr__(self):
        return f"{type(self).__name__}()"


class TwentyThreeAndMeDecoder(RowDecoder):
    """23andMe export: rsid, chromosome, position, genotype (tab separated)."""

    name = TWENTY_THREE_AND_ME
    delimiter = "\t"
    min_fields = 4

    def genotype_text(self, row):
        return field_text(row, 3)


class AncestryDnaDecoder(RowDecoder):
    """
    AncestryDNA export: rsid, chromosome, position, allele1, allele2.

    The files are tab separated but detected with a comma delimiter, so a
    whole line usually arrives as a single field and is re-split on tabs
    here. The genotype is the two allele columns concatenated as they are.
    """

    name = ANCESTRY_DNA
    delimiter = ","
    min_fields = 4
    skip_comments = False

    def prepare(self, row):
        if not row:
            return []
        first = field_text(row, 0)
        if "\t" not in first:
            return row
        return first.split("\t") + list(row[1:])

    def genotype_text(self, row):
        return field_text(row, 3) + field_text(row, 4)


class VcfDecoder(RowDecoder):
    """
    VCF: only the fixed columns are read.

    The genotype is taken from the fifth column (ALT) by position; sample
    columns and multi-allelic ALT values are not interpreted.
    """

    name = VCF
    delimiter = "\t"
    min_fields = 5
    id_index = 2
    chromosome_index = 0
    position_index = 1

    def genotype_text(self, row):
        return field_text(row, 4)


DECODERS: Dict[str, RowDecoder] = {
    decoder.name: decoder
    for decoder in (TwentyThreeAndMeDecoder(), AncestryDnaDecoder(), VcfDecoder())
}


def decoder_for(source_format: str) -> RowDecoder:
    """
    Look up the decoder registered for a source format.

    Args:
        source_format: One of TWENTY_THREE_AND_ME, ANCESTRY_DNA or VCF

    Returns:
        RowDecoder instance
    """
    try:
        return DECODERS[source_format]
    except KeyError:
        raise ValueError(f"No decoder registered for format: {source_format}") from None
