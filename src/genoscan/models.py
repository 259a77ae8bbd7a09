"""
Data model for genoscan.
Reference entries and the variants decoded from raw data files.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from genoscan.genotype import Genotype

# Column order used when exporting variants
RECORD_FIELDS = ["rsid", "chromosome", "position", "genotype", "phenotype", "pathogenic", "gene"]


@dataclass(frozen=True)
class ReferenceEntry:
    """Phenotype, gene and notable genotypes recorded for one variant identifier."""

    phenotype: str
    gene: str = ""
    notable: Tuple[Genotype, ...] = ()

    def is_notable(self, genotype: Optional[Genotype]) -> bool:
        if genotype is None:
            return False
        return genotype in self.notable


@dataclass(frozen=True)
class GeneVariant:
    """
    Genotype call for a reference variant found in a raw data file.

    Only built for identifiers present in the reference dataset. The
    notable genotypes are copied from the reference entry when the row is
    decoded so a variant can be reported on its own.
    """

    rsid: str
    chromosome: str
    position: str
    genotype: Optional[Genotype]
    phenotype: str
    gene: str = ""
    notable: Tuple[Genotype, ...] = ()

    @classmethod
    def from_reference(
        cls,
        rsid: str,
        chromosome: str,
        position: str,
        genotype: Optional[Genotype],
        entry: ReferenceEntry
    ) -> "GeneVariant":
        return cls(
            rsid=rsid,
            chromosome=chromosome,
            position=position,
            genotype=genotype,
            phenotype=entry.phenotype,
            gene=entry.gene,
            notable=entry.notable
        )

    def to_record(self) -> Dict[str, Any]:
        """
        Flatten the variant for tabular export.

        Returns:
            Dictionary keyed by RECORD_FIELDS with string values
        """
        return {
            "rsid": self.rsid,
            "chromosome": self.chromosome,
            "position": self.position,
            "genotype": str(self.genotype) if self.genotype is not None else "",
            "phenotype": self.phenotype,
            "pathogenic": ";".join(str(g) for g in self.notable),
            "gene": self.gene,
        }
