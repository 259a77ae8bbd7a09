"""
Matching module for genoscan.
Selects the variants whose observed genotype is notable and arranges them for reporting.
"""

import logging
from collections import OrderedDict
from typing import Dict, Iterable, List, Optional, Sequence

from genoscan.models import GeneVariant

# Configure logging
log = logging.getLogger("genoscan")

# Phenotypes listed ahead of all others when results are grouped
PRIORITY_PHENOTYPES = ["DNA Methylation", "Estrogen Deactivation"]


def is_match(variant: GeneVariant, reference, strand_tolerant: bool = False) -> bool:
    """
    Check a variant against the notable genotypes recorded in the reference.

    Args:
        variant: Decoded variant
        reference: ReferenceDataset
        strand_tolerant: Also accept the complement of the observed genotype

    Returns:
        bool: True if the observed genotype is notable for its identifier
    """
    if variant.genotype is None or variant.rsid not in reference:
        return False
    entry = reference[variant.rsid]
    if entry.is_notable(variant.genotype):
        return True
    return strand_tolerant and entry.is_notable(variant.genotype.complement())


def filter_notable(
    variants: Iterable[GeneVariant],
    reference,
    strand_tolerant: bool = False
) -> List[GeneVariant]:
    """
    Keep only variants carrying a notable genotype, preserving order.

    Args:
        variants: Variants accumulated by the streaming parser
        reference: ReferenceDataset
        strand_tolerant: Also accept complement genotypes

    Returns:
        List of matching variants
    """
    matches = [v for v in variants if is_match(v, reference, strand_tolerant)]
    log.info(f"{len(matches)} variants carry a notable genotype")
    return matches


def sort_by_phenotype(variants: Sequence[GeneVariant]) -> List[GeneVariant]:
    """Stable sort of variants by phenotype, ignoring case."""
    return sorted(variants, key=lambda v: v.phenotype.casefold())


def group_by_phenotype(
    variants: Sequence[GeneVariant],
    priority: Optional[Sequence[str]] = None
) -> Dict[str, List[GeneVariant]]:
    """
    Group variants by phenotype for display.

    Phenotypes named in ``priority`` come first, in that order; the others
    follow alphabetically. Variants keep their order within a group.

    Args:
        variants: Variants to group
        priority: Phenotypes to list first, PRIORITY_PHENOTYPES by default

    Returns:
        Ordered mapping of phenotype to variants
    """
    priority = list(PRIORITY_PHENOTYPES if priority is None else priority)

    groups: Dict[str, List[GeneVariant]] = {}
    for variant in variants:
        groups.setdefault(variant.phenotype, []).append(variant)

    def order(phenotype):
        if phenotype in priority:
            return (0, priority.index(phenotype), "")
        return (1, 0, phenotype.casefold())

    return OrderedDict((name, groups[name]) for name in sorted(groups, key=order))
