"""
Genotype module for genoscan.
Represents the pair of alleles observed at a variant position.
"""

from typing import Any, Optional, Tuple

# Base-pair complements used for strand-flipped comparisons
COMPLEMENT = {"A": "T", "T": "A", "C": "G", "G": "C"}


class Genotype:
    """
    Unordered pair of allele characters.

    Two genotypes compare equal when they carry the same alleles in any
    order, so ``Genotype("A", "G") == Genotype("G", "A")``. Instances are
    immutable and hashable, which lets them live in notable-genotype sets.
    """

    __slots__ = ("_alleles",)

    def __init__(self, first: str, second: str):
        object.__setattr__(self, "_alleles", (first, second))

    def __setattr__(self, name, value):
        raise AttributeError("Genotype is immutable")

    @classmethod
    def from_string(cls, value: Any) -> Optional["Genotype"]:
        """
        Build a genotype from its two-character text form.

        Args:
            value: Raw field value; non-string values are converted with str()

        Returns:
            Genotype, or None when the text is not exactly two characters
        """
        if value is None:
            return None
        text = value if isinstance(value, str) else str(value)
        if len(text) != 2:
            return None
        return cls(text[0], text[1])

    @property
    def alleles(self) -> Tuple[str, str]:
        return self._alleles

    @property
    def canonical(self) -> str:
        """Sorted two-character form, identical for equal genotypes."""
        return "".join(sorted(self._alleles))

    def complement(self) -> "Genotype":
        """Return the genotype read from the opposite strand."""
        first, second = self._alleles
        return Genotype(COMPLEMENT.get(first, first), COMPLEMENT.get(second, second))

    def __eq__(self, other):
        if not isinstance(other, Genotype):
            return NotImplemented
        return sorted(self._alleles) == sorted(other._alleles)

    def __hash__(self):
        return hash(self.canonical)

    def __str__(self):
        return "".join(self._alleles)

    def __repr__(self):
        return f"Genotype({str(self)!r})"
