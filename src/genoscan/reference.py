"""
Reference dataset module for genoscan.

Loads and validates the reference dataset that maps variant identifiers
to a phenotype, an associated gene and the genotypes considered notable.
The dataset is read-only once built and is shared by every stage of a
parse.
"""

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Dict, Iterator, Optional, Union

import jsonschema

from genoscan.exceptions import ReferenceDataError
from genoscan.genotype import Genotype
from genoscan.models import ReferenceEntry

# Configure logging
log = logging.getLogger("genoscan")

DEFAULT_SCHEMA_PATH = Path(__file__).parent / "schemas" / "reference_dataset.json"


class ReferenceDataset(Mapping):
    """Immutable mapping from variant identifier to ReferenceEntry."""

    def __init__(self, entries: Dict[str, ReferenceEntry]):
        self._entries = dict(entries)

    @classmethod
    def from_dict(cls, data: Dict[str, Dict]) -> "ReferenceDataset":
        """
        Build a dataset from the raw JSON structure.

        Args:
            data: Mapping of rsid to {"phenotype", "gene", "pathogenic"}

        Returns:
            ReferenceDataset with null genes normalised to "" and
            unparseable notable genotypes dropped
        """
        entries = {}
        for rsid, raw in data.items():
            notable = []
            for value in raw.get("pathogenic") or []:
                genotype = Genotype.from_string(value)
                if genotype is None:
                    log.warning(f"Ignoring invalid notable genotype {value!r} for {rsid}")
                    continue
                notable.append(genotype)
            gene = raw.get("gene")
            entries[rsid] = ReferenceEntry(
                phenotype=raw.get("phenotype") or "",
                gene=gene if gene is not None else "",
                notable=tuple(notable)
            )
        return cls(entries)

    def __getitem__(self, rsid: str) -> ReferenceEntry:
        return self._entries[rsid]

    def __contains__(self, rsid) -> bool:
        return rsid in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self):
        return f"ReferenceDataset({len(self)} variants)"


def load_schema(schema_path: Optional[Union[str, Path]] = None) -> Dict:
    """
    Load the JSON schema used to validate reference datasets.

    Args:
        schema_path: Path to the JSON schema file. If None, uses the bundled schema.

    Returns:
        Dict: The loaded JSON schema
    """
    schema_path = Path(schema_path) if schema_path else DEFAULT_SCHEMA_PATH
    with open(schema_path, 'r') as f:
        return json.load(f)


def validate_reference_data(data: Dict, schema: Optional[Dict] = None) -> bool:
    """
    Validate raw reference data against the JSON schema.

    Args:
        data: The decoded JSON document
        schema: Schema to validate against; the bundled schema when None

    Returns:
        bool: True if validation passes, raises ReferenceDataError otherwise
    """
    schema = schema or load_schema()
    try:
        jsonschema.validate(instance=data, schema=schema)
    except jsonschema.exceptions.ValidationError as e:
        error_msg = "Reference dataset does not match the expected schema"
        log.error(f"{error_msg}: {e.message}")
        raise ReferenceDataError(error_msg, details=e.message) from e
    return True


def load_reference_dataset(path: Union[str, Path]) -> ReferenceDataset:
    """
    Load a reference dataset from a JSON file.

    Args:
        path: Path to the reference JSON file

    Returns:
        ReferenceDataset: The validated dataset
    """
    path = Path(path)
    if not path.exists():
        error_msg = f"Reference dataset not found: {path}"
        log.error(error_msg)
        raise ReferenceDataError(error_msg)

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        error_msg = f"Error reading reference dataset from {path}"
        log.error(f"{error_msg}: {e}")
        raise ReferenceDataError(error_msg, details=str(e)) from e

    if not data:
        error_msg = f"Reference dataset is empty: {path}"
        log.error(error_msg)
        raise ReferenceDataError(error_msg)

    validate_reference_data(data)
    dataset = ReferenceDataset.from_dict(data)
    log.info(f"Loaded {len(dataset)} reference variants from {path}")
    return dataset
