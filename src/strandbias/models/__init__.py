"""
Data models for strandbias.

Provides pydantic models for sites, genotypes and configuration, plus the
evidence containers used while counting.
"""

from .core import (
    FormatHeaderLine,
    GenomicInterval,
    Genotype,
    GenotypeBuilder,
    Locatable,
    Site,
    StrandBiasConfig,
)
from .evidence import EvidenceGroup, ReadEvidence, group_evidence

__all__ = [
    "EvidenceGroup",
    "FormatHeaderLine",
    "GenomicInterval",
    "Genotype",
    "GenotypeBuilder",
    "Locatable",
    "ReadEvidence",
    "Site",
    "StrandBiasConfig",
    "group_evidence",
]
