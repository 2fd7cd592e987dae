"""
strandbias - per-sample strand bias read counts.

Counts, for each sample at each variant site, the reads supporting REF and ALT
on the forward and reverse strands, and attaches them as the SB FORMAT field:
REF forward, REF reverse, ALT forward, ALT reverse.

Example usage:
    $ strandbias run -v calls.vcf.gz -b tumor:tumor.bam -b normal:normal.bam
"""

__version__ = "1.0.0"

from .annotator import (
    StrandBiasBySample,
    alt_forward_count,
    alt_reverse_count,
    get_contingency_array,
)
from .constants import STRAND_BIAS_BY_SAMPLE_KEY
from .contingency import get_contingency_table
from .likelihoods import AlleleLikelihoods
from .models.core import Genotype, GenotypeBuilder, Site, StrandBiasConfig
from .models.evidence import EvidenceGroup, ReadEvidence, group_evidence

__all__ = [
    "__version__",
    "AlleleLikelihoods",
    "EvidenceGroup",
    "Genotype",
    "GenotypeBuilder",
    "ReadEvidence",
    "STRAND_BIAS_BY_SAMPLE_KEY",
    "Site",
    "StrandBiasBySample",
    "StrandBiasConfig",
    "alt_forward_count",
    "alt_reverse_count",
    "get_contingency_array",
    "get_contingency_table",
    "group_evidence",
]
