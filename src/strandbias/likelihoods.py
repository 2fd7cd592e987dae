"""
Read-by-allele likelihoods.

For every sample an (alleles x reads) matrix of log10 likelihoods records how
well each read supports each allele. Strand counting only ever looks at each
read's best allele and how far ahead of the runner-up it is.
"""

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

import numpy as np

from .models.core import Site
from .models.evidence import ReadEvidence

logger = logging.getLogger(__name__)

# log10 margin a best allele needs over the runner-up to count as evidence
LOG10_INFORMATIVE_THRESHOLD = 0.2

# Error rate cap: at 0.75 every base is equally likely, so Q0 carries no signal
MAX_BASE_ERROR = 0.75

# Assumed quality for reads stored without base qualities
MISSING_BASE_QUALITY = 20


@dataclass(frozen=True)
class BestAllele:
    """The most likely allele for one read, and its margin over the runner-up."""

    allele: str
    evidence: ReadEvidence
    likelihood: float
    confidence: float

    @property
    def is_informative(self) -> bool:
        return self.confidence >= LOG10_INFORMATIVE_THRESHOLD


class AlleleLikelihoods:
    """
    Per-sample log10 likelihoods of each read under each allele.

    Allele index 0 is the reference allele.
    """

    def __init__(
        self,
        alleles: Sequence[str],
        evidence_by_sample: Mapping[str, Sequence[ReadEvidence]],
        values_by_sample: Mapping[str, np.ndarray] | None = None,
    ):
        if not alleles:
            raise ValueError("At least one allele is required")
        self._alleles = [a.upper() for a in alleles]
        self._evidence = {s: list(reads) for s, reads in evidence_by_sample.items()}
        self._values: dict[str, np.ndarray] = {}

        values_by_sample = values_by_sample or {}
        unknown = set(values_by_sample) - set(self._evidence)
        if unknown:
            raise ValueError(f"Likelihoods given for unknown samples: {sorted(unknown)}")

        for sample, reads in self._evidence.items():
            shape = (len(self._alleles), len(reads))
            if sample in values_by_sample:
                values = np.asarray(values_by_sample[sample], dtype=np.float64)
                if values.shape != shape:
                    raise ValueError(
                        f"Likelihood matrix for sample '{sample}' has shape {values.shape}, "
                        f"expected {shape}"
                    )
            else:
                values = np.zeros(shape, dtype=np.float64)
            self._values[sample] = values

    @property
    def alleles(self) -> list[str]:
        return list(self._alleles)

    @property
    def samples(self) -> list[str]:
        return list(self._evidence)

    def evidence(self, sample: str) -> list[ReadEvidence]:
        return list(self._evidence[sample])

    def values(self, sample: str) -> np.ndarray:
        """Read-only view of a sample's (alleles x reads) matrix."""
        view = self._values[sample].view()
        view.flags.writeable = False
        return view

    def best_alleles_breaking_ties(self, sample: str) -> list[BestAllele]:
        """
        Best allele for every read of ``sample``.

        Alleles within the informative threshold of the maximum are treated as
        tied; the reference allele wins a tie, otherwise the lower index does.
        With a single allele there is nothing to beat, so confidence is 0.
        """
        values = self._values[sample]
        result = []
        for r, read in enumerate(self._evidence[sample]):
            column = values[:, r]
            top = column.max()
            tied = np.flatnonzero(column > top - LOG10_INFORMATIVE_THRESHOLD)
            best = int(tied.min())
            if len(column) > 1:
                confidence = float(column[best]) - float(np.delete(column, best).max())
            else:
                confidence = 0.0
            result.append(
                BestAllele(
                    allele=self._alleles[best],
                    evidence=read,
                    likelihood=float(column[best]),
                    confidence=confidence,
                )
            )
        return result

    @classmethod
    def from_reads(
        cls,
        site: Site,
        reads_by_sample: Mapping[str, Sequence[ReadEvidence]],
        min_base_quality: int = 0,
    ) -> "AlleleLikelihoods":
        """
        Score reads against a site's alleles from the base each read shows there.

        A matching base scores log10(1 - e), any other base log10(e / 3), with
        e the Phred error rate of the base. Reads without a usable base over the
        site get a flat column, which is never informative. Only SNV sites are
        scored; every read at other sites is flat.
        """
        alleles = site.alleles
        if not site.is_snv:
            logger.debug("Site %s is not an SNV; reads will not be scored", site)

        values_by_sample = {}
        for sample, reads in reads_by_sample.items():
            values = np.zeros((len(alleles), len(reads)), dtype=np.float64)
            if site.is_snv:
                for r, read in enumerate(reads):
                    if read.base is None:
                        continue
                    qual = MISSING_BASE_QUALITY if read.base_quality is None else read.base_quality
                    if qual < min_base_quality:
                        continue
                    error = min(10.0 ** (-qual / 10.0), MAX_BASE_ERROR)
                    match = math.log10(1.0 - error)
                    mismatch = math.log10(error / 3.0)
                    for a, allele in enumerate(alleles):
                        values[a, r] = match if read.base == allele else mismatch
            values_by_sample[sample] = values

        return cls(alleles, reads_by_sample, values_by_sample)
