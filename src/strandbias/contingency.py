"""
Allele-by-strand contingency tables built from read likelihoods.

Rows are REF then ALT, columns forward then reverse strand:

    [[ref_forward, ref_reverse],
     [alt_forward, alt_reverse]]
"""

import logging
from collections.abc import Collection
from typing import Protocol

import numpy as np

from .constants import ARRAY_DIM
from .likelihoods import AlleleLikelihoods
from .models.core import Site

logger = logging.getLogger(__name__)


class ContingencyTableBuilder(Protocol):
    """Callable producing a 2x2 table for some samples at a site."""

    def __call__(
        self,
        likelihoods: AlleleLikelihoods,
        site: Site,
        min_count: int,
        sample_names: Collection[str] | None = None,
    ) -> list[list[int]]: ...


def get_contingency_table(
    likelihoods: AlleleLikelihoods,
    site: Site,
    min_count: int,
    sample_names: Collection[str] | None = None,
) -> list[list[int]]:
    """
    Count informative reads per allele and strand.

    Only the REF allele and the ALT with the highest allele count are tallied;
    reads best explained by any other allele are dropped. Each sample's counts
    are added only if that sample saw more than ``min_count`` reads in total.

    Args:
        likelihoods: Read likelihoods for one or more samples.
        site: Site whose REF/ALT define the table rows.
        min_count: Per-sample total a sample must exceed to contribute.
        sample_names: Samples to include. Defaults to every sample in likelihoods.

    Returns:
        2x2 nested list of ints.
    """
    ref = site.ref
    alt = site.alt_with_highest_allele_count
    samples = likelihoods.samples if sample_names is None else list(sample_names)
    known = set(likelihoods.samples)

    table = np.zeros((ARRAY_DIM, ARRAY_DIM), dtype=np.int64)
    for sample in samples:
        if sample not in known:
            logger.debug("No likelihoods for sample %s at %s", sample, site)
            continue

        sample_table = np.zeros((ARRAY_DIM, ARRAY_DIM), dtype=np.int64)
        for best in likelihoods.best_alleles_breaking_ties(sample):
            if not best.is_informative:
                continue
            if best.allele == ref:
                row = 0
            elif best.allele == alt:
                row = 1
            else:
                continue
            sample_table[row, 1 if best.evidence.is_reverse else 0] += 1

        if sample_table.sum() > min_count:
            table += sample_table

    return table.tolist()
