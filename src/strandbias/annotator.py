"""
Per-sample strand bias annotation (SB).

SB holds four read counts, in this order:

    REF forward, REF reverse, ALT forward, ALT reverse

For example ``SB=23,30,33,18`` means 23 forward and 30 reverse reads support
REF while 33 forward and 18 reverse reads support ALT. Downstream strand bias
tests (Fisher's exact test, symmetric odds ratio) read these counts.
"""

import logging
import numbers
from collections.abc import Sequence
from typing import Any

import numpy as np

from .constants import ARRAY_DIM, STRAND_BIAS_BY_SAMPLE_KEY, get_format_line
from .contingency import ContingencyTableBuilder, get_contingency_table
from .likelihoods import AlleleLikelihoods
from .models.core import FormatHeaderLine, Genotype, GenotypeBuilder, Site


class StrandBiasBySample:
    """
    Attaches the flattened REF/ALT by forward/reverse read counts to a genotype.

    Args:
        logger: Where skipped-annotation warnings go. Defaults to this module's logger.
        table_builder: Produces the 2x2 table. Defaults to ``get_contingency_table``.
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        table_builder: ContingencyTableBuilder = get_contingency_table,
    ):
        self.logger = logger or logging.getLogger(__name__)
        self.table_builder = table_builder

    def annotate(
        self,
        ref_context: Any,
        site: Site,
        genotype: Genotype,
        builder: GenotypeBuilder,
        likelihoods: AlleleLikelihoods | None,
    ) -> None:
        """
        Add SB for ``genotype`` to ``builder``.

        Nothing is written when likelihoods are missing or the genotype is a
        no-call; a warning is logged instead.

        Raises:
            ValueError: If site, genotype or builder is None, or the table
                builder returns anything but a 2x2 table.
        """
        for name, value in (("site", site), ("genotype", genotype), ("builder", builder)):
            if value is None:
                raise ValueError(f"{name} cannot be None")

        if likelihoods is None or not genotype.is_called:
            self.logger.warning(
                "Annotation will not be calculated, genotype is not called "
                "or allele likelihoods are missing"
            )
            return

        table = self.table_builder(likelihoods, site, 0, [genotype.sample_name])
        builder.attribute(STRAND_BIAS_BY_SAMPLE_KEY, get_contingency_array(table))

    @property
    def key_names(self) -> list[str]:
        return [STRAND_BIAS_BY_SAMPLE_KEY]

    @property
    def descriptions(self) -> list[FormatHeaderLine]:
        return [get_format_line(self.key_names[0])]


def get_contingency_array(table: Sequence[Sequence[int]]) -> list[int]:
    """
    Flatten a 2x2 strand table row-major into the SB array.

    Raises:
        ValueError: If the table is not exactly 2x2 or holds anything but
            non-negative integer counts.
    """
    if (
        not _is_row(table)
        or len(table) != ARRAY_DIM
        or any(not _is_row(row) or len(row) != ARRAY_DIM for row in table)
    ):
        raise ValueError(f"Expecting a {ARRAY_DIM}x{ARRAY_DIM} strand bias table.")

    flat = [count for row in table for count in row]
    if any(not _is_count(count) for count in flat):
        raise ValueError(
            f"Expecting a {ARRAY_DIM}x{ARRAY_DIM} strand bias table of non-negative "
            f"integer counts, got {flat}."
        )
    return [int(count) for count in flat]


def _is_row(value: Any) -> bool:
    return isinstance(value, (Sequence, np.ndarray)) and not isinstance(value, (str, bytes))


def _is_count(value: Any) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool) and value >= 0


def alt_forward_count(contingency_array: Sequence[int]) -> int:
    """ALT forward-strand reads from a flattened SB array."""
    return contingency_array[ARRAY_DIM]


def alt_reverse_count(contingency_array: Sequence[int]) -> int:
    """ALT reverse-strand reads from a flattened SB array."""
    return contingency_array[ARRAY_DIM + 1]
