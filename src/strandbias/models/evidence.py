"""
Evidence containers: single reads and groups of locatable items.
"""

from collections.abc import Iterable, Iterator, Sequence
from typing import Generic, TypeVar, overload

import pysam
from pydantic import BaseModel, Field

from .core import GenomicInterval, Locatable

E = TypeVar("E", bound=Locatable)


class ReadEvidence(BaseModel, frozen=True):
    """
    One aligned read, reduced to what allele and strand assignment need.

    ``base``/``base_quality`` hold the read's base over the site it was fetched
    for, or None when the read does not align a base there (deletion, skip, clip).
    """
    name: str
    contig: str
    start: int = Field(ge=1)
    end: int = Field(ge=1)
    is_reverse: bool = False
    mapping_quality: int = 0
    base: str | None = None
    base_quality: int | None = None

    @classmethod
    def from_alignment(cls, aln: pysam.AlignedSegment, site_pos: int | None = None) -> "ReadEvidence":
        """
        Build from a pysam alignment.

        Args:
            aln: Mapped alignment.
            site_pos: 1-based reference position whose base should be captured.
        """
        base = None
        qual = None
        if site_pos is not None and aln.query_sequence is not None:
            target = site_pos - 1
            for qpos, rpos in aln.get_aligned_pairs(matches_only=True):
                if rpos == target:
                    base = aln.query_sequence[qpos].upper()
                    if aln.query_qualities is not None:
                        qual = aln.query_qualities[qpos]
                    break
                if rpos > target:
                    break

        return cls(
            name=aln.query_name or "",
            contig=aln.reference_name,
            start=aln.reference_start + 1,
            end=aln.reference_end,
            is_reverse=aln.is_reverse,
            mapping_quality=aln.mapping_quality,
            base=base,
            base_quality=qual,
        )


class EvidenceGroup(Sequence, Generic[E]):
    """
    A non-empty, read-only run of evidence treated as one locatable unit.

    The span is computed once from the items handed in: the contig of the first
    item, the smallest start and the largest end. Items on other contigs are
    not rejected; the group still reports the first item's contig.
    """

    __slots__ = ("_items", "_contig", "_start", "_end")

    def __init__(self, evidence: Iterable[E]):
        items = tuple(evidence)
        if not items:
            raise ValueError("Must have at least one unit of evidence")
        self._items: tuple[E, ...] = items
        self._contig = items[0].contig
        self._start = min(e.start for e in items)
        self._end = max(e.end for e in items)

    @property
    def contig(self) -> str:
        return self._contig

    @property
    def start(self) -> int:
        return self._start

    @property
    def end(self) -> int:
        return self._end

    def get_contig(self) -> str:
        return self._contig

    def get_start(self) -> int:
        return self._start

    def get_end(self) -> int:
        return self._end

    @property
    def items(self) -> tuple[E, ...]:
        return self._items

    @property
    def interval(self) -> GenomicInterval:
        return GenomicInterval(contig=self._contig, start=self._start, end=self._end)

    @overload
    def __getitem__(self, index: int) -> E: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[E, ...]: ...

    def __getitem__(self, index):
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[E]:
        return iter(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EvidenceGroup):
            return NotImplemented
        return self._items == other._items

    def __hash__(self) -> int:
        return hash(self._items)

    def __repr__(self) -> str:
        return (
            f"EvidenceGroup({self._contig}:{self._start}-{self._end}, "
            f"n={len(self._items)})"
        )


def group_evidence(evidence: Iterable[E]) -> EvidenceGroup[E]:
    """Group evidence items; raises ValueError on an empty input."""
    return EvidenceGroup(evidence)
