"""
Coordinate Kernel: conversion of VCF records and contig names into Sites.

Sites keep VCF's 1-based POS. pysam works 0-based, half-open; every
conversion between the two lives here.
"""

from collections.abc import Iterable, Sequence

from strandbias.models.core import Site


class CoordinateKernel:
    """
    Stateless helpers for coordinate and contig-name handling.
    """

    @staticmethod
    def vcf_to_site(
        chrom: str,
        pos: int,
        ref: str,
        alts: Sequence[str] | None,
        original_id: str | None = None,
        allele_counts: Sequence[int] | None = None,
    ) -> Site:
        """
        Build a Site from VCF fields.

        Args:
            chrom: Contig name as written in the VCF.
            pos: 1-based VCF POS.
            ref: Reference allele.
            alts: Alternate alleles; None or '.' entries mean none.
            original_id: VCF ID column.
            allele_counts: INFO/AC, one per alternate allele.
        """
        alt_list = [a for a in (alts or []) if a and a != "."]
        counts = list(allele_counts) if allele_counts is not None else None
        if counts is not None and len(counts) != len(alt_list):
            # AC does not line up with the ALTs we kept; ignore it
            counts = None
        return Site(
            contig=chrom,
            pos=pos,
            ref=ref,
            alts=alt_list,
            original_id=original_id,
            allele_counts=counts,
        )

    @staticmethod
    def to_fetch_region(site: Site) -> tuple[str, int, int]:
        """0-based half-open region covering the site's REF bases."""
        return site.contig, site.pos - 1, site.end

    @staticmethod
    def normalize_chromosome(chrom: str) -> str:
        """
        Normalize chromosome name (remove 'chr' prefix).
        """
        if chrom.lower().startswith("chr"):
            return chrom[3:]
        return chrom

    @staticmethod
    def match_contig(chrom: str, references: Iterable[str]) -> str | None:
        """
        Find the name ``chrom`` goes by in an alignment header.

        An exact match wins; otherwise names are compared with any 'chr'
        prefix removed. Returns None when the contig is absent.
        """
        references = list(references)
        if chrom in references:
            return chrom
        wanted = CoordinateKernel.normalize_chromosome(chrom)
        for name in references:
            if CoordinateKernel.normalize_chromosome(name) == wanted:
                return name
        return None
