"""
Input Adapters: sites and genotypes from VCF, reads from BAM.
"""

import logging
from collections.abc import Iterator
from pathlib import Path

import pysam

from ..core.kernel import CoordinateKernel
from ..models.core import Genotype, Site
from ..models.evidence import ReadEvidence

logger = logging.getLogger(__name__)


class VcfReader:
    """
    Reads sites and per-sample genotypes from a VCF.

    Iterating yields ``(site, genotypes)`` with genotypes keyed by sample name.
    """

    def __init__(self, path: Path):
        self.path = path
        self._vcf = pysam.VariantFile(str(path))

    @property
    def samples(self) -> list[str]:
        return list(self._vcf.header.samples)

    def __iter__(self) -> Iterator[tuple[Site, dict[str, Genotype]]]:
        has_ac = "AC" in self._vcf.header.info
        for record in self._vcf:
            allele_counts = None
            if has_ac:
                ac = record.info.get("AC")
                if ac is not None:
                    allele_counts = [int(c) for c in ac] if isinstance(ac, tuple) else [int(ac)]

            # pysam VariantRecord.pos is already 1-based
            site = CoordinateKernel.vcf_to_site(
                chrom=record.chrom,
                pos=record.pos,
                ref=record.ref,
                alts=record.alts,
                original_id=record.id,
                allele_counts=allele_counts,
            )

            has_gt = "GT" in record.format
            genotypes = {}
            for name, sample in record.samples.items():
                alleles = list(sample.alleles) if has_gt and sample.alleles else []
                genotypes[name] = Genotype(sample_name=name, alleles=alleles)

            yield site, genotypes

    def close(self):
        self._vcf.close()

    def __enter__(self) -> "VcfReader":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class AlignmentSource:
    """
    Fetches filtered reads over a site from one indexed BAM/CRAM.
    """

    def __init__(
        self,
        path: Path,
        min_mapping_quality: int = 20,
        filter_duplicates: bool = True,
        filter_secondary: bool = False,
        filter_supplementary: bool = False,
    ):
        self.path = path
        self.min_mapping_quality = min_mapping_quality
        self.filter_duplicates = filter_duplicates
        self.filter_secondary = filter_secondary
        self.filter_supplementary = filter_supplementary
        self._bam = pysam.AlignmentFile(str(path), "rb")
        self._warned_contigs: set[str] = set()

    def _should_filter_alignment(self, aln: pysam.AlignedSegment) -> bool:
        """True if the alignment is excluded from counting."""
        if aln.is_unmapped:
            return True
        if self.filter_duplicates and aln.is_duplicate:
            return True
        if self.filter_secondary and aln.is_secondary:
            return True
        if self.filter_supplementary and aln.is_supplementary:
            return True
        return aln.mapping_quality < self.min_mapping_quality

    def fetch(self, site: Site) -> list[ReadEvidence]:
        """Reads overlapping the site's first REF base that pass the filters."""
        contig, start, _ = CoordinateKernel.to_fetch_region(site)
        bam_contig = CoordinateKernel.match_contig(contig, self._bam.references)
        if bam_contig is None:
            if contig not in self._warned_contigs:
                logger.warning("Contig %s not found in %s; its sites get no reads", contig, self.path)
                self._warned_contigs.add(contig)
            return []

        reads = []
        for aln in self._bam.fetch(bam_contig, start, start + 1):
            if self._should_filter_alignment(aln):
                continue
            reads.append(ReadEvidence.from_alignment(aln, site_pos=site.pos))
        return reads

    def close(self):
        self._bam.close()

    def __enter__(self) -> "AlignmentSource":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
