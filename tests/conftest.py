"""Pytest configuration and fixtures."""

import sys
from collections.abc import Callable
from pathlib import Path

import pysam
import pytest

# Add src directory to path so tests use local code, not installed package
project_root = Path(__file__).parent.parent
src_dir = project_root / "src"
if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))

from strandbias.models.core import Genotype, Site  # noqa: E402
from strandbias.models.evidence import ReadEvidence  # noqa: E402

# Site used by the on-disk fixtures: chr1:100 A>T, read bases at offset 4
SITE_POS = 100
READ_START0 = 95
READ_LEN = 10


@pytest.fixture
def snv_site() -> Site:
    return Site(contig="chr1", pos=SITE_POS, ref="A", alts=["T"])


@pytest.fixture
def called_genotype() -> Genotype:
    return Genotype(sample_name="tumor", alleles=["A", "T"])


@pytest.fixture
def make_read() -> Callable[..., ReadEvidence]:
    """Factory for reads sitting over chr1:100."""
    counter = iter(range(1_000_000))

    def _make(
        base: str | None = "A",
        is_reverse: bool = False,
        base_quality: int | None = 30,
        contig: str = "chr1",
        start: int = READ_START0 + 1,
        end: int = READ_START0 + READ_LEN,
    ) -> ReadEvidence:
        return ReadEvidence(
            name=f"read{next(counter)}",
            contig=contig,
            start=start,
            end=end,
            is_reverse=is_reverse,
            mapping_quality=60,
            base=base,
            base_quality=base_quality,
        )

    return _make


def _segment(header, name: str, base: str, flag: int = 0, mapq: int = 60) -> pysam.AlignedSegment:
    seq = "C" * 4 + base + "C" * (READ_LEN - 5)
    seg = pysam.AlignedSegment(header)
    seg.query_name = name
    seg.query_sequence = seq
    seg.flag = flag
    seg.reference_id = 0
    seg.reference_start = READ_START0
    seg.mapping_quality = mapq
    seg.cigarstring = f"{READ_LEN}M"
    seg.query_qualities = pysam.qualitystring_to_array("?" * READ_LEN)  # Q30
    return seg


@pytest.fixture
def sample_bam(tmp_path: Path) -> Path:
    """
    Indexed BAM over chr1:100 with SB 3,2,1,4.

    Also holds one duplicate and one low-MAPQ ALT read that default filters drop.
    """
    path = tmp_path / "tumor.bam"
    header = {"HD": {"VN": "1.6", "SO": "coordinate"}, "SQ": [{"SN": "chr1", "LN": 1000}]}
    reads = (
        [("A", 0)] * 3
        + [("A", 16)] * 2
        + [("T", 0)] * 1
        + [("T", 16)] * 4
    )
    with pysam.AlignmentFile(str(path), "wb", header=header) as out:
        for i, (base, flag) in enumerate(reads):
            out.write(_segment(out.header, f"r{i}", base, flag))
        out.write(_segment(out.header, "dup", "T", flag=1024))
        out.write(_segment(out.header, "lowmq", "T", mapq=5))
    pysam.index(str(path))
    return path


@pytest.fixture
def sample_vcf(tmp_path: Path) -> Path:
    """Two sites; 'normal' is a no-call at the first and hom-ref at the second."""
    path = tmp_path / "calls.vcf"
    lines = [
        "##fileformat=VCFv4.2",
        "##contig=<ID=chr1,length=1000>",
        '##INFO=<ID=AC,Number=A,Type=Integer,Description="Allele count">',
        '##FORMAT=<ID=GT,Number=1,Type=String,Description="Genotype">',
        "\t".join(["#CHROM", "POS", "ID", "REF", "ALT", "QUAL", "FILTER", "INFO", "FORMAT", "tumor", "normal"]),
        "\t".join(["chr1", "100", "rs1", "A", "T", ".", "PASS", "AC=1", "GT", "0/1", "./."]),
        "\t".join(["chr1", "300", ".", "C", "G", ".", "PASS", "AC=1", "GT", "0/1", "0/0"]),
    ]
    path.write_text("\n".join(lines) + "\n")
    return path
