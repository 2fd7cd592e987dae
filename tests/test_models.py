"""Tests for core data models and the FORMAT header registry."""

import pytest
from pydantic import ValidationError

from strandbias.constants import FORMAT_HEADER_LINES, get_format_line
from strandbias.models.core import (
    GenomicInterval,
    Genotype,
    GenotypeBuilder,
    Locatable,
    Site,
    StrandBiasConfig,
)


def test_interval_rejects_inverted_bounds():
    with pytest.raises(ValidationError):
        GenomicInterval(contig="chr1", start=10, end=9)


def test_interval_is_locatable():
    interval = GenomicInterval(contig="chr1", start=1, end=1)
    assert isinstance(interval, Locatable)
    assert str(interval) == "chr1:1-1"


def test_site_normalizes_and_derives():
    site = Site(contig="chr1", pos=100, ref="ac", alts=["a"], original_id="rs1")

    assert site.ref == "AC"
    assert site.alts == ["A"]
    assert site.end == 101
    assert site.alleles == ["AC", "A"]
    assert not site.is_snv
    assert site.interval == GenomicInterval(contig="chr1", start=100, end=101)
    assert str(site) == "chr1:100:AC:A"


def test_site_rejects_mismatched_allele_counts():
    with pytest.raises(ValidationError):
        Site(contig="chr1", pos=1, ref="A", alts=["C", "T"], allele_counts=[1])


@pytest.mark.parametrize(
    "alts, counts, expected",
    [
        (["C", "T"], None, "C"),
        (["C", "T"], [1, 4], "T"),
        (["C", "T"], [2, 2], "C"),
        ([], None, None),
    ],
)
def test_alt_with_highest_allele_count(alts, counts, expected):
    site = Site(contig="chr1", pos=1, ref="A", alts=alts, allele_counts=counts)
    assert site.alt_with_highest_allele_count == expected


@pytest.mark.parametrize(
    "alleles, called",
    [
        (["A", "T"], True),
        ([None, "T"], True),
        ([None, None], False),
        ([], False),
    ],
)
def test_genotype_is_called(alleles, called):
    assert Genotype(sample_name="s", alleles=alleles).is_called is called


def test_genotype_builder_leaves_source_untouched():
    genotype = Genotype(sample_name="s", alleles=["A", "T"], attributes={"DP": 10})
    builder = GenotypeBuilder(genotype).attribute("SB", [1, 2, 3, 4])

    made = builder.make()

    assert made.attributes == {"DP": 10, "SB": [1, 2, 3, 4]}
    assert genotype.attributes == {"DP": 10}
    assert made.sample_name == "s"


def test_strand_bias_header_line():
    line = get_format_line("SB")

    assert line is FORMAT_HEADER_LINES["SB"]
    assert str(line) == (
        '##FORMAT=<ID=SB,Number=4,Type=Integer,Description="Per-sample component '
        "statistics which comprise the Fisher's Exact Test to detect strand bias.\">"
    )


def test_unknown_header_key():
    with pytest.raises(KeyError):
        get_format_line("XX")


def test_config_defaults(sample_bam, sample_vcf):
    config = StrandBiasConfig(variant_file=sample_vcf, bam_files={"tumor": sample_bam})

    assert config.min_mapping_quality == 20
    assert config.min_base_quality == 0
    assert config.filter_duplicates is True


def test_config_missing_files(tmp_path, sample_bam):
    with pytest.raises(ValidationError, match="File not found"):
        StrandBiasConfig(variant_file=tmp_path / "nope.vcf", bam_files={"tumor": sample_bam})
    with pytest.raises(ValidationError, match="not found"):
        StrandBiasConfig(bam_files={"tumor": tmp_path / "nope.bam"})
    with pytest.raises(ValidationError, match="At least one BAM"):
        StrandBiasConfig(bam_files={})


def test_config_rejects_negative_thresholds(sample_bam):
    with pytest.raises(ValidationError):
        StrandBiasConfig(bam_files={"tumor": sample_bam}, min_mapping_quality=-1)


def test_config_has_no_count_threshold():
    """The SB table always uses a zero threshold; the config does not offer one."""
    assert "min_count" not in StrandBiasConfig.model_fields
