"""Tests for building allele-by-strand contingency tables."""

import numpy as np

from strandbias.contingency import get_contingency_table
from strandbias.likelihoods import AlleleLikelihoods
from strandbias.models.core import Site

REF = [-0.01, -3.0]  # strongly REF
ALT = [-3.0, -0.01]  # strongly ALT
FLAT = [-1.0, -1.1]  # within the informative threshold


def _likelihoods(make_read, columns_by_sample, alleles=("A", "T")):
    """columns_by_sample: sample -> list of (likelihood column, is_reverse)."""
    evidence = {}
    values = {}
    for sample, columns in columns_by_sample.items():
        evidence[sample] = [make_read(is_reverse=rev) for _, rev in columns]
        values[sample] = np.array([col for col, _ in columns], dtype=float).T.reshape(
            len(alleles), len(columns)
        )
    return AlleleLikelihoods(list(alleles), evidence, values)


def test_table_counts_alleles_by_strand(make_read, snv_site):
    lk = _likelihoods(
        make_read,
        {"s1": [(REF, False), (REF, False), (REF, True), (ALT, False), (ALT, True), (ALT, True)]},
    )

    assert get_contingency_table(lk, snv_site, 0, ["s1"]) == [[2, 1], [1, 2]]


def test_uninformative_reads_are_ignored(make_read, snv_site):
    lk = _likelihoods(make_read, {"s1": [(FLAT, False), (FLAT, True), (ALT, True)]})

    assert get_contingency_table(lk, snv_site, 0, ["s1"]) == [[0, 0], [0, 1]]


def test_samples_are_summed_and_filtered(make_read, snv_site):
    lk = _likelihoods(
        make_read,
        {
            "s1": [(REF, False), (ALT, True)],
            "s2": [(REF, True), (REF, True), (ALT, False)],
        },
    )

    assert get_contingency_table(lk, snv_site, 0, ["s1"]) == [[1, 0], [0, 1]]
    assert get_contingency_table(lk, snv_site, 0) == [[1, 2], [1, 1]]
    # s1 has only two reads, so it does not pass min_count=2
    assert get_contingency_table(lk, snv_site, 2) == [[0, 2], [1, 0]]


def test_unknown_sample_contributes_nothing(make_read, snv_site):
    lk = _likelihoods(make_read, {"s1": [(REF, False)]})

    assert get_contingency_table(lk, snv_site, 0, ["other"]) == [[0, 0], [0, 0]]


def test_only_highest_count_alt_is_tallied(make_read):
    site = Site(contig="chr1", pos=100, ref="A", alts=["C", "T"], allele_counts=[1, 3])
    ref = [-0.01, -3.0, -3.0]
    alt_c = [-3.0, -0.01, -3.0]
    alt_t = [-3.0, -3.0, -0.01]
    lk = _likelihoods(
        make_read,
        {"s1": [(ref, False), (alt_c, False), (alt_t, True), (alt_t, True)]},
        alleles=("A", "C", "T"),
    )

    assert get_contingency_table(lk, site, 0, ["s1"]) == [[1, 0], [0, 2]]


def test_no_reads_gives_zero_table(snv_site):
    lk = AlleleLikelihoods(["A", "T"], {"s1": []})

    table = get_contingency_table(lk, snv_site, 0, ["s1"])

    assert table == [[0, 0], [0, 0]]
    assert all(type(c) is int for row in table for c in row)
