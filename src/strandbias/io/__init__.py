"""
I/O module for strandbias.

Provides readers for variant sites (VCF) and aligned reads (BAM/CRAM).
"""

from .input import AlignmentSource, VcfReader

__all__ = [
    "AlignmentSource",
    "VcfReader",
]
