"""
Core module for strandbias.

Provides the coordinate kernel for VCF/pysam coordinate handling.
"""

from .kernel import CoordinateKernel

__all__ = ["CoordinateKernel"]
