"""
Utility modules for strandbias.

Provides logging setup and step timing.
"""

from .logging import setup_logging, timed

__all__ = [
    "setup_logging",
    "timed",
]
