"""
Per-sample attribute keys and their FORMAT header declarations.
"""

from .models.core import FormatHeaderLine

STRAND_BIAS_BY_SAMPLE_KEY = "SB"

# Contingency table geometry: rows are REF/ALT, columns forward/reverse strand
ARRAY_DIM = 2
ARRAY_SIZE = ARRAY_DIM * ARRAY_DIM

FORMAT_HEADER_LINES: dict[str, FormatHeaderLine] = {
    STRAND_BIAS_BY_SAMPLE_KEY: FormatHeaderLine(
        id=STRAND_BIAS_BY_SAMPLE_KEY,
        number=ARRAY_SIZE,
        type="Integer",
        description=(
            "Per-sample component statistics which comprise the Fisher's Exact Test "
            "to detect strand bias."
        ),
    ),
}


def get_format_line(key: str) -> FormatHeaderLine:
    """Look up the FORMAT declaration for a key; unknown keys raise KeyError."""
    try:
        return FORMAT_HEADER_LINES[key]
    except KeyError:
        raise KeyError(f"No FORMAT header line registered for key '{key}'") from None
