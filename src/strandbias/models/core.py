"""
Core data models for strandbias.

Coordinates on these models are 1-based and inclusive, matching VCF POS.
"""

from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, Field, field_validator, model_validator


@runtime_checkable
class Locatable(Protocol):
    """Anything that sits on a reference contig between start and end."""

    @property
    def contig(self) -> str: ...

    @property
    def start(self) -> int: ...

    @property
    def end(self) -> int: ...


class GenomicInterval(BaseModel, frozen=True):
    """
    A 1-based, closed genomic interval [start, end].
    """
    contig: str
    start: int = Field(ge=1, description="1-based start position (inclusive)")
    end: int = Field(ge=1, description="1-based end position (inclusive)")

    @model_validator(mode="after")
    def validate_interval(self) -> "GenomicInterval":
        if self.end < self.start:
            raise ValueError(f"End position ({self.end}) must be >= start position ({self.start})")
        return self

    def __str__(self) -> str:
        return f"{self.contig}:{self.start}-{self.end}"


class Site(BaseModel):
    """
    A variant site under analysis: one reference allele and zero or more alternates.
    """
    contig: str
    pos: int = Field(ge=1, description="1-based position of the first REF base")
    ref: str
    alts: list[str] = Field(default_factory=list)
    original_id: str | None = None
    # Per-alt allele counts (VCF INFO/AC), parallel to alts
    allele_counts: list[int] | None = None

    @field_validator("ref")
    @classmethod
    def validate_ref(cls, v: str) -> str:
        if not v:
            raise ValueError("Reference allele must not be empty")
        return v.upper()

    @field_validator("alts")
    @classmethod
    def validate_alts(cls, v: list[str]) -> list[str]:
        return [a.upper() for a in v]

    @model_validator(mode="after")
    def validate_allele_counts(self) -> "Site":
        if self.allele_counts is not None and len(self.allele_counts) != len(self.alts):
            raise ValueError(
                f"Got {len(self.allele_counts)} allele counts for {len(self.alts)} alternate alleles"
            )
        return self

    @property
    def end(self) -> int:
        return self.pos + len(self.ref) - 1

    @property
    def interval(self) -> GenomicInterval:
        return GenomicInterval(contig=self.contig, start=self.pos, end=self.end)

    @property
    def alleles(self) -> list[str]:
        """REF followed by the ALTs, in record order."""
        return [self.ref, *self.alts]

    @property
    def is_snv(self) -> bool:
        return len(self.ref) == 1 and bool(self.alts) and all(len(a) == 1 for a in self.alts)

    @property
    def alt_with_highest_allele_count(self) -> str | None:
        """
        The alternate allele carrying the largest AC.

        Falls back to the first ALT when no counts are known; ties keep the
        earlier allele.
        """
        if not self.alts:
            return None
        if not self.allele_counts:
            return self.alts[0]
        best = max(range(len(self.alts)), key=lambda i: (self.allele_counts[i], -i))
        return self.alts[best]

    def __str__(self) -> str:
        return f"{self.contig}:{self.pos}:{self.ref}:{','.join(self.alts) or '.'}"


class Genotype(BaseModel):
    """
    One sample's call at a site, plus any per-sample attributes attached to it.

    A ``None`` allele is a no-call.
    """
    sample_name: str
    alleles: list[str | None] = Field(default_factory=list)
    attributes: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_called(self) -> bool:
        return any(a is not None for a in self.alleles)

    @classmethod
    def no_call(cls, sample_name: str, ploidy: int = 2) -> "Genotype":
        return cls(sample_name=sample_name, alleles=[None] * ploidy)


class GenotypeBuilder:
    """Collects per-sample attributes and produces an annotated Genotype."""

    def __init__(self, genotype: Genotype):
        self._genotype = genotype
        self._attributes: dict[str, Any] = {}

    def attribute(self, key: str, value: Any) -> "GenotypeBuilder":
        self._attributes[key] = value
        return self

    @property
    def attributes(self) -> dict[str, Any]:
        return dict(self._attributes)

    def make(self) -> Genotype:
        return self._genotype.model_copy(
            update={"attributes": {**self._genotype.attributes, **self._attributes}},
            deep=True,
        )


class FormatHeaderLine(BaseModel, frozen=True):
    """Declaration of a per-sample (FORMAT) field."""
    id: str
    number: int | str
    type: str
    description: str

    def __str__(self) -> str:
        return (
            f'##FORMAT=<ID={self.id},Number={self.number},'
            f'Type={self.type},Description="{self.description}">'
        )


class StrandBiasConfig(BaseModel):
    """
    Configuration for a strand-bias counting run.
    """
    # Input
    variant_file: Path | None = None
    bam_files: dict[str, Path]  # sample_name -> bam_path

    # Read filters
    min_mapping_quality: int = Field(default=20, ge=0)
    min_base_quality: int = Field(default=0, ge=0)
    filter_duplicates: bool = True
    filter_secondary: bool = False
    filter_supplementary: bool = False

    @field_validator("variant_file")
    @classmethod
    def validate_file_exists(cls, v: Path | None) -> Path | None:
        if v is not None and not v.exists():
            raise ValueError(f"File not found: {v}")
        return v

    @model_validator(mode="after")
    def validate_bams(self) -> "StrandBiasConfig":
        if not self.bam_files:
            raise ValueError("At least one BAM file is required")
        for name, path in self.bam_files.items():
            if not path.exists():
                raise ValueError(f"BAM file for sample '{name}' not found: {path}")
        return self
