"""
Pipeline Orchestrator: runs strand bias counting over a VCF and BAMs.

This module handles:
1. Reading sites and genotypes from the VCF.
2. Iterating over samples (one BAM each).
3. Scoring each sample's reads at each site and annotating SB.
4. Summarizing results on the console.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
)
from rich.table import Table

from .annotator import StrandBiasBySample, alt_forward_count, alt_reverse_count
from .constants import STRAND_BIAS_BY_SAMPLE_KEY
from .io.input import AlignmentSource, VcfReader
from .likelihoods import AlleleLikelihoods
from .models.core import GenomicInterval, Genotype, GenotypeBuilder, Site, StrandBiasConfig
from .models.evidence import group_evidence
from .utils.logging import timed

logger = logging.getLogger(__name__)


@dataclass
class SampleStrandCounts:
    """SB result for one sample at one site; counts is None when skipped."""

    site: Site
    sample: str
    counts: list[int] | None
    read_span: GenomicInterval | None = None
    n_reads: int = 0


class Pipeline:
    def __init__(
        self,
        config: StrandBiasConfig,
        console: Console | None = None,
        annotator: StrandBiasBySample | None = None,
    ):
        self.config = config
        self.console = console or Console()
        self.annotator = annotator or StrandBiasBySample(logger=logger)

    def run(self) -> list[SampleStrandCounts]:
        """Execute the pipeline and return one result per site and sample."""
        if self.config.variant_file is None:
            raise ValueError("A variant file is required to run the pipeline")

        with timed("Loading sites", logger, logging.INFO) as tally:
            sites = self._load_sites(self.config.variant_file)
            tally["sites"] = len(sites)

        if not sites:
            logger.warning("No sites found in %s", self.config.variant_file)
            return []

        results: list[SampleStrandCounts] = []
        samples = list(self.config.bam_files.items())

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeRemainingColumn(),
            console=self.console,
            transient=True,
        ) as progress:
            task = progress.add_task("[cyan]Processing samples...", total=len(samples))

            for sample_name, bam_path in samples:
                progress.update(task, description=f"[cyan]Processing {sample_name}...")
                try:
                    results.extend(self._process_sample(sample_name, bam_path, sites))
                except (OSError, ValueError) as e:
                    logger.error("Error processing sample %s: %s", sample_name, e)
                    # Continue to next sample
                progress.advance(task)

        return results

    def _load_sites(self, path: Path) -> list[tuple[Site, dict[str, Genotype]]]:
        with VcfReader(path) as reader:
            return list(reader)

    def _process_sample(
        self,
        sample_name: str,
        bam_path: Path,
        sites: list[tuple[Site, dict[str, Genotype]]],
    ) -> list[SampleStrandCounts]:
        results = []
        with timed(f"sample {sample_name}", logger, logging.INFO) as tally, AlignmentSource(
            bam_path,
            min_mapping_quality=self.config.min_mapping_quality,
            filter_duplicates=self.config.filter_duplicates,
            filter_secondary=self.config.filter_secondary,
            filter_supplementary=self.config.filter_supplementary,
        ) as source:
            for site, genotypes in sites:
                genotype = genotypes.get(sample_name)
                if genotype is None:
                    logger.debug("Sample %s has no genotype in the VCF at %s", sample_name, site)
                    genotype = Genotype.no_call(sample_name)
                result = self.count_site(site, genotype, source.fetch(site))
                tally["sites"] += 1
                tally["reads"] += result.n_reads
                tally["skipped" if result.counts is None else "annotated"] += 1
                results.append(result)
        return results

    def count_site(self, site: Site, genotype: Genotype, reads) -> SampleStrandCounts:
        """Annotate one sample at one site from already-fetched reads."""
        read_span = None
        if reads:
            group = group_evidence(reads)
            read_span = group.interval
            logger.debug("%s: %d reads spanning %s", genotype.sample_name, len(group), read_span)

        likelihoods = AlleleLikelihoods.from_reads(
            site,
            {genotype.sample_name: reads},
            min_base_quality=self.config.min_base_quality,
        )
        builder = GenotypeBuilder(genotype)
        self.annotator.annotate(None, site, genotype, builder, likelihoods)

        return SampleStrandCounts(
            site=site,
            sample=genotype.sample_name,
            counts=builder.attributes.get(STRAND_BIAS_BY_SAMPLE_KEY),
            read_span=read_span,
            n_reads=len(reads),
        )


def render_results(results: list[SampleStrandCounts]) -> Table:
    """Tabulate SB results for console display."""
    table = Table(title="Strand bias by sample")
    table.add_column("Site")
    table.add_column("Sample")
    table.add_column("Reads", justify="right")
    table.add_column("SB")
    table.add_column("ALT fwd", justify="right")
    table.add_column("ALT rev", justify="right")

    for r in results:
        if r.counts is None:
            table.add_row(str(r.site), r.sample, str(r.n_reads), "[dim]skipped[/dim]", "", "")
            continue
        table.add_row(
            str(r.site),
            r.sample,
            str(r.n_reads),
            ",".join(str(c) for c in r.counts),
            str(alt_forward_count(r.counts)),
            str(alt_reverse_count(r.counts)),
        )
    return table
