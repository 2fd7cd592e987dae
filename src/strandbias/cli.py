"""
CLI Entry Point: Exposes strandbias counting via the command line.
"""

import logging
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console

from . import __version__
from .annotator import StrandBiasBySample
from .models.core import StrandBiasConfig
from .pipeline import Pipeline, render_results
from .utils.logging import setup_logging

app = typer.Typer(help="strandbias: per-sample forward/reverse read counts for REF and ALT")

console = Console()
logger = logging.getLogger(__name__)


@app.callback()
def main():
    """
    strandbias: per-sample forward/reverse read counts for REF and ALT
    """
    pass


def parse_bam_spec(spec: str) -> tuple[str, Path]:
    """
    Split ``SAMPLE:PATH`` into its parts.

    A bare path uses the file stem as the sample name.
    """
    name, sep, path = spec.partition(":")
    if not sep:
        bam_path = Path(spec)
        return bam_path.stem, bam_path
    if not name or not path:
        raise ValueError(f"Invalid BAM specification '{spec}', expected SAMPLE:PATH")
    return name, Path(path)


@app.command()
def run(
    variant_file: Path = typer.Option(
        ..., "--variants", "-v", help="VCF with sites and sample genotypes"
    ),
    bam_specs: list[str] = typer.Option(
        ..., "--bam", "-b", help="SAMPLE:PATH or PATH to an indexed BAM. Repeatable."
    ),
    min_mapq: int = typer.Option(20, "--min-mapq", help="Minimum mapping quality"),
    min_baseq: int = typer.Option(0, "--min-baseq", help="Minimum base quality"),
    filter_duplicates: bool = typer.Option(True, help="Filter duplicate reads"),
    filter_secondary: bool = typer.Option(False, help="Filter secondary alignments"),
    filter_supplementary: bool = typer.Option(False, help="Filter supplementary alignments"),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Enable verbose debug logging"),
    log_file: Path | None = typer.Option(None, "--log-file", help="Also write logs to this file"),
):
    """
    Count REF/ALT reads per strand for every sample at every VCF site.
    """
    setup_logging(verbose=verbose, log_file=str(log_file) if log_file else None)

    bams: dict[str, Path] = {}
    try:
        for spec in bam_specs:
            name, path = parse_bam_spec(spec)
            if name in bams:
                raise ValueError(f"Sample '{name}' given more than once")
            bams[name] = path
    except ValueError as e:
        console.print(f"[bold red]Error: {e}[/bold red]")
        raise typer.Exit(code=1) from e

    try:
        config = StrandBiasConfig(
            variant_file=variant_file,
            bam_files=bams,
            min_mapping_quality=min_mapq,
            min_base_quality=min_baseq,
            filter_duplicates=filter_duplicates,
            filter_secondary=filter_secondary,
            filter_supplementary=filter_supplementary,
        )
    except ValidationError as e:
        for err in e.errors():
            console.print(f"[bold red]Error: {err['msg']}[/bold red]")
        raise typer.Exit(code=1) from e

    logger.debug("Running with %s", config)

    try:
        results = Pipeline(config, console=console).run()
    except (OSError, ValueError) as e:
        console.print(f"[bold red]Error: {e}[/bold red]")
        raise typer.Exit(code=1) from e

    console.print(render_results(results))


@app.command()
def header():
    """
    Print the FORMAT header lines for the fields this tool produces.
    """
    for line in StrandBiasBySample().descriptions:
        typer.echo(str(line))


@app.command()
def version():
    """
    Print the installed version.
    """
    typer.echo(f"py-strandbias {__version__}")


if __name__ == "__main__":
    app()
