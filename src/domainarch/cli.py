"""Command-line interface for domainarch.

This module provides the main entry point for the domainarch CLI tool.
It uses Click to define commands.

Commands:
    summarize: Write one domain architecture line per qualifying protein

Example:
    $ domainarch --help
    $ domainarch summarize scan.domtblout -m SH2/Pkinase -e 1e-5 > report.tsv
    $ domainarch summarize scan.domtblout proteins.fa -m SH2/Pkinase --linkers linkers.fa
"""

from pathlib import Path
from typing import Optional, TextIO

import click
from rich.console import Console

from domainarch import __version__

# Messages go to stderr; stdout carries the report
console = Console(stderr=True)


@click.group()
@click.version_option(version=__version__, prog_name="domainarch")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output.")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-error output.")
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    help="Also write debug-level logs to this file.",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, quiet: bool, log_file: Optional[Path]) -> None:
    """domainarch: Summarize protein domain architectures from hmmscan output.

    Groups hmmscan domain hits per protein, keeps proteins that carry all
    requested target domains, and reports their domain order and gaps.
    """
    from domainarch.utils.logging import setup_logging

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet

    verbosity = 2 if verbose else 0 if quiet else 1
    setup_logging(verbosity=verbosity, log_file=log_file)


# =============================================================================
# summarize command
# =============================================================================


@main.command()
@click.argument(
    "hmmscan_output",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.argument(
    "sequences",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=False,
)
@click.option(
    "-m",
    "--models",
    multiple=True,
    help="Target model(s) required in every reported protein. "
    "Slash-separated (SH2/Pkinase) or repeated.",
)
@click.option(
    "-e",
    "--i-evalue",
    "i_evalue",
    type=float,
    default=None,
    help="i-E-value threshold for domain hits (default: no threshold).",
)
@click.option(
    "-E",
    "--fs-evalue",
    "fs_evalue",
    type=float,
    default=None,
    help="Full-sequence E-value threshold for target hits (default: no threshold).",
)
@click.option(
    "-s",
    "--species",
    type=str,
    default=None,
    help="Species label for the report. [default: HUMAN]",
)
@click.option(
    "--exclude-model",
    "exclude_models",
    multiple=True,
    help="Model to ignore entirely. May be repeated.",
)
@click.option(
    "--short-ids",
    is_flag=True,
    help="Report UniProt-style queries (sp|ACC|ID) by their ID only.",
)
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="TOML configuration file ([summary] table). Options override it.",
)
@click.option(
    "-o",
    "--output",
    type=click.File("w"),
    default="-",
    help="Output report TSV. [default: stdout]",
)
@click.option(
    "--linkers",
    "linkers_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write linkers between the two target domains as FASTA. "
    "Requires SEQUENCES and exactly two models.",
)
@click.pass_context
def summarize(
    ctx: click.Context,
    hmmscan_output: Path,
    sequences: Optional[Path],
    models: tuple[str, ...],
    i_evalue: Optional[float],
    fs_evalue: Optional[float],
    species: Optional[str],
    exclude_models: tuple[str, ...],
    short_ids: bool,
    config_path: Optional[Path],
    output: TextIO,
    linkers_path: Optional[Path],
) -> None:
    """Summarize domain architectures of proteins in an hmmscan domain table.

    HMMSCAN_OUTPUT is the table written by ``hmmscan --domtblout``.
    SEQUENCES is an optional protein FASTA used to extract linkers when
    exactly two target models are given.

    \b
    Output columns (tab-separated):
    - query id and species label
    - full-sequence E-value of each target model
    - protein length and number of kept hits
    - kept models, overview architecture, detailed architecture

    Example:
        $ domainarch summarize scan.domtblout -m SH2/Pkinase -e 1e-5 -E 1e-10
    """
    from domainarch.config import ConfigurationError, SummaryConfig, parse_model_list
    from domainarch.core.grouping import ConsistencyError
    from domainarch.core.report import ArchitectureSummarizer
    from domainarch.io.fasta import FastaFormatError, ProteinAccessor
    from domainarch.io.hmmscan import HmmscanFormatError, read_domtblout
    from domainarch.utils.logging import Timer, get_logger

    logger = get_logger(__name__)
    verbose = ctx.obj.get("verbose", False)
    quiet = ctx.obj.get("quiet", False)

    accessor = None
    linker_handle = None
    try:
        config = SummaryConfig.load(config_path)
        target_models = tuple(m for value in models for m in parse_model_list(value))
        config = config.evolve(
            target_models=target_models or None,
            i_e_value_threshold=i_evalue,
            fs_e_value_threshold=fs_evalue,
            species=species,
            exclude_models=exclude_models or None,
            short_ids=short_ids or None,
        )
        config.validate()

        if linkers_path is not None:
            if sequences is None:
                raise ConfigurationError("--linkers requires a SEQUENCES file")
            if not config.extracts_linkers:
                raise ConfigurationError("--linkers requires exactly two target models")

        if sequences is not None:
            accessor = ProteinAccessor(sequences)
        if linkers_path is not None:
            linker_handle = open(linkers_path, "w")

        logger.debug(f"Configuration: {config.to_dict()}")
        summarizer = ArchitectureSummarizer(config, accessor=accessor)
        with Timer("Summarizing domain architectures", logger):
            stats = summarizer.write(read_domtblout(hmmscan_output), output, linker_handle)

        if not quiet:
            console.print("")
            console.print("[bold]Summary:[/bold]")
            console.print(f"  Hits read:           {stats.n_records:,}")
            console.print(f"  Hits excluded:       {stats.n_excluded:,}")
            console.print(f"  Proteins seen:       {stats.n_proteins:,}")
            console.print(f"  Proteins reported:   {stats.n_reported:,}")
            if linker_handle is not None:
                console.print(f"  Linkers extracted:   {stats.n_linkers:,}")
                console.print(f"[green]Wrote linkers:[/green] {linkers_path}")

    except (
        ConfigurationError,
        ConsistencyError,
        HmmscanFormatError,
        FastaFormatError,
        FileNotFoundError,
    ) as e:
        console.print(f"[red]Error:[/red] {e}")
        if verbose:
            import traceback

            traceback.print_exc()
        raise SystemExit(1)

    finally:
        if linker_handle is not None:
            linker_handle.close()
        if accessor is not None:
            accessor.close()


if __name__ == "__main__":
    main()
