"""Assembling one tab-separated report line per protein.

Columns of a report line:

    query  species  fs_e_value(target 1) ... fs_e_value(target n)
    qlen  n_hits  "model model ..."  overview  detailed

The summarizer drives the whole pass: hits are grouped per protein,
filtered, rendered, and emitted in input order.

Example:
    >>> from domainarch.config import SummaryConfig
    >>> from domainarch.core.report import ArchitectureSummarizer
    >>> config = SummaryConfig(target_models=("SH2", "Pkinase"))
    >>> summarizer = ArchitectureSummarizer(config)
    >>> with open("report.tsv", "w") as out:
    ...     stats = summarizer.write(read_domtblout("scan.domtblout"), out)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Iterator, TextIO

import attrs

from domainarch.core.architecture import DomainArchitectureFilter, ProteinArchitecture
from domainarch.core.grouping import ProteinGrouper
from domainarch.core.linkers import Linker, LinkerExtractor
from domainarch.core.render import detailed_string, evalue_columns, overview_string
from domainarch.io.fasta import header_tokens
from domainarch.io.hmmscan import HitRecord

if TYPE_CHECKING:
    from domainarch.config import SummaryConfig
    from domainarch.io.fasta import ProteinAccessor

logger = logging.getLogger(__name__)

UNIPROT_DATABASES = ("sp", "tr")


def short_query_id(query: str) -> str:
    """Reduce a UniProt-style "sp|ACC|ID" name to "ID".

    Other identifiers are returned unchanged.
    """
    tokens = header_tokens(query)
    if len(tokens) >= 3 and tokens[0] in UNIPROT_DATABASES:
        return tokens[2]
    return query


# =============================================================================
# Report Structures
# =============================================================================


@attrs.define(frozen=True, slots=True)
class ArchitectureReport:
    """Rendered summary of one reportable protein.

    Attributes:
        architecture: Filtered hits the report was built from.
        species: Species label.
        overview: Compact architecture string.
        detailed: Position and E-value annotated architecture string.
        linkers: Linkers between the two target domains, if extracted.
        query_label: Identifier written in the first column.
    """

    architecture: ProteinArchitecture
    species: str
    overview: str
    detailed: str
    linkers: tuple[Linker, ...] = ()
    query_label: str | None = None

    def fields(self) -> list[str]:
        """Report columns in output order."""
        arch = self.architecture
        return [
            self.query_label or arch.query,
            self.species,
            *evalue_columns(arch.owns),
            str(arch.qlen),
            str(arch.n_hits),
            " ".join(arch.models),
            self.overview,
            self.detailed,
        ]

    def to_line(self) -> str:
        """Render as a single tab-separated line (no newline)."""
        return "\t".join(self.fields())


@attrs.define
class SummaryStats:
    """Counts collected over one summarizer pass.

    Attributes:
        n_records: Hit records read.
        n_excluded: Hit records dropped by the exclusion set.
        n_proteins: Proteins (batches) seen.
        n_reported: Proteins written to the report.
        n_linkers: Linkers extracted.
    """

    n_records: int = 0
    n_excluded: int = 0
    n_proteins: int = 0
    n_reported: int = 0
    n_linkers: int = 0

    @property
    def n_filtered(self) -> int:
        """Proteins that failed a filtering gate."""
        return self.n_proteins - self.n_reported


# =============================================================================
# Summarizer
# =============================================================================


class ArchitectureSummarizer:
    """Stream hits into per-protein architecture reports.

    Attributes:
        config: Summary settings.
        stats: Counts for the most recent pass.
    """

    def __init__(
        self,
        config: SummaryConfig,
        accessor: ProteinAccessor | None = None,
    ) -> None:
        """Initialize the summarizer.

        Args:
            config: Summary settings. An empty target list makes every
                pass emit nothing.
            accessor: Protein sequences for linker extraction.
        """
        self.config = config
        self.linker_extractor = LinkerExtractor(accessor)
        self.stats = SummaryStats()

        self._filter: DomainArchitectureFilter | None = None
        if config.target_models:
            self._filter = DomainArchitectureFilter(
                config.target_models,
                i_e_value_threshold=config.i_e_value_threshold,
                fs_e_value_threshold=config.fs_e_value_threshold,
            )

    def build_report(self, architecture: ProteinArchitecture) -> ArchitectureReport:
        """Render a filtered protein into a report."""
        linkers = ()
        if self.config.extracts_linkers:
            linkers = tuple(
                self.linker_extractor.linkers_for(architecture, self.config.target_models)
            )

        query_label = None
        if self.config.short_ids:
            query_label = short_query_id(architecture.query)

        return ArchitectureReport(
            architecture=architecture,
            species=self.config.species,
            overview=overview_string(architecture.hits),
            detailed=detailed_string(architecture.hits, architecture.qlen),
            linkers=linkers,
            query_label=query_label,
        )

    def summarize(self, records: Iterable[HitRecord]) -> Iterator[ArchitectureReport]:
        """Yield one report per reportable protein, in input order.

        Raises:
            ConsistencyError: If the input is malformed (see ProteinGrouper
                and DomainArchitectureFilter).
        """
        self.stats = SummaryStats()
        grouper = ProteinGrouper(exclude_models=self.config.exclude_models)

        if self._filter is None:
            logger.warning("No target models given, nothing will be reported")

        for batch in grouper.group(records):
            self.stats.n_proteins += 1
            if self._filter is None:
                continue

            architecture = self._filter.apply(batch)
            if architecture is None:
                continue

            report = self.build_report(architecture)
            self.stats.n_reported += 1
            self.stats.n_linkers += len(report.linkers)
            yield report

        self.stats.n_records = grouper.n_records
        self.stats.n_excluded = grouper.n_excluded
        logger.info(
            f"Reported {self.stats.n_reported} of {self.stats.n_proteins} proteins "
            f"({self.stats.n_records} hits read)"
        )

    def write(
        self,
        records: Iterable[HitRecord],
        handle: TextIO,
        linker_handle: TextIO | None = None,
    ) -> SummaryStats:
        """Write report lines (and optionally linker FASTA records).

        Args:
            records: Hits ordered by query.
            handle: Destination for report lines.
            linker_handle: Destination for linker FASTA records.

        Returns:
            Counts for this pass.
        """
        for report in self.summarize(records):
            handle.write(report.to_line() + "\n")
            if linker_handle is not None:
                for linker in report.linkers:
                    linker_handle.write(linker.to_fasta())
        return self.stats
