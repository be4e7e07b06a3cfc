"""Core domain architecture logic for domainarch.

This module contains the per-protein pipeline:

- grouping: Split the hit stream into one batch per protein
- architecture: Threshold filtering and target presence checks
- render: Overview and detailed architecture strings
- linkers: Linker residues between two target domains
- report: Report line assembly and the streaming summarizer

Example:
    >>> from domainarch.core import ArchitectureSummarizer
    >>> summarizer = ArchitectureSummarizer(config)
    >>> for report in summarizer.summarize(hits):
    ...     print(report.to_line())
"""

from domainarch.core.architecture import (
    DomainArchitectureFilter,
    ProteinArchitecture,
)
from domainarch.core.grouping import ConsistencyError, ProteinBatch, ProteinGrouper
from domainarch.core.linkers import Linker, LinkerExtractor
from domainarch.core.render import (
    detailed_string,
    interdomain_marker,
    overview_string,
)
from domainarch.core.report import (
    ArchitectureReport,
    ArchitectureSummarizer,
    SummaryStats,
)

__all__ = [
    # Grouping
    "ProteinGrouper",
    "ProteinBatch",
    "ConsistencyError",
    # Filtering
    "DomainArchitectureFilter",
    "ProteinArchitecture",
    # Rendering
    "interdomain_marker",
    "overview_string",
    "detailed_string",
    # Linkers
    "Linker",
    "LinkerExtractor",
    # Reports
    "ArchitectureReport",
    "ArchitectureSummarizer",
    "SummaryStats",
]
