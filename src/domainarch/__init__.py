"""domainarch: Domain architecture summaries from hmmscan output.

domainarch reads the per-domain table written by hmmscan, keeps the
proteins that carry every requested target domain, and writes one
tab-separated line per protein describing its domain order, gap sizes
and E-values.

Example:
    >>> import domainarch
    >>> domainarch.__version__
    '0.1.0'

Modules:
    io: Readers for hmmscan domain tables and protein FASTA files
    core: Grouping, filtering, rendering and report assembly
    utils: Logging utilities
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
