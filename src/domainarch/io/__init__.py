"""Input handlers for domainarch.

- hmmscan: per-domain tables (``--domtblout``)
- fasta: indexed protein sequences for linker extraction

Example:
    >>> from domainarch.io import read_domtblout, ProteinAccessor
    >>> hits = read_domtblout("scan.domtblout")
    >>> proteins = ProteinAccessor("proteins.fa")
"""

from domainarch.io.fasta import FastaFormatError, ProteinAccessor, header_tokens
from domainarch.io.hmmscan import HitRecord, HmmscanFormatError, read_domtblout

__all__ = [
    "HitRecord",
    "HmmscanFormatError",
    "read_domtblout",
    "FastaFormatError",
    "ProteinAccessor",
    "header_tokens",
]
