"""Protein FASTA access for linker extraction.

This module provides indexed access to protein sequences stored in
FASTA format, using pyfaidx for random access by record name.

Features:
    - Random access to residues by 1-based inclusive coordinates
    - Whole-token lookup of records by query identifier
    - Coordinate validation

Example:
    >>> from domainarch.io.fasta import ProteinAccessor
    >>> with ProteinAccessor("proteins.fa") as proteins:
    ...     name = proteins.find_by_token("P12345")
    ...     linker = proteins.get_subsequence(name, 120, 139)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import pyfaidx

logger = logging.getLogger(__name__)


class FastaFormatError(ValueError):
    """Raised when a FASTA file cannot be indexed."""

    pass


# =============================================================================
# Header Tokens
# =============================================================================

# Separators inside FASTA names such as "sp|P12345|KIN1_HUMAN"
TOKEN_SEPARATORS = "|"


def header_tokens(name: str) -> list[str]:
    """Split a sequence name into its delimiter-separated tokens.

    Args:
        name: Sequence name or full header line (without ">").

    Returns:
        Non-empty tokens in order.

    Example:
        >>> header_tokens("sp|P12345|KIN1_HUMAN")
        ['sp', 'P12345', 'KIN1_HUMAN']
    """
    for separator in TOKEN_SEPARATORS:
        name = name.replace(separator, " ")
    return name.split()


def contains_token_run(tokens: list[str], run: list[str]) -> bool:
    """Check whether ``run`` occurs as a contiguous slice of ``tokens``."""
    if not run:
        return False
    width = len(run)
    return any(
        tokens[i : i + width] == run for i in range(len(tokens) - width + 1)
    )


# =============================================================================
# Main Accessor Class
# =============================================================================


class ProteinAccessor:
    """Indexed protein FASTA access using pyfaidx.

    Attributes:
        path: Path to the FASTA file.

    Example:
        >>> proteins = ProteinAccessor("proteins.fa")
        >>> proteins.get_length("sp|P12345|KIN1_HUMAN")
        412
    """

    def __init__(self, fasta_path: Path | str) -> None:
        """Initialize the accessor.

        Args:
            fasta_path: Path to FASTA file. Will create .fai index if needed.

        Raises:
            FileNotFoundError: If FASTA file doesn't exist.
            FastaFormatError: If pyfaidx cannot index the file.
        """
        self.path = Path(fasta_path)
        if not self.path.exists():
            raise FileNotFoundError(f"FASTA file not found: {self.path}")

        self._fasta: pyfaidx.Fasta | None = None
        self._lengths: dict[str, int] | None = None
        self._tokens: dict[str, list[str]] | None = None

        self._open()

    def _open(self) -> None:
        """Open the FASTA file with pyfaidx."""
        try:
            self._fasta = pyfaidx.Fasta(str(self.path), rebuild=False)
        except (pyfaidx.FastaIndexingError, ValueError) as e:
            raise FastaFormatError(f"Cannot index FASTA {self.path}: {e}") from e

        names = list(self._fasta.keys())
        self._lengths = {name: len(self._fasta[name]) for name in names}
        self._tokens = {name: header_tokens(name) for name in names}

        logger.info(f"Opened FASTA: {self.path.name}, {len(names)} sequences")

    @property
    def names(self) -> list[str]:
        """Record names in file order."""
        if self._lengths is None:
            raise RuntimeError("FASTA file not opened")
        return list(self._lengths)

    def __enter__(self) -> ProteinAccessor:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the FASTA file."""
        if self._fasta is not None:
            self._fasta.close()
            self._fasta = None

    def find_by_token(self, query: str) -> str | None:
        """Find the first record whose name contains ``query`` as whole tokens.

        ``P1`` matches ``P1`` and ``sp|P1|X_HUMAN`` but not ``P10`` or
        ``sp|P1A|X_HUMAN``.

        Args:
            query: Query identifier, possibly itself a ``|`` separated name.

        Returns:
            Matching record name, or None.
        """
        if self._tokens is None:
            raise RuntimeError("FASTA file not opened")

        if query in self._tokens:
            return query

        run = header_tokens(query)
        for name, tokens in self._tokens.items():
            if contains_token_run(tokens, run):
                return name
        return None

    def get_length(self, name: str) -> int:
        """Get the length of a sequence.

        Raises:
            KeyError: If name not in FASTA.
        """
        if self._lengths is None:
            raise RuntimeError("FASTA file not opened")
        if name not in self._lengths:
            raise KeyError(f"Unknown sequence: {name}")
        return self._lengths[name]

    def get_subsequence(self, name: str, start: int, end: int) -> str:
        """Get residues for a 1-based inclusive range.

        Args:
            name: Record name.
            start: First residue (1-based).
            end: Last residue (1-based, inclusive).

        Returns:
            Residue string.

        Raises:
            KeyError: If name not in FASTA.
            ValueError: If coordinates are invalid.
        """
        if self._fasta is None:
            raise RuntimeError("FASTA file not opened")

        length = self.get_length(name)
        if start < 1:
            raise ValueError(f"Start position must be >= 1: {start}")
        if end > length:
            raise ValueError(f"End position {end} exceeds sequence length {length}")
        if start > end:
            raise ValueError(f"Start ({start}) must not exceed end ({end})")

        # pyfaidx slices are 0-based half-open
        return str(self._fasta[name][start - 1 : end])

    def __contains__(self, name: str) -> bool:
        return self._lengths is not None and name in self._lengths

    def __len__(self) -> int:
        return len(self.names)
