"""Extracting linker sequences between two target domains.

When exactly two target profiles are requested, every place where a hit
of the first target is directly followed (in position order) by a hit
of the second target defines a linker. Its residues are read from the
protein FASTA supplied alongside the hmmscan output.

Example:
    >>> from domainarch.core.linkers import LinkerExtractor
    >>> from domainarch.io.fasta import ProteinAccessor
    >>> extractor = LinkerExtractor(ProteinAccessor("proteins.fa"))
    >>> for linker in extractor.linkers_for(architecture, ["SH2", "Pkinase"]):
    ...     print(linker.start, linker.end, linker.sequence)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

import attrs

from domainarch.io.hmmscan import HitRecord

if TYPE_CHECKING:
    from domainarch.core.architecture import ProteinArchitecture
    from domainarch.io.fasta import ProteinAccessor

logger = logging.getLogger(__name__)


@attrs.define(frozen=True, slots=True)
class Linker:
    """Residues between two adjacent target domains.

    Attributes:
        query: Query protein identifier.
        first_model: Profile of the N-terminal domain.
        second_model: Profile of the C-terminal domain.
        start: First linker residue (1-based).
        end: Last linker residue (1-based, inclusive).
        sequence: Linker residues.
    """

    query: str
    first_model: str
    second_model: str
    start: int
    end: int
    sequence: str

    @property
    def length(self) -> int:
        return len(self.sequence)

    def to_fasta(self) -> str:
        """Render as a FASTA record."""
        return (
            f">{self.query}/{self.start}-{self.end} "
            f"{self.first_model}~{self.second_model}\n{self.sequence}\n"
        )


class LinkerExtractor:
    """Look up linker residues in a protein sequence collection.

    Attributes:
        accessor: Protein sequences, or None when none were supplied.
    """

    def __init__(self, accessor: ProteinAccessor | None) -> None:
        self.accessor = accessor

    def extract(self, first: HitRecord, second: HitRecord, query: str) -> Linker | None:
        """Extract the residues between two hits.

        The span runs from ``first.env_to`` to ``second.env_from - 1``
        (1-based, inclusive).

        Args:
            first: N-terminal hit.
            second: C-terminal hit.
            query: Query identifier to look up.

        Returns:
            Linker, or None for an empty gap, a missing sequence, or
            coordinates outside the sequence.
        """
        if self.accessor is None:
            return None
        if second.env_from - first.env_to < 1:
            return None

        name = self.accessor.find_by_token(query)
        if name is None:
            logger.warning(f"No sequence found for {query}, skipping linker")
            return None

        start = first.env_to
        end = second.env_from - 1
        try:
            sequence = self.accessor.get_subsequence(name, start, end)
        except ValueError as e:
            logger.warning(f"Cannot extract linker for {query}: {e}")
            return None

        linker = Linker(
            query=query,
            first_model=first.model,
            second_model=second.model,
            start=start,
            end=end,
            sequence=sequence,
        )
        logger.debug(f"{query}: linker {start}-{end} ({linker.length} aa)")
        return linker

    def linkers_for(
        self,
        architecture: ProteinArchitecture,
        target_models: Sequence[str],
    ) -> list[Linker]:
        """Extract every target[0] -> target[1] linker of a protein.

        Returns an empty list unless exactly two targets are given.
        """
        if len(target_models) != 2 or self.accessor is None:
            return []

        first_model, second_model = target_models
        linkers = []
        hits = architecture.hits
        for previous, current in zip(hits, hits[1:]):
            if previous.model == first_model and current.model == second_model:
                linker = self.extract(previous, current, architecture.query)
                if linker is not None:
                    linkers.append(linker)
        return linkers
