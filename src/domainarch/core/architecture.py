"""Filtering per-protein hits down to a reportable domain architecture.

A protein is reported only when every requested target profile is
found among its significant hits. Filtering runs in a fixed order:

1. Full-sequence gate: any target hit whose full-sequence E-value is
   above the threshold rejects the whole protein.
2. Independent E-value filter: keep hits at or below the threshold,
   noting which targets were matched.
3. Presence gate: every target must be matched.
4. Sort kept hits by envelope start.
5. Take the first hit per target, in target order ("owns").
6. Check that owned hits agree on query and length.

Example:
    >>> from domainarch.core.architecture import DomainArchitectureFilter
    >>> arch_filter = DomainArchitectureFilter(["Pkinase", "SH2"], i_e_value_threshold=1e-5)
    >>> architecture = arch_filter.apply(batch)
    >>> if architecture is not None:
    ...     print(architecture.models)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

import attrs

from domainarch.core.grouping import ConsistencyError, ProteinBatch
from domainarch.io.hmmscan import HitRecord

logger = logging.getLogger(__name__)


# =============================================================================
# Data Structures
# =============================================================================


@attrs.define(frozen=True, slots=True)
class ProteinArchitecture:
    """Filtered, position-ordered domain hits of one reportable protein.

    Attributes:
        query: Query protein identifier.
        qlen: Query sequence length.
        hits: Hits passing the independent E-value filter, by env_from.
        owns: First hit for each target profile, in target order.
        matched: Target profiles with at least one kept hit.
    """

    query: str
    qlen: int
    hits: tuple[HitRecord, ...]
    owns: tuple[HitRecord, ...]
    matched: frozenset[str]

    @property
    def n_hits(self) -> int:
        """Number of kept hits."""
        return len(self.hits)

    @property
    def models(self) -> list[str]:
        """Profile names of kept hits, left to right."""
        return [hit.model for hit in self.hits]


# =============================================================================
# Filter
# =============================================================================


def exceeds_full_sequence_threshold(
    hits: Iterable[HitRecord],
    target_models: Iterable[str],
    threshold: float,
) -> bool:
    """Whether any target hit has a full-sequence E-value above threshold."""
    targets = set(target_models)
    return any(hit.model in targets and hit.fs_e_value > threshold for hit in hits)


class DomainArchitectureFilter:
    """Decide whether a protein is reportable and build its architecture.

    Attributes:
        target_models: Profiles that must all be present, in report order.
        i_e_value_threshold: Maximum independent E-value, None for no limit.
        fs_e_value_threshold: Maximum full-sequence E-value for target
            hits, None for no limit.
    """

    def __init__(
        self,
        target_models: Sequence[str],
        i_e_value_threshold: float | None = None,
        fs_e_value_threshold: float | None = None,
    ) -> None:
        if not target_models:
            raise ValueError("At least one target model is required")
        for name, threshold in (
            ("i-E-value", i_e_value_threshold),
            ("full-sequence E-value", fs_e_value_threshold),
        ):
            if threshold is not None and threshold < 0:
                raise ValueError(f"Negative {name} threshold: {threshold}")
        self.target_models = tuple(target_models)
        self.i_e_value_threshold = i_e_value_threshold
        self.fs_e_value_threshold = fs_e_value_threshold

    def passes_i_e_value(self, hit: HitRecord) -> bool:
        """Whether a hit survives the independent E-value filter."""
        return self.i_e_value_threshold is None or hit.i_e_value <= self.i_e_value_threshold

    def apply(self, batch: ProteinBatch) -> ProteinArchitecture | None:
        """Filter one protein's hits.

        Args:
            batch: All hits for one query.

        Returns:
            ProteinArchitecture, or None when the protein is not reportable.

        Raises:
            ConsistencyError: If owned hits disagree on query or qlen.
        """
        if self.fs_e_value_threshold is not None and exceeds_full_sequence_threshold(
            batch.hits, self.target_models, self.fs_e_value_threshold
        ):
            logger.debug(f"{batch.query}: target above full-sequence E-value threshold")
            return None

        kept: list[HitRecord] = []
        matched: set[str] = set()
        for hit in batch.hits:
            if not self.passes_i_e_value(hit):
                continue
            kept.append(hit)
            if hit.model in self.target_models:
                matched.add(hit.model)

        # A repeated target counts once in matched, so it can never pass
        if len(matched) < len(self.target_models):
            missing = [m for m in self.target_models if m not in matched]
            logger.debug(f"{batch.query}: missing target(s) {', '.join(missing)}")
            return None
        if not kept:
            return None

        # sorted() is stable, so equal starts keep input order
        kept = sorted(kept, key=lambda hit: hit.env_from)

        owns = []
        for model in self.target_models:
            for hit in kept:
                if hit.model == model:
                    owns.append(hit)
                    break

        query, qlen = self._check_consistency(owns)

        return ProteinArchitecture(
            query=query,
            qlen=qlen,
            hits=tuple(kept),
            owns=tuple(owns),
            matched=frozenset(matched),
        )

    @staticmethod
    def _check_consistency(owns: list[HitRecord]) -> tuple[str, int]:
        first = owns[0]
        for own in owns[1:]:
            if own.query != first.query or own.qlen != first.qlen:
                raise ConsistencyError(
                    f"Failed sanity check: {first.query} (qlen {first.qlen}) vs "
                    f"{own.query} (qlen {own.qlen})"
                )
        return first.query, first.qlen
