"""Grouping streamed domain hits into per-protein batches.

hmmscan writes all hits for one query on adjacent lines. The grouper
walks the stream once, holding only the current protein's hits, and
hands each completed batch downstream as soon as the query changes.

Example:
    >>> from domainarch.core.grouping import ProteinGrouper
    >>> grouper = ProteinGrouper()
    >>> for batch in grouper.group(read_domtblout("scan.domtblout")):
    ...     print(batch.query, len(batch))
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import Enum
from typing import Iterator

import attrs

from domainarch.io.hmmscan import HitRecord

logger = logging.getLogger(__name__)


class ConsistencyError(ValueError):
    """Raised when hits for one protein contradict each other."""

    pass


class GrouperState(Enum):
    """Accumulator states of the grouper."""

    EMPTY = "empty"
    ACCUMULATING = "accumulating"


@attrs.define(frozen=True, slots=True)
class ProteinBatch:
    """All hits for one query, in input order.

    Attributes:
        query: Query protein identifier.
        qlen: Query sequence length shared by every hit.
        hits: Hits in the order they were read.
    """

    query: str
    qlen: int
    hits: tuple[HitRecord, ...]

    def __len__(self) -> int:
        return len(self.hits)

    def __iter__(self) -> Iterator[HitRecord]:
        return iter(self.hits)


class ProteinGrouper:
    """Split an ordered hit stream into one batch per query.

    Attributes:
        exclude_models: Profile names dropped before accumulation.
        state: Current accumulator state.
        n_records: Records consumed so far.
        n_excluded: Records dropped by the exclusion set.
    """

    def __init__(self, exclude_models: Iterable[str] = ()) -> None:
        self.exclude_models = frozenset(exclude_models)
        self.state = GrouperState.EMPTY
        self.n_records = 0
        self.n_excluded = 0

        self._current_query: str | None = None
        self._pending: list[HitRecord] = []

    def group(self, records: Iterable[HitRecord]) -> Iterator[ProteinBatch]:
        """Yield one ProteinBatch per contiguous run of equal queries.

        Args:
            records: Hits ordered so that each query's hits are adjacent.

        Yields:
            ProteinBatch for every query with at least one retained hit.

        Raises:
            ConsistencyError: If a query's hits disagree on qlen.
        """
        for record in records:
            self.n_records += 1

            if self.state is GrouperState.ACCUMULATING and record.query != self._current_query:
                batch = self._flush()
                if batch is not None:
                    yield batch

            if self.state is GrouperState.EMPTY:
                self._start(record.query)

            if record.model in self.exclude_models:
                self.n_excluded += 1
                continue

            if self._pending and record.qlen != self._pending[0].qlen:
                raise ConsistencyError(
                    f"Inconsistent qlen for {record.query}: "
                    f"{self._pending[0].qlen} vs {record.qlen}"
                )
            self._pending.append(record)

        if self.state is GrouperState.ACCUMULATING:
            batch = self._flush()
            if batch is not None:
                yield batch

    def _start(self, query: str) -> None:
        self._current_query = query
        self.state = GrouperState.ACCUMULATING

    def _flush(self) -> ProteinBatch | None:
        """Close the current group and reset to the empty state."""
        query = self._current_query
        pending = self._pending

        self._current_query = None
        self._pending = []
        self.state = GrouperState.EMPTY

        if not pending:
            logger.debug(f"{query}: all hits excluded")
            return None
        return ProteinBatch(query=query, qlen=pending[0].qlen, hits=tuple(pending))
