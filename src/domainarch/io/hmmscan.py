"""Reading hmmscan per-domain tabular output.

This module turns the ``--domtblout`` table written by ``hmmscan`` into
structured domain hit records. Only the columns needed to summarize a
domain architecture are kept.

Column layout (0-based, whitespace separated):
    0: target name (profile)       1: target accession
    2: tlen                        3: query name
    4: query accession             5: qlen
    6: full-sequence E-value       7: full-sequence score
    8: full-sequence bias          9: domain index
    10: domain count               11: c-Evalue
    12: i-Evalue                   13: domain score
    14: domain bias                15-16: hmm from/to
    17-18: ali from/to             19-20: env from/to
    21: acc                        22+: description

Example:
    >>> from domainarch.io.hmmscan import read_domtblout
    >>> for hit in read_domtblout("scan.domtblout"):
    ...     print(hit.query, hit.model, hit.env_from, hit.env_to)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import attrs

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

DOMTBLOUT_MIN_FIELDS = 22

COL_TARGET_NAME = 0
COL_TARGET_ACCESSION = 1
COL_QUERY_NAME = 3
COL_QLEN = 5
COL_FS_EVALUE = 6
COL_I_EVALUE = 12
COL_ENV_FROM = 19
COL_ENV_TO = 20


class HmmscanFormatError(ValueError):
    """Raised when a domtblout line cannot be parsed."""

    pass


# =============================================================================
# Data Structures
# =============================================================================


@attrs.define(frozen=True, slots=True)
class HitRecord:
    """Single domain hit of a profile against a query protein.

    Attributes:
        query: Identifier of the scanned protein.
        model: Name of the matched profile.
        qlen: Full length of the query sequence.
        env_from: Envelope start on the query (1-based).
        env_to: Envelope end on the query (1-based, inclusive).
        i_e_value: Independent (per-domain) E-value.
        fs_e_value: Full-sequence E-value for this profile.
        model_accession: Profile accession, "-" when absent.
    """

    query: str
    model: str
    qlen: int
    env_from: int
    env_to: int
    i_e_value: float
    fs_e_value: float
    model_accession: str = "-"

    def __attrs_post_init__(self) -> None:
        if self.qlen <= 0:
            raise ValueError(f"qlen must be positive, got {self.qlen}")
        if not 1 <= self.env_from <= self.env_to <= self.qlen:
            raise ValueError(
                f"Invalid envelope {self.env_from}-{self.env_to} "
                f"for {self.query} (qlen {self.qlen})"
            )
        if self.i_e_value < 0 or self.fs_e_value < 0:
            raise ValueError(f"Negative E-value in hit {self.model} on {self.query}")

    @classmethod
    def from_domtblout_line(cls, line: str) -> HitRecord:
        """Parse one data line of hmmscan ``--domtblout`` output.

        Args:
            line: A non-comment line from the domain table.

        Returns:
            HitRecord instance.

        Raises:
            ValueError: If the line has too few fields or bad values.
        """
        fields = line.split()
        if len(fields) < DOMTBLOUT_MIN_FIELDS:
            raise ValueError(
                f"Expected at least {DOMTBLOUT_MIN_FIELDS} fields, got {len(fields)}"
            )

        return cls(
            query=fields[COL_QUERY_NAME],
            model=fields[COL_TARGET_NAME],
            qlen=int(fields[COL_QLEN]),
            env_from=int(fields[COL_ENV_FROM]),
            env_to=int(fields[COL_ENV_TO]),
            i_e_value=float(fields[COL_I_EVALUE]),
            fs_e_value=float(fields[COL_FS_EVALUE]),
            model_accession=fields[COL_TARGET_ACCESSION],
        )


# =============================================================================
# Reader
# =============================================================================


def read_domtblout(path: Path | str) -> Iterator[HitRecord]:
    """Stream domain hits from an hmmscan domtblout file.

    Hits are yielded in file order, which hmmscan groups by query.

    Args:
        path: Path to the domtblout file.

    Yields:
        HitRecord for every data line.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        HmmscanFormatError: If a data line is malformed.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"hmmscan output not found: {path}")

    n_hits = 0
    with open(path) as handle:
        for line_number, line in enumerate(handle, start=1):
            if not line.strip() or line.startswith("#"):
                continue
            try:
                hit = HitRecord.from_domtblout_line(line)
            except ValueError as e:
                raise HmmscanFormatError(f"{path}:{line_number}: {e}") from e
            n_hits += 1
            yield hit

    logger.debug(f"Read {n_hits} domain hits from {path.name}")
