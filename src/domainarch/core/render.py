"""Text renderings of a domain architecture.

Two forms are produced for each reported protein:

- Overview: profile names joined by "~" (close) or "----" (distant).
- Detailed: every hit as ``model[from-to i_e_value]`` with gap markers
  between and around hits, one dash per 20 residues of gap.

Example:
    >>> overview_string(architecture.hits)
    'SH3~SH2----Pkinase'
    >>> detailed_string(architecture.hits, architecture.qlen)
    '-SH3[25-70 1e-12]~SH2[80-160 3.2e-20]-----Pkinase[270-520 1e-80]--'
"""

from __future__ import annotations

from collections.abc import Sequence

from domainarch.io.hmmscan import HitRecord

# =============================================================================
# Constants
# =============================================================================

# Gaps up to this many residues count as "close" in the overview
LIMIT_FOR_CLOSE_DOMAINS = 20

# Residues represented by one dash in gap markers
RESIDUES_PER_DASH = 20

# Gaps of this many dashes or more are collapsed
MAX_DASHES = 10

CLOSE_SEPARATOR = "~"
DISTANT_SEPARATOR = "----"
COLLAPSED_GAP = "----//----"


def format_evalue(value: float) -> str:
    """Format an E-value using the shortest round-trip representation."""
    return repr(float(value))


def gap_between(previous: HitRecord, current: HitRecord) -> int:
    """Residues strictly between two hits (negative when they overlap)."""
    return current.env_from - previous.env_to - 1


def interdomain_marker(d: int, mark_short: bool = True) -> str:
    """Render a gap of ``d`` residues as a dash band.

    Args:
        d: Gap length in residues (may be 0 or negative).
        mark_short: Emit "~" for gaps below one band instead of nothing.

    Returns:
        "----//----" for 200+ residues, one "-" per 20 residues below
        that, otherwise "~" or "".
    """
    bands = d // RESIDUES_PER_DASH
    if bands >= MAX_DASHES:
        return COLLAPSED_GAP
    if bands >= 1:
        return "-" * bands
    if mark_short:
        return CLOSE_SEPARATOR
    return ""


def overview_string(hits: Sequence[HitRecord]) -> str:
    """Join profile names with close/distant separators."""
    parts: list[str] = []
    previous = None
    for hit in hits:
        if previous is not None:
            if gap_between(previous, hit) <= LIMIT_FOR_CLOSE_DOMAINS:
                parts.append(CLOSE_SEPARATOR)
            else:
                parts.append(DISTANT_SEPARATOR)
        parts.append(hit.model)
        previous = hit
    return "".join(parts)


def format_hit(hit: HitRecord) -> str:
    """Render a single hit as ``model[from-to i_e_value]``."""
    return f"{hit.model}[{hit.env_from}-{hit.env_to} {format_evalue(hit.i_e_value)}]"


def detailed_string(hits: Sequence[HitRecord], qlen: int) -> str:
    """Render hits with positions, E-values and gap bands.

    The leading band measures ``env_from`` of the first hit and the
    trailing band ``qlen - env_to`` of the last; neither marks short gaps.
    """
    if not hits:
        return ""

    parts: list[str] = []
    previous = None
    for hit in hits:
        if previous is None:
            parts.append(interdomain_marker(hit.env_from, mark_short=False))
        else:
            parts.append(interdomain_marker(gap_between(previous, hit)))
        parts.append(format_hit(hit))
        previous = hit
    parts.append(interdomain_marker(qlen - previous.env_to, mark_short=False))
    return "".join(parts)


def evalue_columns(owns: Sequence[HitRecord]) -> list[str]:
    """Full-sequence E-values of the owned hits, in target order."""
    return [format_evalue(own.fs_e_value) for own in owns]
