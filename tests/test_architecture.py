"""Tests for per-protein architecture filtering."""

import pytest

from domainarch.core.architecture import (
    DomainArchitectureFilter,
    ProteinArchitecture,
    exceeds_full_sequence_threshold,
)
from domainarch.core.grouping import ConsistencyError, ProteinBatch


def as_batch(hits, query="P1", qlen=100) -> ProteinBatch:
    return ProteinBatch(query=query, qlen=qlen, hits=tuple(hits))


# =============================================================================
# Full-sequence Gate
# =============================================================================


class TestFullSequenceGate:
    """Tests for the full-sequence E-value abort."""

    def test_exceeds_for_target(self, make_hit) -> None:
        hits = [make_hit("A", fs_e_value=0.5)]
        assert exceeds_full_sequence_threshold(hits, ["A"], 0.1)

    def test_ignores_non_targets(self, make_hit) -> None:
        """Weak non-target hits do not trigger the gate."""
        hits = [make_hit("A", fs_e_value=1e-5), make_hit("C", 40, 45, fs_e_value=5.0)]
        assert not exceeds_full_sequence_threshold(hits, ["A"], 0.1)

    def test_at_threshold_passes(self, make_hit) -> None:
        """The comparison is strictly greater than."""
        hits = [make_hit("A", fs_e_value=0.1)]
        assert not exceeds_full_sequence_threshold(hits, ["A"], 0.1)

    def test_aborts_protein(self, make_hit) -> None:
        """A weak target hit suppresses the protein entirely."""
        hits = [
            make_hit("A", 10, 30, fs_e_value=1e-10),
            make_hit("B", 50, 70, fs_e_value=0.5),
        ]
        arch_filter = DomainArchitectureFilter(["A", "B"], fs_e_value_threshold=0.1)

        assert arch_filter.apply(as_batch(hits)) is None

    def test_uses_unfiltered_hits(self, make_hit) -> None:
        """The gate sees hits that the i-E-value filter would drop."""
        hits = [
            make_hit("A", 10, 30, i_e_value=1e-10, fs_e_value=1e-10),
            make_hit("B", 50, 70, i_e_value=1e-10, fs_e_value=1e-10),
            make_hit("B", 80, 90, i_e_value=10.0, fs_e_value=0.5),
        ]
        arch_filter = DomainArchitectureFilter(
            ["A", "B"], i_e_value_threshold=1e-3, fs_e_value_threshold=0.1
        )

        assert arch_filter.apply(as_batch(hits)) is None

    def test_disabled_by_default(self, make_hit) -> None:
        hits = [make_hit("A", fs_e_value=100.0)]
        assert DomainArchitectureFilter(["A"]).apply(as_batch(hits)) is not None


# =============================================================================
# Independent E-value Filter and Presence Gate
# =============================================================================


class TestIEValueFilter:
    """Tests for i-E-value filtering and target presence."""

    def test_no_threshold_keeps_all(self, make_hit) -> None:
        hits = [make_hit("A"), make_hit("C", 40, 45, i_e_value=50.0)]
        arch = DomainArchitectureFilter(["A"]).apply(as_batch(hits))

        assert arch.models == ["A", "C"]

    def test_threshold_inclusive(self, make_hit) -> None:
        """Hits at the threshold are kept."""
        hits = [
            make_hit("A", 10, 30, i_e_value=0.01),
            make_hit("C", 40, 45, i_e_value=0.0100001),
        ]
        arch = DomainArchitectureFilter(["A"], i_e_value_threshold=0.01).apply(as_batch(hits))

        assert arch.models == ["A"]

    def test_zero_threshold(self, make_hit) -> None:
        """A threshold of 0.0 is active, not disabled."""
        hits = [make_hit("A", i_e_value=0.0), make_hit("C", 40, 45, i_e_value=1e-300)]
        arch = DomainArchitectureFilter(["A"], i_e_value_threshold=0.0).apply(as_batch(hits))

        assert arch.models == ["A"]

    def test_missing_target(self, make_hit) -> None:
        """No output unless every target is matched."""
        hits = [make_hit("A"), make_hit("C", 50, 70)]

        assert DomainArchitectureFilter(["A", "B"]).apply(as_batch(hits)) is None

    def test_target_only_below_threshold(self, make_hit) -> None:
        """A target dropped by the i-E-value filter counts as missing."""
        hits = [make_hit("A", i_e_value=1e-20), make_hit("B", 50, 70, i_e_value=1.0)]
        arch_filter = DomainArchitectureFilter(["A", "B"], i_e_value_threshold=1e-3)

        assert arch_filter.apply(as_batch(hits)) is None

    def test_matched_set(self, make_hit) -> None:
        hits = [make_hit("A"), make_hit("B", 50, 70), make_hit("C", 80, 90)]
        arch = DomainArchitectureFilter(["A", "B"]).apply(as_batch(hits))

        assert arch.matched == frozenset({"A", "B"})

    def test_requires_targets(self) -> None:
        with pytest.raises(ValueError, match="At least one target"):
            DomainArchitectureFilter([])

    def test_repeated_target_never_reported(self, make_hit) -> None:
        """A target listed twice cannot be satisfied."""
        hits = [make_hit("A"), make_hit("A", 50, 70)]

        assert DomainArchitectureFilter(["A", "A"]).apply(as_batch(hits)) is None

    @pytest.mark.parametrize(
        "kwargs, message",
        [
            ({"i_e_value_threshold": -1.0}, "Negative i-E-value"),
            ({"fs_e_value_threshold": -0.5}, "Negative full-sequence E-value"),
        ],
    )
    def test_negative_threshold(self, kwargs, message) -> None:
        with pytest.raises(ValueError, match=message):
            DomainArchitectureFilter(["A"], **kwargs)


# =============================================================================
# Ordering and Ownership
# =============================================================================


class TestOrderingAndOwnership:
    """Tests for position sorting and first-match ownership."""

    def test_sorted_by_env_from(self, make_hit) -> None:
        hits = [make_hit("B", 50, 70), make_hit("C", 80, 90), make_hit("A", 10, 30)]
        arch = DomainArchitectureFilter(["A"]).apply(as_batch(hits))

        assert [h.env_from for h in arch.hits] == [10, 50, 80]

    def test_stable_sort(self, make_hit) -> None:
        """Hits with equal starts keep input order."""
        hits = [make_hit("X", 10, 20), make_hit("A", 10, 30), make_hit("Y", 10, 15)]
        arch = DomainArchitectureFilter(["A"]).apply(as_batch(hits))

        assert arch.models == ["X", "A", "Y"]

    def test_owns_in_target_order(self, make_hit) -> None:
        """Owned hits follow the target list, not sequence position."""
        hits = [make_hit("A", 10, 30), make_hit("B", 50, 70)]
        arch = DomainArchitectureFilter(["B", "A"]).apply(as_batch(hits))

        assert [o.model for o in arch.owns] == ["B", "A"]

    def test_first_match_wins(self, make_hit) -> None:
        """Only the N-terminal-most hit of a repeated target is owned."""
        hits = [
            make_hit("A", 60, 80, fs_e_value=0.003),
            make_hit("A", 10, 30, fs_e_value=0.001),
        ]
        arch = DomainArchitectureFilter(["A"]).apply(as_batch(hits))

        assert len(arch.owns) == 1
        assert arch.owns[0].env_from == 10
        assert arch.n_hits == 2

    def test_query_and_qlen(self, make_hit) -> None:
        hits = [make_hit("A", query="Q7", qlen=250)]
        arch = DomainArchitectureFilter(["A"]).apply(as_batch(hits, "Q7", 250))

        assert isinstance(arch, ProteinArchitecture)
        assert arch.query == "Q7"
        assert arch.qlen == 250

    def test_inconsistent_owns(self, make_hit) -> None:
        """Owned hits from different queries are a fatal error."""
        hits = [make_hit("A", query="P1"), make_hit("B", 50, 70, query="P2")]

        with pytest.raises(ConsistencyError, match="Failed sanity check"):
            DomainArchitectureFilter(["A", "B"]).apply(as_batch(hits))

    def test_idempotent(self, example_hits) -> None:
        """Applying the filter twice gives equal results."""
        arch_filter = DomainArchitectureFilter(["A", "B"], i_e_value_threshold=1.0)
        batch = as_batch(example_hits)

        assert arch_filter.apply(batch) == arch_filter.apply(batch)
