"""Pytest configuration and shared fixtures for domainarch tests.

Fixtures are organized by category:

- Hit fixtures: Build HitRecord objects programmatically
- Synthetic file fixtures: Write domtblout and protein FASTA files
"""

from pathlib import Path
from typing import Callable

import numpy as np
import pytest

from domainarch.io.hmmscan import HitRecord

AMINO_ACIDS = "ACDEFGHIKLMNPQRSTVWY"


def domtblout_line(
    model: str,
    query: str,
    qlen: int,
    fs_e_value: float,
    i_e_value: float,
    env_from: int,
    env_to: int,
    accession: str = "PF00000.1",
    description: str = "Test domain",
) -> str:
    """Format one hmmscan --domtblout data line."""
    fields = [
        model, accession, "120",
        query, "-", str(qlen),
        f"{fs_e_value:g}", "100.0", "0.1",
        "1", "1",
        f"{i_e_value:g}", f"{i_e_value:g}", "90.0", "0.1",
        "1", "110",
        str(env_from), str(env_to),
        str(env_from), str(env_to),
        "0.95",
        description,
    ]
    return " ".join(fields)


# =============================================================================
# Hit Fixtures
# =============================================================================


@pytest.fixture
def make_hit() -> Callable[..., HitRecord]:
    """Return a factory for HitRecord objects with sensible defaults."""

    def _make_hit(
        model: str = "A",
        env_from: int = 10,
        env_to: int = 30,
        i_e_value: float = 0.01,
        fs_e_value: float = 0.001,
        query: str = "P1",
        qlen: int = 100,
    ) -> HitRecord:
        return HitRecord(
            query=query,
            model=model,
            qlen=qlen,
            env_from=env_from,
            env_to=env_to,
            i_e_value=i_e_value,
            fs_e_value=fs_e_value,
        )

    return _make_hit


@pytest.fixture
def example_hits(make_hit) -> list[HitRecord]:
    """Two well separated target hits on P1 (qlen 100)."""
    return [
        make_hit("A", 10, 30, i_e_value=0.01, fs_e_value=0.001),
        make_hit("B", 50, 70, i_e_value=0.02, fs_e_value=0.002),
    ]


# =============================================================================
# Synthetic File Fixtures
# =============================================================================


@pytest.fixture
def protein_sequences() -> dict[str, str]:
    """Reproducible random protein sequences keyed by FASTA name."""
    np.random.seed(42)

    lengths = {
        "P1": 100,
        "sp|Q9XYZ1|KIN_MOUSE": 400,
        "P10": 120,
        "sp|P1A|OTHER_HUMAN": 80,
    }
    return {
        name: "".join(np.random.choice(list(AMINO_ACIDS), length))
        for name, length in lengths.items()
    }


@pytest.fixture
def protein_fasta(tmp_path: Path, protein_sequences: dict[str, str]) -> Path:
    """Write the protein sequences as FASTA with 60-residue lines."""
    fasta_path = tmp_path / "proteins.fa"

    with open(fasta_path, "w") as f:
        for name, seq in protein_sequences.items():
            f.write(f">{name} synthetic protein\n")
            for i in range(0, len(seq), 60):
                f.write(seq[i : i + 60] + "\n")

    return fasta_path


@pytest.fixture
def domtblout_path(tmp_path: Path) -> Path:
    """Write a small hmmscan domain table with four proteins.

    - P1: A then B, close together (reportable for A/B)
    - P2: A and C only (missing B)
    - sp|Q9XYZ1|KIN_MOUSE: B listed before A, far apart
    - P4: A and B with weak full-sequence E-values
    """
    path = tmp_path / "scan.domtblout"

    lines = [
        "#                                                                            --- full sequence --- -------------- this domain -------------   hmm coord   ali coord   env coord",
        "# target name        accession   tlen query name           accession   qlen   E-value  score  bias   #  of  c-Evalue  i-Evalue  score  bias  from    to  from    to  from    to  acc description of target",
        domtblout_line("A", "P1", 100, 0.001, 0.01, 10, 30),
        domtblout_line("B", "P1", 100, 0.002, 0.02, 50, 70),
        domtblout_line("A", "P2", 300, 1e-12, 1e-10, 5, 60),
        domtblout_line("C", "P2", 300, 1e-12, 5.0, 100, 150),
        domtblout_line("B", "sp|Q9XYZ1|KIN_MOUSE", 400, 1e-06, 1e-05, 300, 380),
        domtblout_line("A", "sp|Q9XYZ1|KIN_MOUSE", 400, 1e-09, 1e-08, 20, 120),
        domtblout_line("A", "P4", 100, 0.5, 0.01, 10, 30),
        domtblout_line("B", "P4", 100, 0.5, 0.01, 40, 60),
        "#",
        "# Program:         hmmscan",
        "# [ok]",
    ]
    path.write_text("\n".join(lines) + "\n")
    return path
