"""
Genome encoding for AntEvo.

A genome is a fixed-length vector of real numbers. Read in order, the genes
are the weights and biases of one ant's policy network:

 input→hidden weights (row-major) | hidden biases |
 hidden→output weights (row-major) | output biases

The length is fixed by the network topology and never changes after the
genome is created. Mutation keeps every gene within [-GENE_LIMIT, GENE_LIMIT].
"""

import numpy as np
from config import GENE_LIMIT


class Genome:
    """Fixed-length real-valued gene vector."""

    __slots__ = ("genes",)

    def __init__(self, genes: np.ndarray):
        self.genes = genes

    # ──────────────────────────────────────────────────────────────────────────
    # Construction
    # ──────────────────────────────────────────────────────────────────────────

    @classmethod
    def random(cls, length: int, rng=None) -> "Genome":
        """Every gene drawn uniformly from [-1, 1]."""
        if rng is None:
            rng = np.random.default_rng()
        return cls(rng.random(length) * 2.0 - 1.0)

    @classmethod
    def from_vector(cls, values) -> "Genome":
        """Deep copy of `values`; the range is not checked."""
        return cls(np.array(values, dtype=np.float64, copy=True))

    def copy(self) -> "Genome":
        return Genome(self.genes.copy())

    # ──────────────────────────────────────────────────────────────────────────
    # Genetic operators
    # ──────────────────────────────────────────────────────────────────────────

    @staticmethod
    def crossover(parent_a: "Genome", parent_b: "Genome", rng=None) -> "Genome":
        """
        Two-point crossover: pick two cut points, take the inclusive middle
        section [i1, i2] from parent B and everything else from parent A.
        """
        if rng is None:
            rng = np.random.default_rng()
        size = len(parent_a)
        i1 = int(rng.integers(0, size))
        i2 = int(rng.integers(0, size))
        if i1 > i2:
            i1, i2 = i2, i1
        child = parent_a.genes.copy()
        child[i1:i2 + 1] = parent_b.genes[i1:i2 + 1]
        return Genome(child)

    def mutate(self, rate: float, strength: float, rng=None) -> "Genome":
        """
        In-place mutation. Each gene mutates with probability `rate`; the
        change is the mean of three uniforms rescaled to [-strength, strength],
        so small nudges are far more common than large ones.
        Returns self so calls can be chained.
        """
        if rng is None:
            rng = np.random.default_rng()
        genes = self.genes
        for i in range(len(genes)):
            if rng.random() < rate:
                u = rng.random() + rng.random() + rng.random()
                change = (u / 3.0 * 2.0 - 1.0) * strength
                genes[i] = min(GENE_LIMIT, max(-GENE_LIMIT, genes[i] + change))
        return self

    # ──────────────────────────────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self.genes)

    def __iter__(self):
        return iter(self.genes)

    def __getitem__(self, idx):
        return self.genes[idx]

    def __eq__(self, other) -> bool:
        if not isinstance(other, Genome):
            return NotImplemented
        return np.array_equal(self.genes, other.genes)

    __hash__ = None

    def __repr__(self) -> str:
        return f"Genome(len={len(self.genes)})"


def genome_similarity(genome_a: Genome, genome_b: Genome) -> float:
    """
    Similarity (0..1) between two genomes of equal length, based on the mean
    absolute gene difference relative to the widest possible gap.
    """
    if len(genome_a) == 0 or len(genome_b) == 0:
        return 0.0
    gap = np.mean(np.abs(genome_a.genes - genome_b.genes))
    return float(1.0 - gap / (2.0 * GENE_LIMIT))
