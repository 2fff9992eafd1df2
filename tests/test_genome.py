"""
Unit tests for genome.py
"""

import pytest
import numpy as np
from genome import Genome, genome_similarity
from config import GENE_LIMIT


class TestConstruction:
    """Random, from_vector and copy"""

    def test_random_length_and_range(self, rng):
        """Random genes are uniform in [-1, 1]"""
        g = Genome.random(200, rng)
        assert len(g) == 200
        assert np.all(g.genes >= -1.0)
        assert np.all(g.genes <= 1.0)

    def test_from_vector_is_a_deep_copy(self):
        """Changing the source list does not touch the genome"""
        values = [0.5, -2.0, 4.0]
        g = Genome.from_vector(values)
        values[0] = 99.0
        assert list(g) == [0.5, -2.0, 4.0]

    def test_from_vector_keeps_out_of_range_values(self):
        """No range validation on construction"""
        g = Genome.from_vector([10.0, -10.0])
        assert list(g) == [10.0, -10.0]

    def test_copy_is_independent(self, rng):
        """Mutating a copy leaves the original alone"""
        g = Genome.random(30, rng)
        clone = g.copy()
        assert clone == g
        clone.genes[0] += 1.0
        assert clone != g


class TestCrossover:
    """Two-point crossover"""

    def test_crossover_with_itself_is_identity(self, rng):
        """crossover(g, g) == g"""
        for _ in range(20):
            g = Genome.random(25, rng)
            assert Genome.crossover(g, g, rng) == g

    def test_middle_segment_from_parent_b(self, rng):
        """Parent B's genes form one non-empty contiguous block"""
        a = Genome.from_vector(np.zeros(40))
        b = Genome.from_vector(np.ones(40))
        for _ in range(50):
            child = Genome.crossover(a, b, rng)
            idx = np.flatnonzero(child.genes == 1.0)
            assert idx.size >= 1
            assert np.all(np.diff(idx) == 1)
            assert set(np.unique(child.genes)) <= {0.0, 1.0}

    def test_parents_unchanged(self, rng):
        """Crossover does not modify its parents"""
        a = Genome.random(10, rng)
        b = Genome.random(10, rng)
        a0, b0 = a.copy(), b.copy()
        Genome.crossover(a, b, rng)
        assert a == a0 and b == b0

    def test_length_preserved(self, rng):
        a = Genome.random(17, rng)
        b = Genome.random(17, rng)
        assert len(Genome.crossover(a, b, rng)) == 17


class TestMutation:
    """Per-gene mutation"""

    def test_genes_stay_within_limits(self, rng):
        """After mutation every gene lies in [-3, 3]"""
        g = Genome.from_vector(np.full(100, 2.9))
        for _ in range(10):
            g.mutate(1.0, 10.0, rng)
            assert np.all(np.abs(g.genes) <= GENE_LIMIT)

    def test_out_of_range_gene_clamped_when_mutated(self, rng):
        g = Genome.from_vector([8.0, -8.0])
        g.mutate(1.0, 0.1, rng)
        assert np.all(np.abs(g.genes) <= GENE_LIMIT)

    def test_zero_rate_is_noop(self, rng):
        g = Genome.random(50, rng)
        before = g.copy()
        g.mutate(0.0, 1.0, rng)
        assert g == before

    def test_change_bounded_by_strength(self, rng):
        """A single mutation never moves a gene further than `strength`"""
        g = Genome.from_vector(np.zeros(500))
        g.mutate(1.0, 0.5, rng)
        assert np.all(np.abs(g.genes) <= 0.5)
        assert np.any(g.genes != 0.0)

    def test_mutate_returns_self(self, rng):
        g = Genome.random(5, rng)
        assert g.mutate(0.5, 0.1, rng) is g


class TestSimilarity:

    def test_identical_genomes(self, rng):
        g = Genome.random(20, rng)
        assert genome_similarity(g, g.copy()) == pytest.approx(1.0)

    def test_opposite_extremes(self):
        a = Genome.from_vector(np.full(4, GENE_LIMIT))
        b = Genome.from_vector(np.full(4, -GENE_LIMIT))
        assert genome_similarity(a, b) == pytest.approx(0.0)
