"""
Neural Network Brain for AntEvo.

A dense feed-forward network with one hidden layer:

  sensors ──W_ih──▶ hidden (tanh) ──W_ho──▶ actions (tanh)

Weights and biases are filled from a Genome in a fixed order (see genome.py).
The network keeps no state between forward passes: identical inputs always
give identical outputs.
"""

import numpy as np


class DimensionMismatch(ValueError):
    """A genome or input vector does not fit the network topology."""


def required_genome_length(n_inputs: int, n_hidden: int, n_outputs: int) -> int:
    """Number of genes needed to fill a network of this topology."""
    return n_inputs * n_hidden + n_hidden + n_hidden * n_outputs + n_outputs


class NeuralNetwork:
    """
    Policy network with a topology fixed at construction.
    Parameter buffers are allocated once and overwritten by load_from_genome.
    """

    def __init__(self, n_inputs: int, n_hidden: int, n_outputs: int):
        self.n_inputs  = n_inputs
        self.n_hidden  = n_hidden
        self.n_outputs = n_outputs
        self.parameter_count = required_genome_length(n_inputs, n_hidden, n_outputs)

        self._w_ih = np.zeros((n_inputs, n_hidden))
        self._b_h  = np.zeros(n_hidden)
        self._w_ho = np.zeros((n_hidden, n_outputs))
        self._b_o  = np.zeros(n_outputs)

    @classmethod
    def from_genome(cls, genome, n_inputs: int, n_hidden: int,
                    n_outputs: int) -> "NeuralNetwork":
        net = cls(n_inputs, n_hidden, n_outputs)
        net.load_from_genome(genome)
        return net

    # ──────────────────────────────────────────────────────────────────────────

    def load_from_genome(self, genome):
        """
        Copy genes into the weight and bias buffers.
        Raises DimensionMismatch if the genome length is not exactly
        parameter_count.
        """
        genes = np.asarray(genome.genes if hasattr(genome, "genes") else genome,
                           dtype=np.float64)
        if genes.shape != (self.parameter_count,):
            raise DimensionMismatch(
                f"genome has {genes.size} genes, network "
                f"{self.n_inputs}/{self.n_hidden}/{self.n_outputs} "
                f"needs {self.parameter_count}")

        i = 0
        n = self.n_inputs * self.n_hidden
        self._w_ih[:, :] = genes[i:i + n].reshape(self.n_inputs, self.n_hidden)
        i += n
        self._b_h[:] = genes[i:i + self.n_hidden]
        i += self.n_hidden
        n = self.n_hidden * self.n_outputs
        self._w_ho[:, :] = genes[i:i + n].reshape(self.n_hidden, self.n_outputs)
        i += n
        self._b_o[:] = genes[i:i + self.n_outputs]

    def forward(self, inputs) -> np.ndarray:
        """
        Run one forward pass.

        Args:
            inputs: array-like of shape (n_inputs,)

        Returns:
            float array of shape (n_outputs,), values −1..1
        """
        x = np.asarray(inputs, dtype=np.float64)
        if x.shape != (self.n_inputs,):
            raise DimensionMismatch(
                f"expected {self.n_inputs} inputs, got shape {x.shape}")
        hidden = np.tanh(self._b_h + x @ self._w_ih)
        return np.tanh(self._b_o + hidden @ self._w_ho)

    # ──────────────────────────────────────────────────────────────────────────

    def layers(self):
        """Return copies of (w_ih, b_h, w_ho, b_o), for visualisation."""
        return (self._w_ih.copy(), self._b_h.copy(),
                self._w_ho.copy(), self._b_o.copy())

    def summary(self) -> str:
        lines = [f"NeuralNetwork {self.n_inputs}→{self.n_hidden}→{self.n_outputs} "
                 f"({self.parameter_count} parameters)"]
        for name, arr in (("W_ih", self._w_ih), ("b_h", self._b_h),
                          ("W_ho", self._w_ho), ("b_o", self._b_o)):
            lines.append(
                f"  {name:<5} shape={str(arr.shape):<9}"
                f"  mean={arr.mean():+.3f}  max|w|={np.abs(arr).max():.3f}"
            )
        return "\n".join(lines)
