"""
Objective function contract and the quadratic binary function evaluator.

The engine only talks to an Evaluator: it asks for the problem dimension,
the item weights, the knapsack capacity and the value/weight of a candidate
item set. QBFEvaluator implements the contract for f(x) = x^T A x.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Sequence, Tuple
import numpy as np


class Evaluator(ABC):
    """Objective function consumed by the GA engine."""

    @abstractmethod
    def domain_size(self) -> int:
        """Number of items (chromosome length)."""

    @abstractmethod
    def item_weights(self) -> Sequence[float]:
        """Per-item weights, one per locus."""

    @abstractmethod
    def capacity(self) -> float:
        """Knapsack weight limit."""

    @abstractmethod
    def evaluate(self, items: Iterable[int]) -> Tuple[float, float]:
        """
        Evaluate a candidate item set.

        Args:
            items: Indices of the selected items

        Returns:
            Tuple of (objective_value, total_weight)
        """


class QBFEvaluator(Evaluator):
    """
    Knapsack-constrained quadratic binary function.

    f(x) = sum_i sum_j a_ij * x_i * x_j, subject to sum_i w_i * x_i <= W.
    The matrix is usually upper triangular (as stored in kqbf instance
    files) but any square matrix is accepted.
    """

    def __init__(self, matrix, weights, capacity: float):
        """
        Args:
            matrix: Square n x n coefficient matrix A
            weights: Length-n item weights
            capacity: Knapsack capacity W

        Raises:
            ValueError: If shapes are inconsistent
        """
        self.matrix = np.asarray(matrix, dtype=float)
        self.weights = np.asarray(weights, dtype=float)
        self._capacity = float(capacity)

        if self.matrix.ndim != 2 or self.matrix.shape[0] != self.matrix.shape[1]:
            raise ValueError(f"QBF matrix must be square, got shape {self.matrix.shape}")
        if self.weights.shape != (self.matrix.shape[0],):
            raise ValueError(
                f"Expected {self.matrix.shape[0]} weights, got {self.weights.shape[0] if self.weights.ndim else 0}"
            )

    def domain_size(self) -> int:
        return int(self.matrix.shape[0])

    def item_weights(self) -> Sequence[float]:
        return self.weights.tolist()

    def capacity(self) -> float:
        return self._capacity

    def evaluate(self, items: Iterable[int]) -> Tuple[float, float]:
        items = np.fromiter(items, dtype=int)
        x = np.zeros(self.domain_size())
        x[items] = 1.0
        value = float(x @ self.matrix @ x)
        # item by item, in the order given
        weight = float(sum(self.weights[items].tolist()))
        return value, weight

    def __repr__(self) -> str:
        return f"QBFEvaluator(n={self.domain_size()}, capacity={self._capacity})"
