"""
Problem interface for the GA engine.

Wraps an Evaluator and exposes the capabilities the engine and its operators
need: decoding, fitness, weight bookkeeping, random chromosome generation and
single-gene mutation. The engine is generic over this interface rather than
over subclasses of itself.
"""

import numpy as np

from .data_models import Chromosome, Solution
from .evaluator import Evaluator


class KnapsackProblem:
    """
    Binary knapsack-constrained problem seen by the GA.

    Attributes:
        evaluator: Objective function being maximised
        weights: Item weights as a float array
        capacity: Knapsack weight limit
    """

    def __init__(self, evaluator: Evaluator):
        """
        Initialize the problem from an evaluator.

        Args:
            evaluator: Objective function implementing the Evaluator contract

        Raises:
            ValueError: If the domain is empty, the weight vector does not
                match the domain size, or weights/capacity are negative
        """
        self.evaluator = evaluator

        size = evaluator.domain_size()
        if size <= 0:
            raise ValueError(f"Domain size must be positive, got {size}")

        self.weights = np.asarray(evaluator.item_weights(), dtype=float)
        if self.weights.shape != (size,):
            raise ValueError(
                f"Evaluator returned {self.weights.size} weights for a domain of size {size}"
            )
        if np.any(self.weights < 0):
            raise ValueError("Item weights must be non-negative")

        self.capacity = float(evaluator.capacity())
        if self.capacity < 0:
            raise ValueError(f"Capacity must be non-negative, got {self.capacity}")

    def domain_size(self) -> int:
        return int(self.weights.size)

    def empty_chromosome(self) -> Chromosome:
        """All-zero chromosome; always feasible."""
        return Chromosome(genes=[0] * self.domain_size())

    def chromosome_weight(self, chromosome: Chromosome) -> float:
        """
        Total weight of the included items, recomputed from the genes.

        Weights are summed in locus order. Every capacity check goes through
        this total.

        Args:
            chromosome: Chromosome to weigh

        Returns:
            Sum of weights over loci whose gene is 1
        """
        return float(sum(self.weights[locus] for locus in chromosome.included_items()))

    def is_feasible(self, chromosome: Chromosome) -> bool:
        return self.chromosome_weight(chromosome) <= self.capacity

    def fits(self, current_weight: float, locus: int) -> bool:
        """
        Check whether appending item `locus` keeps a running weight within capacity.

        Only valid when current_weight was summed over loci below `locus` in
        index order, so the total matches chromosome_weight exactly.
        """
        return current_weight + self.weights[locus] <= self.capacity

    def can_include(self, chromosome: Chromosome, locus: int) -> bool:
        """
        Check whether switching item `locus` on keeps the chromosome feasible.

        The candidate is weighed with chromosome_weight, so the decision agrees
        with is_feasible for fractional weights too.
        """
        candidate = chromosome.copy()
        candidate[locus] = 1
        return self.is_feasible(candidate)

    def decode(self, chromosome: Chromosome) -> Solution:
        """
        Map a genotype to its fenotype.

        Decoding does not modify the chromosome, and two decodes of the same
        chromosome give identical solutions.

        Args:
            chromosome: Genotype to decode

        Returns:
            Solution with the included items, cost and weight
        """
        elements = chromosome.included_items()
        cost, weight = self.evaluator.evaluate(elements)
        return Solution(elements=elements, cost=float(cost), weight=float(weight))

    def fitness(self, chromosome: Chromosome) -> float:
        """Objective value of the decoded chromosome."""
        return self.decode(chromosome).cost

    def generate_random_chromosome(self, rng: np.random.Generator) -> Chromosome:
        """
        Build a feasible chromosome by random-greedy insertion.

        Items are visited in a random order; each one is switched on with
        probability 0.5, provided the chromosome stays within capacity.

        Args:
            rng: Random number generator

        Returns:
            Feasible chromosome
        """
        chromosome = self.empty_chromosome()

        for locus in rng.permutation(self.domain_size()):
            locus = int(locus)
            if rng.integers(0, 2) == 1 and self.can_include(chromosome, locus):
                chromosome[locus] = 1

        return chromosome

    def mutate_gene(self, chromosome: Chromosome, locus: int) -> None:
        """
        Flip one gene without leaving the feasible region.

        A 0 becomes 1 only if the item still fits; a 1 always becomes 0.
        Modifies the chromosome in place.

        Args:
            chromosome: Chromosome owned by the caller
            locus: Position to flip
        """
        if chromosome[locus] == 0 and self.can_include(chromosome, locus):
            chromosome[locus] = 1
        else:
            chromosome[locus] = 0

    def __repr__(self) -> str:
        return f"KnapsackProblem(n={self.domain_size()}, capacity={self.capacity})"
