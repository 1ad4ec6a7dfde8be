"""
Feasibility repair for chromosomes that exceed the knapsack capacity.

Used after stratified initialization, which assigns genes without looking at
weights. Every other operator keeps chromosomes feasible while building them.
"""

from typing import List, Tuple
import numpy as np

from .data_models import Chromosome
from .problem import KnapsackProblem


def remove_random_item(chromosome: Chromosome, rng: np.random.Generator) -> int:
    """
    Exclude one uniformly chosen included item.

    Args:
        chromosome: Chromosome to modify in place (caller owns it)
        rng: Random number generator

    Returns:
        Locus that was switched off

    Raises:
        ValueError: If the chromosome has no included items
    """
    included = chromosome.included_items()
    if not included:
        raise ValueError("Cannot remove an item from an empty chromosome")

    locus = included[rng.integers(0, len(included))]
    chromosome[locus] = 0
    return locus


def make_feasible(
    chromosome: Chromosome,
    problem: KnapsackProblem,
    rng: np.random.Generator
) -> Tuple[Chromosome, List[int]]:
    """
    Drop random items until the chromosome fits in the knapsack.

    Terminates for any non-negative weights: every removal lowers (or keeps)
    the weight and the empty chromosome always fits.

    Args:
        chromosome: Chromosome to repair in place (caller owns it)
        problem: Problem providing weights and capacity
        rng: Random number generator

    Returns:
        Tuple of (repaired_chromosome, removed_loci)
    """
    removed = []

    while problem.chromosome_weight(chromosome) > problem.capacity:
        removed.append(remove_random_item(chromosome, rng))

    return chromosome, removed
