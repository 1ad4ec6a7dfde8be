"""
Crossover operators for the KQBF genetic algorithm.

Implements two-point and uniform crossover. Both build each offspring gene by
gene and only accept an inherited 1 when the item still fits in the
knapsack, so offspring are feasible without a repair pass.
"""

from typing import Dict, List, Optional, Tuple
import numpy as np

from .data_models import Chromosome, Population
from .problem import KnapsackProblem


CROSSOVER_STRATEGIES = ("uniform", "two_point")


class _OffspringBuilder:
    """
    Accumulates genes for one offspring while tracking its weight.

    Genes are appended in locus order, so the running weight is the same sum
    KnapsackProblem.chromosome_weight computes.
    """

    def __init__(self, problem: KnapsackProblem):
        self.problem = problem
        self.genes = []
        self.weight = 0.0

    def inherit(self, locus: int, gene: int) -> None:
        if gene == 1 and self.problem.fits(self.weight, locus):
            self.genes.append(1)
            self.weight += self.problem.weights[locus]
        else:
            self.genes.append(0)

    def build(self) -> Chromosome:
        return Chromosome(genes=self.genes)


def two_point_recombine(
    parent1: Chromosome,
    parent2: Chromosome,
    crosspoint1: int,
    crosspoint2: int,
    problem: KnapsackProblem
) -> Tuple[Chromosome, Chromosome]:
    """
    Combine two parents around fixed crosspoints.

                           P1            P2
       Parent 1: X1 ... Xi | Xi+1 ... Xj | Xj+1 ... Xn
       Parent 2: Y1 ... Yi | Yi+1 ... Yj | Yj+1 ... Yn

    Offspring 1: X1 ... Xi | Yi+1 ... Yj | Xj+1 ... Xn
    Offspring 2: Y1 ... Yi | Xi+1 ... Xj | Yj+1 ... Yn

    Each inherited gene is capacity-checked independently per offspring.

    Args:
        parent1: First parent
        parent2: Second parent
        crosspoint1: Start of the swapped segment (inclusive)
        crosspoint2: End of the swapped segment (exclusive)
        problem: Problem providing weights and capacity

    Returns:
        Tuple of (offspring1, offspring2)
    """
    offspring1 = _OffspringBuilder(problem)
    offspring2 = _OffspringBuilder(problem)

    for locus in range(len(parent1)):
        if crosspoint1 <= locus < crosspoint2:
            offspring1.inherit(locus, parent2[locus])
            offspring2.inherit(locus, parent1[locus])
        else:
            offspring1.inherit(locus, parent1[locus])
            offspring2.inherit(locus, parent2[locus])

    return offspring1.build(), offspring2.build()


def two_point_crossover(
    parents: Population,
    problem: KnapsackProblem,
    rng: np.random.Generator
) -> Population:
    """
    Recombine consecutive parent pairs with two-point crossover.

    For every pair, crosspoint1 is uniform in [0, L] and crosspoint2 uniform
    in [crosspoint1, L], where L is the chromosome length.

    Args:
        parents: Mating pool of even size
        problem: Problem providing weights and capacity
        rng: Random number generator

    Returns:
        Offspring population, same size as parents
    """
    size = problem.domain_size()
    offsprings = []

    for i in range(0, len(parents), 2):
        crosspoint1 = int(rng.integers(0, size + 1))
        crosspoint2 = crosspoint1 + int(rng.integers(0, size + 1 - crosspoint1))

        offspring1, offspring2 = two_point_recombine(
            parents[i], parents[i + 1], crosspoint1, crosspoint2, problem
        )
        offsprings.append(offspring1)
        offsprings.append(offspring2)

    return offsprings


def draw_uniform_mask(size: int, bias: float, rng: np.random.Generator) -> List[bool]:
    """
    Draw a per-locus swap mask.

    Args:
        size: Chromosome length
        bias: Probability that a locus is taken from the second parent
        rng: Random number generator

    Returns:
        List of booleans, True = inherit from parent2
    """
    return [bool(rng.random() < bias) for _ in range(size)]


def uniform_recombine(
    parent1: Chromosome,
    parent2: Chromosome,
    mask: List[bool],
    problem: KnapsackProblem
) -> Chromosome:
    """
    Build one offspring following a swap mask.

    Args:
        parent1: Donor for unmasked loci
        parent2: Donor for masked loci
        mask: Per-locus swap flags
        problem: Problem providing weights and capacity

    Returns:
        Feasible offspring
    """
    offspring = _OffspringBuilder(problem)

    for locus, swap in enumerate(mask):
        offspring.inherit(locus, parent2[locus] if swap else parent1[locus])

    return offspring.build()


def uniform_crossover(
    parents: Population,
    problem: KnapsackProblem,
    rng: np.random.Generator,
    bias: float = 0.5
) -> Population:
    """
    Recombine consecutive parent pairs with uniform crossover.

    The two offspring of a pair use independently drawn masks. A bias below
    0.5 leans towards parent1, above 0.5 towards parent2.

    Args:
        parents: Mating pool of even size
        problem: Problem providing weights and capacity
        rng: Random number generator
        bias: Probability of inheriting a locus from parent2

    Returns:
        Offspring population, same size as parents
    """
    size = problem.domain_size()
    offsprings = []

    for i in range(0, len(parents), 2):
        parent1 = parents[i]
        parent2 = parents[i + 1]

        mask = draw_uniform_mask(size, bias, rng)
        offsprings.append(uniform_recombine(parent1, parent2, mask, problem))

        mask = draw_uniform_mask(size, bias, rng)
        offsprings.append(uniform_recombine(parent1, parent2, mask, problem))

    return offsprings


def apply_crossover(
    parents: Population,
    problem: KnapsackProblem,
    rng: np.random.Generator,
    strategy: str = "uniform",
    bias: float = 0.5
) -> Population:
    """
    Apply crossover using the configured strategy.

    Args:
        parents: Mating pool of even size
        problem: Problem providing weights and capacity
        rng: Random number generator
        strategy: "uniform" or "two_point"
        bias: Uniform crossover bias (ignored by two_point)

    Returns:
        Offspring population

    Raises:
        ValueError: If strategy is unknown or the pool has odd size
    """
    if len(parents) % 2 != 0:
        raise ValueError(f"Crossover needs an even number of parents, got {len(parents)}")

    if strategy == "uniform":
        return uniform_crossover(parents, problem, rng, bias)
    elif strategy == "two_point":
        return two_point_crossover(parents, problem, rng)
    else:
        raise ValueError(f"Unknown crossover strategy: {strategy}")


def crossover_statistics(
    offspring: Chromosome,
    parent1: Chromosome,
    parent2: Chromosome,
    problem: Optional[KnapsackProblem] = None
) -> Dict:
    """
    Calculate statistics about one crossover result.

    Args:
        offspring: Offspring chromosome
        parent1: First parent
        parent2: Second parent
        problem: Optional problem, adds weight figures when given

    Returns:
        Dictionary with crossover statistics
    """
    size = len(offspring)
    from_parent1 = sum(1 for locus in range(size) if offspring[locus] == parent1[locus])
    from_parent2 = sum(1 for locus in range(size) if offspring[locus] == parent2[locus])
    # both donors carry the item, so a 0 can only come from the capacity check
    rejected = sum(
        1 for locus in range(size)
        if offspring[locus] == 0 and parent1[locus] == 1 and parent2[locus] == 1
    )

    stats = {
        'length': size,
        'included': offspring.count_ones(),
        'matches_parent1': from_parent1,
        'matches_parent2': from_parent2,
        'forced_zeros': rejected,
    }

    if problem is not None:
        stats['weight'] = problem.chromosome_weight(offspring)
        stats['capacity'] = problem.capacity
        stats['fill_rate'] = stats['weight'] / problem.capacity if problem.capacity > 0 else 0.0

    return stats
