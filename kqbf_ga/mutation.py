"""
Mutation operator for the KQBF genetic algorithm.

Every locus of every offspring flips with probability mutation_rate. Flips
go through KnapsackProblem.mutate_gene, which never switches an item on when
it would exceed the capacity.
"""

from typing import Dict, List, Tuple
import numpy as np

from .data_models import Chromosome, Population
from .problem import KnapsackProblem


def mutate_chromosome(
    chromosome: Chromosome,
    problem: KnapsackProblem,
    rng: np.random.Generator,
    mutation_rate: float
) -> List[int]:
    """
    Mutate one chromosome in place.

    Args:
        chromosome: Chromosome owned by the caller
        problem: Problem providing the gene mutation rule
        rng: Random number generator
        mutation_rate: Per-locus flip probability

    Returns:
        Loci on which a mutation event fired
    """
    mutated_loci = []

    for locus in range(len(chromosome)):
        if rng.random() < mutation_rate:
            problem.mutate_gene(chromosome, locus)
            mutated_loci.append(locus)

    return mutated_loci


def mutate(
    offsprings: Population,
    problem: KnapsackProblem,
    rng: np.random.Generator,
    mutation_rate: float
) -> Tuple[Population, List[str]]:
    """
    Apply per-gene mutation to a whole offspring population.

    The offspring chromosomes are modified in place and returned.

    Args:
        offsprings: Offspring produced by crossover
        problem: Problem providing the gene mutation rule
        rng: Random number generator
        mutation_rate: Per-locus flip probability

    Returns:
        Tuple of (mutated_population, operation_log)
    """
    op_log = []

    for index, chromosome in enumerate(offsprings):
        mutated_loci = mutate_chromosome(chromosome, problem, rng, mutation_rate)
        if mutated_loci:
            op_log.append(f"mutate(offspring={index}): loci {mutated_loci}")

    return offsprings, op_log


def mutation_statistics(original: Chromosome, mutated: Chromosome) -> Dict:
    """
    Calculate statistics about mutation operations.

    Args:
        original: Chromosome before mutation
        mutated: Chromosome after mutation

    Returns:
        Dictionary with mutation statistics
    """
    switched_on = sum(
        1 for before, after in zip(original.genes, mutated.genes) if before == 0 and after == 1
    )
    switched_off = sum(
        1 for before, after in zip(original.genes, mutated.genes) if before == 1 and after == 0
    )

    return {
        'length': len(mutated),
        'switched_on': switched_on,
        'switched_off': switched_off,
        'genes_changed': switched_on + switched_off,
        'change_rate': (switched_on + switched_off) / max(len(mutated), 1),
    }
