"""
Parent selection by binary tournament.
"""

import numpy as np

from .data_models import Population
from .problem import KnapsackProblem


def select_parents(
    population: Population,
    problem: KnapsackProblem,
    rng: np.random.Generator
) -> Population:
    """
    Build a mating pool of the same size as the population.

    Each slot is filled by drawing two indices with replacement and keeping
    the fitter chromosome. On a tie the second draw wins. Drawing the same
    index twice simply re-selects that chromosome.

    Args:
        population: Current population
        problem: Problem providing fitness
        rng: Random number generator

    Returns:
        List of parent copies, len(population) long
    """
    size = len(population)
    parents = []

    while len(parents) < size:
        parent1 = population[rng.integers(0, size)]
        parent2 = population[rng.integers(0, size)]

        if problem.fitness(parent1) > problem.fitness(parent2):
            parents.append(parent1.copy())
        else:
            parents.append(parent2.copy())

    return parents
