"""
Survivor selection.

Elitist replacement: the worst offspring gives way to the incumbent when the
incumbent is strictly better, so the best fitness never decreases between
generations.
"""

from typing import Optional

from .data_models import Chromosome, Population
from .problem import KnapsackProblem


def get_best_chromosome(population: Population, problem: KnapsackProblem) -> Optional[Chromosome]:
    """
    Take the best chromosome according to fitness.

    Ties go to the first chromosome encountered.

    Args:
        population: Population to scan
        problem: Problem providing fitness

    Returns:
        Best chromosome, or None for an empty population
    """
    best_fitness = float('-inf')
    best = None

    for chromosome in population:
        fitness = problem.fitness(chromosome)
        if fitness > best_fitness:
            best_fitness = fitness
            best = chromosome

    return best


def get_worst_index(population: Population, problem: KnapsackProblem) -> int:
    """
    Index of the first chromosome with the lowest fitness.

    Args:
        population: Non-empty population
        problem: Problem providing fitness

    Returns:
        Position of the worst chromosome

    Raises:
        ValueError: If the population is empty
    """
    if not population:
        raise ValueError("Cannot take the worst chromosome of an empty population")

    worst_fitness = float('inf')
    worst_index = 0

    for index, chromosome in enumerate(population):
        fitness = problem.fitness(chromosome)
        if fitness < worst_fitness:
            worst_fitness = fitness
            worst_index = index

    return worst_index


def select_population(
    offsprings: Population,
    incumbent: Chromosome,
    problem: KnapsackProblem
) -> Population:
    """
    Build the next generation from the offspring.

    If the worst offspring is strictly worse than the incumbent, it is
    removed and a copy of the incumbent is appended.

    Args:
        offsprings: Mutated offspring (modified in place)
        incumbent: Best chromosome found so far
        problem: Problem providing fitness

    Returns:
        Next population, same size as offsprings
    """
    worst_index = get_worst_index(offsprings, problem)

    if problem.fitness(offsprings[worst_index]) < problem.fitness(incumbent):
        del offsprings[worst_index]
        offsprings.append(incumbent.copy())

    return offsprings
