"""
Initial population strategies.

Two strategies are available:
- random: random-greedy chromosomes, feasible by construction
- stratified: Latin-hypercube style assignment where every locus holds an
  even split of 0s and 1s across the population, followed by repair
"""

from typing import List, Optional
import numpy as np

from .data_models import Chromosome, Population
from .problem import KnapsackProblem
from .repair import make_feasible


INITIALIZATION_STRATEGIES = ("random", "stratified")


def initialize_random(
    problem: KnapsackProblem,
    pop_size: int,
    rng: np.random.Generator
) -> Population:
    """
    Fill a population with random-greedy chromosomes.

    Args:
        problem: Problem being solved
        pop_size: Number of chromosomes to create
        rng: Random number generator

    Returns:
        Population of pop_size feasible chromosomes
    """
    population = []

    while len(population) < pop_size:
        population.append(problem.generate_random_chromosome(rng))

    return population


def stratified_columns(
    domain_size: int,
    pop_size: int,
    rng: np.random.Generator
) -> List[List[int]]:
    """
    Build stratified gene lists, one per population slot.

    A column alternating 0/1 over the population is shuffled independently
    for every locus and written into that locus of every chromosome, so each
    locus carries pop_size // 2 ones (plus one for odd sizes).

    Args:
        domain_size: Chromosome length
        pop_size: Number of chromosomes
        rng: Random number generator

    Returns:
        List of pop_size gene lists, each of length domain_size
    """
    column = np.array([slot % 2 for slot in range(pop_size)], dtype=int)
    genes = [[0] * domain_size for _ in range(pop_size)]

    for locus in range(domain_size):
        rng.shuffle(column)
        for slot in range(pop_size):
            genes[slot][locus] = int(column[slot])

    return genes


def initialize_stratified(
    problem: KnapsackProblem,
    pop_size: int,
    rng: np.random.Generator,
    repair_counts: Optional[List[int]] = None
) -> Population:
    """
    Fill a population by stratified assignment, then repair each member.

    Args:
        problem: Problem being solved
        pop_size: Number of chromosomes to create
        rng: Random number generator
        repair_counts: Optional list receiving the number of items removed
            from each chromosome, in population order

    Returns:
        Population of pop_size feasible chromosomes
    """
    columns = stratified_columns(problem.domain_size(), pop_size, rng)

    population = []
    for genes in columns:
        chromosome, removed = make_feasible(Chromosome(genes=genes), problem, rng)
        population.append(chromosome)
        if repair_counts is not None:
            repair_counts.append(len(removed))

    return population


def initialize_population(
    problem: KnapsackProblem,
    pop_size: int,
    rng: np.random.Generator,
    strategy: str = "stratified",
    repair_counts: Optional[List[int]] = None
) -> Population:
    """
    Build the initial population using the configured strategy.

    Args:
        problem: Problem being solved
        pop_size: Number of chromosomes to create
        rng: Random number generator
        strategy: "random" or "stratified"
        repair_counts: Optional list receiving per-chromosome repair removals
            (stratified only; random chromosomes never need repair)

    Returns:
        Population of pop_size feasible chromosomes

    Raises:
        ValueError: If strategy is unknown
    """
    if strategy == "random":
        return initialize_random(problem, pop_size, rng)
    elif strategy == "stratified":
        return initialize_stratified(problem, pop_size, rng, repair_counts)
    else:
        raise ValueError(f"Unknown initialization strategy: {strategy}")
