"""
Genetic algorithm driver for the knapsack-constrained QBF.

Runs the generational loop: parent selection, crossover, mutation and
elitist replacement, under a wall-clock time budget. The best chromosome
ever seen (the incumbent) is tracked and returned when the budget runs out.
"""

import time
from dataclasses import dataclass
from enum import Enum
from itertools import count
from typing import Callable, List, Optional
import numpy as np

from .data_models import Chromosome, GenerationRecord, Population, RunResult, Solution
from .problem import KnapsackProblem
from .initialization import INITIALIZATION_STRATEGIES, initialize_population
from .selection import select_parents
from .crossover import CROSSOVER_STRATEGIES, apply_crossover
from .mutation import mutate
from .replacement import get_best_chromosome, select_population


class EngineState(Enum):
    """Lifecycle of a GA run"""
    INITIALIZING = "initializing"
    RUNNING = "running"
    TERMINATED = "terminated"


@dataclass
class GAConfig:
    """
    GA parameters, validated at construction.

    Attributes:
        duration: Wall-clock budget in seconds
        pop_size: Population size (even, at least 2)
        mutation_rate: Per-locus flip probability in [0, 1]
        crossover: "uniform" or "two_point"
        uniform_bias: Probability of taking a locus from parent2 in uniform crossover
        initialization: "stratified" or "random"
        seed: Seed for the engine's random number generator
        max_generations: Optional generation cap, applied on top of the time budget
        verbose: Print a line whenever the incumbent improves
    """
    duration: float = 100.0
    pop_size: int = 100
    mutation_rate: float = 0.03
    crossover: str = "uniform"
    uniform_bias: float = 0.5
    initialization: str = "stratified"
    seed: Optional[int] = 0
    max_generations: Optional[int] = None
    verbose: bool = True

    def __post_init__(self):
        if self.duration <= 0:
            raise ValueError(f"duration must be positive, got {self.duration}")
        if not isinstance(self.pop_size, int) or self.pop_size < 2:
            raise ValueError(f"pop_size must be an integer >= 2, got {self.pop_size}")
        if self.pop_size % 2 != 0:
            raise ValueError(f"pop_size must be even, got {self.pop_size}")
        if not 0.0 <= self.mutation_rate <= 1.0:
            raise ValueError(f"mutation_rate must be in [0, 1], got {self.mutation_rate}")
        if self.crossover not in CROSSOVER_STRATEGIES:
            raise ValueError(
                f"Unknown crossover strategy: {self.crossover}. "
                f"Must be one of {', '.join(CROSSOVER_STRATEGIES)}"
            )
        if not 0.0 <= self.uniform_bias <= 1.0:
            raise ValueError(f"uniform_bias must be in [0, 1], got {self.uniform_bias}")
        if self.initialization not in INITIALIZATION_STRATEGIES:
            raise ValueError(
                f"Unknown initialization strategy: {self.initialization}. "
                f"Must be one of {', '.join(INITIALIZATION_STRATEGIES)}"
            )
        if self.max_generations is not None and self.max_generations < 0:
            raise ValueError(f"max_generations must be non-negative, got {self.max_generations}")


class GeneticAlgorithm:
    """
    Elitist generational GA over binary chromosomes.

    Attributes:
        problem: Problem interface wrapping the evaluator
        config: Validated GA parameters
        rng: Random number generator shared by every operator of this run
        state: Current lifecycle state
        population: Current population
        best_chromosome: Incumbent genotype
        best_solution: Incumbent fenotype
        history: Improvement records
        repaired_items: Items dropped while repairing the initial population
        mutated_offspring: Offspring hit by at least one mutation, summed over generations
    """

    def __init__(
        self,
        problem,
        config: Optional[GAConfig] = None,
        rng: Optional[np.random.Generator] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Initialize the engine.

        Args:
            problem: KnapsackProblem, or any object implementing the Evaluator
                methods, which is wrapped in one
            config: GA parameters (defaults to GAConfig())
            rng: Random number generator (defaults to one seeded with config.seed)
            clock: Time source in seconds, used for the time budget

        Raises:
            ValueError: If the problem has an empty domain or inconsistent weights
            AttributeError: If problem lacks an Evaluator method
        """
        if not isinstance(problem, KnapsackProblem):
            problem = KnapsackProblem(problem)

        self.problem = problem
        self.config = config if config is not None else GAConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.clock = clock

        self.state = EngineState.INITIALIZING
        self.population: Population = []
        self.best_chromosome: Optional[Chromosome] = None
        self.best_solution: Optional[Solution] = None
        self.history: List[GenerationRecord] = []
        self.generations = 0
        self.repaired_items = 0
        self.mutated_offspring = 0

    def solve(self) -> Solution:
        """
        Run the GA and return the best solution found.

        Returns:
            Decoded incumbent at termination
        """
        return self.run().best_solution

    def run(self) -> RunResult:
        """
        Run the GA mainframe.

        Builds the initial population, then repeats selection, crossover,
        mutation and replacement until the time budget (or the optional
        generation cap) is exhausted. The deadline is only checked between
        generations.

        Returns:
            RunResult with the incumbent and the improvement history
        """
        config = self.config
        start_time = self.clock()
        end_time = start_time + config.duration

        self.state = EngineState.INITIALIZING
        self.history = []
        self.generations = 0
        self.mutated_offspring = 0

        repairs = []
        self.population = initialize_population(
            self.problem, config.pop_size, self.rng, config.initialization, repairs
        )
        self.repaired_items = sum(repairs)
        self.best_chromosome = get_best_chromosome(self.population, self.problem).copy()
        self.best_solution = self.problem.decode(self.best_chromosome)
        self._record_improvement(0, start_time)

        self.state = EngineState.RUNNING

        for generation in count(1):
            if self.clock() > end_time:
                break
            if config.max_generations is not None and generation > config.max_generations:
                break

            self.population = self.step()
            self.generations = generation

            population_best = get_best_chromosome(self.population, self.problem)
            if self.problem.fitness(population_best) > self.best_solution.cost:
                self.best_chromosome = population_best.copy()
                self.best_solution = self.problem.decode(self.best_chromosome)
                self._record_improvement(generation, start_time)

        self.state = EngineState.TERMINATED

        return RunResult(
            best_solution=self.best_solution,
            best_chromosome=self.best_chromosome,
            generations=self.generations,
            elapsed=self.clock() - start_time,
            history=list(self.history),
            repaired_items=self.repaired_items,
            mutated_offspring=self.mutated_offspring,
        )

    def step(self) -> Population:
        """
        Produce the next generation from the current population.

        Returns:
            New population; the current one is left untouched
        """
        config = self.config

        parents = select_parents(self.population, self.problem, self.rng)
        offsprings = apply_crossover(
            parents, self.problem, self.rng, config.crossover, config.uniform_bias
        )
        mutants, op_log = mutate(offsprings, self.problem, self.rng, config.mutation_rate)
        self.mutated_offspring += len(op_log)

        return select_population(mutants, self.best_chromosome, self.problem)

    def _record_improvement(self, generation: int, start_time: float) -> None:
        self.history.append(
            GenerationRecord(
                generation=generation,
                elapsed=self.clock() - start_time,
                best_cost=self.best_solution.cost,
                best_weight=self.best_solution.weight,
            )
        )

        if self.config.verbose:
            print(f"(Gen. {generation}) BestSol = {self.best_solution}")
