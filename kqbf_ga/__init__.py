"""
Genetic algorithm for the knapsack-constrained quadratic binary function (KQBF).

Chooses a subset of items maximising f(x) = x^T A x subject to a single
knapsack capacity. Every operator keeps chromosomes feasible while it builds
them, so the population never contains an overweight solution.

Modules:
- data_models: Chromosome, Solution, GenerationRecord, RunResult
- evaluator: Evaluator contract and the QBF evaluator
- problem: Problem interface (decode, fitness, gene mutation) over an evaluator
- repair: Random-removal feasibility repair
- initialization: Random-greedy and stratified initial populations
- selection: Binary tournament
- crossover: Two-point and uniform crossover with inline capacity checks
- mutation: Capacity-aware per-gene mutation
- replacement: Elitist survivor selection
- engine: Time-bounded generational driver
- io_utils: Instance files, history CSV, solution export
- visualization_utils: Convergence plots
- cli: YAML run configuration and execution
"""

__version__ = "0.1.0"
__author__ = "KQBF GA Team"

from .data_models import Chromosome, Solution, GenerationRecord, RunResult
from .evaluator import Evaluator, QBFEvaluator
from .problem import KnapsackProblem
from .engine import GAConfig, GeneticAlgorithm, EngineState

__all__ = [
    "Chromosome",
    "Solution",
    "GenerationRecord",
    "RunResult",
    "Evaluator",
    "QBFEvaluator",
    "KnapsackProblem",
    "GAConfig",
    "GeneticAlgorithm",
    "EngineState",
]
