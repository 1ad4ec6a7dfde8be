"""
Tests for the GA engine: configuration, problem interface, evaluator and
complete runs.
"""

import io
import unittest
from contextlib import redirect_stdout
import numpy as np

from kqbf_ga.data_models import Chromosome, Solution
from kqbf_ga.evaluator import QBFEvaluator
from kqbf_ga.problem import KnapsackProblem
from kqbf_ga.engine import GAConfig, GeneticAlgorithm, EngineState
from kqbf_ga.replacement import get_best_chromosome

from .fixtures import CountEvaluator, LinearEvaluator


class FakeClock:
    """Clock advancing by a fixed step on every reading."""

    def __init__(self, step=1.0):
        self.now = 0.0
        self.step = step

    def __call__(self):
        self.now += self.step
        return self.now


class TestGAConfig(unittest.TestCase):
    """Test configuration validation."""

    def test_defaults(self):
        config = GAConfig()
        self.assertEqual(config.pop_size, 100)
        self.assertEqual(config.crossover, "uniform")
        self.assertEqual(config.initialization, "stratified")

    def test_invalid_values(self):
        """Test that invalid parameters fail fast."""
        invalid = [
            {'pop_size': 7},
            {'pop_size': 0},
            {'pop_size': 2.0},
            {'mutation_rate': -0.1},
            {'mutation_rate': 1.5},
            {'duration': 0},
            {'crossover': 'one_point'},
            {'initialization': 'latin'},
            {'uniform_bias': 2.0},
            {'max_generations': -1},
        ]
        for kwargs in invalid:
            with self.subTest(kwargs=kwargs):
                with self.assertRaises(ValueError):
                    GAConfig(**kwargs)

    def test_smallest_population(self):
        self.assertEqual(GAConfig(pop_size=2).pop_size, 2)


class TestKnapsackProblem(unittest.TestCase):
    """Test the problem interface."""

    def setUp(self):
        self.problem = KnapsackProblem(LinearEvaluator([5, 1, 4, 2], [2, 3, 4, 5], 9))

    def test_invalid_evaluators(self):
        with self.assertRaises(ValueError):
            KnapsackProblem(CountEvaluator([], 5))
        with self.assertRaises(ValueError):
            KnapsackProblem(CountEvaluator([1, -2, 3], 5))
        with self.assertRaises(ValueError):
            KnapsackProblem(CountEvaluator([1, 2, 3], -1))

        class ShortWeights(CountEvaluator):
            def domain_size(self):
                return 5

        with self.assertRaises(ValueError):
            KnapsackProblem(ShortWeights([1, 2, 3], 5))

    def test_decode(self):
        """Test decoding into a solution."""
        solution = self.problem.decode(Chromosome(genes=[1, 0, 1, 0]))

        self.assertEqual(solution.elements, [0, 2])
        self.assertEqual(solution.cost, 9.0)
        self.assertEqual(solution.weight, 6.0)

    def test_decode_is_pure(self):
        """Test that decoding twice gives identical results without mutation."""
        chromosome = Chromosome(genes=[0, 1, 1, 0])
        first = self.problem.decode(chromosome)
        second = self.problem.decode(chromosome)

        self.assertEqual(first, second)
        self.assertIsNot(first, second)
        self.assertEqual(chromosome.genes, [0, 1, 1, 0])

    def test_fitness(self):
        self.assertEqual(self.problem.fitness(Chromosome(genes=[1, 1, 1, 1])), 12.0)
        self.assertEqual(self.problem.fitness(self.problem.empty_chromosome()), 0.0)

    def test_weights(self):
        chromosome = Chromosome(genes=[1, 1, 1, 0])
        self.assertEqual(self.problem.chromosome_weight(chromosome), 9.0)
        self.assertTrue(self.problem.is_feasible(chromosome))
        self.assertFalse(self.problem.is_feasible(Chromosome(genes=[1, 1, 1, 1])))

    def test_solution_str(self):
        text = str(Solution(elements=[0, 2], cost=9.0, weight=6.0))
        self.assertIn("cost=[9.0]", text)
        self.assertIn("elements=[0, 2]", text)


class TestQBFEvaluator(unittest.TestCase):
    """Test the quadratic objective."""

    def setUp(self):
        self.evaluator = QBFEvaluator([[1, 2], [0, 3]], [4, 5], 8)

    def test_evaluate(self):
        self.assertEqual(self.evaluator.evaluate([0, 1]), (6.0, 9.0))
        self.assertEqual(self.evaluator.evaluate([1]), (3.0, 5.0))
        self.assertEqual(self.evaluator.evaluate([]), (0.0, 0.0))

    def test_contract(self):
        self.assertEqual(self.evaluator.domain_size(), 2)
        self.assertEqual(self.evaluator.item_weights(), [4.0, 5.0])
        self.assertEqual(self.evaluator.capacity(), 8.0)

    def test_shape_validation(self):
        with self.assertRaises(ValueError):
            QBFEvaluator([[1, 2, 3], [0, 3, 1]], [1, 1], 5)
        with self.assertRaises(ValueError):
            QBFEvaluator([[1, 2], [0, 3]], [1, 1, 1], 5)

    def test_weight_matches_problem(self):
        """Test that reported weights equal the weight used for capacity checks."""
        problem = KnapsackProblem(QBFEvaluator(np.eye(3), [0.1, 0.2, 0.3], 0.6))
        for code in range(8):
            chromosome = Chromosome(genes=[(code >> locus) & 1 for locus in range(3)])
            with self.subTest(genes=chromosome.genes):
                self.assertEqual(
                    problem.decode(chromosome).weight, problem.chromosome_weight(chromosome)
                )


class TestGeneticAlgorithm(unittest.TestCase):
    """Test complete GA runs."""

    def test_end_to_end_count_objective(self):
        """Test that the run finds a two-item selection within capacity."""
        evaluator = CountEvaluator([2, 3, 4, 5], 5)
        config = GAConfig(
            duration=60.0, pop_size=10, mutation_rate=0.2,
            max_generations=100, seed=1, verbose=False
        )
        ga = GeneticAlgorithm(evaluator, config)

        best = ga.solve()

        self.assertEqual(ga.state, EngineState.TERMINATED)
        self.assertGreaterEqual(best.cost, 2)
        self.assertLessEqual(best.weight, 5)
        self.assertEqual(best.elements, [0, 1])

    def test_both_operators_and_initializers(self):
        """Test feasibility of the final population for every strategy combination."""
        evaluator = QBFEvaluator(
            np.triu(np.random.default_rng(3).integers(-5, 10, size=(12, 12))),
            [4, 7, 3, 9, 5, 6, 2, 8, 5, 3, 6, 4],
            20
        )
        for crossover in ["uniform", "two_point"]:
            for initialization in ["random", "stratified"]:
                with self.subTest(crossover=crossover, initialization=initialization):
                    config = GAConfig(
                        pop_size=12, crossover=crossover, initialization=initialization,
                        max_generations=15, verbose=False
                    )
                    ga = GeneticAlgorithm(evaluator, config)
                    result = ga.run()

                    self.assertEqual(result.generations, 15)
                    self.assertEqual(len(ga.population), 12)
                    for chromosome in ga.population:
                        self.assertTrue(ga.problem.is_feasible(chromosome))
                    self.assertLessEqual(result.best_solution.weight, 20)

    def test_monotone_incumbent(self):
        """Test that every generation keeps a chromosome at least as good as the incumbent."""
        evaluator = LinearEvaluator(
            [3, 1, 4, 1, 5, 9, 2, 6], [4, 2, 5, 1, 6, 8, 3, 5], 14
        )
        ga = GeneticAlgorithm(evaluator, GAConfig(pop_size=8, max_generations=0, verbose=False))
        ga.run()

        for _ in range(30):
            previous = ga.best_solution.cost
            ga.population = ga.step()
            best = get_best_chromosome(ga.population, ga.problem)

            self.assertGreaterEqual(ga.problem.fitness(best), previous)
            if ga.problem.fitness(best) > previous:
                ga.best_chromosome = best.copy()
                ga.best_solution = ga.problem.decode(best)

    def test_history_strictly_increasing(self):
        """Test that improvement records only go up."""
        evaluator = LinearEvaluator(
            [3, 1, 4, 1, 5, 9, 2, 6], [4, 2, 5, 1, 6, 8, 3, 5], 14
        )
        result = GeneticAlgorithm(
            evaluator, GAConfig(pop_size=6, max_generations=40, verbose=False)
        ).run()

        self.assertEqual(result.history[0].generation, 0)
        costs = [record.best_cost for record in result.history]
        for earlier, later in zip(costs, costs[1:]):
            self.assertGreater(later, earlier)
        self.assertEqual(result.last_improvement().best_cost, result.best_solution.cost)

    def test_deadline_stops_run(self):
        """Test that the wall-clock budget ends the loop without a generation cap."""
        evaluator = CountEvaluator([2, 3, 4, 5], 5)
        ga = GeneticAlgorithm(
            evaluator, GAConfig(duration=10.0, pop_size=4, verbose=False), clock=FakeClock()
        )

        result = ga.run()

        self.assertEqual(ga.state, EngineState.TERMINATED)
        self.assertGreater(result.generations, 0)
        self.assertLess(result.generations, 10)

    def test_same_seed_same_result(self):
        """Test reproducibility with a fixed seed."""
        evaluator = LinearEvaluator(
            [3, 1, 4, 1, 5, 9, 2, 6], [4, 2, 5, 1, 6, 8, 3, 5], 14
        )
        config = GAConfig(pop_size=6, max_generations=10, seed=11, verbose=False)

        first = GeneticAlgorithm(evaluator, config).run()
        second = GeneticAlgorithm(evaluator, config).run()

        self.assertEqual(first.best_solution, second.best_solution)
        self.assertEqual(first.best_chromosome, second.best_chromosome)

    def test_explicit_rng_and_problem(self):
        """Test passing a KnapsackProblem and a Generator directly."""
        problem = KnapsackProblem(CountEvaluator([2, 3, 4, 5], 5))
        rng = np.random.default_rng(5)
        ga = GeneticAlgorithm(problem, GAConfig(pop_size=4, max_generations=3, verbose=False), rng=rng)

        ga.run()

        self.assertIs(ga.problem, problem)
        self.assertIs(ga.rng, rng)

    def test_evaluator_without_subclassing(self):
        """Test that any object with the evaluator methods is wrapped."""
        class PlainEvaluator:
            def domain_size(self):
                return 3

            def item_weights(self):
                return [1, 2, 3]

            def capacity(self):
                return 4

            def evaluate(self, items):
                items = list(items)
                return float(len(items)), float(sum(i + 1 for i in items))

        ga = GeneticAlgorithm(
            PlainEvaluator(), GAConfig(pop_size=4, max_generations=3, verbose=False)
        )
        result = ga.run()

        self.assertIsInstance(ga.problem, KnapsackProblem)
        self.assertLessEqual(result.best_solution.weight, 4)

    def test_operator_counts(self):
        """Test repair and mutation counts reported in the result."""
        ga = GeneticAlgorithm(
            CountEvaluator([2, 3, 4, 5], 5),
            GAConfig(pop_size=4, mutation_rate=1.0, max_generations=3, verbose=False)
        )
        result = ga.run()

        self.assertGreater(result.repaired_items, 0)
        self.assertEqual(result.mutated_offspring, 3 * 4)

    def test_progress_output(self):
        """Test verbose progress lines."""
        buffer = io.StringIO()
        ga = GeneticAlgorithm(
            CountEvaluator([2, 3, 4, 5], 5),
            GAConfig(pop_size=4, max_generations=2, verbose=True)
        )
        with redirect_stdout(buffer):
            ga.run()

        self.assertIn("(Gen. 0) BestSol = Solution: cost=", buffer.getvalue())

    def test_evaluator_errors_propagate(self):
        """Test that evaluator exceptions are not swallowed."""
        class BrokenEvaluator(CountEvaluator):
            def evaluate(self, items):
                raise RuntimeError("bad instance")

        ga = GeneticAlgorithm(
            BrokenEvaluator([1, 2], 3), GAConfig(pop_size=2, max_generations=1, verbose=False)
        )
        with self.assertRaises(RuntimeError):
            ga.run()


if __name__ == '__main__':
    unittest.main()
