"""
Shared test doubles for the KQBF GA tests.
"""

from kqbf_ga.evaluator import Evaluator


class CountEvaluator(Evaluator):
    """Objective = number of selected items."""

    def __init__(self, weights, capacity):
        self.weights = list(weights)
        self._capacity = capacity
        self.calls = 0

    def domain_size(self):
        return len(self.weights)

    def item_weights(self):
        return self.weights

    def capacity(self):
        return self._capacity

    def evaluate(self, items):
        items = list(items)
        self.calls += 1
        return float(len(items)), float(sum(self.weights[i] for i in items))


class LinearEvaluator(CountEvaluator):
    """Objective = sum of per-item values."""

    def __init__(self, values, weights, capacity):
        super().__init__(weights, capacity)
        self.values = list(values)

    def evaluate(self, items):
        items = list(items)
        self.calls += 1
        return (
            float(sum(self.values[i] for i in items)),
            float(sum(self.weights[i] for i in items)),
        )


class RiggedRng:
    """
    Stand-in for np.random.Generator returning scripted draws.

    integers() cycles through int_draws, random() through float_draws.
    """

    def __init__(self, int_draws=(0,), float_draws=(0.0,)):
        self.int_draws = list(int_draws)
        self.float_draws = list(float_draws)
        self._int_pos = 0
        self._float_pos = 0

    def integers(self, low, high=None):
        value = self.int_draws[self._int_pos % len(self.int_draws)]
        self._int_pos += 1
        return value

    def random(self):
        value = self.float_draws[self._float_pos % len(self.float_draws)]
        self._float_pos += 1
        return value
