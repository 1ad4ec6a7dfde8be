"""
Data models for the KQBF genetic algorithm.

Core data structures representing chromosomes, decoded solutions and the
run history produced by the engine.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Chromosome:
    """
    Binary genotype: one gene per item, 1 = item included.

    A chromosome is owned by exactly one population. Operators that need an
    independent offspring call copy() instead of sharing the gene list.

    Attributes:
        genes: List of 0/1 values, one per locus (item index)
    """
    genes: List[int]

    def copy(self) -> "Chromosome":
        """
        Create an independent copy of this chromosome.

        Returns:
            New Chromosome with a copied gene list
        """
        return Chromosome(genes=list(self.genes))

    def included_items(self) -> List[int]:
        """
        Get the loci whose gene is 1.

        Returns:
            Sorted list of included item indices
        """
        return [locus for locus, gene in enumerate(self.genes) if gene == 1]

    def count_ones(self) -> int:
        """Number of included items."""
        return sum(self.genes)

    def __len__(self) -> int:
        return len(self.genes)

    def __getitem__(self, locus: int) -> int:
        return self.genes[locus]

    def __setitem__(self, locus: int, value: int) -> None:
        self.genes[locus] = value


Population = List[Chromosome]


@dataclass
class Solution:
    """
    Decoded candidate (fenotype): the selected items plus their evaluation.

    Attributes:
        elements: Indices of included items, ascending
        cost: Objective value of the selection
        weight: Total weight of the selection
    """
    elements: List[int] = field(default_factory=list)
    cost: float = 0.0
    weight: float = 0.0

    def copy(self) -> "Solution":
        return Solution(elements=list(self.elements), cost=self.cost, weight=self.weight)

    def __len__(self) -> int:
        return len(self.elements)

    def __str__(self) -> str:
        return (
            f"Solution: cost=[{self.cost}], weight=[{self.weight}] "
            f"size=[{len(self.elements)}], elements={self.elements}"
        )


@dataclass
class GenerationRecord:
    """
    One entry of the run history, written whenever the incumbent improves.

    Attributes:
        generation: Generation index (0 = initial population)
        elapsed: Seconds since the run started
        best_cost: Incumbent objective value after this generation
        best_weight: Incumbent total weight after this generation
    """
    generation: int
    elapsed: float
    best_cost: float
    best_weight: float

    def to_dict(self) -> dict:
        return {
            "generation": self.generation,
            "elapsed": f"{self.elapsed:.6f}",
            "best_cost": self.best_cost,
            "best_weight": self.best_weight,
        }


@dataclass
class RunResult:
    """
    Outcome of a complete GA run.

    Attributes:
        best_solution: Decoded incumbent at termination
        best_chromosome: Incumbent genotype at termination
        generations: Number of completed generations (initial population excluded)
        elapsed: Wall-clock duration of the run in seconds
        history: Improvement records, generation 0 first
        repaired_items: Items removed by the initial feasibility repair
        mutated_offspring: Offspring on which a mutation event fired, over the whole run
    """
    best_solution: Solution
    best_chromosome: Chromosome
    generations: int
    elapsed: float
    history: List[GenerationRecord] = field(default_factory=list)
    repaired_items: int = 0
    mutated_offspring: int = 0

    def last_improvement(self) -> Optional[GenerationRecord]:
        """Most recent history entry, or None for an empty history."""
        return self.history[-1] if self.history else None
