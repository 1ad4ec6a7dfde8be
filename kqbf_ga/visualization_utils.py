"""
Visualization utilities for the KQBF genetic algorithm.

Plots the incumbent's objective value over the course of a run.
"""

from pathlib import Path
from typing import List, Optional, Tuple, Union
import matplotlib.pyplot as plt

from .data_models import GenerationRecord


def plot_convergence(
    history: List[GenerationRecord],
    output_path: Union[str, Path],
    title: Optional[str] = None,
    figsize: Tuple[int, int] = (10, 6)
) -> Path:
    """
    Save a two-panel convergence plot.

    The top panel shows best cost per generation, the bottom panel best cost
    against elapsed time. Both are drawn as step plots since the incumbent
    only changes at the recorded generations.

    Args:
        history: Improvement records from the engine
        output_path: Path to save PNG file
        title: Optional figure title
        figsize: Figure size (width, height) in inches

    Returns:
        Path to the saved image

    Raises:
        ValueError: If history is empty
    """
    if not history:
        raise ValueError("Cannot plot an empty history")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    generations = [record.generation for record in history]
    elapsed = [record.elapsed for record in history]
    costs = [record.best_cost for record in history]

    fig, (ax_gen, ax_time) = plt.subplots(2, 1, figsize=figsize)

    ax_gen.step(generations, costs, where='post', color='tab:blue')
    ax_gen.scatter(generations, costs, color='tab:blue', s=12)
    ax_gen.set_xlabel('Generation')
    ax_gen.set_ylabel('Best cost')
    ax_gen.grid(True, alpha=0.3)

    ax_time.step(elapsed, costs, where='post', color='tab:orange')
    ax_time.set_xlabel('Elapsed (s)')
    ax_time.set_ylabel('Best cost')
    ax_time.grid(True, alpha=0.3)

    fig.suptitle(title or f"Convergence ({len(history)} improvements)")
    fig.tight_layout()
    fig.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close(fig)

    print(f"  Saved visualization: {output_path}")
    return output_path
