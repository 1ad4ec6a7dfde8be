"""
I/O utilities for the KQBF genetic algorithm.

Handles kqbf instance parsing, run history CSV files, solution export and
output folder management.
"""

import csv
from datetime import datetime
from pathlib import Path
from typing import List, Union
import numpy as np
import yaml

from .data_models import GenerationRecord, Solution
from .evaluator import QBFEvaluator


HISTORY_COLUMNS = ['generation', 'elapsed', 'best_cost', 'best_weight']


class InstanceFormatError(ValueError):
    """Raised when a kqbf instance file is malformed."""
    pass


def load_kqbf_instance(instance_path: Union[str, Path]) -> QBFEvaluator:
    """
    Load a knapsack QBF instance file.

    File format (whitespace separated, line breaks are not significant):
        n
        W
        w_1 w_2 ... w_n
        a_11 a_12 ... a_1n
        a_22 ... a_2n
        ...
        a_nn

    The matrix is given as its upper triangle, row by row.

    Args:
        instance_path: Path to the instance file

    Returns:
        QBFEvaluator for the instance

    Raises:
        FileNotFoundError: If the file doesn't exist
        InstanceFormatError: If the file is truncated, has trailing values or
            contains bad numbers
    """
    instance_path = Path(instance_path)

    if not instance_path.exists():
        raise FileNotFoundError(f"Instance file not found: {instance_path}")

    with open(instance_path, 'r') as f:
        tokens = f.read().split()

    if len(tokens) < 2:
        raise InstanceFormatError(f"Instance {instance_path} is missing its header (n, W)")

    try:
        size = int(tokens[0])
        capacity = float(tokens[1])
        values = [float(token) for token in tokens[2:]]
    except ValueError as e:
        raise InstanceFormatError(f"Invalid number in instance {instance_path}: {e}")

    if size <= 0:
        raise InstanceFormatError(f"Instance {instance_path} declares {size} items")

    expected = size + size * (size + 1) // 2
    if len(values) < expected:
        raise InstanceFormatError(
            f"Instance {instance_path} is truncated: expected {expected} values "
            f"after the header, found {len(values)}"
        )
    if len(values) > expected:
        raise InstanceFormatError(
            f"Instance {instance_path} has trailing data: expected {expected} values "
            f"after the header, found {len(values)}"
        )

    weights = values[:size]
    matrix = np.zeros((size, size))
    position = size
    for row in range(size):
        row_length = size - row
        matrix[row, row:] = values[position:position + row_length]
        position += row_length

    return QBFEvaluator(matrix, weights, capacity)


def save_kqbf_instance(
    evaluator: QBFEvaluator,
    output_path: Union[str, Path],
    overwrite: bool = False
) -> Path:
    """
    Write an evaluator back to the kqbf instance format.

    Only the upper triangle of the matrix is written.

    Args:
        evaluator: Instance to save
        output_path: Destination file
        overwrite: If True, overwrite existing file

    Returns:
        Path to saved file

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    output_path = Path(output_path)

    if output_path.exists() and not overwrite:
        raise FileExistsError(f"Output file already exists: {output_path}")

    output_path.parent.mkdir(parents=True, exist_ok=True)

    size = evaluator.domain_size()
    with open(output_path, 'w') as f:
        f.write(f"{size}\n")
        f.write(f"{_format_number(evaluator.capacity())}\n")
        f.write(" ".join(_format_number(w) for w in evaluator.item_weights()) + "\n")
        for row in range(size):
            f.write(" ".join(_format_number(a) for a in evaluator.matrix[row, row:]) + "\n")

    return output_path


def _format_number(value: float) -> str:
    value = float(value)
    return str(int(value)) if value.is_integer() else repr(value)


def save_history_csv(
    history: List[GenerationRecord],
    output_path: Union[str, Path]
) -> Path:
    """
    Save the improvement history to CSV.

    Args:
        history: Records produced by the engine
        output_path: Path for output CSV

    Returns:
        Path to saved CSV file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=HISTORY_COLUMNS)
        writer.writeheader()
        for record in history:
            writer.writerow(record.to_dict())

    return output_path


def load_history_csv(csv_path: Union[str, Path]) -> List[GenerationRecord]:
    """
    Load an improvement history CSV.

    Args:
        csv_path: Path to CSV file

    Returns:
        List of GenerationRecord in file order

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If the header is missing required columns
    """
    csv_path = Path(csv_path)

    if not csv_path.exists():
        raise FileNotFoundError(f"History file not found: {csv_path}")

    records = []
    with open(csv_path, 'r') as f:
        reader = csv.DictReader(f)

        if reader.fieldnames is None or not all(col in reader.fieldnames for col in HISTORY_COLUMNS):
            raise ValueError(
                f"Invalid history format in {csv_path}. Expected columns: {','.join(HISTORY_COLUMNS)}"
            )

        for row in reader:
            records.append(
                GenerationRecord(
                    generation=int(row['generation']),
                    elapsed=float(row['elapsed']),
                    best_cost=float(row['best_cost']),
                    best_weight=float(row['best_weight']),
                )
            )

    return records


def save_solution(
    solution: Solution,
    output_path: Union[str, Path],
    metadata: dict = None
) -> Path:
    """
    Save a solution as YAML.

    Args:
        solution: Solution to save
        output_path: Path for output YAML
        metadata: Extra fields stored under 'metadata'

    Returns:
        Path to saved file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        'cost': float(solution.cost),
        'weight': float(solution.weight),
        'size': len(solution.elements),
        'elements': [int(item) for item in solution.elements],
        'saved_at': datetime.now().isoformat(),
    }
    if metadata:
        data['metadata'] = metadata

    with open(output_path, 'w') as f:
        yaml.safe_dump(data, f, sort_keys=False)

    return output_path


def load_solution(solution_path: Union[str, Path]) -> Solution:
    """
    Load a solution saved by save_solution.

    Args:
        solution_path: Path to YAML file

    Returns:
        Solution object

    Raises:
        FileNotFoundError: If file doesn't exist
    """
    solution_path = Path(solution_path)

    if not solution_path.exists():
        raise FileNotFoundError(f"Solution file not found: {solution_path}")

    with open(solution_path, 'r') as f:
        data = yaml.safe_load(f)

    return Solution(
        elements=[int(item) for item in data.get('elements', [])],
        cost=float(data['cost']),
        weight=float(data['weight']),
    )


def create_output_folder(root: Union[str, Path], overwrite: bool = False) -> Path:
    """
    Create the output folder for a run.

    Args:
        root: Output directory
        overwrite: Allow reusing an existing directory

    Returns:
        Path to the directory

    Raises:
        FileExistsError: If directory exists and overwrite=False
    """
    root = Path(root)

    if root.exists() and not overwrite:
        raise FileExistsError(
            f"Output directory already exists: {root}\n"
            f"Set 'output.overwrite: true' in config to overwrite"
        )

    root.mkdir(parents=True, exist_ok=True)
    return root
