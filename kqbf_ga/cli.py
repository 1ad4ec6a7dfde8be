"""
CLI module for the KQBF genetic algorithm.

Handles run configuration loading, validation and execution.
"""

from typing import Dict, Any
from pathlib import Path
import yaml

from .engine import GAConfig, GeneticAlgorithm
from .io_utils import create_output_folder, load_kqbf_instance, save_history_csv, save_solution


class ConfigValidationError(Exception):
    """Raised when run configuration is invalid."""
    pass


GA_FIELDS = {
    'duration': (int, float),
    'pop_size': (int,),
    'mutation_rate': (int, float),
    'crossover': (str,),
    'uniform_bias': (int, float),
    'initialization': (str,),
    'seed': (int, type(None)),
    'max_generations': (int, type(None)),
    'verbose': (bool,),
}


def load_run_config(config_path: str) -> Dict[str, Any]:
    """
    Load run configuration from YAML file.

    Args:
        config_path: Path to run configuration YAML file

    Returns:
        Dictionary containing run configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigValidationError: If config is invalid
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_file, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigValidationError(f"Invalid YAML in configuration file: {e}")

    if config is None:
        raise ConfigValidationError("Configuration file is empty")

    if not isinstance(config, dict):
        raise ConfigValidationError("Configuration file must contain a mapping")

    return config


def validate_run_config(config: Dict[str, Any]) -> None:
    """
    Validate run configuration structure.

    Args:
        config: Run configuration dictionary

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    for field in ['instance', 'ga', 'output']:
        if field not in config:
            raise ConfigValidationError(f"Missing required field: '{field}'")

    instance_path = Path(config['instance'])
    if not instance_path.exists():
        raise ConfigValidationError(f"Instance file not found: {instance_path}")

    # Validate ga section
    if not isinstance(config['ga'], dict):
        raise ConfigValidationError("'ga' must be a dictionary")

    for key, value in config['ga'].items():
        if key not in GA_FIELDS:
            raise ConfigValidationError(f"Unknown field: 'ga.{key}'")
        allowed = GA_FIELDS[key]
        # bool is an int subclass; only 'verbose' may be a bool
        if isinstance(value, bool) and bool not in allowed:
            raise ConfigValidationError(f"'ga.{key}' must not be a boolean, got: {value}")
        if not isinstance(value, allowed):
            raise ConfigValidationError(
                f"'ga.{key}' has invalid type {type(value).__name__}"
            )

    # Validate output section
    if not isinstance(config['output'], dict):
        raise ConfigValidationError("'output' must be a dictionary")

    if 'root' not in config['output']:
        raise ConfigValidationError("Missing required field: 'output.root'")


def build_ga_config(config: Dict[str, Any]) -> GAConfig:
    """
    Map the 'ga' section onto GAConfig.

    Args:
        config: Validated run configuration

    Returns:
        GAConfig instance

    Raises:
        ConfigValidationError: If a parameter value is rejected by GAConfig
    """
    try:
        return GAConfig(**config['ga'])
    except ValueError as e:
        raise ConfigValidationError(f"Invalid GA parameter: {e}")


def run_from_config(config_path: str) -> None:
    """
    Load run configuration, run the GA and write results.

    This is the main entry point called by ga_cli.py. Writes history.csv,
    solution.yaml and, when output.plot is true, convergence.png into
    output.root.

    Args:
        config_path: Path to run configuration YAML file

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigValidationError: If config is invalid
        Various exceptions from the evaluator and the engine
    """
    print(f"Loading configuration from: {config_path}")
    config = load_run_config(config_path)

    print("Validating configuration...")
    validate_run_config(config)
    ga_config = build_ga_config(config)

    print("=" * 70)
    print("KQBF GENETIC ALGORITHM")
    print("=" * 70)

    instance_path = config['instance']
    print(f"Loading instance from: {instance_path}")
    evaluator = load_kqbf_instance(instance_path)
    print(f"Items: {evaluator.domain_size()}, capacity: {evaluator.capacity()}")

    output_root = create_output_folder(
        config['output']['root'],
        overwrite=config['output'].get('overwrite', False)
    )
    print(f"Output directory: {output_root}")
    print(
        f"Population: {ga_config.pop_size}, mutation rate: {ga_config.mutation_rate}, "
        f"crossover: {ga_config.crossover}, initialization: {ga_config.initialization}"
    )
    print(f"Random seed: {ga_config.seed}, time budget: {ga_config.duration}s\n")

    ga = GeneticAlgorithm(evaluator, ga_config)
    result = ga.run()

    history_path = save_history_csv(result.history, output_root / 'history.csv')
    solution_path = save_solution(
        result.best_solution,
        output_root / 'solution.yaml',
        metadata={
            'instance': str(instance_path),
            'generations': result.generations,
            'elapsed': round(result.elapsed, 3),
            'seed': ga_config.seed,
            'repaired_items': result.repaired_items,
            'mutated_offspring': result.mutated_offspring,
        }
    )

    if config['output'].get('plot', False):
        from .visualization_utils import plot_convergence
        plot_convergence(
            result.history,
            output_root / 'convergence.png',
            title=f"{Path(instance_path).name} - best cost per generation"
        )

    print()
    print("=" * 70)
    print("SUMMARY")
    print("=" * 70)
    print(f"maxVal = {result.best_solution}")
    print(f"Generations: {result.generations}")
    print(f"Initial repair removed {result.repaired_items} items")
    print(f"Mutated offspring: {result.mutated_offspring}")
    print(f"Time = {result.elapsed:.3f} seg")
    print(f"History: {history_path}")
    print(f"Solution: {solution_path}")
    print("\n✅ Run completed successfully!")
