#!/usr/bin/env python3
"""
KQBF GA CLI - Minimal entry point.

Runs the knapsack-constrained QBF genetic algorithm. All parameters are
specified in a YAML run configuration.

Usage:
    python3 ga_cli.py run_config.yaml
    python3 ga_cli.py --config run_config.yaml

Outputs (written to output.root):
    history.csv       best cost every time the incumbent improves
    solution.yaml     final incumbent
    convergence.png   convergence plot (when output.plot is true)
"""

import argparse
import sys

from kqbf_ga.cli import run_from_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run the KQBF genetic algorithm from a YAML run configuration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Example:\n  python3 ga_cli.py configs/run_config.yaml"
    )

    parser.add_argument(
        'config_file',
        nargs='?',
        help='Path to the YAML run configuration'
    )

    parser.add_argument(
        '--config', '-c',
        dest='config_option',
        help='Path to the YAML run configuration (alternative to the positional argument)'
    )

    return parser


def main(argv=None) -> int:
    """Main entry point for the GA CLI. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    config_path = args.config_option or args.config_file
    if config_path is None:
        parser.print_help()
        return 1

    try:
        run_from_config(config_path)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 1
    except Exception as e:
        print(f"\nError: {e}")
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
