"""
Command line entry point.

    tabular-cfr train --game kuhn --iterations 10000 cfr
    tabular-cfr train --game leduc --duration 10m --log-path logs/leduc/cfr.csv cfr
    tabular-cfr plot --logs-dir logs --output-dir graphs
"""

import argparse
import logging
import sys
from typing import List, Optional

from tabular_cfr.errors import ConfigError
from tabular_cfr.games import GAMES
from tabular_cfr.solvers import SOLVERS
from tabular_cfr.training.config import (
    DEFAULT_EVAL_INTERVAL,
    DEFAULT_SEED,
    TrainingConfig,
    parse_duration,
)
from tabular_cfr.training.driver import train
from tabular_cfr.training.logging_setup import setup_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_IO_ERROR = 1
EXIT_CONFIG_ERROR = 2


def positive_int(text: str) -> int:
    value = int(text)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {text!r}")
    return value


def game_param(text: str):
    """Parse a NAME=INT game parameter."""
    name, sep, value = text.partition('=')
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {text!r}")
    try:
        return name, int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer value, got {text!r}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='tabular-cfr',
        description="Train CFR solvers on small two-player zero-sum games"
    )
    parser.add_argument(
        '--log-level',
        default='INFO',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help="Logging level"
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    train_parser = subparsers.add_parser('train', help="Run a solver and log its exploitability")
    train_parser.add_argument('--game', required=True, choices=sorted(GAMES), help="Game to solve")
    stop = train_parser.add_mutually_exclusive_group()
    stop.add_argument('--iterations', type=positive_int, help="Number of iterations to run")
    stop.add_argument(
        '--duration',
        help="Wall-clock budget, e.g. 30s, 10m, 1h30m (a bare number is seconds)"
    )
    train_parser.add_argument(
        '--eval-interval',
        type=positive_int,
        default=DEFAULT_EVAL_INTERVAL,
        help="Evaluate exploitability every N iterations"
    )
    train_parser.add_argument('--log-path', help="CSV file to append convergence records to")
    train_parser.add_argument('--seed', type=int, default=DEFAULT_SEED, help="Seed of sampling solvers")
    train_parser.add_argument(
        '--game-param',
        type=game_param,
        action='append',
        default=[],
        metavar='NAME=VALUE',
        help="Game parameter, e.g. soldiers=5 for blotto (repeatable)"
    )
    train_parser.add_argument(
        '--print-strategy',
        action='store_true',
        help="Log the final average strategy"
    )
    train_parser.add_argument('solver', choices=sorted(SOLVERS), help="Solver to run")

    plot_parser = subparsers.add_parser('plot', help="Plot convergence logs to SVG")
    plot_parser.add_argument('--logs-dir', default='logs', help="Directory of per-run log directories")
    plot_parser.add_argument('--output-dir', default='graphs', help="Directory to write SVG files to")

    return parser


def config_from_args(args: argparse.Namespace) -> TrainingConfig:
    duration = parse_duration(args.duration) if args.duration is not None else None
    return TrainingConfig(
        game=args.game,
        solver=args.solver,
        iterations=args.iterations,
        duration=duration,
        eval_interval=args.eval_interval,
        log_path=args.log_path,
        seed=args.seed,
        game_params=dict(args.game_param),
        print_strategy=args.print_strategy,
    )


def run_train(args: argparse.Namespace) -> int:
    try:
        config = config_from_args(args).validate()
        train(config)
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        return EXIT_CONFIG_ERROR
    except OSError as e:
        logger.error("I/O error: %s", e)
        return EXIT_IO_ERROR
    return EXIT_OK


def run_plot(args: argparse.Namespace) -> int:
    # Imported here so training does not need a plotting backend
    from tabular_cfr.training.plotting import plot_all

    try:
        written = plot_all(args.logs_dir, args.output_dir)
    except OSError as e:
        logger.error("I/O error: %s", e)
        return EXIT_IO_ERROR
    logger.info("Wrote %d chart(s) to %s", len(written), args.output_dir)
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    if args.command == 'train':
        return run_train(args)
    return run_plot(args)


if __name__ == '__main__':
    sys.exit(main())
