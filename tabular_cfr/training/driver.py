"""
Iteration driver.

Runs a solver until an iteration count or a wall-clock budget is
reached, evaluates the average strategy every `eval_interval`
iterations and appends one row per evaluation to the convergence log.
The stop condition is only checked between iterations.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from tabular_cfr.games import load_game
from tabular_cfr.games.base import Game
from tabular_cfr.engine.store import InfosetStore
from tabular_cfr.engine.exploitability import ExploitabilityReport
from tabular_cfr.solvers import Solver, make_solver
from tabular_cfr.training.config import TrainingConfig
from tabular_cfr.training.convergence_log import ConvergenceLogWriter, ConvergenceRecord

logger = logging.getLogger(__name__)


@dataclass
class TrainingResult:
    """Outcome of a training run."""
    solver: Solver
    elapsed_seconds: float
    records: List[ConvergenceRecord] = field(default_factory=list)

    @property
    def iterations(self) -> int:
        return self.solver.iterations

    @property
    def final_exploitability(self) -> Optional[float]:
        if not self.records:
            return None
        return self.records[-1].exploitability


def format_strategy(store: InfosetStore, game: Game) -> str:
    """
    Average strategy of every infoset, one line each, sorted by key.

        P1 [K:]: p=0.333, b=0.667
    """
    lines = []
    for key in sorted(store.keys(), key=str):
        data = store[key]
        probs = data.average_strategy()
        action_strs = [
            f"{game.describe_action(action)}={probs[a_idx]:.3f}"
            for a_idx, action in enumerate(data.actions)
        ]
        lines.append(f"P{int(data.player) + 1} [{key}]: {', '.join(action_strs)}")
    return "\n".join(lines)


def run_training(
    solver: Solver,
    iterations: Optional[int] = None,
    duration: Optional[float] = None,
    eval_interval: int = 100,
    log_writer: Optional[ConvergenceLogWriter] = None,
    clock: Callable[[], float] = time.monotonic
) -> TrainingResult:
    """
    Iterate `solver` until a stop condition holds.

    Args:
        solver: Solver to run (may already have iterations behind it)
        iterations: Stop after this many iterations of this run
        duration: Stop once this many seconds have elapsed
        eval_interval: Evaluate every this many iterations
        log_writer: Optional convergence log to append to
        clock: Time source in seconds

    Returns:
        TrainingResult with one record per evaluation point; the last
        iteration is always evaluated
    """
    if iterations is None and duration is None:
        raise ValueError("Need an iteration count or a duration")

    result = TrainingResult(solver=solver, elapsed_seconds=0.0)
    start = clock()
    first_iteration = solver.iterations
    last_evaluated = None

    def evaluate() -> None:
        nonlocal last_evaluated
        elapsed = clock() - start
        report: ExploitabilityReport = solver.evaluate()
        record = ConvergenceRecord(
            iteration=solver.iterations,
            wall_clock_seconds=elapsed,
            exploitability=report.exploitability,
            br_value_p1=report.best_response_values[0],
            br_value_p2=report.best_response_values[1],
        )
        if log_writer is not None:
            log_writer.write(record)
        result.records.append(record)
        last_evaluated = solver.iterations
        logger.info(
            "iteration=%d elapsed=%.2fs exploitability=%.6f game_value=%.6f",
            record.iteration, elapsed, report.exploitability, report.game_values[0]
        )

    while True:
        done = solver.iterations - first_iteration
        if iterations is not None and done >= iterations:
            break
        if duration is not None and done > 0 and clock() - start >= duration:
            break

        solver.iterate(1)
        if solver.iterations % eval_interval == 0:
            evaluate()

    if last_evaluated != solver.iterations:
        evaluate()

    result.elapsed_seconds = clock() - start
    return result


def train(config: TrainingConfig, clock: Callable[[], float] = time.monotonic) -> TrainingResult:
    """
    Run a training session described by `config`.

    Raises:
        ConfigError: on an invalid configuration, before any traversal
        OSError: if the convergence log cannot be written
    """
    config.validate()
    game = load_game(config.game, **config.game_params)
    solver = make_solver(config.solver, game, seed=config.seed)

    logger.info(
        "Training %s on %s (iterations=%s, duration=%s, eval_interval=%d, seed=%d)",
        config.solver, game.name, config.iterations, config.duration,
        config.eval_interval, config.seed
    )

    log_writer = ConvergenceLogWriter(config.log_path) if config.log_path else None
    try:
        result = run_training(
            solver,
            iterations=config.iterations,
            duration=config.duration,
            eval_interval=config.eval_interval,
            log_writer=log_writer,
            clock=clock
        )
    finally:
        if log_writer is not None:
            log_writer.close()

    logger.info(
        "Finished %d iterations in %.2fs, %d infosets, exploitability %.6f",
        result.iterations, result.elapsed_seconds, len(solver.store),
        result.final_exploitability
    )
    if config.print_strategy:
        logger.info("Average strategy:\n%s", format_strategy(solver.store, game))

    return result
