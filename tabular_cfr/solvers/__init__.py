"""
CFR solver algorithms layer (Layer 3).

This layer implements the CFR variants (Vanilla, external-sampling MCCFR).
It may import from: tabular_cfr.errors, tabular_cfr.games, tabular_cfr.engine
"""

from typing import Dict, Type

from tabular_cfr.errors import ConfigError
from tabular_cfr.games.base import Game
from tabular_cfr.solvers.base import Solver
from tabular_cfr.solvers.vanilla import VanillaCFR
from tabular_cfr.solvers.mccfr import ExternalSamplingMCCFR, DEFAULT_SEED


SOLVERS: Dict[str, Type[Solver]] = {
    VanillaCFR.name: VanillaCFR,
    ExternalSamplingMCCFR.name: ExternalSamplingMCCFR,
}


def make_solver(name: str, game: Game, seed: int = DEFAULT_SEED) -> Solver:
    """
    Build a solver by its command-line name.

    The seed is only used by sampling solvers.

    Raises:
        ConfigError: if the name is unknown
    """
    if name not in SOLVERS:
        raise ConfigError(f"Unknown solver {name!r}, expected one of {sorted(SOLVERS)}")
    if name == ExternalSamplingMCCFR.name:
        return ExternalSamplingMCCFR(game, seed=seed)
    return SOLVERS[name](game)


__all__ = ['Solver', 'VanillaCFR', 'ExternalSamplingMCCFR', 'SOLVERS', 'make_solver']
