"""
Game definitions layer (Layer 1 - lowest).

This layer defines the game contract and the bundled games.
It may only import from: tabular_cfr.errors
"""

from typing import Callable, Dict

from tabular_cfr.errors import ConfigError
from tabular_cfr.games.base import (
    Game,
    Action,
    Player,
    NodeKind,
    GameTreeStats,
    analyze_tree,
    check_chance_outcomes,
    check_legal_actions,
)
from tabular_cfr.games.kuhn import KuhnPoker
from tabular_cfr.games.leduc import LeducPoker
from tabular_cfr.games.dudo import Dudo
from tabular_cfr.games.rps import RockPaperScissors
from tabular_cfr.games.blotto import ColonelBlotto


GAMES: Dict[str, Callable[..., Game]] = {
    'kuhn': KuhnPoker,
    'leduc': LeducPoker,
    'dudo': Dudo,
    'rps': RockPaperScissors,
    'blotto': ColonelBlotto,
}


def load_game(name: str, **params) -> Game:
    """
    Instantiate a bundled game by its command-line name.

    Args:
        name: One of GAMES
        **params: Constructor parameters (e.g. soldiers/battlefields for blotto)

    Raises:
        ConfigError: if the name is unknown or the parameters are rejected
    """
    try:
        factory = GAMES[name]
    except KeyError:
        raise ConfigError(f"Unknown game {name!r}, expected one of {sorted(GAMES)}") from None

    try:
        return factory(**params)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid parameters for game {name!r}: {e}") from e


__all__ = [
    'Game',
    'Action',
    'Player',
    'NodeKind',
    'GameTreeStats',
    'analyze_tree',
    'check_chance_outcomes',
    'check_legal_actions',
    'KuhnPoker',
    'LeducPoker',
    'Dudo',
    'RockPaperScissors',
    'ColonelBlotto',
    'GAMES',
    'load_game',
]
