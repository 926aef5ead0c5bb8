"""
Shared fixtures: games that break the Game contract.
"""

import pytest

from tabular_cfr.games.matrix_game import MatrixGame
from tabular_cfr.games.rps import RockPaperScissors


class EmptyActionGame(MatrixGame):
    """A broken game whose decision nodes have no actions."""

    @property
    def name(self):
        return "empty"

    @property
    def actions(self):
        return ()

    def payoff(self, p1_action, p2_action):
        return 0.0


class SharedKeyGame(RockPaperScissors):
    """A broken game where both players share one infoset key."""

    def infoset_key(self, state):
        return "X"


@pytest.fixture
def empty_action_game():
    return EmptyActionGame()


@pytest.fixture
def shared_key_game():
    return SharedKeyGame()
