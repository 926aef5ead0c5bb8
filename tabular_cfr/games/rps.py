"""
Rock-Paper-Scissors as an extensive-form game.

The unique Nash equilibrium is uniform play for both players, with game
value 0.
"""

from typing import Tuple

from .base import Action
from .matrix_game import MatrixGame


ROCK = Action(id=0, name='R')
PAPER = Action(id=1, name='P')
SCISSORS = Action(id=2, name='S')
ACTIONS = (ROCK, PAPER, SCISSORS)

# Each action beats the one listed for it
BEATS = {ROCK: SCISSORS, PAPER: ROCK, SCISSORS: PAPER}


class RockPaperScissors(MatrixGame):
    """Rock-Paper-Scissors: win +1, loss -1, tie 0."""

    @property
    def name(self) -> str:
        return "rock_paper_scissors"

    @property
    def actions(self) -> Tuple[Action, ...]:
        return ACTIONS

    def payoff(self, p1_action: Action, p2_action: Action) -> float:
        if p1_action == p2_action:
            return 0.0
        return 1.0 if BEATS[p1_action] == p2_action else -1.0
