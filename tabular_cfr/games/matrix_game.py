"""
One-shot simultaneous-move games in extensive form.

Player 1 chooses first; player 2 then chooses without observing that
choice, so each player has exactly one information set. There is no
chance node.
"""

from abc import abstractmethod
from typing import Tuple

from .base import Game, Action, Player, NodeKind


class MatrixGame(Game):
    """Base class for symmetric two-player normal-form games."""

    @property
    @abstractmethod
    def actions(self) -> Tuple[Action, ...]:
        """Actions available to both players."""
        pass

    @abstractmethod
    def payoff(self, p1_action: Action, p2_action: Action) -> float:
        """Utility of player 1 (player 2 receives the negation)."""
        pass

    def root(self) -> Tuple[Action, ...]:
        return ()

    def kind(self, state: Tuple[Action, ...]) -> NodeKind:
        return NodeKind.TERMINAL if len(state) == 2 else NodeKind.DECISION

    def acting_player(self, state: Tuple[Action, ...]) -> Player:
        return Player(len(state))

    def legal_actions(self, state: Tuple[Action, ...]) -> Tuple[Action, ...]:
        return self.actions

    def chance_outcomes(self, state):
        raise ValueError(f"{self.name} has no chance nodes")

    def successor(self, state: Tuple[Action, ...], action: Action) -> Tuple[Action, ...]:
        return state + (action,)

    def terminal_utility(self, state: Tuple[Action, ...], player: Player) -> float:
        p1_utility = self.payoff(state[0], state[1])
        return p1_utility if player == Player.PLAYER_1 else -p1_utility

    def infoset_key(self, state: Tuple[Action, ...]) -> str:
        # Player 2 does not see player 1's choice
        return f"P{len(state) + 1}"
