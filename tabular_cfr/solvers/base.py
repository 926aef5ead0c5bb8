"""
Common interface of the tabular CFR solvers.

A solver owns one InfosetStore and fills it by repeated traversals of
the game tree. Each iteration runs one traversal per player, player 1
first, so the second traversal already sees the first one's regrets.
"""

from abc import ABC, abstractmethod
from typing import Dict, Hashable, Tuple

import numpy as np

from tabular_cfr.games.base import Game, Player, State, check_legal_actions
from tabular_cfr.engine.ops import check_distribution, check_regret_invariant
from tabular_cfr.engine.store import InfosetStore, InfosetData
from tabular_cfr.engine.exploitability import (
    StorePolicy,
    ExploitabilityReport,
    exploitability as evaluate_exploitability,
)


UPDATE_ORDER = (Player.PLAYER_1, Player.PLAYER_2)

# Reach tuple layout: (player 1, player 2, chance)
REACH_CHANCE = 2
ROOT_REACH = (1.0, 1.0, 1.0)


def opponent_reach(reach: Tuple[float, float, float], player: Player) -> float:
    """Product of every reach contribution except `player`'s own."""
    result = 1.0
    for idx, r in enumerate(reach):
        if idx != int(player):
            result *= r
    return result


def scale_reach(
    reach: Tuple[float, float, float],
    idx: int,
    factor: float
) -> Tuple[float, float, float]:
    """Copy of `reach` with entry `idx` multiplied by `factor`."""
    scaled = list(reach)
    scaled[idx] *= factor
    return tuple(scaled)


class Solver(ABC):
    """Base class for CFR solvers over a Game."""

    name = 'solver'

    def __init__(self, game: Game):
        """
        Initialize the solver.

        Args:
            game: Game to solve
        """
        self.game = game
        self.store = InfosetStore()

        # Iteration counter
        self.iterations = 0
        self.check_invariants = False

    def iterate(self, num_iterations: int = 1, check_invariants: bool = False) -> None:
        """
        Run CFR iterations.

        Args:
            num_iterations: Number of iterations to run
            check_invariants: If True, run invariant checks (slower but useful for debugging)
        """
        self.check_invariants = check_invariants
        try:
            for _ in range(num_iterations):
                self._single_iteration()
                self.iterations += 1
        finally:
            self.check_invariants = False

    def _single_iteration(self) -> None:
        root = self.game.root()
        for player in UPDATE_ORDER:
            self.traverse(root, player)

    @abstractmethod
    def traverse(self, state: State, updating_player: Player) -> float:
        """Run one traversal from `state` for `updating_player`."""
        pass

    def solve(self, iterations: int = 1000) -> None:
        """
        Solve the game by running CFR iterations.

        Args:
            iterations: Number of iterations to run
        """
        self.iterate(iterations)

    def _infoset(self, state: State) -> InfosetData:
        """
        Look up (or lazily create) the store entry of a decision node.

        Raises:
            GameContractError: if the node has no legal action or its key
                collides with a node of another player or action set
        """
        actions = tuple(self.game.legal_actions(state))
        check_legal_actions(self.game, state, actions)
        return self.store.get_or_create(
            self.game.infoset_key(state),
            self.game.acting_player(state),
            actions
        )

    def _update(
        self,
        infoset: InfosetData,
        reach: Tuple[float, float, float],
        strategy: np.ndarray,
        action_values: np.ndarray,
        value: float
    ) -> None:
        """Add the instant regrets and the reach-weighted strategy of one node."""
        player = infoset.player
        instant_regret = opponent_reach(reach, player) * (action_values - value)

        # Check regret invariant: sum_a sigma[I,a] * regret[I,a] = 0
        if self.check_invariants:
            check_distribution(strategy)
            check_regret_invariant(strategy, instant_regret, tolerance=1e-6)

        self.store.accumulate_regrets(infoset.key, instant_regret)
        self.store.accumulate_strategy_sums(infoset.key, reach[int(player)] * strategy)

    def current_strategy(self, key: Hashable) -> np.ndarray:
        """Regret-matching strategy of an infoset."""
        return self.store[key].current_strategy()

    @property
    def average_strategy(self) -> Dict[Hashable, np.ndarray]:
        """Get average strategy (converges to Nash equilibrium)."""
        return self.store.average_policy()

    def policy(self) -> StorePolicy:
        """Average strategy as a Policy for the evaluator."""
        return StorePolicy(self.store)

    def evaluate(self) -> ExploitabilityReport:
        """Full-tree best-response evaluation of the average strategy."""
        return evaluate_exploitability(self.game, self.policy())

    def exploitability(self) -> float:
        """
        Compute exploitability of the average strategy.

        Exploitability measures how far the strategy is from Nash equilibrium.
        Returns the sum of both players' best-response gains.
        """
        return self.evaluate().exploitability

    def get_infoset_name(self, key: Hashable) -> str:
        """Get human-readable name for an infoset."""
        data = self.store[key]
        return f"P{int(data.player) + 1} [{key}]"
