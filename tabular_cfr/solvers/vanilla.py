"""
Vanilla CFR (Counterfactual Regret Minimization) Solver.

Implements the classic full-tree CFR recursion over a tabular store.
"""

import numpy as np

from tabular_cfr.games.base import NodeKind, Player, State, check_chance_outcomes
from tabular_cfr.engine.ops import regret_match
from tabular_cfr.solvers.base import (
    Solver,
    ROOT_REACH,
    REACH_CHANCE,
    scale_reach,
)


class VanillaCFR(Solver):
    """
    Vanilla CFR solver.

    Every iteration walks the complete game tree once per player.
    """

    name = 'cfr'

    def traverse(self, state: State, updating_player: Player) -> float:
        return self.cfr(state, ROOT_REACH, updating_player)

    def cfr(self, state: State, reach, updating_player: Player) -> float:
        """
        Counterfactual value of `state` for `updating_player`.

        Regret update at the updating player's infosets:
            regret[I,a] += pi_{-i}(h) * (v(h,a) - v(h))
        Average strategy update:
            cumulative[I,a] += pi_i(h) * sigma(I,a)

        Args:
            state: Current state
            reach: (player 1, player 2, chance) reach probabilities of `state`
            updating_player: Player whose regrets are updated

        Returns:
            Expected utility of `state` for `updating_player` under the
            current strategy profile
        """
        game = self.game
        kind = game.kind(state)

        if kind == NodeKind.TERMINAL:
            return game.terminal_utility(state, updating_player)

        if kind == NodeKind.CHANCE:
            outcomes = game.chance_outcomes(state)
            check_chance_outcomes(game, state, outcomes)
            value = 0.0
            for outcome, prob in outcomes:
                if prob > 0.0:
                    child_reach = scale_reach(reach, REACH_CHANCE, prob)
                    value += prob * self.cfr(game.successor(state, outcome), child_reach, updating_player)
            return value

        infoset = self._infoset(state)
        player = infoset.player
        strategy = regret_match(infoset.regret_sum)

        action_values = np.zeros(infoset.num_actions, dtype=np.float64)
        value = 0.0
        for a_idx, action in enumerate(infoset.actions):
            prob = strategy[a_idx]
            if player != updating_player and prob == 0.0:
                continue
            child_reach = scale_reach(reach, int(player), prob)
            action_values[a_idx] = self.cfr(game.successor(state, action), child_reach, updating_player)
            value += prob * action_values[a_idx]

        if player == updating_player:
            self._update(infoset, reach, strategy, action_values, value)

        return value
