"""
External-sampling Monte Carlo CFR.

Chance nodes and the other player's nodes sample a single outcome; the
updating player's nodes expand every action. Sampling is driven by one
seeded numpy Generator owned by the solver, so a given seed and
iteration count always produce the same tables.
"""

import numpy as np

from tabular_cfr.games.base import NodeKind, Player, State, check_chance_outcomes
from tabular_cfr.engine.ops import regret_match, sample_index
from tabular_cfr.solvers.base import Solver, ROOT_REACH, scale_reach


DEFAULT_SEED = 42


class ExternalSamplingMCCFR(Solver):
    """
    External-sampling MCCFR solver.

    Sampled branches do not scale the reach, so the sampled values enter
    the regret update unweighted; in expectation this matches vanilla CFR.
    """

    name = 'mccfr-external-sampling'

    def __init__(self, game, seed: int = DEFAULT_SEED):
        """
        Initialize the solver.

        Args:
            game: Game to solve
            seed: Seed of the sampling generator
        """
        super().__init__(game)
        self.seed = seed
        self.rng = np.random.default_rng(seed)

    def traverse(self, state: State, updating_player: Player) -> float:
        return self.sample(state, ROOT_REACH, updating_player)

    def sample(self, state: State, reach, updating_player: Player) -> float:
        """
        Sampled counterfactual value of `state` for `updating_player`.

        Args:
            state: Current state
            reach: (player 1, player 2, chance) reach probabilities; only the
                updating player's entry ever changes
            updating_player: Player whose regrets are updated

        Returns:
            Sampled utility of `state` for `updating_player`
        """
        game = self.game
        kind = game.kind(state)

        if kind == NodeKind.TERMINAL:
            return game.terminal_utility(state, updating_player)

        if kind == NodeKind.CHANCE:
            outcomes = game.chance_outcomes(state)
            check_chance_outcomes(game, state, outcomes)
            idx = sample_index([prob for _, prob in outcomes], self.rng)
            return self.sample(game.successor(state, outcomes[idx][0]), reach, updating_player)

        infoset = self._infoset(state)
        player = infoset.player
        strategy = regret_match(infoset.regret_sum)

        if player != updating_player:
            action = infoset.actions[sample_index(strategy, self.rng)]
            return self.sample(game.successor(state, action), reach, updating_player)

        action_values = np.zeros(infoset.num_actions, dtype=np.float64)
        for a_idx, action in enumerate(infoset.actions):
            child_reach = scale_reach(reach, int(player), strategy[a_idx])
            action_values[a_idx] = self.sample(game.successor(state, action), child_reach, updating_player)
        value = float(np.dot(strategy, action_values))

        self._update(infoset, reach, strategy, action_values, value)

        return value
