"""
Tests for the best-response / exploitability evaluator.

Reference values for the uniform Kuhn policy, computed by hand:
- player 1 best response: 1/2
- player 2 best response: 5/12
- NashConv: 11/12

Run with: pytest tests/test_exploitability.py -v
"""

import pytest
import numpy as np

from tabular_cfr.errors import GameContractError
from tabular_cfr.games.base import Player
from tabular_cfr.games.kuhn import KuhnPoker, PASS, BET
from tabular_cfr.games.rps import RockPaperScissors, PAPER
from tabular_cfr.engine.store import InfosetStore
from tabular_cfr.engine.exploitability import (
    UniformPolicy,
    TabularPolicy,
    StorePolicy,
    infoset_reach_probabilities,
    best_response_value,
    expected_values,
    exploitability,
    compute_exploitability,
)


class TestUniformKuhn:
    """Evaluator values for the uniform Kuhn policy."""

    @pytest.fixture
    def game(self):
        return KuhnPoker()

    def test_best_response_values(self, game):
        br1 = best_response_value(game, UniformPolicy(), Player.PLAYER_1)
        br2 = best_response_value(game, UniformPolicy(), Player.PLAYER_2)
        assert br1.value == pytest.approx(0.5)
        assert br2.value == pytest.approx(5.0 / 12.0)

    def test_exploitability(self, game):
        report = exploitability(game, UniformPolicy())
        assert report.exploitability == pytest.approx(11.0 / 12.0)
        assert sum(report.game_values) == pytest.approx(0.0)
        assert sum(report.best_response_gains) == pytest.approx(report.exploitability)

    def test_best_response_actions(self, game):
        br1 = best_response_value(game, UniformPolicy(), Player.PLAYER_1)
        # Betting the Jack earns -1/2, passing it -1
        assert br1.actions["J:"] == BET
        assert br1.actions["J:pb"] == PASS
        assert br1.actions["K:pb"] == BET
        assert len(br1.actions) == 6

    def test_infoset_reach_probabilities(self, game):
        reach = infoset_reach_probabilities(game, UniformPolicy(), Player.PLAYER_2)
        # P2 holds the Jack (1/3) and P1 bet (1/2)
        assert len(reach["J:b"]) == 2
        assert sum(reach["J:b"].values()) == pytest.approx(1.0 / 6.0)
        assert len(reach) == 6

    def test_compute_exploitability_defaults_to_uniform(self, game):
        assert compute_exploitability(game) == pytest.approx(11.0 / 12.0)


class TestRockPaperScissors:
    """Evaluator values on Rock-Paper-Scissors."""

    @pytest.fixture
    def game(self):
        return RockPaperScissors()

    def test_uniform_is_unexploitable(self, game):
        report = exploitability(game, UniformPolicy())
        assert report.exploitability == pytest.approx(0.0, abs=1e-12)
        assert report.best_response_values == pytest.approx((0.0, 0.0), abs=1e-12)

    def test_pure_rock_is_exploited(self, game):
        policy = TabularPolicy({"P1": np.array([1.0, 0.0, 0.0])})
        report = exploitability(game, policy)
        assert report.best_response_values[1] == pytest.approx(1.0)
        assert report.exploitability == pytest.approx(1.0)
        assert best_response_value(game, policy, Player.PLAYER_2).actions["P2"] == PAPER

    def test_expected_values(self, game):
        policy = TabularPolicy({
            "P1": np.array([1.0, 0.0, 0.0]),
            "P2": np.array([0.0, 1.0, 0.0]),
        })
        values = expected_values(game, policy)
        assert np.allclose(values, [-1.0, 1.0])


class TestStorePolicy:
    """Average strategy of a store as a policy."""

    def test_unvisited_infosets_are_uniform(self):
        policy = StorePolicy(InfosetStore())
        assert np.allclose(policy.action_probabilities("K:", 2), [0.5, 0.5])

    def test_reads_average_strategy(self):
        store = InfosetStore()
        store.get_or_create("K:", Player.PLAYER_1, (PASS, BET))
        store.accumulate_strategy_sum("K:", BET, 4.0)
        policy = StorePolicy(store)
        assert np.allclose(policy.action_probabilities("K:", 2), [0.0, 1.0])

    def test_evaluation_does_not_create_entries(self):
        store = InfosetStore()
        exploitability(KuhnPoker(), StorePolicy(store))
        assert len(store) == 0


class NonZeroSumRPS(RockPaperScissors):
    """Both players are paid 1 for a tie and 0 otherwise."""

    def terminal_utility(self, state, player):
        return 1.0 - abs(self.payoff(state[0], state[1]))


class TestEvaluatorGuards:
    """Gains are measured against on-policy values, so they never go negative."""

    def test_no_gain_when_already_best(self):
        policy = TabularPolicy({
            "P1": np.array([1.0, 0.0, 0.0]),
            "P2": np.array([1.0, 0.0, 0.0]),
        })
        report = exploitability(NonZeroSumRPS(), policy)
        assert report.game_values == pytest.approx((1.0, 1.0))
        assert report.exploitability == pytest.approx(0.0)

    def test_gains_non_negative_in_general_sum_game(self):
        report = exploitability(NonZeroSumRPS(), UniformPolicy())
        assert all(gain >= -1e-12 for gain in report.best_response_gains)
        # Every action ties a uniform opponent one time in three
        assert report.game_values == pytest.approx((1.0 / 3.0, 1.0 / 3.0))
        assert report.exploitability == pytest.approx(0.0, abs=1e-12)

    def test_game_contract_error_type(self):
        assert issubclass(GameContractError, RuntimeError)
