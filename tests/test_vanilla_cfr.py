"""
Tests for Vanilla CFR solver.

Run with: pytest tests/test_vanilla_cfr.py -v
"""

import pytest
import numpy as np

from tabular_cfr.errors import GameContractError
from tabular_cfr.games.kuhn import KuhnPoker, NASH_GAME_VALUE
from tabular_cfr.games.leduc import LeducPoker
from tabular_cfr.games.rps import RockPaperScissors
from tabular_cfr.engine.exploitability import expected_values
from tabular_cfr.solvers.base import ROOT_REACH
from tabular_cfr.solvers.vanilla import VanillaCFR


class TestVanillaCFRBasic:
    """Basic tests for VanillaCFR solver."""

    def test_initialization(self):
        """Solver should initialize without error."""
        solver = VanillaCFR(KuhnPoker())
        assert solver.iterations == 0
        assert len(solver.store) == 0

    def test_single_iteration(self):
        """One iteration discovers every Kuhn infoset."""
        solver = VanillaCFR(KuhnPoker())
        solver.iterate(1)
        assert solver.iterations == 1
        assert len(solver.store) == 12

    def test_multiple_iterations(self):
        solver = VanillaCFR(KuhnPoker())
        solver.iterate(10)
        assert solver.iterations == 10

    def test_solve(self):
        """solve() should run iterations."""
        solver = VanillaCFR(KuhnPoker())
        solver.solve(iterations=100)
        assert solver.iterations == 100

    def test_broken_chance_is_fatal(self):
        class BadChanceKuhn(KuhnPoker):
            def chance_outcomes(self, state):
                return [(deal, 0.1) for deal, _ in super().chance_outcomes(state)]

        with pytest.raises(GameContractError):
            VanillaCFR(BadChanceKuhn()).iterate(1)

    def test_empty_action_set_is_fatal(self, empty_action_game):
        with pytest.raises(GameContractError, match="empty legal action set at infoset 'P1'"):
            VanillaCFR(empty_action_game).iterate(1)

    def test_key_collision_is_fatal(self, shared_key_game):
        with pytest.raises(GameContractError, match="collision"):
            VanillaCFR(shared_key_game).iterate(1)

    def test_invariant_checks_pass(self):
        """Regret and distribution checks hold on every update."""
        solver = VanillaCFR(LeducPoker())
        solver.iterate(2, check_invariants=True)
        assert solver.iterations == 2
        assert solver.check_invariants is False

    def test_invariant_check_rejects_inconsistent_value(self):
        solver = VanillaCFR(KuhnPoker())
        solver.iterate(1)
        solver.check_invariants = True
        with pytest.raises(AssertionError):
            # value should be 0.5 under this strategy
            solver._update(solver.store["J:"], ROOT_REACH, np.array([0.5, 0.5]), np.array([1.0, 0.0]), 0.0)


class TestVanillaCFRStrategy:
    """Tests for strategy computation."""

    @pytest.fixture
    def solver(self):
        solver = VanillaCFR(KuhnPoker())
        solver.solve(iterations=100)
        return solver

    def test_average_strategy_covers_all_infosets(self, solver):
        assert len(solver.average_strategy) == 12

    def test_strategy_is_valid_distribution(self, solver):
        """Strategy should be valid probability distribution per infoset."""
        for key, probs in solver.average_strategy.items():
            assert np.all(probs >= 0), f"Negative probability at infoset {key}"
            assert np.isclose(probs.sum(), 1.0), f"Probabilities don't sum to 1 at infoset {key}"

    def test_current_strategy(self, solver):
        for key in solver.store.keys():
            strategy = solver.current_strategy(key)
            assert len(strategy) == 2
            assert np.isclose(strategy.sum(), 1.0)

    def test_get_infoset_name(self, solver):
        assert solver.get_infoset_name("J:") == "P1 [J:]"
        assert solver.get_infoset_name("Q:b") == "P2 [Q:b]"

    def test_strategy_sums_never_decrease(self):
        solver = VanillaCFR(KuhnPoker())
        solver.iterate(1)
        previous = solver.store.snapshot()
        for _ in range(20):
            solver.iterate(1)
            current = solver.store.snapshot()
            for key, (_, strategy_sum) in previous.items():
                assert np.all(current[key][1] >= strategy_sum)
            previous = current


class TestVanillaCFRConvergence:
    """Tests for CFR convergence properties."""

    def test_rps_converges_to_uniform(self):
        """From skewed regrets, RPS returns to the uniform equilibrium."""
        solver = VanillaCFR(RockPaperScissors())
        solver.iterate(1)
        solver.store.accumulate_regrets("P1", np.array([5.0, 0.0, 0.0]))
        assert np.array_equal(solver.current_strategy("P1"), [1.0, 0.0, 0.0])

        solver.iterate(20000)
        for key, probs in solver.average_strategy.items():
            assert np.allclose(probs, 1.0 / 3.0, atol=0.01), f"{key}: {probs}"
        assert solver.exploitability() < 0.01

    def test_exploitability_decreases(self):
        """Exploitability should decrease over iterations."""
        solver = VanillaCFR(KuhnPoker())

        exploitabilities = []
        for target_iters in [10, 100, 500]:
            solver.iterate(target_iters - solver.iterations)
            exploitabilities.append(solver.exploitability())

        assert exploitabilities[-1] < exploitabilities[0], \
            f"Exploitability didn't decrease: {exploitabilities}"

    def test_converges_to_low_exploitability(self):
        """Should converge to near-zero exploitability."""
        solver = VanillaCFR(KuhnPoker())
        solver.solve(iterations=1000)

        expl = solver.exploitability()
        assert expl < 0.1, f"Exploitability {expl} too high after 1000 iterations"

    def test_kuhn_game_value(self):
        """Average strategy is worth -1/18 to player 1."""
        game = KuhnPoker()
        solver = VanillaCFR(game)
        solver.solve(iterations=2000)

        values = expected_values(game, solver.policy())
        assert abs(values[0] + values[1]) < 1e-9
        assert abs(values[0] - NASH_GAME_VALUE) < 0.01

    @pytest.mark.slow
    def test_high_iteration_convergence(self):
        """Long run should converge to very low exploitability."""
        solver = VanillaCFR(KuhnPoker())
        solver.solve(iterations=10000)

        expl = solver.exploitability()
        assert expl < 0.01, f"Exploitability {expl} too high after 10000 iterations"

    @pytest.mark.slow
    def test_leduc_exploitability_decreases(self):
        solver = VanillaCFR(LeducPoker())
        solver.iterate(5)
        early = solver.exploitability()
        solver.iterate(95)
        assert solver.exploitability() < early
        assert len(solver.store) == 288
