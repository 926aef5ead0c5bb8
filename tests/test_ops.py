"""
Tests for per-infoset CFR operations (regret matching, sampling, invariants).

Run with: pytest tests/test_ops.py -v
"""

import pytest
import numpy as np

from tabular_cfr.engine.ops import (
    uniform_strategy,
    regret_match,
    normalize_strategy_sum,
    sample_index,
    check_distribution,
    check_regret_invariant,
)


class TestUniformStrategy:
    """Test uniform strategy creation."""

    def test_shape(self):
        assert uniform_strategy(4).shape == (4,)

    def test_uniform_values(self):
        assert np.allclose(uniform_strategy(3), 1.0 / 3.0)


class TestRegretMatch:
    """Test regret matching."""

    def test_positive_regrets_normalized(self):
        strategy = regret_match(np.array([1.0, -1.0, 3.0]))
        assert np.allclose(strategy, [0.25, 0.0, 0.75])

    def test_no_positive_regret_is_uniform(self):
        strategy = regret_match(np.array([-1.0, 0.0, -5.0]))
        assert np.allclose(strategy, 1.0 / 3.0)

    def test_zero_regret_is_uniform(self):
        assert np.allclose(regret_match(np.zeros(2)), 0.5)

    def test_does_not_modify_regrets(self):
        regrets = np.array([-2.0, 4.0])
        regret_match(regrets)
        assert regrets[0] == -2.0

    def test_result_is_distribution(self):
        rng = np.random.default_rng(0)
        for _ in range(20):
            check_distribution(regret_match(rng.normal(size=5)))


class TestNormalizeStrategySum:
    """Test average strategy extraction."""

    def test_normalizes(self):
        assert np.allclose(normalize_strategy_sum(np.array([1.0, 3.0])), [0.25, 0.75])

    def test_empty_sum_is_uniform(self):
        assert np.allclose(normalize_strategy_sum(np.zeros(4)), 0.25)


class TestSampleIndex:
    """Test seeded sampling."""

    def test_never_samples_zero_probability(self):
        rng = np.random.default_rng(1)
        probs = np.array([0.0, 0.3, 0.0, 0.7, 0.0])
        samples = {sample_index(probs, rng) for _ in range(500)}
        assert samples == {1, 3}

    def test_seed_determinism(self):
        probs = np.array([0.2, 0.5, 0.3])
        first = [sample_index(probs, np.random.default_rng(42)) for _ in range(1)]
        rng_a = np.random.default_rng(7)
        rng_b = np.random.default_rng(7)
        a = [sample_index(probs, rng_a) for _ in range(100)]
        b = [sample_index(probs, rng_b) for _ in range(100)]
        assert a == b
        assert first[0] in (0, 1, 2)

    def test_frequencies(self):
        rng = np.random.default_rng(3)
        counts = np.bincount([sample_index([0.25, 0.75], rng) for _ in range(4000)], minlength=2)
        assert abs(counts[1] / 4000 - 0.75) < 0.05

    def test_no_mass_raises(self):
        with pytest.raises(ValueError):
            sample_index(np.zeros(3), np.random.default_rng(0))


class TestInvariantChecks:
    """Invariant helpers raise AssertionError on violation."""

    def test_check_distribution_rejects_bad_sum(self):
        with pytest.raises(AssertionError):
            check_distribution(np.array([0.5, 0.6]))

    def test_check_distribution_rejects_negative(self):
        with pytest.raises(AssertionError):
            check_distribution(np.array([1.5, -0.5]))

    def test_regret_invariant_holds(self):
        strategy = np.array([0.25, 0.75])
        action_values = np.array([2.0, -1.0])
        value = float(np.dot(strategy, action_values))
        assert check_regret_invariant(strategy, 0.5 * (action_values - value))

    def test_regret_invariant_violated(self):
        with pytest.raises(AssertionError):
            check_regret_invariant(np.array([0.5, 0.5]), np.array([1.0, 1.0]))
