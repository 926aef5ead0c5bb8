"""
Per-infoset CFR operations.

All functions work on 1-D numpy vectors indexed by the position of an
action in the infoset's legal action tuple:
- regret matching (current strategy from cumulative regrets)
- average strategy (normalized cumulative strategy)
- seeded sampling of an index from a distribution
- invariant checks used by tests and debug runs
"""

import numpy as np


def uniform_strategy(num_actions: int) -> np.ndarray:
    """Uniform distribution over `num_actions` actions."""
    return np.full(num_actions, 1.0 / num_actions, dtype=np.float64)


def regret_match(cumulative_regret: np.ndarray) -> np.ndarray:
    """
    Convert cumulative regrets to a strategy via regret matching.

        positive_regrets = max(0, regrets)
        if sum(positive_regrets) > 0:
            strategy = positive_regrets / sum(positive_regrets)
        else:
            strategy = uniform over actions

    Stored regrets are never clipped; clipping only happens here.

    Args:
        cumulative_regret: Array of shape (num_actions,)

    Returns:
        strategy: Array of shape (num_actions,), a valid probability distribution
    """
    positive_regrets = np.maximum(cumulative_regret, 0.0)
    regret_sum = positive_regrets.sum()

    if regret_sum > 0:
        return positive_regrets / regret_sum
    return uniform_strategy(len(cumulative_regret))


def normalize_strategy_sum(strategy_sum: np.ndarray) -> np.ndarray:
    """
    Average strategy from a cumulative strategy vector.

    Uniform if nothing has been accumulated yet.
    """
    total = strategy_sum.sum()
    if total > 0:
        return strategy_sum / total
    return uniform_strategy(len(strategy_sum))


def sample_index(probs, rng: np.random.Generator) -> int:
    """
    Draw an index from a discrete distribution.

    Consumes exactly one uniform draw from `rng`, so a fixed seed gives a
    fixed sequence of samples. Zero-probability entries are never returned.
    """
    cumulative = np.cumsum(probs)
    total = cumulative[-1]
    if not total > 0:
        raise ValueError(f"Cannot sample from weights {list(probs)}")

    u = rng.random() * total
    idx = int(np.searchsorted(cumulative, u, side='right'))
    if idx >= len(cumulative):
        # Rounding put u on the upper edge: take the last positive entry
        idx = int(np.flatnonzero(np.asarray(probs) > 0)[-1])
    return idx


def check_distribution(probs: np.ndarray, tolerance: float = 1e-9) -> bool:
    """
    Check that `probs` is a probability distribution.

    Returns:
        True if the invariant holds, raises AssertionError otherwise
    """
    assert np.all(probs >= 0.0), f"Negative probability in {probs}"
    total = float(np.sum(probs))
    assert abs(total - 1.0) < tolerance, \
        f"Probabilities sum to {total:.12f}, tolerance = {tolerance}"
    return True


def check_regret_invariant(
    strategy: np.ndarray,
    instant_regret: np.ndarray,
    tolerance: float = 1e-9
) -> bool:
    """
    Check CFR invariant: sum_a sigma[a] * instant_regret[a] ≈ 0.

    This must hold because:
    - instant_regret[a] = w * (v[a] - v)
    - v = sum_a sigma[a] * v[a]
    - Therefore: sum_a sigma[a] * w * (v[a] - v) = w * (v - v) = 0

    Returns:
        True if invariant holds, raises AssertionError otherwise
    """
    sigma_regret_sum = float(np.dot(strategy, instant_regret))
    assert abs(sigma_regret_sum) < tolerance, \
        f"Regret invariant violated: sum(sigma * regret) = {sigma_regret_sum:.12f}, " \
        f"tolerance = {tolerance}"
    return True
