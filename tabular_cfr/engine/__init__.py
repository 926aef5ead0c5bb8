"""
Tabular engine layer (Layer 2).

This layer provides the information-set store, per-infoset CFR operations
and the full-tree best-response evaluator.
It may only import from: tabular_cfr.errors, tabular_cfr.games
"""

from tabular_cfr.engine.ops import (
    uniform_strategy,
    regret_match,
    normalize_strategy_sum,
    sample_index,
    check_distribution,
    check_regret_invariant,
)

from tabular_cfr.engine.store import (
    InfosetData,
    InfosetStore,
)

from tabular_cfr.engine.exploitability import (
    Policy,
    UniformPolicy,
    TabularPolicy,
    StorePolicy,
    BestResponse,
    ExploitabilityReport,
    infoset_reach_probabilities,
    best_response_value,
    expected_values,
    exploitability,
    compute_exploitability,
)

__all__ = [
    'uniform_strategy',
    'regret_match',
    'normalize_strategy_sum',
    'sample_index',
    'check_distribution',
    'check_regret_invariant',
    'InfosetData',
    'InfosetStore',
    'Policy',
    'UniformPolicy',
    'TabularPolicy',
    'StorePolicy',
    'BestResponse',
    'ExploitabilityReport',
    'infoset_reach_probabilities',
    'best_response_value',
    'expected_values',
    'exploitability',
    'compute_exploitability',
]
