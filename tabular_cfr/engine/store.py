"""
Information-set store.

Maps an information-set key to its cumulative regret and cumulative
strategy vectors. Entries are created lazily, the first time a traversal
reaches the information set, so the key space is never materialized up
front. One store belongs to exactly one solver run.
"""

from dataclasses import dataclass, field
from typing import Dict, Hashable, Iterator, Optional, Tuple

import numpy as np

from tabular_cfr.errors import GameContractError
from tabular_cfr.games.base import Player
from tabular_cfr.engine.ops import regret_match, normalize_strategy_sum


@dataclass(eq=False)
class InfosetData:
    """Accumulators of one information set."""
    key: Hashable
    player: Player
    actions: Tuple
    regret_sum: np.ndarray = None
    strategy_sum: np.ndarray = None
    _index: Dict = field(default=None, repr=False)

    def __post_init__(self):
        num_actions = len(self.actions)
        if self.regret_sum is None:
            self.regret_sum = np.zeros(num_actions, dtype=np.float64)
        if self.strategy_sum is None:
            self.strategy_sum = np.zeros(num_actions, dtype=np.float64)
        self._index = {action: i for i, action in enumerate(self.actions)}

    @property
    def num_actions(self) -> int:
        return len(self.actions)

    def action_index(self, action) -> int:
        """Position of a legal action in this infoset's vectors."""
        try:
            return self._index[action]
        except KeyError:
            raise GameContractError(
                f"Action {action!r} is not legal at infoset {self.key!r} "
                f"(legal: {self.actions})"
            ) from None

    def current_strategy(self) -> np.ndarray:
        """Regret-matching strategy, recomputed from the regrets."""
        return regret_match(self.regret_sum)

    def average_strategy(self) -> np.ndarray:
        """Time-averaged strategy (uniform if nothing accumulated)."""
        return normalize_strategy_sum(self.strategy_sum)


class InfosetStore:
    """
    Regret and strategy-sum tables keyed by information set.

    Accumulation is always `+=` on existing entries; nothing is ever
    overwritten or clipped.
    """

    def __init__(self):
        self._infosets: Dict[Hashable, InfosetData] = {}

    def __len__(self) -> int:
        return len(self._infosets)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._infosets

    def __getitem__(self, key: Hashable) -> InfosetData:
        return self._infosets[key]

    def keys(self):
        return self._infosets.keys()

    def items(self) -> Iterator[Tuple[Hashable, InfosetData]]:
        return iter(self._infosets.items())

    def get_or_create(self, key: Hashable, player: Player, actions: Tuple) -> InfosetData:
        """
        Return the entry for `key`, creating zero vectors on first access.

        Raises:
            GameContractError: if the key was already seen with another
                acting player or another legal action set
        """
        data = self._infosets.get(key)
        if data is None:
            data = InfosetData(key=key, player=player, actions=tuple(actions))
            self._infosets[key] = data
            return data

        if data.player != player or data.actions != tuple(actions):
            raise GameContractError(
                f"Infoset key collision at {key!r}: first seen with player "
                f"{data.player!r} actions {data.actions}, now player {player!r} "
                f"actions {tuple(actions)}"
            )
        return data

    def _lookup(self, key: Hashable, player: Optional[Player], actions: Optional[Tuple]) -> InfosetData:
        if player is None or actions is None:
            return self._infosets[key]
        return self.get_or_create(key, player, actions)

    def get_regrets(
        self,
        key: Hashable,
        player: Optional[Player] = None,
        actions: Optional[Tuple] = None
    ) -> np.ndarray:
        """
        Cumulative regret vector of an infoset.

        With `player` and `actions` a missing entry is created with zero
        vectors; without them an unknown key raises KeyError.
        """
        return self._lookup(key, player, actions).regret_sum

    def get_strategy_sum(
        self,
        key: Hashable,
        player: Optional[Player] = None,
        actions: Optional[Tuple] = None
    ) -> np.ndarray:
        """Cumulative strategy vector of an infoset, created like get_regrets."""
        return self._lookup(key, player, actions).strategy_sum

    def accumulate_regret(self, key: Hashable, action, delta: float) -> None:
        data = self._infosets[key]
        data.regret_sum[data.action_index(action)] += delta

    def accumulate_strategy_sum(self, key: Hashable, action, weight: float) -> None:
        data = self._infosets[key]
        data.strategy_sum[data.action_index(action)] += weight

    def accumulate_regrets(self, key: Hashable, deltas: np.ndarray) -> None:
        """Add one regret delta per legal action."""
        self._infosets[key].regret_sum += deltas

    def accumulate_strategy_sums(self, key: Hashable, weights: np.ndarray) -> None:
        """Add one strategy weight per legal action."""
        self._infosets[key].strategy_sum += weights

    def average_strategy(self, key: Hashable) -> np.ndarray:
        """Average strategy of an existing infoset."""
        return self._infosets[key].average_strategy()

    def average_policy(self) -> Dict[Hashable, np.ndarray]:
        """Average strategy of every infoset seen so far."""
        return {key: data.average_strategy() for key, data in self._infosets.items()}

    def snapshot(self) -> Dict[Hashable, Tuple[np.ndarray, np.ndarray]]:
        """Copies of (regret_sum, strategy_sum) for every infoset."""
        return {
            key: (data.regret_sum.copy(), data.strategy_sum.copy())
            for key, data in self._infosets.items()
        }
