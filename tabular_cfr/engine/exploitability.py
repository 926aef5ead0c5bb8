"""
Best-response and exploitability evaluation.

Full-tree (never sampled) evaluation of a strategy profile:
- reach probabilities of the best-responder's information sets
- the best-response value of each player against the other's policy
- expected values when both players follow the policy
- exploitability (NashConv): sum over players of the best-response gain

The best responder picks, per information set, the action maximising
the reach-weighted value over all states of that information set; the
other player's decision nodes are treated exactly like chance nodes.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Hashable, Optional, Tuple

import numpy as np

from tabular_cfr.errors import GameContractError
from tabular_cfr.games.base import Game, NodeKind, Player, State
from tabular_cfr.engine.ops import uniform_strategy
from tabular_cfr.engine.store import InfosetStore

logger = logging.getLogger(__name__)

PLAYERS = (Player.PLAYER_1, Player.PLAYER_2)

# Exploitability below -tolerance means the game is not zero-sum
NEGATIVE_TOLERANCE = 1e-9


class Policy(ABC):
    """A behavioural strategy for both players, looked up by infoset key."""

    @abstractmethod
    def action_probabilities(self, key: Hashable, num_actions: int) -> np.ndarray:
        """Distribution over the legal actions of infoset `key`."""
        pass


class UniformPolicy(Policy):
    """Every infoset plays uniformly at random."""

    def action_probabilities(self, key: Hashable, num_actions: int) -> np.ndarray:
        return uniform_strategy(num_actions)


class TabularPolicy(Policy):
    """Policy backed by a dict; infosets missing from it play uniformly."""

    def __init__(self, table: Dict[Hashable, np.ndarray]):
        self.table = table

    def action_probabilities(self, key: Hashable, num_actions: int) -> np.ndarray:
        probs = self.table.get(key)
        if probs is None:
            return uniform_strategy(num_actions)
        return np.asarray(probs, dtype=np.float64)


class StorePolicy(Policy):
    """
    Average strategy read straight from an InfosetStore.

    Infosets a sampling solver has never visited play uniformly. Reading
    never creates entries.
    """

    def __init__(self, store: InfosetStore):
        self.store = store

    def action_probabilities(self, key: Hashable, num_actions: int) -> np.ndarray:
        if key in self.store:
            return self.store.average_strategy(key)
        return uniform_strategy(num_actions)


@dataclass
class BestResponse:
    """Best response of one player against a fixed policy."""
    player: Player
    value: float
    # Infoset key -> chosen action
    actions: Dict[Hashable, Hashable]


@dataclass
class ExploitabilityReport:
    """Best-response values, on-policy values and their combined gap."""
    best_response_values: Tuple[float, float]
    game_values: Tuple[float, float]
    exploitability: float

    @property
    def best_response_gains(self) -> Tuple[float, float]:
        return tuple(br - v for br, v in zip(self.best_response_values, self.game_values))


def infoset_reach_probabilities(
    game: Game,
    policy: Policy,
    br_player: Player
) -> Dict[Hashable, Dict[State, float]]:
    """
    Reach probability of every state in the best-responder's infosets.

    The reach only includes chance and the opponent's policy; the best
    responder's own actions count as probability 1.

    Returns:
        infoset key -> {state: reach probability}
    """
    reach_probabilities: Dict[Hashable, Dict[State, float]] = {}

    def visit(state: State, reach: float) -> None:
        kind = game.kind(state)
        if kind == NodeKind.TERMINAL:
            return

        if kind == NodeKind.CHANCE:
            for outcome, prob in game.chance_outcomes(state):
                visit(game.successor(state, outcome), reach * prob)
            return

        actions = game.legal_actions(state)
        key = game.infoset_key(state)
        if game.acting_player(state) == br_player:
            states = reach_probabilities.setdefault(key, {})
            states[state] = states.get(state, 0.0) + reach
            for action in actions:
                visit(game.successor(state, action), reach)
        else:
            probs = policy.action_probabilities(key, len(actions))
            for action, prob in zip(actions, probs):
                visit(game.successor(state, action), reach * prob)

    visit(game.root(), 1.0)
    return reach_probabilities


def best_response_value(game: Game, policy: Policy, br_player: Player) -> BestResponse:
    """
    Compute `br_player`'s best response against the other player's policy.

    Args:
        game: Game to evaluate
        policy: Policy followed at the opponent's infosets
        br_player: Player who best-responds

    Returns:
        BestResponse with the value at the root and the chosen action per infoset
    """
    reach_probabilities = infoset_reach_probabilities(game, policy, br_player)
    best_actions: Dict[Hashable, int] = {}
    values: Dict[State, float] = {}

    def best_action_index(key: Hashable, actions) -> int:
        if key not in best_actions:
            action_values = np.zeros(len(actions), dtype=np.float64)
            for sibling, reach in reach_probabilities.get(key, {}).items():
                for a_idx, action in enumerate(actions):
                    action_values[a_idx] += reach * value(game.successor(sibling, action))
            best_actions[key] = int(np.argmax(action_values))
        return best_actions[key]

    def value(state: State) -> float:
        cached = values.get(state)
        if cached is not None:
            return cached

        kind = game.kind(state)
        if kind == NodeKind.TERMINAL:
            result = game.terminal_utility(state, br_player)
        elif kind == NodeKind.CHANCE:
            result = 0.0
            for outcome, prob in game.chance_outcomes(state):
                if prob > 0.0:
                    result += prob * value(game.successor(state, outcome))
        else:
            actions = game.legal_actions(state)
            key = game.infoset_key(state)
            if game.acting_player(state) == br_player:
                result = value(game.successor(state, actions[best_action_index(key, actions)]))
            else:
                probs = policy.action_probabilities(key, len(actions))
                result = 0.0
                for action, prob in zip(actions, probs):
                    if prob > 0.0:
                        result += prob * value(game.successor(state, action))

        values[state] = result
        return result

    root_value = value(game.root())

    chosen: Dict[Hashable, Hashable] = {}
    for key, states in reach_probabilities.items():
        actions = game.legal_actions(next(iter(states)))
        chosen[key] = actions[best_action_index(key, actions)]

    return BestResponse(player=br_player, value=root_value, actions=chosen)


def expected_values(game: Game, policy: Policy) -> np.ndarray:
    """
    Expected utility of each player when both follow `policy`.

    Returns:
        Array of shape (2,)
    """
    def visit(state: State) -> np.ndarray:
        kind = game.kind(state)
        if kind == NodeKind.TERMINAL:
            return np.array([game.terminal_utility(state, p) for p in PLAYERS])

        if kind == NodeKind.CHANCE:
            outcomes = [(o, p) for o, p in game.chance_outcomes(state)]
        else:
            actions = game.legal_actions(state)
            probs = policy.action_probabilities(game.infoset_key(state), len(actions))
            outcomes = zip(actions, probs)

        node_values = np.zeros(2, dtype=np.float64)
        for outcome, prob in outcomes:
            if prob > 0.0:
                node_values += prob * visit(game.successor(state, outcome))
        return node_values

    return visit(game.root())


def exploitability(game: Game, policy: Policy) -> ExploitabilityReport:
    """
    Compute the exploitability of a strategy profile.

        exploitability = sum_p (BR value of p against policy - value of p under policy)

    For a zero-sum game the on-policy values cancel and this is the sum of
    the two best-response values. It is 0 exactly at a Nash equilibrium.

    Raises:
        GameContractError: if the result is negative beyond round-off,
            which only happens for games that are not zero-sum
    """
    br_values = tuple(best_response_value(game, policy, p).value for p in PLAYERS)
    game_values = tuple(float(v) for v in expected_values(game, policy))

    total = sum(br - v for br, v in zip(br_values, game_values))
    logger.debug(
        "br_values=%s game_values=%s exploitability=%.9f", br_values, game_values, total
    )

    if total < -NEGATIVE_TOLERANCE:
        raise GameContractError(
            f"{game.name}: negative exploitability {total:.9f}; "
            f"best responses {br_values}, values {game_values}"
        )

    return ExploitabilityReport(
        best_response_values=br_values,
        game_values=game_values,
        exploitability=max(total, 0.0)
    )


def compute_exploitability(game: Game, policy: Optional[Policy] = None) -> float:
    """
    Exploitability of a policy (uniform random when omitted).

    Helper function for external use.
    """
    return exploitability(game, policy or UniformPolicy()).exploitability
