"""
Abstract base classes for game definitions.

This module defines the interface that all games must implement.

A game is a pure, read-only description of an extensive-form game tree.
States are immutable hashable values owned by the game; the solvers never
look inside them and only talk to the game through the methods below.
The kind of a node (terminal, chance or player decision) is a tag returned
by `Game.kind`, not a subclass, so one traversal handles every game.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Hashable, Sequence, Tuple

from tabular_cfr.errors import GameContractError


# Tolerance for chance distributions summing to one
CHANCE_TOLERANCE = 1e-6

State = Any


class Player(IntEnum):
    """Player identifiers."""
    CHANCE = -1
    PLAYER_1 = 0
    PLAYER_2 = 1

    @property
    def opponent(self) -> 'Player':
        """The other player of a two-player game."""
        if self == Player.CHANCE:
            raise ValueError("Chance has no opponent")
        return Player(1 - self.value)


class NodeKind(IntEnum):
    """Tag for the three node variants of an extensive-form game."""
    TERMINAL = 0
    CHANCE = 1
    DECISION = 2


@dataclass(frozen=True)
class Action:
    """An action that can be taken at a decision node."""
    id: int
    name: str

    def __str__(self) -> str:
        return self.name


class Game(ABC):
    """Abstract base class for extensive-form games."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Name of the game."""
        pass

    @property
    def num_players(self) -> int:
        """Number of players (excluding chance)."""
        return 2

    @abstractmethod
    def root(self) -> State:
        """Return the initial state of the game."""
        pass

    @abstractmethod
    def kind(self, state: State) -> NodeKind:
        """Return which node variant `state` is."""
        pass

    @abstractmethod
    def acting_player(self, state: State) -> Player:
        """Player to act at `state` (Player.CHANCE at chance nodes)."""
        pass

    @abstractmethod
    def legal_actions(self, state: State) -> Tuple[Action, ...]:
        """
        Legal actions at a decision node.

        The order must only depend on the information set, since the
        solvers index per-infoset vectors by action position.
        """
        pass

    @abstractmethod
    def successor(self, state: State, action: Hashable) -> State:
        """Return the state reached by taking `action` (or chance outcome)."""
        pass

    @abstractmethod
    def chance_outcomes(self, state: State) -> Sequence[Tuple[Hashable, float]]:
        """Return (outcome, probability) pairs at a chance node."""
        pass

    @abstractmethod
    def terminal_utility(self, state: State, player: Player) -> float:
        """Utility of a terminal state for `player`."""
        pass

    @abstractmethod
    def infoset_key(self, state: State) -> Hashable:
        """
        Return a key identifying the information set of the acting player.

        Two decision states share a key iff the acting player cannot
        distinguish them.
        """
        pass

    def describe_action(self, action: Hashable) -> str:
        """Human-readable action label used in strategy reports."""
        return str(action)


def check_legal_actions(game: Game, state: State, actions: Sequence) -> None:
    """Raise GameContractError if a decision node has no legal action."""
    if len(actions) == 0:
        raise GameContractError(
            f"{game.name}: empty legal action set at infoset "
            f"{game.infoset_key(state)!r} (state {state!r})"
        )


def check_chance_outcomes(
    game: Game,
    state: State,
    outcomes: Sequence[Tuple[Hashable, float]],
    tolerance: float = CHANCE_TOLERANCE
) -> None:
    """Raise GameContractError if a chance distribution is not a distribution."""
    if len(outcomes) == 0:
        raise GameContractError(f"{game.name}: chance node without outcomes (state {state!r})")

    total = 0.0
    for outcome, prob in outcomes:
        if prob < 0.0:
            raise GameContractError(
                f"{game.name}: negative chance probability {prob} for outcome "
                f"{outcome!r} (state {state!r})"
            )
        total += prob

    if abs(total - 1.0) > tolerance:
        raise GameContractError(
            f"{game.name}: chance probabilities sum to {total:.9f}, "
            f"tolerance = {tolerance} (state {state!r})"
        )


@dataclass
class GameTreeStats:
    """Summary of a fully expanded game tree."""
    num_nodes: int
    num_terminals: int
    num_chance_nodes: int
    num_decision_nodes: int
    max_depth: int
    # Infoset key -> (acting player, legal actions)
    infosets: Dict[Hashable, Tuple[Player, Tuple]]

    @property
    def num_infosets(self) -> int:
        return len(self.infosets)


def analyze_tree(game: Game, zero_sum_tolerance: float = 1e-9) -> GameTreeStats:
    """
    Walk the complete tree of a (small) game and validate its contract.

    Checks chance distributions, non-empty action sets, that every
    information set key always comes with the same player and actions,
    and that terminal utilities sum to zero.

    Raises:
        GameContractError: on the first violation found
    """
    counts = {NodeKind.TERMINAL: 0, NodeKind.CHANCE: 0, NodeKind.DECISION: 0}
    infosets: Dict[Hashable, Tuple[Player, Tuple]] = {}
    max_depth = 0

    def visit(state: State, depth: int) -> None:
        nonlocal max_depth
        max_depth = max(max_depth, depth)
        kind = game.kind(state)
        counts[kind] += 1

        if kind == NodeKind.TERMINAL:
            total = sum(game.terminal_utility(state, p) for p in (Player.PLAYER_1, Player.PLAYER_2))
            if abs(total) > zero_sum_tolerance:
                raise GameContractError(
                    f"{game.name}: terminal utilities sum to {total} (state {state!r})"
                )
            return

        if kind == NodeKind.CHANCE:
            outcomes = game.chance_outcomes(state)
            check_chance_outcomes(game, state, outcomes)
            for outcome, _ in outcomes:
                visit(game.successor(state, outcome), depth + 1)
            return

        actions = tuple(game.legal_actions(state))
        check_legal_actions(game, state, actions)
        key = game.infoset_key(state)
        player = game.acting_player(state)
        known = infosets.setdefault(key, (player, actions))
        if known != (player, actions):
            raise GameContractError(
                f"{game.name}: infoset key {key!r} shared by distinguishable nodes "
                f"({known} vs {(player, actions)})"
            )
        for action in actions:
            visit(game.successor(state, action), depth + 1)

    visit(game.root(), 0)

    return GameTreeStats(
        num_nodes=sum(counts.values()),
        num_terminals=counts[NodeKind.TERMINAL],
        num_chance_nodes=counts[NodeKind.CHANCE],
        num_decision_nodes=counts[NodeKind.DECISION],
        max_depth=max_depth,
        infosets=infosets
    )
