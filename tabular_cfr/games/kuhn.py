"""
Kuhn Poker implementation.

Kuhn Poker is a simplified poker game:
- 3-card deck: Jack (J=0), Queen (Q=1), King (K=2)
- Each player antes 1 chip
- Each player is dealt one card
- Player 1 acts first: Pass or Bet
- Betting round follows standard poker rules
- Higher card wins at showdown

Game tree has 6 deals, 30 terminals, 12 infosets.
The game value for player 1 is -1/18 at every Nash equilibrium.
"""

from dataclasses import dataclass
from itertools import permutations
from typing import Optional, Tuple

from .base import Game, Action, Player, NodeKind


# Card values
JACK = 0
QUEEN = 1
KING = 2
CARD_NAMES = {JACK: 'J', QUEEN: 'Q', KING: 'K'}

# Actions
PASS = Action(id=0, name='p')  # Check, or fold when facing a bet
BET = Action(id=1, name='b')   # Bet 1 chip, or call when facing a bet
ACTIONS = (PASS, BET)

TERMINAL_HISTORIES = frozenset(['pp', 'bp', 'bb', 'pbp', 'pbb'])

NASH_GAME_VALUE = -1.0 / 18.0


@dataclass(frozen=True)
class KuhnState:
    """Dealt cards (None before the deal) and the betting history."""
    cards: Optional[Tuple[int, int]]
    history: str = ''


class KuhnPoker(Game):
    """Kuhn Poker game implementation."""

    @property
    def name(self) -> str:
        return "kuhn_poker"

    def root(self) -> KuhnState:
        return KuhnState(cards=None)

    def kind(self, state: KuhnState) -> NodeKind:
        if state.cards is None:
            return NodeKind.CHANCE
        if state.history in TERMINAL_HISTORIES:
            return NodeKind.TERMINAL
        return NodeKind.DECISION

    def acting_player(self, state: KuhnState) -> Player:
        if state.cards is None:
            return Player.CHANCE
        return Player(len(state.history) % 2)

    def legal_actions(self, state: KuhnState) -> Tuple[Action, ...]:
        return ACTIONS

    def chance_outcomes(self, state: KuhnState):
        # All possible card deals (6 permutations of 2 cards from 3)
        deals = list(permutations([JACK, QUEEN, KING], 2))
        prob = 1.0 / len(deals)
        return [(deal, prob) for deal in deals]

    def successor(self, state: KuhnState, action) -> KuhnState:
        if state.cards is None:
            return KuhnState(cards=tuple(action))
        return KuhnState(cards=state.cards, history=state.history + action.name)

    def terminal_utility(self, state: KuhnState, player: Player) -> float:
        """
        Net chips won by `player`.

        Fold: the folding player loses the ante.
        Showdown: higher card wins 1 (check-check) or 2 (called bet).
        """
        history = state.history
        if history == 'bp':
            p1_utility = 1.0   # P2 folded
        elif history == 'pbp':
            p1_utility = -1.0  # P1 folded
        else:
            stake = 1.0 if history == 'pp' else 2.0
            p1_utility = stake if state.cards[0] > state.cards[1] else -stake

        return p1_utility if player == Player.PLAYER_1 else -p1_utility

    def infoset_key(self, state: KuhnState) -> str:
        """
        Information set key for the acting player.

        Player knows: their own card + action history
        Player doesn't know: opponent's card
        """
        player = self.acting_player(state)
        my_card = state.cards[player.value]
        return f"{CARD_NAMES[my_card]}:{state.history}"
