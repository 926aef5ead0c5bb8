"""
Leduc Poker implementation.

Leduc Poker is a simplified poker game larger than Kuhn:
- 6-card deck: 2 Jacks (J), 2 Queens (Q), 2 Kings (K)
- Each player antes 1 chip
- Each player is dealt one private card, the community card is drawn
  at the same chance node but only revealed for round 2
- Round 1: betting round (raise = 2 chips, max 2 raises)
- Round 2: betting round (raise = 4 chips, max 2 raises)
- Showdown: pair (private matches community) beats high card,
  equal ranks split the pot

Player 1 opens both rounds. A round ends when player 2 checks behind or a
raise is called.
"""

from collections import Counter
from dataclasses import dataclass
from itertools import permutations
from typing import Optional, Tuple

from .base import Game, Action, Player, NodeKind


# Card values
JACK = 0
QUEEN = 1
KING = 2
CARD_NAMES = {JACK: 'J', QUEEN: 'Q', KING: 'K'}
DECK = (JACK, JACK, QUEEN, QUEEN, KING, KING)

# Betting actions, in legal-action order
CHECK = Action(id=0, name='k')
RAISE = Action(id=1, name='r')
CALL = Action(id=2, name='c')
FOLD = Action(id=3, name='f')

# Game constants
ANTE = 1
RAISE_AMOUNTS = (2, 4)
MAX_RAISES = 2

# Rounds
PREFLOP = 0
FLOP = 1
SHOWDOWN = 2
FOLDED = 3


@dataclass(frozen=True)
class LeducState:
    """Full (perfect-information) Leduc state."""
    hole_cards: Optional[Tuple[int, int]] = None
    community_card: Optional[int] = None
    round: int = PREFLOP
    next_player: int = 0
    bets: Tuple[int, int] = (ANTE, ANTE)
    raise_count: int = 0
    history: str = ''
    folder: Optional[int] = None


def hand_strength(hole_card: int, community_card: int) -> Tuple[int, int, int]:
    """Comparable showdown strength: (is pair, higher rank, lower rank)."""
    high, low = max(hole_card, community_card), min(hole_card, community_card)
    return (int(hole_card == community_card), high, low)


class LeducPoker(Game):
    """Leduc Poker game implementation."""

    @property
    def name(self) -> str:
        return "leduc_poker"

    def root(self) -> LeducState:
        return LeducState()

    def kind(self, state: LeducState) -> NodeKind:
        if state.hole_cards is None:
            return NodeKind.CHANCE
        if state.round in (SHOWDOWN, FOLDED):
            return NodeKind.TERMINAL
        return NodeKind.DECISION

    def acting_player(self, state: LeducState) -> Player:
        if state.hole_cards is None:
            return Player.CHANCE
        return Player(state.next_player)

    def legal_actions(self, state: LeducState) -> Tuple[Action, ...]:
        p = state.next_player
        o = 1 - p
        facing_bet = state.bets[p] < state.bets[o]

        actions = []
        if not facing_bet:
            actions.append(CHECK)
        if state.raise_count < MAX_RAISES:
            actions.append(RAISE)
        if facing_bet:
            actions.append(CALL)
            actions.append(FOLD)
        return tuple(actions)

    def chance_outcomes(self, state: LeducState):
        """
        Deal (p1 card, p2 card, community card).

        The 120 ordered draws from the 6-card deck collapse to the distinct
        rank triples, weighted by how many draws produce them.
        """
        draws = Counter(permutations(DECK, 3))
        total = sum(draws.values())
        return [(deal, count / total) for deal, count in sorted(draws.items())]

    def successor(self, state: LeducState, action) -> LeducState:
        if state.hole_cards is None:
            p1_card, p2_card, community = action
            return LeducState(hole_cards=(p1_card, p2_card), community_card=community)

        p = state.next_player
        o = 1 - p
        bets = list(state.bets)
        raise_count = state.raise_count
        history = state.history + action.name
        go_to_next = False

        if action == CHECK:
            # Player 2 checking behind closes the round
            go_to_next = p == 1
        elif action == RAISE:
            raise_count += 1
            bets[p] = bets[o] + RAISE_AMOUNTS[state.round]
        elif action == CALL:
            bets[p] = bets[o]
            go_to_next = True
        elif action == FOLD:
            return LeducState(
                hole_cards=state.hole_cards,
                community_card=state.community_card,
                round=FOLDED,
                next_player=p,
                bets=tuple(bets),
                raise_count=raise_count,
                history=history,
                folder=p
            )
        else:
            raise ValueError(f"Unknown Leduc action: {action!r}")

        if go_to_next:
            next_round = state.round + 1
            if next_round == FLOP:
                history += '/'
            return LeducState(
                hole_cards=state.hole_cards,
                community_card=state.community_card,
                round=next_round,
                next_player=0,
                bets=tuple(bets),
                raise_count=0,
                history=history
            )

        return LeducState(
            hole_cards=state.hole_cards,
            community_card=state.community_card,
            round=state.round,
            next_player=o,
            bets=tuple(bets),
            raise_count=raise_count,
            history=history
        )

    def terminal_utility(self, state: LeducState, player: Player) -> float:
        """The winner collects the loser's contribution; ties split."""
        if state.round == FOLDED:
            loser = state.folder
        else:
            p1_strength = hand_strength(state.hole_cards[0], state.community_card)
            p2_strength = hand_strength(state.hole_cards[1], state.community_card)
            if p1_strength == p2_strength:
                return 0.0
            loser = 1 if p1_strength > p2_strength else 0

        stake = float(state.bets[loser])
        return -stake if player.value == loser else stake

    def infoset_key(self, state: LeducState) -> str:
        """
        Information set key for the acting player.

        Player knows: their private card, community card (round 2 only),
        betting history ('/' separates the rounds)
        Player doesn't know: opponent's private card
        """
        my_card = CARD_NAMES[state.hole_cards[state.next_player]]
        if state.round == FLOP:
            my_card += CARD_NAMES[state.community_card]
        return f"{my_card}:{state.history}"
