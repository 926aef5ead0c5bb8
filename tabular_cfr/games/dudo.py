"""
Dudo implementation (one die per player).

Dudo is a bluffing dice game:
- Each player rolls one six-sided die in secret
- Player 1 opens with a claim "count x face" about both dice together
- Each claim must be strictly stronger than the previous one; instead of
  claiming, a player may call "dudo" to challenge the last claim
- Ones are wild: they count toward every face. A claim about ones is worth
  twice its count when claims are ranked
- On a challenge the dice are revealed. If the claimed count is met the
  challenger loses, otherwise the claimant loses

With a single die each, the loser of the first challenge is out of dice,
so every game ends at the first "dudo".
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .base import Game, Action, Player, NodeKind


NUM_FACES = 6
DICE_PER_PLAYER = 1
TOTAL_DICE = 2 * DICE_PER_PLAYER

# Face index 0 is the wild "1"
WILD = 0


def normalized_count(count: int, rank: int) -> int:
    """Claims about ones count double when claims are ranked."""
    return count * 2 if rank == WILD else count


def _build_claims() -> Dict[Tuple[int, int], Action]:
    claims = {}
    for count in range(1, TOTAL_DICE + 1):
        for rank in range(NUM_FACES):
            claims[(count, rank)] = Action(id=len(claims), name=f"{count}x{rank + 1}")
    return claims


# (count, rank) -> Action, and the reverse lookup
CLAIMS = _build_claims()
CLAIM_VALUES = {action: value for value, action in CLAIMS.items()}
DUDO = Action(id=len(CLAIMS), name='dudo')


@dataclass(frozen=True)
class DudoState:
    """Dice faces (None before the roll) and the claims made so far."""
    rolls: Optional[Tuple[int, int]] = None
    claims: Tuple[Action, ...] = ()
    challenged: bool = False


def count_dice(face: int, rank: int) -> int:
    """Number of dice in a one-die roll that count toward `rank`."""
    if rank == WILD:
        return int(face == WILD)
    return int(face == WILD or face == rank)


class Dudo(Game):
    """Two-player, one-die Dudo."""

    @property
    def name(self) -> str:
        return "dudo"

    def root(self) -> DudoState:
        return DudoState()

    def kind(self, state: DudoState) -> NodeKind:
        if state.rolls is None:
            return NodeKind.CHANCE
        if state.challenged:
            return NodeKind.TERMINAL
        return NodeKind.DECISION

    def acting_player(self, state: DudoState) -> Player:
        if state.rolls is None:
            return Player.CHANCE
        return Player(len(state.claims) % 2)

    def legal_actions(self, state: DudoState) -> Tuple[Action, ...]:
        actions = []
        if state.claims:
            actions.append(DUDO)

        if state.claims:
            last_count, last_rank = CLAIM_VALUES[state.claims[-1]]
            rank_start = last_rank + 1
            last_normalized = normalized_count(last_count, last_rank)
        else:
            rank_start = 0
            last_normalized = 0

        # Same count, higher face
        if 0 < last_normalized <= TOTAL_DICE:
            for rank in range(rank_start, NUM_FACES):
                actions.append(CLAIMS[(last_normalized, rank)])

        # Ones, whose count is doubled when compared
        for count in range(last_normalized // 2 + 1, TOTAL_DICE + 1):
            actions.append(CLAIMS[(count, WILD)])

        # Higher count, any other face
        for rank in range(1, NUM_FACES):
            for count in range(last_normalized + 1, TOTAL_DICE + 1):
                actions.append(CLAIMS[(count, rank)])

        return tuple(actions)

    def chance_outcomes(self, state: DudoState):
        prob = 1.0 / (NUM_FACES * NUM_FACES)
        return [((p1, p2), prob) for p1 in range(NUM_FACES) for p2 in range(NUM_FACES)]

    def successor(self, state: DudoState, action) -> DudoState:
        if state.rolls is None:
            return DudoState(rolls=tuple(action))
        if action == DUDO:
            return DudoState(rolls=state.rolls, claims=state.claims, challenged=True)
        return DudoState(rolls=state.rolls, claims=state.claims + (action,))

    def loser(self, state: DudoState) -> Player:
        """Player who loses the challenge ending a terminal state."""
        challenger = Player(len(state.claims) % 2)
        count, rank = CLAIM_VALUES[state.claims[-1]]
        actual = sum(count_dice(face, rank) for face in state.rolls)
        # A met (or exceeded) claim means the challenge was wrong
        return challenger if actual >= count else challenger.opponent

    def terminal_utility(self, state: DudoState, player: Player) -> float:
        return -1.0 if self.loser(state) == player else 1.0

    def infoset_key(self, state: DudoState) -> str:
        """Own die face (1-6) and the public claim history."""
        player = self.acting_player(state)
        face = state.rolls[player.value] + 1
        return f"{face}:{','.join(a.name for a in state.claims)}"
