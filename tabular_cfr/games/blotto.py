"""
Colonel Blotto.

Each player splits `soldiers` identical soldiers over `battlefields`
battlefields. A battlefield is won by whoever sent more soldiers to it;
the player who wins more battlefields wins the game (+1 / -1 / 0).
"""

from typing import List, Tuple

from .base import Action
from .matrix_game import MatrixGame


def list_assignments(soldiers: int, battlefields: int) -> List[Tuple[int, ...]]:
    """All ordered ways to place `soldiers` on `battlefields` battlefields."""
    if battlefields == 1:
        return [(soldiers,)]
    assignments = []
    for s in range(soldiers + 1):
        for preceding in list_assignments(soldiers - s, battlefields - 1):
            assignments.append(preceding + (s,))
    return assignments


class ColonelBlotto(MatrixGame):
    """Colonel Blotto with configurable soldiers and battlefields."""

    def __init__(self, soldiers: int = 5, battlefields: int = 3):
        if soldiers < 0 or battlefields < 1:
            raise ValueError(
                f"Invalid Blotto size: soldiers={soldiers}, battlefields={battlefields}"
            )
        self.soldiers = soldiers
        self.battlefields = battlefields
        self._assignments = list_assignments(soldiers, battlefields)
        self._actions = tuple(
            Action(id=i, name='(' + ','.join(str(n) for n in assignment) + ')')
            for i, assignment in enumerate(self._assignments)
        )

    @property
    def name(self) -> str:
        return f"blotto_{self.soldiers}_{self.battlefields}"

    @property
    def actions(self) -> Tuple[Action, ...]:
        return self._actions

    def assignment(self, action: Action) -> Tuple[int, ...]:
        """Soldiers per battlefield for an action."""
        return self._assignments[action.id]

    def payoff(self, p1_action: Action, p2_action: Action) -> float:
        won = 0
        for mine, theirs in zip(self.assignment(p1_action), self.assignment(p2_action)):
            if mine > theirs:
                won += 1
            elif mine < theirs:
                won -= 1
        if won > 0:
            return 1.0
        if won < 0:
            return -1.0
        return 0.0
