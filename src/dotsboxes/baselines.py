"""
Baseline opponents for the player's seat when evaluating the ai.
- random: any legal edge.
- greedy: a capturing edge when one exists, otherwise random.
"""
import random
from typing import Callable, Dict, Optional

from .game_basics import Edge, GameState, legal_moves
from .tactics import capturing_moves

Policy = Callable[[GameState, random.Random], Optional[Edge]]


def random_policy(state: GameState, rng: random.Random) -> Optional[Edge]:
    moves = legal_moves(state.edges, state.size)
    if not moves:
        return None
    return rng.choice(moves)


def greedy_policy(state: GameState, rng: random.Random) -> Optional[Edge]:
    captures = capturing_moves(state.edges, state.owners, state.size)
    if captures:
        return rng.choice(captures)
    return random_policy(state, rng)


POLICIES: Dict[str, Policy] = {
    "random": random_policy,
    "greedy": greedy_policy,
}
