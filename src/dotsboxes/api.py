"""Entry points used by front ends (CLI, GUIs, tests)."""
from typing import List, Tuple

from .engine import apply_move
from .game_basics import Edge, GameState, is_terminal, legal_moves, new_game, winner
from .solver import choose_automated_move


def submit_move(state: GameState, edge: Edge, mover: str) -> Tuple[bool, GameState]:
    return apply_move(state, edge, mover)


def available_moves(state: GameState) -> List[Edge]:
    return legal_moves(state.edges, state.size)


__all__ = [
    "new_game",
    "submit_move",
    "choose_automated_move",
    "is_terminal",
    "winner",
    "available_moves",
]
