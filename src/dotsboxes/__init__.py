"""dotsboxes package.

Game rules, a minimax opponent, a session facade, evaluation matches, and
a simple CLI.

Convenience imports are exposed for common workflows.
"""

from .api import available_moves, submit_move
from .game_basics import GameState, is_terminal, new_game, winner
from .session import GameSession
from .solver import choose_automated_move

__all__ = [
    "GameState",
    "GameSession",
    "new_game",
    "submit_move",
    "choose_automated_move",
    "is_terminal",
    "winner",
    "available_moves",
]
