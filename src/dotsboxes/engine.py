"""
Move engine: the only place a live GameState changes.
"""
import logging
from typing import Tuple

from .game_basics import Edge, GameState, is_terminal, is_valid_edge, make_edge, other_side
from .tactics import completed_boxes


def apply_move(state: GameState, edge: Edge, mover: str) -> Tuple[bool, GameState]:
    """Draw ``edge`` for ``mover``.

    Returns ``(accepted, state)``. Malformed, already drawn or post-game
    edges are rejected with the state untouched. Completing one or two
    boxes keeps the turn with ``mover``; otherwise the turn passes.
    """
    if not is_valid_edge(edge, state.size):
        logging.debug("rejected malformed edge %s", edge)
        return False, state
    edge = make_edge(*edge)
    if edge in state.edges or is_terminal(state):
        logging.debug("rejected edge %s (drawn or game over)", edge)
        return False, state

    state.edges.add(edge)
    done = completed_boxes(state.edges, state.owners, state.size)
    for box in done:
        state.owners[box] = mover
    state.scores[mover] += len(done)
    state.last_edge = edge
    state.turn = mover if done else other_side(mover)
    return True, state
