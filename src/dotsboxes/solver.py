"""
Automated opponent: capture-first, then depth-limited minimax with alpha-beta.
Search policy:
- Any move that completes a box right now is taken (first in raster order).
- Otherwise every legal move is scored by a 2-ply minimax from the ai's
  point of view (ai boxes minus player boxes).
- Inside the tree only the first BRANCH_CAP legal moves in raster order are
  expanded at each node; the top level is never truncated.
- A side that completes a box moves again inside the tree too.
- Ties between top-level moves go to the earliest in raster order.
"""
import logging
import math
from typing import AbstractSet, Dict, Optional

from .game_basics import AI, PLAYER, Box, Edge, GameState, legal_moves, total_boxes
from .tactics import completed_boxes, first_capturing_move

SEARCH_DEPTH = 2
BRANCH_CAP = 15


def evaluate(owners: Dict[Box, str]) -> int:
    ai = sum(1 for v in owners.values() if v == AI)
    return ai - (len(owners) - ai)


def minimax(edges: AbstractSet[Edge], owners: Dict[Box, str], size: int, depth: int,
            alpha: float, beta: float, ai_to_move: bool) -> float:
    if depth == 0 or len(owners) == total_boxes(size):
        return evaluate(owners)

    moves = legal_moves(edges, size)[:BRANCH_CAP]
    mover = AI if ai_to_move else PLAYER
    best = -math.inf if ai_to_move else math.inf
    for mv in moves:
        child_edges = edges | {mv}
        done = completed_boxes(child_edges, owners, size)
        child_owners = dict(owners)
        for box in done:
            child_owners[box] = mover
        # the mover keeps the turn after a capture
        child_ai = ai_to_move if done else not ai_to_move
        score = minimax(child_edges, child_owners, size, depth - 1, alpha, beta, child_ai)
        if ai_to_move:
            best = max(best, score)
            alpha = max(alpha, score)
        else:
            best = min(best, score)
            beta = min(beta, score)
        if beta <= alpha:
            break
    return best


def score_moves(state: GameState, depth: int = SEARCH_DEPTH) -> Dict[Edge, float]:
    """Minimax score of every legal move for the ai, in raster order."""
    scores: Dict[Edge, float] = {}
    edges = frozenset(state.edges)
    for mv in legal_moves(edges, state.size):
        child_edges = edges | {mv}
        done = completed_boxes(child_edges, state.owners, state.size)
        child_owners = dict(state.owners)
        for box in done:
            child_owners[box] = AI
        scores[mv] = minimax(child_edges, child_owners, state.size, depth,
                             -math.inf, math.inf, bool(done))
    return scores


def choose_automated_move(state: GameState) -> Optional[Edge]:
    """Pick the ai's next edge, or None when nothing is left to draw."""
    edges = frozenset(state.edges)
    capture = first_capturing_move(edges, state.owners, state.size)
    if capture is not None:
        logging.debug("ai captures with %s", capture)
        return capture

    best_move: Optional[Edge] = None
    best_score = -math.inf
    for mv, score in score_moves(state).items():
        if score > best_score:
            best_score = score
            best_move = mv
    if best_move is None:
        logging.debug("ai has no move available")
    else:
        logging.debug("ai plays %s (score=%s)", best_move, best_score)
    return best_move
