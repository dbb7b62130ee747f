"""
Box completion and immediate captures.
Notes:
- Completion is always judged against the edge set *after* the move.
- Every unowned box is scanned, not only the two that touch the new edge.
"""
from typing import AbstractSet, Dict, List, Optional

from .game_basics import Box, Edge, all_boxes, box_borders, legal_moves


def completed_boxes(edges_after: AbstractSet[Edge], owners: Dict[Box, str], size: int) -> List[Box]:
    done: List[Box] = []
    for box in all_boxes(size):
        if box in owners:
            continue
        if all(e in edges_after for e in box_borders(box)):
            done.append(box)
    return done


def boxes_completed_by(edge: Edge, edges: AbstractSet[Edge], owners: Dict[Box, str], size: int) -> List[Box]:
    if edge in edges:
        return []
    return completed_boxes(edges | {edge}, owners, size)


def capturing_moves(edges: AbstractSet[Edge], owners: Dict[Box, str], size: int) -> List[Edge]:
    return [e for e in legal_moves(edges, size) if boxes_completed_by(e, edges, owners, size)]


def first_capturing_move(edges: AbstractSet[Edge], owners: Dict[Box, str], size: int) -> Optional[Edge]:
    for e in legal_moves(edges, size):
        if boxes_completed_by(e, edges, owners, size):
            return e
    return None
