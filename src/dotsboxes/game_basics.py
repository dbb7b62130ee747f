"""
Game basics: grid geometry, edge identity, game state and rule queries.
Notes:
- A dot is (row, col) on an N x N grid; a box is named by its top-left dot.
- An edge is an unordered pair of adjacent dots, stored sorted so that
  (a, b) and (b, a) compare equal.
- Raster order: for each row, for each column, the horizontal edge leaving
  the dot comes before the vertical one. Search depends on this order.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import AbstractSet, Dict, List, Optional, Tuple

Dot = Tuple[int, int]
Edge = Tuple[Dot, Dot]
Box = Tuple[int, int]

PLAYER = "player"
AI = "ai"
TIE = "tie"
SIDES = (PLAYER, AI)

DEFAULT_SIZE = 7


def other_side(side: str) -> str:
    return AI if side == PLAYER else PLAYER


def make_edge(a: Dot, b: Dot) -> Edge:
    a = (int(a[0]), int(a[1]))
    b = (int(b[0]), int(b[1]))
    return (a, b) if a <= b else (b, a)


def is_valid_edge(edge: Edge, size: int) -> bool:
    """True when both dots are on the grid and exactly one unit apart."""
    try:
        (r1, c1), (r2, c2) = edge
    except (TypeError, ValueError):
        return False
    for v in (r1, c1, r2, c2):
        if not isinstance(v, int) or isinstance(v, bool) or not 0 <= v < size:
            return False
    return abs(r1 - r2) + abs(c1 - c2) == 1


def total_edges(size: int) -> int:
    return 2 * size * (size - 1)


def total_boxes(size: int) -> int:
    return (size - 1) ** 2


@lru_cache(maxsize=None)
def all_edges(size: int) -> Tuple[Edge, ...]:
    edges: List[Edge] = []
    for r in range(size):
        for c in range(size):
            if c < size - 1:
                edges.append(((r, c), (r, c + 1)))
            if r < size - 1:
                edges.append(((r, c), (r + 1, c)))
    return tuple(edges)


@lru_cache(maxsize=None)
def all_boxes(size: int) -> Tuple[Box, ...]:
    return tuple((r, c) for r in range(size - 1) for c in range(size - 1))


def box_borders(box: Box) -> Tuple[Edge, Edge, Edge, Edge]:
    """Top, bottom, left and right edges of a box."""
    r, c = box
    return (
        ((r, c), (r, c + 1)),
        ((r + 1, c), (r + 1, c + 1)),
        ((r, c), (r + 1, c)),
        ((r, c + 1), (r + 1, c + 1)),
    )


def legal_moves(edges: AbstractSet[Edge], size: int) -> List[Edge]:
    return [e for e in all_edges(size) if e not in edges]


def format_edge(edge: Edge) -> str:
    (r1, c1), (r2, c2) = edge
    return f"{r1},{c1}-{r2},{c2}"


def parse_edge(text: str) -> Edge:
    """Parse "r,c-r,c" into a canonical edge.

    Only the syntax is checked here; bounds and adjacency are the move
    engine's concern.
    """
    raw = text.strip()
    parts = raw.split("-")
    if len(parts) != 2:
        raise ValueError(f"Invalid edge {text!r}: expected 'r,c-r,c'")
    dots = []
    for part in parts:
        coords = part.split(",")
        if len(coords) != 2:
            raise ValueError(f"Invalid dot {part!r} in edge {text!r}")
        try:
            dots.append((int(coords[0]), int(coords[1])))
        except ValueError:
            raise ValueError(f"Non-integer coordinate in edge {text!r}") from None
    return make_edge(dots[0], dots[1])


def parse_edges(text: str) -> List[Edge]:
    """Parse a ';' or whitespace separated list of edges."""
    tokens = text.replace(";", " ").split()
    return [parse_edge(t) for t in tokens]


@dataclass
class GameState:
    size: int = DEFAULT_SIZE
    edges: set = field(default_factory=set)
    owners: Dict[Box, str] = field(default_factory=dict)
    scores: Dict[str, int] = field(default_factory=lambda: {PLAYER: 0, AI: 0})
    turn: str = PLAYER
    last_edge: Optional[Edge] = None

    def has_edge(self, a: Dot, b: Dot) -> bool:
        return make_edge(a, b) in self.edges

    def copy(self) -> "GameState":
        return GameState(
            size=self.size,
            edges=set(self.edges),
            owners=dict(self.owners),
            scores=dict(self.scores),
            turn=self.turn,
            last_edge=self.last_edge,
        )


def new_game(size: int = DEFAULT_SIZE) -> GameState:
    if size < 2:
        raise ValueError(f"Grid needs at least 2x2 dots, got {size}")
    return GameState(size=size)


def is_terminal(state: GameState) -> bool:
    return len(state.edges) == total_edges(state.size)


def winner(state: GameState) -> Optional[str]:
    """PLAYER, AI or TIE once the game is over; None before that."""
    if not is_terminal(state):
        return None
    p, a = state.scores[PLAYER], state.scores[AI]
    if p > a:
        return PLAYER
    if a > p:
        return AI
    return TIE


def render_board(state: GameState) -> str:
    """Plain-text picture of the grid; boxes show P (player) or A (ai)."""
    n = state.size
    lines: List[str] = []
    for r in range(n):
        row = []
        for c in range(n):
            row.append("+")
            if c < n - 1:
                row.append("---" if ((r, c), (r, c + 1)) in state.edges else "   ")
        lines.append("".join(row))
        if r == n - 1:
            break
        mid = []
        for c in range(n):
            mid.append("|" if ((r, c), (r + 1, c)) in state.edges else " ")
            if c < n - 1:
                owner = state.owners.get((r, c))
                mid.append(" P " if owner == PLAYER else " A " if owner == AI else "   ")
        lines.append("".join(mid))
    return "\n".join(lines)
