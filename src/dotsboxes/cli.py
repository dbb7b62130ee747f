from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from .engine import apply_move
from .game_basics import (
    AI,
    DEFAULT_SIZE,
    PLAYER,
    GameState,
    format_edge,
    is_terminal,
    legal_moves,
    new_game,
    parse_edge,
    parse_edges,
    render_board,
    winner,
)
from .baselines import POLICIES
from .matches import FORMATS, MatchArgs, run_matches
from .session import GameSession
from .solver import choose_automated_move
from .tracking import maybe_mlflow_run


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="dnb", description="Dots and boxes against a minimax opponent")
    sub = p.add_subparsers(dest="cmd")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument(
        "--info",
        action="store_true",
        help="Print environment and dependency info and exit",
    )
    p.add_argument("--seed", type=int, default=None, help="Global seed for reproducibility")
    p.add_argument(
        "--deterministic",
        action="store_true",
        help="Enable deterministic mode (sets PYTHONHASHSEED, seeds numpy if available)",
    )

    p_play = sub.add_parser("play", help="Play interactively on stdin (edges as r,c-r,c)")
    p_play.add_argument("--size", type=int, default=DEFAULT_SIZE, help="Dots per side (default: 7)")
    p_play.add_argument("--first", choices=[PLAYER, AI], default=PLAYER, help="Who opens the game")

    p_sug = sub.add_parser("suggest", help="Show the ai's move for a position")
    p_sug.add_argument("--size", type=int, default=DEFAULT_SIZE, help="Dots per side (default: 7)")
    p_sug.add_argument(
        "--edges",
        default="",
        help='Edges already drawn, in play order, e.g. "0,0-0,1;0,0-1,0"',
    )

    p_mov = sub.add_parser("moves", help="List the edges still available")
    p_mov.add_argument("--size", type=int, default=DEFAULT_SIZE, help="Dots per side (default: 7)")
    p_mov.add_argument("--edges", default="", help="Edges already drawn, in play order")

    p_match = sub.add_parser("match", help="Play the ai against a baseline and write results")
    p_match.add_argument("--games", type=int, default=10, help="Number of games (default: 10)")
    p_match.add_argument("--opponent", choices=sorted(POLICIES), default="random")
    p_match.add_argument("--size", type=int, default=4, help="Dots per side (default: 4)")
    p_match.add_argument("--out", type=Path, default=None, help="Output directory (default: results/matches)")
    p_match.add_argument(
        "--format",
        choices=list(FORMATS),
        default="csv",
        help="Results format: csv (default), parquet, both",
    )
    p_match.add_argument(
        "--tracking",
        choices=["none", "mlflow"],
        default="none",
        help="Experiment tracking backend",
    )
    p_match.add_argument(
        "--log-dir",
        type=Path,
        default=Path("runs"),
        help="Directory for tracking logs/artifacts (for mlflow local backend)",
    )

    return p


def _set_global_seed(seed: Optional[int]) -> None:
    if seed is None:
        return
    import importlib.util
    import random

    random.seed(seed)
    if importlib.util.find_spec("numpy") is not None:
        import numpy as np  # type: ignore

        np.random.seed(seed)


def _set_deterministic_env(seed: Optional[int]) -> None:
    import os

    if seed is not None:
        os.environ.setdefault("PYTHONHASHSEED", str(seed))
    for var in ("MKL_NUM_THREADS", "OPENBLAS_NUM_THREADS", "NUMEXPR_NUM_THREADS", "OMP_NUM_THREADS"):
        os.environ.setdefault(var, "1")
    _set_global_seed(seed)


def _print_info() -> None:
    import importlib.util
    import platform

    print(f"python={sys.version.split()[0]} platform={platform.platform()}")
    for pkg in ["numpy", "pandas", "pyarrow", "mlflow"]:
        spec = importlib.util.find_spec(pkg)
        if spec is None:
            print(f"{pkg}=<not installed>")
        else:
            mod = __import__(pkg)
            ver = getattr(mod, "__version__", "?")
            print(f"{pkg}={ver}")


def replay(size: int, edges_text: str) -> GameState:
    """Replay edges in order from a fresh game, player first.

    Each edge is drawn by whoever holds the turn, so captures keep the
    turn just as in a real game. Raises ValueError on a bad edge.
    """
    state = new_game(size)
    for edge in parse_edges(edges_text):
        accepted, _ = apply_move(state, edge, state.turn)
        if not accepted:
            raise ValueError(f"Edge {format_edge(edge)} cannot be drawn here")
    return state


def _status(state: GameState) -> str:
    return f"player={state.scores[PLAYER]} ai={state.scores[AI]} turn={state.turn}"


def play_interactive(size: int, first: str, stdin: TextIO, stdout: TextIO) -> int:
    session = GameSession(size=size)
    session.reset(first=first)
    for mv in session.ai_moves:
        print(f"ai: {format_edge(mv)}", file=stdout)
    print(render_board(session.state), file=stdout)
    print(_status(session.state), file=stdout)
    for line in stdin:
        raw = line.strip()
        if not raw:
            continue
        if raw in {"quit", "exit"}:
            break
        if raw == "moves":
            print(" ".join(format_edge(e) for e in legal_moves(session.state.edges, size)), file=stdout)
            continue
        try:
            edge = parse_edge(raw)
        except ValueError as e:
            logging.error("%s", e)
            continue
        seen = len(session.ai_moves)
        if not session.submit(edge):
            logging.error("Edge %s cannot be drawn", raw)
            continue
        for mv in session.ai_moves[seen:]:
            print(f"ai: {format_edge(mv)}", file=stdout)
        print(render_board(session.state), file=stdout)
        print(_status(session.state), file=stdout)
        if is_terminal(session.state):
            break
    if is_terminal(session.state):
        print(f"winner={winner(session.state)}", file=stdout)
    return 0


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if getattr(ns, "verbose", False) else logging.INFO,
                        format="[%(levelname)s] %(message)s")

    if getattr(ns, "version", False):
        from importlib.metadata import PackageNotFoundError, version as _ver

        try:
            print(_ver("dotsboxes"))
        except PackageNotFoundError:
            print("unknown")
        return 0
    if getattr(ns, "info", False):
        _print_info()
        return 0

    if getattr(ns, "deterministic", False) or getattr(ns, "seed", None) is not None:
        _set_deterministic_env(getattr(ns, "seed", None))

    if ns.cmd == "play":
        if ns.size < 2:
            logging.error("Grid size must be at least 2, got %d", ns.size)
            return 2
        return play_interactive(ns.size, ns.first, sys.stdin, sys.stdout)

    if ns.cmd in {"suggest", "moves"}:
        try:
            state = replay(ns.size, ns.edges)
        except ValueError as e:
            logging.error("%s", e)
            return 2
        if ns.cmd == "moves":
            print(" ".join(format_edge(e) for e in legal_moves(state.edges, state.size)))
            return 0
        mv = choose_automated_move(state)
        if mv is None:
            logging.info("No move: the game is over (winner=%s)", winner(state))
            return 0
        logging.info("move=%s turn=%s player=%d ai=%d",
                     format_edge(mv), state.turn, state.scores[PLAYER], state.scores[AI])
        return 0

    if ns.cmd == "match":
        if ns.games < 1 or ns.size < 2:
            logging.error("Need at least one game on a grid of size >= 2")
            return 2
        seed = ns.seed if ns.seed is not None else 0
        with maybe_mlflow_run(ns.tracking == "mlflow", run_name="matches", log_dir=ns.log_dir):
            try:
                out = run_matches(MatchArgs(
                    games=ns.games,
                    opponent=ns.opponent,
                    size=ns.size,
                    seed=seed,
                    out=ns.out,
                    format=ns.format,
                ))
            except RuntimeError as e:
                logging.error("%s", e)
                return 2
        logging.info("Wrote match results to: %s", out)
        return 0

    parser.print_help()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
