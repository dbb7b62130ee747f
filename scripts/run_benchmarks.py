#!/usr/bin/env python3
from __future__ import annotations

import argparse
import math
import random
import statistics as stats
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

from dotsboxes.engine import apply_move
from dotsboxes.game_basics import DEFAULT_SIZE, GameState, is_terminal, legal_moves, new_game
from dotsboxes.solver import choose_automated_move
from dotsboxes.tracking import log_metrics, log_params, maybe_mlflow_run


def ci95(values: List[float]) -> Tuple[float, float]:
    if not values:
        return (float("nan"), float("nan"))
    m = stats.fmean(values)
    s = stats.pstdev(values) if len(values) > 1 else 0.0
    half = 1.96 * (s / math.sqrt(len(values)))
    return m, half


@dataclass
class Config:
    seeds: int = 10
    size: int = DEFAULT_SIZE
    prefix: int = 20
    tracking: str = "none"  # or "mlflow"
    log_dir: Path = Path("runs")


def random_position(size: int, plies: int, rng: random.Random) -> GameState:
    state = new_game(size)
    for _ in range(plies):
        if is_terminal(state):
            break
        apply_move(state, rng.choice(legal_moves(state.edges, size)), state.turn)
    return state


def main() -> int:
    ap = argparse.ArgumentParser(description="Time the ai's move choice on seeded positions")
    ap.add_argument("--seeds", type=int, default=Config.seeds)
    ap.add_argument("--size", type=int, default=Config.size)
    ap.add_argument("--prefix", type=int, default=Config.prefix, help="Random plies before timing")
    ap.add_argument("--tracking", choices=["none", "mlflow"], default="none")
    ns = ap.parse_args()
    cfg = Config(seeds=ns.seeds, size=ns.size, prefix=ns.prefix, tracking=ns.tracking)

    with maybe_mlflow_run(cfg.tracking == "mlflow", run_name="benchmarks", log_dir=cfg.log_dir):
        log_params({"seeds": cfg.seeds, "size": cfg.size, "prefix": cfg.prefix})
        empty_times: List[float] = []
        mid_times: List[float] = []
        for s in range(cfg.seeds):
            t0 = time.perf_counter()
            choose_automated_move(new_game(cfg.size))
            empty_times.append(time.perf_counter() - t0)
            pos = random_position(cfg.size, cfg.prefix, random.Random(s))
            t1 = time.perf_counter()
            choose_automated_move(pos)
            mid_times.append(time.perf_counter() - t1)
        m_empty, h_empty = ci95(empty_times)
        m_mid, h_mid = ci95(mid_times)
        log_metrics({
            "empty_mean_s": m_empty,
            "empty_ci95_half_s": h_empty,
            "midgame_mean_s": m_mid,
            "midgame_ci95_half_s": h_mid,
        })
    print(f"choose_automated_move {cfg.size}x{cfg.size} (N={cfg.seeds})")
    print(f"- empty board: mean={m_empty:.4f}s ± {h_empty:.4f}s (95% CI)")
    print(f"- after {cfg.prefix} random plies: mean={m_mid:.4f}s ± {h_mid:.4f}s (95% CI)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
