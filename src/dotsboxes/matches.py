"""
Evaluation matches: the ai against a baseline opponent.

Each game alternates which side opens; results are written as one row per
game (CSV by default, Parquet when pandas and pyarrow are installed) plus
a manifest with run metadata and checksums.
"""
from __future__ import annotations

import csv
import hashlib
import importlib.util
import json
import logging
import random
import sys
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

from .baselines import POLICIES
from .engine import apply_move
from .game_basics import AI, DEFAULT_SIZE, PLAYER, is_terminal, new_game, winner
from .paths import get_git_commit, get_git_is_dirty, results_dir
from .solver import choose_automated_move
from .tracking import log_artifact, log_metrics, log_params

RESULTS_VERSION = "1.0.0"
FORMATS = ("csv", "parquet", "both")

FIELDNAMES = [
    "game",
    "size",
    "opponent",
    "first",
    "score_player",
    "score_ai",
    "winner",
    "moves",
    "ai_moves",
    "ai_think_s",
]


@dataclass
class MatchArgs:
    games: int = 10
    opponent: str = "random"
    size: int = DEFAULT_SIZE
    seed: int = 0
    out: Path | None = None
    format: str = "csv"


def play_match(size: int, opponent: str, rng: random.Random, ai_first: bool = False) -> Dict[str, Any]:
    """Play one full game and return its summary row."""
    policy = POLICIES[opponent]
    state = new_game(size)
    state.turn = AI if ai_first else PLAYER
    moves = ai_moves = 0
    think = 0.0
    while not is_terminal(state):
        if state.turn == AI:
            t0 = time.perf_counter()
            mv = choose_automated_move(state)
            think += time.perf_counter() - t0
            ai_moves += 1
        else:
            mv = policy(state, rng)
        if mv is None:
            break
        accepted, _ = apply_move(state, mv, state.turn)
        if not accepted:
            raise RuntimeError(f"{state.turn} produced an illegal edge {mv}")
        moves += 1
    return {
        "size": size,
        "opponent": opponent,
        "first": AI if ai_first else PLAYER,
        "score_player": state.scores[PLAYER],
        "score_ai": state.scores[AI],
        "winner": winner(state),
        "moves": moves,
        "ai_moves": ai_moves,
        "ai_think_s": round(think, 6),
    }


def summarize(rows: List[Dict[str, Any]]) -> Dict[str, Any]:
    wins = {PLAYER: 0, AI: 0, "tie": 0}
    for r in rows:
        wins[r["winner"]] += 1
    n = len(rows)
    ai_moves = sum(r["ai_moves"] for r in rows)
    return {
        "games": n,
        "wins": wins,
        "ai_win_rate": wins[AI] / n if n else 0.0,
        "mean_margin": sum(r["score_ai"] - r["score_player"] for r in rows) / n if n else 0.0,
        "mean_ai_think_s": sum(r["ai_think_s"] for r in rows) / ai_moves if ai_moves else 0.0,
    }


def _sha256_file(path: Path) -> str:
    h = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            h.update(chunk)
    return h.hexdigest()


def _package_versions() -> Dict[str, str]:
    versions: Dict[str, str] = {}
    for pkg in ["numpy", "pandas", "pyarrow", "mlflow"]:
        if importlib.util.find_spec(pkg) is None:
            continue
        mod = __import__(pkg)
        ver = getattr(mod, "__version__", None)
        if ver:
            versions[pkg] = ver
    return versions


def run_matches(args: MatchArgs) -> Path:
    fmt = (args.format or "csv").lower()
    if fmt not in FORMATS:
        raise ValueError(f"Unknown export format: {args.format}")
    if args.opponent not in POLICIES:
        raise ValueError(f"Unknown opponent: {args.opponent}")
    want_parquet = fmt in {"parquet", "both"}
    have_parquet = (importlib.util.find_spec("pandas") is not None
                    and importlib.util.find_spec("pyarrow") is not None)
    if fmt == "parquet" and not have_parquet:
        raise RuntimeError(
            "Parquet dependencies not available (install pandas and pyarrow). "
            "Use pip install .[parquet] to enable parquet support."
        )

    out = args.out if args.out is not None else results_dir() / "matches"
    rng = random.Random(args.seed)
    rows: List[Dict[str, Any]] = []
    logging.info("Playing %d games on %dx%d against %s", args.games, args.size, args.size, args.opponent)
    for i in range(args.games):
        row = play_match(args.size, args.opponent, rng, ai_first=(i % 2 == 1))
        row["game"] = i
        rows.append(row)
        logging.debug("game %d: player=%d ai=%d winner=%s",
                      i, row["score_player"], row["score_ai"], row["winner"])

    out.mkdir(parents=True, exist_ok=True)
    csv_path = out / "matches.csv"
    parquet_path = out / "matches.parquet"
    wrote_csv = wrote_parquet = False

    if fmt in {"csv", "both"}:
        with csv_path.open("w", newline="") as f:
            w = csv.DictWriter(f, fieldnames=FIELDNAMES)
            w.writeheader()
            for r in rows:
                w.writerow(r)
        wrote_csv = True
        logging.info("Wrote %s (%d rows)", csv_path, len(rows))

    if want_parquet:
        if have_parquet:
            import pandas as pd  # type: ignore

            pd.DataFrame(rows, columns=FIELDNAMES).to_parquet(parquet_path)
            wrote_parquet = True
            logging.info("Wrote %s", parquet_path)
        else:
            logging.warning(
                "Parquet dependencies not available; kept CSV only, "
                "manifest will record parquet_written=false."
            )

    summary = summarize(rows)
    files = {
        "matches_csv": str(csv_path) if wrote_csv else None,
        "matches_parquet": str(parquet_path) if wrote_parquet else None,
    }
    manifest = {
        "results_version": RESULTS_VERSION,
        "created_at": datetime.now(timezone.utc).isoformat(),
        "args": {
            "games": args.games,
            "opponent": args.opponent,
            "size": args.size,
            "seed": args.seed,
            "format": fmt,
        },
        "git_commit": get_git_commit(),
        "git_is_dirty": get_git_is_dirty(),
        "python": {
            "python_version": sys.version.split(" ")[0],
            "packages": _package_versions(),
        },
        "summary": summary,
        "files": files,
        "checksums": {k: _sha256_file(Path(p)) for k, p in files.items() if p is not None},
        "parquet_written": wrote_parquet,
    }
    (out / "manifest.json").write_text(json.dumps(manifest, indent=2))
    logging.info("ai won %d/%d games (mean margin %.2f)",
                 summary["wins"][AI], summary["games"], summary["mean_margin"])

    log_params({"games": args.games, "opponent": args.opponent, "size": args.size, "seed": args.seed})
    log_metrics({
        "ai_win_rate": summary["ai_win_rate"],
        "mean_margin": summary["mean_margin"],
        "mean_ai_think_s": summary["mean_ai_think_s"],
    })
    log_artifact(out / "manifest.json")
    for p in files.values():
        if p is not None:
            log_artifact(Path(p))
    return out
