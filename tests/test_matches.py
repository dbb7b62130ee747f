import csv
import json
import random
from pathlib import Path

import pytest

from dotsboxes.baselines import POLICIES, greedy_policy, random_policy
from dotsboxes.game_basics import AI, PLAYER, GameState, all_edges, new_game
from dotsboxes.matches import MatchArgs, play_match, run_matches, summarize


def _fake_missing_parquet(monkeypatch: pytest.MonkeyPatch) -> None:
    import importlib

    real_find_spec = importlib.util.find_spec

    def fake_find_spec(name: str, package=None):  # type: ignore[override]
        if name in {"pandas", "pyarrow"}:
            return None
        return real_find_spec(name, package)

    monkeypatch.setattr(importlib.util, "find_spec", fake_find_spec)


def test_baselines_return_legal_edges():
    rng = random.Random(0)
    s = new_game(3)
    for policy in POLICIES.values():
        assert policy(s, rng) in all_edges(3)
    full = GameState(size=2, edges=set(all_edges(2)))
    assert random_policy(full, rng) is None
    assert greedy_policy(full, rng) is None


def test_greedy_baseline_captures():
    edges = {((0, 0), (0, 1)), ((0, 0), (1, 0)), ((1, 0), (1, 1))}
    s = GameState(size=3, edges=edges)
    for seed in range(5):
        assert greedy_policy(s, random.Random(seed)) == ((0, 1), (1, 1))


@pytest.mark.parametrize("opponent", sorted(POLICIES))
@pytest.mark.parametrize("ai_first", [False, True])
def test_play_match_plays_to_the_end(opponent, ai_first):
    row = play_match(3, opponent, random.Random(1), ai_first=ai_first)
    assert row["moves"] == 12
    assert row["score_player"] + row["score_ai"] == 4
    assert row["winner"] in {PLAYER, AI, "tie"}
    assert row["first"] == (AI if ai_first else PLAYER)
    assert row["ai_moves"] >= 1


def test_summarize_counts():
    rows = [
        {"winner": AI, "score_ai": 3, "score_player": 1, "ai_moves": 4, "ai_think_s": 0.4},
        {"winner": "tie", "score_ai": 2, "score_player": 2, "ai_moves": 6, "ai_think_s": 0.6},
    ]
    s = summarize(rows)
    assert s["games"] == 2
    assert s["wins"] == {PLAYER: 0, AI: 1, "tie": 1}
    assert s["ai_win_rate"] == 0.5
    assert s["mean_margin"] == 1.0
    assert s["mean_ai_think_s"] == pytest.approx(0.1)
    assert summarize([])["games"] == 0


def test_run_matches_writes_csv_and_manifest(tmp_path: Path):
    out = run_matches(MatchArgs(games=2, size=3, seed=7, out=tmp_path / "m"))
    rows = list(csv.DictReader((out / "matches.csv").open()))
    assert len(rows) == 2
    assert [r["first"] for r in rows] == [PLAYER, AI]
    m = json.loads((out / "manifest.json").read_text())
    assert m["results_version"]
    assert m["args"]["games"] == 2
    assert sum(m["summary"]["wins"].values()) == 2
    assert m["parquet_written"] is False
    assert m["files"]["matches_parquet"] is None
    assert set(m["checksums"]) == {"matches_csv"}


def test_run_matches_reproducible(tmp_path: Path):
    a = run_matches(MatchArgs(games=2, size=3, seed=3, out=tmp_path / "a"))
    b = run_matches(MatchArgs(games=2, size=3, seed=3, out=tmp_path / "b"))

    def strip(path: Path):
        rows = list(csv.DictReader((path / "matches.csv").open()))
        for r in rows:
            r.pop("ai_think_s")
        return rows

    assert strip(a) == strip(b)


def test_run_matches_default_out_uses_results_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("DNB_RESULTS", str(tmp_path / "res"))
    out = run_matches(MatchArgs(games=1, size=2))
    assert out == tmp_path / "res" / "matches"
    assert (out / "matches.csv").exists()


def test_format_both_graceful_without_parquet_deps(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _fake_missing_parquet(monkeypatch)
    out = run_matches(MatchArgs(games=1, size=2, out=tmp_path / "both", format="both"))
    assert (out / "matches.csv").exists()
    assert not (out / "matches.parquet").exists()
    assert json.loads((out / "manifest.json").read_text())["parquet_written"] is False


def test_format_parquet_raises_without_deps(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _fake_missing_parquet(monkeypatch)
    out = tmp_path / "pq"
    with pytest.raises(RuntimeError):
        run_matches(MatchArgs(games=1, size=2, out=out, format="parquet"))
    assert not out.exists()


def test_parquet_written_when_available(tmp_path: Path):
    pytest.importorskip("pandas")
    pytest.importorskip("pyarrow")
    import pandas as pd

    out = run_matches(MatchArgs(games=2, size=2, out=tmp_path / "pq", format="parquet"))
    df = pd.read_parquet(out / "matches.parquet")
    assert len(df) == 2
    assert not (out / "matches.csv").exists()


@pytest.mark.parametrize("kwargs", [{"format": "xlsx"}, {"opponent": "oracle"}])
def test_bad_arguments_raise(tmp_path: Path, kwargs):
    with pytest.raises(ValueError):
        run_matches(MatchArgs(games=1, size=2, out=tmp_path / "x", **kwargs))
