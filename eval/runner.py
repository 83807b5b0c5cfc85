from __future__ import annotations

import logging
import random
import time
from typing import List, Dict, Tuple, Optional
from concurrent.futures import ProcessPoolExecutor, as_completed

from sim.mancala import MancalaSimulator, Side

from .experiment_config import ExperimentConfig, ExperimentCondition
from .profiles import get_opponent_profile, get_mc_kwargs
from .tournament import make_agent

logger = logging.getLogger(__name__)


def _mc_seat(condition: ExperimentCondition, match_idx: int) -> Side:
    """
    Seat of the MC agent:
    - first: always PLAYER_1
    - second: always PLAYER_2
    - alternate: PLAYER_1 on even matches, PLAYER_2 on odd ones
    """
    if condition.mc_side == "first":
        return Side.PLAYER_1
    if condition.mc_side == "second":
        return Side.PLAYER_2
    return Side.PLAYER_1 if match_idx % 2 == 0 else Side.PLAYER_2


def run_match(condition: ExperimentCondition, seed: int, match_idx: int) -> Tuple[Dict, List[Dict]]:
    """
    Run a single match and return (match_row, players_rows).
    """
    condition.validate()

    sim = MancalaSimulator(seed=seed + match_idx)
    rng = random.Random(seed * 100_003 + match_idx)

    mc_seat = _mc_seat(condition, match_idx)
    opp_name, opp_kwargs = get_opponent_profile(condition.opponent)

    agents = [None, None]
    agents[mc_seat] = make_agent("mc", seed=rng.getrandbits(32), **get_mc_kwargs(condition.mc_n))
    agents[mc_seat.opponent] = make_agent(opp_name, seed=rng.getrandbits(32), **opp_kwargs)

    t0 = time.time()
    winner, board = sim.play_game(agents)
    t1 = time.time()

    draw = winner is None
    mc_win = (not draw) and winner == mc_seat

    match_row: Dict = {
        "match_id": 0,  # will be filled by run_experiment with global counter
        "condition_id": condition.condition_id,
        "seed": seed,
        "mc_side": condition.mc_side,
        "mc_seat": int(mc_seat),
        "mc_n": condition.mc_n,
        "opponent": condition.opponent,
        "winner": "draw" if draw else Side(winner).name,
        "mc_win": mc_win,
        "draw": draw,
        "mc_store": board.stores[mc_seat],
        "opponent_store": board.stores[mc_seat.opponent],
        "total_time_ms": int((t1 - t0) * 1000),
    }

    players_rows: List[Dict] = []
    for seat in Side:
        players_rows.append({
            "match_id": 0,  # filled by run_experiment
            "seat": int(seat),
            "agent_type": "MC" if seat == mc_seat else "OPP",
            "won": (not draw) and winner == seat,
            "store": board.stores[seat],
        })

    return match_row, players_rows


def run_experiment(cfg: ExperimentConfig, progress: Optional[object] = None,
                   max_workers: Optional[int] = None) -> Tuple[List[Dict], List[Dict]]:
    """
    Run every (condition, seed, match) of `cfg` and return (matches, players) as lists of dicts.
    If `progress` is provided, it can be either:
      - an object with an `update(int)` method (e.g., tqdm instance), or
      - a callable taking (done:int, total:int) to report progress.
    Parallelization:
      - If max_workers is None or <= 1, runs sequentially.
      - If max_workers > 1, dispatches matches to a ProcessPoolExecutor.
    """
    cfg.validate()
    matches: List[Dict] = []
    players: List[Dict] = []

    # Build flat task list for deterministic ordering and progress
    tasks: List[Tuple[ExperimentCondition, int, int]] = []
    for cond in cfg.conditions:
        for seed in cfg.seeds:
            for m in range(cfg.num_matches_per_seed):
                tasks.append((cond, seed, m))

    total_matches = len(tasks)
    logger.info("running %d matches for experiment %r", total_matches, cfg.name)

    def _progress_update(done: int) -> None:
        if progress is None:
            return
        upd = getattr(progress, "update", None)
        if callable(upd):
            upd(1)
        elif callable(progress):
            progress(done, total_matches)

    results: List[Optional[Tuple[Dict, List[Dict]]]] = [None] * total_matches

    if not max_workers or max_workers <= 1:
        for idx, (cond, seed, m) in enumerate(tasks):
            results[idx] = run_match(cond, seed, m)
            _progress_update(idx + 1)
    else:
        done = 0
        with ProcessPoolExecutor(max_workers=max_workers) as ex:
            future_to_idx = {
                ex.submit(run_match, cond, seed, m): idx
                for idx, (cond, seed, m) in enumerate(tasks)
            }
            for fut in as_completed(future_to_idx):
                results[future_to_idx[fut]] = fut.result()
                done += 1
                _progress_update(done)

    # Assign deterministic match_id based on original task order
    for match_id, item in enumerate(results, start=1):
        assert item is not None
        match_row, players_rows = item
        match_row["match_id"] = match_id
        for pr in players_rows:
            pr["match_id"] = match_id
        matches.append(match_row)
        players.extend(players_rows)

    return matches, players
