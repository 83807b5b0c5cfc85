from __future__ import annotations

import argparse
import csv
import json
import logging
import os
from datetime import datetime
from typing import List

from tqdm import tqdm

from .experiment_config import ExperimentConfig, ExperimentCondition, VALID_OPPONENTS, VALID_MC_SIDES
from .runner import run_experiment
from .aggregate import aggregate_win_rates
from .plots import save_winrate_vs_mc

logger = logging.getLogger(__name__)


def _make_progress(total: int, desc: str = "Running matches"):
    bar_format = "{l_bar}{bar}| {n_fmt}/{total_fmt} [{elapsed}<{remaining}, {rate_fmt}]"
    return tqdm(total=total, desc=desc, unit="match", dynamic_ncols=True, bar_format=bar_format)


DEFAULT_MC_GRID = [50, 200, 800, 3200]
DEFAULT_SEEDS = [1, 2, 3]
DEFAULT_MATCHES_PER_SEED = 20
DEFAULT_OPPONENTS = ["random", "mc_small"]


MATCHES_SCHEMA = [
    "match_id",
    "condition_id",
    "seed",
    "mc_side",
    "mc_seat",
    "mc_n",
    "opponent",
    "winner",
    "mc_win",
    "draw",
    "mc_store",
    "opponent_store",
    "total_time_ms",
]

PLAYERS_SCHEMA = [
    "match_id",
    "seat",
    "agent_type",
    "won",
    "store",
]


def _ensure_out_dir(out: str | None, name: str) -> str:
    if out:
        base = out
    else:
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        base = os.path.join("eval", "results", "experiments", name or ts)
    os.makedirs(base, exist_ok=True)
    return base


def _write_json(path: str, obj) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(obj, f, indent=2, ensure_ascii=False)


def _write_csv(path: str, rows: List[dict], schema: List[str]) -> None:
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=schema)
        writer.writeheader()
        for r in rows:
            # Only write known fields as per schema
            writer.writerow({k: r.get(k) for k in schema})


def _parse_int_list(s: str) -> List[int]:
    try:
        return [int(x) for x in s.split(",") if x.strip()]
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid int list: {s}") from e


def _parse_opponents(s: str) -> List[str]:
    names = [x.strip() for x in s.split(",") if x.strip()]
    bad = [n for n in names if n not in VALID_OPPONENTS]
    if bad or not names:
        raise argparse.ArgumentTypeError(f"Invalid opponent list: {s}")
    return names


def _resolve_jobs(jobs: int):
    # 0 means auto
    if jobs <= 0:
        cpu = os.cpu_count() or 1
        jobs = max(1, cpu - 1)
    return jobs if jobs > 1 else None


def _run_and_save(cfg: ExperimentConfig, args: argparse.Namespace, summary_extra: dict) -> int:
    cfg.validate()
    out_dir = _ensure_out_dir(args.out, cfg.name)
    _write_json(os.path.join(out_dir, "config.json"), json.loads(cfg.to_json()))

    progress = _make_progress(cfg.total_matches, desc="Running matches")
    try:
        matches, players = run_experiment(cfg, progress=progress, max_workers=_resolve_jobs(args.jobs))
    finally:
        progress.close()

    _write_csv(os.path.join(out_dir, "matches.csv"), matches, MATCHES_SCHEMA)
    _write_csv(os.path.join(out_dir, "players.csv"), players, PLAYERS_SCHEMA)

    aggr = aggregate_win_rates(matches)
    summary = {
        "name": cfg.name,
        "seeds": cfg.seeds,
        "num_matches_per_seed": cfg.num_matches_per_seed,
        **summary_extra,
        "aggregates": aggr,
    }
    _write_json(os.path.join(out_dir, "summary.json"), summary)

    for row in aggr:
        print(f"{row['mc_side']:>9} vs {row['opponent']:<8} mc_n={row['mc_n']:<7} "
              f"win rate {row['win_rate_mc']:.3f} [{row['ci_low']:.3f}, {row['ci_high']:.3f}] "
              f"({row['mc_wins']}/{row['matches']}, {row['draws']} draws)")

    if not args.no_plot:
        path = save_winrate_vs_mc(aggr, out_dir, title=f"Win rate vs mc_n: {cfg.name}")
        logger.info("plot written to %s", path)

    print(f"Done. Outputs saved to: {out_dir}")
    return 0


def cmd_sweep_mc_n(args: argparse.Namespace) -> int:
    conditions = [
        ExperimentCondition(mc_n=n, opponent=opp, mc_side=args.mc_side)
        for n in args.mc_grid for opp in args.opponents
    ]
    cfg = ExperimentConfig(
        name=args.name or "sweep_mc_n",
        seeds=args.seeds,
        num_matches_per_seed=int(args.matches_per_seed),
        conditions=conditions,
    )
    return _run_and_save(cfg, args, {"mc_grid": args.mc_grid, "opponents": args.opponents,
                                     "mc_side": args.mc_side})


def cmd_head_to_head(args: argparse.Namespace) -> int:
    mc_n = int(args.mc_n)
    conditions = [ExperimentCondition(mc_n=mc_n, opponent=args.opponent, mc_side=args.mc_side)]
    cfg = ExperimentConfig(
        name=args.name or f"head_to_head_{args.opponent}_mc{mc_n}",
        seeds=args.seeds,
        num_matches_per_seed=int(args.matches_per_seed),
        conditions=conditions,
    )
    return _run_and_save(cfg, args, {"mc_n": mc_n, "opponent": args.opponent, "mc_side": args.mc_side})


def _add_common(p: argparse.ArgumentParser, default_name: str | None) -> None:
    p.add_argument("--seeds", type=_parse_int_list, default=list(DEFAULT_SEEDS), help="Comma-separated seeds")
    p.add_argument("--matches-per-seed", type=int, default=DEFAULT_MATCHES_PER_SEED)
    p.add_argument("--mc-side", choices=sorted(VALID_MC_SIDES), default="alternate",
                   help="Seat of the MC agent")
    p.add_argument("--out", default=None, help="Output directory (defaults to eval/results/experiments/<name>)")
    p.add_argument("--name", default=default_name, help="Experiment name")
    p.add_argument("--no-plot", action="store_true", help="Do not generate plot")
    p.add_argument("--jobs", type=int, default=0,
                   help="Parallel jobs for match-level parallelism (0=auto, 1=sequential)")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="mancala-eval", description="Mancala Monte-Carlo agent evaluation CLI")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_sweep = sub.add_parser("sweep_mc_n", help="Sweep mc_n against each opponent profile")
    p_sweep.add_argument("--mc-grid", type=_parse_int_list, default=list(DEFAULT_MC_GRID),
                         help="Comma-separated mc_n values")
    p_sweep.add_argument("--opponents", type=_parse_opponents, default=list(DEFAULT_OPPONENTS),
                         help="Comma-separated opponent profiles")
    _add_common(p_sweep, "sweep_mc_n")
    p_sweep.set_defaults(func=cmd_sweep_mc_n)

    p_h2h = sub.add_parser("head_to_head", help="Run a single mc_n against one opponent profile")
    p_h2h.add_argument("--mc-n", type=int, default=1000, help="Monte Carlo trials per decision")
    p_h2h.add_argument("--opponent", choices=sorted(VALID_OPPONENTS), default="random")
    _add_common(p_h2h, None)
    p_h2h.set_defaults(func=cmd_head_to_head)

    return p


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(asctime)s %(name)s %(levelname)s %(message)s")
    try:
        return args.func(args)
    except ValueError as e:
        logger.error("%s", e)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
