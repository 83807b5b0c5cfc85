from __future__ import annotations

import os
from typing import List, Dict

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402


def save_winrate_vs_mc(aggregates: List[Dict], out_dir: str, title: str | None = None) -> str:
    """
    Save a line plot of MC win rate vs mc_n for each (mc_side, opponent) group,
    with the Wilson interval as error bars. Returns the path of the saved file.
    """
    groups: Dict[tuple, list] = {}
    for row in aggregates:
        key = (row.get("mc_side"), row.get("opponent"))
        groups.setdefault(key, []).append(row)

    fig, ax = plt.subplots(figsize=(6, 4))
    for (mc_side, opponent), rows in groups.items():
        rows_sorted = sorted(rows, key=lambda r: r.get("mc_n", 0))
        xs = [r.get("mc_n", 0) for r in rows_sorted]
        ys = [r.get("win_rate_mc", 0.0) for r in rows_sorted]
        lows = [max(0.0, y - r.get("ci_low", y)) for y, r in zip(ys, rows_sorted)]
        highs = [max(0.0, r.get("ci_high", y) - y) for y, r in zip(ys, rows_sorted)]
        ax.errorbar(xs, ys, yerr=[lows, highs], marker="o", capsize=3, label=f"{mc_side}-vs-{opponent}")

    ax.set_xscale("log")
    ax.set_xlabel("mc_n (trials per move)")
    ax.set_ylabel("MC win rate")
    ax.set_ylim(0.0, 1.0)
    if title:
        ax.set_title(title)
    ax.legend(loc="best")
    ax.grid(True, alpha=0.3)

    os.makedirs(out_dir, exist_ok=True)
    path = os.path.join(out_dir, "winrate_vs_mc.png")
    fig.tight_layout()
    fig.savefig(path)
    plt.close(fig)
    return path
