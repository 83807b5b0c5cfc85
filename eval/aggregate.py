from __future__ import annotations

from typing import List, Dict, Tuple


def wilson_ci(k: int, n: int, z: float = 1.959963984540054) -> Tuple[float, float]:
    if n == 0:
        return float("nan"), float("nan")
    p = k / n
    denom = 1 + z * z / n
    center = (p + z * z / (2 * n)) / denom
    half = z * ((p * (1 - p) / n + z * z / (4 * n * n)) ** 0.5) / denom
    return center - half, center + half


def aggregate_win_rates(matches: List[Dict]) -> List[Dict]:
    """
    Group by (mc_side, opponent, mc_n) and compute counts, wins, draws and win rate for the MC agent.
    Returns list of rows with keys: mc_side, opponent, mc_n, matches, mc_wins, draws, win_rate_mc,
    ci_low, ci_high
    """
    groups: Dict[Tuple[str, str, int], List[Dict]] = {}
    for m in matches:
        key = (m["mc_side"], m["opponent"], m["mc_n"])
        groups.setdefault(key, []).append(m)

    rows: List[Dict] = []
    for (mc_side, opponent, mc_n), items in groups.items():
        n = len(items)
        k = sum(1 for it in items if bool(it.get("mc_win")))
        draws = sum(1 for it in items if bool(it.get("draw")))
        wr = k / n if n > 0 else float("nan")
        lo, hi = wilson_ci(k, n)
        rows.append({
            "mc_side": mc_side,
            "opponent": opponent,
            "mc_n": mc_n,
            "matches": n,
            "mc_wins": k,
            "draws": draws,
            "win_rate_mc": wr,
            "ci_low": lo,
            "ci_high": hi,
        })
    return rows
