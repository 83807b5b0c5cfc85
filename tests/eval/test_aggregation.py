import math

from eval.aggregate import aggregate_win_rates, wilson_ci


def test_wilson_basic():
    low, high = wilson_ci(50, 100)
    assert 0.4 < low < 0.6
    assert 0.5 < high < 0.7


def test_wilson_empty():
    low, high = wilson_ci(0, 0)
    assert math.isnan(low) and math.isnan(high)


def test_aggregate_win_rates_groups():
    matches = [
        {"mc_side": "alternate", "opponent": "random", "mc_n": 100, "mc_win": True, "draw": False},
        {"mc_side": "alternate", "opponent": "random", "mc_n": 100, "mc_win": False, "draw": True},
        {"mc_side": "alternate", "opponent": "random", "mc_n": 200, "mc_win": True, "draw": False},
        {"mc_side": "first", "opponent": "mc_small", "mc_n": 100, "mc_win": True, "draw": False},
    ]
    rows = aggregate_win_rates(matches)
    # Should have three groups
    assert len(rows) == 3
    r = next(r for r in rows if r["mc_side"] == "alternate" and r["opponent"] == "random" and r["mc_n"] == 100)
    assert r["matches"] == 2
    assert r["mc_wins"] == 1
    assert r["draws"] == 1
    assert abs(r["win_rate_mc"] - 0.5) < 1e-9
    assert r["ci_low"] < 0.5 < r["ci_high"]
