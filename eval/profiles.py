from __future__ import annotations

import json
import logging
import os
from functools import lru_cache
from typing import Dict, Tuple

logger = logging.getLogger(__name__)

# Keys accepted by MonteCarloAgent __init__ (except 'n' which is overridden by mc_n)
_ALLOWED_MC_KEYS = {
    "name",
    "chunk_size",
    "enable_parallel",
    "num_workers",
}

# opponent profile -> (agent name understood by eval.tournament.make_agent, kwargs)
_OPPONENT_PROFILES = {
    "random": ("random", {}),
    "mc_small": ("mc", {"n": 200}),
}

CONFIG_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "mc_config.json")


def get_opponent_profile(profile_name: str) -> Tuple[str, Dict]:
    name = str(profile_name).lower()
    if name not in _OPPONENT_PROFILES:
        raise ValueError(f"Unknown opponent profile: {profile_name}")
    agent_name, kwargs = _OPPONENT_PROFILES[name]
    return agent_name, dict(kwargs)


@lru_cache(maxsize=1)
def _load_mc_config() -> Dict:
    """Load MC overrides from eval/mc_config.json. A missing file means no overrides.
    Filters out private ('_'-prefixed) top-level keys.
    """
    if not os.path.exists(CONFIG_PATH):
        return {}
    with open(CONFIG_PATH, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{CONFIG_PATH} must contain a JSON object")
    # Drop private keys starting with '_' (like _description)
    return {k: v for k, v in data.items() if not str(k).startswith("_")}


def get_mc_kwargs(mc_n: int) -> Dict:
    if not isinstance(mc_n, int) or isinstance(mc_n, bool):
        raise ValueError("mc_n must be an int")
    if mc_n <= 0:
        raise ValueError("mc_n must be positive")

    cfg = _load_mc_config().copy()
    cfg.pop("n", None)

    unknown = set(cfg) - _ALLOWED_MC_KEYS
    if unknown:
        logger.warning("ignoring unknown keys in %s: %s", CONFIG_PATH, sorted(unknown))
    cfg = {k: v for k, v in cfg.items() if k in _ALLOWED_MC_KEYS}

    # Finally, set the trial budget from argument
    cfg["n"] = mc_n
    return cfg
