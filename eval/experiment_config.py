from __future__ import annotations

import json
from dataclasses import dataclass, asdict
from typing import List, Optional, Literal


VALID_OPPONENTS = {"random", "mc_small"}
VALID_MC_SIDES = {"first", "second", "alternate"}


@dataclass
class ExperimentCondition:
    mc_n: int
    opponent: str
    mc_side: Literal["first", "second", "alternate"] = "alternate"

    def validate(self) -> None:
        # mc_n must be positive integer
        if not isinstance(self.mc_n, int) or isinstance(self.mc_n, bool) or self.mc_n <= 0:
            raise ValueError("mc_n must be a positive integer")
        if self.opponent not in VALID_OPPONENTS:
            raise ValueError(f"Invalid opponent: {self.opponent}")
        if self.mc_side not in VALID_MC_SIDES:
            raise ValueError(f"Invalid mc_side: {self.mc_side}")

    @property
    def condition_id(self) -> str:
        return f"{self.mc_side}-{self.opponent}-{self.mc_n}"


@dataclass
class ExperimentConfig:
    name: str
    seeds: List[int]
    num_matches_per_seed: int
    conditions: List[ExperimentCondition]
    out_dir: Optional[str] = None

    def validate(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("name must be a non-empty string")
        if not isinstance(self.seeds, list) or not all(isinstance(s, int) for s in self.seeds):
            raise ValueError("seeds must be a list[int]")
        if len(self.seeds) == 0:
            raise ValueError("seeds list must be non-empty")
        if not isinstance(self.num_matches_per_seed, int) or self.num_matches_per_seed <= 0:
            raise ValueError("num_matches_per_seed must be a positive integer")
        if not isinstance(self.conditions, list) or len(self.conditions) == 0:
            raise ValueError("conditions must be a non-empty list")
        for c in self.conditions:
            if not isinstance(c, ExperimentCondition):
                raise ValueError("conditions must contain ExperimentCondition items")
            c.validate()

    @property
    def total_matches(self) -> int:
        return len(self.conditions) * len(self.seeds) * self.num_matches_per_seed

    def to_json(self) -> str:
        # dataclasses.asdict already recurses into nested dataclasses
        return json.dumps(asdict(self))

    @staticmethod
    def from_json(s: str) -> ExperimentConfig:
        obj = json.loads(s)
        conds = [ExperimentCondition(**c) for c in obj.get("conditions", [])]
        return ExperimentConfig(
            name=obj.get("name"),
            seeds=list(obj.get("seeds", [])),
            num_matches_per_seed=obj.get("num_matches_per_seed"),
            conditions=conds,
            out_dir=obj.get("out_dir"),
        )
