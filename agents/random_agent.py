# agents/random_agent.py
import random
from sim.mancala import HOUSES


def pick_house(row, rng):
    """Uniform choice among the non-empty houses of `row`, by rejection sampling."""
    if not any(row):
        raise ValueError("cannot pick a house from an empty row")
    while True:
        house = rng.randrange(HOUSES)
        if row[house] > 0:
            return house


class RandomAgent:
    def __init__(self, name='random', seed=None):
        self.name = name
        self.rng = random.Random(seed)

    def select_action(self, obs):
        board = obs['board']
        return pick_house(board.houses[obs['side']], self.rng)
