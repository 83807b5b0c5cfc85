import logging
import numbers
import random

import numpy as np

from sim.mancala import HOUSES, IllegalMove, MoveOutcome, Side, is_terminal, resolve, winner_of
from agents.random_agent import pick_house
from agents.mc_parallel import ParallelProcessingMixin

logger = logging.getLogger(__name__)

DEFAULT_TRIALS = 200_000


def _positive_int(value, what):
    if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value <= 0:
        raise ValueError(f"{what} must be a positive integer, got {value!r}")
    return int(value)


class TrialTally:
    """
    Outcome counters keyed by a trial's first move.

    wins[side, house] counts trials that `side` won after opening with
    `house`; a drawn trial is counted for both sides. trials[house] counts
    every trial opened with `house` and ties[house] the drawn ones, so
    wins[0, h] + wins[1, h] == trials[h] + ties[h].
    """

    def __init__(self, wins=None, trials=None, ties=None):
        self.wins = np.zeros((2, HOUSES), dtype=np.int64) if wins is None else np.array(wins, dtype=np.int64)
        self.trials = np.zeros(HOUSES, dtype=np.int64) if trials is None else np.array(trials, dtype=np.int64)
        self.ties = np.zeros(HOUSES, dtype=np.int64) if ties is None else np.array(ties, dtype=np.int64)

    def record(self, first_move, winner):
        self.trials[first_move] += 1
        if winner is None:
            self.ties[first_move] += 1
            self.wins[:, first_move] += 1
        else:
            self.wins[winner, first_move] += 1

    def merge(self, other):
        self.wins += other.wins
        self.trials += other.trials
        self.ties += other.ties
        return self

    @property
    def total(self):
        return int(self.trials.sum())

    def margins(self, side):
        """Win margin per house from `side`'s point of view, None where no trial opened there."""
        side = Side(side)
        opponent = side.opponent
        return [
            int(self.wins[side, h] - self.wins[opponent, h]) if self.trials[h] > 0 else None
            for h in range(HOUSES)
        ]

    def best_move(self, side):
        """Lowest house with the largest margin, ignoring houses that were never played first."""
        best_house = None
        best_margin = None
        for house, margin in enumerate(self.margins(side)):
            if margin is None:
                continue
            if best_margin is None or margin > best_margin:
                best_house, best_margin = house, margin
        if best_house is None:
            raise ValueError("no trials recorded")
        return best_house

    def __repr__(self):
        return f"TrialTally(wins={self.wins.tolist()}, trials={self.trials.tolist()}, ties={self.ties.tolist()})"


def play_random_trial(board, side, rng):
    """
    Play `board` to the end with uniformly random moves, `side` moving first.

    Mutates `board`; callers pass a copy. Returns (first_move, winner) with
    winner None for a draw.
    """
    actor = side
    move = first_move = pick_house(board.houses[actor], rng)
    outcome = resolve(board, actor, move)
    while outcome is not MoveOutcome.GAME_OVER:
        if outcome is MoveOutcome.ILLEGAL_MOVE:
            raise IllegalMove(actor, move, f"random playout proposed illegal house {move} for {Side(actor).label}")
        if outcome is MoveOutcome.TURN_OVER:
            actor = 1 - actor
        move = pick_house(board.houses[actor], rng)
        outcome = resolve(board, actor, move)
    return first_move, winner_of(board)


class MonteCarloAgent(ParallelProcessingMixin):
    """
    Flat Monte-Carlo move selector:
      - plays `n` random games from the current position
      - tallies wins per opening house, draws count for both sides
      - picks the opening with the best win margin (lowest house on ties)
      - optionally shards the trials over a multiprocessing pool
    """

    def __init__(self, name='mc', n=DEFAULT_TRIALS, rng=None, seed=None,
                 chunk_size=10_000, enable_parallel=False, num_workers=None):
        self.name = name
        self.N = _positive_int(n, "trial budget")
        self.rng = rng or random.Random(seed)
        self.chunk_size = _positive_int(chunk_size, "chunk_size")
        self.last_tally = None

        # Initialize parallel processing parameters using mixin
        self._initialize_parallel_parameters(enable_parallel, num_workers)

    def __del__(self):
        """Cleanup worker pool when agent is destroyed."""
        self._close_worker_pool()

    def select_action(self, obs):
        return self.select(obs['board'], obs['side'])

    def select(self, board, side):
        side = Side(side)
        if is_terminal(board):
            raise ValueError("cannot select a move on a finished board")

        tally = self.run_trials(board, side)
        move = tally.best_move(side)
        self.last_tally = tally
        logger.debug("%s (%s) picks house %d after %d trials, margins %s",
                     self.name, side.label, move, tally.total, tally.margins(side))
        return move

    def run_trials(self, board, side, n=None):
        """Run `n` trials (default: the agent's budget) and return their TrialTally."""
        n = self.N if n is None else _positive_int(n, "trial budget")
        side = Side(side)
        if self.enable_parallel and n > self.chunk_size:
            return self._run_trials_parallel(board, side, n)
        return self._run_trials_sequential(board, side, n, self.rng)

    def _run_trials_sequential(self, board, side, n, rng):
        tally = TrialTally()
        for _ in range(n):
            first_move, winner = play_random_trial(board.copy(), side, rng)
            tally.record(first_move, winner)
        return tally
