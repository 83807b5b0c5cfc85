"""
Unit tests for parallel processing functionality in MonteCarloAgent.

This module checks that sharded trials add up to the full budget, that the
parallel path picks legal moves comparable to the sequential path, that an
illegal playout move inside a worker reaches the caller, and that worker
pools are cleaned up.
"""

import pickle
import random
import multiprocessing as mp

import pytest
import agents.mc_parallel as mc_parallel
from sim.mancala import IllegalMove, Side
from agents.mc_agent import MonteCarloAgent
from tests.fixtures.sample_boards import Boards
from tests.fixtures.worker_stubs import chunk_with_illegal_move


class TestParallelProcessing:
    """Test suite for parallel processing functionality."""

    def test_parallel_parameters(self):
        agent = MonteCarloAgent(n=10, enable_parallel=True, num_workers=3)
        assert agent.enable_parallel is True
        assert agent.num_workers == 3
        assert agent._worker_pool is None

    def test_auto_worker_count(self):
        agent = MonteCarloAgent(n=10, enable_parallel=True)
        assert 1 <= agent.num_workers <= 4

    def test_agent_pickles_without_pool(self):
        agent = MonteCarloAgent(n=10, enable_parallel=True, num_workers=1, rng=random.Random(3))
        clone = pickle.loads(pickle.dumps(agent))
        assert clone.N == 10
        assert clone._worker_pool is None

    def test_sharded_trials_sum_to_budget(self):
        with MonteCarloAgent(n=450, chunk_size=100, enable_parallel=True, num_workers=2,
                             rng=random.Random(12345)) as agent:
            tally = agent.run_trials(Boards.sparse_midgame(), Side.PLAYER_1)
        assert tally.total == 450
        assert (tally.wins.sum(axis=0) == tally.trials + tally.ties).all()
        assert agent._worker_pool is None

    def test_parallel_chunk_seeds_are_reproducible(self):
        board = Boards.sparse_midgame()
        with MonteCarloAgent(n=300, chunk_size=100, enable_parallel=True, num_workers=2,
                             rng=random.Random(77)) as a:
            tally_a = a.run_trials(board, Side.PLAYER_2)
        with MonteCarloAgent(n=300, chunk_size=100, enable_parallel=True, num_workers=2,
                             rng=random.Random(77)) as b:
            tally_b = b.run_trials(board, Side.PLAYER_2)
        assert tally_a.wins.tolist() == tally_b.wins.tolist()
        assert tally_a.trials.tolist() == tally_b.trials.tolist()

    def test_parallel_and_sequential_agree_on_clear_choice(self):
        if mp.cpu_count() < 2:
            pytest.skip("Multiprocessing test requires multiple CPU cores")
        board = Boards.winning_capture_available()
        sequential = MonteCarloAgent(n=600, chunk_size=150, rng=random.Random(5))
        with MonteCarloAgent(n=600, chunk_size=150, enable_parallel=True, num_workers=2,
                             rng=random.Random(5)) as parallel:
            assert sequential.select(board, Side.PLAYER_1) == 1
            assert parallel.select(board, Side.PLAYER_1) == 1

    def test_small_budget_stays_sequential(self):
        agent = MonteCarloAgent(n=50, chunk_size=100, enable_parallel=True, num_workers=2,
                                rng=random.Random(1))
        tally = agent.run_trials(Boards.opening(), Side.PLAYER_1)
        assert tally.total == 50
        # no pool is needed when one chunk covers the budget
        assert agent._worker_pool is None

    def test_close_is_idempotent(self):
        agent = MonteCarloAgent(n=300, chunk_size=100, enable_parallel=True, num_workers=2,
                                rng=random.Random(2))
        agent.run_trials(Boards.opening(), Side.PLAYER_1)
        agent.close()
        agent.close()
        assert agent._worker_pool is None

    def test_illegal_move_pickles_intact(self):
        err = pickle.loads(pickle.dumps(IllegalMove(Side.PLAYER_1, 3, "house 3 is empty")))
        assert isinstance(err, IllegalMove)
        assert err.side is Side.PLAYER_1
        assert err.house == 3
        assert str(err) == "house 3 is empty"

    def test_illegal_move_default_message_pickles(self):
        err = pickle.loads(pickle.dumps(IllegalMove(Side.PLAYER_2, 0)))
        assert err.house == 0
        assert "player 2" in str(err)

    def test_illegal_move_in_worker_reaches_caller(self, monkeypatch):
        monkeypatch.setattr(mc_parallel, "worker_run_chunk", chunk_with_illegal_move)
        with MonteCarloAgent(n=300, chunk_size=100, enable_parallel=True, num_workers=2,
                             rng=random.Random(6)) as agent:
            agent.chunk_timeout = 30
            with pytest.raises(IllegalMove) as info:
                agent.run_trials(Boards.opening(), Side.PLAYER_2)
        assert info.value.side is Side.PLAYER_2
        assert info.value.house == 2
