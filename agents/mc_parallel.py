"""
Monte Carlo Agent Parallel Processing

This module contains parallel processing components for the MonteCarloAgent including:
- Worker function for multiprocessing trial chunks
- Worker pool management utilities
- Sharded trial execution with the per-chunk tallies summed at the end
"""

import logging
import multiprocessing as mp
import random

logger = logging.getLogger(__name__)

# Seconds to wait for one chunk before giving up on the pool
CHUNK_TIMEOUT = 600


def worker_run_chunk(agent, board, side, chunk_size, seed):
    """Module-level worker function for parallel chunk processing."""
    return agent._run_chunk_trials(board, side, chunk_size, seed)


class ParallelProcessingMixin:
    """
    Mixin class providing parallel processing capabilities for Monte Carlo agents.

    Every chunk plays its trials on its own board copies with its own RNG, so
    chunks are independent and only their tallies are combined. Selection
    happens after every chunk has reported.
    """

    def _initialize_parallel_parameters(self, enable_parallel, num_workers):
        """Initialize parallel processing parameters during agent construction."""
        self.enable_parallel = bool(enable_parallel)
        self.num_workers = num_workers
        if self.num_workers is not None:
            self.num_workers = max(1, int(self.num_workers))
        elif self.enable_parallel:
            # Leave 1 core free, max 4 workers
            self.num_workers = min(max(1, mp.cpu_count() - 1), 4)

        self.chunk_timeout = CHUNK_TIMEOUT

        # Worker pool for parallel processing (initialized when needed)
        self._worker_pool = None

    def _get_worker_pool(self):
        """Get or create worker pool for parallel processing."""
        if self._worker_pool is None and self.enable_parallel:
            try:
                self._worker_pool = mp.Pool(processes=self.num_workers)
            except OSError as exc:
                logger.warning("could not start %s worker processes (%s); running trials sequentially",
                               self.num_workers, exc)
                self.enable_parallel = False
                self._worker_pool = None
        return self._worker_pool

    def _close_worker_pool(self):
        """Close worker pool if it exists."""
        pool = getattr(self, '_worker_pool', None)
        if pool is not None:
            self._worker_pool = None
            pool.close()
            pool.join()

    def close(self):
        self._close_worker_pool()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self._close_worker_pool()
        return False

    def __getstate__(self):
        # pools cannot cross process boundaries
        state = self.__dict__.copy()
        state['_worker_pool'] = None
        return state

    def _run_chunk_trials(self, board, side, chunk_size, seed):
        """Worker function to run a chunk of trials with its own RNG."""
        return self._run_trials_sequential(board, side, chunk_size, random.Random(seed))

    def _run_trials_parallel(self, board, side, n):
        """Shard `n` trials across the worker pool and sum the chunk tallies."""
        pool = self._get_worker_pool()
        if pool is None:
            return self._run_trials_sequential(board, side, n, self.rng)

        chunk = self.chunk_size
        sizes = [chunk] * (n // chunk)
        if n % chunk:
            sizes.append(n % chunk)

        # One draw from the agent's RNG keeps decisions reproducible for a seeded agent
        base_seed = self.rng.getrandbits(32)
        pending = [
            pool.apply_async(worker_run_chunk, args=(self, board, side, size, base_seed + i * 1000))
            for i, size in enumerate(sizes)
        ]

        tally = None
        for result in pending:
            chunk_tally = result.get(timeout=self.chunk_timeout)
            tally = chunk_tally if tally is None else tally.merge(chunk_tally)
        logger.debug("collected %d chunks (%d trials) from %d workers", len(sizes), n, self.num_workers)
        return tally
