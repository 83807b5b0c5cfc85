"""
Stand-ins for agents.mc_parallel.worker_run_chunk.

They live in an importable module so worker processes can unpickle them.
"""

from sim.mancala import IllegalMove


def chunk_with_illegal_move(agent, board, side, chunk_size, seed):
    """A chunk whose playout hits an empty house."""
    raise IllegalMove(side, 2, "house 2 is empty")
