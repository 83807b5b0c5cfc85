import pytest
import random
from sim.mancala import MancalaSimulator, Board, Side
from agents.random_agent import RandomAgent
from agents.human_agent import HumanAgent
from agents.mc_agent import MonteCarloAgent


@pytest.fixture
def deterministic_seed():
    """Provides fixed random seed for reproducible tests"""
    return 42


@pytest.fixture
def sample_simulator(deterministic_seed):
    """Provides a standard MancalaSimulator instance for testing"""
    return MancalaSimulator(seed=deterministic_seed)


@pytest.fixture
def opening_board():
    """Provides the standard starting board"""
    return Board()


@pytest.fixture
def random_agent(deterministic_seed):
    """Provides a RandomAgent instance with fixed seed"""
    return RandomAgent(name='test_random', seed=deterministic_seed)


@pytest.fixture
def mc_agent(deterministic_seed):
    """Provides a MonteCarloAgent instance with reduced trials for testing"""
    return MonteCarloAgent(
        name='test_mc',
        n=200,  # Reduced for faster testing
        rng=random.Random(deterministic_seed),
    )


@pytest.fixture
def scripted_human():
    """Factory for a HumanAgent fed from a list of input lines, collecting its output"""
    def _make(lines):
        feed = iter(lines)
        output = []
        agent = HumanAgent(name='test_human', input_fn=lambda prompt: next(feed), output_fn=output.append)
        return agent, output
    return _make


@pytest.fixture
def all_agent_types(random_agent, mc_agent):
    """Provides instances of the automated agent types"""
    return {
        'random': random_agent,
        'mc': mc_agent,
    }


@pytest.fixture
def observation_with_simulator(sample_simulator, opening_board):
    """Provides a complete observation for player 1 at the opening"""
    return {
        'board': opening_board,
        'side': Side.PLAYER_1,
        '_simulator': sample_simulator,
    }
