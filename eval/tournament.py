import logging
import time
from collections import Counter

from sim.mancala import MancalaSimulator, Side
from agents.random_agent import RandomAgent
from agents.human_agent import HumanAgent
from agents.mc_agent import MonteCarloAgent

logger = logging.getLogger(__name__)

# Configuration constants (modify these values as needed)
NUM_GAMES = 20
MC_N = 2000
AGENT_NAMES = ['mc', 'random']

AGENTS = {
    'random': RandomAgent,
    'human': HumanAgent,
    'mc': MonteCarloAgent,
}


def make_agent(name, mc_n=200, seed=None, **kwargs):
    cls = AGENTS.get(name)
    if cls is None:
        raise ValueError(f'Unknown agent: {name}')
    kwargs.setdefault('name', name)
    if name == 'mc':
        kwargs.setdefault('n', mc_n)
        return cls(seed=seed, **kwargs)
    if name == 'random':
        return cls(seed=seed, **kwargs)
    return cls(**kwargs)


def play_match(sim, agent_names, games=100, mc_n=200):
    """
    Play `games` games between two named agents, swapping seats every game.

    Returns a Counter keyed by the winning agent name, with 'draw' for ties.
    When both names are equal the winner is reported by seat instead.
    """
    if len(agent_names) != 2:
        raise ValueError('play_match needs exactly two agent names')
    same_name = agent_names[0] == agent_names[1]

    results = Counter()
    start_time = time.time()
    game_times = []

    for g in range(games):
        # alternate who moves first
        seating = agent_names if g % 2 == 0 else agent_names[::-1]
        agents = [make_agent(name, mc_n=mc_n, seed=sim.rng.getrandbits(32)) for name in seating]

        game_start_time = time.time()
        winner, _ = sim.play_game(agents)
        game_time = time.time() - game_start_time
        game_times.append(game_time)

        if winner is None:
            results['draw'] += 1
        elif same_name:
            results[Side(winner).label] += 1
        else:
            results[seating[winner]] += 1
        if (g + 1) % 10 == 0:
            logger.info("Played %d/%d, last game time: %.2fs", g + 1, games, game_time)

    total_time = time.time() - start_time
    avg_time = sum(game_times) / len(game_times) if game_times else 0
    logger.info("Total simulation time: %.2f seconds, average per game: %.2f seconds (mc_n=%d)",
                total_time, avg_time, mc_n)

    return results


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    sim = MancalaSimulator(seed=1)
    results = play_match(sim, AGENT_NAMES, games=NUM_GAMES, mc_n=MC_N)
    print('Results (winner counts):', dict(results))
