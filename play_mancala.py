"""
Terminal Mancala.

Each side's move provider is chosen once at start-up:

    python play_mancala.py                      # human (player 1) vs Monte Carlo (player 2)
    python play_mancala.py --p1 mc --p2 random --mc-n 5000
    python play_mancala.py --p1 human --p2 human
"""

import argparse
import logging
import sys

from sim.mancala import MancalaSimulator, Side
from sim.display import print_board, render_board
from eval.tournament import make_agent
from agents.mc_agent import DEFAULT_TRIALS

logger = logging.getLogger(__name__)

PROVIDERS = ['human', 'random', 'mc']


def _positive_int(s: str) -> int:
    try:
        value = int(s)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid trial count: {s}") from e
    if value <= 0:
        raise argparse.ArgumentTypeError(f"Trial count must be positive: {s}")
    return value


def build_parser():
    p = argparse.ArgumentParser(prog="mancala", description="Play Kalah against a person or the computer")
    p.add_argument("--p1", choices=PROVIDERS, default="human", help="Move provider for player 1")
    p.add_argument("--p2", choices=PROVIDERS, default="mc", help="Move provider for player 2")
    p.add_argument("--mc-n", type=_positive_int, default=DEFAULT_TRIALS, help="Monte Carlo trials per decision")
    p.add_argument("--seed", type=int, default=None, help="Seed for the computer players")
    p.add_argument("--parallel", action="store_true", help="Spread Monte Carlo trials over worker processes")
    p.add_argument("--workers", type=int, default=None, help="Worker processes for --parallel")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return p


def _build_agents(args, sim):
    agents = []
    for side, provider in ((Side.PLAYER_1, args.p1), (Side.PLAYER_2, args.p2)):
        seed = sim.rng.getrandbits(32)
        if provider == 'mc':
            agent = make_agent('mc', mc_n=args.mc_n, seed=seed, name=f"mc-{side.value + 1}",
                               enable_parallel=args.parallel, num_workers=args.workers)
        elif provider == 'random':
            agent = make_agent('random', seed=seed, name=f"random-{side.value + 1}")
        else:
            agent = make_agent('human', name=f"human-{side.value + 1}")
        agents.append(agent)
    return agents


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="[%(levelname)s] %(name)s: %(message)s", stream=sys.stderr)

    sim = MancalaSimulator(seed=args.seed)
    agents = _build_agents(args, sim)
    any_human = any(getattr(a, 'interactive', False) for a in agents)

    def show_computer_turn(board, side):
        # humans get the board with their prompt; show what the computer is facing
        if any_human:
            print(render_board(board, side))
            print(f"{side.label.capitalize()} ({agents[side].name}) is thinking...")

    try:
        winner, board = sim.play_game(agents, display=show_computer_turn)
    except (KeyboardInterrupt, EOFError):
        print("\nGame abandoned.")
        return 1
    finally:
        for agent in agents:
            close = getattr(agent, 'close', None)
            if close is not None:
                close()

    print("Game over! Final board:")
    # leader's perspective, player 2 on a draw
    print_board(board, winner if winner is not None else Side.PLAYER_2)
    if winner is None:
        print(f"Draw, {board.stores[0]} to {board.stores[1]}.")
    else:
        print(f"{winner.label.capitalize()} wins, {board.stores[winner]} to {board.stores[winner.opponent]}.")
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
