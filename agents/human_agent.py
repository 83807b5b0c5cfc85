# agents/human_agent.py
import logging
from sim.mancala import HOUSES
from sim.display import render_board

logger = logging.getLogger(__name__)


class HumanAgent:
    """
    Interactive move provider for a terminal.

    Shows the board, then keeps prompting until it reads an integer in
    range. Whether the chosen house is actually playable is left to the
    engine; the game loop reports illegal moves back through notify_illegal.
    """

    interactive = True

    def __init__(self, name='human', input_fn=None, output_fn=None, show_board=True):
        self.name = name
        self.input_fn = input_fn or input
        self.output_fn = output_fn or print
        self.show_board = show_board

    def select_action(self, obs):
        board = obs['board']
        side = obs['side']
        if self.show_board:
            self.output_fn(render_board(board, side))
        self.output_fn(f"Please input move for {side.label}.")

        while True:
            raw = self.input_fn("\n> ")
            try:
                move = int(str(raw).strip())
            except ValueError:
                logger.debug("could not parse move %r", raw)
                continue
            if not 0 <= move < HOUSES:
                logger.debug("move %d outside acceptable range", move)
                continue
            return move

    def notify_illegal(self, move):
        self.output_fn("Sorry, you can't do that.")
