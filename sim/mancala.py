import enum
import logging
import numbers
import random

logger = logging.getLogger(__name__)

HOUSES = 6
STONES_PER_HOUSE = 4
TOTAL_STONES = 2 * HOUSES * STONES_PER_HOUSE


class Side(enum.IntEnum):
    PLAYER_1 = 0
    PLAYER_2 = 1

    @property
    def opponent(self):
        return Side(1 - self)

    @property
    def label(self):
        return f"player {self.value + 1}"


class MoveOutcome(enum.Enum):
    TURN_OVER = "turn_over"
    EXTRA_TURN = "extra_turn"
    ILLEGAL_MOVE = "illegal_move"
    GAME_OVER = "game_over"


class MancalaError(Exception):
    pass


class IllegalMove(MancalaError):
    def __init__(self, side, house, message=None):
        self.side = side
        self.house = house
        self.message = message or f"illegal move by {Side(side).label}: house {house!r}"
        # args must hold every constructor argument for unpickling
        super().__init__(side, house, self.message)

    def __str__(self):
        return self.message


# Sowing ring: 14 slots, (owner, house) with house None for the owner's store.
# Player 1's row runs 5..0 into its store, player 2's row runs 0..5 into its store.
STORE = None
RING = (
    [(Side.PLAYER_1, h) for h in range(HOUSES - 1, -1, -1)]
    + [(Side.PLAYER_1, STORE)]
    + [(Side.PLAYER_2, h) for h in range(HOUSES)]
    + [(Side.PLAYER_2, STORE)]
)
RING_SIZE = len(RING)
_RING_POS = {slot: pos for pos, slot in enumerate(RING)}


class Board:
    """Two stores and two rows of six houses, both indexed by Side."""

    __slots__ = ('houses', 'stores')

    def __init__(self, houses=None, stores=None):
        if houses is None:
            houses = [[STONES_PER_HOUSE] * HOUSES, [STONES_PER_HOUSE] * HOUSES]
        if stores is None:
            stores = [0, 0]
        if len(houses) != 2 or any(len(row) != HOUSES for row in houses):
            raise ValueError(f"board needs two rows of {HOUSES} houses")
        if len(stores) != 2:
            raise ValueError("board needs two stores")
        self.houses = [list(row) for row in houses]
        self.stores = list(stores)

    @classmethod
    def new(cls):
        return cls()

    def copy(self):
        b = Board.__new__(Board)
        b.houses = [self.houses[0][:], self.houses[1][:]]
        b.stores = self.stores[:]
        return b

    def row(self, side):
        return self.houses[side]

    def total_stones(self):
        return sum(self.stores) + sum(self.houses[0]) + sum(self.houses[1])

    def __eq__(self, other):
        if not isinstance(other, Board):
            return NotImplemented
        return self.houses == other.houses and self.stores == other.stores

    def __repr__(self):
        return f"Board(houses={self.houses!r}, stores={self.stores!r})"


def is_terminal(board):
    """True if either row is empty. Does not sweep."""
    return sum(board.houses[0]) == 0 or sum(board.houses[1]) == 0


def check_game_over(board):
    """
    Terminal check run after every resolved move.

    If either row is empty, each row is swept into its owner's store and
    every house is zeroed. Calling it again on a swept board changes nothing.
    """
    p1_stones = sum(board.houses[0])
    p2_stones = sum(board.houses[1])
    if p1_stones and p2_stones:
        return False
    board.stores[0] += p1_stones
    board.stores[1] += p2_stones
    board.houses[0] = [0] * HOUSES
    board.houses[1] = [0] * HOUSES
    return True


def resolve(board, side, house):
    """
    Play `house` for `side` on `board` in place and return the MoveOutcome.

    Illegal moves (house out of range, or an empty house) leave the board
    untouched and return MoveOutcome.ILLEGAL_MOVE.
    """
    if not isinstance(house, numbers.Integral) or not 0 <= house < HOUSES:
        logger.debug("illegal move by player %d: house %r out of range", side + 1, house)
        return MoveOutcome.ILLEGAL_MOVE
    row = board.houses[side]
    stones = row[house]
    if stones == 0:
        logger.debug("illegal move by player %d: house %d is empty", side + 1, house)
        return MoveOutcome.ILLEGAL_MOVE

    row[house] = 0
    pos = _RING_POS[(side, house)]
    while stones > 0:
        pos += 1
        if pos == RING_SIZE:
            pos = 0
        owner, slot = RING[pos]
        if slot is STORE:
            if owner != side:
                continue
            board.stores[side] += 1
        else:
            board.houses[owner][slot] += 1
        stones -= 1

    owner, slot = RING[pos]
    if slot is STORE:
        if check_game_over(board):
            return MoveOutcome.GAME_OVER
        return MoveOutcome.EXTRA_TURN

    if owner == side and row[slot] == 1:
        opposite = board.houses[1 - side]
        if opposite[slot] > 0:
            captured = opposite[slot]
            board.stores[side] += captured + 1
            row[slot] = 0
            opposite[slot] = 0
            logger.debug("player %d captures %d stones at house %d", side + 1, captured + 1, slot)

    if check_game_over(board):
        return MoveOutcome.GAME_OVER
    return MoveOutcome.TURN_OVER


def winner_of(board):
    """Side with the strictly larger store, or None on a tie."""
    if board.stores[0] > board.stores[1]:
        return Side.PLAYER_1
    if board.stores[1] > board.stores[0]:
        return Side.PLAYER_2
    return None


class MancalaSimulator:
    def __init__(self, seed=None):
        self.rng = random.Random(seed)

    def new_game(self):
        return Board.new()

    def legal_moves(self, board, side):
        if is_terminal(board):
            return []
        return [h for h, stones in enumerate(board.houses[side]) if stones > 0]

    def winner(self, board):
        return winner_of(board)

    def play_game(self, agents, board=None, start_side=Side.PLAYER_1, display=None):
        """
        Alternate turns until the game ends and return (winner, board).

        `agents` is indexed by Side. Each agent exposes select_action(obs);
        agents with a truthy `interactive` attribute are asked again after an
        illegal move, any other agent making one raises IllegalMove.
        `display(board, side)` is called before every non-interactive move.
        Winner is None on a tie.
        """
        if board is None:
            board = self.new_game()
        side = Side(start_side)

        if check_game_over(board):
            return self.winner(board), board

        turns = 0
        while True:
            agent = agents[side]
            interactive = getattr(agent, 'interactive', False)
            if display is not None and not interactive:
                display(board, side)

            obs = {
                'board': board.copy(),
                'side': side,
                '_simulator': self,
            }
            move = agent.select_action(obs)
            outcome = resolve(board, side, move)
            turns += 1
            logger.debug("turn %d: %s plays %r -> %s", turns, side.label, move, outcome.name)

            if outcome is MoveOutcome.ILLEGAL_MOVE:
                if not interactive:
                    raise IllegalMove(side, move, f"automated {side.label} ({getattr(agent, 'name', agent)!r}) "
                                                  f"chose illegal house {move!r}")
                notify = getattr(agent, 'notify_illegal', None)
                if notify is not None:
                    notify(move)
                continue

            if outcome is MoveOutcome.GAME_OVER:
                winner = self.winner(board)
                logger.info("game over after %d turns: stores %d-%d, winner %s",
                            turns, board.stores[0], board.stores[1],
                            winner.label if winner is not None else "none (draw)")
                return winner, board

            if outcome is MoveOutcome.TURN_OVER:
                side = side.opponent
