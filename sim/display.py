from sim.mancala import Side

#                    0     1     2     3     4     5
#            /--\  /---\ /---\ /---\ /---\ /---\ /---\ /--\
# (PLAYER 1) |  |  |   | |   | |   | |   | |   | |   | |  |
#            |  |  \---/ \---/ \---/ \---/ \---/ \---/ |  |
#            |  |                                      |  |
#            |  |  /---\ /---\ /---\ /---\ /---\ /---\ |  |
#            |  |  |   | |   | |   | |   | |   | |   | |  |  PLAYER 2
#            \--/  \---/ \---/ \---/ \---/ \---/ \---/ \--/

_INDEX = "                   0     1     2     3     4     5"
_TOP = "           /--\\  /---\\ /---\\ /---\\ /---\\ /---\\ /---\\ /--\\"
_UPPER_CLOSE = "           |  |  \\---/ \\---/ \\---/ \\---/ \\---/ \\---/ |  |"
_LOWER_OPEN = "           |  |  /---\\ /---\\ /---\\ /---\\ /---\\ /---\\ |  |"
_BOTTOM = "           \\--/  \\---/ \\---/ \\---/ \\---/ \\---/ \\---/ \\--/"


def _cells(row):
    return " ".join(f"|{stones:2d} |" for stones in row)


def render_board(board, whose_turn):
    """Return the board as text, with the side to move shown in parentheses."""
    p1_label = "(PLAYER 1)" if whose_turn == Side.PLAYER_1 else " PLAYER 1 "
    p2_label = "(PLAYER 2)" if whose_turn == Side.PLAYER_2 else " PLAYER 2"
    lines = [
        _INDEX,
        _TOP,
        f"{p1_label} |  |  {_cells(board.houses[Side.PLAYER_1])} |  |",
        _UPPER_CLOSE,
        f"           |{board.stores[Side.PLAYER_1]:2d}|{' ' * 38}|{board.stores[Side.PLAYER_2]:2d}|",
        _LOWER_OPEN,
        f"           |  |  {_cells(board.houses[Side.PLAYER_2])} |  | {p2_label}",
        _BOTTOM,
    ]
    return "\n".join(lines)


def print_board(board, whose_turn):
    print(render_board(board, whose_turn))
