from sim.mancala import Board, Side
from sim.display import render_board


def test_render_opening_for_player_1():
    text = render_board(Board(), Side.PLAYER_1)
    lines = text.splitlines()
    assert len(lines) == 8
    assert lines[0].split() == ["0", "1", "2", "3", "4", "5"]
    assert lines[2].startswith("(PLAYER 1) |  |  | 4 | | 4 |")
    assert lines[6].endswith("|  |  PLAYER 2")
    assert lines[4] == "           | 0|" + " " * 38 + "| 0|"


def test_render_highlights_player_2():
    text = render_board(Board(), Side.PLAYER_2)
    lines = text.splitlines()
    assert lines[2].startswith(" PLAYER 1  |  |")
    assert lines[6].endswith("|  | (PLAYER 2)")


def test_render_shows_counts_and_stores():
    board = Board(houses=[[0, 1, 2, 3, 10, 12], [7, 0, 0, 0, 0, 1]], stores=[5, 7])
    lines = render_board(board, Side.PLAYER_1).splitlines()
    assert "|10 | |12 |" in lines[2]
    assert "| 7 | | 0 |" in lines[6]
    assert lines[4].startswith("           | 5|")
    assert lines[4].endswith("| 7|")


def test_rows_line_up():
    lines = render_board(Board(), Side.PLAYER_1).splitlines()
    assert len(lines[2].rstrip()) == len(lines[1])
    assert len(lines[4]) == len(lines[1])
