"""
Integration tests for tournament helpers and the terminal launcher.
"""

import pytest
from sim.mancala import MancalaSimulator
from agents.random_agent import RandomAgent
from agents.human_agent import HumanAgent
from agents.mc_agent import MonteCarloAgent
from eval.tournament import make_agent, play_match
import play_mancala


class TestMakeAgent:

    def test_known_agents(self):
        assert isinstance(make_agent('random', seed=1), RandomAgent)
        assert isinstance(make_agent('human'), HumanAgent)
        mc = make_agent('mc', mc_n=77, seed=3)
        assert isinstance(mc, MonteCarloAgent)
        assert mc.N == 77
        assert mc.name == 'mc'

    def test_kwargs_override_defaults(self):
        mc = make_agent('mc', mc_n=10, n=20, name='custom')
        assert mc.N == 20
        assert mc.name == 'custom'

    def test_unknown_agent(self):
        with pytest.raises(ValueError):
            make_agent('minimax')


class TestPlayMatch:

    def test_results_cover_every_game(self):
        sim = MancalaSimulator(seed=3)
        results = play_match(sim, ['mc', 'random'], games=4, mc_n=40)
        assert sum(results.values()) == 4
        assert set(results) <= {'mc', 'random', 'draw'}

    def test_mc_beats_random_most_of_the_time(self):
        sim = MancalaSimulator(seed=11)
        results = play_match(sim, ['mc', 'random'], games=10, mc_n=300)
        assert results['mc'] >= 7

    def test_mirror_match_reports_seats(self):
        sim = MancalaSimulator(seed=8)
        results = play_match(sim, ['random', 'random'], games=6)
        assert sum(results.values()) == 6
        assert set(results) <= {'player 1', 'player 2', 'draw'}

    def test_needs_two_agents(self):
        with pytest.raises(ValueError):
            play_match(MancalaSimulator(), ['mc'], games=1)


class TestLauncher:

    def test_computer_vs_computer(self, capsys):
        assert play_mancala.main(["--p1", "random", "--p2", "mc", "--mc-n", "20", "--seed", "4"]) == 0
        out = capsys.readouterr().out
        assert "Game over! Final board:" in out
        assert ("wins," in out) or ("Draw," in out)

    @pytest.mark.parametrize("bad", ["0", "-3", "many"])
    def test_rejects_bad_trial_count(self, bad, capsys):
        with pytest.raises(SystemExit) as info:
            play_mancala.main(["--p1", "random", "--p2", "mc", "--mc-n", bad])
        assert info.value.code == 2
        assert "--mc-n" in capsys.readouterr().err

    def test_human_moves_are_prompted(self, monkeypatch, capsys):
        monkeypatch.setattr("builtins.input", lambda prompt="": (_ for _ in ()).throw(EOFError))
        assert play_mancala.main(["--p1", "human", "--p2", "random", "--seed", "1"]) == 1
        out = capsys.readouterr().out
        assert "Please input move for player 1." in out
        assert "Game abandoned." in out
