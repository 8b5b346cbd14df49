"""
Tests for the command line entry point.
"""

import pytest

from main import main


@pytest.fixture(autouse=True)
def no_puzzle_override(monkeypatch):
    monkeypatch.delenv('PUZZLES_PATH', raising=False)


class TestMain:

    def test_default_preset(self, capsys):
        assert main([]) == 0
        out = capsys.readouterr().out.splitlines()
        assert out[0] == "Target: 24,  Numbers: 1 3 1 5 "
        assert out[1].startswith("Solving...") and out[1].endswith(" us")
        assert out[2] == "Solved: ( ( 1 + 3 ) * ( 1 + 5 ) ) = 24"

    def test_numbers_from_arguments(self, capsys):
        assert main(["3", "6", "2"]) == 0
        assert "Solved: ( 6 / 2 ) = 3" in capsys.readouterr().out

    def test_no_solution(self, capsys):
        assert main(["5", "1", "1"]) == 1
        assert capsys.readouterr().out.splitlines()[-1] == "No solution found"

    def test_named_preset(self, capsys):
        assert main(["--preset", "zero"]) == 0
        assert "Solved: ( 0 * 2 ) = 0" in capsys.readouterr().out

    def test_unknown_preset(self):
        assert main(["--preset", "nope"]) == 1

    def test_target_without_numbers(self):
        assert main(["24"]) == 2

    def test_preset_without_numbers(self, monkeypatch, tmp_path):
        path = tmp_path / "puzzles.yaml"
        path.write_text("default:\n  numbers: []\n  target: 3\n")
        monkeypatch.setenv('PUZZLES_PATH', str(path))
        assert main([]) == 1
