"""
Tests for the Discord front end's argument handling and solve scheduling.
"""

import asyncio
import threading

import pytest

from bot import (
    MAX_NUMBERS,
    SolveRunner,
    SolverBusyError,
    mention_request,
    parse_challenge_args,
)


class BlockingSolver:
    """Solver whose search runs until released."""

    def __init__(self):
        self.release = threading.Event()

    def solve(self, numbers, target):
        self.release.wait(timeout=5)
        return None


class TestParseChallengeArgs:

    def test_target_then_numbers(self):
        assert parse_challenge_args("24 1 3 1 5") == (24, [1, 3, 1, 5])

    def test_commas_allowed(self):
        assert parse_challenge_args("24 1,3,1,5") == (24, [1, 3, 1, 5])

    def test_negative_values(self):
        assert parse_challenge_args("-7 6 2 3") == (-7, [6, 2, 3])

    @pytest.mark.parametrize("text", [None, "", "24"])
    def test_missing_numbers(self, text):
        with pytest.raises(ValueError, match="Usage"):
            parse_challenge_args(text)

    def test_not_integers(self):
        with pytest.raises(ValueError, match="whole numbers"):
            parse_challenge_args("24 1 three")

    def test_six_numbers_at_most(self):
        assert MAX_NUMBERS == 6
        assert parse_challenge_args("10 1 2 3 4 5 6") == (10, [1, 2, 3, 4, 5, 6])

    def test_too_many_numbers(self):
        text = "10 " + " ".join(["1"] * (MAX_NUMBERS + 1))
        with pytest.raises(ValueError, match="At most 6"):
            parse_challenge_args(text)


class TestMentionRequest:

    def test_mention_stripped(self):
        assert mention_request("<@42> 24 1 3 1 5", 42) == "24 1 3 1 5"

    def test_nickname_mention_stripped(self):
        assert mention_request("<@!42> 24 1 3 1 5", 42) == "24 1 3 1 5"

    def test_other_mentions_kept(self):
        assert mention_request("<@42> <@7> 3", 42) == "<@7> 3"

    @pytest.mark.parametrize("content", [
        "!solve 24 1 3 1 5 <@42>",
        "  !solve 24 1 3 1 5 <@42>",
    ])
    def test_command_not_answered_as_mention(self, content):
        assert mention_request(content, 42) is None

    def test_custom_prefix(self):
        assert mention_request("?solve 3 1 2 <@42>", 42, prefix='?') is None
        assert mention_request("!solve 3 1 2 <@42>", 42, prefix='?') == "!solve 3 1 2"


class TestSolveRunner:

    def test_solves(self):
        runner = SolveRunner(timeout=5)
        try:
            result = asyncio.run(runner.run([1, 2], 3))
            assert result.expression == "( 1 + 2 )"
            assert not runner.busy
            assert asyncio.run(runner.run([3, 4], 12)).expression == "( 3 * 4 )"
        finally:
            runner.shutdown()

    def test_timeout_returns_none(self):
        solver = BlockingSolver()
        runner = SolveRunner(timeout=0.05, solver=solver)
        try:
            assert asyncio.run(runner.run([1, 2], 3)) is None
        finally:
            solver.release.set()
            runner.shutdown()

    def test_busy_until_abandoned_search_finishes(self):
        solver = BlockingSolver()
        runner = SolveRunner(timeout=0.05, solver=solver)
        try:
            assert asyncio.run(runner.run([1, 2], 3)) is None
            assert runner.busy
            with pytest.raises(SolverBusyError):
                asyncio.run(runner.run([1, 2], 3))
        finally:
            solver.release.set()
            runner._pending.result(timeout=1)

        assert not runner.busy
        runner.timeout = 5
        assert asyncio.run(runner.run([1, 2], 3)).expression is None
        runner.shutdown()
