import pytest

from wordlesolver.config import MAX_TURNS
from wordlesolver.backend.game import ContractViolationError, Wordle
from wordlesolver.backend.patterns import compute_pattern

WORDS = ["right", "wrong"]

def test_right_first_turn():
    assert Wordle(WORDS).play("right", lambda history: "right") == 1

def test_right_second_turn():
    def guesser(history):
        return "right" if history else "wrong"
    assert Wordle(WORDS).play("right", guesser) == 2

@pytest.mark.parametrize("turn", [3, 4, 5, 6])
def test_right_on_later_turn(turn):
    def guesser(history):
        return "right" if len(history) == turn - 1 else "wrong"
    assert Wordle(WORDS).play("right", guesser) == turn

def test_wrong_forever_is_exhausted():
    calls = []

    def guesser(history):
        calls.append(len(history))
        return "wrong"

    assert Wordle(WORDS).play("right", guesser) is None
    assert len(calls) == MAX_TURNS

def test_history_carries_true_patterns():
    seen = []

    def guesser(history):
        seen.append(list(history))
        return "right" if history else "wrong"

    Wordle(WORDS).play("right", guesser)
    assert seen[1][0].word == "wrong"
    assert seen[1][0].mask == compute_pattern("right", "wrong")

def test_guess_outside_dictionary():
    with pytest.raises(ContractViolationError, match="isn't in the dictionary"):
        Wordle(WORDS).play("right", lambda history: "tares")

def test_object_guesser():
    class Fixed:
        def guess(self, history):
            return "wrong"

    assert Wordle(WORDS, max_turns=3).play("wrong", Fixed()) == 1
    assert Wordle(WORDS, max_turns=3).play("right", Fixed()) is None
