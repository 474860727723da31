from __future__ import annotations

from typing import Callable, Iterable, Protocol, Sequence, Union

from wordlesolver.config import MAX_TURNS
from wordlesolver.backend.patterns import Guess, compute_pattern

class ContractViolationError(RuntimeError):
    """Raised when a guesser plays a word that is not in the dictionary."""
    def __init__(self, word: object):
        self.word = word
        super().__init__(f"guess '{word}' isn't in the dictionary")

class SupportsGuess(Protocol):
    def guess(self, history: Sequence[Guess]) -> str:
        ...

GuesserLike = Union[SupportsGuess, Callable[[Sequence[Guess]], str]]

class Wordle:
    """Referee for simulated games over a fixed dictionary."""
    def __init__(self, words: Iterable[str], max_turns: int = MAX_TURNS):
        self.dictionary = frozenset(str(word) for word in words)
        self.max_turns = max_turns

    def play(self, answer: str, guesser: GuesserLike) -> int | None:
        """
        Plays one game and returns the number of guesses it took, or None if
        the turn ceiling was reached without finding the answer.
        """
        guess_fn = getattr(guesser, 'guess', guesser)
        history: list[Guess] = []
        for turn in range(1, self.max_turns + 1):
            guess = guess_fn(history)
            if guess not in self.dictionary:
                raise ContractViolationError(guess)
            if guess == answer:
                return turn
            history.append(Guess(guess, compute_pattern(answer, guess)))
        return None
