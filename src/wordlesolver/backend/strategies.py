"""
Guessers that pick the next word from the candidates still consistent with
a game's history.

Every guesser belongs to exactly one game. It keeps its own remaining set,
prunes it with the history entries it has not seen yet, opens with the fixed
starting guess, and then scores candidates in lexicon order. A candidate
only replaces the current best when its goodness is strictly better, so ties
go to the word that comes first in the lexicon.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Sequence

import numpy as np

from wordlesolver.config import NPATTERNS
from wordlesolver.backend.context import SolverContext
from wordlesolver.backend.entropy import (
    pattern_entropy, pattern_totals, distribution_entropy, est_steps_left,
)
from wordlesolver.backend.lexicon import Lexicon, RemainingSet
from wordlesolver.backend.patterns import (
    Guess, compute_pattern, pattern_to_int, patterns,
)

class NoCandidatesError(RuntimeError):
    """Raised when the history rules out every word in the lexicon."""
    def __init__(self, history: Sequence[Guess]):
        self.history = list(history)
        played = ", ".join(f"{entry.word.upper()}" for entry in self.history)
        super().__init__(f"No candidate words remain after {played}.")

class Guesser(ABC):
    name: str = ""
    # Which lexicon of the context this guesser draws candidates and weights from
    lexicon_name: str = 'lexicon'
    truncated: bool = False
    floor_key: str = 'floor'

    def __init__(self, context: SolverContext):
        self.context = context
        self.lexicon: Lexicon = getattr(context, self.lexicon_name)
        self.remaining = RemainingSet(self.lexicon)
        self._applied = 0

    def guess(self, history: Sequence[Guess]) -> str:
        self._prune(history)
        if not history:
            return self.context.starting_guess
        if len(self.remaining) == 0:
            raise NoCandidatesError(history)
        self._observe(turn=len(history))
        if len(self.remaining) == 1:
            return str(self.remaining.words[0])
        return self._best(turn=len(history))

    def _prune(self, history: Sequence[Guess]) -> None:
        if len(history) < self._applied:
            raise ValueError('History shrank; a guesser must not be reused across games.')
        for entry in history[self._applied:]:
            self.remaining = self._apply(entry)
        self._applied = len(history)

    def _apply(self, entry: Guess) -> RemainingSet:
        return self.remaining.prune(entry)

    def _observe(self, turn: int) -> None:
        """Hook run once per turn after pruning, before any scoring."""
        pass

    def _limit(self) -> int:
        """How many candidates are scored this turn."""
        nremaining = len(self.remaining)
        if not self.truncated:
            return nremaining
        cutoff = self.context.config['cutoff']
        # Always score at least one candidate, whatever the floor is set to
        return min(nremaining, max(nremaining // cutoff['divisor'], cutoff[self.floor_key], 1))

    def _weights(self) -> np.ndarray:
        weights = self.remaining.weights
        if weights.sum() <= 0:
            # Every remaining word has a zero count; treat them as equally likely
            return np.ones(len(weights), dtype=np.float64)
        return weights

    def _pattern_ints(self, word: str, rank: int) -> np.ndarray:
        """Pattern int of `word` played against each remaining candidate."""
        return np.fromiter(
            (pattern_to_int(compute_pattern(str(candidate), word)) for candidate in self.remaining.words),
            dtype=np.int64, count=len(self.remaining))

    def _is_better(self, goodness: float, best: float) -> bool:
        return goodness > best

    def _best(self, turn: int) -> str:
        weights = self._weights()
        total = float(weights.sum())
        words = self.remaining.words
        ranks = self.remaining.ranks

        best_word = None
        best_goodness = None
        for i in range(self._limit()):
            word = str(words[i])
            goodness = self.goodness(word, int(ranks[i]), float(weights[i]), weights, total, turn)
            if best_goodness is None or self._is_better(goodness, best_goodness):
                best_word, best_goodness = word, goodness
        return best_word

    @abstractmethod
    def goodness(self, word: str, rank: int, weight: float, weights: np.ndarray, total: float, turn: int) -> float:
        ...

class Unoptimised(Guesser):
    """
    Maximises the entropy of the feedback pattern. For every candidate it walks
    all 243 patterns and re-checks the whole remaining set against each one.
    """
    name = "unoptimised"

    def goodness(self, word, rank, weight, weights, total, turn):
        candidates = [str(candidate) for candidate in self.remaining.words]
        entropy_sum = 0.0
        for pattern in patterns():
            # Considering a world where we did guess `word` and got `pattern`, what is left?
            hypothetical = Guess(word, pattern)
            in_pattern_total = sum(w for candidate, w in zip(candidates, weights) if hypothetical.matches(candidate))
            if in_pattern_total == 0:
                continue
            p_of_this_pattern = in_pattern_total / total
            entropy_sum += p_of_this_pattern * math.log2(p_of_this_pattern)
        return max(0.0, -entropy_sum)

class Weight(Guesser):
    """
    Frequency weighted entropy: P(word) * entropy(word). Pattern totals come
    from a single scan of the remaining set instead of one scan per pattern.
    """
    name = "weight"

    def entropy(self, word: str, rank: int, weights: np.ndarray, total: float) -> float:
        totals = pattern_totals(self._pattern_ints(word, rank), weights, NPATTERNS)
        return pattern_entropy(totals, total)

    def goodness(self, word, rank, weight, weights, total, turn):
        return (weight / total) * self.entropy(word, rank, weights, total)

class Cutoff(Weight):
    """Weighted entropy over the count-ranked lexicon, scoring only the most frequent third."""
    name = "cutoff"
    lexicon_name = 'ranked'
    truncated = True

class Precalc(Weight):
    """Weighted entropy with every pattern lookup served by the shared pattern cache."""
    name = "precalc"
    lexicon_name = 'ranked'

    def _apply(self, entry: Guess) -> RemainingSet:
        if entry.word not in self.lexicon:
            return super()._apply(entry)
        reference = pattern_to_int(entry.mask)
        row = self.context.cache.row(self.lexicon.rank(entry.word), self.remaining.ranks)
        return self.remaining.filter(row == reference)

    def _pattern_ints(self, word: str, rank: int) -> np.ndarray:
        return self.context.cache.row(rank, self.remaining.ranks)

class Sigmoid(Precalc):
    """Cached weighted entropy where word probabilities pass through the sigmoid cut-off."""
    name = "sigmoid"
    lexicon_name = 'weighted'
    truncated = True

class ExpectedScore(Sigmoid):
    """
    Minimises the expected final score instead of maximising information:

        P(w) * (turn + 1) + (1 - P(w)) * (turn + est_steps_left(H - info(w)))

    where H is the entropy left in the remaining set and info(w) the entropy
    of the feedback pattern for w.
    """
    name = "escore"
    floor_key = 'escore_floor'

    def __init__(self, context: SolverContext):
        super().__init__(context)
        # (turn, entropy left in the remaining set) for every scored turn
        self.entropy_log: list[tuple[int, float]] = []
        self._remaining_entropy = 0.0

    def _is_better(self, goodness: float, best: float) -> bool:
        return goodness < best

    def _observe(self, turn: int) -> None:
        self._remaining_entropy = distribution_entropy(self._weights())
        self.entropy_log.append((turn, self._remaining_entropy))

    def goodness(self, word, rank, weight, weights, total, turn):
        p_word = weight / total
        e_info = self.entropy(word, rank, weights, total)
        steps_left = est_steps_left(self._remaining_entropy - e_info, self.context.config['steps_left'])
        return p_word * (turn + 1) + (1 - p_word) * (turn + steps_left)

IMPLEMENTATIONS: dict[str, type[Guesser]] = {
    cls.name: cls for cls in (Unoptimised, Weight, Cutoff, Precalc, Sigmoid, ExpectedScore)
}

def make_guesser(name: str, context: SolverContext) -> Guesser:
    try:
        cls = IMPLEMENTATIONS[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown implementation '{name}'. Available: {', '.join(IMPLEMENTATIONS)}") from None
    return cls(context)
