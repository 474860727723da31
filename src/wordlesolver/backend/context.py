from __future__ import annotations

import copy
from dataclasses import dataclass

from wordlesolver.config import DEFAULT_CONFIG
from wordlesolver.backend.cache import PatternCache
from wordlesolver.backend.lexicon import Lexicon

@dataclass(frozen=True)
class SolverContext:
    """
    Everything shared by the guessers of one run. Built once, then handed to
    every guesser by reference; none of it is mutated after construction
    except the write-once cells of the pattern cache.

    lexicon:  dictionary in file order, weighted by raw counts
    ranked:   dictionary sorted by descending count, weighted by raw counts
    weighted: same order as `ranked`, weighted by sigmoid plausibility
    cache:    pattern cache addressed by `ranked` order
    """
    lexicon: Lexicon
    ranked: Lexicon
    weighted: Lexicon
    cache: PatternCache
    config: dict

    @classmethod
    def create(cls, lexicon: Lexicon, config: dict | None = None, cache: PatternCache | None = None) -> SolverContext:
        config = copy.deepcopy(DEFAULT_CONFIG if config is None else config)
        ranked = lexicon.sorted_by_frequency()
        weighted = ranked.with_sigmoid_weights(config['sigmoid'])
        if cache is None:
            cache = PatternCache(ranked)
        elif list(cache.lexicon) != list(ranked):
            raise ValueError('Pattern cache must be built over the frequency ranked lexicon.')
        return cls(lexicon=lexicon, ranked=ranked, weighted=weighted, cache=cache, config=config)

    @property
    def starting_guess(self) -> str:
        return self.config['game']['starting_guess']

    def with_config(self, config: dict) -> SolverContext:
        """Same lexicons and cache, different tuning constants."""
        weighted = self.ranked.with_sigmoid_weights(config['sigmoid'])
        return SolverContext(lexicon=self.lexicon, ranked=self.ranked, weighted=weighted, cache=self.cache, config=config)
