from __future__ import annotations

import os
import threading

import numpy as np
from numba import njit

from wordlesolver.backend.lexicon import Lexicon, ResourceError
from wordlesolver.backend.messenger import UIMessenger, ConsoleMessenger
from wordlesolver.backend.patterns import pattern_index

# Sentinel for a cell that has not been computed yet. Real pattern ints stop at 242.
EMPTY = 255

@njit(cache=True, nogil=True)
def fill_row(table: np.ndarray, codes: np.ndarray, guess_rank: int, candidate_ranks: np.ndarray) -> np.ndarray:
    """
    Returns the pattern ints for one guess against the given candidates,
    computing and storing any cells that are still empty. Every writer stores
    the same deterministic value, so concurrent fills need no locking.
    """
    row = table[guess_rank]
    guess = codes[guess_rank]
    out = np.empty(len(candidate_ranks), dtype=np.uint8)
    for k in range(len(candidate_ranks)):
        candidate_rank = candidate_ranks[k]
        value = row[candidate_rank]
        if value == EMPTY:
            value = pattern_index(codes[candidate_rank], guess)
            row[candidate_rank] = value
        out[k] = value
    return out

@njit(cache=True, nogil=True)
def fill_rows(table: np.ndarray, codes: np.ndarray, start: int, stop: int) -> None:
    ncandidates = table.shape[1]
    for guess_rank in range(start, stop):
        for candidate_rank in range(ncandidates):
            if table[guess_rank, candidate_rank] == EMPTY:
                table[guess_rank, candidate_rank] = pattern_index(codes[candidate_rank], codes[guess_rank])

class PatternCache:
    """
    Lazily filled (guess rank, candidate rank) -> pattern int table over one lexicon.

    The square uint8 table is only allocated on first use. Cells are written
    once and never change afterwards, so the cache can be shared by every game
    in a process, including games running on different threads.
    """
    def __init__(self, lexicon: Lexicon, table: np.ndarray | None = None):
        self.lexicon = lexicon
        if table is not None and table.shape != (len(lexicon), len(lexicon)):
            raise ResourceError(f'Pattern cache must be shape {(len(lexicon), len(lexicon))}. Got shape {table.shape}.')
        self._table = table
        self._lock = threading.Lock()

    @property
    def dimension(self) -> int:
        return len(self.lexicon)

    @property
    def allocated(self) -> bool:
        return self._table is not None

    @property
    def table(self) -> np.ndarray:
        if self._table is None:
            with self._lock:
                if self._table is None:
                    self._table = np.full((self.dimension, self.dimension), EMPTY, dtype=np.uint8)
        return self._table

    def row(self, guess_rank: int, candidate_ranks: np.ndarray) -> np.ndarray:
        candidate_ranks = np.asarray(candidate_ranks, dtype=np.int64)
        return fill_row(self.table, self.lexicon.codes, guess_rank, candidate_ranks)

    def get(self, guess_rank: int, candidate_rank: int) -> int:
        return int(self.row(guess_rank, np.array([candidate_rank], dtype=np.int64))[0])

    def is_filled(self, guess_rank: int, candidate_rank: int) -> bool:
        return self.allocated and self._table[guess_rank, candidate_rank] != EMPTY

    def nentries(self) -> int:
        if not self.allocated:
            return 0
        return int(np.count_nonzero(self._table != EMPTY))

    def precompute(self, messenger: UIMessenger | None = None, chunk_size: int = 256) -> None:
        """Fills every cell of the table."""
        messenger = messenger or ConsoleMessenger()
        table = self.table
        messenger.start_progress(total=self.dimension, desc="Building Pattern Cache")
        try:
            for start in range(0, self.dimension, chunk_size):
                stop = min(start + chunk_size, self.dimension)
                fill_rows(table, self.lexicon.codes, start, stop)
                messenger.update_progress(stop - start)
        finally:
            messenger.stop_progress()

    def save(self, savefile: str | os.PathLike) -> None:
        os.makedirs(os.path.dirname(os.path.abspath(savefile)), exist_ok=True)
        np.save(savefile, self.table)

    @classmethod
    def load(cls, lexicon: Lexicon, savefile: str | os.PathLike) -> PatternCache:
        if not os.path.exists(savefile):
            raise ResourceError(f"Pattern cache file not found at {savefile}")
        table = np.load(savefile)
        if table.dtype != np.uint8:
            raise ResourceError(f'Pattern cache must be uint8. Got {table.dtype}.')
        return cls(lexicon, np.ascontiguousarray(table))

def get_pattern_cache(lexicon: Lexicon,
                      savefile: str | os.PathLike,
                      recompute: bool = False,
                      save: bool = True,
                      messenger: UIMessenger | None = None) -> PatternCache:
    """Retrieves a full pattern cache from file if it exists, otherwise builds it and saves it."""
    messenger = messenger or ConsoleMessenger()
    if not recompute and os.path.exists(savefile):
        messenger.log("Fetching pattern cache from file")
        return PatternCache.load(lexicon, savefile)

    messenger.log("No pattern cache file found or recompute requested")
    cache = PatternCache(lexicon)
    cache.precompute(messenger)
    if save:
        messenger.log("Saving pattern cache to file")
        cache.save(savefile)
    return cache
