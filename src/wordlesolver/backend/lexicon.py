from __future__ import annotations

import os
from typing import Callable, Iterable, Iterator

import numpy as np
import requests
import wordfreq

from wordlesolver.config import (
    WORD_LENGTH, SIGMOID_CONFIG, FREQUENCY_SCALE,
    DICTIONARY_FILE, ANSWERS_FILE, VALID_GUESSES_URL, ORIGINAL_ANSWERS_URL,
)
from wordlesolver.config_loader import get_abs_path
from wordlesolver.backend.entropy import sigmoid
from wordlesolver.backend.messenger import UIMessenger, ConsoleMessenger
from wordlesolver.backend.patterns import Guess, encode_words

class ResourceError(Exception):
    """Raised when a word resource cannot be read, fetched or used."""
    pass

class MalformedResourceError(ResourceError):
    """Raised when a line of a word resource does not have the expected shape."""
    def __init__(self, source: str, line_number: int, line: str, reason: str):
        self.source = source
        self.line_number = line_number
        self.line = line
        self.reason = reason
        super().__init__(f"{source}:{line_number}: {reason} (got '{line}')")

def _is_resource_word(word: str) -> bool:
    return len(word) == WORD_LENGTH and word.isascii() and word.isalpha() and word.islower()

class Lexicon:
    """
    An immutable, frequency annotated word list.

    Words, counts and weights are stored as read-only numpy columns. The rank
    of a word is its row index, which is what the pattern cache is addressed by.
    Weights default to the raw counts; derived lexicons may swap in other
    weights (e.g. sigmoid plausibilities) without touching the counts.
    """
    def __init__(self, words: Iterable[str], counts: Iterable[int], weights: Iterable[float] | None = None):
        words = [str(word) for word in words]
        self.words = np.array(words, dtype=f'<U{WORD_LENGTH}')
        self.counts = np.array(list(counts), dtype=np.int64)
        if len(self.words) != len(self.counts):
            raise ValueError(f'Got {len(self.words)} words but {len(self.counts)} counts.')
        if weights is None:
            self.weights = self.counts.astype(np.float64)
        else:
            self.weights = np.array(list(weights), dtype=np.float64)
            if len(self.weights) != len(self.words):
                raise ValueError(f'Got {len(self.words)} words but {len(self.weights)} weights.')

        self._index = {word: rank for rank, word in enumerate(words)}
        if len(self._index) != len(words):
            raise ValueError('Lexicon words must be unique.')

        self.ranks = np.arange(len(words), dtype=np.int64)
        self.codes = encode_words(words)
        for column in (self.words, self.counts, self.weights, self.ranks, self.codes):
            column.setflags(write=False)

    @classmethod
    def from_entries(cls, entries: Iterable[tuple[str, int]]) -> Lexicon:
        entries = list(entries)
        return cls([word for word, _ in entries], [count for _, count in entries])

    def __len__(self) -> int:
        return len(self.words)

    def __contains__(self, word: object) -> bool:
        return word in self._index

    def __iter__(self) -> Iterator[str]:
        return (str(word) for word in self.words)

    def entries(self) -> list[tuple[str, int]]:
        return [(str(word), int(count)) for word, count in zip(self.words, self.counts)]

    def rank(self, word: str) -> int:
        try:
            return self._index[word]
        except KeyError:
            raise KeyError(f"'{word}' is not in the lexicon") from None

    @property
    def total_count(self) -> int:
        return int(self.counts.sum())

    def probabilities(self) -> np.ndarray:
        """Raw frequency fraction of every word."""
        total = self.total_count
        if total == 0:
            return np.zeros(len(self), dtype=np.float64)
        return self.counts / total

    def sorted_by_frequency(self) -> Lexicon:
        """Copy ordered by descending count, alphabetical among equal counts."""
        order = sorted(range(len(self)), key=lambda i: (-self.counts[i], self.words[i]))
        return Lexicon(self.words[order], self.counts[order], self.weights[order])

    def with_weights(self, weights: Iterable[float]) -> Lexicon:
        return Lexicon(self.words, self.counts, weights)

    def with_sigmoid_weights(self, config: dict = SIGMOID_CONFIG) -> Lexicon:
        return self.with_weights(sigmoid(self.probabilities(), config))

    def remaining(self) -> RemainingSet:
        return RemainingSet(self)

class RemainingSet:
    """
    The candidate answers still consistent with a game's history.

    Starts as a borrowed view of the lexicon's read-only rank column; every
    prune materialises a new owned rank array, so the lexicon is never touched.
    """
    def __init__(self, lexicon: Lexicon, ranks: np.ndarray | None = None):
        self.lexicon = lexicon
        if ranks is None:
            self.ranks = lexicon.ranks
            self.is_owned = False
        else:
            self.ranks = ranks
            self.is_owned = True

    def __len__(self) -> int:
        return len(self.ranks)

    def __iter__(self) -> Iterator[tuple[str, float, int]]:
        for rank in self.ranks:
            yield str(self.lexicon.words[rank]), float(self.lexicon.weights[rank]), int(rank)

    def __contains__(self, word: object) -> bool:
        return word in self.lexicon and bool(np.any(self.ranks == self.lexicon.rank(word)))

    @property
    def words(self) -> np.ndarray:
        return self.lexicon.words[self.ranks]

    @property
    def weights(self) -> np.ndarray:
        return self.lexicon.weights[self.ranks]

    def total_weight(self) -> float:
        return float(self.weights.sum())

    def filter(self, keep: np.ndarray) -> RemainingSet:
        keep = np.asarray(keep, dtype=bool)
        if len(keep) != len(self):
            raise ValueError(f'Keep mask has {len(keep)} entries for {len(self)} candidates.')
        return RemainingSet(self.lexicon, self.ranks[keep])

    def retain(self, predicate: Callable[[str], bool]) -> RemainingSet:
        keep = np.fromiter((predicate(str(word)) for word in self.words), dtype=bool, count=len(self))
        return self.filter(keep)

    def prune(self, entry: Guess) -> RemainingSet:
        return self.retain(entry.matches)

# --- Resource loading ---

def parse_dictionary(lines: Iterable[str], source: str = "<dictionary>") -> Lexicon:
    """Parses "<word> <count>" lines. Any malformed line is fatal."""
    entries = []
    seen = set()
    for line_number, raw_line in enumerate(lines, start=1):
        line = raw_line.strip()
        if not line:
            continue
        word, separator, count_str = line.partition(' ')
        if not separator:
            raise MalformedResourceError(source, line_number, line, "every line must be a word and a count")
        if not _is_resource_word(word):
            raise MalformedResourceError(source, line_number, line, f"word must be {WORD_LENGTH} lowercase ASCII letters")
        try:
            count = int(count_str)
        except ValueError:
            raise MalformedResourceError(source, line_number, line, "count must be an integer") from None
        if count < 0:
            raise MalformedResourceError(source, line_number, line, "count must not be negative")
        if word in seen:
            raise MalformedResourceError(source, line_number, line, "duplicate word")
        seen.add(word)
        entries.append((word, count))

    if not entries:
        raise ResourceError(f"No dictionary entries found in {source}")
    return Lexicon.from_entries(entries)

def load_dictionary(path: str | os.PathLike) -> Lexicon:
    if not os.path.exists(path):
        raise ResourceError(f"Dictionary file not found at {path}")
    with open(path, 'r', encoding='ascii', errors='replace') as f:
        return parse_dictionary(f, source=str(path))

def parse_answers(text: str, source: str = "<answers>") -> list[str]:
    answers = []
    for line_number, line in enumerate(text.splitlines(), start=1):
        for word in line.split():
            word = word.lower()
            if not _is_resource_word(word):
                raise MalformedResourceError(source, line_number, line.strip(), f"answers must be {WORD_LENGTH} ASCII letters")
            answers.append(word)
    return answers

def load_answers(path: str | os.PathLike) -> list[str]:
    if not os.path.exists(path):
        raise ResourceError(f"Answers file not found at {path}")
    with open(path, 'r', encoding='ascii', errors='replace') as f:
        return parse_answers(f.read(), source=str(path))

def get_words(url: str, messenger: UIMessenger | None = None) -> list[str]:
    """Fetches a plain word list from the web, keeping lowercase 5 letter ASCII words."""
    messenger = messenger or ConsoleMessenger()
    messenger.log(f"Fetching word list from {url}")
    try:
        response = requests.get(url, timeout=30)
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        raise ResourceError(f"Error downloading the word list: {e}") from e

    return [word.strip() for word in response.text.splitlines() if _is_resource_word(word.strip())]

def get_word_counts(words: Iterable[str]) -> np.ndarray:
    """Integer frequency counts for words, from wordfreq's English frequencies."""
    return np.array([max(1, round(wordfreq.word_frequency(word, 'en') * FREQUENCY_SCALE)) for word in words], dtype=np.int64)

def build_dictionary(words: Iterable[str], savefile: str | os.PathLike | None = None) -> Lexicon:
    words = list(dict.fromkeys(words))
    lexicon = Lexicon(words, get_word_counts(words))
    if savefile:
        os.makedirs(os.path.dirname(os.path.abspath(savefile)), exist_ok=True)
        with open(savefile, 'w', encoding='ascii') as f:
            f.write('\n'.join(f"{word} {count}" for word, count in lexicon.entries()) + '\n')
    return lexicon

def get_dictionary(savefile: str = DICTIONARY_FILE,
                   url: str = VALID_GUESSES_URL,
                   refetch: bool = False,
                   messenger: UIMessenger | None = None) -> Lexicon:
    """Loads the dictionary from file, building it from a downloaded word list when missing."""
    messenger = messenger or ConsoleMessenger()
    path = get_abs_path(savefile)
    if not refetch and path.exists():
        messenger.log(f"Loading dictionary from {path}")
        return load_dictionary(path)

    messenger.log("No dictionary file exists or refetching requested, building it from the web")
    lexicon = build_dictionary(get_words(url, messenger), savefile=path)
    messenger.log(f"Saved {len(lexicon)} dictionary entries to {path}")
    return lexicon

def get_answers(savefile: str = ANSWERS_FILE,
                url: str = ORIGINAL_ANSWERS_URL,
                refetch: bool = False,
                messenger: UIMessenger | None = None) -> list[str]:
    """Loads the evaluation answers from file, downloading them when missing."""
    messenger = messenger or ConsoleMessenger()
    path = get_abs_path(savefile)
    if not refetch and path.exists():
        messenger.log(f"Loading answers from {path}")
        return load_answers(path)

    messenger.log("No answers file exists or refetching requested, fetching from the web")
    answers = get_words(url, messenger)
    os.makedirs(path.parent, exist_ok=True)
    with open(path, 'w', encoding='ascii') as f:
        f.write('\n'.join(answers))
    return answers
