from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np
from numba import njit

from wordlesolver.config import GREEN, YELLOW, GRAY, WORD_LENGTH, NPATTERNS

class InvalidWordError(ValueError):
    """Raised when a word is not exactly five ASCII letters."""
    def __init__(self, word: object):
        self.word = word
        super().__init__(f"The word '{word}' is not a valid {WORD_LENGTH} letter word.")

class InvalidPatternError(ValueError):
    """Raised when the feedback pattern is invalid."""
    def __init__(self, pattern: object, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid pattern '{pattern}': {reason}")

def validate_word(word: object) -> str:
    if not isinstance(word, str) or len(word) != WORD_LENGTH or not (word.isascii() and word.isalpha()):
        raise InvalidWordError(word)
    return word

def compute_pattern(answer: str, guess: str) -> tuple[int, ...]:
    """Calculates the wordle pattern seen when playing `guess` against `answer`."""
    validate_word(answer)
    validate_word(guess)

    pattern = [GRAY]*WORD_LENGTH
    letter_count = {}
    # Green pass
    for i in range(WORD_LENGTH):
        if answer[i] == guess[i]:
            pattern[i] = GREEN
        else:
            # Running tally of the answer letters not consumed by a green
            letter_count[answer[i]] = letter_count.get(answer[i], 0) + 1

    # Yellow pass
    for i in range(WORD_LENGTH):
        if (pattern[i] != GREEN) and letter_count.get(guess[i], 0) > 0:
            pattern[i] = YELLOW
            letter_count[guess[i]] -= 1

    return tuple(pattern)

def pattern_str_to_int(pattern: str) -> int:
    pattern_list = []
    for c in pattern.upper():
        match c:
            case "G": pattern_list.append(GREEN)
            case "Y": pattern_list.append(YELLOW)
            case _: pattern_list.append(GRAY)

    return pattern_to_int(pattern_list)

def pattern_to_int(pattern: Sequence[int]) -> int:
    """Converts a pattern represeting a wordle pattern to a unique int"""
    if len(pattern) != WORD_LENGTH:
        raise InvalidPatternError(pattern, f"pattern must have {WORD_LENGTH} elements.")
    ret_int = 0
    for i in range(WORD_LENGTH):
        ret_int += (3**i)*pattern[i]
    return ret_int

def int_to_pattern(num: int) -> tuple[int, ...]:
    """Converts an int back to its pattern tuple"""
    if num < 0 or num >= NPATTERNS:
        raise InvalidPatternError(num, f"pattern int must be in the range [0, {NPATTERNS - 1}].")
    pattern = WORD_LENGTH*[GRAY]
    for i in range(WORD_LENGTH - 1, -1, -1):
        pattern[i], num = divmod(num, 3**i)
    return tuple(pattern)

def pattern_to_str(pattern: Sequence[int]) -> str:
    return "".join({GREEN: "G", YELLOW: "Y"}.get(mark, "-") for mark in pattern)

# Position i holds the pattern whose int is i, so the order doubles as the cache encoding
ALL_PATTERNS = tuple(int_to_pattern(i) for i in range(NPATTERNS))
WINNING_PATTERN = pattern_to_int(WORD_LENGTH*[GREEN])

def patterns() -> tuple[tuple[int, ...], ...]:
    """Every possible feedback pattern, ordered by pattern int."""
    return ALL_PATTERNS

@dataclass(frozen=True)
class Guess:
    """One history entry: the word played and the pattern it received."""
    word: str
    mask: tuple[int, ...]

    def __post_init__(self):
        mask = tuple(self.mask)
        if len(mask) != WORD_LENGTH:
            raise InvalidPatternError(self.mask, f"pattern must have {WORD_LENGTH} elements.")
        if any(mark not in (GRAY, YELLOW, GREEN) for mark in mask):
            raise InvalidPatternError(self.mask, "pattern elements must be GRAY, YELLOW or GREEN.")
        object.__setattr__(self, 'mask', mask)

    def matches(self, candidate: str) -> bool:
        # Playing `word` against `candidate` gives `mask` iff candidate is still a possible answer
        return compute_pattern(candidate, self.word) == self.mask

def matches(entry: Guess, candidate: str) -> bool:
    return entry.matches(candidate)

def encode_words(words: Sequence[str]) -> np.ndarray:
    """Packs words into a (n, 5) uint8 array of ASCII codes for the numba kernels."""
    for word in words:
        validate_word(word)
    if len(words) == 0:
        return np.zeros((0, WORD_LENGTH), dtype=np.uint8)
    buffer = "".join(words).encode('ascii')
    return np.frombuffer(buffer, dtype=np.uint8).reshape(-1, WORD_LENGTH).copy()

@njit(cache=True, nogil=True)
def pattern_index(answer: np.ndarray, guess: np.ndarray) -> np.uint8:
    """Same two pass algorithm as compute_pattern, on encoded words, returning the pattern int."""
    used = 0
    green = 0
    for i in range(5):
        if answer[i] == guess[i]:
            used |= 1 << i
            green |= 1 << i

    result = 0
    power = 1
    for i in range(5):
        if green & (1 << i):
            result += 2*power
        else:
            for j in range(5):
                if not (used & (1 << j)) and answer[j] == guess[i]:
                    used |= 1 << j
                    result += power
                    break
        power *= 3
    return np.uint8(result)
