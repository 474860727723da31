import numpy as np
import pytest
import requests

from wordlesolver.backend import lexicon as lexicon_module
from wordlesolver.backend.lexicon import (
    Lexicon, MalformedResourceError, RemainingSet, ResourceError,
    get_answers, get_dictionary, get_word_counts, get_words,
    load_dictionary, parse_answers, parse_dictionary,
)
from wordlesolver.backend.messenger import SilentMessenger
from wordlesolver.backend.patterns import Guess, compute_pattern

def test_parse_dictionary(lexicon):
    assert len(lexicon) == 12
    assert "tares" in lexicon
    assert "zzzzz" not in lexicon
    assert lexicon.rank("crane") == 1
    assert lexicon.entries()[0] == ("tares", 500)
    assert lexicon.total_count == sum(count for _, count in lexicon.entries())

def test_parse_dictionary_skips_blank_lines():
    lexicon = parse_dictionary(["tares 5", "", "  ", "crane 3\n"])
    assert list(lexicon) == ["tares", "crane"]

@pytest.mark.parametrize("line", [
    "tares",
    "tare 5",
    "TARES 5",
    "tares five",
    "tares -1",
])
def test_malformed_line_is_fatal(line):
    with pytest.raises(MalformedResourceError) as excinfo:
        parse_dictionary(["crane 3", line])
    assert excinfo.value.line_number == 2

def test_duplicate_word_is_fatal():
    with pytest.raises(MalformedResourceError):
        parse_dictionary(["crane 3", "crane 4"])

def test_empty_dictionary():
    with pytest.raises(ResourceError):
        parse_dictionary([])

def test_missing_dictionary_file(tmp_path):
    with pytest.raises(ResourceError):
        load_dictionary(tmp_path / "nope.txt")

def test_rank_unknown_word(lexicon):
    with pytest.raises(KeyError):
        lexicon.rank("zzzzz")

def test_columns_are_read_only(lexicon):
    with pytest.raises(ValueError):
        lexicon.counts[0] = 1

def test_sorted_by_frequency_breaks_ties_alphabetically(lexicon):
    ranked = lexicon.sorted_by_frequency()
    assert list(ranked)[:3] == ["tares", "crane", "right"]
    # bingo and cools share a count of 5
    assert list(ranked)[-2:] == ["bingo", "cools"]
    assert np.all(np.diff(ranked.counts) <= 0)

def test_sigmoid_weights(lexicon):
    skewed = Lexicon(["tares", "crane"], [1_000_000_000, 1])
    weights = skewed.with_sigmoid_weights().weights
    assert weights[0] == pytest.approx(1.0)
    assert weights[1] == pytest.approx(0.0, abs=1e-6)
    # Counts are untouched
    assert list(skewed.with_sigmoid_weights().counts) == [1_000_000_000, 1]

def test_remaining_set_borrows_then_owns(lexicon):
    remaining = lexicon.remaining()
    assert not remaining.is_owned
    assert remaining.ranks is lexicon.ranks

    pruned = remaining.prune(Guess("tares", compute_pattern("crane", "tares")))
    assert pruned.is_owned
    assert "crane" in pruned
    assert "tares" not in pruned
    assert len(remaining) == len(lexicon)

def test_remaining_set_iteration(lexicon):
    remaining = RemainingSet(lexicon, np.array([1, 3], dtype=np.int64))
    assert list(remaining) == [("crane", 300.0, 1), ("wrong", 100.0, 3)]
    assert remaining.total_weight() == 400.0

def test_filter_rejects_wrong_length(lexicon):
    with pytest.raises(ValueError):
        lexicon.remaining().filter(np.ones(3, dtype=bool))

def test_parse_answers():
    assert parse_answers("crane level\nSCOOP\n") == ["crane", "level", "scoop"]
    with pytest.raises(MalformedResourceError):
        parse_answers("crane\nlevels\n")

class FakeResponse:
    def __init__(self, text, status=200):
        self.text = text
        self.status = status

    def raise_for_status(self):
        if self.status != 200:
            raise requests.exceptions.HTTPError(f"{self.status} error")

def test_get_words(monkeypatch):
    monkeypatch.setattr(lexicon_module.requests, "get",
                        lambda url, timeout: FakeResponse("tares\ncrane\nlevels\nAbCdE\n\nscoop\n"))
    assert get_words("http://example.com", SilentMessenger()) == ["tares", "crane", "scoop"]

def test_get_words_failure(monkeypatch):
    monkeypatch.setattr(lexicon_module.requests, "get", lambda url, timeout: FakeResponse("", status=404))
    with pytest.raises(ResourceError):
        get_words("http://example.com", SilentMessenger())

def test_get_word_counts():
    counts = get_word_counts(["about", "zzzzq"])
    assert counts[1] == 1
    assert counts[0] > counts[1]

def test_get_dictionary_from_file(tmp_path):
    path = tmp_path / "dictionary.txt"
    path.write_text("tares 5\ncrane 3\n")
    lexicon = get_dictionary(savefile=str(path), messenger=SilentMessenger())
    assert list(lexicon) == ["tares", "crane"]

def test_get_dictionary_builds_missing_file(tmp_path, monkeypatch):
    path = tmp_path / "data" / "dictionary.txt"
    monkeypatch.setattr(lexicon_module, "get_words", lambda url, messenger: ["tares", "crane"])
    monkeypatch.setattr(lexicon_module, "get_word_counts", lambda words: np.array([7, 3]))
    lexicon = get_dictionary(savefile=str(path), messenger=SilentMessenger())
    assert lexicon.entries() == [("tares", 7), ("crane", 3)]
    assert path.read_text().splitlines() == ["tares 7", "crane 3"]

def test_get_answers_downloads_and_saves(tmp_path, monkeypatch):
    path = tmp_path / "answers.txt"
    monkeypatch.setattr(lexicon_module, "get_words", lambda url, messenger: ["crane", "level"])
    assert get_answers(savefile=str(path), messenger=SilentMessenger()) == ["crane", "level"]
    assert get_answers(savefile=str(path), messenger=SilentMessenger()) == ["crane", "level"]
