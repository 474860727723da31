import copy

import pytest

from wordlesolver.backend.context import SolverContext
from wordlesolver.backend.game import Wordle
from wordlesolver.backend.lexicon import parse_dictionary
from wordlesolver.backend.patterns import GREEN, YELLOW, Guess, compute_pattern
from wordlesolver.backend.strategies import (
    IMPLEMENTATIONS, Cutoff, ExpectedScore, NoCandidatesError, make_guesser,
)

NAMES = sorted(IMPLEMENTATIONS)

@pytest.mark.parametrize("name", NAMES)
def test_opens_with_starting_guess(context, name):
    assert make_guesser(name, context).guess([]) == "tares"

@pytest.mark.parametrize("name", NAMES)
def test_single_candidate_is_played(context, name):
    history = [Guess("tares", compute_pattern("crane", "tares"))]
    assert make_guesser(name, context).guess(history) == "crane"

@pytest.mark.parametrize("name", NAMES)
def test_solves_every_word(context, name):
    game = Wordle(context.lexicon)
    for answer in context.lexicon:
        score = game.play(answer, make_guesser(name, context))
        assert score is not None
        assert 1 <= score <= len(context.lexicon) + 1

@pytest.mark.parametrize("name", NAMES)
def test_pruning_never_drops_answer(context, name):
    answer = "level"
    guesser = make_guesser(name, context)
    sizes = []

    def watched(history):
        word = guesser.guess(history)
        assert answer in guesser.remaining
        sizes.append(len(guesser.remaining))
        return word

    assert Wordle(context.lexicon).play(answer, watched) is not None
    assert sizes == sorted(sizes, reverse=True)

@pytest.mark.parametrize("name,expected", [
    ("unoptimised", "hound"),
    ("weight", "hound"),
    ("cutoff", "bingo"),
    ("precalc", "bingo"),
    ("sigmoid", "bingo"),
    ("escore", "bingo"),
])
def test_ties_go_to_first_word_in_lexicon_order(name, expected):
    # hound and bingo share a count, so the ranked lexicon orders them alphabetically
    context = SolverContext.create(parse_dictionary(["tares 10", "hound 5", "bingo 5"]))
    history = [Guess("tares", (0, 0, 0, 0, 0))]
    assert make_guesser(name, context).guess(history) == expected

@pytest.mark.parametrize("name", NAMES)
def test_no_candidates(context, name):
    history = [Guess("tares", (GREEN, GREEN, GREEN, GREEN, YELLOW))]
    with pytest.raises(NoCandidatesError):
        make_guesser(name, context).guess(history)

def test_guesser_cannot_be_reused(context):
    guesser = make_guesser("weight", context)
    history = [Guess("tares", compute_pattern("level", "tares"))]
    second = guesser.guess(history)
    history.append(Guess(second, compute_pattern("level", second)))
    guesser.guess(history)
    with pytest.raises(ValueError):
        guesser.guess(history[:1])

def test_cutoff_truncation(context):
    config = copy.deepcopy(context.config)
    config['cutoff']['floor'] = 2
    guesser = Cutoff(context.with_config(config))
    assert guesser._limit() == len(context.lexicon) // 3

    assert Cutoff(context)._limit() == len(context.lexicon)

@pytest.mark.parametrize("name", ["cutoff", "sigmoid"])
def test_zero_floor_still_scores_a_candidate(name):
    context = SolverContext.create(parse_dictionary(["tares 10", "hound 5", "bingo 5"]))
    config = copy.deepcopy(context.config)
    config['cutoff']['floor'] = 0
    guesser = make_guesser(name, context.with_config(config))
    assert guesser.guess([Guess("tares", (0, 0, 0, 0, 0))]) == "bingo"
    assert guesser._limit() == 1

def test_expected_score_logs_entropy(context):
    guesser = ExpectedScore(context)
    score = Wordle(context.lexicon).play("belle", guesser)
    turns = [turn for turn, _ in guesser.entropy_log]
    assert len(guesser.entropy_log) == score - 1
    assert turns == list(range(1, score))
    assert all(entropy >= 0 for _, entropy in guesser.entropy_log)

def test_precalc_fills_shared_cache(context):
    assert not context.cache.allocated
    Wordle(context.lexicon).play("scoop", make_guesser("precalc", context))
    assert context.cache.nentries() > 0

@pytest.mark.parametrize("name", ["Weight", "ESCORE"])
def test_make_guesser_is_case_insensitive(context, name):
    assert make_guesser(name, context).name == name.lower()

def test_make_guesser_unknown(context):
    with pytest.raises(ValueError):
        make_guesser("minimax", context)
