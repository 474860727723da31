import pytest

from wordlesolver.backend.context import SolverContext
from wordlesolver.backend.lexicon import parse_dictionary

DICTIONARY_LINES = [
    "tares 500",
    "crane 300",
    "right 200",
    "wrong 100",
    "raise 70",
    "lemon 80",
    "stare 60",
    "level 50",
    "scoop 40",
    "belle 10",
    "cools 5",
    "bingo 5",
]

ANSWERS = ["crane", "level", "scoop", "right", "wrong", "tares", "belle", "stare"]

class RecordingMessenger:
    def __init__(self):
        self.messages = []
        self.progress = []

    def log(self, message):
        self.messages.append(message)

    def start_progress(self, total, desc=""):
        self.progress.append(('start', total))

    def update_progress(self, advance=1):
        self.progress.append(('update', advance))

    def stop_progress(self):
        self.progress.append(('stop', None))

@pytest.fixture
def lexicon():
    return parse_dictionary(DICTIONARY_LINES)

@pytest.fixture
def context(lexicon):
    return SolverContext.create(lexicon)

@pytest.fixture
def answers():
    return list(ANSWERS)

@pytest.fixture
def messenger():
    return RecordingMessenger()
