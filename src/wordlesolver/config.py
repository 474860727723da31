from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[2]

WORD_LENGTH = 5
NPATTERNS = 3**WORD_LENGTH
STARTING_GUESS = "tares"
# Wordle allows six guesses. We allow more to keep the tail of the score distribution.
MAX_TURNS = 32

GREEN = 2
YELLOW = 1
GRAY = 0

VALID_GUESSES_URL = "https://gist.github.com/dracos/dd0668f281e685bad51479e5acaadb93/raw/6bfa15d263d6d5b63840a8e5b64e04b382fdb079/valid-wordle-words.txt"
ORIGINAL_ANSWERS_URL = "https://gist.github.com/cfreshman/a03ef2cba789d8cf00c08f767e0fad7b/raw/c46f451920d5cf6326d550fb2d6abb1642717852/wordle-answers-alphabetical.txt"
DICTIONARY_FILE = "data/dictionary.txt"
ANSWERS_FILE = "data/answers.txt"
PATTERN_CACHE_FILE = "data/pattern_cache.npy"
ENTROPY_LOG_FILE = "data/entropy_log.csv"

# wordfreq gives fractions, the dictionary file stores integer counts
FREQUENCY_SCALE = 1e9

# Fairly sharp cut-off around a raw probability of 0.000497%
SIGMOID_CONFIG = {
    'L': 1.0,
    'K': 30_000_000.0,
    'X0': 0.00000497,
}

# E[guesses left] = ln(entropy * scale + offset), found by iterative regression
STEPS_LEFT_CONFIG = {
    'scale': 3.870,
    'offset': 3.679,
}

CUTOFF_CONFIG = {
    'divisor': 3,
    'floor': 16,
    'escore_floor': 20,
}

REGRESSION_CONFIG = {
    'max_iterations': 5,
    'convergence_tolerance': 1e-2,
    'ngames': 200,
}

# Bump when the layout of DEFAULT_CONFIG changes; config files must match it
CONFIG_VERSION = 1

DEFAULT_CONFIG = {
    'version': CONFIG_VERSION,
    'paths': {
        'dictionary': DICTIONARY_FILE,
        'answers': ANSWERS_FILE,
        'pattern_cache': PATTERN_CACHE_FILE,
        'entropy_log': ENTROPY_LOG_FILE,
    },
    'game': {
        'starting_guess': STARTING_GUESS,
        'max_turns': MAX_TURNS,
    },
    'simulation': {
        'implementation': 'escore',
        'max_games': None,
        'nthreads': 1,
        'plot': None,
    },
    'sigmoid': SIGMOID_CONFIG,
    'steps_left': STEPS_LEFT_CONFIG,
    'cutoff': CUTOFF_CONFIG,
    'regression': REGRESSION_CONFIG,
}

REQUIRED_SCHEMA = {
    'version': (int, CONFIG_VERSION),
    'paths': {
        'dictionary': (str,),
        'answers': (str,),
        'pattern_cache': (str, type(None)),
        'entropy_log': (str, type(None)),
    },
    'game': {
        'starting_guess': (str,),
        'max_turns': (int,),
    },
    'simulation': {
        'implementation': (str,),
        'max_games': (int, type(None)),
        'nthreads': (int,),
        'plot': (str, type(None)),
    },
    'sigmoid': {
        'L': (int, float),
        'K': (int, float),
        'X0': (int, float),
    },
    'steps_left': {
        'scale': (int, float),
        'offset': (int, float),
    },
    'cutoff': {
        'divisor': (int,),
        'floor': (int,),
        'escore_floor': (int,),
    },
    'regression': {
        'max_iterations': (int,),
        'convergence_tolerance': (int, float),
        'ngames': (int, type(None)),
    },
}
