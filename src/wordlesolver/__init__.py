# all convience imports from backend
from .backend.patterns import (
    InvalidWordError,
    InvalidPatternError,
    Guess,
    compute_pattern,
    matches,
    pattern_str_to_int,
    pattern_to_int,
    int_to_pattern,
    pattern_to_str,
    patterns,
)
from .backend.entropy import (
    sigmoid, est_steps_left, pattern_entropy, distribution_entropy
)
from .backend.lexicon import (
    Lexicon,
    RemainingSet,
    ResourceError,
    MalformedResourceError,
    parse_dictionary,
    load_dictionary,
    parse_answers,
    load_answers,
    get_words,
    get_dictionary,
    get_answers,
)
from .backend.cache import (
    PatternCache, get_pattern_cache
)
from .backend.context import SolverContext
from .backend.strategies import (
    Guesser,
    Unoptimised,
    Weight,
    Cutoff,
    Precalc,
    Sigmoid,
    ExpectedScore,
    NoCandidatesError,
    IMPLEMENTATIONS,
    make_guesser,
)
from .backend.game import (
    Wordle, ContractViolationError
)
from .backend.simulation import (
    benchmark, plot_results
)
from .backend.regression import (
    fit_steps_left, calibrate
)
from .backend.messenger import (
    UIMessenger, ConsoleMessenger, SilentMessenger
)
from .config_loader import ConfigError, load_config

# import everything from the config
from .config import *
