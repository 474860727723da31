import numpy as np

from wordlesolver.config import SIGMOID_CONFIG, STEPS_LEFT_CONFIG

def sigmoid(p: float | np.ndarray, config: dict = SIGMOID_CONFIG) -> float | np.ndarray:
    """
    Logistic squashing of raw word probabilities. Words below X0 are treated
    as effectively impossible answers, words above as roughly equally likely.
    """
    # exp overflows to inf far below the cut-off, which correctly maps to 0
    with np.errstate(over='ignore'):
        return config['L'] / (1.0 + np.exp(-config['K'] * (np.asarray(p, dtype=np.float64) - config['X0'])))

def est_steps_left(entropy: float, config: dict = STEPS_LEFT_CONFIG) -> float:
    """Estimated number of _more_ guesses needed when `entropy` bits remain."""
    return float(np.log(entropy * config['scale'] + config['offset']))

def pattern_entropy(totals: np.ndarray, total: float) -> float:
    """
    Shannon entropy in bits of the pattern distribution given by the
    per-pattern weight totals. Empty patterns are skipped.
    """
    nonzero = totals[totals > 0]
    if len(nonzero) < 2:
        return 0.0
    pxs = nonzero / total
    return max(0.0, float(-np.sum(pxs * np.log2(pxs))))

def distribution_entropy(weights: np.ndarray) -> float:
    """Entropy of the answer distribution itself, after normalising the weights."""
    weights = np.asarray(weights, dtype=np.float64)
    total = weights.sum()
    if total <= 0:
        return 0.0
    return pattern_entropy(weights, total)

def pattern_totals(pattern_ints: np.ndarray, weights: np.ndarray, npatterns: int) -> np.ndarray:
    """Running total of candidate weight per pattern bucket, in one pass."""
    return np.bincount(pattern_ints, weights=weights, minlength=npatterns)
