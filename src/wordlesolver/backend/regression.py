"""
Fits the estimator used by the expected-score guesser,

    E[guesses left] = ln(entropy * scale + offset)

by iterative regression: simulate with the current constants while logging
the entropy left before each scored turn together with the guesses that
turned out to be needed, regress, and re-simulate with the new constants
until they stop moving.
"""

from __future__ import annotations

import copy
import os
from typing import Sequence

import numpy as np
import pandas as pd
from sklearn.linear_model import LinearRegression

from wordlesolver.config import REGRESSION_CONFIG
from wordlesolver.backend.context import SolverContext
from wordlesolver.backend.messenger import UIMessenger, ConsoleMessenger, SilentMessenger
from wordlesolver.backend.simulation import benchmark

def fit_steps_left(entropy_log: pd.DataFrame) -> dict:
    """
    Least squares fit of exp(steps_left) = entropy * scale + offset, which is
    the logarithmic model with the log moved to the other side.
    """
    if entropy_log is None or entropy_log['entropy'].nunique() < 2:
        raise ValueError("Need observations at two or more distinct entropies to fit the estimator.")

    X = entropy_log[['entropy']].to_numpy(dtype=np.float64)
    y = np.exp(entropy_log['steps_left'].to_numpy(dtype=np.float64))
    model = LinearRegression().fit(X, y)

    scale = float(model.coef_[0])
    offset = float(model.intercept_)
    if offset <= 0:
        raise ValueError(f"Fitted offset {offset:.4f} is not positive; ln() would be undefined at zero entropy.")
    return {'scale': scale, 'offset': offset}

def calibrate(context: SolverContext,
              answers: Sequence[str],
              ngames: int | None = REGRESSION_CONFIG['ngames'],
              max_iterations: int = REGRESSION_CONFIG['max_iterations'],
              tolerance: float = REGRESSION_CONFIG['convergence_tolerance'],
              nthreads: int = 1,
              messenger: UIMessenger | None = None) -> dict:
    """Repeats simulate -> regress until the fitted constants converge."""
    messenger = messenger or ConsoleMessenger()
    config = copy.deepcopy(context.config)
    iterations = []
    converged = False

    for i in range(max_iterations):
        messenger.log(f"--- Calibration Iteration {i+1}/{max_iterations} ---")
        results = benchmark(context.with_config(config), 'escore', answers,
                            ngames=ngames, nthreads=nthreads,
                            messenger=SilentMessenger(), log_entropy=True)
        fitted = fit_steps_left(results['entropy_log'])

        previous = config['steps_left']
        change = abs(fitted['scale'] - previous['scale']) + abs(fitted['offset'] - previous['offset'])
        iterations.append({'iteration': i + 1, 'average': results['average'], 'change': change, **fitted})
        messenger.log(f"Average score: {results['average']:.4f}")
        messenger.log(f"E[guesses] = ln(entropy * {fitted['scale']:.4f} + {fitted['offset']:.4f})")
        messenger.log(f"Total change in constants: {change:.4f}")

        config['steps_left'] = fitted
        if change < tolerance:
            messenger.log("Convergence reached.")
            converged = True
            break

    return {'steps_left': config['steps_left'],
            'iterations': pd.DataFrame(iterations),
            'converged': converged}

def save_entropy_log(entropy_log: pd.DataFrame, savefile: str | os.PathLike) -> None:
    os.makedirs(os.path.dirname(os.path.abspath(savefile)), exist_ok=True)
    entropy_log.to_csv(savefile, index=False)

def load_entropy_log(savefile: str | os.PathLike) -> pd.DataFrame:
    return pd.read_csv(savefile)
