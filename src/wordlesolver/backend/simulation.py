from __future__ import annotations

import os
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from wordlesolver.backend.context import SolverContext
from wordlesolver.backend.game import Wordle
from wordlesolver.backend.lexicon import ResourceError
from wordlesolver.backend.messenger import UIMessenger, ConsoleMessenger
from wordlesolver.backend.strategies import make_guesser

def benchmark(context: SolverContext,
              implementation: str,
              answers: Sequence[str],
              ngames: int | None = None,
              nthreads: int = 1,
              messenger: UIMessenger | None = None,
              plot: str | os.PathLike | None = None,
              log_entropy: bool = False) -> dict:
    """
    Plays one game per answer with a fresh guesser each time and reports the
    score of every game plus the average over the solved ones. Games that hit
    the turn ceiling are reported as failures and left out of the average.
    """
    start_time = time.time()
    messenger = messenger or ConsoleMessenger()
    game = Wordle(context.lexicon, max_turns=context.config['game']['max_turns'])

    missing = [answer for answer in answers if answer not in game.dictionary]
    if missing:
        raise ResourceError(f"{len(missing)} answers are not in the dictionary, e.g. {', '.join(missing[:5])}")

    if ngames is None or ngames == -1:
        ngames = len(answers)
    else:
        ngames = min(len(answers), ngames)

    game_answers = list(answers[:ngames])
    game_stats = np.zeros(ngames, dtype=np.int16)
    entropy_rows = []

    def play_one(answer: str) -> tuple[int | None, list[tuple[int, float]]]:
        guesser = make_guesser(implementation, context)
        score = game.play(answer, guesser)
        return score, list(getattr(guesser, 'entropy_log', None) or [])

    def record(results) -> None:
        for game_idx, (answer, (score, entropy_log)) in enumerate(zip(game_answers, results)):
            if score is None:
                game_stats[game_idx] = -1
                messenger.log(f"failed to guess '{answer}'")
            else:
                game_stats[game_idx] = score
                messenger.log(f"guessed '{answer}' in {score}")
                if log_entropy:
                    for turn, entropy in entropy_log:
                        entropy_rows.append({'answer': answer, 'entropy': entropy, 'steps_left': score - turn})
            messenger.update_progress()

    messenger.start_progress(total=ngames, desc="Running simulation")
    try:
        if nthreads > 1:
            # Guessers are per game; only the lexicons and the write-once cache are shared
            with ThreadPoolExecutor(max_workers=nthreads) as pool:
                record(pool.map(play_one, game_answers))
        else:
            record(map(play_one, game_answers))
    finally:
        messenger.stop_progress()

    end_time = time.time()
    solved = game_stats[game_stats > 0]
    average = float(np.mean(solved)) if len(solved) > 0 else float('nan')
    nfailed = int(np.count_nonzero(game_stats == -1))

    messenger.log(f"Results after {ngames} games with '{implementation}' ({end_time - start_time:.3f} sec):")
    messenger.log(f"Number of failed solves: {nfailed}")
    messenger.log(f"average score: {average:.2f}")
    if context.cache.allocated:
        messenger.log(f"Pattern cache entries: {context.cache.nentries():,}")

    if plot:
        plot_results(game_stats, plot, title=f"Distribution of Guesses After {ngames} Games ({implementation})")

    entropy_df = None
    if log_entropy:
        entropy_df = pd.DataFrame(entropy_rows, columns=['answer', 'entropy', 'steps_left'])

    return {"game_answers": game_answers,
            "game_stats": game_stats,
            "average": average,
            "nfailed": nfailed,
            "solve_time": end_time - start_time,
            "entropy_log": entropy_df}

def plot_results(game_stats: np.ndarray, savefile: str | os.PathLike, title: str = "Distribution of Guesses") -> None:
    """Saves a histogram of guess counts, with failed games shown as DNF."""
    max_guesses = max(int(np.max(game_stats)) if len(game_stats) else 1, 1)
    bins = np.arange(-1.5, max_guesses + 1.5, 1)

    fig, ax = plt.subplots(figsize=(10, 5))
    ax.hist(game_stats, bins=bins, rwidth=0.8)

    successful_stats = game_stats[game_stats > 0]
    if len(successful_stats) > 0:
        avg_guesses = np.mean(successful_stats)
        ax.axvline(avg_guesses, color='red', linestyle='--', linewidth=1, label=f'Average: {avg_guesses:.5f}')
        ax.legend()

    ticks_to_show = np.arange(1, max_guesses + 1)
    all_ticks = np.insert(ticks_to_show, 0, -1)
    ax.set_xticks(all_ticks)
    tick_labels = [str(t) for t in all_ticks]
    tick_labels[0] = 'DNF'
    ax.set_xticklabels(tick_labels)

    ax.set_title(title)
    ax.set_xlabel('Number of Guesses to Solve')
    ax.set_ylabel('Frequency')
    ax.grid(axis='y', alpha=0.75)

    os.makedirs(os.path.dirname(os.path.abspath(savefile)), exist_ok=True)
    fig.savefig(savefile, dpi=150)
    plt.close(fig)
