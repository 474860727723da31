import dataclasses
import sys

from wordlesolver.config_loader import ConfigError, load_config, parse_cli_args, get_abs_path
from wordlesolver.backend.cache import get_pattern_cache
from wordlesolver.backend.context import SolverContext
from wordlesolver.backend.lexicon import ResourceError, get_dictionary, get_answers
from wordlesolver.backend.messenger import ConsoleMessenger
from wordlesolver.backend.regression import calibrate, save_entropy_log
from wordlesolver.backend.simulation import benchmark

def run(argv: list[str] | None = None) -> None:
    messenger = ConsoleMessenger()
    try:
        config = load_config(argv)
        args = parse_cli_args(argv)

        paths = config['paths']
        if args.precompute and not paths['pattern_cache']:
            raise ConfigError("--precompute needs paths.pattern_cache to be set")

        lexicon = get_dictionary(savefile=paths['dictionary'], messenger=messenger)
        answers = get_answers(savefile=paths['answers'], messenger=messenger)
        context = SolverContext.create(lexicon, config)

        if args.precompute:
            cache = get_pattern_cache(context.ranked, get_abs_path(paths['pattern_cache']), messenger=messenger)
            context = dataclasses.replace(context, cache=cache)

        simulation = config['simulation']
        if args.calibrate:
            regression = config['regression']
            results = calibrate(context, answers,
                                ngames=regression['ngames'],
                                max_iterations=regression['max_iterations'],
                                tolerance=regression['convergence_tolerance'],
                                nthreads=simulation['nthreads'],
                                messenger=messenger)
            fitted = results['steps_left']
            messenger.log(f"steps_left.scale = {fitted['scale']:.4f}")
            messenger.log(f"steps_left.offset = {fitted['offset']:.4f}")
            return

        results = benchmark(context, simulation['implementation'], answers,
                            ngames=simulation['max_games'],
                            nthreads=simulation['nthreads'],
                            messenger=messenger,
                            plot=get_abs_path(simulation['plot']) if simulation['plot'] else None,
                            log_entropy=paths['entropy_log'] is not None)
        if results['entropy_log'] is not None and len(results['entropy_log']) > 0:
            save_entropy_log(results['entropy_log'], get_abs_path(paths['entropy_log']))
    except (ConfigError, ResourceError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

if __name__ == "__main__":
    run()
