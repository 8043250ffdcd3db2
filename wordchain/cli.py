import sys
import logging
import argparse
from wordchain import simulate, single, StrategyConfig, STRATEGIES, MIN_WLEN, MAX_WLEN, MAX_ATTEMPTS, TEMPERATURE, COOLING_FACTOR
from pathgen import ConfigurationError

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Longest Word Chain Solver CLI")

    # Mode Selection
    parser.add_argument(
        "--mode", choices=["simulate", "single"], default="simulate",
        help="Sweep a range of word lengths ('simulate') or solve one length and print the chain ('single')."
    )

    # Strategy Selection
    parser.add_argument(
        "--strategy", choices=STRATEGIES, default="greedy",
        help="Select the search strategy."
    )

    # File Inputs
    parser.add_argument(
        "--words-file", type=str, default=None,
        help="Whitespace-separated dictionary file (default: NLTK words corpus)."
    )

    # Word Lengths
    parser.add_argument("--length", type=int, default=MIN_WLEN + 1, help="Word length for 'single' mode.")
    parser.add_argument("--min-length", type=int, default=MIN_WLEN, help="Shortest word length to sweep.")
    parser.add_argument("--max-length", type=int, default=MAX_WLEN, help="Longest word length to sweep.")

    # Strategy Parameters
    parser.add_argument(
        "--max-attempts", type=int, default=MAX_ATTEMPTS,
        help="Failed attempts allowed before hill climbing / random restart stop."
    )
    parser.add_argument("--temperature", type=float, default=TEMPERATURE, help="Initial annealing temperature.")
    parser.add_argument("--cooling-factor", type=float, default=COOLING_FACTOR, help="Annealing cooling factor in (0, 1).")
    parser.add_argument(
        "--random-regrow", action="store_true",
        help="Regrow backtracked paths with a random walk instead of greedy."
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible runs.")

    # Visualization
    parser.add_argument(
        "--visualize", action="store_true",
        help="Show visualizations after solving"
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="-v for progress, -vv for every round.")

    return parser

def main(argv=None) -> int:
    """Command-line interface for the Word Chain Solver."""
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG if args.verbose > 1 else logging.INFO)

    config = StrategyConfig(max_attempts=args.max_attempts,
                            initial_temperature=args.temperature,
                            cooling_factor=args.cooling_factor,
                            greedy_regrow=not args.random_regrow)

    # Run the selected mode
    try:
        if args.mode == "simulate":
            simulate(strategy=args.strategy, config=config, words_file=args.words_file,
                     min_length=args.min_length, max_length=args.max_length,
                     seed=args.seed, visualise=args.visualize)
        elif args.mode == "single":
            single(args.length, strategy=args.strategy, config=config, words_file=args.words_file,
                   seed=args.seed, visualise=args.visualize)
    except ConfigurationError as e:
        sys.stderr.write(f"Error: {e}\n")
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
