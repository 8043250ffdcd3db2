"""
Word Chain Solver

Finds the longest chain of equal-length words where each word's 2nd and 3rd
letters match the previous word's 3rd-last and 2nd-last letters, and no word
is used twice. Longest path search is NP-hard, so alongside an exhaustive DFS
for small cases the solver offers greedy, hill climbing, random-restart greedy
and simulated annealing strategies.
It displays a table of results for a sweep of word lengths.
"""

import sys
import math
import time
import numbers
import random
import logging
import threading
from dataclasses import dataclass, field
from typing import List, Dict, Optional, Any, Sequence
import numpy as np
import matplotlib.pyplot as plt
from nltk.corpus import words as nltk_words

from pathgen import (
    ConfigurationError, Direction, KeyedDictionary, PathGenerator, PathState,
    back_key, front_key,
)

# =============================================================================
# Configuration & Logging
# =============================================================================
logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)

# Global Constants
WORDS_FILE: str = None  # None reads the NLTK words corpus
MIN_WLEN: int = 4
MAX_WLEN: int = 15
SHORTEST_WLEN: int = 3  # Both keys need three letters
MAX_ATTEMPTS: int = 1000
TEMPERATURE: float = 5000.0
COOLING_FACTOR: float = 0.99
RESTART_EVERY: int = 10  # Random-restart: every 10th attempt starts over
RESTART_ODDS: int = 11   # Annealing: 1 in 11 rounds starts over
LOG_EVERY: int = 100
UPDATE_FREQ: int = 1
STRATEGIES = ("dfs", "greedy", "hill-climbing", "random-restart", "annealing")

PARAM_HEADERS: Dict[str, str] = {
    "max_attempts": "Max Attempts",
    "initial_temperature": "Temperature",
    "cooling_factor": "Cooling Factor",
}


# =============================================================================
# Config & Result Classes
# =============================================================================
@dataclass
class StrategyConfig:
    """Strategy knobs. Only the ones a strategy uses are reported with its results."""

    max_attempts: int = MAX_ATTEMPTS
    initial_temperature: float = TEMPERATURE
    cooling_factor: float = COOLING_FACTOR
    greedy_regrow: bool = True

    def validate(self) -> None:
        if isinstance(self.max_attempts, bool) or not isinstance(self.max_attempts, numbers.Integral):
            raise ConfigurationError(f"max_attempts must be an integer, got {self.max_attempts!r}")
        if self.max_attempts < 0:
            raise ConfigurationError(f"max_attempts must not be negative, got {self.max_attempts}")
        if not (math.isfinite(self.initial_temperature) and self.initial_temperature > 0):
            raise ConfigurationError(f"initial_temperature must be positive, got {self.initial_temperature}")
        if not (math.isfinite(self.cooling_factor) and 0 < self.cooling_factor < 1):
            raise ConfigurationError(f"cooling_factor must be in (0, 1), got {self.cooling_factor}")

    def params(self, strategy: str) -> Dict[str, Any]:
        if strategy in ("hill-climbing", "random-restart"):
            return {"max_attempts": self.max_attempts}
        if strategy == "annealing":
            return {"initial_temperature": self.initial_temperature,
                    "cooling_factor": self.cooling_factor}
        return {}


@dataclass
class SearchResult:
    strategy: str
    word_length: int
    num_words: int
    path: List[str]
    attempts: int = 0
    search_seconds: float = 0.0
    total_seconds: float = 0.0
    params: Dict[str, Any] = field(default_factory=dict)
    valid: Optional[bool] = None
    history: List[int] = field(default_factory=list)  # tracked length after each round


# =============================================================================
# Validation
# =============================================================================
def is_valid_chain(path: List[str]) -> bool:
    """
    Returns True if no word repeats and every word's back key matches the
    next word's front key.
    """
    seen = set()
    prev_word = None
    for word in path:
        if word in seen:
            return False
        seen.add(word)
        if prev_word is not None and back_key(prev_word) != front_key(word):
            return False
        prev_word = word
    return True


# =============================================================================
# ChainSolver Class
# =============================================================================
class ChainSolver:
    """
    Searches a KeyedDictionary for the longest word chain.
    Strategies available: 'dfs', 'greedy', 'hill-climbing', 'random-restart'
    and 'annealing'.
    """

    def __init__(self, dictionary: KeyedDictionary, version: str = "greedy",
                 config: StrategyConfig = None, rng: random.Random = None,
                 cancel: threading.Event = None) -> None:
        if not len(dictionary):
            raise ConfigurationError("The dictionary has no words to chain.")

        self.version: str = version.lower()
        try:
            self.strategy = {
                "dfs": self.solve_exhaustive,
                "greedy": self.solve_greedy,
                "hill-climbing": self.solve_hill_climbing,
                "random-restart": self.solve_random_restart,
                "annealing": self.solve_annealing,
            }[self.version]
        except KeyError:
            raise ConfigurationError(
                f"Unknown strategy {version!r}, choose from {', '.join(STRATEGIES)}") from None

        self.config: StrategyConfig = config if config is not None else StrategyConfig()
        self.config.validate()
        self.dictionary = dictionary
        self.generator = PathGenerator(dictionary, rng)
        self.rng = self.generator.rng
        self.cancel = cancel

        self.attempts: int = 0
        self.history: List[int] = []

    def __str__(self) -> str:
        return self.version

    def cancelled(self) -> bool:
        return self.cancel is not None and self.cancel.is_set()

    def random_direction(self) -> Direction:
        """Coin toss between growing forward and backward."""
        return Direction.FORWARD if self.rng.randint(0, 1) else Direction.BACKWARD

    def solve(self) -> SearchResult:
        """Runs the selected strategy and times it."""
        self.attempts = 0
        self.history = []
        start = time.perf_counter()
        path = self.strategy()
        elapsed = time.perf_counter() - start

        return SearchResult(
            strategy=self.version,
            word_length=self.dictionary.word_length,
            num_words=len(self.dictionary),
            path=path.to_list(),
            attempts=self.attempts,
            search_seconds=elapsed,
            params=self.config.params(self.version),
            history=self.history,
        )

    def solve_exhaustive(self) -> PathState:
        """
        Full enumeration. When the keys coincide every bucket is already a
        chain, so the largest bucket is returned without searching.
        """
        if self.dictionary.keys_coincide:
            bucket = self.dictionary.largest_bucket()
            self.history.append(len(bucket))
            return PathState(bucket)
        return self.depth_first_search()

    def depth_first_search(self) -> PathState:
        """
        Depth-first search over every simple chain, driven by an explicit stack.
        Each word is pushed above a BACKTRACK marker; popping the marker removes
        the word again once everything below it has been explored.
        """
        BACKTRACK = None
        stack: List[Optional[str]] = []
        current = PathState()
        best: List[str] = []

        for word in self.dictionary.words:
            stack.append(BACKTRACK)
            stack.append(word)

        while stack:
            if self.cancelled():
                logger.info("DFS cancelled.")
                break

            word = stack.pop()
            self.attempts += 1
            if word is BACKTRACK:
                current.remove_back()
                continue

            current.append(word)
            if len(current) > len(best):
                best = current.to_list()
                self.history.append(len(best))

            for next_word in self.dictionary.successors(word):
                if next_word not in current:
                    stack.append(BACKTRACK)
                    stack.append(next_word)

        return PathState(best)

    def solve_greedy(self) -> PathState:
        """Single deterministic greedy pass from the largest front bucket."""
        path = self.generator.greedy_path()
        self.attempts = 1
        self.history.append(len(path))
        return path

    def solve_hill_climbing(self) -> PathState:
        """
        Starting from the greedy path, tries every backtrack depth from 0 to the
        current length and keeps any strictly longer regrowth. Stops once more
        than max_attempts regrowths in a row have failed, checked after each
        full sweep.
        """
        current = self.generator.greedy_path()
        self.history.append(len(current))
        if self.dictionary.keys_coincide:
            return current

        attempt = 0
        while attempt <= self.config.max_attempts and not self.cancelled():
            depth = 0
            while depth <= len(current):
                candidate = self.generator.regrow(current, depth, self.random_direction(),
                                                  self.config.greedy_regrow)
                self.attempts += 1
                if len(candidate) > len(current):
                    current = candidate
                    attempt = 0
                else:
                    attempt += 1
                    if attempt % LOG_EVERY == 0:
                        logger.debug(f"attempt: {attempt}")
                depth += 1
            self.history.append(len(current))

        logger.info(f"Found. Length {len(current)} after {self.attempts} regrowths.")
        return current

    def solve_random_restart(self) -> PathState:
        """
        Regrows the best path from a random backtrack depth. Every 10th attempt
        since the last improvement starts over from a fresh random word.
        """
        best = self.generator.greedy_path()
        self.history.append(len(best))
        if self.dictionary.keys_coincide:
            return best

        attempt = 0
        while attempt < self.config.max_attempts and not self.cancelled():
            if attempt % RESTART_EVERY == 0 or len(best) < 2:
                backtrack = len(best)
            else:
                backtrack = self.rng.randint(1, len(best) - 1)

            candidate = self.generator.regrow(best, backtrack, self.random_direction(),
                                              self.config.greedy_regrow)
            self.attempts += 1
            if len(candidate) > len(best):
                best = candidate
                attempt = 0
            else:
                attempt += 1
                if attempt % LOG_EVERY == 0:
                    logger.debug(f"attempt: {attempt}")
            self.history.append(len(best))

        logger.info(f"Found. Length {len(best)} after {self.attempts} regrowths.")
        return best

    def solve_annealing(self) -> PathState:
        """
        Simulated annealing. Each round cools the temperature, backtracks half of
        the current path (or restarts, 1 round in RESTART_ODDS) and regrows.
        Shorter candidates are accepted with probability exp(-delta / T).
        Returns the best path seen.
        """
        current = self.generator.greedy_path()
        best = current
        self.history.append(len(current))
        if self.dictionary.keys_coincide:
            return current

        temperature = self.config.initial_temperature
        while temperature > 1 and not self.cancelled():
            temperature *= self.config.cooling_factor

            backtrack = len(current) // 2
            if self.rng.randint(0, RESTART_ODDS - 1) == 1:
                backtrack = len(current)

            candidate = self.generator.regrow(current, backtrack, self.random_direction(),
                                              self.config.greedy_regrow)
            self.attempts += 1

            delta = len(current) - len(candidate)
            if delta <= 0 or self.rng.random() < np.exp(-delta / temperature):
                current = candidate
            if len(current) > len(best):
                best = current

            self.history.append(len(current))
            logger.debug(f"temperature: {temperature:.2f} length: {len(current)}")

        logger.info(f"Found. Length {len(best)} after {self.attempts} rounds.")
        return best


# =============================================================================
# Dashboard Class
# =============================================================================
class Dashboard:
    """Handles drawing the results table and sweep status in the terminal."""

    def __init__(self, strategy: str, lengths: Sequence[int]) -> None:
        self.strategy = strategy
        self.lengths = list(lengths)
        sys.stdout.write("\033[H\033[J")
        sys.stdout.write(f"Finding solutions for word sizes {self.lengths[0]} to {self.lengths[-1]}...\n")
        sys.stdout.flush()

    def draw_dashboard(self, results: List[SearchResult], start_time: float = None) -> None:
        """
        Redraws the table of solved word lengths followed by the sweep status.
        Only updates every UPDATE_FREQ results.
        """
        done = len(results)
        if done % UPDATE_FREQ != 0 and done != len(self.lengths):
            return

        sys.stdout.write("\033[H\033[J")
        sys.stdout.write(f"Strategy: {self.strategy}\n\n")
        sys.stdout.write(Dashboard.format_table(results) + "\n\n")
        sys.stdout.write(Dashboard.sweep_status(done, self.lengths, start_time))
        sys.stdout.flush()

    @staticmethod
    def format_table(results: List[SearchResult]) -> str:
        """Formats results as a fixed-width table, one row per word length."""
        param_keys = list(results[0].params) if results else []
        headers = (["Word Length", "Num. Words", "Seq. Length", "CPU Found (sec)", "CPU Total (sec)"]
                   + [PARAM_HEADERS.get(k, k) for k in param_keys] + ["Correct"])

        rows = []
        for r in results:
            row = [str(r.word_length), str(r.num_words), str(len(r.path)),
                   f"{r.search_seconds:.4f}", f"{r.total_seconds:.4f}"]
            row += [str(r.params.get(k, "")) for k in param_keys]
            row.append(str(r.valid))
            rows.append(row)

        widths = [max(len(cell) for cell in column) for column in zip(headers, *rows)]
        rule = "-" * (sum(widths) + 3 * len(widths) + 1)

        def line(cells: List[str]) -> str:
            return "| " + " | ".join(cell.rjust(w) for cell, w in zip(cells, widths)) + " |"

        return "\n".join([rule, line(headers), rule] + [line(row) for row in rows] + [rule])

    @staticmethod
    def draw_chain(result: SearchResult) -> None:
        """Writes a single result and its chain."""
        sys.stdout.write(f"Strategy: {result.strategy}\n")
        sys.stdout.write(f"Word length: {result.word_length} ({result.num_words} words)\n")
        sys.stdout.write(f"Chain length: {len(result.path)}\n")
        sys.stdout.write(f"Attempts: {result.attempts}\n")
        sys.stdout.write(f"Search: {result.search_seconds:.4f}s | Total: {result.total_seconds:.4f}s\n")
        sys.stdout.write(f"Correct: {result.valid}\n\n")
        sys.stdout.write(" -> ".join(result.path) + "\n")
        sys.stdout.flush()

    @staticmethod
    def sweep_status(done: int, lengths: Sequence[int], start_time: float = None,
                     width: int = 24) -> str:
        """
        One status line: a bar of solved word lengths, the length being solved
        next and an estimate of the time left from the average per length.
        """
        total = len(lengths)
        filled = width * done // total
        bar = "█" * filled + "·" * (width - filled)

        if done < total:
            current = f"solving length {lengths[done]}"
        else:
            current = "done"

        if done and start_time is not None:
            per_length = (time.perf_counter() - start_time) / done
            eta = f"~{per_length * (total - done):.1f}s left"
        else:
            eta = "estimating..."

        return f"\r[{bar}] {done}/{total} lengths | {current} | {eta}"


# =============================================================================
# Loading Functions
# =============================================================================
def filter_words(source, word_length: int) -> List[str]:
    """Keeps words of exactly `word_length`, in source order, without repeats."""
    if word_length < SHORTEST_WLEN:
        raise ConfigurationError(f"Word length must be at least {SHORTEST_WLEN}, got {word_length}")
    found = list(dict.fromkeys(word for word in source if len(word) == word_length))
    if not found:
        raise ConfigurationError(f"No words of length {word_length} in the dictionary.")
    return found


def load_words(word_length: int, words_file: str = WORDS_FILE) -> List[str]:
    """
    Loads whitespace-separated words from `words_file`, or from the NLTK words
    corpus when no file is given, and keeps those of `word_length` letters.
    """
    if words_file is None:
        try:
            source = [word.lower() for word in nltk_words.words()]
        except LookupError as e:
            logger.error(f"Error loading NLTK words corpus: {e}")
            raise ConfigurationError(
                "The NLTK 'words' corpus is not installed. "
                "Run nltk.download('words') or pass a words file.") from e
    else:
        try:
            with open(words_file, "r", encoding="utf-8") as f:
                source = [word.lower() for word in f.read().split()]
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error loading file {words_file}: {e}")
            raise ConfigurationError(f"Cannot read dictionary file {words_file}: {e}") from e

    return filter_words(source, word_length)


# =============================================================================
# Output Functions
# =============================================================================
def plot_results(results: List[SearchResult]) -> None:
    """Plot chain length and search time per word length using Matplotlib."""
    word_lengths = np.array([r.word_length for r in results])
    chain_lengths = np.array([len(r.path) for r in results])
    search_times = np.array([r.search_seconds for r in results])

    fig, axs = plt.subplots(1, 2, figsize=(10, 4))

    axs[0].bar(word_lengths, chain_lengths, color="skyblue", edgecolor="black")
    axs[0].set_title(f"Longest Chain ({results[0].strategy})")
    axs[0].set_xlabel("Word Length")
    axs[0].set_ylabel("Chain Length")

    axs[1].plot(word_lengths, np.maximum(search_times, 1e-6), marker='o', linestyle='-', color="red")
    axs[1].set_title("Search Time per Word Length")
    axs[1].set_xlabel("Word Length")
    axs[1].set_ylabel("Seconds")
    axs[1].set_yscale("log")

    plt.tight_layout()
    plt.show()


def plot_history(result: SearchResult) -> None:
    """Plot the tracked chain length after each round of a search."""
    rounds = np.arange(len(result.history))

    plt.figure(figsize=(6, 4))
    plt.plot(rounds, result.history, linestyle='-', color="blue")
    plt.title(f"{result.strategy} (word length {result.word_length})")
    plt.xlabel("Round")
    plt.ylabel("Chain Length")
    plt.tight_layout()
    plt.show()


# =============================================================================
# Simulation Functions
# =============================================================================
def solve(word_length: int, config: StrategyConfig = None, strategy: str = "greedy",
          words_file: str = WORDS_FILE, words: List[str] = None, seed: int = None,
          cancel: threading.Event = None) -> SearchResult:
    """
    Loads the dictionary (unless `words` is given), runs one strategy and
    checks the chain it returns.
    """
    config = config if config is not None else StrategyConfig()
    config.validate()

    total_start = time.perf_counter()
    if words is None:
        words = load_words(word_length, words_file)
    else:
        words = filter_words(words, word_length)
    dictionary = KeyedDictionary.build(words)

    solver = ChainSolver(dictionary, strategy, config, random.Random(seed), cancel)
    result = solver.solve()

    result.total_seconds = time.perf_counter() - total_start
    result.valid = is_valid_chain(result.path)
    if not result.valid:
        logger.error(f"Invalid chain from {strategy} for word length {word_length}")
    return result


def simulate(strategy: str = "greedy", config: StrategyConfig = None, words_file: str = WORDS_FILE,
             min_length: int = MIN_WLEN, max_length: int = MAX_WLEN, seed: int = None,
             visualise: bool = False) -> List[SearchResult]:
    """Solves every word length in [min_length, max_length] and tabulates the results."""
    if min_length > max_length:
        raise ConfigurationError(f"min_length {min_length} is greater than max_length {max_length}")

    lengths = range(min_length, max_length + 1)
    dashboard = Dashboard(strategy, lengths)
    results: List[SearchResult] = []

    start_time = time.perf_counter()
    dashboard.draw_dashboard(results, start_time)
    for word_length in lengths:
        results.append(solve(word_length, config, strategy, words_file=words_file, seed=seed))
        dashboard.draw_dashboard(results, start_time)

    elapsed = time.perf_counter() - start_time
    print(f"\n{len(results)} word lengths solved, {elapsed:.2f}s elapsed.")

    if visualise:
        plot_results(results)
    return results


def single(word_length: int, strategy: str = "greedy", config: StrategyConfig = None,
           words_file: str = WORDS_FILE, seed: int = None, visualise: bool = False) -> SearchResult:
    """Solves one word length and prints the chain."""
    result = solve(word_length, config, strategy, words_file=words_file, seed=seed)
    Dashboard.draw_chain(result)

    if visualise:
        plot_history(result)
    return result


# =============================================================================
# Main Execution
# =============================================================================

def main() -> None:
    simulate(strategy="greedy")

if __name__ == "__main__":
    main()
