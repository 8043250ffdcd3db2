"""
Path Generation

Key extraction, the keyed dictionary, the path data structure and the
random/greedy path generators shared by every word chain strategy.

A chain links word `a` to word `b` when the 2nd-last and 3rd-last letters
of `a` equal the 2nd and 3rd letters of `b`.
"""

import random
from enum import Enum
from collections import deque
from typing import Deque, Dict, Iterable, Iterator, List, Optional, Sequence, Set, Tuple

# =============================================================================
# Constants
# =============================================================================
KEY_LEN: int = 2
MAX_RESAMPLES: int = 10  # Redraws allowed before giving up on a bucket


# =============================================================================
# Errors
# =============================================================================
class ChainError(Exception):
    """Base class for word chain errors."""


class ConfigurationError(ChainError):
    """Bad input: no words, bad strategy parameters or an unreadable dictionary."""


class DuplicateWordError(ChainError):
    """A word was added to a path that already contains it."""


class EmptyPathError(ChainError):
    """A word was removed from an empty path."""


class Direction(Enum):
    FORWARD = "forward"    # grow at the back
    BACKWARD = "backward"  # grow at the front


# =============================================================================
# Keys
# =============================================================================
def front_span(word_length: int) -> Tuple[int, int]:
    """Slice bounds of the front key: the 2nd and 3rd letters."""
    return 1, 1 + KEY_LEN


def back_span(word_length: int) -> Tuple[int, int]:
    """Slice bounds of the back key: the 3rd-last and 2nd-last letters."""
    return word_length - 1 - KEY_LEN, word_length - 1


def keys_coincide(word_length: int) -> bool:
    """
    True when front and back keys read the same letters, in which case every
    word links to every word in its own bucket and the largest bucket is the
    longest chain.
    """
    return front_span(word_length) == back_span(word_length)


def front_key(word: str) -> str:
    start, stop = front_span(len(word))
    return word[start:stop]


def back_key(word: str) -> str:
    start, stop = back_span(len(word))
    return word[start:stop]


# =============================================================================
# KeyedDictionary Class
# =============================================================================
class KeyedDictionary:
    """
    Two read-only indices over a word list:
      front: key -> words whose front key is `key` (successor candidates)
      back:  key -> words whose back key is `key` (predecessor candidates)
    Buckets keep the order of the source list.
    """

    def __init__(self, words: Sequence[str], front: Dict[str, List[str]], back: Dict[str, List[str]]) -> None:
        self.words: List[str] = list(words)
        self.front: Dict[str, List[str]] = front
        self.back: Dict[str, List[str]] = back
        self.front_keys: List[str] = list(front)
        self.word_length: Optional[int] = len(self.words[0]) if self.words else None

    @classmethod
    def build(cls, words: Iterable[str]) -> "KeyedDictionary":
        """Groups words by front key and, separately, by back key."""
        words = list(words)
        front: Dict[str, List[str]] = {}
        back: Dict[str, List[str]] = {}
        for word in words:
            front.setdefault(front_key(word), []).append(word)
            back.setdefault(back_key(word), []).append(word)
        return cls(words, front, back)

    def __len__(self) -> int:
        return len(self.words)

    def __repr__(self) -> str:
        return f"KeyedDictionary({len(self.words)} words, {len(self.front)} front keys)"

    @property
    def keys_coincide(self) -> bool:
        return self.word_length is not None and keys_coincide(self.word_length)

    def bucket_by_front(self, key: str) -> Sequence[str]:
        return self.front.get(key, ())

    def bucket_by_back(self, key: str) -> Sequence[str]:
        return self.back.get(key, ())

    def successors(self, word: str) -> Sequence[str]:
        """Words that may follow `word`."""
        return self.bucket_by_front(back_key(word))

    def predecessors(self, word: str) -> Sequence[str]:
        """Words that may precede `word`."""
        return self.bucket_by_back(front_key(word))

    def neighbours(self, word: str, direction: Direction) -> Sequence[str]:
        if direction is Direction.FORWARD:
            return self.successors(word)
        return self.predecessors(word)

    def largest_front_key(self) -> Optional[str]:
        """First front key (in insertion order) with the most words."""
        if not self.front:
            return None
        return max(self.front_keys, key=lambda key: len(self.front[key]))

    def largest_bucket(self) -> List[str]:
        key = self.largest_front_key()
        return list(self.front[key]) if key is not None else []


# =============================================================================
# PathState Class
# =============================================================================
class PathState:
    """A duplicate-free chain of words that can grow and shrink at either end."""

    def __init__(self, words: Iterable[str] = ()) -> None:
        self.words: Deque[str] = deque()
        self.members: Set[str] = set()
        for word in words:
            self.append(word)

    def __len__(self) -> int:
        return len(self.words)

    def __iter__(self) -> Iterator[str]:
        return iter(self.words)

    def __contains__(self, word: str) -> bool:
        return word in self.members

    def __repr__(self) -> str:
        return f"PathState({list(self.words)})"

    def contains(self, word: str) -> bool:
        return word in self.members

    def append(self, word: str) -> None:
        if word in self.members:
            raise DuplicateWordError(word)
        self.members.add(word)
        self.words.append(word)

    def prepend(self, word: str) -> None:
        if word in self.members:
            raise DuplicateWordError(word)
        self.members.add(word)
        self.words.appendleft(word)

    def remove_front(self) -> str:
        if not self.words:
            raise EmptyPathError("remove_front on an empty path")
        word = self.words.popleft()
        self.members.discard(word)
        return word

    def remove_back(self) -> str:
        if not self.words:
            raise EmptyPathError("remove_back on an empty path")
        word = self.words.pop()
        self.members.discard(word)
        return word

    def front_word(self) -> str:
        if not self.words:
            raise EmptyPathError("front_word of an empty path")
        return self.words[0]

    def back_word(self) -> str:
        if not self.words:
            raise EmptyPathError("back_word of an empty path")
        return self.words[-1]

    def extend(self, word: str, direction: Direction) -> None:
        """Adds a word at the growing end for `direction`."""
        if direction is Direction.FORWARD:
            self.append(word)
        else:
            self.prepend(word)

    def retract(self, direction: Direction) -> str:
        """Removes the word at the growing end for `direction`."""
        if direction is Direction.FORWARD:
            return self.remove_back()
        return self.remove_front()

    def frontier(self, direction: Direction) -> str:
        if direction is Direction.FORWARD:
            return self.back_word()
        return self.front_word()

    def copy(self) -> "PathState":
        clone = PathState()
        clone.words = self.words.copy()
        clone.members = self.members.copy()
        return clone

    def to_list(self) -> List[str]:
        return list(self.words)


# =============================================================================
# PathGenerator Class
# =============================================================================
class PathGenerator:
    """
    Builds and mutates PathStates from a KeyedDictionary.
    All randomness comes from `rng`, so a seeded generator is reproducible.
    """

    def __init__(self, dictionary: KeyedDictionary, rng: random.Random = None) -> None:
        self.dictionary = dictionary
        self.rng = rng if rng is not None else random.Random()

    def random_word(self, bucket: Sequence[str], visited) -> Optional[str]:
        """
        Picks a random word from `bucket` that is not in `visited`.
        Redraws up to MAX_RESAMPLES times and returns None if every draw hit a
        visited word.
        """
        if not bucket:
            return None

        word = bucket[self.rng.randrange(len(bucket))]
        attempts = 0
        while word in visited:
            if attempts >= MAX_RESAMPLES:
                return None
            word = bucket[self.rng.randrange(len(bucket))]
            attempts += 1
        return word

    def random_start_word(self) -> str:
        """A random word from a random front bucket."""
        keys = self.dictionary.front_keys
        if not keys:
            raise ConfigurationError("Cannot pick a start word from an empty dictionary.")
        bucket = self.dictionary.front[keys[self.rng.randrange(len(keys))]]
        return bucket[self.rng.randrange(len(bucket))]

    def extend_randomly(self, path: PathState, direction: Direction) -> None:
        """Random walk from the growing end until no unvisited word is drawn."""
        word = path.frontier(direction)
        while True:
            word = self.random_word(self.dictionary.neighbours(word, direction), path)
            if word is None:
                return
            path.extend(word, direction)

    def grow_random(self, seed: str, direction: Direction) -> PathState:
        path = PathState([seed])
        self.extend_randomly(path, direction)
        return path

    def grow_greedy(self, path: PathState, direction: Direction) -> None:
        """
        Extends `path` in place. Each step takes the unvisited candidate whose
        own neighbour bucket is largest, keeping the first one on ties.
        """
        word = path.frontier(direction)
        while True:
            best_word, best_size = None, -1
            for candidate in self.dictionary.neighbours(word, direction):
                if candidate in path:
                    continue
                size = len(self.dictionary.neighbours(candidate, direction))
                if size > best_size:
                    best_word, best_size = candidate, size

            if best_word is None:
                return

            path.extend(best_word, direction)
            word = best_word

    def greedy_path(self) -> PathState:
        """
        Starts just before the largest front bucket and grows greedily forward.
        When the keys coincide the largest bucket is returned as it is.
        """
        if self.dictionary.keys_coincide:
            return PathState(self.dictionary.largest_bucket())

        key = self.dictionary.largest_front_key()
        if key is None:
            return PathState()

        # A word whose back key opens the largest bucket.
        starts = self.dictionary.bucket_by_back(key)
        start = starts[0] if starts else self.dictionary.front[key][0]

        path = PathState([start])
        self.grow_greedy(path, Direction.FORWARD)
        return path

    def regrow(self, path: PathState, backtrack: int, direction: Direction, greedy: bool = True) -> PathState:
        """
        Returns a new path made by removing `backtrack` words from the growing
        end of `path` and growing again. Greedy regrowth takes one random step
        and then runs greedy; otherwise the regrowth is a random walk.
        Removing every word restarts from a random start word.
        """
        if backtrack < 0 or backtrack > len(path):
            raise ValueError(f"Cannot backtrack {backtrack} steps on a path of {len(path)} words.")

        if backtrack == len(path):
            start = self.random_start_word()
            if not greedy:
                return self.grow_random(start, direction)
            candidate = PathState([start])
            self.grow_greedy(candidate, direction)
            return candidate

        candidate = path.copy()
        for _ in range(backtrack):
            candidate.retract(direction)

        if not greedy:
            self.extend_randomly(candidate, direction)
            return candidate

        bucket = self.dictionary.neighbours(candidate.frontier(direction), direction)
        word = self.random_word(bucket, candidate)
        if word is None:
            return candidate
        candidate.extend(word, direction)
        self.grow_greedy(candidate, direction)
        return candidate
