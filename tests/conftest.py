import random
from itertools import product

import pytest

from pathgen import KeyedDictionary


# xabcy -> ybcdz -> zcdeq -> qdefr is the only 4-word chain; mbcxx is a dead end
# after xabcy and kmnop is isolated.
TOY_WORDS = ["xabcy", "mbcxx", "ybcdz", "zcdeq", "qdefr", "kmnop"]
TOY_CHAIN = ["xabcy", "ybcdz", "zcdeq", "qdefr"]

# Greedy follows pbcdq (wider successor bucket) into a dead end of length 3,
# while xabcy -> rbcef -> ucegh -> vegij -> wgikl has length 5.
TRAP_WORDS = ["xabcy", "pbcdq", "rbcef", "scdxx", "tcdyy", "ucegh", "vegij", "wgikl"]
TRAP_GREEDY = ["xabcy", "pbcdq", "scdxx"]
TRAP_CHAIN = ["xabcy", "rbcef", "ucegh", "vegij", "wgikl"]

# Front and back keys coincide at length 4: "bc" holds three words, "de" two.
FOUR_LETTER_WORDS = ["abcd", "xbcy", "zdef", "qbcr", "mdeo"]


class CountingRandom(random.Random):
    """Random source that counts randrange draws."""

    def __init__(self, seed=0):
        super().__init__(seed)
        self.calls = 0

    def randrange(self, *args, **kwargs):
        self.calls += 1
        return super().randrange(*args, **kwargs)


@pytest.fixture
def toy_dictionary():
    return KeyedDictionary.build(TOY_WORDS)


@pytest.fixture
def trap_dictionary():
    return KeyedDictionary.build(TRAP_WORDS)


@pytest.fixture
def four_letter_dictionary():
    return KeyedDictionary.build(FOUR_LETTER_WORDS)


@pytest.fixture
def binary_words():
    """All 32 five-letter words over {a, b}: every key bucket holds 8 words."""
    return ["".join(letters) for letters in product("ab", repeat=5)]


@pytest.fixture
def binary_dictionary(binary_words):
    return KeyedDictionary.build(binary_words)


@pytest.fixture
def words_file(tmp_path):
    path = tmp_path / "dictionary.txt"
    path.write_text("\n".join(TOY_WORDS + ["abcd", "toolongword", "xabcy"]) + "\n")
    return str(path)
