"""
Shared fixtures: small word lists and a store rooted in a temp directory.
"""
import random

import pytest

from word_swap.partition import build_all
from word_swap.store import WordStore, make_snapshot

SCENARIO_WORDS = ["cat", "dog", "bat", "ox", "at"]
C_WORDS = ["cat", "cot", "cap", "dog", "at"]


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def word_store(tmp_path):
    return WordStore(tmp_path / "data")


@pytest.fixture
def c_snapshot():
    return make_snapshot(*build_all(C_WORDS))


@pytest.fixture
def big_words(rng):
    """A few thousand pseudo-words over every letter and lengths 1..12, plus junk lines."""
    letters = "abcdefghijklmnopqrstuvwxyz"
    words = []
    for _ in range(3000):
        n = rng.randint(1, 12)
        words.append("".join(rng.choice(letters) for _ in range(n)))
    words += ["", "   ", "123", "-dash", "Ångström", "\r"]
    rng.shuffle(words)
    return words
