"""
Swap a word for a random different word with the same first letter and length.
"""
from __future__ import annotations

import logging
import os
import random

from .store import Snapshot

logger = logging.getLogger(__name__)

DEFAULT_MAX_REDRAWS = 100


def get_max_redraws() -> int:
    p = os.environ.get("WORD_SWAP_MAX_REDRAWS")
    if not p:
        return DEFAULT_MAX_REDRAWS
    try:
        return max(1, int(p))
    except ValueError:
        logger.warning("Ignoring WORD_SWAP_MAX_REDRAWS=%r (not an integer), using %d", p, DEFAULT_MAX_REDRAWS)
        return DEFAULT_MAX_REDRAWS


def resolve(
    word: str,
    snapshot: Snapshot,
    *,
    rng: random.Random | None = None,
    max_redraws: int | None = None,
) -> str:
    """
    Random same-shape peer of `word`, or `word` itself when there is none
    (no words of that letter+length, a single one, or only copies of `word`).
    """
    rng = rng or random
    key = word.strip().lower()
    found = snapshot.lookup(key)
    if found is None:
        logger.debug("No replacement word found with that length, returning %s", word)
        return word
    bucket, span = found
    if span.size == 1:
        return word

    budget = max_redraws if max_redraws is not None else get_max_redraws()
    for _ in range(budget):
        candidate = bucket[rng.randint(span.first, span.last)]
        if candidate != key:
            return candidate

    # Budget spent: the range is mostly (or only) copies of the input
    others = [w for w in bucket[span.first : span.last + 1] if w != key]
    if not others:
        return word
    return rng.choice(others)


def substitute_words(
    words: list[str],
    snapshot: Snapshot,
    *,
    rng: random.Random | None = None,
    max_redraws: int | None = None,
) -> list[str]:
    """Resolve each word on its own; order is kept."""
    return [resolve(w, snapshot, rng=rng, max_redraws=max_redraws) for w in words]


def substitute_sentence(
    sentence: str,
    snapshot: Snapshot,
    *,
    rng: random.Random | None = None,
    max_redraws: int | None = None,
) -> str:
    """Split on whitespace, swap every word, join back with single spaces."""
    return " ".join(substitute_words(sentence.split(), snapshot, rng=rng, max_redraws=max_redraws))
