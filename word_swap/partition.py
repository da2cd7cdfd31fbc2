"""
Split a raw word list into 26 first-letter buckets, sort each bucket by length,
and record where each length starts and ends inside the sorted bucket.
Pure functions: nothing here touches disk or shared state.
"""
from __future__ import annotations

import re
from typing import Iterable, NamedTuple, Sequence

import numpy as np

LETTERS = "abcdefghijklmnopqrstuvwxyz"
# A whole word: lowercase a-z only, no inner whitespace or punctuation
ALPHA_ONLY = re.compile(r"^[a-z]+$")


class LengthRange(NamedTuple):
    """Inclusive [first, last] positions of one word length in a sorted bucket."""
    first: int
    last: int

    @property
    def size(self) -> int:
        return self.last - self.first + 1


def letter_slot(word: str) -> int | None:
    """0..25 for a word starting with a-z (after lowercasing), else None."""
    if not word:
        return None
    c = word[0].lower()
    if "a" <= c <= "z":
        return ord(c) - ord("a")
    return None


def normalize_word(raw: str) -> str:
    return raw.strip().lower()


def partition(words: Iterable[str]) -> list[list[str]]:
    """
    One list per letter a..z (index 0 = 'a'), each in input order.
    Entries that are not a single lowercase a-z word after trimming and lowercasing
    (blank, inner whitespace, digits, punctuation, accents) are dropped.
    """
    buckets: list[list[str]] = [[] for _ in LETTERS]
    for raw in words:
        w = normalize_word(raw)
        if not ALPHA_ONLY.match(w):
            continue
        buckets[letter_slot(w)].append(w)
    return buckets


def _lengths(bucket: Sequence[str]) -> np.ndarray:
    return np.fromiter((len(w) for w in bucket), dtype=np.int64, count=len(bucket))


def sort_by_length(bucket: Sequence[str]) -> list[str]:
    """Ascending by length; words of equal length keep their input order."""
    order = np.argsort(_lengths(bucket), kind="stable")
    return [bucket[i] for i in order]


def build_index(bucket: Sequence[str]) -> dict[int, LengthRange]:
    """
    Map each distinct length in a length-sorted bucket to its LengthRange.
    The bucket must already be sorted by length; that is not checked here.
    """
    if not bucket:
        return {}
    lengths = _lengths(bucket)
    # Positions where the length changes start a new run
    starts = np.concatenate(([0], np.flatnonzero(np.diff(lengths)) + 1))
    ends = np.concatenate((starts[1:] - 1, [len(lengths) - 1]))
    index: dict[int, LengthRange] = {}
    for first, last in zip(starts.tolist(), ends.tolist()):
        n = int(lengths[first])
        prev = index.get(n)
        if prev is None:
            index[n] = LengthRange(first, last)
        else:
            # Only reachable for unsorted input: keep the first start, extend the end
            index[n] = LengthRange(prev.first, last)
    return index


def build_all(words: Iterable[str]) -> tuple[list[list[str]], list[dict[int, LengthRange]]]:
    """Partition, sort and index a raw word list. Returns (buckets, per-letter indexes)."""
    buckets = [sort_by_length(b) for b in partition(words)]
    indexes = [build_index(b) for b in buckets]
    return buckets, indexes
