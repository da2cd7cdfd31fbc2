"""
Word store: owns the live (buckets, index) snapshot and its on-disk copy.

Layout under the data dir:
  letters/a.txt .. letters/z.txt   newline-separated words, ascending by length
  indexes.json                     {letter: {length: {"first": i, "last": j}}}

A rebuild builds a whole new snapshot, writes it to disk, and only then swaps the
reference readers see. Readers grab that reference once and never see a mix.
"""
from __future__ import annotations

import json
import logging
import os
import threading
from contextlib import contextmanager
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, NamedTuple

from .errors import NotInitialized, PersistFailure, RebuildInProgress, SourceUnavailable
from .partition import ALPHA_ONLY, LETTERS, LengthRange, build_all, letter_slot

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "data"
LETTERS_DIRNAME = "letters"
INDEX_FILENAME = "indexes.json"


def get_data_dir() -> Path:
    p = os.environ.get("WORD_SWAP_DATA_DIR")
    if p:
        return Path(p)
    return DEFAULT_DATA_DIR


class Snapshot(NamedTuple):
    # buckets[i] / index[i] belong to LETTERS[i]
    buckets: tuple[tuple[str, ...], ...]
    index: tuple[Mapping[int, LengthRange], ...]

    def lookup(self, word: str) -> tuple[tuple[str, ...], LengthRange] | None:
        """(bucket, range) holding words shaped like `word`, or None if there are none."""
        slot = letter_slot(word)
        if slot is None:
            return None
        rng = self.index[slot].get(len(word))
        if rng is None:
            return None
        return self.buckets[slot], rng

    @property
    def word_count(self) -> int:
        return sum(len(b) for b in self.buckets)

    def letter_counts(self) -> dict[str, int]:
        return {LETTERS[i]: len(b) for i, b in enumerate(self.buckets) if b}

    def index_dict(self) -> dict[str, dict[str, dict[str, int]]]:
        """JSON shape of the index: only letters with words, lengths as string keys."""
        out: dict[str, dict[str, dict[str, int]]] = {}
        for i, ranges in enumerate(self.index):
            if not ranges:
                continue
            out[LETTERS[i]] = {
                str(n): {"first": r.first, "last": r.last} for n, r in sorted(ranges.items())
            }
        return out


def make_snapshot(buckets: list[list[str]], indexes: list[dict[int, LengthRange]]) -> Snapshot:
    return Snapshot(
        buckets=tuple(tuple(b) for b in buckets),
        index=tuple(MappingProxyType(dict(ix)) for ix in indexes),
    )


# --- Persistence ---


def _write_text(path: Path, text: str) -> None:
    tmp = path.with_name(path.name + ".tmp")
    with open(tmp, "w", encoding="utf-8") as f:
        f.write(text)
    os.replace(tmp, path)


def save_snapshot(snapshot: Snapshot, data_dir: Path) -> None:
    """Write the 26 letter files and the index file. Raises PersistFailure."""
    letters_dir = data_dir / LETTERS_DIRNAME
    try:
        letters_dir.mkdir(parents=True, exist_ok=True)
        for letter, bucket in zip(LETTERS, snapshot.buckets):
            _write_text(letters_dir / f"{letter}.txt", "\n".join(bucket))
        _write_text(data_dir / INDEX_FILENAME, json.dumps(snapshot.index_dict(), indent=2))
    except OSError as e:
        raise PersistFailure(f"Could not write word files to {data_dir}: {e}") from e


def _read_bucket(path: Path) -> list[str]:
    if not path.exists():
        return []
    with open(path, "r", encoding="utf-8") as f:
        return [w for w in (line.strip() for line in f) if w]


def _parse_ranges(letter: str, raw: dict, bucket: list[str]) -> dict[int, LengthRange]:
    """Index entries for one letter, checked against the words in its letter file."""
    bucket_len = len(bucket)
    ranges: dict[int, LengthRange] = {}
    for length_str, r in raw.items():
        rng = LengthRange(int(r["first"]), int(r["last"]))
        if not 0 <= rng.first <= rng.last < bucket_len:
            raise ValueError(
                f"range {rng.first}..{rng.last} for {letter}/{length_str} "
                f"is outside letters/{letter}.txt ({bucket_len} words)"
            )
        n = int(length_str)
        for w in bucket[rng.first : rng.last + 1]:
            if len(w) != n or w[0] != letter or not ALPHA_ONLY.match(w):
                raise ValueError(f"letters/{letter}.txt has {w!r} inside the range for length {n}")
        if rng.first > 0 and len(bucket[rng.first - 1]) == n:
            raise ValueError(f"range for {letter}/{n} does not start at the first word of that length")
        if rng.last + 1 < len(bucket) and len(bucket[rng.last + 1]) == n:
            raise ValueError(f"range for {letter}/{n} does not end at the last word of that length")
        ranges[n] = rng
    if sum(r.size for r in ranges.values()) != bucket_len:
        raise ValueError(f"index for {letter} does not cover every word in letters/{letter}.txt")
    return ranges


def load_snapshot(data_dir: Path) -> Snapshot:
    """
    Read a snapshot back from disk.
    Raises NotInitialized if nothing was ever persisted, PersistFailure if the files are unreadable
    or the index does not fit the letter files.
    """
    index_path = data_dir / INDEX_FILENAME
    if not index_path.exists():
        raise NotInitialized(f"No persisted index at {index_path}. Fetch the word list first.")
    letters_dir = data_dir / LETTERS_DIRNAME
    try:
        with open(index_path, "r", encoding="utf-8") as f:
            raw_index = json.load(f)
        buckets = [_read_bucket(letters_dir / f"{letter}.txt") for letter in LETTERS]
        indexes = [
            _parse_ranges(letter, raw_index.get(letter, {}), bucket)
            for letter, bucket in zip(LETTERS, buckets)
        ]
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
        raise PersistFailure(f"Could not load word files from {data_dir}: {e}") from e
    return make_snapshot(buckets, indexes)


# --- Store ---


class WordStore:
    """
    Holds the live snapshot. Empty until the first successful rebuild() or load();
    after that a failed rebuild/load leaves the previous snapshot in place.
    Only one rebuild/load runs at a time; a second concurrent one is rejected.
    """

    def __init__(self, data_dir: Path | None = None):
        self.data_dir = Path(data_dir) if data_dir is not None else get_data_dir()
        self._snapshot: Snapshot | None = None
        self._mutation_lock = threading.Lock()

    @property
    def ready(self) -> bool:
        return self._snapshot is not None

    def current(self) -> Snapshot:
        snapshot = self._snapshot
        if snapshot is None:
            raise NotInitialized("Word store is empty. Fetch the word list or load indexes first.")
        return snapshot

    @contextmanager
    def _mutation(self) -> Iterator[None]:
        if not self._mutation_lock.acquire(blocking=False):
            raise RebuildInProgress("A word list rebuild is already running.")
        try:
            yield
        finally:
            self._mutation_lock.release()

    def rebuild(self, raw_words: Iterable[str]) -> Snapshot:
        """Partition, sort, index and persist raw_words, then make it the live snapshot."""
        if raw_words is None or isinstance(raw_words, (str, bytes)):
            raise SourceUnavailable("Expected a sequence of words, got %r" % type(raw_words).__name__)
        with self._mutation():
            buckets, indexes = build_all(raw_words)
            snapshot = make_snapshot(buckets, indexes)
            save_snapshot(snapshot, self.data_dir)
            self._snapshot = snapshot
        logger.info("Rebuilt word store: %d words in %d letters", snapshot.word_count, len(snapshot.letter_counts()))
        return snapshot

    def load(self) -> Snapshot:
        """Replace the live snapshot with the one persisted in data_dir."""
        with self._mutation():
            snapshot = load_snapshot(self.data_dir)
            self._snapshot = snapshot
        logger.info("Loaded word store from %s: %d words", self.data_dir, snapshot.word_count)
        return snapshot
