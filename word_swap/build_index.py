"""
Fetch the word list, split it into letter files sorted by length, and build the length indexes.
Run once (or when the word list changes): python -m word_swap.build_index
Set WORD_LIST to a local file to skip the download.
"""
import logging
import time

from .corpus import get_raw_words, get_word_list_path, get_source_url
from .store import WordStore


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    source = get_word_list_path() or get_source_url()
    print(f"Loading words from {source} ...")
    start = time.time()
    raw = get_raw_words()
    print(f"  {len(raw)} lines")

    store = WordStore()
    print("Partitioning, sorting and indexing...")
    snapshot = store.rebuild(raw)
    print(f"  {snapshot.word_count} words across {len(snapshot.letter_counts())} letters")
    print(f"Saved to {store.data_dir} in {time.time() - start:.1f}s")


if __name__ == "__main__":
    main()
