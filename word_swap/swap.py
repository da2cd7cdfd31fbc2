"""
Swap every word of a sentence using the persisted indexes.
Run: python -m word_swap.swap "the quick brown fox"
"""
from __future__ import annotations

import sys

from .errors import NotInitialized, WordStoreError
from .resolver import substitute_sentence
from .sentence import check_sentence, normalize_sentence
from .store import WordStore


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    sentence = " ".join(args)
    ok, message = check_sentence(sentence)
    if not ok:
        print(message)
        return 2
    store = WordStore()
    try:
        snapshot = store.load()
    except NotInitialized as e:
        print(f"{e} (python -m word_swap.build_index)")
        return 1
    except WordStoreError as e:
        print(f"Could not load indexes: {e}")
        return 1
    print(substitute_sentence(normalize_sentence(sentence), snapshot))
    return 0


if __name__ == "__main__":
    sys.exit(main())
