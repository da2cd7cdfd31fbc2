"""
Clean and validate a user's sentence before swapping.
Lenient on purpose: only the first letter and the length of each word matter.
"""
from __future__ import annotations

import re

EMPTY_MESSAGE = "Please make sure there is a sentence!"
NOT_A_LETTER_MESSAGE = "Each word must start with a letter!"

_STARTS_WITH_LETTER = re.compile(r"^[a-z]")


def normalize_sentence(sentence: str | None) -> str:
    """Lowercase, trim, collapse runs of whitespace to one space."""
    if not sentence or not isinstance(sentence, str):
        return ""
    return " ".join(sentence.lower().split())


def check_sentence(sentence: str | None) -> tuple[bool, str | None]:
    """Return (ok, error message)."""
    s = normalize_sentence(sentence)
    if not s:
        return False, EMPTY_MESSAGE
    for w in s.split(" "):
        if not _STARTS_WITH_LETTER.match(w):
            return False, NOT_A_LETTER_MESSAGE
    return True, None
