"""
Raw word list source: dwyl english-words (words_alpha.txt, one lowercase word per line).
Downloaded on every refresh; a local file can be used instead via WORD_LIST.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path

import requests

from .errors import SourceUnavailable

logger = logging.getLogger(__name__)

WORDS_ALPHA_URL = "https://raw.githubusercontent.com/dwyl/english-words/refs/heads/master/words_alpha.txt"
DEFAULT_TIMEOUT = 30.0
USER_AGENT = "WordSwap/1.0"


def get_source_url() -> str:
    return os.environ.get("WORD_SWAP_SOURCE_URL") or WORDS_ALPHA_URL


def get_fetch_timeout() -> float:
    p = os.environ.get("WORD_SWAP_FETCH_TIMEOUT")
    if p:
        return float(p)
    return DEFAULT_TIMEOUT


def get_word_list_path() -> Path | None:
    """Local word list from WORD_LIST, or None to download."""
    p = os.environ.get("WORD_LIST")
    return Path(p) if p else None


def split_lines(text: str) -> list[str]:
    """One entry per line, CR stripped. Blank lines are left for the partitioner to drop."""
    return [line.rstrip("\r") for line in text.split("\n")]


def fetch_words(url: str | None = None, timeout: float | None = None) -> list[str]:
    """Download the raw word list. Raises SourceUnavailable on any network/HTTP failure."""
    url = url or get_source_url()
    timeout = timeout if timeout is not None else get_fetch_timeout()
    logger.info("Downloading %s ...", url)
    try:
        resp = requests.get(url, headers={"User-Agent": USER_AGENT}, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise SourceUnavailable(f"Could not download {url}: {e}") from e
    words = split_lines(resp.text)
    if not any(w.strip() for w in words):
        raise SourceUnavailable(f"Word list at {url} is empty")
    logger.info("Downloaded %d lines from %s", len(words), url)
    return words


def read_word_file(path: Path) -> list[str]:
    """Read a local newline-separated word list."""
    try:
        with open(path, "r", encoding="utf-8", errors="ignore") as f:
            text = f.read()
    except OSError as e:
        raise SourceUnavailable(f"Could not read word list {path}: {e}") from e
    return split_lines(text)


def get_raw_words() -> list[str]:
    """Local WORD_LIST file if set, otherwise the download."""
    path = get_word_list_path()
    if path is not None:
        return read_word_file(path)
    return fetch_words()
