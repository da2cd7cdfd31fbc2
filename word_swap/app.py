"""
Local API for the word swapper.
Run: uvicorn word_swap.app:app --reload --host 0.0.0.0
Then: GET /api/fetch-words once, and /api/replace-sentence?sentence=...
"""
from __future__ import annotations

import logging
import time
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from fastapi import FastAPI
from pydantic import BaseModel

from .corpus import fetch_words
from .errors import NotInitialized, RebuildInProgress, WordStoreError
from .resolver import substitute_sentence
from .sentence import check_sentence, normalize_sentence
from .store import Snapshot, WordStore

logger = logging.getLogger(__name__)

app = FastAPI(title="Word Swap")

# Process-wide store; empty until the first fetch or load
store = WordStore()


def _ensure_loaded() -> Snapshot:
    """Live snapshot, loading it from disk the first time. Raises NotInitialized if never built."""
    if store.ready:
        return store.current()
    return store.load()


@app.get("/api/fetch-words")
def api_fetch_words():
    """Download the word list, rebuild letter files and indexes, and swap them in."""
    start = time.time()
    try:
        words = fetch_words()
        snapshot = store.rebuild(words)
    except RebuildInProgress as e:
        return {"ok": False, "error": str(e), "busy": True}
    except WordStoreError as e:
        logger.warning("Word list refresh failed (%s): %s", e.kind, e)
        return {"ok": False, "error": f"Error fetching words: {e}"}
    elapsed_ms = int((time.time() - start) * 1000)
    logger.info("Time taken: %d ms", elapsed_ms)
    return {
        "ok": True,
        "message": "Words fetched and loaded",
        "words": snapshot.word_count,
        "elapsed_ms": elapsed_ms,
    }


@app.get("/api/load-indexes")
def api_load_indexes():
    """Reload letter files and indexes from disk without downloading."""
    try:
        snapshot = store.load()
    except RebuildInProgress as e:
        return {"ok": False, "error": str(e), "busy": True}
    except WordStoreError as e:
        return {"ok": False, "error": f"Error loading indexes: {e}"}
    return {"ok": True, "message": "Length indexes loaded", "data": snapshot.index_dict()}


@app.get("/api/status")
def api_status():
    if not store.ready:
        return {"ok": True, "ready": False, "words": 0, "letters": {}}
    snapshot = store.current()
    return {"ok": True, "ready": True, "words": snapshot.word_count, "letters": snapshot.letter_counts()}


class ReplaceRequest(BaseModel):
    sentence: str = ""


def _replace(sentence: str) -> dict:
    ok, message = check_sentence(sentence)
    if not ok:
        return {"ok": False, "error": message}
    try:
        snapshot = _ensure_loaded()
    except NotInitialized:
        return {"ok": False, "error": "No word list loaded yet. Run /api/fetch-words first."}
    except WordStoreError as e:
        return {"ok": False, "error": str(e)}
    cleaned = normalize_sentence(sentence)
    return {"ok": True, "sentence": cleaned, "newSentence": substitute_sentence(cleaned, snapshot)}


@app.get("/api/replace-sentence")
def api_replace_sentence_get(sentence: str = ""):
    """Replace each word with a random word of the same first letter and length."""
    return _replace(sentence)


@app.post("/api/replace-sentence")
def api_replace_sentence(body: ReplaceRequest):
    return _replace(body.sentence)
