"""
Failures raised by the word store and its collaborators.
Every error carries its underlying cause as __cause__ (raised with `from`).
"""
from __future__ import annotations


class WordStoreError(Exception):
    """Base for everything the store surfaces to a caller."""

    kind = "store_error"


class SourceUnavailable(WordStoreError):
    """The raw word list could not be fetched, read or parsed."""

    kind = "source_unavailable"


class PersistFailure(WordStoreError):
    """Letter files or the index file could not be written or read back."""

    kind = "persist_failure"


class NotInitialized(WordStoreError):
    """No snapshot is live yet (nothing built and nothing persisted to load)."""

    kind = "not_initialized"


class RebuildInProgress(WordStoreError):
    """Another rebuild or load already holds the store."""

    kind = "rebuild_in_progress"
