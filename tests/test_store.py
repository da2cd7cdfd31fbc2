"""
Tests for WordStore: rebuild, persistence layout, load round-trip, failure handling
and snapshot atomicity.
"""
import json
import threading

import pytest

import word_swap.store as store_module
from word_swap.errors import NotInitialized, PersistFailure, RebuildInProgress, SourceUnavailable
from word_swap.resolver import substitute_sentence
from word_swap.store import INDEX_FILENAME, LETTERS_DIRNAME, WordStore, load_snapshot

from .conftest import C_WORDS, SCENARIO_WORDS


class TestRebuild:
    def test_scenario_index(self, word_store):
        snapshot = word_store.rebuild(SCENARIO_WORDS)
        index = snapshot.index_dict()
        assert index["a"] == {"2": {"first": 0, "last": 0}}
        assert index["d"] == {"3": {"first": 0, "last": 0}}
        assert "z" not in index
        assert snapshot.word_count == 5
        assert word_store.ready
        assert word_store.current() is snapshot

    def test_writes_letter_files_and_index(self, word_store):
        word_store.rebuild(["bb", "b", "bbb", "cat"])
        letters_dir = word_store.data_dir / LETTERS_DIRNAME
        assert sorted(p.name for p in letters_dir.glob("*.txt")) == [f"{c}.txt" for c in "abcdefghijklmnopqrstuvwxyz"]
        assert (letters_dir / "b.txt").read_text(encoding="utf-8") == "b\nbb\nbbb"
        assert (letters_dir / "z.txt").read_text(encoding="utf-8") == ""
        on_disk = json.loads((word_store.data_dir / INDEX_FILENAME).read_text(encoding="utf-8"))
        assert on_disk == {
            "b": {"1": {"first": 0, "last": 0}, "2": {"first": 1, "last": 1}, "3": {"first": 2, "last": 2}},
            "c": {"3": {"first": 0, "last": 0}},
        }

    def test_rejects_a_single_string(self, word_store):
        with pytest.raises(SourceUnavailable):
            word_store.rebuild("cat dog")
        assert not word_store.ready

    def test_buckets_sorted_after_rebuild(self, word_store, big_words):
        snapshot = word_store.rebuild(big_words)
        for bucket in snapshot.buckets:
            lengths = [len(w) for w in bucket]
            assert lengths == sorted(lengths)

    def test_snapshot_is_read_only(self, word_store):
        snapshot = word_store.rebuild(C_WORDS)
        with pytest.raises(TypeError):
            snapshot.index[2][3] = None
        with pytest.raises(TypeError):
            snapshot.buckets[2][0] = "cow"


class TestLoad:
    def test_round_trip_reproduces_index(self, word_store, big_words):
        built = word_store.rebuild(big_words)
        reloaded = WordStore(word_store.data_dir).load()
        assert reloaded.index_dict() == built.index_dict()
        assert [dict(ix) for ix in reloaded.index] == [dict(ix) for ix in built.index]
        assert reloaded.buckets == built.buckets

    def test_nothing_persisted(self, word_store):
        with pytest.raises(NotInitialized):
            word_store.load()
        assert not word_store.ready

    def test_corrupt_index(self, word_store):
        word_store.rebuild(C_WORDS)
        (word_store.data_dir / INDEX_FILENAME).write_text("{not json", encoding="utf-8")
        with pytest.raises(PersistFailure) as exc:
            load_snapshot(word_store.data_dir)
        assert exc.value.__cause__ is not None

    def test_index_that_does_not_fit_letter_files(self, word_store):
        word_store.rebuild(C_WORDS)
        (word_store.data_dir / INDEX_FILENAME).write_text(
            json.dumps({"c": {"3": {"first": 0, "last": 9}}}), encoding="utf-8"
        )
        with pytest.raises(PersistFailure):
            load_snapshot(word_store.data_dir)

    def test_failed_load_keeps_live_snapshot(self, word_store):
        snapshot = word_store.rebuild(C_WORDS)
        (word_store.data_dir / INDEX_FILENAME).write_text("[]", encoding="utf-8")
        with pytest.raises(PersistFailure):
            word_store.load()
        assert word_store.current() is snapshot


class TestFailures:
    def test_current_while_empty(self, word_store):
        with pytest.raises(NotInitialized):
            word_store.current()

    def test_persist_failure_while_empty_stays_empty(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        store = WordStore(blocker)
        with pytest.raises(PersistFailure):
            store.rebuild(C_WORDS)
        assert not store.ready

    def test_persist_failure_while_ready_keeps_old_snapshot(self, word_store, tmp_path):
        old = word_store.rebuild(SCENARIO_WORDS)
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        word_store.data_dir = blocker
        with pytest.raises(PersistFailure) as exc:
            word_store.rebuild(C_WORDS)
        assert isinstance(exc.value.__cause__, OSError)
        assert word_store.current() is old

    def test_concurrent_rebuild_is_rejected(self, word_store):
        word_store._mutation_lock.acquire()
        try:
            with pytest.raises(RebuildInProgress):
                word_store.rebuild(C_WORDS)
            with pytest.raises(RebuildInProgress):
                word_store.load()
        finally:
            word_store._mutation_lock.release()
        word_store.rebuild(C_WORDS)
        assert word_store.ready


class TestAtomicity:
    def test_old_snapshot_served_until_persist_finishes(self, word_store, monkeypatch):
        old = word_store.rebuild(SCENARIO_WORDS)
        seen = []
        real_save = store_module.save_snapshot

        def recording_save(snapshot, data_dir):
            seen.append(word_store.current())
            real_save(snapshot, data_dir)

        monkeypatch.setattr(store_module, "save_snapshot", recording_save)
        new = word_store.rebuild(C_WORDS)
        assert seen == [old]
        assert word_store.current() is new

    def test_readers_see_whole_snapshots_during_rebuilds(self, word_store):
        first = word_store.rebuild(["apple", "axe"])
        second_words = ["berry", "bee"]
        stop = threading.Event()
        mixed = []

        def reader():
            while not stop.is_set():
                snap = word_store.current()
                a_words = snap.buckets[0]
                b_words = snap.buckets[1]
                # Exactly one of the two corpora, never letters from both
                if bool(a_words) == bool(b_words):
                    mixed.append(snap)

        t = threading.Thread(target=reader)
        t.start()
        try:
            for i in range(20):
                word_store.rebuild(second_words if i % 2 == 0 else ["apple", "axe"])
        finally:
            stop.set()
            t.join()
        assert mixed == []
        assert first.buckets[0] == ("axe", "apple")


class TestWordShape:
    def test_words_with_inner_whitespace_never_reach_the_index(self, word_store):
        snapshot = word_store.rebuild(["ab cd", "ab\rcd", "abxcd", "abycd"])
        assert snapshot.buckets[0] == ("abxcd", "abycd")
        reloaded = WordStore(word_store.data_dir).load()
        assert reloaded.buckets == snapshot.buckets
        assert reloaded.index_dict() == snapshot.index_dict()
        for _ in range(20):
            assert substitute_sentence("abxcd", reloaded) == "abycd"

    @pytest.mark.parametrize(
        "letter_file",
        [
            "cat\ncoat\ncap",  # wrong length inside the range
            "cat\ndot\ncap",  # wrong first letter
            "cat\nc t\ncap",  # not a word
            "cat\ncot\ncap\ncape",  # word the index does not cover
        ],
    )
    def test_edited_letter_file_is_rejected(self, word_store, letter_file):
        old = word_store.rebuild(C_WORDS)
        (word_store.data_dir / LETTERS_DIRNAME / "c.txt").write_text(letter_file, encoding="utf-8")
        with pytest.raises(PersistFailure):
            word_store.load()
        assert word_store.current() is old

    def test_non_maximal_range_is_rejected(self, word_store):
        word_store.rebuild(C_WORDS)
        (word_store.data_dir / INDEX_FILENAME).write_text(
            json.dumps({"a": {"2": {"first": 0, "last": 0}}, "c": {"3": {"first": 0, "last": 1}},
                        "d": {"3": {"first": 0, "last": 0}}}),
            encoding="utf-8",
        )
        with pytest.raises(PersistFailure):
            load_snapshot(word_store.data_dir)
