from datetime import datetime, timedelta, timezone

import pytest

from clipmod.database.history_file import HistoryFile
from clipmod.exceptions import HistoryFileError, PersistenceWarning
from clipmod.services.history_service import HistoryStore
from clipmod.utils.hashing import content_hash

from conftest import FakeClock


class FailingHistoryFile(HistoryFile):
    def __init__(self, path):
        super().__init__(path)
        self.fail = True

    def save(self, entries):
        if self.fail:
            raise HistoryFileError("disk full")
        super().save(entries)


class CountingHistoryFile(HistoryFile):
    def __init__(self, path):
        super().__init__(path)
        self.saved_sizes = []

    def save(self, entries):
        self.saved_sizes.append(len(entries))
        super().save(entries)


def test_repeat_of_last_entry_is_suppressed(history_file, clock):
    store = HistoryStore(history_file, clock=clock)

    first = store.record_if_changed("A")
    second = store.record_if_changed("A")

    assert first is not None
    assert second is None
    assert [e.content for e in store.entries] == ["A"]


def test_non_adjacent_repeats_are_kept(history_file, clock):
    store = HistoryStore(history_file, clock=clock)

    for text in ("A", "B", "A"):
        store.record_if_changed(text)

    assert [e.content for e in store.entries] == ["A", "B", "A"]
    assert len({e.hash for e in store.entries}) == 3


def test_empty_text_is_a_valid_entry(history_file, clock):
    store = HistoryStore(history_file, clock=clock)

    assert store.record_if_changed("") is not None
    assert store.record_if_changed("") is None
    assert len(store) == 1


def test_entry_hash_matches_content_and_timestamp(history_file, clock):
    store = HistoryStore(history_file, clock=clock)

    entry = store.record_if_changed("hello")

    assert entry.hash == content_hash("hello", entry.timestamp)
    assert entry.timestamp == datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def test_every_accepted_entry_is_persisted(history_path, clock):
    history_file = CountingHistoryFile(history_path)
    store = HistoryStore(history_file, clock=clock)

    store.record_if_changed("A")
    store.record_if_changed("A")
    store.record_if_changed("B")

    assert history_file.saved_sizes == [1, 2]
    assert [e.content for e in HistoryFile(history_path).load()] == ["A", "B"]


def test_history_is_loaded_at_construction(history_path, clock):
    store = HistoryStore(HistoryFile(history_path), clock=clock)
    store.record_if_changed("A")
    store.record_if_changed("B")

    reopened = HistoryStore(HistoryFile(history_path), clock=clock)

    assert reopened.entries == store.entries
    assert reopened.record_if_changed("B") is None


def test_corrupt_history_starts_empty(history_file, history_path, clock):
    history_path.parent.mkdir(parents=True)
    history_path.write_text("{{{ definitely not json", encoding="utf-8")

    store = HistoryStore(history_file, clock=clock)

    assert store.entries == ()
    assert store.record_if_changed("fresh") is not None


def test_persistence_failure_keeps_entry_and_warns(history_path, clock):
    history_file = FailingHistoryFile(history_path)
    store = HistoryStore(history_file, clock=clock)

    with pytest.warns(PersistenceWarning):
        entry = store.record_if_changed("keep me")

    assert entry is not None
    assert store.last == entry
    assert isinstance(store.last_persist_error, HistoryFileError)

    history_file.fail = False
    assert store.flush() is True
    assert store.last_persist_error is None
    assert [e.content for e in HistoryFile(history_path).load()] == ["keep me"]


def test_lone_surrogate_does_not_block_later_saves(history_path, clock):
    store = HistoryStore(HistoryFile(history_path), clock=clock)

    store.record_if_changed("before")
    odd = store.record_if_changed("bad \ud800 text")
    store.record_if_changed("after")

    assert store.last_persist_error is None
    assert "\ud800" not in odd.content
    assert odd.content == "bad \ufffd text"
    on_disk = [e.content for e in HistoryFile(history_path).load()]
    assert on_disk == ["before", odd.content, "after"]


def test_repeated_lone_surrogate_is_recorded_once(history_file, clock):
    store = HistoryStore(history_file, clock=clock)

    assert store.record_if_changed("\udc80") is not None
    assert store.record_if_changed("\udc80") is None
    assert len(store) == 1


def test_surrogate_pairs_are_joined(history_file, clock):
    store = HistoryStore(history_file, clock=clock)

    entry = store.record_if_changed("\ud83d\ude00")

    assert entry.content == "\U0001f600"


def test_timestamps_are_non_decreasing(history_file):
    store = HistoryStore(history_file, clock=FakeClock(step=0.0))

    for text in ("a", "b", "c", "d"):
        store.record_if_changed(text)

    stamps = [e.timestamp for e in store.entries]
    assert stamps == sorted(stamps)
    assert len(stamps) == 4


def test_clock_going_backwards_is_rejected(history_file):
    times = iter([
        datetime(2024, 3, 1, 12, 0, 5, tzinfo=timezone.utc),
        datetime(2024, 3, 1, 12, 0, 1, tzinfo=timezone.utc),
    ])
    store = HistoryStore(history_file, clock=lambda: next(times))

    assert store.record_if_changed("a") is not None
    assert store.record_if_changed("b") is None
    assert [e.content for e in store.entries] == ["a"]


def test_naive_clock_values_are_treated_as_utc(history_file):
    store = HistoryStore(history_file, clock=lambda: datetime(2024, 3, 1, 12, 0))

    entry = store.record_if_changed("a")

    assert entry.timestamp.tzinfo is not None


def test_accepted_entries_publish_change(history_file, clock, bus):
    events = []
    bus.subscribe(events.append)
    store = HistoryStore(history_file, bus=bus, clock=clock)

    store.record_if_changed("A")
    store.record_if_changed("A")
    store.record_if_changed("B")

    assert len(events) == 2


def test_failing_observer_does_not_break_recording(history_file, clock, bus):
    def broken(event):
        raise RuntimeError("observer bug")

    bus.subscribe(broken)
    store = HistoryStore(history_file, bus=bus, clock=clock)

    assert store.record_if_changed("A") is not None
    assert len(store) == 1


def test_observer_sees_new_entry(history_file, clock, bus):
    seen = []
    store = HistoryStore(history_file, bus=bus, clock=clock)
    bus.subscribe(lambda event: seen.append(store.last.content))

    store.record_if_changed("visible")

    assert seen == ["visible"]


def test_entries_is_a_snapshot(history_file, clock):
    store = HistoryStore(history_file, clock=clock)
    store.record_if_changed("A")

    snapshot = store.entries
    store.record_if_changed("B")

    assert len(snapshot) == 1
    assert len(store.entries) == 2


def test_find_and_search(history_file, clock):
    store = HistoryStore(history_file, clock=clock)
    first = store.record_if_changed("Hello world")
    store.record_if_changed("unrelated")
    third = store.record_if_changed("say HELLO")

    assert store.find(first.hash) == first
    assert store.find("missing") is None
    assert store.search("hello") == [third, first]
