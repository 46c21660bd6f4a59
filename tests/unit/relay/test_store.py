"""
Unit tests for relay.store module.

Tests:
- insert(): new vs. overwrite, insertion order preserved on overwrite
- Broadcast vs. seed inserts and listener registration
- scan() with and without predicate, get(), clear()
"""

from unittest.mock import MagicMock

from mockstr.relay.store import EventStore


class TestInsert:
    """EventStore.insert()."""

    def test_new_event(self, make_event):
        store = EventStore()
        event = make_event()
        assert store.insert(event) is True
        assert event.id in store
        assert len(store) == 1

    def test_same_id_overwrites(self, make_event):
        store = EventStore()
        event = make_event()
        store.insert(event)
        assert store.insert(event) is False
        assert len(store) == 1

    def test_overwrite_keeps_position(self, make_event):
        store = EventStore()
        first = make_event(content="1")
        second = make_event(content="2")
        store.insert(first)
        store.insert(second)
        store.insert(first)
        assert store.scan() == [first, second]


class TestListeners:
    """Broadcast fan-out hooks."""

    def test_broadcast_notifies(self, make_event):
        store = EventStore()
        listener = MagicMock()
        store.add_listener(listener)
        event = make_event()
        store.insert(event)
        listener.assert_called_once_with(event)

    def test_seed_insert_is_silent(self, make_event):
        store = EventStore()
        listener = MagicMock()
        store.add_listener(listener)
        store.insert(make_event(), broadcast=False)
        listener.assert_not_called()

    def test_event_stored_before_listener_runs(self, make_event):
        store = EventStore()
        event = make_event()
        seen = []
        store.add_listener(lambda e: seen.append(e.id in store))
        store.insert(event)
        assert seen == [True]

    def test_remove_listener(self, make_event):
        store = EventStore()
        listener = MagicMock()
        store.add_listener(listener)
        store.remove_listener(listener)
        store.insert(make_event())
        listener.assert_not_called()

    def test_clear_keeps_listeners(self, make_event):
        store = EventStore()
        listener = MagicMock()
        store.add_listener(listener)
        store.clear()
        store.insert(make_event())
        assert listener.call_count == 1


class TestReads:
    """get(), scan(), iteration and clear()."""

    def test_get(self, make_event):
        store = EventStore()
        event = make_event()
        store.insert(event)
        assert store.get(event.id) is event
        assert store.get("0" * 64) is None

    def test_scan_predicate(self, make_event):
        store = EventStore()
        issue = make_event(1621)
        note = make_event(1)
        store.insert(issue)
        store.insert(note)
        assert store.scan(lambda e: e.kind == 1621) == [issue]
        assert list(store) == [issue, note]

    def test_clear(self, make_event):
        store = EventStore()
        store.insert(make_event())
        store.clear()
        assert len(store) == 0
        assert store.scan() == []
