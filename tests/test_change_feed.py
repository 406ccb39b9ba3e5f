"""
Tests for in-process change notifications.
"""

from portal_service.change_feed import ChangeEvent, ChangeFeed, ChangeKind


class TestChangeFeed:
    def test_table_subscribers_receive_events(self):
        feed = ChangeFeed()
        received = []
        feed.subscribe("active_visitors", received.append)

        feed.publish(ChangeEvent("active_visitors", ChangeKind.INSERT, {"session_id": "s1"}))
        feed.publish(ChangeEvent("page_views", ChangeKind.INSERT, {}))

        assert [event.record for event in received] == [{"session_id": "s1"}]

    def test_wildcard_receives_everything(self):
        feed = ChangeFeed()
        received = []
        feed.subscribe("*", received.append)

        feed.publish(ChangeEvent("jobs", ChangeKind.DELETE, {"id": "1"}))
        feed.publish(ChangeEvent("myths", ChangeKind.UPDATE, {"id": "2"}))

        assert [event.table for event in received] == ["jobs", "myths"]

    def test_unsubscribe(self):
        feed = ChangeFeed()
        received = []
        unsubscribe = feed.subscribe("jobs", received.append)
        assert feed.subscriber_count("jobs") == 1

        unsubscribe()
        unsubscribe()
        feed.publish(ChangeEvent("jobs", ChangeKind.INSERT, {}))

        assert received == []
        assert feed.subscriber_count("jobs") == 0

    def test_failing_subscriber_does_not_block_others(self):
        feed = ChangeFeed()
        received = []

        def broken(event):
            raise RuntimeError("subscriber bug")

        feed.subscribe("jobs", broken)
        feed.subscribe("jobs", received.append)
        feed.publish(ChangeEvent("jobs", ChangeKind.INSERT, {}))

        assert len(received) == 1

    def test_backend_writes_publish(self, backend):
        events = []
        backend.change_feed.subscribe("*", events.append)

        row = backend.insert("jobs", {"position": "Nurse"})
        backend.update("jobs", {"position": "Doctor"}, [])
        backend.delete("jobs", [])

        assert [event.kind for event in events] == [ChangeKind.INSERT, ChangeKind.UPDATE, ChangeKind.DELETE]
        assert events[0].record["id"] == row["id"]
        assert events[0].occurred_at
