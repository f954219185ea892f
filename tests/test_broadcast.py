"""
Tests for app.utils.broadcast.Broadcaster; pure unit tests, no app needed.
"""
from app.utils.broadcast import Broadcaster, CLOSED, Event


def _drain(q):
    out = []
    while not q.empty():
        out.append(q.get_nowait())
    return out


class TestRegistry:

    def test_subscribe_assigns_unique_handles(self):
        b = Broadcaster()
        h1, _ = b.subscribe()
        h2, _ = b.subscribe()
        assert h1 != h2
        assert len(b) == 2

    def test_unsubscribe_closes_queue(self):
        b = Broadcaster()
        handle, q = b.subscribe()
        b.unsubscribe(handle)
        assert len(b) == 0
        assert _drain(q) == [CLOSED]

    def test_unsubscribe_unknown_handle(self):
        b = Broadcaster()
        b.unsubscribe(99)
        assert len(b) == 0

    def test_close_disconnects_everyone(self):
        b = Broadcaster()
        _, q1 = b.subscribe()
        _, q2 = b.subscribe()
        b.close()
        assert len(b) == 0
        assert _drain(q1) == [CLOSED]
        assert _drain(q2) == [CLOSED]


class TestEmit:

    def test_every_subscriber_gets_every_event(self):
        b = Broadcaster()
        _, q1 = b.subscribe()
        _, q2 = b.subscribe()

        assert b.emit("posts", {"action": "create", "post": {"id": 1}}) == 2
        assert b.emit("comments", {"action": "delete", "comment": 3}) == 2

        expected = [
            Event("posts", {"action": "create", "post": {"id": 1}}),
            Event("comments", {"action": "delete", "comment": 3}),
        ]
        assert _drain(q1) == expected
        assert _drain(q2) == expected

    def test_no_subscribers(self):
        assert Broadcaster().emit("posts", {"action": "delete", "post": 1}) == 0

    def test_unsubscribed_handle_misses_later_events(self):
        b = Broadcaster()
        handle, q = b.subscribe()
        b.unsubscribe(handle)
        _drain(q)
        b.emit("posts", {"action": "delete", "post": 1})
        assert _drain(q) == []

    def test_full_queue_drops_for_that_subscriber_only(self):
        b = Broadcaster(queue_size=1)
        _, slow = b.subscribe()
        b.emit("posts", {"action": "delete", "post": 1})

        _, fresh = b.subscribe()
        delivered = b.emit("posts", {"action": "delete", "post": 2})

        assert delivered == 1
        assert [e.data["post"] for e in _drain(slow)] == [1]
        assert [e.data["post"] for e in _drain(fresh)] == [2]

    def test_unsubscribe_on_full_queue_still_closes(self):
        b = Broadcaster(queue_size=1)
        handle, q = b.subscribe()
        b.emit("posts", {"action": "delete", "post": 1})
        b.unsubscribe(handle)
        assert _drain(q) == [CLOSED]
