"""
Real-time fan-out — an explicit registry of connected subscribers.

One Broadcaster is created per application by create_app() and handed to
FeedService; nothing reaches it as a module global.

Delivery rules:
  - every subscriber receives every event, in emit order
  - each subscriber owns a bounded queue; when it is full the event is
    dropped for that subscriber only (no backpressure, no redelivery)
  - events emitted while nobody is subscribed are simply lost
"""
import itertools
import logging
import queue
import threading
from dataclasses import dataclass

log = logging.getLogger(__name__)

# Topics used by the feed
TOPIC_POSTS    = "posts"      # feed-list subscribers
TOPIC_POST     = "post"       # single-post detail subscribers
TOPIC_COMMENTS = "comments"   # comment threads

# Put on a subscriber's queue to end its stream
CLOSED = object()


@dataclass(frozen=True)
class Event:
    topic: str
    data: dict


class Broadcaster:
    """Maps subscriber handles to delivery queues and fans events out to all of them."""

    def __init__(self, queue_size: int = 100):
        self._queue_size  = queue_size
        self._subscribers: dict[int, queue.Queue] = {}
        self._lock        = threading.Lock()
        self._ids         = itertools.count(1)

    # ── Registry ──────────────────────────────────────────────────────────────

    def subscribe(self) -> tuple[int, queue.Queue]:
        """Register a new subscriber and return (handle, delivery queue)."""
        q = queue.Queue(maxsize=self._queue_size)
        with self._lock:
            handle = next(self._ids)
            self._subscribers[handle] = q
        log.debug("Subscriber %s connected (%d total)", handle, len(self))
        return handle, q

    def unsubscribe(self, handle: int) -> None:
        """Forget a subscriber. Unknown handles are ignored."""
        with self._lock:
            q = self._subscribers.pop(handle, None)
        if q is not None:
            if not _offer(q, CLOSED):
                # full queue: make room so the stream still ends
                _clear(q)
                _offer(q, CLOSED)
            log.debug("Subscriber %s disconnected (%d total)", handle, len(self))

    def close(self) -> None:
        """Disconnect every subscriber."""
        with self._lock:
            handles = list(self._subscribers)
        for handle in handles:
            self.unsubscribe(handle)

    def __len__(self) -> int:
        with self._lock:
            return len(self._subscribers)

    # ── Fan-out ───────────────────────────────────────────────────────────────

    def emit(self, topic: str, data: dict) -> int:
        """Deliver {topic, data} to every current subscriber.

        Returns the number of subscribers that accepted the event.
        """
        event = Event(topic=topic, data=data)
        with self._lock:
            targets = list(self._subscribers.items())

        delivered = 0
        for handle, q in targets:
            if _offer(q, event):
                delivered += 1
            else:
                log.warning("Subscriber %s queue full, dropped %s/%s",
                            handle, topic, data.get("action"))
        return delivered


def _offer(q: queue.Queue, item) -> bool:
    try:
        q.put_nowait(item)
        return True
    except queue.Full:
        return False


def _clear(q: queue.Queue) -> None:
    while True:
        try:
            q.get_nowait()
        except queue.Empty:
            return
