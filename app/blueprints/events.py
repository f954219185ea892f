"""
Real-time events blueprint.

GET /events – Server-Sent Events stream of every feed broadcast.

Frames:
  event: posts | post | comments
  data:  {"action": "create" | "update" | "delete" | "like", ...}

A ": keepalive" comment is written whenever BROADCAST_KEEPALIVE seconds pass
without an event, so proxies keep the connection open and a vanished
client is noticed on the next write.
"""
import json
import logging
import queue

from flask import Blueprint, Response, current_app, stream_with_context
from flask_login import login_required

from app.utils.broadcast import CLOSED

log = logging.getLogger(__name__)
events_bp = Blueprint("events", __name__)


def format_sse(topic: str, data: dict) -> str:
    return f"event: {topic}\ndata: {json.dumps(data)}\n\n"


def event_stream(broadcaster, handle: int, q: queue.Queue, keepalive: float):
    """Yield SSE frames from q until the subscription is closed.

    The subscriber is always removed from the broadcaster on exit, including
    when the client disconnects and the server closes the generator.
    """
    try:
        yield ": connected\n\n"
        while True:
            try:
                item = q.get(timeout=keepalive)
            except queue.Empty:
                yield ": keepalive\n\n"
                continue
            if item is CLOSED:
                break
            yield format_sse(item.topic, item.data)
    finally:
        broadcaster.unsubscribe(handle)


@events_bp.route("/events")
@login_required
def stream():
    broadcaster = current_app.extensions["broadcaster"]
    keepalive   = current_app.config["BROADCAST_KEEPALIVE"]
    handle, q   = broadcaster.subscribe()

    return Response(
        stream_with_context(event_stream(broadcaster, handle, q, keepalive)),
        content_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
