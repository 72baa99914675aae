"""Upload progress events and their server-sent-events encoding.

Wire format, one JSON object per "data:" frame:

    {"progress": 42, "loaded": 2202009, "total": 5242880}
    {"done": true, "key": ..., "url": ..., "name": ..., "contentType": ..., "size": ...}
    {"error": "Failed to upload file"}

A stream carries zero or more progress events followed by exactly one done
or error event.
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import AsyncIterator, Awaitable, Callable, Union

import sentry_sdk

from .errors import UploadError

logger = logging.getLogger(__name__)

GENERIC_UPLOAD_ERROR = "Failed to upload file"


@dataclass(frozen=True)
class ProgressEvent:
    progress: int
    loaded: int
    total: int


@dataclass(frozen=True)
class DoneEvent:
    key: str
    url: str
    name: str
    content_type: str
    size: int


@dataclass(frozen=True)
class ErrorEvent:
    error: str


UploadEvent = Union[ProgressEvent, DoneEvent, ErrorEvent]

ProgressCallback = Callable[[ProgressEvent], None]


def event_payload(event: UploadEvent) -> dict:
    if isinstance(event, ProgressEvent):
        return {"progress": event.progress, "loaded": event.loaded, "total": event.total}
    if isinstance(event, DoneEvent):
        return {
            "done": True,
            "key": event.key,
            "url": event.url,
            "name": event.name,
            "contentType": event.content_type,
            "size": event.size,
        }
    if isinstance(event, ErrorEvent):
        return {"error": event.error}
    raise TypeError(f"Not an upload event: {event!r}")


def encode_event(event: UploadEvent) -> str:
    """Encode an event as one SSE frame."""
    return f"data: {json.dumps(event_payload(event), ensure_ascii=False)}\n\n"


def decode_event(frame: str) -> UploadEvent:
    """Decode one SSE frame produced by encode_event.

    Raises:
        ValueError: If the frame is not a recognised upload event
    """
    frame = frame.strip()
    if not frame.startswith("data:"):
        raise ValueError(f"Not an SSE data frame: {frame!r}")
    payload = json.loads(frame[len("data:"):].strip())

    if "error" in payload:
        return ErrorEvent(error=payload["error"])
    if payload.get("done"):
        return DoneEvent(
            key=payload["key"],
            url=payload["url"],
            name=payload["name"],
            content_type=payload["contentType"],
            size=payload["size"],
        )
    if "progress" in payload:
        return ProgressEvent(
            progress=payload["progress"],
            loaded=payload["loaded"],
            total=payload["total"],
        )
    raise ValueError(f"Unknown upload event: {payload!r}")


class ProgressTracker:
    """
    Turns byte counts into progress events.

    Percentages are rounded half up and clamped to 0..99 (100 is reserved
    for the done event). An event is only produced when the percentage is
    strictly greater than the last one produced, and never while the total
    is unknown.
    """

    def __init__(self, total: int):
        self.total = total
        self.last_percent = 0

    def update(self, loaded: int) -> ProgressEvent | None:
        if self.total <= 0:
            return None

        percent = (loaded * 100 + self.total // 2) // self.total
        percent = max(0, min(99, percent))
        if percent <= self.last_percent:
            return None

        self.last_percent = percent
        return ProgressEvent(progress=percent, loaded=loaded, total=self.total)


_FINISHED = object()


class ProgressEmitter:
    """
    Runs an upload concurrently and streams its events as SSE frames.

    The work receives a callback for progress events and returns the
    DoneEvent. If the consumer stops reading, the work is cancelled.
    """

    def __init__(self):
        self._queue: asyncio.Queue = asyncio.Queue()

    def publish(self, event: ProgressEvent) -> None:
        self._queue.put_nowait(event)

    async def stream(
        self, work: Callable[[ProgressCallback], Awaitable[DoneEvent]]
    ) -> AsyncIterator[str]:
        task = asyncio.create_task(work(self.publish))
        task.add_done_callback(lambda _: self._queue.put_nowait(_FINISHED))

        try:
            while True:
                event = await self._queue.get()
                if event is _FINISHED:
                    break
                yield encode_event(event)

            yield encode_event(self._terminal_event(task))
        finally:
            if not task.done():
                logger.info("Upload stream closed early, cancelling upload")
                task.cancel()
                # Let the upload abort its multipart upload before we return
                await asyncio.wait([task])

    @staticmethod
    def _terminal_event(task: asyncio.Task) -> UploadEvent:
        if task.cancelled():
            return ErrorEvent(error="Upload cancelled")

        exc = task.exception()
        if exc is None:
            return task.result()
        if isinstance(exc, UploadError):
            return ErrorEvent(error=str(exc) or GENERIC_UPLOAD_ERROR)

        logger.error(f"Unexpected upload failure: {exc}", exc_info=exc)
        sentry_sdk.capture_exception(exc)
        return ErrorEvent(error=GENERIC_UPLOAD_ERROR)
