"""Relay an inbound byte stream to the object store.

At most one part is held in memory at a time. Payloads up to PART_SIZE go up
with a single put; anything larger becomes a multipart upload whose parts are
sent as soon as they fill. The final part may be smaller than PART_SIZE.
"""

import asyncio
import logging
from typing import AsyncIterable, AsyncIterator

import sentry_sdk

from .errors import UploadError
from .events import GENERIC_UPLOAD_ERROR, DoneEvent, ProgressCallback, ProgressTracker
from .store import ObjectStore, UploadTarget

logger = logging.getLogger(__name__)

# R2 rejects non-final parts smaller than 5 MiB
PART_SIZE = 5 * 1024 * 1024

IDLE_TIMEOUT_SECONDS = 60


class StreamingUploadCoordinator:
    """Uploads one stream of chunks to one target."""

    def __init__(
        self,
        store: ObjectStore,
        part_size: int = PART_SIZE,
        idle_timeout: float = IDLE_TIMEOUT_SECONDS,
    ):
        self.store = store
        self.part_size = part_size
        self.idle_timeout = idle_timeout

    async def _chunks(self, chunks: AsyncIterable[bytes]) -> AsyncIterator[bytes]:
        iterator = chunks.__aiter__()
        while True:
            try:
                chunk = await asyncio.wait_for(iterator.__anext__(), self.idle_timeout)
            except StopAsyncIteration:
                return
            except asyncio.TimeoutError:
                raise UploadError("Upload timed out waiting for data")
            if chunk:
                yield chunk

    async def upload(
        self,
        chunks: AsyncIterable[bytes],
        target: UploadTarget,
        name: str,
        total: int = 0,
        on_progress: ProgressCallback | None = None,
    ) -> DoneEvent:
        """
        Upload every chunk to target.key.

        Args:
            chunks: Inbound bytes, in order
            target: Key, content type and public URL of the object
            name: Original filename, echoed back in the result
            total: Declared size in bytes (0 if unknown)
            on_progress: Called after each acknowledged part or put

        Returns:
            DoneEvent describing the stored object

        Raises:
            UploadError: If reading or storing fails. Any multipart upload
                started is aborted first. Cancellation is re-raised as is.
        """
        tracker = ProgressTracker(total)
        buffer = bytearray()
        size = 0
        upload_id: str | None = None
        parts: list[dict] = []

        def report(loaded: int) -> None:
            event = tracker.update(loaded)
            if event is not None and on_progress is not None:
                on_progress(event)

        async def send_part(body: bytes) -> None:
            part_number = len(parts) + 1
            etag = await self.store.upload_part(target.key, upload_id, part_number, body)
            parts.append({"ETag": etag, "PartNumber": part_number})

        try:
            async for chunk in self._chunks(chunks):
                buffer.extend(chunk)
                size += len(chunk)

                # Keep at least one byte back so the last part is never empty
                while len(buffer) > self.part_size:
                    if upload_id is None:
                        upload_id = await self.store.create_multipart_upload(
                            target.key, target.content_type
                        )
                        logger.info(f"Started multipart upload for {target.key}")
                    body = bytes(buffer[: self.part_size])
                    del buffer[: self.part_size]
                    await send_part(body)
                    report(size - len(buffer))

            if upload_id is None:
                await self.store.put_object(target.key, bytes(buffer), target.content_type)
            else:
                await send_part(bytes(buffer))
                await self.store.complete_multipart_upload(target.key, upload_id, parts)
            buffer.clear()
            report(size)

        except UploadError:
            await self._abort(target.key, upload_id)
            raise
        except Exception as e:
            logger.error(f"Upload of {target.key} failed: {e}")
            sentry_sdk.capture_exception(e)
            await self._abort(target.key, upload_id)
            raise UploadError(GENERIC_UPLOAD_ERROR) from e
        except BaseException:
            # Cancelled (client went away): clean up, then keep cancelling
            await self._abort(target.key, upload_id)
            raise

        logger.info(f"Uploaded {target.key} ({size} bytes, {len(parts) or 1} part(s))")
        return DoneEvent(
            key=target.key,
            url=target.public_url,
            name=name,
            content_type=target.content_type,
            size=size,
        )

    async def _abort(self, key: str, upload_id: str | None) -> None:
        if upload_id is None:
            return
        try:
            await self.store.abort_multipart_upload(key, upload_id)
        except Exception as e:
            logger.error(f"Failed to abort multipart upload {upload_id} for {key}: {e}")
            sentry_sdk.capture_exception(e)
