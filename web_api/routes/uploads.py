# web_api/routes/uploads.py
"""File upload API route.

Endpoints:
- POST /api/uploads - Upload a file to object storage, streaming progress (SSE)
"""

import logging
from typing import AsyncIterator

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, StreamingResponse
from starlette.datastructures import UploadFile

from core.storage import ObjectStore, ProgressEmitter, StreamingUploadCoordinator
from web_api.auth import get_current_user
from web_api.dependencies import get_object_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/uploads", tags=["uploads"])

READ_CHUNK_SIZE = 1024 * 1024

SSE_HEADERS = {
    "Cache-Control": "no-cache, no-transform",
    "Connection": "keep-alive",
}


async def read_chunks(file: UploadFile) -> AsyncIterator[bytes]:
    while True:
        chunk = await file.read(READ_CHUNK_SIZE)
        if not chunk:
            break
        yield chunk


@router.post("")
async def upload_file(
    request: Request,
    user: dict = Depends(get_current_user),
    store: ObjectStore = Depends(get_object_store),
):
    """
    Upload the form's "file" (optionally under "folder") and stream progress.

    The response is text/event-stream: progress events, then one done or
    error event. The form is spooled to disk by the framework and only closed
    once the stream has finished with it.
    """
    form = await request.form()

    file = form.get("file")
    if not isinstance(file, UploadFile) or not file.filename:
        await form.close()
        return JSONResponse(status_code=400, content={"error": "Missing file"})

    folder = form.get("folder")
    folder = folder.strip() if isinstance(folder, str) and folder.strip() else None

    target = store.new_target(file.filename, folder, file.content_type)
    total = file.size or 0
    coordinator = StreamingUploadCoordinator(store)
    emitter = ProgressEmitter()

    logger.info(
        f"User {user['sub']} uploading {file.filename} ({total} bytes) to {target.key}"
    )

    async def work(on_progress):
        return await coordinator.upload(
            read_chunks(file),
            target,
            name=file.filename,
            total=total,
            on_progress=on_progress,
        )

    async def event_stream():
        try:
            async for frame in emitter.stream(work):
                yield frame
        finally:
            await form.close()

    return StreamingResponse(
        event_stream(), media_type="text/event-stream", headers=SSE_HEADERS
    )
