"""
Upload pipeline: object keys, content types, the object store, the
streaming uploader and its progress events.
"""

from .content_types import choose_content_type, default_folder, resolve_content_type
from .errors import UploadError
from .events import (
    DoneEvent,
    ErrorEvent,
    ProgressEmitter,
    ProgressEvent,
    ProgressTracker,
    decode_event,
    encode_event,
)
from .keys import generate_key, join_public_url, sanitize_filename
from .store import CACHE_CONTROL, ObjectStore, UploadTarget
from .uploader import IDLE_TIMEOUT_SECONDS, PART_SIZE, StreamingUploadCoordinator

__all__ = [
    "choose_content_type",
    "default_folder",
    "resolve_content_type",
    "UploadError",
    "DoneEvent",
    "ErrorEvent",
    "ProgressEmitter",
    "ProgressEvent",
    "ProgressTracker",
    "decode_event",
    "encode_event",
    "generate_key",
    "join_public_url",
    "sanitize_filename",
    "CACHE_CONTROL",
    "ObjectStore",
    "UploadTarget",
    "IDLE_TIMEOUT_SECONDS",
    "PART_SIZE",
    "StreamingUploadCoordinator",
]
