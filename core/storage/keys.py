"""Object keys and public URLs for uploaded files."""

import re
import time
import uuid

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9.\-]")


def sanitize_filename(name: str) -> str:
    """Replace every character outside [A-Za-z0-9.-] with an underscore."""
    return _UNSAFE_CHARS.sub("_", name)


def generate_key(original_name: str, folder: str | None = None) -> str:
    """
    Build a fresh object key for an upload.

    Format: "{folder}/{unix millis}-{uuid4}-{sanitized name}". The key is never
    checked against the bucket; a collision would need the same millisecond
    and the same uuid4.
    """
    millis = time.time_ns() // 1_000_000
    name = f"{millis}-{uuid.uuid4()}-{sanitize_filename(original_name)}"

    folder = (folder or "").strip().strip("/")
    if folder:
        return f"{folder}/{name}"
    return name


def join_public_url(base: str, key: str) -> str:
    """Join a public base URL and a key with exactly one slash."""
    return f"{base.rstrip('/')}/{key.lstrip('/')}"
