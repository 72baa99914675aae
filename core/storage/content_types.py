"""Content type resolution for uploads, by file extension only."""

DEFAULT_CONTENT_TYPE = "application/octet-stream"

EXTENSION_CONTENT_TYPES = {
    "mp4": "video/mp4",
    "webm": "video/webm",
    "ogg": "video/ogg",
    # Browsers play QuickTime H.264 fine when served as mp4
    "mov": "video/mp4",
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "webp": "image/webp",
    "pdf": "application/pdf",
}


def resolve_content_type(
    filename: str, fallback: str = DEFAULT_CONTENT_TYPE
) -> str:
    """Map a filename's extension to a MIME type, or return the fallback."""
    if "." not in filename:
        return fallback
    extension = filename.rsplit(".", 1)[1].lower()
    return EXTENSION_CONTENT_TYPES.get(extension, fallback)


def choose_content_type(declared: str | None, filename: str) -> str:
    """Prefer the client's declared type unless it is missing or generic."""
    declared = (declared or "").strip()
    if declared and declared != DEFAULT_CONTENT_TYPE:
        return declared
    return resolve_content_type(filename)


def default_folder(filename: str) -> str:
    """Pick a storage folder for a file that was not given one."""
    content_type = resolve_content_type(filename, fallback="")
    if content_type.startswith("image/"):
        return "images"
    if content_type.startswith("video/"):
        return "videos"
    return "documents"
