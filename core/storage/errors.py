class UploadError(Exception):
    """An upload failed. The message is safe to show to the uploader."""
