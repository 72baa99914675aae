#!/usr/bin/env python
"""
Upload local files to object storage.

Each file is streamed through the same uploader the API uses, so large
videos go up part by part without being read into memory.

Files without --folder are placed under images/, videos/ or documents/
depending on their extension.

Usage:
    python scripts/upload_to_storage.py PATH [PATH ...] [--folder FOLDER]

Example:
    python scripts/upload_to_storage.py ~/exports/lesson-1.mp4 --folder videos
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

load_dotenv(".env.local")
load_dotenv()

from core.config import StorageConfigError
from core.storage import (
    ObjectStore,
    ProgressEvent,
    StreamingUploadCoordinator,
    UploadError,
    default_folder,
    resolve_content_type,
)

READ_CHUNK_SIZE = 1024 * 1024


async def read_file_chunks(path: Path):
    with path.open("rb") as f:
        while True:
            chunk = await asyncio.to_thread(f.read, READ_CHUNK_SIZE)
            if not chunk:
                break
            yield chunk


def print_progress(event: ProgressEvent) -> None:
    print(f"\r  {event.progress:3d}% ({event.loaded}/{event.total} bytes)", end="", flush=True)


async def upload_files(paths: list[Path], folder: str | None) -> int:
    """Upload every path, returning the number of failures."""
    store = ObjectStore.from_env()
    coordinator = StreamingUploadCoordinator(store)
    failures = 0

    for i, path in enumerate(paths, start=1):
        print(f"[{i}/{len(paths)}] {path.name}")
        if not path.is_file():
            print(f"  ✗ Local file not found: {path}")
            failures += 1
            continue

        target = store.new_target(
            path.name,
            folder or default_folder(path.name),
            resolve_content_type(path.name),
        )
        try:
            done = await coordinator.upload(
                read_file_chunks(path),
                target,
                name=path.name,
                total=path.stat().st_size,
                on_progress=print_progress,
            )
        except UploadError as e:
            print(f"\n  ✗ {e}")
            failures += 1
            continue

        print(f"\n  ✓ {done.url}")

    return failures


def main():
    parser = argparse.ArgumentParser(description="Upload local files to object storage")
    parser.add_argument("paths", nargs="+", type=Path, help="Files to upload")
    parser.add_argument("--folder", help="Key prefix (default: by file type)")
    args = parser.parse_args()

    folder = args.folder.strip() if args.folder and args.folder.strip() else None

    try:
        failures = asyncio.run(upload_files(args.paths, folder))
    except StorageConfigError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    if failures:
        print(f"\n⚠ {failures} file(s) failed")
        sys.exit(1)
    print("\n✓ Done")


if __name__ == "__main__":
    main()
