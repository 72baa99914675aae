#!/usr/bin/env python
"""
Apply the public read-only CORS policy to the upload bucket.

Browsers load videos and images straight from the bucket, so it must
answer GET/HEAD from any origin and expose the range headers video
players rely on.

Usage:
    python scripts/setup_storage_cors.py
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

load_dotenv(".env.local")
load_dotenv()

from botocore.exceptions import BotoCoreError, ClientError

from core.config import StorageConfigError
from core.storage import ObjectStore


async def setup_cors():
    store = ObjectStore.from_env()
    await store.put_bucket_cors()
    print(f"✓ CORS configuration applied to bucket {store.bucket_name}")


def main():
    try:
        asyncio.run(setup_cors())
    except (StorageConfigError, BotoCoreError, ClientError) as e:
        print(f"✗ Failed to apply CORS configuration: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
