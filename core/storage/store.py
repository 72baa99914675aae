"""S3-compatible object store (Cloudflare R2 in production).

boto3 is synchronous, so every call runs in a worker thread via
asyncio.to_thread and the event loop stays free while parts are in flight.
"""

import asyncio
import logging
from dataclasses import dataclass

import boto3
from botocore.config import Config

from ..config import StorageSettings, get_storage_settings
from .content_types import choose_content_type
from .keys import generate_key, join_public_url

logger = logging.getLogger(__name__)

# Keys are unique per upload, so objects never change once written
CACHE_CONTROL = "public, max-age=31536000, immutable"

# Read-only policy for the public bucket (video players need range requests)
PUBLIC_READ_CORS_RULES = [
    {
        "AllowedHeaders": ["*"],
        "AllowedMethods": ["GET", "HEAD"],
        "AllowedOrigins": ["*"],
        "ExposeHeaders": [
            "ETag",
            "Content-Length",
            "Content-Type",
            "Accept-Ranges",
            "Content-Range",
        ],
        "MaxAgeSeconds": 3600,
    }
]


@dataclass(frozen=True)
class UploadTarget:
    """Where one upload goes. The key is generated once per upload."""

    key: str
    content_type: str
    public_url: str


class ObjectStore:
    """One bucket plus the public base URL its objects are served from."""

    def __init__(self, client, bucket_name: str, public_base_url: str):
        self.client = client
        self.bucket_name = bucket_name
        self.public_base_url = public_base_url

    @classmethod
    def from_settings(cls, settings: StorageSettings) -> "ObjectStore":
        client = boto3.client(
            "s3",
            endpoint_url=settings.endpoint_url,
            aws_access_key_id=settings.access_key_id,
            aws_secret_access_key=settings.secret_access_key,
            region_name=settings.region,
            config=Config(signature_version="s3v4"),
        )
        return cls(client, settings.bucket_name, settings.public_url)

    @classmethod
    def from_env(cls) -> "ObjectStore":
        """Build a store from R2_* variables. Raises StorageConfigError."""
        return cls.from_settings(get_storage_settings())

    def public_url(self, key: str) -> str:
        return join_public_url(self.public_base_url, key)

    def new_target(
        self,
        filename: str,
        folder: str | None = None,
        declared_type: str | None = None,
    ) -> UploadTarget:
        """Allocate a fresh key and resolve the content type for a file."""
        key = generate_key(filename, folder)
        return UploadTarget(
            key=key,
            content_type=choose_content_type(declared_type, filename),
            public_url=self.public_url(key),
        )

    async def put_object(self, key: str, body: bytes, content_type: str) -> None:
        def _sync_put():
            self.client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=body,
                ContentType=content_type,
                CacheControl=CACHE_CONTROL,
            )

        await asyncio.to_thread(_sync_put)

    async def create_multipart_upload(self, key: str, content_type: str) -> str:
        """Start a multipart upload and return its upload id."""

        def _sync_create():
            return self.client.create_multipart_upload(
                Bucket=self.bucket_name,
                Key=key,
                ContentType=content_type,
                CacheControl=CACHE_CONTROL,
            )

        response = await asyncio.to_thread(_sync_create)
        return response["UploadId"]

    async def upload_part(
        self, key: str, upload_id: str, part_number: int, body: bytes
    ) -> str:
        """Upload one part and return its ETag."""

        def _sync_upload():
            return self.client.upload_part(
                Bucket=self.bucket_name,
                Key=key,
                UploadId=upload_id,
                PartNumber=part_number,
                Body=body,
            )

        response = await asyncio.to_thread(_sync_upload)
        return response["ETag"]

    async def complete_multipart_upload(
        self, key: str, upload_id: str, parts: list[dict]
    ) -> None:
        def _sync_complete():
            self.client.complete_multipart_upload(
                Bucket=self.bucket_name,
                Key=key,
                UploadId=upload_id,
                MultipartUpload={"Parts": parts},
            )

        await asyncio.to_thread(_sync_complete)

    async def abort_multipart_upload(self, key: str, upload_id: str) -> None:
        def _sync_abort():
            self.client.abort_multipart_upload(
                Bucket=self.bucket_name, Key=key, UploadId=upload_id
            )

        await asyncio.to_thread(_sync_abort)
        logger.info(f"Aborted multipart upload {upload_id} for {key}")

    async def put_bucket_cors(self, rules: list[dict] | None = None) -> None:
        """Apply a CORS policy to the bucket (public read-only by default)."""

        def _sync_put_cors():
            self.client.put_bucket_cors(
                Bucket=self.bucket_name,
                CORSConfiguration={"CORSRules": rules or PUBLIC_READ_CORS_RULES},
            )

        await asyncio.to_thread(_sync_put_cors)
