"""
Centralized configuration for the course platform.

Provides environment-aware settings for the web API, the database and the
S3-compatible object store (Cloudflare R2 in production).
"""

import os
from dataclasses import dataclass


class StorageConfigError(RuntimeError):
    """Raised when object storage settings are missing or unusable."""


def is_dev_mode() -> bool:
    """Check if running in development mode (DEV_MODE env)."""
    return os.getenv("DEV_MODE", "").lower() in ("true", "1", "yes")


def is_production() -> bool:
    """Check if running on Railway (production environment)."""
    return bool(os.environ.get("RAILWAY_ENVIRONMENT"))


def get_api_port() -> int:
    """Get API server port from env or default."""
    return int(os.getenv("API_PORT", "8000"))


def get_frontend_url() -> str:
    """Get frontend URL, defaulting to the local dev server."""
    return os.environ.get("FRONTEND_URL", "http://localhost:3000").rstrip("/")


def get_allowed_origins() -> list[str]:
    """
    Get list of allowed CORS origins.

    Includes localhost variants for dev and the production frontend URL.
    """
    hosts = ["localhost", "127.0.0.1"]
    ports = [3000, get_api_port()]
    origins = [f"http://{host}:{port}" for host in hosts for port in ports]

    frontend_url = get_frontend_url()
    if frontend_url not in origins:
        origins.append(frontend_url)

    return origins


@dataclass(frozen=True)
class StorageSettings:
    """Connection settings for the S3-compatible object store."""

    endpoint_url: str
    access_key_id: str
    secret_access_key: str
    bucket_name: str
    public_url: str
    region: str = "auto"


def get_storage_settings() -> StorageSettings:
    """
    Read object storage settings from the environment.

    The endpoint comes from R2_ENDPOINT, or is derived from R2_ACCOUNT_ID.

    Raises:
        StorageConfigError: naming the first missing variable
    """
    endpoint = os.environ.get("R2_ENDPOINT")
    if not endpoint:
        account_id = os.environ.get("R2_ACCOUNT_ID")
        if not account_id:
            raise StorageConfigError("R2_ENDPOINT or R2_ACCOUNT_ID is not set")
        endpoint = f"https://{account_id}.r2.cloudflarestorage.com"

    bucket_name = os.environ.get("R2_BUCKET_NAME", "").strip()
    if not bucket_name:
        raise StorageConfigError("R2_BUCKET_NAME is not set")

    public_url = os.environ.get("R2_PUBLIC_URL", "").strip()
    if not public_url:
        raise StorageConfigError("R2_PUBLIC_URL is not set")

    return StorageSettings(
        endpoint_url=endpoint,
        access_key_id=os.environ.get("R2_ACCESS_KEY_ID", ""),
        secret_access_key=os.environ.get("R2_SECRET_ACCESS_KEY", ""),
        bucket_name=bucket_name,
        public_url=public_url,
    )


# Required environment variables for production
# Format: (name, description, required_in_dev)
REQUIRED_ENV_VARS = [
    ("DATABASE_URL", "PostgreSQL connection string", True),
    ("JWT_SECRET", "Secret key for session JWTs", True),
    ("R2_BUCKET_NAME", "Object storage bucket for uploads", False),
    ("R2_PUBLIC_URL", "Public base URL of the upload bucket", False),
    ("R2_ACCESS_KEY_ID", "Object storage access key", False),
    ("R2_SECRET_ACCESS_KEY", "Object storage secret key", False),
]


def check_required_env_vars() -> tuple[bool, list[str]]:
    """
    Check that required environment variables are set.

    Returns:
        (all_ok, warnings): Tuple of success flag and list of warning messages
    """
    warnings = []
    errors = []
    in_dev = is_dev_mode()

    for name, description, required_in_dev in REQUIRED_ENV_VARS:
        value = os.environ.get(name)

        if not value:
            if is_production():
                errors.append(f"  ✗ {name}: Not set ({description})")
            elif required_in_dev or not in_dev:
                warnings.append(f"  ⚠ {name}: Not set ({description})")

    if errors:
        for error in errors:
            print(error)
        return False, warnings

    return True, warnings
