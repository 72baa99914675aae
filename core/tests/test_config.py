"""Tests for environment-driven configuration."""

import pytest

from core.config import StorageConfigError, get_allowed_origins, get_storage_settings

R2_VARS = [
    "R2_ENDPOINT",
    "R2_ACCOUNT_ID",
    "R2_BUCKET_NAME",
    "R2_PUBLIC_URL",
    "R2_ACCESS_KEY_ID",
    "R2_SECRET_ACCESS_KEY",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in R2_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_endpoint_derived_from_account_id(clean_env):
    clean_env.setenv("R2_ACCOUNT_ID", "abc123")
    clean_env.setenv("R2_BUCKET_NAME", "uploads")
    clean_env.setenv("R2_PUBLIC_URL", "https://cdn.example.com")

    settings = get_storage_settings()

    assert settings.endpoint_url == "https://abc123.r2.cloudflarestorage.com"
    assert settings.bucket_name == "uploads"
    assert settings.region == "auto"


def test_explicit_endpoint_wins(clean_env):
    clean_env.setenv("R2_ENDPOINT", "http://localhost:9000")
    clean_env.setenv("R2_ACCOUNT_ID", "abc123")
    clean_env.setenv("R2_BUCKET_NAME", "uploads")
    clean_env.setenv("R2_PUBLIC_URL", "https://cdn.example.com")

    assert get_storage_settings().endpoint_url == "http://localhost:9000"


@pytest.mark.parametrize(
    "missing,message",
    [
        ("R2_ENDPOINT", "R2_ENDPOINT or R2_ACCOUNT_ID"),
        ("R2_BUCKET_NAME", "R2_BUCKET_NAME"),
        ("R2_PUBLIC_URL", "R2_PUBLIC_URL"),
    ],
)
def test_missing_setting_fails_fast(clean_env, missing, message):
    values = {
        "R2_ENDPOINT": "http://localhost:9000",
        "R2_BUCKET_NAME": "uploads",
        "R2_PUBLIC_URL": "https://cdn.example.com",
    }
    del values[missing]
    for name, value in values.items():
        clean_env.setenv(name, value)

    with pytest.raises(StorageConfigError, match=message):
        get_storage_settings()


def test_allowed_origins_include_frontend(monkeypatch):
    monkeypatch.setenv("FRONTEND_URL", "https://learn.example.com/")

    origins = get_allowed_origins()

    assert "https://learn.example.com" in origins
    assert "http://localhost:3000" in origins
