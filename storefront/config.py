"""
Storefront configuration.

Values come from the environment, with a `.env` file in the working
directory loaded first (python-dotenv). Use `load_settings()` rather than
reading `os.environ` directly.
"""

import os
from functools import cache
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

StorageBackend = Literal["memory", "file", "upstash"]

DEFAULT_CART_KEY = "arcadia-cart"
DEFAULT_CART_FILE = ".storefront/storage.json"
DEFAULT_TOAST_MS = 3000


class Settings(BaseModel):
    """Runtime settings for a storefront session."""

    class Config:
        frozen = True

    storage_backend: StorageBackend = "memory"
    cart_key: str = DEFAULT_CART_KEY
    cart_file: str = DEFAULT_CART_FILE
    toast_duration_ms: int = Field(default=DEFAULT_TOAST_MS, ge=0)
    upstash_redis_rest_url: str = ""
    upstash_redis_rest_token: str = ""

    @field_validator("storage_backend", mode="before")
    @classmethod
    def _normalize_backend(cls, value):
        if isinstance(value, str):
            return value.strip().lower() or "memory"
        return value

    @field_validator("cart_key")
    @classmethod
    def _require_key(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("cart_key must be a non-empty string")
        return value


def _env(key: str, default: str = "") -> str:
    val = os.environ.get(key, "").strip()
    return val if val else default


@cache
def load_settings() -> Settings:
    """
    Build settings from `.env` and the process environment (cached).

    Raises:
        pydantic.ValidationError: If a value is present but invalid
            (unknown backend, negative toast duration, ...).
    """
    load_dotenv()
    return Settings(
        storage_backend=_env("STOREFRONT_STORAGE", "memory"),
        cart_key=_env("STOREFRONT_CART_KEY", DEFAULT_CART_KEY),
        cart_file=_env("STOREFRONT_CART_FILE", DEFAULT_CART_FILE),
        toast_duration_ms=_env("STOREFRONT_TOAST_MS", str(DEFAULT_TOAST_MS)),
        upstash_redis_rest_url=_env("UPSTASH_REDIS_REST_URL"),
        upstash_redis_rest_token=_env("UPSTASH_REDIS_REST_TOKEN"),
    )
