"""
botlist.api.deps — FastAPI dependency injection
=================================================
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Annotated

import jwt
from fastapi import Depends, Header
from jwt.exceptions import InvalidTokenError
from sqlalchemy import Engine

from botlist.config import DirectoryConfig, load_config
from botlist.database.engine import create_db_engine
from botlist.engine.cache import TTLCache
from botlist.errors import UnauthenticatedError
from botlist.services.enrichment_service import EnrichmentClient
from botlist.services.notification_service import NotificationDispatcher

_WEAK_SECRETS = frozenset({
    "botlist-dev-secret-change-me",
    "change-me",
    "secret",
    "dev",
    "",
})

_MIN_SECRET_LENGTH = 32

JWT_ALGORITHM = "HS256"


def _load_jwt_secret() -> str:
    """Load and validate JWT_SECRET from the environment.

    Raises RuntimeError at import time if the secret is missing, blank,
    too short (< 32 chars), or a known weak default.
    """
    secret = os.getenv("JWT_SECRET", "")
    if not secret:
        raise RuntimeError(
            "JWT_SECRET environment variable is not set. "
            "Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(64))\""
        )
    if secret in _WEAK_SECRETS:
        raise RuntimeError(
            f"JWT_SECRET is set to a known weak default ('{secret}'). "
            "Please set a strong, unique secret."
        )
    if len(secret) < _MIN_SECRET_LENGTH:
        raise RuntimeError(
            f"JWT_SECRET is too short ({len(secret)} chars). "
            f"Minimum length is {_MIN_SECRET_LENGTH} characters."
        )
    return secret


JWT_SECRET: str = _load_jwt_secret()


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    return create_db_engine()


@lru_cache(maxsize=1)
def get_config() -> DirectoryConfig:
    return load_config(os.getenv("BOTLIST_CONFIG", "config.yaml"))


@lru_cache(maxsize=1)
def get_enrichment_client() -> EnrichmentClient:
    """Process-wide enrichment client; its cache lives as long as the app."""
    cfg = get_config()
    return EnrichmentClient(
        cfg.enrichment_api_url,
        TTLCache(cfg.enrichment_cache_ttl_seconds),
        timeout=cfg.enrichment_timeout_seconds,
    )


@lru_cache(maxsize=1)
def get_notifier() -> NotificationDispatcher:
    return NotificationDispatcher(os.getenv("NOTIFY_WEBHOOK_URL"))


def get_current_user(
    authorization: Annotated[str | None, Header()] = None,
) -> dict:
    """Validate the bearer JWT and return its payload.  Raises 401 if invalid.

    The payload carries ``sub`` (Discord id), ``username`` and ``is_admin``.
    Role claims are never read from it.
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise UnauthenticatedError("Unauthorized")
    token = authorization.split(" ", 1)[1]
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except InvalidTokenError:
        raise UnauthenticatedError("Invalid token")
    if not payload.get("sub"):
        raise UnauthenticatedError("Invalid token")
    return payload


CurrentUser = Annotated[dict, Depends(get_current_user)]
EngineDep = Annotated[Engine, Depends(get_engine)]
