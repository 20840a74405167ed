"""
botlist.config — YAML Configuration Loader
===========================================

Reads ``config.yaml`` for **soft** settings (site identity, enrichment
endpoint, pagination limits, bootstrap admins).  Secrets such as
``DATABASE_URL``, ``JWT_SECRET`` and ``NOTIFY_WEBHOOK_URL`` stay in the
environment / ``.env``.

Usage::

    from botlist.config import load_config

    cfg = load_config()          # reads ./config.yaml by default
    print(cfg.site_name)         # "Galaxy Bot List"
    print(cfg.max_page_limit)    # 100
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

DEFAULT_ENRICHMENT_API_URL = "https://galaxy-api-gets.vercel.app"


# ---------------------------------------------------------------------------
# Typed settings object
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class DirectoryConfig:
    """Immutable configuration loaded from ``config.yaml``."""

    # Identity
    site_name: str

    # Enrichment (third-party bot metadata API)
    enrichment_api_url: str = DEFAULT_ENRICHMENT_API_URL
    enrichment_cache_ttl_seconds: int = 3600
    enrichment_timeout_seconds: float = 10.0

    # Listing pagination
    default_page_limit: int = 20
    max_page_limit: int = 100  # Upper bound on ?limit= for public listings

    # API
    api_port: int = 8000

    # Discord IDs granted the ADMIN role on startup (idempotent)
    bootstrap_admin_ids: tuple[str, ...] = field(default_factory=tuple)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def load_config(path: str | Path = "config.yaml") -> DirectoryConfig:
    """Read *path* and return a :class:`DirectoryConfig` instance.

    Parameters
    ----------
    path:
        Filesystem path to the YAML configuration file.
        Defaults to ``config.yaml`` in the current working directory.

    Raises
    ------
    FileNotFoundError
        If the YAML file doesn't exist.
    KeyError
        If ``site_name`` is missing from the YAML file.
    ValueError
        If the pagination limits are inconsistent.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path.resolve()}\n"
            "Hint: copy config.yaml.example → config.yaml and edit it."
        )

    with open(config_path, encoding="utf-8") as fh:
        raw: dict = yaml.safe_load(fh) or {}

    cfg = DirectoryConfig(
        site_name=raw["site_name"],
        enrichment_api_url=str(
            raw.get("enrichment_api_url") or DEFAULT_ENRICHMENT_API_URL
        ).rstrip("/"),
        enrichment_cache_ttl_seconds=int(raw.get("enrichment_cache_ttl_seconds", 3600)),
        enrichment_timeout_seconds=float(raw.get("enrichment_timeout_seconds", 10.0)),
        default_page_limit=int(raw.get("default_page_limit", 20)),
        max_page_limit=int(raw.get("max_page_limit", 100)),
        api_port=int(raw.get("api_port", 8000)),
        bootstrap_admin_ids=tuple(
            str(i) for i in (raw.get("bootstrap_admin_ids") or [])
        ),
    )

    if cfg.default_page_limit < 1 or cfg.max_page_limit < cfg.default_page_limit:
        raise ValueError(
            "Invalid pagination limits: need 1 <= default_page_limit <= max_page_limit "
            f"(got {cfg.default_page_limit} / {cfg.max_page_limit})"
        )
    return cfg
