"""
botlist.services.enrichment_service — Third-Party Bot Metadata Client
======================================================================

Fetches ``GET {base_url}/bot/{client_id}`` → ``{"bot": {...},
"application": {...}}`` and memoizes successful responses in a
:class:`~botlist.engine.cache.TTLCache` (one hour by default).

Every failure mode (non-2xx, transport error, timeout, a body that is not
a JSON object) is logged and returned as ``None``.  Callers never see an
exception from :meth:`EnrichmentClient.fetch`.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from botlist.engine.cache import DEFAULT_TTL_SECONDS, TTLCache
from botlist.errors import UpstreamError

logger = logging.getLogger(__name__)


class EnrichmentClient:
    """Best-effort bot profile lookups with a shared TTL cache.

    Parameters
    ----------
    base_url:
        Root of the metadata API, without trailing slash.
    cache:
        Shared cache; a fresh one-hour cache is created when omitted.
    timeout:
        Per-request timeout in seconds.
    transport:
        Optional ``httpx`` transport (tests pass :class:`httpx.MockTransport`).
    """

    def __init__(
        self,
        base_url: str,
        cache: TTLCache | None = None,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.cache = cache if cache is not None else TTLCache(DEFAULT_TTL_SECONDS)
        self.timeout = timeout
        self._transport = transport

    async def fetch(self, client_id: str) -> dict[str, Any] | None:
        """Return the enrichment payload for *client_id*, or ``None``."""
        cached = self.cache.get(client_id)
        if cached is not None:
            logger.debug("Enrichment cache hit for %s", client_id)
            return cached

        try:
            data = await self._request(client_id)
        except UpstreamError as exc:
            logger.warning("Enrichment unavailable for %s: %s", client_id, exc.message)
            return None

        self.cache.set(client_id, data)
        return data

    async def _request(self, client_id: str) -> dict[str, Any]:
        url = f"{self.base_url}/bot/{quote(client_id, safe='')}"
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                resp = await client.get(url)
        except httpx.HTTPError as exc:
            raise UpstreamError(
                f"request failed ({exc.__class__.__name__})", {"url": url}
            ) from exc

        if not resp.is_success:
            raise UpstreamError(
                f"HTTP {resp.status_code}", {"url": url, "status": resp.status_code}
            )

        try:
            data = resp.json()
        except ValueError as exc:
            raise UpstreamError("malformed JSON body", {"url": url}) from exc

        if not isinstance(data, dict):
            raise UpstreamError("unexpected body shape", {"url": url})
        return data
