"""
botlist.services.notification_service — Fire-and-Forget Lifecycle Notifications
================================================================================

Lifecycle events (submit, approve, reject, feature) are posted to a Discord
webhook as embeds.  Delivery is **best-effort**:

* :meth:`NotificationDispatcher.dispatch` schedules a background task and
  returns immediately; the triggering operation never awaits the result.
* Every exception raised during delivery is caught and logged at the task
  boundary, and nowhere else.
* In-flight tasks are strongly referenced until they finish, and
  :meth:`NotificationDispatcher.drain` awaits them on shutdown.

Without ``NOTIFY_WEBHOOK_URL`` the dispatcher is disabled and events are
only logged.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from botlist.engine.events import NotificationEvent
from botlist.errors import UpstreamError
from botlist.services.embeds import build_notification_embed

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Posts :class:`NotificationEvent` embeds to a Discord webhook."""

    def __init__(
        self,
        webhook_url: str | None,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.webhook_url = (webhook_url or "").strip() or None
        self.timeout = timeout
        self._transport = transport
        self._pending: set[asyncio.Task] = set()

    @property
    def enabled(self) -> bool:
        return self.webhook_url is not None

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    # -------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------
    def dispatch(self, event: NotificationEvent) -> asyncio.Task | None:
        """Schedule delivery of *event* and return without waiting."""
        if not self.enabled:
            logger.debug("Notifications disabled; dropping %s for %s", event.type, event.bot_id)
            return None
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop; dropping %s for %s", event.type, event.bot_id)
            return None

        task = loop.create_task(self._guarded_send(event), name=f"notify-{event.type}")
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self) -> None:
        """Wait for every in-flight delivery to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    # -------------------------------------------------------------------
    # Delivery
    # -------------------------------------------------------------------
    async def _guarded_send(self, event: NotificationEvent) -> None:
        try:
            await self.send(event)
        except Exception:
            logger.exception(
                "Failed to send %s notification for bot %s", event.type, event.bot_id
            )

    async def send(self, event: NotificationEvent) -> None:
        """Deliver *event* now.  Raises :class:`UpstreamError` on failure."""
        embed = build_notification_embed(event)
        body = {"content": None, "embeds": [embed.to_dict()]}

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                resp = await client.post(self.webhook_url, json=body)
        except httpx.HTTPError as exc:
            raise UpstreamError(
                f"webhook request failed ({exc.__class__.__name__})",
                event.to_payload(),
            ) from exc

        if not resp.is_success:
            raise UpstreamError(
                f"webhook returned HTTP {resp.status_code}", event.to_payload()
            )
        logger.info("Sent %s notification for bot %s", event.type, event.bot_id)
