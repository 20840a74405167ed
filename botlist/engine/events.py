"""
botlist.engine.events — NotificationEvent and NotificationType
===============================================================

The envelope for lifecycle notifications.  Every moderation transition
that tells someone about it is normalized into a
:class:`NotificationEvent` before the dispatcher delivers it.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

__all__ = ["NotificationType", "NotificationEvent"]


class NotificationType(enum.StrEnum):
    BOT_SUBMIT = "bot_submit"
    BOT_APPROVED = "bot_approved"
    BOT_REJECTED = "bot_rejected"
    BOT_FEATURED = "bot_featured"


@dataclass(frozen=True, slots=True)
class NotificationEvent:
    """A discriminated lifecycle event.

    ``user_id`` is always the listing owner.  ``username`` is the owner's
    name for submissions and the acting moderator's name otherwise.
    """

    type: NotificationType
    bot_id: str
    bot_name: str
    user_id: str
    username: str
    reason: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "type": self.type.value,
            "botId": self.bot_id,
            "botName": self.bot_name,
            "userId": self.user_id,
            "username": self.username,
        }
        if self.reason is not None:
            payload["reason"] = self.reason
        return payload
