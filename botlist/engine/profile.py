"""
botlist.engine.profile — Enrichment → Listing Profile Merge
=============================================================

Turns a submission payload plus an optional enrichment response
(``{"bot": {...}, "application": {...}}``) into the profile columns of a
new listing.  Enrichment wins where it has data; the owner's payload and
fixed defaults fill the rest.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from botlist.constants import DEFAULT_BOT_NAME, bot_avatar_url, default_invite_url


@dataclass(frozen=True, slots=True)
class BotProfile:
    """Identity/metadata columns derived at submission time."""

    name: str
    discriminator: str
    avatar: str | None
    servers: int
    is_verified: bool
    bot_public: bool
    invite_url: str


def _section(api_data: dict[str, Any] | None, key: str) -> dict[str, Any]:
    if not isinstance(api_data, dict):
        return {}
    value = api_data.get(key)
    return value if isinstance(value, dict) else {}


def _as_int(value: Any) -> int:
    try:
        return max(int(value), 0)
    except (TypeError, ValueError):
        return 0


def build_profile(
    client_id: str,
    payload: dict[str, Any],
    api_data: dict[str, Any] | None,
) -> BotProfile:
    """Merge enrichment data over the submission *payload*.

    Name precedence: bot username → application name → payload ``name``
    → ``"Unnamed Bot"``.  Without enrichment data ``servers`` is 0 and
    ``is_verified`` is ``False``.
    """
    bot_info = _section(api_data, "bot")
    app_info = _section(api_data, "application")

    name = (
        bot_info.get("username")
        or app_info.get("name")
        or payload.get("name")
        or DEFAULT_BOT_NAME
    )
    avatar_hash = bot_info.get("avatar") or app_info.get("icon")

    bot_public = app_info.get("bot_public")
    if bot_public is None:
        bot_public = True

    return BotProfile(
        name=str(name)[:100],
        discriminator=str(bot_info.get("discriminator") or ""),
        avatar=bot_avatar_url(client_id, avatar_hash),
        servers=_as_int(bot_info.get("approximate_guild_count")),
        is_verified=bool(app_info.get("is_verified", False)),
        bot_public=bool(bot_public),
        invite_url=payload.get("inviteUrl") or default_invite_url(client_id),
    )
