"""
botlist.constants — Shared Constants & Helpers
================================================

Single source of truth for listing field allowlists and Discord URL
builders.  Import from here instead of duplicating in services and routes.
"""

from __future__ import annotations

from urllib.parse import urlencode

# ---------------------------------------------------------------------------
# Submission / update field allowlists (wire names)
# ---------------------------------------------------------------------------
REQUIRED_SUBMIT_FIELDS: tuple[str, ...] = (
    "clientId",
    "description",
    "longDescription",
    "prefix",
)

# Owner-editable fields.  Status, ownership, votes and identity never appear here.
UPDATABLE_FIELDS: frozenset[str] = frozenset({
    "prefix",
    "description",
    "longDescription",
    "tags",
    "website",
    "supportServer",
    "githubRepo",
})

# Fields that may be updated but never blanked
NON_BLANK_UPDATE_FIELDS: frozenset[str] = frozenset({
    "prefix",
    "description",
    "longDescription",
})

DEFAULT_BOT_NAME = "Unnamed Bot"
DEFAULT_ADMIN_NAME = "Admin"
DEFAULT_OWNER_NAME = "Unknown"

# Column widths shared by the ORM models and input checks; the migration mirrors them
MAX_CLIENT_ID_LENGTH = 32
MAX_NAME_LENGTH = 100
MAX_PREFIX_LENGTH = 32
MAX_URL_LENGTH = 255
MAX_INVITE_URL_LENGTH = 512
MAX_TAG_LENGTH = 64

# Wire name → maximum length for owner-supplied listing text
BOT_FIELD_MAX_LENGTHS: dict[str, int] = {
    "clientId": MAX_CLIENT_ID_LENGTH,
    "name": MAX_NAME_LENGTH,
    "prefix": MAX_PREFIX_LENGTH,
    "website": MAX_URL_LENGTH,
    "supportServer": MAX_URL_LENGTH,
    "githubRepo": MAX_URL_LENGTH,
    "inviteUrl": MAX_INVITE_URL_LENGTH,
}

PARTNER_FIELD_MAX_LENGTHS: dict[str, int] = {
    "name": MAX_NAME_LENGTH,
    "website": MAX_URL_LENGTH,
    "logoUrl": MAX_URL_LENGTH,
}


# ---------------------------------------------------------------------------
# Discord URL builders
# ---------------------------------------------------------------------------
def bot_avatar_url(client_id: str, avatar_hash: str | None) -> str | None:
    """Construct a Discord CDN avatar URL, or ``None`` without a hash."""
    if not avatar_hash:
        return None
    return f"https://cdn.discordapp.com/avatars/{client_id}/{avatar_hash}.png"


def default_invite_url(client_id: str) -> str:
    """OAuth2 authorize URL that adds the bot with slash-command scope."""
    query = urlencode({"client_id": client_id})
    return (
        f"https://discord.com/oauth2/authorize?{query}"
        "&scope=bot%20applications.commands&permissions=0"
    )


def normalize_tags(tags: object) -> list[str]:
    """Strip, drop blanks, and de-duplicate tags preserving order.

    Tags are never shortened; callers reject ones over
    :data:`MAX_TAG_LENGTH` so a stored tag always equals the submitted one.
    """
    if not tags:
        return []
    if isinstance(tags, str):
        tags = [tags]
    seen: dict[str, None] = {}
    for raw in tags:  # type: ignore[union-attr]
        tag = str(raw).strip()
        if tag:
            seen.setdefault(tag, None)
    return list(seen)


def oversize_fields(values: dict[str, object], limits: dict[str, int]) -> list[str]:
    """Names of string fields in *values* longer than their column width."""
    return sorted(
        name
        for name, limit in limits.items()
        if isinstance(values.get(name), str) and len(values[name]) > limit  # type: ignore[arg-type]
    )
