"""
botlist.services.bot_service — Bot Submission & Moderation Lifecycle
=====================================================================

Owns the listing state machine::

    (none) ──submit──▶ pending ──approve──▶ approved
                          │                    │
                          └──reject / delete───┴──▶ (deleted)

There is no stored ``rejected`` state: rejection is a delete with a
different notification.  Every operation performs at most one mutating
store call, so nothing here needs a rollback beyond the session's own.

Authorization sources differ per operation:

* **reject / approve / feature / admin views** check roles resolved from
  the ``users`` table (:mod:`botlist.services.permission_service`).
* **delete** allows the owner or a caller whose token carries
  ``is_admin``; it does not consult stored roles.
* **update** is owner-only, with no admin override.

Notifications are handed to the dispatcher and never awaited.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import Engine, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from botlist.constants import (
    BOT_FIELD_MAX_LENGTHS,
    DEFAULT_ADMIN_NAME,
    DEFAULT_OWNER_NAME,
    MAX_NAME_LENGTH,
    MAX_TAG_LENGTH,
    NON_BLANK_UPDATE_FIELDS,
    REQUIRED_SUBMIT_FIELDS,
    UPDATABLE_FIELDS,
    normalize_tags,
    oversize_fields,
)
from botlist.database.engine import get_session, run_db
from botlist.database.models import Bot, BotStatus
from botlist.engine.events import NotificationEvent, NotificationType
from botlist.engine.profile import build_profile
from botlist.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthenticatedError,
    ValidationError,
)
from botlist.services.enrichment_service import EnrichmentClient
from botlist.services.notification_service import NotificationDispatcher
from botlist.services.permission_service import require_moderator

logger = logging.getLogger(__name__)

# Wire name → column for plain-text owner-editable fields (tags handled apart)
_UPDATE_COLUMNS: dict[str, str] = {
    "prefix": "prefix",
    "description": "description",
    "longDescription": "long_description",
    "website": "website",
    "supportServer": "support_server",
    "githubRepo": "github_repo",
}
_OPTIONAL_LINK_FIELDS = frozenset({"website", "supportServer", "githubRepo"})


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _iso(dt: datetime | None) -> str | None:
    return dt.isoformat() if dt else None


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip()) or value == []


def _require_caller(caller_id: str | None) -> str:
    if not caller_id:
        raise UnauthenticatedError("Unauthorized")
    return str(caller_id)


def _check_lengths(values: dict[str, Any], tags: list[str] | None = None) -> None:
    """Raise :class:`ValidationError` for any value wider than its column."""
    too_long = oversize_fields(values, BOT_FIELD_MAX_LENGTHS)
    if tags and any(len(t) > MAX_TAG_LENGTH for t in tags):
        too_long.append("tags")
    if too_long:
        raise ValidationError("Fields exceed maximum length", {"fields": too_long})


def bot_to_dict(bot: Bot) -> dict[str, Any]:
    """Serialize a listing to its wire shape (camelCase, ISO timestamps)."""
    return {
        "clientId": bot.client_id,
        "name": bot.name,
        "discriminator": bot.discriminator,
        "avatar": bot.avatar,
        "description": bot.description,
        "longDescription": bot.long_description,
        "prefix": bot.prefix,
        "tags": bot.tags,
        "votes": bot.votes,
        "servers": bot.servers,
        "website": bot.website,
        "supportServer": bot.support_server,
        "githubRepo": bot.github_repo,
        "inviteUrl": bot.invite_url,
        "status": bot.status,
        "featured": bot.featured,
        "ownerId": bot.owner_id,
        "ownerUsername": bot.owner_username,
        "isVerified": bot.is_verified,
        "botPublic": bot.bot_public,
        "createdAt": _iso(bot.created_at),
        "updatedAt": _iso(bot.updated_at),
    }


# ---------------------------------------------------------------------------
# Sync store operations (run via run_db from async callers)
# ---------------------------------------------------------------------------
def _insert_bot(engine: Engine, bot: Bot) -> dict[str, Any]:
    with Session(engine, expire_on_commit=False) as session:
        session.add(bot)
        try:
            session.commit()
        except IntegrityError as exc:
            session.rollback()
            raise ConflictError(
                "A bot with this client ID already exists",
                {"clientId": bot.client_id},
            ) from exc
        return bot_to_dict(bot)


def _delete_returning(engine: Engine, client_id: str) -> dict[str, Any]:
    with get_session(engine) as session:
        bot = session.get(Bot, client_id)
        if bot is None:
            raise NotFoundError("Bot not found", {"clientId": client_id})
        snapshot = bot_to_dict(bot)
        session.delete(bot)
    return snapshot


def _approve(engine: Engine, client_id: str) -> tuple[dict[str, Any], bool]:
    with get_session(engine) as session:
        bot = session.get(Bot, client_id)
        if bot is None:
            raise NotFoundError("Bot not found", {"clientId": client_id})
        changed = bot.status != BotStatus.APPROVED
        if changed:
            bot.status = BotStatus.APPROVED
            session.flush()
        return bot_to_dict(bot), changed


def _set_featured(
    engine: Engine, client_id: str, featured: bool | None
) -> tuple[dict[str, Any], bool]:
    with get_session(engine) as session:
        bot = session.get(Bot, client_id)
        if bot is None:
            raise NotFoundError("Bot not found", {"clientId": client_id})
        target = (not bot.featured) if featured is None else featured
        became_featured = target and not bot.featured
        if target != bot.featured:
            bot.featured = target
            session.flush()
        return bot_to_dict(bot), became_featured


# ---------------------------------------------------------------------------
# Public reads
# ---------------------------------------------------------------------------
def get_bot(engine: Engine, client_id: str) -> dict[str, Any]:
    """Return the full record for *client_id*.  No fields are redacted."""
    with Session(engine) as session:
        bot = session.get(Bot, client_id)
        if bot is None:
            raise NotFoundError("Bot not found", {"clientId": client_id})
        return bot_to_dict(bot)


def list_pending_bots(engine: Engine, *, caller_id: str | None) -> list[dict[str, Any]]:
    """Review queue, newest first.  Moderators only."""
    require_moderator(engine, caller_id)
    with Session(engine) as session:
        rows = session.scalars(
            select(Bot)
            .where(Bot.status == BotStatus.PENDING)
            .order_by(Bot.created_at.desc(), Bot.client_id)
        ).all()
        return [bot_to_dict(b) for b in rows]


def list_all_bots(engine: Engine, *, caller_id: str | None) -> list[dict[str, Any]]:
    """Every listing regardless of status, newest first.  Moderators only."""
    require_moderator(engine, caller_id)
    with Session(engine) as session:
        rows = session.scalars(
            select(Bot).order_by(Bot.created_at.desc(), Bot.client_id)
        ).all()
        return [bot_to_dict(b) for b in rows]


# ---------------------------------------------------------------------------
# Owner operations
# ---------------------------------------------------------------------------
async def submit_bot(
    engine: Engine,
    enrichment: EnrichmentClient | None,
    notifier: NotificationDispatcher | None,
    *,
    owner_id: str | None,
    owner_username: str | None,
    payload: dict[str, Any],
) -> dict[str, Any]:
    """Create a ``pending`` listing owned by the caller.

    Enrichment is best-effort: when it returns nothing the payload and
    fixed defaults are used.  A duplicate ``clientId`` raises
    :class:`ConflictError` from the store's primary key and leaves the
    existing listing untouched.
    """
    owner = _require_caller(owner_id)

    missing = [f for f in REQUIRED_SUBMIT_FIELDS if _blank(payload.get(f))]
    if missing:
        raise ValidationError("Missing required fields", {"missing": missing})

    client_id = str(payload["clientId"]).strip()
    prefix = str(payload["prefix"]).strip()
    tags = normalize_tags(payload.get("tags"))
    _check_lengths({**payload, "clientId": client_id, "prefix": prefix}, tags)

    api_data = await enrichment.fetch(client_id) if enrichment is not None else None
    profile = build_profile(client_id, payload, api_data)

    now = datetime.now(UTC)
    bot = Bot(
        client_id=client_id,
        owner_id=owner,
        owner_username=(owner_username or DEFAULT_OWNER_NAME)[:MAX_NAME_LENGTH],
        name=profile.name,
        discriminator=profile.discriminator,
        avatar=profile.avatar,
        description=str(payload["description"]),
        long_description=str(payload["longDescription"]),
        prefix=prefix,
        website=payload.get("website") or None,
        support_server=payload.get("supportServer") or None,
        github_repo=payload.get("githubRepo") or None,
        invite_url=profile.invite_url,
        status=BotStatus.PENDING,
        featured=False,
        votes=0,
        servers=profile.servers,
        is_verified=profile.is_verified,
        bot_public=profile.bot_public,
        created_at=now,
        updated_at=now,
    )
    bot.set_tags(tags)

    record = await run_db(_insert_bot, engine, bot)
    logger.info("Bot %s submitted by %s (enriched=%s)", client_id, owner, api_data is not None)

    if notifier is not None:
        notifier.dispatch(NotificationEvent(
            type=NotificationType.BOT_SUBMIT,
            bot_id=client_id,
            bot_name=record["name"],
            user_id=owner,
            username=record["ownerUsername"],
        ))
    return record


def update_bot(
    engine: Engine,
    client_id: str,
    *,
    caller_id: str | None,
    patch: dict[str, Any],
) -> dict[str, Any]:
    """Apply the allowlisted fields of *patch*.  Owner only.

    Keys outside :data:`~botlist.constants.UPDATABLE_FIELDS` (status,
    ownerId, votes, clientId, ...) are ignored.
    """
    caller = _require_caller(caller_id)
    changes = {k: v for k, v in patch.items() if k in UPDATABLE_FIELDS}
    if isinstance(changes.get("prefix"), str):
        changes["prefix"] = changes["prefix"].strip()
    tags = normalize_tags(changes["tags"]) if "tags" in changes else None

    with get_session(engine) as session:
        bot = session.get(Bot, client_id)
        if bot is None:
            raise NotFoundError("Bot not found", {"clientId": client_id})
        if bot.owner_id != caller:
            raise ForbiddenError("You don't have permission to update this bot")

        blanked = sorted(f for f in NON_BLANK_UPDATE_FIELDS if f in changes and _blank(changes[f]))
        if blanked:
            raise ValidationError("Fields cannot be empty", {"fields": blanked})
        _check_lengths(changes, tags)

        for wire_name, column in _UPDATE_COLUMNS.items():
            if wire_name not in changes:
                continue
            value = changes[wire_name]
            if wire_name in _OPTIONAL_LINK_FIELDS:
                value = value or None
            setattr(bot, column, value)
        if tags is not None:
            bot.set_tags(tags)

        bot.updated_at = datetime.now(UTC)
        session.flush()
        record = bot_to_dict(bot)

    logger.info("Bot %s updated by owner (%s)", client_id, ", ".join(sorted(changes)) or "no fields")
    return record


def delete_bot(
    engine: Engine,
    client_id: str,
    *,
    caller_id: str | None,
    caller_is_admin: bool = False,
) -> None:
    """Delete a listing.  Allowed for the owner or a token-level admin."""
    caller = _require_caller(caller_id)
    with get_session(engine) as session:
        bot = session.get(Bot, client_id)
        if bot is None:
            raise NotFoundError("Bot not found", {"clientId": client_id})
        if bot.owner_id != caller and not caller_is_admin:
            raise ForbiddenError("You don't have permission to delete this bot")
        session.delete(bot)
    logger.info("Bot %s deleted by %s (admin=%s)", client_id, caller, caller_is_admin)


# ---------------------------------------------------------------------------
# Moderator operations
# ---------------------------------------------------------------------------
async def reject_bot(
    engine: Engine,
    notifier: NotificationDispatcher | None,
    client_id: str,
    *,
    caller_id: str | None,
    caller_name: str | None,
    reason: str | None,
    delete_bot: bool = True,
) -> dict[str, Any]:
    """Reject a listing: delete it and notify the owner with *reason*.

    ``delete_bot`` is accepted for compatibility but the listing is always
    deleted.  Returns the deleted record with ``status`` set to
    ``rejected``.
    """
    caller = _require_caller(caller_id)
    await run_db(require_moderator, engine, caller)

    if reason is None or not str(reason).strip():
        raise ValidationError("Rejection reason is required")
    if not delete_bot:
        logger.info("reject_bot(%s): deleteBot=false requested; deleting anyway", client_id)

    snapshot = await run_db(_delete_returning, engine, client_id)
    snapshot["status"] = BotStatus.REJECTED.value
    logger.info("Bot %s rejected by %s", client_id, caller)

    if notifier is not None:
        notifier.dispatch(NotificationEvent(
            type=NotificationType.BOT_REJECTED,
            bot_id=snapshot["clientId"],
            bot_name=snapshot["name"],
            user_id=snapshot["ownerId"],
            username=caller_name or DEFAULT_ADMIN_NAME,
            reason=str(reason),
        ))
    return snapshot


async def approve_bot(
    engine: Engine,
    notifier: NotificationDispatcher | None,
    client_id: str,
    *,
    caller_id: str | None,
    caller_name: str | None,
) -> dict[str, Any]:
    """Move a listing to ``approved``.  Re-approving is a silent no-op."""
    caller = _require_caller(caller_id)
    await run_db(require_moderator, engine, caller)

    record, changed = await run_db(_approve, engine, client_id)
    if not changed:
        return record
    logger.info("Bot %s approved by %s", client_id, caller)

    if notifier is not None:
        notifier.dispatch(NotificationEvent(
            type=NotificationType.BOT_APPROVED,
            bot_id=record["clientId"],
            bot_name=record["name"],
            user_id=record["ownerId"],
            username=caller_name or DEFAULT_ADMIN_NAME,
        ))
    return record


async def set_featured(
    engine: Engine,
    notifier: NotificationDispatcher | None,
    client_id: str,
    *,
    caller_id: str | None,
    caller_name: str | None,
    featured: bool | None = None,
) -> dict[str, Any]:
    """Set ``featured`` (or toggle it when *featured* is ``None``).

    Featuring is independent of status.  Only a transition to featured
    sends a notification.
    """
    caller = _require_caller(caller_id)
    await run_db(require_moderator, engine, caller)

    record, became_featured = await run_db(_set_featured, engine, client_id, featured)
    logger.info("Bot %s featured=%s by %s", client_id, record["featured"], caller)

    if became_featured and notifier is not None:
        notifier.dispatch(NotificationEvent(
            type=NotificationType.BOT_FEATURED,
            bot_id=record["clientId"],
            bot_name=record["name"],
            user_id=record["ownerId"],
            username=caller_name or DEFAULT_ADMIN_NAME,
        ))
    return record
