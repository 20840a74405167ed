"""
botlist.services.permission_service — Store-Resolved Authorization Gate
========================================================================

Roles are re-read from the ``users`` table on every call.  Nothing in the
caller's token (or any session cache) is trusted for role decisions.
A caller without a ``users`` row simply has no roles.
"""

from __future__ import annotations

import logging

from sqlalchemy import Engine
from sqlalchemy.orm import Session

from botlist.database.models import User, UserRole
from botlist.engine.permissions import can_manage_partners, can_moderate, parse_roles
from botlist.errors import ForbiddenError, UnauthenticatedError

logger = logging.getLogger(__name__)


def resolve_roles(engine: Engine, discord_id: str | None) -> frozenset[UserRole]:
    """Return the role set stored for *discord_id* (empty if unknown)."""
    if not discord_id:
        return frozenset()
    with Session(engine) as session:
        user = session.get(User, str(discord_id))
        if user is None:
            return frozenset()
        return parse_roles(user.roles)


def user_can_moderate(engine: Engine, discord_id: str | None) -> bool:
    return can_moderate(resolve_roles(engine, discord_id))


def user_can_manage_partners(engine: Engine, discord_id: str | None) -> bool:
    return can_manage_partners(resolve_roles(engine, discord_id))


def _require_caller(discord_id: str | None) -> str:
    if not discord_id:
        raise UnauthenticatedError("Unauthorized")
    return str(discord_id)


def require_moderator(engine: Engine, discord_id: str | None) -> frozenset[UserRole]:
    """Raise :class:`ForbiddenError` unless the caller may review bots."""
    caller = _require_caller(discord_id)
    roles = resolve_roles(engine, caller)
    if not can_moderate(roles):
        logger.info("Moderation denied for %s (roles=%s)", caller, sorted(roles))
        raise ForbiddenError("Insufficient permissions")
    return roles


def require_partner_manager(engine: Engine, discord_id: str | None) -> frozenset[UserRole]:
    """Raise :class:`ForbiddenError` unless the caller may manage partners."""
    caller = _require_caller(discord_id)
    roles = resolve_roles(engine, caller)
    if not can_manage_partners(roles):
        logger.info("Partner management denied for %s (roles=%s)", caller, sorted(roles))
        raise ForbiddenError("Insufficient permissions")
    return roles
