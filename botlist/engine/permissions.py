"""
botlist.engine.permissions — Role-Membership Predicates
=========================================================

Pure functions over a role set.  Each predicate enumerates exactly the
roles it accepts; there is no hierarchy and no role implies another.

Role sets are resolved from the ``users`` table per request by
:mod:`botlist.services.permission_service`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from botlist.database.models import UserRole

logger = logging.getLogger(__name__)

MODERATOR_ROLES: frozenset[UserRole] = frozenset({
    UserRole.ADMIN,
    UserRole.BOT_REVIEWER,
    UserRole.BOT_FOUNDER,
})

PARTNER_MANAGER_ROLES: frozenset[UserRole] = frozenset({
    UserRole.ADMIN,
    UserRole.BOT_FOUNDER,
})


def parse_roles(raw: Iterable[object] | None) -> frozenset[UserRole]:
    """Convert stored role strings to :class:`UserRole`, skipping unknowns."""
    if not raw or isinstance(raw, str):
        return frozenset()
    roles: set[UserRole] = set()
    for value in raw:
        try:
            roles.add(UserRole(str(value).lower()))
        except ValueError:
            logger.debug("Ignoring unknown role %r", value)
    return frozenset(roles)


def can_moderate(roles: Iterable[UserRole]) -> bool:
    """True iff *roles* includes ADMIN, BOT_REVIEWER or BOT_FOUNDER."""
    return not MODERATOR_ROLES.isdisjoint(roles)


def can_manage_partners(roles: Iterable[UserRole]) -> bool:
    """True iff *roles* includes ADMIN or BOT_FOUNDER."""
    return not PARTNER_MANAGER_ROLES.isdisjoint(roles)
