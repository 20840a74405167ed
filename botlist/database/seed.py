"""
botlist.database.seed — Bootstrap Admin Seeder
================================================

User rows are normally created at first sign-in by the auth provider, and
role changes happen through external admin tooling.  A fresh deployment
still needs someone who can moderate, so ``bootstrap_admin_ids`` from
``config.yaml`` are granted :attr:`UserRole.ADMIN` on startup.

Idempotent — existing roles are kept and ADMIN is only appended when
missing.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy import Engine
from sqlalchemy.orm import Session

from botlist.database.models import User, UserRole

logger = logging.getLogger(__name__)


def seed_bootstrap_admins(engine: Engine, discord_ids: Iterable[str]) -> int:
    """Ensure every id in *discord_ids* holds the ADMIN role.

    Returns the number of users created or promoted.
    """
    session = Session(engine)
    changed = 0
    try:
        for discord_id in discord_ids:
            user = session.get(User, str(discord_id))
            if user is None:
                session.add(User(discord_id=str(discord_id), roles=[UserRole.ADMIN.value]))
                changed += 1
                continue
            roles = list(user.roles or [])
            if UserRole.ADMIN.value not in roles:
                # Reassign so the JSON column is flagged dirty
                user.roles = roles + [UserRole.ADMIN.value]
                changed += 1
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()

    if changed:
        logger.info("Seeded ADMIN role for %d bootstrap user(s).", changed)
    return changed
