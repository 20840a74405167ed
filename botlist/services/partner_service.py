"""
botlist.services.partner_service — Partner Directory
======================================================

Partners have no moderation state: admins and founders create them,
anyone can list them.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import Engine, select
from sqlalchemy.orm import Session

from botlist.constants import PARTNER_FIELD_MAX_LENGTHS, oversize_fields
from botlist.database.engine import get_session
from botlist.database.models import Partner
from botlist.errors import ValidationError
from botlist.services.permission_service import require_partner_manager

logger = logging.getLogger(__name__)


def partner_to_dict(p: Partner) -> dict[str, Any]:
    return {
        "id": p.id,
        "name": p.name,
        "description": p.description,
        "website": p.website,
        "logoUrl": p.logo_url,
        "metadata": p.metadata_ or {},
        "createdBy": p.created_by,
        "createdAt": p.created_at.isoformat() if p.created_at else None,
    }


def create_partner(
    engine: Engine,
    *,
    caller_id: str | None,
    payload: dict[str, Any],
) -> dict[str, Any]:
    """Insert a partner.  ADMIN or BOT_FOUNDER only."""
    require_partner_manager(engine, caller_id)

    name = payload.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Partner name is required")

    too_long = oversize_fields({**payload, "name": name.strip()}, PARTNER_FIELD_MAX_LENGTHS)
    if too_long:
        raise ValidationError("Fields exceed maximum length", {"fields": too_long})

    metadata = payload.get("metadata")
    partner = Partner(
        name=name.strip(),
        description=payload.get("description") or None,
        website=payload.get("website") or None,
        logo_url=payload.get("logoUrl") or None,
        metadata_=metadata if isinstance(metadata, dict) else None,
        created_by=str(caller_id),
        created_at=datetime.now(UTC),
    )
    with get_session(engine) as session:
        session.add(partner)
        session.flush()
        record = partner_to_dict(partner)

    logger.info("Partner %s (%s) created by %s", record["id"], record["name"], caller_id)
    return record


def list_partners(engine: Engine) -> list[dict[str, Any]]:
    """All partners, newest first."""
    with Session(engine) as session:
        rows = session.scalars(
            select(Partner).order_by(Partner.created_at.desc(), Partner.id.desc())
        ).all()
        return [partner_to_dict(p) for p in rows]
