"""
botlist.services.listing_service — Public Paginated Listing
=============================================================

Only ``approved`` listings are ever returned, whatever else is filtered.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import Engine, func, or_, select
from sqlalchemy.orm import Session

from botlist.database.models import Bot, BotStatus, BotTag
from botlist.engine.query import ListingQuery, SortOrder, total_pages
from botlist.services.bot_service import bot_to_dict

_SORT_COLUMNS = {
    SortOrder.POPULAR: Bot.votes,
    SortOrder.SERVERS: Bot.servers,
    SortOrder.NEWEST: Bot.created_at,
}


def _conditions(q: ListingQuery) -> list:
    conditions = [Bot.status == BotStatus.APPROVED]
    if q.query:
        conditions.append(or_(
            Bot.name.icontains(q.query, autoescape=True),
            Bot.description.icontains(q.query, autoescape=True),
        ))
    if q.tag:
        conditions.append(
            Bot.client_id.in_(select(BotTag.bot_id).where(BotTag.tag == q.tag))
        )
    return conditions


def list_approved_bots(engine: Engine, q: ListingQuery) -> dict[str, Any]:
    """Return one page of approved bots plus pagination metadata.

    The total comes from a separate count over the same filter.
    """
    conditions = _conditions(q)
    order_col = _SORT_COLUMNS.get(q.sort, Bot.created_at)

    with Session(engine) as session:
        total = session.scalar(
            select(func.count()).select_from(Bot).where(*conditions)
        ) or 0
        rows = session.scalars(
            select(Bot)
            .where(*conditions)
            .order_by(order_col.desc(), Bot.client_id)
            .offset(q.offset)
            .limit(q.limit)
        ).all()
        bots = [bot_to_dict(b) for b in rows]

    return {
        "bots": bots,
        "pagination": {
            "total": total,
            "page": q.page,
            "limit": q.limit,
            "pages": total_pages(total, q.limit),
        },
    }
