"""
botlist.api.routes.admin — Moderation & partner management endpoints
=======================================================================

Every route re-resolves the caller's roles from the ``users`` table.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from botlist.api.deps import CurrentUser, EngineDep, get_notifier
from botlist.services import bot_service, partner_service
from botlist.services.notification_service import NotificationDispatcher
from botlist.services.permission_service import require_partner_manager

router = APIRouter(prefix="/admin", tags=["admin"])


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------
class FeatureUpdate(BaseModel):
    featured: bool | None = None


class PartnerCreate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str | None = None
    description: str | None = None
    website: str | None = None
    logo_url: str | None = None
    metadata: dict[str, Any] | None = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
async def _read_reject_body(request: Request) -> tuple[str | None, bool]:
    """Accept either a JSON body or a classic form post.

    ``deleteBot`` defaults to true and only an explicit ``false`` clears it.
    """
    content_type = request.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            body = await request.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        reason = body.get("reason")
        delete_bot = body.get("deleteBot") is not False
    else:
        form = await request.form()
        reason = form.get("reason")
        delete_bot = form.get("deleteBot") != "false"
    return (reason if isinstance(reason, str) else None), delete_bot


# ---------------------------------------------------------------------------
# Bots: review queue
# ---------------------------------------------------------------------------
@router.get("/bots")
def list_all_bots(user: CurrentUser, engine: EngineDep):
    bots = bot_service.list_all_bots(engine, caller_id=user["sub"])
    return {"bots": bots, "total": len(bots)}


@router.get("/bots/pending")
def list_pending_bots(user: CurrentUser, engine: EngineDep):
    bots = bot_service.list_pending_bots(engine, caller_id=user["sub"])
    return {"bots": bots, "total": len(bots)}


@router.post("/bots/{client_id}/approve")
async def approve_bot(
    client_id: str,
    user: CurrentUser,
    engine: EngineDep,
    notifier: NotificationDispatcher = Depends(get_notifier),
):
    bot = await bot_service.approve_bot(
        engine,
        notifier,
        client_id,
        caller_id=user["sub"],
        caller_name=user.get("username"),
    )
    return {"message": "Bot approved", "bot": bot}


@router.post("/bots/{client_id}/reject")
async def reject_bot(
    client_id: str,
    request: Request,
    user: CurrentUser,
    engine: EngineDep,
    notifier: NotificationDispatcher = Depends(get_notifier),
):
    reason, delete_bot = await _read_reject_body(request)
    await bot_service.reject_bot(
        engine,
        notifier,
        client_id,
        caller_id=user["sub"],
        caller_name=user.get("username"),
        reason=reason,
        delete_bot=delete_bot,
    )
    return {"message": "Bot rejected and removed from database"}


@router.post("/bots/{client_id}/feature")
async def feature_bot(
    client_id: str,
    user: CurrentUser,
    engine: EngineDep,
    body: FeatureUpdate | None = None,
    notifier: NotificationDispatcher = Depends(get_notifier),
):
    bot = await bot_service.set_featured(
        engine,
        notifier,
        client_id,
        caller_id=user["sub"],
        caller_name=user.get("username"),
        featured=body.featured if body else None,
    )
    message = "Bot featured" if bot["featured"] else "Bot unfeatured"
    return {"message": message, "bot": bot}


# ---------------------------------------------------------------------------
# Partners
# ---------------------------------------------------------------------------
@router.get("/partners")
def list_partners(user: CurrentUser, engine: EngineDep):
    require_partner_manager(engine, user["sub"])
    return {"partners": partner_service.list_partners(engine)}


@router.post("/partners", status_code=201)
def create_partner(body: PartnerCreate, user: CurrentUser, engine: EngineDep):
    partner = partner_service.create_partner(
        engine,
        caller_id=user["sub"],
        payload=body.model_dump(by_alias=True, exclude_none=True),
    )
    return {"success": True, "partner": partner}
