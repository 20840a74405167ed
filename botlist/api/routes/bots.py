"""
botlist.api.routes.bots — Public listing + owner endpoints
============================================================
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from botlist.api.deps import (
    CurrentUser,
    EngineDep,
    get_config,
    get_enrichment_client,
    get_notifier,
)
from botlist.config import DirectoryConfig
from botlist.engine.query import ListingQuery
from botlist.services import bot_service, listing_service
from botlist.services.enrichment_service import EnrichmentClient
from botlist.services.notification_service import NotificationDispatcher

router = APIRouter(prefix="/bots", tags=["bots"])


# ---------------------------------------------------------------------------
# Pydantic schemas (camelCase on the wire)
# ---------------------------------------------------------------------------
class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


class BotSubmit(_CamelModel):
    # Presence of the required fields is checked by the service (400, not 422)
    client_id: str | None = None
    name: str | None = None
    description: str | None = None
    long_description: str | None = None
    prefix: str | None = None
    tags: list[str] | None = None
    website: str | None = None
    support_server: str | None = None
    github_repo: str | None = None
    invite_url: str | None = None

    @field_validator("client_id", mode="before")
    @classmethod
    def _snowflake_as_str(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v


class BotUpdate(_CamelModel):
    prefix: str | None = None
    description: str | None = None
    long_description: str | None = None
    tags: list[str] | None = None
    website: str | None = None
    support_server: str | None = None
    github_repo: str | None = None


# ---------------------------------------------------------------------------
# GET /bots: approved listings
# ---------------------------------------------------------------------------
@router.get("")
def list_bots(
    engine: EngineDep,
    query: str | None = Query(None),
    tag: str | None = Query(None),
    sort: str = Query("newest"),
    page: int | None = Query(None),
    limit: int | None = Query(None),
    cfg: DirectoryConfig = Depends(get_config),
):
    listing_query = ListingQuery.from_params(
        query=query,
        tag=tag,
        sort=sort,
        page=page,
        limit=limit,
        default_limit=cfg.default_page_limit,
        max_limit=cfg.max_page_limit,
    )
    return listing_service.list_approved_bots(engine, listing_query)


# ---------------------------------------------------------------------------
# GET /bots/{client_id}
# ---------------------------------------------------------------------------
@router.get("/{client_id}")
def get_bot(client_id: str, engine: EngineDep):
    return bot_service.get_bot(engine, client_id)


# ---------------------------------------------------------------------------
# POST /bots: submit for review
# ---------------------------------------------------------------------------
@router.post("", status_code=201)
async def submit_bot(
    body: BotSubmit,
    user: CurrentUser,
    engine: EngineDep,
    enrichment: EnrichmentClient = Depends(get_enrichment_client),
    notifier: NotificationDispatcher = Depends(get_notifier),
):
    bot = await bot_service.submit_bot(
        engine,
        enrichment,
        notifier,
        owner_id=user["sub"],
        owner_username=user.get("username"),
        payload=body.model_dump(by_alias=True, exclude_none=True),
    )
    return {"success": True, "bot": bot}


# ---------------------------------------------------------------------------
# PUT /bots/{client_id}: owner edit
# ---------------------------------------------------------------------------
@router.put("/{client_id}")
def update_bot(
    client_id: str,
    body: BotUpdate,
    user: CurrentUser,
    engine: EngineDep,
):
    bot = bot_service.update_bot(
        engine,
        client_id,
        caller_id=user["sub"],
        patch=body.model_dump(by_alias=True, exclude_unset=True),
    )
    return {"message": "Bot updated successfully", "bot": bot}


# ---------------------------------------------------------------------------
# DELETE /bots/{client_id}: owner or token-level admin
# ---------------------------------------------------------------------------
@router.delete("/{client_id}")
def delete_bot(client_id: str, user: CurrentUser, engine: EngineDep):
    bot_service.delete_bot(
        engine,
        client_id,
        caller_id=user["sub"],
        caller_is_admin=bool(user.get("is_admin")),
    )
    return {"message": "Bot deleted successfully"}
