"""
botlist.api.routes.partners — Read-only public partner directory
==================================================================
"""

from __future__ import annotations

from fastapi import APIRouter

from botlist.api.deps import EngineDep
from botlist.services import partner_service

router = APIRouter(tags=["public"])


@router.get("/partners")
def list_partners(engine: EngineDep):
    return {"partners": partner_service.list_partners(engine)}
