"""
botlist.api.auth — Caller identity
=====================================

Tokens are issued by the sign-in flow in front of this API; here they are
only verified.  ``/auth/me`` reports the roles the store currently holds
for the caller, which is what every moderation check uses.
"""

from __future__ import annotations

from fastapi import APIRouter

from botlist.api.deps import CurrentUser, EngineDep
from botlist.engine.permissions import can_manage_partners, can_moderate
from botlist.services.permission_service import resolve_roles

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me")
def me(user: CurrentUser, engine: EngineDep):
    """Return the current caller's identity and store-resolved roles."""
    roles = resolve_roles(engine, user["sub"])
    return {
        "id": user["sub"],
        "username": user.get("username", "Unknown"),
        "isAdmin": bool(user.get("is_admin")),
        "roles": sorted(r.value for r in roles),
        "canModerate": can_moderate(roles),
        "canManagePartners": can_manage_partners(roles),
    }
