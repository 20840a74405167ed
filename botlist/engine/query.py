"""
botlist.engine.query — Listing Query Normalization
====================================================

Validates and clamps the public listing parameters before they reach
:mod:`botlist.services.listing_service`.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass


class SortOrder(enum.StrEnum):
    NEWEST = "newest"
    POPULAR = "popular"
    SERVERS = "servers"


@dataclass(frozen=True, slots=True)
class ListingQuery:
    query: str | None = None
    tag: str | None = None
    sort: SortOrder = SortOrder.NEWEST
    page: int = 1
    limit: int = 20

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @classmethod
    def from_params(
        cls,
        *,
        query: str | None = None,
        tag: str | None = None,
        sort: str | None = None,
        page: int | None = None,
        limit: int | None = None,
        default_limit: int = 20,
        max_limit: int = 100,
    ) -> ListingQuery:
        """Build a query from raw request parameters.

        Unknown sort values fall back to ``newest``; ``page`` < 1 becomes 1;
        ``limit`` falls back to *default_limit* when missing or < 1 and is
        capped at *max_limit*.
        """
        try:
            sort_order = SortOrder((sort or SortOrder.NEWEST).lower())
        except ValueError:
            sort_order = SortOrder.NEWEST

        page = page if page and page > 0 else 1
        limit = limit if limit and limit > 0 else default_limit
        limit = min(limit, max_limit)

        return cls(
            query=(query or "").strip() or None,
            tag=(tag or "").strip() or None,
            sort=sort_order,
            page=page,
            limit=limit,
        )


def total_pages(total: int, limit: int) -> int:
    """``ceil(total / limit)``; zero results means zero pages."""
    if limit <= 0:
        return 0
    return math.ceil(total / limit)
