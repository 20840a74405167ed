"""
tests/test_listing_service.py — Public Listing Query
======================================================
"""

from __future__ import annotations

import pytest
from conftest import add_bot

from botlist.database.models import BotStatus
from botlist.engine.query import ListingQuery, SortOrder, total_pages
from botlist.services.listing_service import list_approved_bots


def _ids(result) -> list[str]:
    return [b["clientId"] for b in result["bots"]]


# ---------------------------------------------------------------------------
# Parameter normalization
# ---------------------------------------------------------------------------
class TestListingQuery:
    def test_defaults(self):
        q = ListingQuery.from_params()
        assert q.sort is SortOrder.NEWEST
        assert q.page == 1
        assert q.limit == 20
        assert q.offset == 0

    def test_unknown_sort_falls_back_to_newest(self):
        assert ListingQuery.from_params(sort="random").sort is SortOrder.NEWEST

    def test_sort_is_case_insensitive(self):
        assert ListingQuery.from_params(sort="Popular").sort is SortOrder.POPULAR

    def test_limit_clamped_to_max(self):
        assert ListingQuery.from_params(limit=500, max_limit=100).limit == 100

    @pytest.mark.parametrize("page", [0, -3, None])
    def test_bad_page_becomes_one(self, page):
        assert ListingQuery.from_params(page=page).page == 1

    def test_offset(self):
        assert ListingQuery.from_params(page=3, limit=10).offset == 20

    def test_blank_filters_dropped(self):
        q = ListingQuery.from_params(query="  ", tag="")
        assert q.query is None
        assert q.tag is None

    @pytest.mark.parametrize(
        "total, limit, expected",
        [(0, 20, 0), (1, 20, 1), (20, 20, 1), (21, 20, 2), (15, 10, 2), (5, 0, 0)],
    )
    def test_total_pages(self, total, limit, expected):
        assert total_pages(total, limit) == expected


# ---------------------------------------------------------------------------
# Store query
# ---------------------------------------------------------------------------
class TestListApprovedBots:
    def test_only_approved_returned(self, db_engine):
        add_bot(db_engine, "a", status=BotStatus.APPROVED)
        add_bot(db_engine, "p", status=BotStatus.PENDING)

        result = list_approved_bots(db_engine, ListingQuery.from_params())
        assert _ids(result) == ["a"]
        assert result["pagination"] == {"total": 1, "page": 1, "limit": 20, "pages": 1}

    def test_pending_never_leaks_through_filters(self, db_engine):
        add_bot(db_engine, "p", name="Music Bot", status=BotStatus.PENDING, tags=["music"])
        result = list_approved_bots(
            db_engine, ListingQuery.from_params(query="music", tag="music")
        )
        assert result["bots"] == []
        assert result["pagination"]["pages"] == 0

    def test_tag_filter(self, db_engine):
        add_bot(db_engine, "1", tags=["music", "fun"])
        add_bot(db_engine, "2", tags=["moderation"])
        add_bot(db_engine, "3", tags=["music"])

        result = list_approved_bots(db_engine, ListingQuery.from_params(tag="music"))
        assert sorted(_ids(result)) == ["1", "3"]
        assert result["pagination"]["total"] == 2

    def test_search_matches_name_or_description_case_insensitively(self, db_engine):
        add_bot(db_engine, "1", name="Galaxy", description="space stuff")
        add_bot(db_engine, "2", name="Other", description="Explore the GALAXY")
        add_bot(db_engine, "3", name="Unrelated", description="nothing")

        result = list_approved_bots(db_engine, ListingQuery.from_params(query="galaxy"))
        assert sorted(_ids(result)) == ["1", "2"]

    def test_search_treats_wildcards_literally(self, db_engine):
        add_bot(db_engine, "1", name="100% uptime")
        add_bot(db_engine, "2", name="1000 uptime")

        result = list_approved_bots(db_engine, ListingQuery.from_params(query="100%"))
        assert _ids(result) == ["1"]

    def test_pagination_second_page(self, db_engine):
        for i in range(15):
            add_bot(db_engine, f"bot{i:02d}", age_minutes=i)

        result = list_approved_bots(db_engine, ListingQuery.from_params(page=2, limit=10))
        assert len(result["bots"]) == 5
        assert result["pagination"] == {"total": 15, "page": 2, "limit": 10, "pages": 2}
        # newest first: bot00 is the newest, so page 2 holds the five oldest
        assert _ids(result) == ["bot10", "bot11", "bot12", "bot13", "bot14"]

    def test_page_past_end_is_empty(self, db_engine):
        add_bot(db_engine, "1")
        result = list_approved_bots(db_engine, ListingQuery.from_params(page=5))
        assert result["bots"] == []
        assert result["pagination"]["total"] == 1

    def test_sort_popular(self, db_engine):
        add_bot(db_engine, "low", votes=1)
        add_bot(db_engine, "high", votes=50)
        add_bot(db_engine, "mid", votes=10)
        result = list_approved_bots(db_engine, ListingQuery.from_params(sort="popular"))
        assert _ids(result) == ["high", "mid", "low"]

    def test_sort_servers(self, db_engine):
        add_bot(db_engine, "small", servers=3)
        add_bot(db_engine, "big", servers=3000)
        result = list_approved_bots(db_engine, ListingQuery.from_params(sort="servers"))
        assert _ids(result) == ["big", "small"]

    def test_sort_newest(self, db_engine):
        add_bot(db_engine, "older", age_minutes=60)
        add_bot(db_engine, "newer", age_minutes=1)
        result = list_approved_bots(db_engine, ListingQuery.from_params(sort="newest"))
        assert _ids(result) == ["newer", "older"]
