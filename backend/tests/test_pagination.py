"""
Tests for page arithmetic shared by project and task listings.
"""

import math

import pytest

from app.config import get_settings
from app.schemas import Pagination
from app.services.pagination import build_link, page_metadata


class TestPageMetadata:
    """current_page / total_pages / prev / next."""

    def test_first_page(self):
        meta = page_metadata(25, Pagination(skip=0, limit=10), "/api/projects")

        assert meta["total_documents"] == 25
        assert meta["total_pages"] == 3
        assert meta["current_page"] == 1
        assert meta["prev"] is None
        assert meta["next"] == "/api/projects?skip=10&limit=10"

    def test_middle_page_links_both_ways(self):
        meta = page_metadata(25, Pagination(skip=10, limit=10), "/api/projects")

        assert meta["current_page"] == 2
        assert meta["prev"] == "/api/projects?skip=0&limit=10"
        assert meta["next"] == "/api/projects?skip=20&limit=10"

    @pytest.mark.parametrize("total,limit", [(1, 1), (10, 3), (25, 10), (30, 10), (7, 100)])
    def test_last_page_has_no_next(self, total, limit):
        total_pages = math.ceil(total / limit)
        skip = (total_pages - 1) * limit

        meta = page_metadata(total, Pagination(skip=skip, limit=limit), "/x")

        assert meta["total_pages"] == total_pages
        assert meta["current_page"] == total_pages
        assert meta["next"] is None

    def test_empty_collection(self):
        meta = page_metadata(0, Pagination(skip=0, limit=10), "/x")

        assert meta["total_pages"] == 0
        assert meta["current_page"] == 1
        assert meta["prev"] is None
        assert meta["next"] is None

    def test_unaligned_skip_rounds_current_page_up(self):
        meta = page_metadata(10, Pagination(skip=5, limit=4), "/x")

        assert meta["current_page"] == 3
        # Items 9 and 10 are still ahead of this window
        assert meta["next"] == "/x?skip=9&limit=4"
        assert meta["prev"] == "/x?skip=1&limit=4"

    def test_prev_never_goes_negative(self):
        meta = page_metadata(50, Pagination(skip=3, limit=10), "/x")
        assert meta["prev"] == "/x?skip=0&limit=10"


class TestBuildLink:

    def test_keeps_filters_and_drops_unset(self):
        link = build_link("/api/tasks", 20, 10, {"status": "in progress", "assigned_user": None})
        assert link == "/api/tasks?status=in+progress&skip=20&limit=10"


def test_pagination_rejects_negative_skip_and_zero_limit():
    with pytest.raises(ValueError):
        Pagination(skip=-1, limit=10)
    with pytest.raises(ValueError):
        Pagination(skip=0, limit=0)


def test_default_limit_follows_settings(monkeypatch):
    monkeypatch.setattr(get_settings(), "default_page_limit", 25)
    assert Pagination().limit == 25
    assert Pagination(limit=3).limit == 3
