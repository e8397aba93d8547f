"""
Page arithmetic shared by project and task listings.

    current_page = ceil(skip / limit + 1)
    total_pages  = ceil(total_documents / limit)

`prev` and `next` are links to the neighbouring windows, or None when the
current window already touches that end of the result set.
"""

import math
from typing import Any, Mapping
from urllib.parse import urlencode

from app.schemas.pagination import Pagination


def build_link(path: str, skip: int, limit: int, params: Mapping[str, Any] | None = None) -> str:
    query = {key: str(value) for key, value in (params or {}).items() if value is not None}
    query.update(skip=str(skip), limit=str(limit))
    return f"{path}?{urlencode(query)}"


def page_metadata(
    total_documents: int,
    pagination: Pagination,
    path: str,
    params: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Compute the navigation fields of a Page for the given window."""
    skip, limit = pagination.skip, pagination.limit
    if limit <= 0:
        raise ValueError("limit must be positive")

    next_link = None
    if skip + limit < total_documents:
        next_link = build_link(path, skip + limit, limit, params)

    prev_link = None
    if skip > 0:
        prev_link = build_link(path, max(skip - limit, 0), limit, params)

    return {
        "total_documents": total_documents,
        "total_pages": math.ceil(total_documents / limit),
        "current_page": math.ceil(skip / limit + 1),
        "prev": prev_link,
        "next": next_link,
    }
