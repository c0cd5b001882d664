from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional


@dataclass
class PageResponse:
    """Zero-based page of results, shaped like the JSON the API returns."""
    content: List[Any] = field(default_factory=list)
    number: int = 0
    size: int = 0
    total_elements: int = 0
    total_pages: int = 0
    first: bool = True
    last: bool = True

    def to_dict(self, item_fn: Optional[Callable[[Any], Any]] = None) -> dict:
        items = [item_fn(x) for x in self.content] if item_fn else list(self.content)
        return {
            "content": items,
            "number": self.number,
            "size": self.size,
            "totalElements": self.total_elements,
            "totalPages": self.total_pages,
            "first": self.first,
            "last": self.last,
        }


def paginate(query, page: int, size: int) -> PageResponse:
    """
    Run ``query`` through Flask-SQLAlchemy's paginator.

    ``page`` is zero-based here; the paginator itself is one-based.
    """
    if page < 0:
        raise ValueError("page must be >= 0")
    if size < 1:
        raise ValueError("size must be >= 1")

    p = query.paginate(page=page + 1, per_page=size, error_out=False)
    return PageResponse(
        content=list(p.items),
        number=page,
        size=size,
        total_elements=p.total or 0,
        total_pages=p.pages,
        first=page == 0,
        last=not p.has_next,
    )
