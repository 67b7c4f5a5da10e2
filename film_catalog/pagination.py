from typing import Any, Callable, List, Sequence, Tuple

from flask import current_app

from .extensions import db


class Page:
    """One page of results plus the totals needed to render a paging envelope."""

    def __init__(self, items: List[Any], page: int, per_page: int, total: int):
        self.items = items
        self.page = page
        self.per_page = per_page
        self.total = total

    @property
    def total_pages(self) -> int:
        return max(1, (self.total + self.per_page - 1) // self.per_page)

    def to_dict(self, serialize: Callable[[Any], Any] = None):
        serialize = serialize or (lambda item: item.to_dict())
        return {
            "items": [serialize(i) for i in self.items],
            "page": self.page,
            "per_page": self.per_page,
            "total": self.total,
            "total_pages": self.total_pages,
        }

    def __repr__(self):
        return f"<Page {self.page}/{self.total_pages} total={self.total}>"


def page_args(args) -> Tuple[int, int]:
    """Read ?page= and ?per_page= the lenient way: bad values fall back to defaults."""
    default_size = current_app.config.get("DEFAULT_PAGE_SIZE", 10)
    max_size = current_app.config.get("MAX_PAGE_SIZE", 50)
    try:
        page = int(args.get("page", 1))
    except Exception:
        page = 1
    try:
        per_page = int(args.get("per_page", default_size))
    except Exception:
        per_page = default_size
    return max(1, page), max(1, min(max_size, per_page))


def paginate_select(stmt, page: int, per_page: int) -> Page:
    result = db.paginate(stmt, page=page, per_page=per_page, error_out=False)
    return Page(list(result.items), page, per_page, result.total or 0)


def paginate_list(items: Sequence[Any], page: int, per_page: int) -> Page:
    start_idx = (page - 1) * per_page
    end_idx = start_idx + per_page
    return Page(list(items[start_idx:end_idx]), page, per_page, len(items))
