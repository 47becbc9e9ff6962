"""
Filter and pagination parsing plus the shared WHERE-clause builder for the
entry listing.

Query-string values are parsed permissively: a value that cannot be
interpreted (non-numeric difficulty, page "abc", ...) imposes no constraint
instead of failing the request.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

DEFAULT_PAGE_LIMIT = 20
MAX_PAGE_LIMIT = 100
MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 5
UNCATEGORIZED_LABEL = "General"

_TRUTHY = {"true", "1", "yes", "on"}


@dataclass(frozen=True)
class EntryFilters:
    search: str = ""
    category: str = ""
    difficulty: int | None = None
    revision_only: bool = False


@dataclass(frozen=True)
class PageRequest:
    page: int = 1
    limit: int = DEFAULT_PAGE_LIMIT

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def _parse_int(raw: Any) -> int | None:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    text = str(raw).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        return None


def parse_filters(
    *,
    search: str | None = None,
    category: str | None = None,
    difficulty: Any = None,
    revision: Any = None,
) -> EntryFilters:
    level = _parse_int(difficulty)
    if level is not None and not (MIN_DIFFICULTY <= level <= MAX_DIFFICULTY):
        level = None

    if isinstance(revision, bool):
        revision_only = revision
    else:
        revision_only = str(revision or "").strip().lower() in _TRUTHY

    return EntryFilters(
        search=(search or "").strip(),
        category=(category or "").strip(),
        difficulty=level,
        revision_only=revision_only,
    )


def parse_page(page: Any = None, limit: Any = None) -> PageRequest:
    number = _parse_int(page)
    if number is None or number < 1:
        number = 1

    size = _parse_int(limit)
    if size is None or size < 1:
        size = DEFAULT_PAGE_LIMIT
    size = min(size, MAX_PAGE_LIMIT)

    return PageRequest(page=number, limit=size)


def total_pages(total: int, limit: int) -> int:
    if total <= 0 or limit <= 0:
        return 0
    return math.ceil(total / limit)


def escape_like(term: str) -> str:
    """
    Escape LIKE metacharacters so user input is matched literally.
    """
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_where(user_id: int, filters: EntryFilters) -> tuple[str, list[Any]]:
    """
    Build the WHERE fragment (without the keyword) and its positional args.

    Expects the entry table aliased as `e` and categories LEFT JOINed as `c`.
    The owner is always `$1`; the remaining placeholders follow in order.
    """
    clauses = ["e.user_id = $1"]
    args: list[Any] = [user_id]

    if filters.search:
        args.append(f"%{escape_like(filters.search)}%")
        n = len(args)
        clauses.append(f"(e.title ILIKE ${n} ESCAPE '\\' OR e.notes_markdown ILIKE ${n} ESCAPE '\\')")

    if filters.category:
        args.append(filters.category)
        if filters.category == UNCATEGORIZED_LABEL:
            # Uncategorized entries are listed under the default label.
            clauses.append(f"(c.name = ${len(args)} OR e.category_id IS NULL)")
        else:
            clauses.append(f"c.name = ${len(args)}")

    if filters.difficulty is not None:
        args.append(filters.difficulty)
        clauses.append(f"e.difficulty_level = ${len(args)}")

    if filters.revision_only:
        clauses.append("e.needs_revision = true")

    return " AND ".join(clauses), args
