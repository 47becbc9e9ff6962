"""
Portable entry shape used by export and import.

The field names match what the web client writes to backup files, which
differ from the API's entry payload (`category` vs `category_name`, ...).
"""

from __future__ import annotations

import datetime as dt
from typing import Any

from pydantic import BaseModel, Field, field_validator

DEFAULT_TITLE = "Untitled"
DEFAULT_CATEGORY = "General"


class PortableEntry(BaseModel):
    title: str = DEFAULT_TITLE
    category: str = DEFAULT_CATEGORY
    date: dt.date | None = None
    notes: str = ""
    difficulty: int = 1
    revision: bool = False
    tags: list[str] = Field(default_factory=list)
    resources: list[str] = Field(default_factory=list)

    @field_validator("title", mode="before")
    @classmethod
    def _default_title(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_TITLE
        return value

    @field_validator("category", mode="before")
    @classmethod
    def _default_category(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_CATEGORY
        return value

    @field_validator("date", mode="before")
    @classmethod
    def _lenient_date(cls, value: Any) -> Any:
        # Old backups may hold full timestamps or junk; keep the calendar day or drop it.
        if isinstance(value, str):
            text = value.strip()[:10]
            try:
                return dt.date.fromisoformat(text)
            except ValueError:
                return None
        return value

    @field_validator("difficulty", mode="before")
    @classmethod
    def _clamp_difficulty(cls, value: Any) -> int:
        try:
            level = int(value)
        except (TypeError, ValueError):
            return 1
        return max(1, min(level, 5))

    @field_validator("tags", "resources", mode="before")
    @classmethod
    def _none_to_list(cls, value: Any) -> Any:
        return [] if value is None else value
