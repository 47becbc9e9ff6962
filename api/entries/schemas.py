"""
Pydantic schemas for entry endpoints.
"""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field, field_validator


def clean_tags(values: list[str]) -> list[str]:
    """
    Strip, drop blanks and de-duplicate while keeping first occurrence order.
    """
    seen: set[str] = set()
    cleaned: list[str] = []
    for value in values or []:
        name = str(value or "").strip()
        if not name or name in seen:
            continue
        seen.add(name)
        cleaned.append(name)
    return cleaned


def clean_resources(values: list[str]) -> list[str]:
    return [url for url in (str(v or "").strip() for v in values or []) if url]


class EntryPayload(BaseModel):
    title: str = Field(..., min_length=1, max_length=300)
    category_name: str | None = Field(default=None, max_length=120)
    date: dt.date | None = None
    notes: str = ""
    difficulty: int = Field(default=1, ge=1, le=5)
    needs_revision: bool = False
    tags: list[str] = Field(default_factory=list)
    resources: list[str] = Field(default_factory=list)

    @field_validator("date", mode="before")
    @classmethod
    def _blank_date(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("difficulty", mode="before")
    @classmethod
    def _blank_difficulty(cls, value: object) -> object:
        if value is None or (isinstance(value, str) and not value.strip()):
            return 1
        return value

    @field_validator("title")
    @classmethod
    def _strip_title(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("title must not be blank")
        return value

    @field_validator("category_name")
    @classmethod
    def _strip_category(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    @field_validator("tags")
    @classmethod
    def _clean_tags(cls, value: list[str]) -> list[str]:
        return clean_tags(value)

    @field_validator("resources")
    @classmethod
    def _clean_resources(cls, value: list[str]) -> list[str]:
        return clean_resources(value)
