"""
Pydantic schemas for profile endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ProfileResponse(BaseModel):
    name: str
    bio: str


class ProfileUpdateRequest(BaseModel):
    name: str = Field(..., max_length=120)
    bio: str = Field(default="", max_length=2000)
