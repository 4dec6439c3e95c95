from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from crumb.services.models import Recipe


class ImportRequest(BaseModel):
    url: str


class ImportResponse(BaseModel):
    success: bool = True
    recipe: Recipe
    warnings: Optional[list[str]] = None


class DurationExtractRequest(BaseModel):
    text: str


class DurationItem(BaseModel):
    seconds: int
    text: str
    display: str


class DurationExtractResponse(BaseModel):
    durations: list[DurationItem]


class DurationParseRequest(BaseModel):
    value: str


class DurationParseResponse(BaseModel):
    ok: bool
    seconds: Optional[int] = None
    reason: Optional[str] = None
    display: Optional[str] = None
