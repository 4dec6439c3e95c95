# crumb/services/models.py
"""
Canonical recipe records handed to callers.
Frozen once built: persistence assigns id/timestamps on its own copy.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CanonicalModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Duration(CanonicalModel):
    seconds: int = Field(ge=1)
    text: str
    start: int = 0
    end: int = 0


class Ingredient(CanonicalModel):
    raw: str
    quantity: Optional[str] = None
    unit: Optional[str] = None
    name: Optional[str] = None


class Step(CanonicalModel):
    text: str
    is_header: bool = False
    durations: tuple[Duration, ...] = ()


class Times(CanonicalModel):
    prep_seconds: Optional[int] = None
    cook_seconds: Optional[int] = None
    total_seconds: Optional[int] = None

    @property
    def is_empty(self) -> bool:
        return not (self.prep_seconds or self.cook_seconds or self.total_seconds)


class Recipe(CanonicalModel):
    id: Optional[str] = None
    title: str = Field(min_length=1)
    ingredients: tuple[Ingredient, ...]
    steps: tuple[Step, ...]
    times: Optional[Times] = None
    author: Optional[str] = None
    image_url: Optional[str] = None
    source_url: str
    source_name: Optional[str] = None
    category: Optional[str] = None
    is_favorite: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    extracted_by: Optional[str] = None

    @property
    def instruction_steps(self) -> list[Step]:
        return [step for step in self.steps if not step.is_header]

    @property
    def header_steps(self) -> list[Step]:
        return [step for step in self.steps if step.is_header]
