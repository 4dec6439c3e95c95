from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from bs4 import BeautifulSoup

from .models import Ingredient, Step, Times


@dataclass
class FetchedPage:
    url: str
    final_url: str
    status_code: int
    html: str


@dataclass
class Page:
    """A fetched document parsed once and shared read-only by every strategy."""
    url: str
    html: str
    soup: BeautifulSoup

    @classmethod
    def from_html(cls, html: str, url: str) -> "Page":
        return cls(url=url, html=html, soup=BeautifulSoup(html, "html.parser"))


@dataclass
class RecipeDraft:
    """Candidate recipe built by one strategy and rewritten by the normalizer."""
    source_url: str
    title: Optional[str] = None
    ingredients: list[Ingredient] = field(default_factory=list)
    steps: list[Step] = field(default_factory=list)
    times: Optional[Times] = None
    author: Optional[str] = None
    image_url: Optional[str] = None
    source_name: Optional[str] = None
    category: Optional[str] = None
    extracted_by: Optional[str] = None

    def add_ingredient(self, raw: str, **parts: Optional[str]) -> None:
        self.ingredients.append(Ingredient(raw=raw, **parts))

    def add_step(self, text: str, is_header: bool = False) -> None:
        self.steps.append(Step(text=text, is_header=is_header))

    def add_header(self, label: str) -> None:
        label = label.strip().rstrip(":").strip()
        if label:
            self.steps.append(Step(text=f"**{label}:**", is_header=True))


class StrategyOutcome(str, Enum):
    ACCEPTED = "accepted"
    INSUFFICIENT = "insufficient"
    FAILED = "failed"


@dataclass
class StrategyResult:
    strategy: str
    outcome: StrategyOutcome
    draft: Optional[RecipeDraft] = None
    problems: list[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.outcome is StrategyOutcome.ACCEPTED
