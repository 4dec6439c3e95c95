# crumb/services/normalizer.py
"""
Turns a strategy's raw draft into the canonical shape.

Multi-section recipes stay a single flat list: section headers are steps
flagged ``is_header`` at their original position. Running the normalizer on
its own output changes nothing.
"""
from __future__ import annotations

import re
from dataclasses import replace
from typing import Optional

from .durations import extract_durations_from_instruction
from .ingredients import parse_ingredient, strip_list_prefix
from .models import Ingredient, Step
from .text import clean_optional, clean_text
from .types import RecipeDraft

HEADER_PATTERN = re.compile(r"^(\*\*|__)(?P<label>[^*_].*?)(?::\1|\1:)$", re.DOTALL)
STEP_PREFIX_PATTERN = re.compile(
    r"^(?:step\s*\d+\s*[:.)-]?|\d+\s*(?:\.(?!\d)|\))|[-*•▪●](?![*_]))\s*",
    re.IGNORECASE,
)


def is_section_header(text: str) -> bool:
    """True for a line that is only an emphasized, colon-terminated label."""
    match = HEADER_PATTERN.match(text.strip())
    return bool(match and match.group("label").strip())


def _normalize_ingredient(ingredient: Ingredient) -> Optional[Ingredient]:
    raw = clean_text(ingredient.raw)
    while raw and strip_list_prefix(raw) != raw:
        raw = strip_list_prefix(raw)
    if not raw:
        return None

    quantity = clean_optional(ingredient.quantity)
    unit = clean_optional(ingredient.unit)
    name = clean_optional(ingredient.name)
    if not (quantity or unit or name):
        quantity, unit, name = parse_ingredient(raw)
    return Ingredient(raw=raw, quantity=quantity, unit=unit, name=name)


def _strip_step_prefix(text: str) -> str:
    while True:
        stripped = STEP_PREFIX_PATTERN.sub("", text, count=1).strip()
        if not stripped or stripped == text:
            return text
        text = stripped


def _normalize_step(step: Step) -> Optional[Step]:
    text = clean_text(step.text)
    if not text:
        return None

    text = _strip_step_prefix(text)
    if step.is_header or is_section_header(text):
        return Step(text=text, is_header=True)

    return Step(text=text, durations=extract_durations_from_instruction(text))


def _collapse_adjacent(items: list) -> list:
    collapsed = []
    for item in items:
        if collapsed and collapsed[-1] == item:
            continue
        collapsed.append(item)
    return collapsed


def _drop_dangling_headers(steps: list[Step]) -> list[Step]:
    trimmed = list(steps)
    while trimmed and trimmed[-1].is_header:
        trimmed.pop()
    kept: list[Step] = []
    for index, step in enumerate(trimmed):
        next_step = trimmed[index + 1] if index + 1 < len(trimmed) else None
        if step.is_header and next_step is not None and next_step.is_header:
            continue
        kept.append(step)
    return kept


def normalize_draft(draft: RecipeDraft) -> RecipeDraft:
    """Return a cleaned copy of ``draft``; the input is left untouched."""
    ingredients = [i for i in map(_normalize_ingredient, draft.ingredients) if i is not None]
    steps = [s for s in map(_normalize_step, draft.steps) if s is not None]

    return replace(
        draft,
        title=clean_optional(draft.title),
        ingredients=_collapse_adjacent(ingredients),
        steps=_drop_dangling_headers(_collapse_adjacent(steps)),
        author=clean_optional(draft.author),
        image_url=clean_optional(draft.image_url),
        source_name=clean_optional(draft.source_name),
        category=clean_optional(draft.category),
    )
